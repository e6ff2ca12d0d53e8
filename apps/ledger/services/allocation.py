"""
Payment allocation service.

Spreads one lump-sum payment from a customer (or to a supplier) over that
party's outstanding orders, oldest debt first, and records a receipt.

Example:
    Recording a customer payment::

        from apps.ledger.services import allocate_payment

        result = allocate_payment(
            party_type='customer',
            party_name='Al Noor Transport',
            amount=Decimal('1200.00'),
            notes='Cash at counter',
            recorded_by=request.user,
        )
        if result.is_partial:
            print(f"{result.remaining} could not be applied")
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional
from uuid import UUID

from django.db import DatabaseError, transaction
from django.utils import timezone

from apps.accounts.models import User
from apps.ledger.conf import ledger_setting
from apps.ledger.models import (
    ORDER_MODELS,
    Payment,
    PaymentAllocation,
    PaymentStatus,
)
from apps.ledger.money import ZERO, clamp_paid, fits_storage, quantize_money, to_decimal

from .exceptions import (
    InvalidAmountError,
    InvalidPartyError,
    NoOutstandingOrdersError,
    PersistenceFailureError,
)


logger = logging.getLogger('payments')


@dataclass(frozen=True)
class AllocationStep:
    """Money applied to a single order."""

    order_id: UUID
    allocated: Decimal
    previous_paid: Decimal
    new_paid: Decimal
    status: str


@dataclass(frozen=True)
class AllocationPlan:
    steps: list
    remaining: Decimal


@dataclass(frozen=True)
class AllocationResult:
    """Outcome of ``allocate_payment``."""

    payment: Payment
    allocated_total: Decimal
    remaining: Decimal
    allocations: list

    @property
    def is_partial(self):
        """True when the payment exceeded the party's total debt."""
        return self.remaining > ZERO

    @property
    def message(self):
        if self.is_partial:
            return (
                f"Payment applied to {len(self.allocations)} order(s); "
                f"{quantize_money(self.remaining)} exceeded the outstanding "
                f"balance and was not allocated"
            )
        return f"Payment applied to {len(self.allocations)} order(s)"


def get_order_model(party_type):
    """Return CustomerSale or SupplierPurchase for a party type."""
    try:
        return ORDER_MODELS[party_type]
    except KeyError:
        raise InvalidPartyError(
            f"Invalid party type: {party_type!r}. Use 'customer' or 'supplier'"
        )


def plan_allocation(orders, amount) -> AllocationPlan:
    """
    Distribute ``amount`` over ``orders`` greedily, in the order given.

    Pure function: reads ``id``, ``total_amount`` and ``paid_amount`` from
    each order and never writes. Callers pass orders sorted oldest first.

    Algorithm:
        1. ``current_paid = min(paid_amount, total_amount)`` tolerates rows
           stored with more paid than owed
        2. ``balance = total_amount - current_paid``; orders with no balance
           are skipped even if their status says otherwise
        3. ``to_apply = min(remaining, balance)``
        4. new status is ``paid`` when ``new_paid >= total_amount``, else
           ``partial``
        5. stop once nothing remains

    Args:
        orders: Iterable of order-like objects, oldest first
        amount: Amount to distribute

    Returns:
        AllocationPlan with one step per order touched and the unallocated
        remainder (zero unless amount exceeded total debt).

    Example:
        >>> plan = plan_allocation([order_a, order_b], Decimal('1200'))
        >>> [s.allocated for s in plan.steps]
        [Decimal('1000'), Decimal('200')]
        >>> plan.remaining
        Decimal('0')
    """
    remaining = to_decimal(amount)
    steps = []

    for order in orders:
        if remaining <= ZERO:
            break

        total = to_decimal(order.total_amount)
        current_paid = clamp_paid(order.paid_amount, total)
        balance = total - current_paid
        if balance <= ZERO:
            continue

        to_apply = min(remaining, balance)
        new_paid = current_paid + to_apply
        status = PaymentStatus.PAID if new_paid >= total else PaymentStatus.PARTIAL

        steps.append(AllocationStep(
            order_id=order.id,
            allocated=to_apply,
            previous_paid=current_paid,
            new_paid=new_paid,
            status=status,
        ))
        remaining -= to_apply

    return AllocationPlan(steps=steps, remaining=remaining)


def allocate_payment(
    *,
    party_type: str,
    party_name: str,
    amount,
    notes: str = '',
    recorded_by: Optional[User] = None
) -> AllocationResult:
    """
    Apply a lump-sum payment to a party's outstanding orders.

    This operation:
    1. Validates the amount (> 0) and party before touching anything
    2. Loads the party's unpaid/partial orders sorted by date ascending
    3. Plans the allocation with ``plan_allocation``
    4. Writes each order's new paid amount and status, one order at a time
    5. Creates exactly one Payment receipt listing every order touched

    Each order write is its own atomic point-write. There is no lock across
    the read and the writes, so two concurrent payments for the same party
    can both see the same starting balance. Setting
    ``LEDGER['SERIALIZE_PARTY_PAYMENTS']`` runs the whole allocation in one
    transaction with the party's outstanding orders row-locked instead.

    Args:
        party_type: 'customer' or 'supplier'
        party_name: Exact party name (surrounding whitespace is trimmed)
        amount: Payment amount (Decimal, str or number)
        notes: Optional note stored on the receipt
        recorded_by: User entering the payment

    Returns:
        AllocationResult. ``is_partial`` is True when the amount exceeded
        the total outstanding debt; the excess is reported in ``remaining``
        and is not stored as credit.

    Raises:
        InvalidAmountError: If amount is not a positive number or has more
            than 4 decimal places
        InvalidPartyError: If party_type is unknown or party_name is empty
        NoOutstandingOrdersError: If the party has nothing to pay off
        PersistenceFailureError: If an order or receipt write fails
    """
    try:
        amount = to_decimal(amount)
    except ValueError as exc:
        raise InvalidAmountError(str(exc)) from exc
    if not amount.is_finite() or amount <= ZERO:
        raise InvalidAmountError("Payment amount must be greater than zero")
    if not fits_storage(amount):
        raise InvalidAmountError("Payment amount cannot have more than 4 decimal places")

    model = get_order_model(party_type)
    name = (party_name or '').strip()
    if not name:
        raise InvalidPartyError("Party name is required")

    if not ledger_setting('SERIALIZE_PARTY_PAYMENTS'):
        orders = list(model.outstanding_for(name))
        return _apply(model, party_type, name, amount, notes, recorded_by, orders)

    try:
        with transaction.atomic():
            orders = list(model.outstanding_for(name).select_for_update())
            return _apply(model, party_type, name, amount, notes, recorded_by, orders)
    except PersistenceFailureError as exc:
        raise PersistenceFailureError(
            f"{exc} (allocation rolled back)",
            completed=[],
            rolled_back=True,
        ) from exc


def _apply(model, party_type, name, amount, notes, recorded_by, orders):
    if not orders:
        raise NoOutstandingOrdersError(
            f"No outstanding orders found for {party_type} '{name}'"
        )

    logger.info(
        "Allocating payment",
        extra={
            "party_type": party_type,
            "party_name": name,
            "amount": str(amount),
            "open_orders": len(orders),
        },
    )

    plan = plan_allocation(orders, amount)

    completed = []
    for step in plan.steps:
        _write_order(model, step, completed)
        completed.append(step)
        logger.debug(
            "Applied payment to order",
            extra={
                "order_id": str(step.order_id),
                "allocated": str(step.allocated),
                "new_paid": str(step.new_paid),
                "status": step.status,
            },
        )

    allocated_total = amount - plan.remaining
    payment = _record_receipt(
        party_type=party_type,
        party_name=name,
        amount=amount,
        allocated_total=allocated_total,
        remaining=plan.remaining,
        notes=notes,
        recorded_by=recorded_by,
        steps=completed,
    )

    if plan.remaining > ZERO:
        logger.warning(
            "Payment exceeded outstanding balance",
            extra={
                "payment_id": str(payment.id),
                "party_name": name,
                "remaining": str(plan.remaining),
            },
        )

    logger.info(
        "Payment allocation completed",
        extra={
            "payment_id": str(payment.id),
            "orders_paid": len(completed),
            "allocated_total": str(allocated_total),
        },
    )

    return AllocationResult(
        payment=payment,
        allocated_total=allocated_total,
        remaining=plan.remaining,
        allocations=completed,
    )


def _write_order(model, step, completed):
    try:
        updated = model.objects.filter(pk=step.order_id).update(
            paid_amount=step.new_paid,
            payment_status=step.status,
            updated_at=timezone.now(),
        )
    except DatabaseError as exc:
        logger.exception(
            "Order write failed during payment allocation",
            extra={"order_id": str(step.order_id), "completed": len(completed)},
        )
        raise PersistenceFailureError(
            f"Failed to update order {step.order_id}",
            completed=completed,
        ) from exc

    if updated != 1:
        logger.error(
            "Order vanished during payment allocation",
            extra={"order_id": str(step.order_id), "completed": len(completed)},
        )
        raise PersistenceFailureError(
            f"Order {step.order_id} no longer exists",
            completed=completed,
        )


def _record_receipt(
    *,
    party_type,
    party_name,
    amount,
    allocated_total,
    remaining,
    notes,
    recorded_by,
    steps
):
    try:
        with transaction.atomic():
            payment = Payment.objects.create(
                party_type=party_type,
                party_name=party_name,
                amount=amount,
                allocated_total=allocated_total,
                remaining=remaining,
                notes=notes or '',
                recorded_by=recorded_by,
            )
            PaymentAllocation.objects.bulk_create([
                PaymentAllocation(
                    payment=payment,
                    position=position,
                    order_id=step.order_id,
                    allocated=step.allocated,
                    previous_paid=step.previous_paid,
                    new_paid=step.new_paid,
                    status=step.status,
                )
                for position, step in enumerate(steps, start=1)
            ])
    except DatabaseError as exc:
        logger.exception(
            "Payment receipt could not be recorded",
            extra={"party_name": party_name, "completed": len(steps)},
        )
        raise PersistenceFailureError(
            "Orders were updated but the payment receipt was not recorded",
            completed=steps,
        ) from exc

    return payment
