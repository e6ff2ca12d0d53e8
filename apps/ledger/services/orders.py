"""
Sale and purchase entry.

Creating an order validates the product and quantities, computes the total,
derives the payment status from the opening paid amount and makes sure the
party exists in the directory. The manual payment edit is the only other
way an order's paid amount changes besides ``allocate_payment``.
"""

import logging
from typing import Optional
from uuid import UUID

from django.db import transaction
from django.utils import timezone

from apps.directory.services import get_or_create_party
from apps.ledger.models import (
    CustomerSale,
    ProductKind,
    SupplierPurchase,
    derive_status,
)
from apps.ledger.money import CENT, STORAGE_QUANTUM, ZERO, fits_storage, to_decimal

from .allocation import get_order_model
from .exceptions import (
    InvalidOrderError,
    InvalidPartyError,
    OrderNotFoundError,
    PaidAmountExceedsTotalError,
)


logger = logging.getLogger(__name__)


def _amount(value, label, quantum=STORAGE_QUANTUM):
    try:
        amount = to_decimal(value)
    except ValueError:
        raise InvalidOrderError(f"{label} must be a number")
    if not amount.is_finite():
        raise InvalidOrderError(f"{label} must be a number")
    if not fits_storage(amount, quantum):
        raise InvalidOrderError(f"{label} has too many decimal places")
    return amount


def _prepare_order_fields(
    *,
    party_name,
    product,
    liters,
    rate_per_litre,
    total_amount,
    paid_amount
):
    """Validate raw order input and return model field values."""
    name = (party_name or '').strip()
    if not name:
        raise InvalidPartyError("Party name is required")

    if product not in ProductKind.values:
        raise InvalidOrderError(f"Invalid product: {product!r}")

    if product == ProductKind.OTHER:
        total = _amount(total_amount, "Total amount")
        if total <= ZERO:
            raise InvalidOrderError("Total amount must be a positive number")
        liters = None
        rate_per_litre = None
    else:
        if liters in (None, '') or rate_per_litre in (None, ''):
            raise InvalidOrderError("Liters and rate per litre are required for this product")
        liters = _amount(liters, "Liters", CENT)
        rate_per_litre = _amount(rate_per_litre, "Rate per litre", CENT)
        if liters <= ZERO:
            raise InvalidOrderError("Liters must be a positive number")
        if rate_per_litre <= ZERO:
            raise InvalidOrderError("Rate per litre must be a positive number")
        total = liters * rate_per_litre

    paid = _amount(paid_amount, "Paid amount")
    if paid < ZERO:
        raise InvalidOrderError("Paid amount cannot be negative")
    if paid > total:
        raise PaidAmountExceedsTotalError(
            f"Paid amount ({paid}) cannot exceed total amount ({total})"
        )

    return {
        'product': product,
        'liters': liters,
        'rate_per_litre': rate_per_litre,
        'total_amount': total,
        'paid_amount': paid,
        'payment_status': derive_status(paid, total),
    }, name


@transaction.atomic
def create_sale(
    *,
    customer_name: str,
    product: str,
    liters=None,
    rate_per_litre=None,
    total_amount=None,
    paid_amount=None,
    notes: str = '',
    date=None,
    image_url: str = ''
) -> CustomerSale:
    """
    Record fuel sold to a customer.

    For fuel products the total is ``liters * rate_per_litre``; for
    ``other`` it is ``total_amount`` as given. Payment status is derived from
    ``paid_amount`` and never taken from input.

    Args:
        customer_name: Customer name (trimmed; added to the directory if new)
        product: One of ProductKind
        liters: Quantity, required unless product is 'other'
        rate_per_litre: Unit price, required unless product is 'other'
        total_amount: Order total, required only for 'other'
        paid_amount: Amount paid up front (default 0)
        notes: Free text
        date: Order date (default now)
        image_url: Link to a receipt image

    Returns:
        Created CustomerSale

    Raises:
        InvalidPartyError: If customer_name is blank
        InvalidOrderError: If product or amounts are invalid
        PaidAmountExceedsTotalError: If paid_amount > total
    """
    fields, name = _prepare_order_fields(
        party_name=customer_name,
        product=product,
        liters=liters,
        rate_per_litre=rate_per_litre,
        total_amount=total_amount,
        paid_amount=paid_amount,
    )
    get_or_create_party(kind='customer', name=name)

    sale = CustomerSale.objects.create(
        customer_name=name,
        notes=notes or '',
        date=date or timezone.now(),
        image_url=image_url or '',
        **fields
    )
    logger.info(
        "Sale recorded",
        extra={"sale_id": str(sale.id), "customer": name, "total": str(sale.total_amount)},
    )
    return sale


@transaction.atomic
def create_purchase(
    *,
    supplier_name: str,
    product: str,
    liters=None,
    rate_per_litre=None,
    total_amount=None,
    paid_amount=None,
    notes: str = '',
    date=None,
    deposit_slip_url: str = ''
) -> SupplierPurchase:
    """
    Record fuel bought from a supplier.

    Same rules as ``create_sale``; the supplier is added to the directory
    if new.
    """
    fields, name = _prepare_order_fields(
        party_name=supplier_name,
        product=product,
        liters=liters,
        rate_per_litre=rate_per_litre,
        total_amount=total_amount,
        paid_amount=paid_amount,
    )
    get_or_create_party(kind='supplier', name=name)

    purchase = SupplierPurchase.objects.create(
        supplier_name=name,
        notes=notes or '',
        date=date or timezone.now(),
        deposit_slip_url=deposit_slip_url or '',
        **fields
    )
    logger.info(
        "Purchase recorded",
        extra={"purchase_id": str(purchase.id), "supplier": name, "total": str(purchase.total_amount)},
    )
    return purchase


@transaction.atomic
def update_order_payment(
    *,
    party_type: str,
    order_id: UUID,
    paid_amount,
    notes: Optional[str] = None
):
    """
    Overwrite an order's paid amount by hand.

    Bypasses the allocator and writes no Payment receipt, but keeps
    ``0 <= paid_amount <= total_amount`` and re-derives the status.

    Args:
        party_type: 'customer' (sale) or 'supplier' (purchase)
        order_id: Order UUID
        paid_amount: New cumulative paid amount
        notes: Replaces the order notes when given

    Returns:
        Updated order

    Raises:
        OrderNotFoundError: If the order does not exist
        InvalidOrderError: If paid_amount is negative or not a number
        PaidAmountExceedsTotalError: If paid_amount > total_amount
    """
    model = get_order_model(party_type)
    try:
        order = model.objects.select_for_update().get(pk=order_id)
    except model.DoesNotExist:
        raise OrderNotFoundError(f"{model._meta.verbose_name.capitalize()} not found")

    paid = _amount(paid_amount, "Paid amount")
    if paid < ZERO:
        raise InvalidOrderError("Paid amount cannot be negative")
    if paid > order.total_amount:
        raise PaidAmountExceedsTotalError(
            f"Paid amount ({paid}) cannot exceed total amount ({order.total_amount})"
        )

    previous = order.paid_amount
    order.paid_amount = paid
    order.payment_status = derive_status(paid, order.total_amount)
    update_fields = ['paid_amount', 'payment_status', 'updated_at']
    if notes is not None:
        order.notes = notes
        update_fields.append('notes')
    order.save(update_fields=update_fields)

    logger.info(
        "Order payment edited manually",
        extra={
            "order_id": str(order.id),
            "party_type": party_type,
            "previous_paid": str(previous),
            "paid": str(paid),
        },
    )
    return order


def list_orders(party_type: str, *, party_name: Optional[str] = None):
    """Sales or purchases newest first, optionally for one party."""
    model = get_order_model(party_type)
    queryset = model.objects.all()
    if party_name:
        queryset = model.for_party(party_name.strip())
    return queryset.order_by('-date', '-created_at')
