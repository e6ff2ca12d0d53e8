"""
Balance aggregation.

Computes per-party and global totals from order snapshots. Every paid amount
goes through ``clamp_paid`` so stored rows with ``paid_amount > total_amount``
never make a balance negative.

The summarizing functions are pure: they accept any iterable of order-like
objects (``total_amount``, ``paid_amount`` and, for grouping, ``party_name``)
and never write. The ``get_*`` helpers only add the database reads.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from apps.ledger.money import ZERO, clamp_paid, to_decimal

from .allocation import get_order_model


@dataclass(frozen=True)
class BalanceSummary:
    total_orders: int
    total_amount: Decimal
    total_paid: Decimal
    balance: Decimal


@dataclass
class PartySummary:
    """Totals of one customer or supplier plus the orders behind them."""

    party_name: str
    total_orders: int = 0
    total_amount: Decimal = ZERO
    total_paid: Decimal = ZERO
    balance: Decimal = ZERO
    orders: List = field(default_factory=list)


@dataclass(frozen=True)
class BalanceSheet:
    purchases: BalanceSummary
    sales: BalanceSummary

    @property
    def net_receivable(self):
        """What customers still owe."""
        return self.sales.balance

    @property
    def net_payable(self):
        """What is still owed to suppliers."""
        return self.purchases.balance


def summarize(orders: Iterable) -> BalanceSummary:
    """
    Total a set of orders.

    Args:
        orders: Iterable of orders (model instances or any object with
            ``total_amount`` and ``paid_amount``)

    Returns:
        BalanceSummary where ``total_paid`` is the sum of clamped paid amounts
        and ``balance = total_amount - total_paid`` (never negative).
    """
    count = 0
    total_amount = ZERO
    total_paid = ZERO

    for order in orders:
        total = to_decimal(order.total_amount)
        count += 1
        total_amount += total
        total_paid += clamp_paid(order.paid_amount, total)

    return BalanceSummary(
        total_orders=count,
        total_amount=total_amount,
        total_paid=total_paid,
        balance=total_amount - total_paid,
    )


def group_by_party(orders: Iterable) -> Dict[str, PartySummary]:
    """
    Group orders by ``party_name`` and total each group.

    Parties appear in the order they are first seen. Each summary keeps the
    orders that produced it.

    Example:
        >>> reports = group_by_party(CustomerSale.objects.order_by('customer_name'))
        >>> reports['Al Noor Transport'].balance
        Decimal('300.0000')
    """
    parties = {}

    for order in orders:
        name = order.party_name
        summary = parties.get(name)
        if summary is None:
            summary = parties[name] = PartySummary(party_name=name)

        total = to_decimal(order.total_amount)
        summary.total_orders += 1
        summary.total_amount += total
        summary.total_paid += clamp_paid(order.paid_amount, total)
        summary.orders.append(order)

    for summary in parties.values():
        summary.balance = summary.total_amount - summary.total_paid

    return parties


def global_balance(*, purchases: Iterable, sales: Iterable) -> BalanceSheet:
    """Build the balance sheet from purchase and sale snapshots."""
    return BalanceSheet(
        purchases=summarize(purchases),
        sales=summarize(sales),
    )


# =============================================================================
# Database-backed reports
# =============================================================================

def get_balance_sheet() -> BalanceSheet:
    """Global balance across every stored sale and purchase."""
    return global_balance(
        purchases=get_order_model('supplier').objects.only('total_amount', 'paid_amount'),
        sales=get_order_model('customer').objects.only('total_amount', 'paid_amount'),
    )


def _in_range(orders, date_from=None, date_to=None):
    if date_from:
        orders = orders.filter(date__date__gte=date_from)
    if date_to:
        orders = orders.filter(date__date__lte=date_to)
    return orders


def get_party_reports(
    party_type: str,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
) -> Dict[str, PartySummary]:
    """
    Per-party summaries for all customers or all suppliers, by name.

    With a date range only orders dated inside it are counted, and parties
    with no such orders are left out.
    """
    model = get_order_model(party_type)
    orders = _in_range(model.objects.all(), date_from, date_to)
    return group_by_party(orders.order_by(model.PARTY_FIELD, '-date', '-created_at'))


def get_party_report(
    party_type: str,
    party_name: str,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
) -> PartySummary:
    """
    Summary and orders of a single party, newest order first.

    A party with no orders (in the date range, if given) gets an all-zero
    summary rather than an error.
    """
    model = get_order_model(party_type)
    name = (party_name or '').strip()
    orders = _in_range(model.for_party(name), date_from, date_to)
    return group_by_party(orders.order_by('-date', '-created_at')).get(name, PartySummary(party_name=name))
