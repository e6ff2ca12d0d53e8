"""Decimal helpers shared by the ledger models and services."""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP


ZERO = Decimal('0')
CENT = Decimal('0.01')
# Smallest amount the order and receipt columns can hold
STORAGE_QUANTUM = Decimal('0.0001')


def to_decimal(value) -> Decimal:
    """Coerce a stored or submitted amount to Decimal (None counts as zero)."""
    if value is None or value == '':
        return ZERO
    if isinstance(value, Decimal):
        return value
    try:
        # str() first so floats keep their printed value
        return Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise ValueError(f"Not a monetary amount: {value!r}") from exc


def clamp_paid(paid_amount, total_amount) -> Decimal:
    """
    Paid amount as it may be reported: ``min(paid, total)``, never below zero.

    Stored rows can carry ``paid_amount > total_amount`` (manual edits
    bypass the allocator), so every read path goes through this instead of
    trusting the stored value.
    """
    total = to_decimal(total_amount)
    paid = to_decimal(paid_amount)
    return max(ZERO, min(paid, total))


def quantize_money(value) -> Decimal:
    """Round to two places for display."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def fits_storage(value: Decimal, quantum: Decimal = STORAGE_QUANTUM) -> bool:
    """True if ``value`` is stored without losing digits (at most 4 places by default)."""
    try:
        return value.quantize(quantum) == value
    except InvalidOperation:
        return False
