"""
Domain exceptions for the ledger app.

Exception Hierarchy:
    LedgerServiceError (base)
    ├── InvalidAmountError
    ├── InvalidPartyError
    ├── NoOutstandingOrdersError
    ├── PersistenceFailureError
    ├── OrderNotFoundError
    └── InvalidOrderError
        └── PaidAmountExceedsTotalError

A payment larger than the outstanding debt is not an error: the allocator
reports it through ``AllocationResult.is_partial``.
"""


class LedgerServiceError(Exception):
    """Base exception for ledger service errors."""
    pass


class InvalidAmountError(LedgerServiceError):
    """Payment amount is zero, negative or not a number."""
    pass


class InvalidPartyError(LedgerServiceError):
    """Unknown party type or empty party name."""
    pass


class NoOutstandingOrdersError(LedgerServiceError):
    """Party has no unpaid or partial orders to pay off."""
    pass


class PersistenceFailureError(LedgerServiceError):
    """
    An order write failed part way through an allocation.

    Writes made before the failure stay committed unless the allocation ran
    serialized (``rolled_back`` is then True). ``completed`` lists the
    allocation steps that are known to be in the database.
    """

    def __init__(self, message, *, completed=None, rolled_back=False):
        super().__init__(message)
        self.completed = list(completed or [])
        self.rolled_back = rolled_back


class OrderNotFoundError(LedgerServiceError):
    """Sale or purchase does not exist."""
    pass


class InvalidOrderError(LedgerServiceError):
    """Order data is incomplete or inconsistent."""
    pass


class PaidAmountExceedsTotalError(InvalidOrderError):
    """Paid amount would be larger than the order total."""
    pass
