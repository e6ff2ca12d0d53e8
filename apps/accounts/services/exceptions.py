"""Domain-specific exceptions for accounts services."""


class AccountsServiceError(Exception):
    """Base exception for accounts services."""
    pass


class InvalidCredentialsError(AccountsServiceError):
    """Raised when authentication credentials are invalid."""
    pass


class InactiveAccountError(AccountsServiceError):
    """Raised when account is deactivated."""
    pass


class UserNotFoundError(AccountsServiceError):
    """Raised when user does not exist."""
    pass


class DuplicateEmailError(AccountsServiceError):
    """Raised when another account already uses the email."""
    pass


class SelfDeactivationError(AccountsServiceError):
    """Raised when an admin tries to deactivate their own account."""
    pass
