"""Services for accounts business logic."""

from .exceptions import (
    AccountsServiceError,
    InvalidCredentialsError,
    InactiveAccountError,
    UserNotFoundError,
    DuplicateEmailError,
    SelfDeactivationError,
)
from .user_authentication import authenticate_user
from .user_management import (
    create_user_account,
    toggle_user_active,
    ensure_admin_user,
)

__all__ = [
    # Exceptions
    'AccountsServiceError',
    'InvalidCredentialsError',
    'InactiveAccountError',
    'UserNotFoundError',
    'DuplicateEmailError',
    'SelfDeactivationError',
    # Services
    'authenticate_user',
    'create_user_account',
    'toggle_user_active',
    'ensure_admin_user',
]
