"""Admin-side user management."""

import logging
from uuid import UUID

from django.db import IntegrityError, transaction
from django.contrib.auth import get_user_model

from ..roles import Role
from .exceptions import (
    DuplicateEmailError,
    SelfDeactivationError,
    UserNotFoundError,
)

User = get_user_model()

logger = logging.getLogger(__name__)


@transaction.atomic
def create_user_account(
    *,
    name: str,
    email: str,
    password: str,
    role: str = Role.VIEWER
) -> User:
    """
    Create a staff account.

    Args:
        name: Full name (trimmed)
        email: Login email (stored lowercase)
        password: Raw password, hashed on save
        role: One of Role, defaults to viewer

    Returns:
        Created User instance

    Raises:
        DuplicateEmailError: If the email is already registered
    """
    email = email.strip().lower()
    if User.objects.filter(email=email).exists():
        raise DuplicateEmailError("Email already exists")

    try:
        with transaction.atomic():
            user = User.objects.create_user(
                email=email,
                password=password,
                name=name.strip(),
                role=role or Role.VIEWER,
            )
    except IntegrityError:
        raise DuplicateEmailError("Email already exists")

    logger.info("User created", extra={"user_id": str(user.id), "role": user.role})
    return user


@transaction.atomic
def toggle_user_active(*, user_id: UUID, acting_user=None) -> User:
    """
    Flip a user's ``is_active`` flag.

    Deactivated users cannot log in and their existing tokens stop working.

    Raises:
        UserNotFoundError: If the user does not exist
        SelfDeactivationError: If ``acting_user`` targets their own account
    """
    try:
        user = User.objects.select_for_update().get(id=user_id)
    except User.DoesNotExist:
        raise UserNotFoundError("User not found")

    if acting_user is not None and acting_user.pk == user.pk:
        raise SelfDeactivationError("You cannot deactivate your own account")

    user.is_active = not user.is_active
    user.save(update_fields=['is_active'])

    logger.info(
        "User active flag toggled",
        extra={"user_id": str(user.id), "is_active": user.is_active},
    )
    return user


def ensure_admin_user(*, email: str, password: str, name: str = 'Admin'):
    """
    Create the first admin account if it is missing.

    Returns:
        Tuple of (user, created)
    """
    email = email.strip().lower()
    user = User.objects.filter(email=email).first()
    if user is not None:
        return user, False

    user = User.objects.create_superuser(email=email, password=password, name=name)
    logger.info("Admin user created", extra={"user_id": str(user.id)})
    return user, True
