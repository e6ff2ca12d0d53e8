"""
Roles and the permission strings each one grants.

Permission strings are ``<resource>:<action>``. ``*`` grants everything.
"""

from django.db import models


class Role(models.TextChoices):
    ADMIN = 'admin', 'Admin'
    MANAGER = 'manager', 'Manager'
    ACCOUNTANT = 'accountant', 'Accountant'
    VIEWER = 'viewer', 'Viewer'


ROLE_PERMISSIONS = {
    Role.ADMIN: ['*'],
    Role.MANAGER: [
        'products:create',
        'products:read',
        'ledger:read',
        'sales:create',
        'purchases:create',
        'users:read',
    ],
    Role.ACCOUNTANT: [
        'ledger:read',
        'payments:update',
        'purchases:read',
        'sales:read',
    ],
    Role.VIEWER: [
        'ledger:read',
        'products:read',
    ],
}


def can(role, permission):
    """Return True if ``role`` grants ``permission``. Unknown roles grant nothing."""
    allowed = ROLE_PERMISSIONS.get(role, [])
    return '*' in allowed or permission in allowed
