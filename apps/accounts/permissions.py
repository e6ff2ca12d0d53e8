"""
Role-based permission classes.

Each class names the permission strings that unlock an endpoint; holding any
one of them is enough. The strings are resolved through
``apps.accounts.roles.can``.

Usage:
    class SaleListCreateView(...):
        def get_permissions(self):
            if self.request.method == 'POST':
                return [CanCreateSales()]
            return [CanReadSales()]
"""
from rest_framework.permissions import BasePermission


class RolePermission(BasePermission):
    """Base class: grant access if the user's role has a required permission."""

    required_permissions = ()
    message = 'Your role does not allow this action.'

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return any(user.has_role_permission(p) for p in self.required_permissions)


class CanReadLedger(RolePermission):
    required_permissions = ('ledger:read',)
    message = 'You do not have permission to view the ledger.'


class CanRecordPayments(RolePermission):
    required_permissions = ('payments:update',)
    message = 'You do not have permission to record payments.'


class CanReadSales(RolePermission):
    # Viewers and managers see sales through ledger:read
    required_permissions = ('sales:read', 'ledger:read')
    message = 'You do not have permission to view sales.'


class CanCreateSales(RolePermission):
    required_permissions = ('sales:create',)
    message = 'You do not have permission to record sales.'


class CanReadPurchases(RolePermission):
    required_permissions = ('purchases:read', 'ledger:read')
    message = 'You do not have permission to view purchases.'


class CanCreatePurchases(RolePermission):
    required_permissions = ('purchases:create',)
    message = 'You do not have permission to record purchases.'


class CanReadProducts(RolePermission):
    required_permissions = ('products:read',)
    message = 'You do not have permission to view products.'


class CanCreateProducts(RolePermission):
    required_permissions = ('products:create',)
    message = 'You do not have permission to manage products.'


class IsAdminRole(RolePermission):
    required_permissions = ('*',)
    message = 'Only administrators can manage users.'
