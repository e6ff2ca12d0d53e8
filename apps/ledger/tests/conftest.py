import pytest
from datetime import timedelta
from decimal import Decimal
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.ledger.models import (
    CustomerSale,
    SupplierPurchase,
    ProductKind,
    derive_status,
)


def _client_for(user):
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def owner(db):
    """Create and return an admin-role user."""
    return User.objects.create_user(
        email='owner@example.com',
        password='TestPass123!',
        name='Station Owner',
        role='admin',
    )


@pytest.fixture
def manager(db):
    """Create and return a manager."""
    return User.objects.create_user(
        email='manager@example.com',
        password='TestPass123!',
        name='Shift Manager',
        role='manager',
    )


@pytest.fixture
def accountant(db):
    """Create and return an accountant."""
    return User.objects.create_user(
        email='accountant@example.com',
        password='TestPass123!',
        name='Accountant',
        role='accountant',
    )


@pytest.fixture
def viewer(db):
    """Create and return a read-only user."""
    return User.objects.create_user(
        email='viewer@example.com',
        password='TestPass123!',
        name='Viewer',
        role='viewer',
    )


@pytest.fixture
def owner_client(owner):
    """Return API client authenticated as admin."""
    return _client_for(owner)


@pytest.fixture
def manager_client(manager):
    """Return API client authenticated as manager."""
    return _client_for(manager)


@pytest.fixture
def accountant_client(accountant):
    """Return API client authenticated as accountant."""
    return _client_for(accountant)


@pytest.fixture
def viewer_client(viewer):
    """Return API client authenticated as viewer."""
    return _client_for(viewer)


def _order_kwargs(total, paid, days_ago, status):
    total = Decimal(str(total))
    paid = Decimal(str(paid))
    return {
        'product': ProductKind.OTHER,
        'total_amount': total,
        'paid_amount': paid,
        'payment_status': status or derive_status(paid, total),
        'date': timezone.now() - timedelta(days=days_ago),
    }


@pytest.fixture
def make_sale(db):
    """
    Factory for sales stored directly, bypassing order validation.

    ``status`` overrides the derived payment status so inconsistent legacy
    rows can be created.
    """
    def _make(total, paid=0, days_ago=0, customer='Al Noor Transport', status=None):
        return CustomerSale.objects.create(
            customer_name=customer,
            **_order_kwargs(total, paid, days_ago, status)
        )
    return _make


@pytest.fixture
def make_purchase(db):
    """Factory for purchases stored directly."""
    def _make(total, paid=0, days_ago=0, supplier='PSO Depot', status=None):
        return SupplierPurchase.objects.create(
            supplier_name=supplier,
            **_order_kwargs(total, paid, days_ago, status)
        )
    return _make
