import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.directory.models import Customer, Supplier


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
def manager(db):
    """Create and return a manager."""
    return User.objects.create_user(
        email='manager@example.com',
        password='TestPass123!',
        name='Shift Manager',
        role='manager',
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
def accountant(db):
    """Create and return an accountant."""
    return User.objects.create_user(
        email='accountant@example.com',
        password='TestPass123!',
        name='Accountant',
        role='accountant',
    )


@pytest.fixture
def manager_client(manager):
    return _client_for(manager)


@pytest.fixture
def viewer_client(viewer):
    return _client_for(viewer)


@pytest.fixture
def accountant_client(accountant):
    return _client_for(accountant)


@pytest.fixture
def customers(db):
    """A handful of customers with overlapping names."""
    names = ['Al Noor Transport', 'Noor Brothers', 'Madina Goods', 'Zafar Oil']
    return [Customer.objects.create(name=n) for n in names]


@pytest.fixture
def supplier(db):
    return Supplier.objects.create(name='PSO Depot', phone='042-111-222')
