import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def user(db):
    """Create and return a viewer."""
    return User.objects.create_user(
        email='testuser@example.com',
        password='TestPass123!',
        name='Test User',
    )


@pytest.fixture
def user_inactive(db):
    """Create and return an inactive user."""
    return User.objects.create_user(
        email='inactive@example.com',
        password='TestPass123!',
        name='Inactive User',
        is_active=False,
    )


@pytest.fixture
def admin_user(db):
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
def authenticated_client(api_client, user):
    """Return API client authenticated with JWT token."""
    refresh = RefreshToken.for_user(user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def admin_client(admin_user):
    """Return API client authenticated as admin."""
    client = APIClient()
    refresh = RefreshToken.for_user(admin_user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def manager_client(manager):
    """Return API client authenticated as manager."""
    client = APIClient()
    refresh = RefreshToken.for_user(manager)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client
