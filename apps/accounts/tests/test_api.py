import pytest
from io import StringIO
from django.core.management import call_command
from django.core.management.base import CommandError
from django.urls import reverse
from rest_framework import status
from apps.accounts.models import User
from apps.accounts.roles import Role, can


# =============================================================================
# Login Tests
# =============================================================================

@pytest.mark.django_db
class TestLogin:
    """Tests for POST /api/auth/login/"""

    def test_login_success(self, api_client, user):
        """Successfully login with valid credentials."""
        url = reverse('accounts:login')
        data = {
            'email': user.email,
            'password': 'TestPass123!',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_200_OK
        assert 'access' in response.data['tokens']
        assert 'refresh' in response.data['tokens']
        assert response.data['user']['email'] == user.email
        assert response.data['user']['role'] == Role.VIEWER

    def test_login_email_case_insensitive(self, api_client, user):
        url = reverse('accounts:login')
        response = api_client.post(url, {
            'email': 'TestUser@Example.com',
            'password': 'TestPass123!',
        })

        assert response.status_code == status.HTTP_200_OK

    def test_login_wrong_password(self, api_client, user):
        """Login fails with wrong password."""
        url = reverse('accounts:login')
        data = {
            'email': user.email,
            'password': 'WrongPassword123!',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.data['error'] == 'Invalid credentials'

    def test_login_nonexistent_user(self, api_client):
        """Unknown email gets the same answer as a wrong password."""
        url = reverse('accounts:login')
        data = {
            'email': 'nonexistent@example.com',
            'password': 'SomePass123!',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.data['error'] == 'Invalid credentials'

    def test_login_inactive_user(self, api_client, user_inactive):
        """Deactivated accounts cannot log in."""
        url = reverse('accounts:login')
        data = {
            'email': user_inactive.email,
            'password': 'TestPass123!',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_login_updates_last_login(self, api_client, user):
        """Login updates last_login timestamp."""
        url = reverse('accounts:login')
        response = api_client.post(url, {'email': user.email, 'password': 'TestPass123!'})

        assert response.status_code == status.HTTP_200_OK
        user.refresh_from_db()
        assert user.last_login is not None


@pytest.mark.django_db
class TestSession:
    """Tests for logout and current user."""

    def test_logout(self, authenticated_client):
        response = authenticated_client.post(reverse('accounts:logout'), {})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['message'] == 'Logged out'

    def test_logout_unauthenticated(self, api_client):
        response = api_client.post(reverse('accounts:logout'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_get_current_user(self, authenticated_client, user):
        """Get current authenticated user profile."""
        response = authenticated_client.get(reverse('accounts:current-user'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['email'] == user.email
        assert response.data['name'] == 'Test User'
        assert 'password' not in response.data

    def test_get_current_user_unauthenticated(self, api_client):
        response = api_client.get(reverse('accounts:current-user'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_deactivated_user_token_rejected(self, authenticated_client, user):
        user.is_active = False
        user.save()

        response = authenticated_client.get(reverse('accounts:current-user'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


# =============================================================================
# User Management Tests
# =============================================================================

@pytest.mark.django_db
class TestUserList:
    """Tests for GET/POST /api/users/"""

    def test_admin_lists_users(self, admin_client, user):
        response = admin_client.get(reverse('accounts:user-list'))

        assert response.status_code == status.HTTP_200_OK
        emails = [u['email'] for u in response.data]
        assert user.email in emails

    def test_manager_cannot_list_users(self, manager_client):
        response = manager_client.get(reverse('accounts:user-list'))

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_unauthenticated_cannot_list_users(self, api_client):
        response = api_client.get(reverse('accounts:user-list'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_viewer_cannot_list_users(self, authenticated_client):
        response = authenticated_client.get(reverse('accounts:user-list'))

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_admin_creates_user(self, admin_client):
        response = admin_client.post(reverse('accounts:user-list'), {
            'name': 'Night Accountant',
            'email': 'Night@Example.com',
            'password': 'secret1',
            'role': 'accountant',
        })

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['role'] == Role.ACCOUNTANT
        created = User.objects.get(email='night@example.com')
        assert created.check_password('secret1')

    def test_role_defaults_to_viewer(self, admin_client):
        response = admin_client.post(reverse('accounts:user-list'), {
            'name': 'New Staff',
            'email': 'staff@example.com',
            'password': 'secret1',
        })

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['role'] == Role.VIEWER

    def test_duplicate_email_conflict(self, admin_client, user):
        response = admin_client.post(reverse('accounts:user-list'), {
            'name': 'Copy',
            'email': user.email,
            'password': 'secret1',
        })

        assert response.status_code == status.HTTP_409_CONFLICT

    def test_short_password_rejected(self, admin_client):
        response = admin_client.post(reverse('accounts:user-list'), {
            'name': 'Short',
            'email': 'short@example.com',
            'password': '123',
        })

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_manager_cannot_create_user(self, manager_client):
        response = manager_client.post(reverse('accounts:user-list'), {
            'name': 'X',
            'email': 'x@example.com',
            'password': 'secret1',
        })

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert not User.objects.filter(email='x@example.com').exists()


@pytest.mark.django_db
class TestToggleUser:
    """Tests for PATCH /api/users/{id}/toggle/"""

    def test_deactivate_and_reactivate(self, admin_client, user):
        url = reverse('accounts:user-toggle', args=[user.id])

        response = admin_client.patch(url)
        assert response.status_code == status.HTTP_200_OK
        assert response.data['is_active'] is False

        response = admin_client.patch(url)
        assert response.data['is_active'] is True

    def test_cannot_deactivate_self(self, admin_client, admin_user):
        url = reverse('accounts:user-toggle', args=[admin_user.id])

        response = admin_client.patch(url)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        admin_user.refresh_from_db()
        assert admin_user.is_active is True

    def test_unknown_user(self, admin_client):
        url = reverse('accounts:user-toggle', args=['00000000-0000-0000-0000-000000000000'])

        response = admin_client.patch(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_manager_forbidden(self, manager_client, user):
        response = manager_client.patch(reverse('accounts:user-toggle', args=[user.id]))

        assert response.status_code == status.HTTP_403_FORBIDDEN


# =============================================================================
# Roles
# =============================================================================

class TestRoles:

    @pytest.mark.parametrize('role,permission,allowed', [
        (Role.ADMIN, 'anything:at-all', True),
        (Role.MANAGER, 'sales:create', True),
        (Role.MANAGER, 'payments:update', False),
        (Role.ACCOUNTANT, 'payments:update', True),
        (Role.ACCOUNTANT, 'sales:create', False),
        (Role.VIEWER, 'ledger:read', True),
        (Role.VIEWER, 'users:read', False),
        ('intern', 'ledger:read', False),
    ])
    def test_can(self, role, permission, allowed):
        assert can(role, permission) is allowed


@pytest.mark.django_db
class TestUserModel:
    """Tests for User model methods."""

    def test_create_user(self, db):
        user = User.objects.create_user(
            email='Model@Example.com',
            password='TestPass123!',
            name='Model',
        )

        assert user.email == 'model@example.com'
        assert user.role == Role.VIEWER
        assert user.is_staff is False

    def test_create_superuser_is_admin_role(self, db):
        user = User.objects.create_superuser(
            email='admin@example.com',
            password='AdminPass123!',
            name='Admin',
        )

        assert user.is_superuser is True
        assert user.role == Role.ADMIN

    def test_inactive_user_has_no_permissions(self, user_inactive):
        assert user_inactive.has_role_permission('ledger:read') is False

    def test_get_display_name(self, user):
        assert user.get_display_name() == 'Test User'

        user.name = ''
        assert user.get_display_name() == 'testuser'


@pytest.mark.django_db
class TestEnsureAdminCommand:

    def test_creates_admin(self):
        out = StringIO()
        call_command('ensure_admin', '--email', 'boss@example.com', '--password', 'pw123456', stdout=out)

        assert User.objects.get(email='boss@example.com').role == Role.ADMIN
        assert 'created' in out.getvalue()

    def test_idempotent(self, admin_user):
        out = StringIO()
        call_command('ensure_admin', '--email', admin_user.email, '--password', 'x', stdout=out)

        assert User.objects.filter(email=admin_user.email).count() == 1
        assert 'already exists' in out.getvalue()

    def test_requires_password(self):
        with pytest.raises(CommandError):
            call_command('ensure_admin', '--email', 'boss@example.com', '--password', '')


@pytest.mark.django_db
class TestHealthCheck:

    def test_health_check_without_auth(self, api_client):
        response = api_client.get(reverse('health-check'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {'status': 'ok'}
