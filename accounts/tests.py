"""
Tests for administrator login, logout and session reporting.
"""
import pytest
from django.contrib.auth import get_user_model
from django.core.management import call_command
from rest_framework import status

from accounts.exceptions import InvalidCredentials

User = get_user_model()

pytestmark = pytest.mark.django_db

LOGIN_URL = '/api/auth/login/'
LOGOUT_URL = '/api/auth/logout/'
REFRESH_URL = '/api/auth/token/refresh/'
SESSION_URL = '/api/auth/session/'


def login(api_client, username, password):
    return api_client.post(LOGIN_URL, {'username': username, 'password': password}, format='json')


class TestAdminLogin:
    """Test credential checks for the dashboard login."""

    def test_valid_credentials_issue_token_pair(self, api_client, admin_user):
        """Test ("admin", "admin123") signs in and returns the session tokens."""
        response = login(api_client, 'admin', 'admin123')

        assert response.status_code == status.HTTP_200_OK
        assert 'access' in response.data
        assert 'refresh' in response.data
        assert response.data['user']['username'] == 'admin'
        assert response.data['user']['role'] == 'ADMIN'

    def test_login_records_last_login_at(self, api_client, admin_user):
        """Test a successful login stamps last_login_at."""
        login(api_client, 'admin', 'admin123')

        admin_user.refresh_from_db()
        assert admin_user.last_login_at is not None

    def test_wrong_password_and_unknown_user_look_identical(self, api_client, admin_user):
        """Test failures do not reveal whether the username exists."""
        wrong_password = login(api_client, 'admin', 'wrong')
        unknown_user = login(api_client, 'nobody', 'x')

        assert wrong_password.status_code == status.HTTP_401_UNAUTHORIZED
        assert unknown_user.status_code == status.HTTP_401_UNAUTHORIZED
        assert wrong_password.data == unknown_user.data
        assert wrong_password.data == {
            'error': 'Invalid username or password',
            'code': 'INVALID_CREDENTIALS',
        }

    def test_inactive_admin_rejected(self, api_client, admin_user):
        """Test deactivated administrators get the generic failure."""
        admin_user.is_active = False
        admin_user.save()

        response = login(api_client, 'admin', 'admin123')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.data['error'] == InvalidCredentials.default_detail

    def test_non_admin_rejected(self, api_client, officer_user):
        """Test extension officers cannot sign in to the dashboard."""
        response = login(api_client, 'officer', 'officer123')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.data['code'] == 'INVALID_CREDENTIALS'

    def test_superuser_is_admin(self, api_client):
        """Test superusers count as dashboard administrators."""
        User.objects.create_superuser(username='root', password='rootpass', email='root@example.com')

        response = login(api_client, 'root', 'rootpass')

        assert response.status_code == status.HTTP_200_OK

    def test_password_is_stored_hashed(self, admin_user):
        """Test the credential store never keeps the raw secret."""
        assert admin_user.password != 'admin123'
        assert admin_user.check_password('admin123')


class TestSession:
    """Test the session context lifecycle."""

    def test_session_reports_signed_in_admin(self, api_client, admin_user):
        """Test the access token identifies the administrator."""
        tokens = login(api_client, 'admin', 'admin123').data
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {tokens['access']}")

        response = api_client.get(SESSION_URL)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['authenticated'] is True
        assert response.data['user']['username'] == 'admin'

    def test_session_requires_authentication(self, api_client):
        """Test anonymous requests are refused."""
        response = api_client.get(SESSION_URL)
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_session_refused_for_non_admin(self, api_client, officer_user):
        """Test authenticated non-admins are forbidden."""
        api_client.force_authenticate(user=officer_user)
        response = api_client.get(SESSION_URL)
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_logout_blacklists_refresh_token(self, api_client, admin_user):
        """Test the refresh token stops working after logout."""
        tokens = login(api_client, 'admin', 'admin123').data
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {tokens['access']}")

        response = api_client.post(LOGOUT_URL, {'refresh_token': tokens['refresh']}, format='json')
        assert response.status_code == status.HTTP_200_OK

        api_client.credentials()
        response = api_client.post(REFRESH_URL, {'refresh': tokens['refresh']}, format='json')
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_logout_requires_refresh_token(self, api_client, admin_user):
        """Test logout without a token is a bad request."""
        api_client.force_authenticate(user=admin_user)
        response = api_client.post(LOGOUT_URL, {}, format='json')
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_logout_with_invalid_token(self, api_client, admin_user):
        """Test garbage tokens are rejected."""
        api_client.force_authenticate(user=admin_user)
        response = api_client.post(LOGOUT_URL, {'refresh_token': 'not-a-token'}, format='json')
        assert response.status_code == status.HTTP_400_BAD_REQUEST


class TestCreateVisitAdminCommand:
    """Test the create_visit_admin management command."""

    def test_creates_default_admin(self):
        """Test defaults produce a usable admin/admin123 account."""
        call_command('create_visit_admin')

        user = User.objects.get(username='admin')
        assert user.role == User.UserRole.ADMIN
        assert user.is_staff
        assert user.check_password('admin123')

    def test_resets_existing_password(self, admin_user):
        """Test rerunning the command resets the password."""
        call_command('create_visit_admin', '--username', 'admin', '--password', 'n3w-secret')

        admin_user.refresh_from_db()
        assert admin_user.check_password('n3w-secret')
        assert User.objects.filter(username='admin').count() == 1
