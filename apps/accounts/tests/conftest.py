import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import Role, User


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def user(db):
    """Create and return a test user holding the "User" role."""
    user = User.objects.create_user(
        email='testuser@example.com',
        password='TestPass123!',
        display_name='Test User',
    )
    user.roles.add(Role.objects.get_or_create(name=Role.USER)[0])
    return user


@pytest.fixture
def admin_user(db):
    """Create and return a user with the Admin role."""
    user = User.objects.create_user(
        email='admin@example.com',
        password='AdminPass123!',
        display_name='Admin',
    )
    user.roles.add(Role.objects.get_or_create(name=Role.ADMIN)[0])
    return user


@pytest.fixture
def user_inactive(db):
    """Create and return an inactive user."""
    return User.objects.create_user(
        email='inactive@example.com',
        password='TestPass123!',
        display_name='Inactive User',
        is_active=False,
    )


@pytest.fixture
def authenticated_client(api_client, user):
    """Return an authenticated API client using JWT."""
    refresh = RefreshToken.for_user(user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client
