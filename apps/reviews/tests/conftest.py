import pytest
from datetime import timedelta
from decimal import Decimal
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import Role, User
from apps.coffees.models import Coffee, Roastery
from apps.reviews.models import Review


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
def review_user(db):
    """Create and return a test user for reviews."""
    return User.objects.create_user(
        email='reviewer@example.com',
        password='TestPass123!',
        display_name='Coffee Reviewer',
    )


@pytest.fixture
def review_other_user(db):
    """Create and return another test user for reviews."""
    return User.objects.create_user(
        email='review_other@example.com',
        password='TestPass123!',
        display_name='Review Other User',
    )


@pytest.fixture
def review_admin(db):
    """Create and return a user holding the Admin role."""
    user = User.objects.create_user(
        email='review_admin@example.com',
        password='TestPass123!',
        display_name='Review Admin',
    )
    user.roles.add(Role.objects.get_or_create(name=Role.ADMIN)[0])
    return user


@pytest.fixture
def review_auth_client(review_user):
    """Return API client authenticated as review user."""
    return _client_for(review_user)


@pytest.fixture
def review_other_client(review_other_user):
    """Return API client authenticated as other user."""
    return _client_for(review_other_user)


@pytest.fixture
def review_admin_client(review_admin):
    """Return API client authenticated as admin."""
    return _client_for(review_admin)


@pytest.fixture
def roastery(db):
    return Roastery.objects.create(
        name='Test Roastery',
        location='Prague',
        founding_year=2015,
    )


@pytest.fixture
def coffee(db, roastery):
    """Create and return a test coffee for reviews."""
    return Coffee.objects.create(
        name='Ethiopia Yirgacheffe',
        roastery=roastery,
        country_of_origin='Ethiopia',
        region='africa',
        roast_level='light',
        flavor_profile='citrus',
        flavor_notes=['lemon', 'jasmine'],
        processing_method='Washed',
        production_year=2024,
    )


@pytest.fixture
def another_coffee(db, roastery):
    """Create and return another test coffee for reviews."""
    return Coffee.objects.create(
        name='Brazil Santos',
        roastery=roastery,
        country_of_origin='Brazil',
        region='south_america',
        roast_level='dark',
        processing_method='Natural',
    )


@pytest.fixture
def inactive_coffee(db, roastery):
    return Coffee.objects.create(
        name='Discontinued Blend',
        roastery=roastery,
        country_of_origin='Colombia',
        processing_method='Washed',
        is_active=False,
    )


@pytest.fixture
def review(db, review_user, coffee):
    """Create and return a test review."""
    return Review.objects.create(
        coffee=coffee,
        user=review_user,
        rating=Decimal('4.5'),
        content='Bright and citrusy',
        brewing_method='Pour Over',
        brewing_description='3min bloom',
    )


@pytest.fixture
def other_review(db, review_other_user, coffee):
    """Create a review by another user."""
    return Review.objects.create(
        coffee=coffee,
        user=review_other_user,
        rating=Decimal('3.0'),
        content='Decent coffee.',
        brewing_method='French Press',
    )


@pytest.fixture
def make_reviews(db):
    """
    Factory: create one review per rating on a coffee, each by a new user,
    the first one oldest.
    """
    def _make(coffee, ratings):
        now = timezone.now()
        reviews = []
        for index, rating in enumerate(ratings):
            user = User.objects.create_user(
                email=f'taster{index}-{coffee.id.hex[:6]}@example.com',
                password='TestPass123!',
                display_name=f'Taster {index}',
            )
            review = Review.objects.create(
                coffee=coffee,
                user=user,
                rating=Decimal(str(rating)),
                content=f'Review number {index}',
                brewing_method='Espresso',
            )
            created_at = now - timedelta(minutes=len(ratings) - index)
            Review.objects.filter(id=review.id).update(created_at=created_at)
            review.created_at = created_at
            reviews.append(review)
        return reviews

    return _make
