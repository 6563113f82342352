import pytest
from datetime import timedelta
from decimal import Decimal
from django.utils import timezone
from rest_framework.test import APIClient
from apps.accounts.models import User
from apps.coffees.models import Coffee, Roastery
from apps.reviews.models import Review


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def roastery(db):
    return Roastery.objects.create(
        name='Doubleshot',
        location='Prague',
        founding_year=2008,
        website_url='https://example.com',
    )


@pytest.fixture
def coffee(db, roastery):
    return Coffee.objects.create(
        name='Kenya Gichathaini',
        roastery=roastery,
        country_of_origin='Kenya',
        region='africa',
        roast_level='light',
        flavor_profile='berry',
        flavor_notes=['blackcurrant', 'grapefruit'],
        processing_method='Washed',
        production_year=2024,
    )


@pytest.fixture
def unrated_coffee(db, roastery):
    return Coffee.objects.create(
        name='Peru Cajamarca',
        roastery=roastery,
        country_of_origin='Peru',
        processing_method='Washed',
    )


@pytest.fixture
def inactive_coffee(db, roastery):
    return Coffee.objects.create(
        name='Old Lot',
        roastery=roastery,
        country_of_origin='Kenya',
        processing_method='Washed',
        is_active=False,
    )


@pytest.fixture
def rate(db):
    """
    Factory: add reviews with the given ratings to a coffee, oldest first,
    each by a different user.
    """
    def _rate(coffee, ratings):
        now = timezone.now()
        reviews = []
        for index, rating in enumerate(ratings):
            user = User.objects.create_user(
                email=f'rater{index}-{coffee.id.hex[:6]}@example.com',
                password='TestPass123!',
                display_name=f'Rater {index}',
            )
            review = Review.objects.create(
                coffee=coffee,
                user=user,
                rating=Decimal(str(rating)),
                content=f'Cup {index}',
                brewing_method='V60',
            )
            Review.objects.filter(id=review.id).update(
                created_at=now - timedelta(hours=len(ratings) - index)
            )
            reviews.append(review)
        return reviews

    return _rate
