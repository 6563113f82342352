"""Rating aggregation for coffees, computed on every read."""

from dataclasses import dataclass, field
from typing import List
from uuid import UUID

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError

from coffeetica.ratings import average
from ..models import Coffee
from .exceptions import CoffeeNotFoundError


@dataclass
class CoffeeAggregate:
    average_rating: float = 0.0
    total_reviews_count: int = 0
    latest_reviews: List = field(default_factory=list)


def get_coffee_aggregate(*, coffee: Coffee, latest_limit: int = None) -> CoffeeAggregate:
    """
    Average, count and newest reviews for a coffee.

    The average goes through coffeetica.ratings.average, the same function
    the client uses, so both sides agree on the rounding.

    Args:
        coffee: Coffee instance
        latest_limit: How many of the newest reviews to include
            (defaults to settings.LATEST_REVIEWS_LIMIT)

    Returns:
        CoffeeAggregate
    """
    if latest_limit is None:
        latest_limit = settings.LATEST_REVIEWS_LIMIT

    reviews = coffee.reviews.all()
    ratings = list(reviews.values_list('rating', flat=True))
    latest = list(
        reviews
        .select_related('user', 'coffee')
        .order_by('-created_at')[:latest_limit]
    )

    return CoffeeAggregate(
        average_rating=average(ratings),
        total_reviews_count=len(ratings),
        latest_reviews=latest,
    )


def get_coffee_details(*, coffee_id: UUID) -> Coffee:
    """
    Get an active coffee with its rating aggregate attached.

    The returned instance carries ``average_rating``, ``total_reviews_count``
    and ``latest_reviews`` attributes.

    Raises:
        CoffeeNotFoundError: If coffee doesn't exist or is inactive
    """
    try:
        coffee = (
            Coffee.objects
            .select_related('roastery')
            .get(id=coffee_id, is_active=True)
        )
    except (Coffee.DoesNotExist, DjangoValidationError):
        raise CoffeeNotFoundError(f"Coffee {coffee_id} not found")

    aggregate = get_coffee_aggregate(coffee=coffee)
    coffee.average_rating = aggregate.average_rating
    coffee.total_reviews_count = aggregate.total_reviews_count
    coffee.latest_reviews = aggregate.latest_reviews
    return coffee


def get_coffee_by_id(*, coffee_id: UUID) -> Coffee:
    """
    Raises:
        CoffeeNotFoundError: If coffee doesn't exist or is inactive
    """
    try:
        return Coffee.objects.get(id=coffee_id, is_active=True)
    except (Coffee.DoesNotExist, DjangoValidationError):
        raise CoffeeNotFoundError(f"Coffee {coffee_id} not found")
