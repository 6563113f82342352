"""Immutable snapshots of backend resources as seen by the client."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Optional

from . import conf
from .ratings import average, round_to_half_star


def _parse_timestamp(value) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    # DRF renders UTC as a trailing "Z"
    return datetime.fromisoformat(value.replace('Z', '+00:00'))


@dataclass(frozen=True)
class Review:
    """A persisted review. Held by the client as a read-only snapshot."""

    id: str
    coffee_id: str
    coffee_name: str
    user_id: str
    user_name: str
    rating: float
    content: str
    brewing_method: str
    brewing_description: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_api(cls, data: dict) -> 'Review':
        return cls(
            id=str(data['id']),
            coffee_id=str(data['coffeeId']),
            coffee_name=data.get('coffeeName', ''),
            user_id=str(data['userId']),
            user_name=data.get('userName', ''),
            rating=float(data['rating']),
            content=data.get('content', ''),
            brewing_method=data.get('brewingMethod', ''),
            brewing_description=data.get('brewingDescription'),
            created_at=_parse_timestamp(data.get('createdAt')),
        )


@dataclass(frozen=True)
class ReviewPage:
    """One page of a review feed. ``number`` is 0-based, as the backend sends it."""

    content: tuple = ()
    total_elements: int = 0
    total_pages: int = 0
    number: int = 0
    size: int = 0

    @classmethod
    def from_api(cls, data: dict) -> 'ReviewPage':
        return cls(
            content=tuple(Review.from_api(item) for item in data.get('content', [])),
            total_elements=data.get('totalElements', 0),
            total_pages=data.get('totalPages', 0),
            number=data.get('number', 0),
            size=data.get('size', 0),
        )


@dataclass(frozen=True)
class CoffeeAggregate:
    average_rating: float = 0.0
    total_reviews_count: int = 0
    latest_reviews: tuple = ()

    @classmethod
    def from_reviews(cls, reviews: Iterable[Review], *, latest: Optional[int] = None) -> 'CoffeeAggregate':
        """
        Derive the aggregate locally from a complete list of reviews.

        Uses the same rounding as the backend, so the result matches the
        aggregate embedded in coffee details for the same reviews.
        """
        if latest is None:
            latest = conf.LATEST_REVIEWS_LIMIT
        reviews = list(reviews)
        newest_first = sorted(
            reviews,
            key=lambda r: r.created_at.timestamp() if r.created_at else float('-inf'),
            reverse=True,
        )
        return cls(
            average_rating=average(r.rating for r in reviews),
            total_reviews_count=len(reviews),
            latest_reviews=tuple(newest_first[:latest]),
        )

    @classmethod
    def from_api(cls, data: dict) -> 'CoffeeAggregate':
        """Consume the aggregate embedded in coffee details (or a catalog entry)."""
        return cls(
            average_rating=round_to_half_star(data.get('averageRating') or 0),
            total_reviews_count=data.get('totalReviewsCount', 0),
            latest_reviews=tuple(
                Review.from_api(item) for item in data.get('latestReviews', [])
            ),
        )


@dataclass(frozen=True)
class CoffeeDetails:
    id: str
    name: str
    roastery_name: str = ''
    country_of_origin: str = ''
    image_url: str = ''
    aggregate: CoffeeAggregate = field(default_factory=CoffeeAggregate)

    @classmethod
    def from_api(cls, data: dict) -> 'CoffeeDetails':
        roastery = data.get('roastery') or {}
        return cls(
            id=str(data['id']),
            name=data.get('name', ''),
            roastery_name=roastery.get('name', ''),
            country_of_origin=data.get('countryOfOrigin', ''),
            image_url=data.get('imageUrl') or '',
            aggregate=CoffeeAggregate.from_api(data),
        )


@dataclass(frozen=True)
class SessionUser:
    id: str
    email: str = ''
    display_name: str = ''
    roles: frozenset = frozenset()

    @classmethod
    def from_api(cls, data: dict) -> 'SessionUser':
        return cls(
            id=str(data['id']),
            email=data.get('email', ''),
            display_name=data.get('displayName', ''),
            roles=frozenset(data.get('roles', [])),
        )
