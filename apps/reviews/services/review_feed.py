"""Paginated review feed for one coffee or one user."""

from dataclasses import dataclass, field
from typing import List, Optional
from uuid import UUID

from django.conf import settings
from django.core.paginator import Paginator

from apps.reviews.models import Review
from .exceptions import InvalidFeedQueryError

SORT_FIELDS = {
    'createdAt': 'created_at',
    'rating': 'rating',
}


@dataclass
class ReviewFeedPage:
    content: List[Review] = field(default_factory=list)
    total_elements: int = 0
    total_pages: int = 0
    number: int = 0
    size: int = 0


def _ordering(sort_by: str, direction: str) -> list:
    if sort_by not in SORT_FIELDS:
        raise InvalidFeedQueryError(f"Cannot sort reviews by '{sort_by}'")
    if direction not in ('asc', 'desc'):
        raise InvalidFeedQueryError(f"Unknown sort direction '{direction}'")

    # Newest-first regardless of direction when sorting by date
    if sort_by == 'createdAt':
        return ['-created_at', '-id']

    prefix = '-' if direction == 'desc' else ''
    return [f'{prefix}rating', '-created_at', '-id']


def get_review_feed(
    *,
    coffee_id: Optional[UUID] = None,
    user_id: Optional[UUID] = None,
    page: int = 0,
    size: Optional[int] = None,
    sort_by: str = 'createdAt',
    direction: str = 'desc'
) -> ReviewFeedPage:
    """
    One page of reviews for a coffee or by a user.

    Args:
        coffee_id: Reviews of this coffee
        user_id: Reviews written by this user
        page: 0-based page number
        size: Page size (defaults to settings.REVIEW_FEED_DEFAULT_SIZE)
        sort_by: 'createdAt' (always newest first) or 'rating'
        direction: 'asc' or 'desc', applies to rating sort

    Returns:
        ReviewFeedPage. Empty when no subject is given or the page is past the end.

    Raises:
        InvalidFeedQueryError: If both subjects are given or sort is unknown
    """
    if coffee_id and user_id:
        raise InvalidFeedQueryError("Filter by coffee or by user, not both")
    if page < 0:
        raise InvalidFeedQueryError("Page must not be negative")

    size = size or settings.REVIEW_FEED_DEFAULT_SIZE
    ordering = _ordering(sort_by, direction)

    if not coffee_id and not user_id:
        return ReviewFeedPage(number=page, size=size)

    queryset = Review.objects.select_related('user', 'coffee')
    if coffee_id:
        queryset = queryset.filter(coffee_id=coffee_id)
    else:
        queryset = queryset.filter(user_id=user_id)

    paginator = Paginator(queryset.order_by(*ordering), size)
    total_elements = paginator.count
    total_pages = paginator.num_pages if total_elements else 0

    content = []
    if page < total_pages:
        content = list(paginator.page(page + 1).object_list)

    return ReviewFeedPage(
        content=content,
        total_elements=total_elements,
        total_pages=total_pages,
        number=page,
        size=size,
    )
