"""Services for reviews business logic."""

from .exceptions import (
    ReviewsServiceError,
    ReviewNotFoundError,
    DuplicateReviewError,
    InvalidRatingError,
    InvalidReviewError,
    CoffeeNotFoundError,
    CoffeeMismatchError,
    UnauthorizedReviewActionError,
    InvalidFeedQueryError,
)
from .review_management import (
    create_review,
    get_review_by_id,
    get_user_review_for_coffee,
    update_review,
    delete_review,
)
from .review_feed import (
    ReviewFeedPage,
    get_review_feed,
)

__all__ = [
    # Exceptions
    'ReviewsServiceError',
    'ReviewNotFoundError',
    'DuplicateReviewError',
    'InvalidRatingError',
    'InvalidReviewError',
    'CoffeeNotFoundError',
    'CoffeeMismatchError',
    'UnauthorizedReviewActionError',
    'InvalidFeedQueryError',
    # Review Management
    'create_review',
    'get_review_by_id',
    'get_user_review_for_coffee',
    'update_review',
    'delete_review',
    # Review Feed
    'ReviewFeedPage',
    'get_review_feed',
]
