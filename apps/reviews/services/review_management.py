"""Review management service - CRUD operations for reviews."""

from decimal import Decimal
from typing import Optional
from uuid import UUID

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction, IntegrityError
import structlog

from coffeetica.ratings import is_half_star
from apps.accounts.models import User
from apps.accounts.permissions import is_moderator
from apps.coffees.services import get_coffee_by_id, CoffeeNotFoundError as CoffeeLookupError
from apps.reviews.models import Review
from .exceptions import (
    ReviewNotFoundError,
    DuplicateReviewError,
    InvalidRatingError,
    InvalidReviewError,
    CoffeeNotFoundError,
    CoffeeMismatchError,
    UnauthorizedReviewActionError,
)

logger = structlog.get_logger(__name__)

BREWING_METHOD_MAX_LENGTH = 50
BREWING_DESCRIPTION_MAX_LENGTH = 200


def _validate_fields(*, rating, content, brewing_method, brewing_description):
    if not is_half_star(rating):
        raise InvalidRatingError("Rating must be between 0.5 and 5 in steps of 0.5")
    if not (content or '').strip():
        raise InvalidReviewError("Review content cannot be empty")
    if not (brewing_method or '').strip():
        raise InvalidReviewError("Brewing method is required")
    if len(brewing_method) > BREWING_METHOD_MAX_LENGTH:
        raise InvalidReviewError(
            f"Brewing method cannot exceed {BREWING_METHOD_MAX_LENGTH} characters"
        )
    if brewing_description and len(brewing_description) > BREWING_DESCRIPTION_MAX_LENGTH:
        raise InvalidReviewError(
            f"Brewing description cannot exceed {BREWING_DESCRIPTION_MAX_LENGTH} characters"
        )


@transaction.atomic
def create_review(
    *,
    user: User,
    coffee_id: UUID,
    rating: Decimal,
    content: str,
    brewing_method: str,
    brewing_description: Optional[str] = None
) -> Review:
    """
    Create the user's review for a coffee.

    A user has at most one review per coffee. The existence check gives a
    clear error; the unique constraint catches concurrent creates.

    Args:
        user: User creating the review
        coffee_id: UUID of coffee being reviewed
        rating: 0.5 to 5 in half-star steps
        content: Review text (required)
        brewing_method: How the coffee was brewed (required, max 50 chars)
        brewing_description: Optional brewing notes (max 200 chars)

    Returns:
        Created Review instance

    Raises:
        InvalidRatingError: If rating is not a half-star value in range
        InvalidReviewError: If a required text field is blank or too long
        CoffeeNotFoundError: If coffee doesn't exist or is inactive
        DuplicateReviewError: If user already reviewed this coffee
    """
    _validate_fields(
        rating=rating,
        content=content,
        brewing_method=brewing_method,
        brewing_description=brewing_description,
    )

    try:
        coffee = get_coffee_by_id(coffee_id=coffee_id)
    except CoffeeLookupError:
        raise CoffeeNotFoundError("Coffee not found or inactive")

    if Review.objects.filter(user=user, coffee=coffee).exists():
        raise DuplicateReviewError(
            "You have already reviewed this coffee. Please update your existing review instead."
        )

    try:
        with transaction.atomic():
            review = Review.objects.create(
                coffee=coffee,
                user=user,
                rating=rating,
                content=content,
                brewing_method=brewing_method,
                brewing_description=brewing_description or None,
            )
    except IntegrityError:
        # Database unique constraint caught a concurrent duplicate
        raise DuplicateReviewError("You have already reviewed this coffee")

    logger.info(
        'review_created',
        review_id=str(review.id),
        coffee_id=str(coffee.id),
        user_id=str(user.id),
        rating=float(review.rating),
    )
    return review


def get_review_by_id(*, review_id: UUID) -> Review:
    """
    Raises:
        ReviewNotFoundError: If review doesn't exist
    """
    try:
        return Review.objects.select_related('user', 'coffee').get(id=review_id)
    except (Review.DoesNotExist, DjangoValidationError):
        raise ReviewNotFoundError("Review not found")


def get_user_review_for_coffee(*, user: User, coffee_id: UUID) -> Optional[Review]:
    """Return the user's review of a coffee, or None if they have not reviewed it."""
    return (
        Review.objects
        .select_related('user', 'coffee')
        .filter(user=user, coffee_id=coffee_id)
        .first()
    )


@transaction.atomic
def update_review(
    *,
    review_id: UUID,
    user: User,
    coffee_id: UUID,
    rating: Decimal,
    content: str,
    brewing_method: str,
    brewing_description: Optional[str] = None
) -> Review:
    """
    Replace the rating and text of an existing review.

    Only the author can update. The coffee and creation time never change;
    ``coffee_id`` must name the coffee the review already belongs to.

    Raises:
        ReviewNotFoundError: If review doesn't exist
        UnauthorizedReviewActionError: If user is not the author
        CoffeeMismatchError: If coffee_id differs from the review's coffee
        InvalidRatingError: If rating is not a half-star value in range
        InvalidReviewError: If a required text field is blank or too long
    """
    try:
        review = (
            Review.objects
            .select_for_update()
            .get(id=review_id)
        )
    except (Review.DoesNotExist, DjangoValidationError):
        raise ReviewNotFoundError("Review not found")

    if review.user_id != user.id:
        raise UnauthorizedReviewActionError("You can only update your own reviews")

    if str(review.coffee_id) != str(coffee_id):
        raise CoffeeMismatchError("Coffee ID does not match the existing review")

    _validate_fields(
        rating=rating,
        content=content,
        brewing_method=brewing_method,
        brewing_description=brewing_description,
    )

    review.rating = rating
    review.content = content
    review.brewing_method = brewing_method
    review.brewing_description = brewing_description or None
    review.save(update_fields=[
        'rating', 'content', 'brewing_method', 'brewing_description', 'updated_at',
    ])

    logger.info('review_updated', review_id=str(review.id), user_id=str(user.id))
    return Review.objects.select_related('user', 'coffee').get(id=review.id)


@transaction.atomic
def delete_review(*, review_id: UUID, user: User) -> None:
    """
    Delete a review.

    The author or a moderator ("Admin"/"SuperAdmin" role) may delete.

    Raises:
        ReviewNotFoundError: If review doesn't exist
        UnauthorizedReviewActionError: If user is neither author nor moderator
    """
    try:
        review = (
            Review.objects
            .select_for_update()
            .get(id=review_id)
        )
    except (Review.DoesNotExist, DjangoValidationError):
        raise ReviewNotFoundError("Review not found")

    is_author = review.user_id == user.id
    if not is_author and not is_moderator(user):
        raise UnauthorizedReviewActionError("You can only delete your own reviews")

    review.delete()
    logger.info(
        'review_deleted',
        review_id=str(review_id),
        user_id=str(user.id),
        moderated=not is_author,
    )
