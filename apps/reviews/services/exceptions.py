"""Domain exceptions for reviews app."""


class ReviewsServiceError(Exception):
    """Base exception for all reviews service errors."""
    pass


class ReviewNotFoundError(ReviewsServiceError):
    pass


class DuplicateReviewError(ReviewsServiceError):
    """User already reviewed this coffee."""
    pass


class InvalidRatingError(ReviewsServiceError):
    """Rating must be 0.5 to 5 in half-star steps."""
    pass


class InvalidReviewError(ReviewsServiceError):
    """Required text field is blank or too long."""
    pass


class CoffeeNotFoundError(ReviewsServiceError):
    """Coffee does not exist or is inactive."""
    pass


class CoffeeMismatchError(ReviewsServiceError):
    """Update names a different coffee than the review belongs to."""
    pass


class UnauthorizedReviewActionError(ReviewsServiceError):
    """User cannot modify this review."""
    pass


class InvalidFeedQueryError(ReviewsServiceError):
    pass
