"""Error taxonomy of the review client."""

from typing import Optional


class ReviewClientError(Exception):
    """Base exception for all review client errors."""

    def __init__(self, message: str = '', *, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ValidationError(ReviewClientError):
    """Input rejected by the form or by the backend (recoverable, shown inline)."""

    def __init__(self, message: str = 'Invalid review', *, errors: Optional[dict] = None,
                 status_code: Optional[int] = None):
        super().__init__(message, status_code=status_code)
        self.errors = errors or {}


class ConflictError(ReviewClientError):
    """The user already has a review for this coffee."""
    pass


class AuthError(ReviewClientError):
    """Credential is missing, expired or rejected."""
    pass


class MissingCredentialError(AuthError):
    """No credential in the session; raised before any request is sent."""
    pass


class NotFoundError(ReviewClientError):
    """Requested resource does not exist."""
    pass


class TransientError(ReviewClientError):
    """Network failure or server error; the user may retry the same action."""
    pass
