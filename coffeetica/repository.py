"""Repository clients for reviews, coffees and the signed-in account."""

from dataclasses import dataclass
from typing import Optional

import structlog

from .exceptions import MissingCredentialError, NotFoundError, ValidationError
from .forms import ReviewForm
from .http import ApiClient
from .models import CoffeeDetails, Review, ReviewPage, SessionUser
from .session import SessionProvider

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class FeedQuery:
    """
    A review feed request. Exactly one of ``coffee_id``/``user_id`` is set.

    ``page`` is 0-based, as the backend expects it.
    """

    coffee_id: Optional[str] = None
    user_id: Optional[str] = None
    page: int = 0
    size: int = 10
    sort_by: str = 'createdAt'
    direction: str = 'desc'

    def to_params(self) -> dict:
        params = {
            'page': self.page,
            'size': self.size,
            'sortBy': self.sort_by,
            'direction': self.direction,
        }
        if self.coffee_id is not None:
            params['coffeeId'] = self.coffee_id
        if self.user_id is not None:
            params['userId'] = self.user_id
        return params


class ReviewRepositoryClient:
    """
    Review endpoint operations.

    ``fetch_mine``, ``create``, ``update`` and ``delete`` read the credential
    from the session provider and fail with MissingCredentialError before any
    request when there is none. ``list_reviews`` is public.
    """

    def __init__(self, api: ApiClient, session: SessionProvider):
        self.api = api
        self.session = session

    def _credential(self) -> str:
        credential = self.session.credential
        if not credential:
            raise MissingCredentialError('Sign in to manage your review.')
        return credential

    async def fetch_mine(self, coffee_id: str) -> Optional[Review]:
        """
        The caller's own review for a coffee.

        Returns:
            The review, or None when the caller has not reviewed the coffee
        """
        credential = self._credential()
        try:
            data = await self.api.arequest(
                'GET', '/reviews/user/', credential=credential, params={'coffeeId': coffee_id}
            )
        except NotFoundError:
            return None
        if not data:
            return None
        return Review.from_api(data)

    async def create(self, coffee_id: str, form: ReviewForm) -> Review:
        """
        Raises:
            ValidationError: Form is incomplete or the backend rejected it
            ConflictError: The caller already reviewed this coffee
            AuthError: Credential missing or rejected
            TransientError: Network or server failure
        """
        credential = self._credential()
        cleaned = form.clean()
        data = await self.api.arequest(
            'POST', '/reviews/', credential=credential, json=cleaned.to_payload(coffee_id)
        )
        review = Review.from_api(data)
        logger.info('review_created', review_id=review.id, coffee_id=coffee_id)
        return review

    async def update(self, review: Review, coffee_id: str, form: ReviewForm) -> Review:
        """Replace the mutable fields of ``review``. The coffee cannot change."""
        credential = self._credential()
        if str(coffee_id) != review.coffee_id:
            raise ValidationError(
                'A review cannot be moved to another coffee.',
                errors={'coffeeId': ['Coffee does not match the reviewed coffee.']},
            )
        cleaned = form.clean()
        data = await self.api.arequest(
            'PUT', f'/reviews/{review.id}/', credential=credential,
            json=cleaned.to_payload(coffee_id),
        )
        updated = Review.from_api(data)
        logger.info('review_updated', review_id=updated.id, coffee_id=coffee_id)
        return updated

    async def delete(self, review_id: str) -> None:
        """Delete a review. A review that is already gone counts as deleted."""
        credential = self._credential()
        try:
            await self.api.arequest('DELETE', f'/reviews/{review_id}/', credential=credential)
        except NotFoundError:
            logger.info('review_already_deleted', review_id=review_id)
            return
        logger.info('review_deleted', review_id=review_id)

    async def list_reviews(self, query: FeedQuery) -> ReviewPage:
        data = await self.api.arequest('GET', '/reviews/', params=query.to_params())
        return ReviewPage.from_api(data or {})


class CoffeeClient:
    def __init__(self, api: ApiClient):
        self.api = api

    async def get_details(self, coffee_id: str) -> CoffeeDetails:
        """Coffee details with the backend-computed rating aggregate."""
        data = await self.api.arequest('GET', f'/coffees/{coffee_id}/')
        return CoffeeDetails.from_api(data)


class AccountClient:
    """Signs a session in and out against the auth endpoints."""

    def __init__(self, api: ApiClient, session: SessionProvider):
        self.api = api
        self.session = session

    async def fetch_current_user(self, credential: str) -> SessionUser:
        data = await self.api.arequest('GET', '/auth/me/', credential=credential)
        return SessionUser.from_api(data)

    async def sign_in_with_token(self, credential: str) -> SessionUser:
        """
        Adopt an existing access token.

        The session is signed out again if the token is not accepted.
        """
        try:
            user = await self.fetch_current_user(credential)
        except Exception:
            self.session.sign_out()
            raise
        self.session.sign_in(credential, user)
        return user

    async def login(self, email: str, password: str) -> SessionUser:
        data = await self.api.arequest(
            'POST', '/auth/login/', json={'email': email, 'password': password}
        )
        return await self.sign_in_with_token(data['tokens']['access'])

    def logout(self) -> None:
        self.session.sign_out()
