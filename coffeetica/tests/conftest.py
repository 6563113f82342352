import asyncio
import uuid
from datetime import datetime, timedelta, timezone

import pytest

from coffeetica.exceptions import ConflictError, NotFoundError, ValidationError
from coffeetica.models import Review, ReviewPage, SessionUser
from coffeetica.session import SessionProvider


USER_7 = SessionUser(id='user-7', email='seven@example.com', display_name='Seven', roles=frozenset({'User'}))
USER_8 = SessionUser(id='user-8', email='eight@example.com', display_name='Eight', roles=frozenset({'User'}))
ADMIN = SessionUser(id='admin-1', email='admin@example.com', display_name='Admin', roles=frozenset({'User', 'Admin'}))


def make_review(*, coffee_id='coffee-42', user=USER_7, rating=4.5, content='Bright and citrusy',
                minutes_ago=0, coffee_name=None, **extra):
    return Review(
        id=extra.pop('id', str(uuid.uuid4())),
        coffee_id=coffee_id,
        coffee_name=coffee_name or f'Coffee {coffee_id}',
        user_id=user.id,
        user_name=user.display_name,
        rating=rating,
        content=content,
        brewing_method=extra.pop('brewing_method', 'Pour Over'),
        brewing_description=extra.pop('brewing_description', '3min bloom'),
        created_at=datetime.now(timezone.utc) - timedelta(minutes=minutes_ago),
    )


async def drain():
    """Run every other pending task on the loop to completion."""
    current = asyncio.current_task()
    pending = [task for task in asyncio.all_tasks() if task is not current]
    if pending:
        await asyncio.gather(*pending)


class FakeReviewRepository:
    """
    In-memory stand-in for ReviewRepositoryClient.

    ``hold(name)`` makes the next call of that method wait until the returned
    event is set; ``fail(name, exc)`` makes the next call raise.
    """

    def __init__(self, session):
        self.session = session
        self.reviews = {}
        self.calls = []
        self._holds = {}
        self._failures = {}

    def hold(self, name):
        event = asyncio.Event()
        self._holds.setdefault(name, []).append(event)
        return event

    def fail(self, name, exc):
        self._failures[name] = exc

    def add(self, review):
        self.reviews[review.id] = review
        return review

    async def _enter(self, name, *args):
        self.calls.append((name,) + args)
        holds = self._holds.get(name)
        if holds:
            await holds.pop(0).wait()
        exc = self._failures.pop(name, None)
        if exc is not None:
            raise exc

    def _mine(self, coffee_id):
        user = self.session.current_user
        for review in self.reviews.values():
            if review.coffee_id == coffee_id and user and review.user_id == user.id:
                return review
        return None

    async def fetch_mine(self, coffee_id):
        # Snapshot who is asking before any hold, like a request in flight
        user = self.session.current_user
        await self._enter('fetch_mine', coffee_id)
        for review in self.reviews.values():
            if review.coffee_id == coffee_id and user and review.user_id == user.id:
                return review
        return None

    async def create(self, coffee_id, form):
        cleaned = form.clean()
        await self._enter('create', coffee_id)
        if self._mine(coffee_id) is not None:
            raise ConflictError('You have already reviewed this coffee', status_code=409)
        user = self.session.current_user
        review = Review(
            id=str(uuid.uuid4()),
            coffee_id=coffee_id,
            coffee_name=f'Coffee {coffee_id}',
            user_id=user.id,
            user_name=user.display_name,
            rating=float(cleaned.rating),
            content=cleaned.content,
            brewing_method=cleaned.brewing_method,
            brewing_description=cleaned.brewing_description or None,
            created_at=datetime.now(timezone.utc),
        )
        return self.add(review)

    async def update(self, review, coffee_id, form):
        if coffee_id != review.coffee_id:
            raise ValidationError('Coffee mismatch', errors={'coffeeId': ['mismatch']})
        cleaned = form.clean()
        await self._enter('update', review.id)
        if review.id not in self.reviews:
            raise NotFoundError('Review not found', status_code=404)
        updated = Review(
            id=review.id,
            coffee_id=review.coffee_id,
            coffee_name=review.coffee_name,
            user_id=review.user_id,
            user_name=review.user_name,
            rating=float(cleaned.rating),
            content=cleaned.content,
            brewing_method=cleaned.brewing_method,
            brewing_description=cleaned.brewing_description or None,
            created_at=review.created_at,
        )
        return self.add(updated)

    async def delete(self, review_id):
        await self._enter('delete', review_id)
        self.reviews.pop(review_id, None)

    async def list_reviews(self, query):
        await self._enter('list_reviews', query)
        if query.coffee_id is not None:
            matching = [r for r in self.reviews.values() if r.coffee_id == query.coffee_id]
        else:
            matching = [r for r in self.reviews.values() if r.user_id == query.user_id]

        if query.sort_by == 'rating':
            matching.sort(key=lambda r: (r.rating, r.created_at), reverse=query.direction == 'desc')
        else:
            matching.sort(key=lambda r: r.created_at, reverse=True)

        start = query.page * query.size
        total = len(matching)
        return ReviewPage(
            content=tuple(matching[start:start + query.size]),
            total_elements=total,
            total_pages=(total + query.size - 1) // query.size,
            number=query.page,
            size=query.size,
        )

    def count(self, name):
        return sum(1 for call in self.calls if call[0] == name)


@pytest.fixture
def session():
    """A session signed in as user 7."""
    provider = SessionProvider()
    provider.sign_in('token-7', USER_7)
    return provider


@pytest.fixture
def anonymous_session():
    return SessionProvider()


@pytest.fixture
def repository(session):
    return FakeReviewRepository(session)
