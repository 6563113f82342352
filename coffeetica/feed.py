"""
Paginated, sortable review feed for one coffee or one user.

Pages are 1-based here and 0-based on the wire. Only the response to the
latest query is applied; anything older is dropped when it arrives.
"""

import enum
from dataclasses import dataclass
from typing import Optional

import structlog

from . import conf
from .capabilities import MODERATOR, requires
from .exceptions import ReviewClientError
from .models import Review, ReviewPage
from .repository import FeedQuery, ReviewRepositoryClient
from .session import SessionProvider

logger = structlog.get_logger(__name__)


class SortKey(enum.Enum):
    NEWEST = ('createdAt', 'desc')
    RATING_DESC = ('rating', 'desc')
    RATING_ASC = ('rating', 'asc')

    @property
    def sort_by(self) -> str:
        return self.value[0]

    @property
    def direction(self) -> str:
        return self.value[1]


@dataclass(frozen=True)
class FeedItem:
    review: Review
    label: str


class ReviewFeed:
    """
    Reviews of a coffee (labelled by author) or by a user (labelled by coffee).
    """

    def __init__(self, repository: ReviewRepositoryClient, session: SessionProvider, *,
                 coffee_id: Optional[str] = None, user_id: Optional[str] = None,
                 page_size: Optional[int] = None, sort: SortKey = SortKey.NEWEST):
        _check_subject(coffee_id, user_id)
        self.repository = repository
        self.session = session
        self.coffee_id = None if coffee_id is None else str(coffee_id)
        self.user_id = None if user_id is None else str(user_id)
        self.page_size = page_size or conf.FEED_PAGE_SIZE
        self.sort = sort
        self.page = 1

        self.items: list[FeedItem] = []
        self._requested: Optional[FeedQuery] = None
        self.total_elements = 0
        self.total_pages = 0
        self.error: Optional[str] = None

    @property
    def query(self) -> FeedQuery:
        """The query behind the items currently shown."""
        return self._query_for(self.page, self.sort)

    def _query_for(self, page: int, sort: SortKey) -> FeedQuery:
        return FeedQuery(
            coffee_id=self.coffee_id,
            user_id=self.user_id,
            page=page - 1,
            size=self.page_size,
            sort_by=sort.sort_by,
            direction=sort.direction,
        )

    async def load(self) -> bool:
        """
        Fetch the current page again (also used to retry).

        Returns:
            True if the response was applied, False if it failed or was superseded
        """
        return await self._fetch(self.page, self.sort)

    async def set_sort(self, sort: SortKey) -> bool:
        """Change ordering; always goes back to the first page."""
        return await self._fetch(1, sort)

    async def set_page(self, page: int) -> bool:
        if page < 1:
            raise ValueError('Pages start at 1')
        return await self._fetch(page, self.sort)

    async def _fetch(self, page_number: int, sort: SortKey) -> bool:
        # page and sort only change once their page has arrived
        query = self._query_for(page_number, sort)
        self._requested = query
        try:
            page = await self.repository.list_reviews(query)
        except ReviewClientError as exc:
            if query == self._requested:
                self.error = exc.message
            return False

        if query != self._requested:
            logger.debug('stale_feed_page_discarded', page=query.page, sort=query.sort_by)
            return False

        self.page = page_number
        self.sort = sort
        self._apply(page)
        return True

    async def set_subject(self, *, coffee_id: Optional[str] = None,
                          user_id: Optional[str] = None) -> bool:
        _check_subject(coffee_id, user_id)
        self.coffee_id = None if coffee_id is None else str(coffee_id)
        self.user_id = None if user_id is None else str(user_id)
        self.page = 1
        self.items = []
        self.total_elements = 0
        self.total_pages = 0
        return await self.load()

    @requires(MODERATOR)
    async def remove(self, review_id: str) -> bool:
        """Moderator removal of someone's review, then refresh the current page."""
        try:
            await self.repository.delete(review_id)
        except ReviewClientError as exc:
            self.error = exc.message
            return False
        logger.info('review_moderated', review_id=review_id, moderator=self._moderator_id())
        await self.load()
        if not self.items and self.page > 1:
            # Removed the last review of the last page
            await self.set_page(self.page - 1)
        return True

    def on_capability_denied(self, capability) -> None:
        self.error = 'You do not have permission to remove reviews.'

    def dismiss_error(self) -> None:
        self.error = None

    def showing_range(self) -> tuple[int, int, int]:
        """(first, last, total) for a "Showing X to Y of Z" line; 1-based, inclusive."""
        if not self.items:
            return (0, 0, self.total_elements)
        first = (self.page - 1) * self.page_size + 1
        return (first, first + len(self.items) - 1, self.total_elements)

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    def _apply(self, page: ReviewPage) -> None:
        self.items = [FeedItem(review=review, label=self._label(review)) for review in page.content]
        self.total_elements = page.total_elements
        self.total_pages = page.total_pages
        self.error = None

    def _label(self, review: Review) -> str:
        if self.coffee_id is not None:
            return review.user_name
        return review.coffee_name

    def _moderator_id(self) -> Optional[str]:
        user = self.session.current_user
        return user.id if user else None


def _check_subject(coffee_id, user_id) -> None:
    if (coffee_id is None) == (user_id is None):
        raise ValueError('A review feed needs exactly one of coffee_id or user_id')
