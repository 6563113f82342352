"""
Review lifecycle controller.

Owns the one-review-per-user-per-coffee state machine for a single coffee
view: whether to offer sign-in, a create form, the user's review with
edit/delete, or an edit form.

    UNAUTHENTICATED --sign in--> LOADING
    LOADING --not found--> NO_REVIEW        LOADING --found--> VIEWING
    NO_REVIEW --create--> VIEWING           VIEWING --edit--> EDITING
    EDITING --update / cancel--> VIEWING    VIEWING --delete--> NO_REVIEW
    any --sign out--> UNAUTHENTICATED
"""

import asyncio
import enum
from typing import Optional

import structlog

from .capabilities import AUTHENTICATED, requires
from .exceptions import (
    AuthError,
    ConflictError,
    NotFoundError,
    ReviewClientError,
    ValidationError,
)
from .forms import ReviewForm, empty_form
from .models import Review
from .repository import ReviewRepositoryClient
from .session import SessionProvider

logger = structlog.get_logger(__name__)


class LifecycleState(enum.Enum):
    UNAUTHENTICATED = 'unauthenticated'
    LOADING = 'loading'
    NO_REVIEW = 'no_review'
    VIEWING = 'viewing'
    EDITING = 'editing'


class ReviewLifecycleController:
    """
    State machine for the signed-in user's review of one coffee.

    Action methods never raise for expected failures. Validation problems end
    up in ``form_errors``, network problems in ``error`` (dismissible), and
    authentication problems move the controller to UNAUTHENTICATED.
    """

    def __init__(self, coffee_id: str, *, session: SessionProvider,
                 repository: ReviewRepositoryClient):
        self.session = session
        self.repository = repository
        self.coffee_id = str(coffee_id)

        self.state = (
            LifecycleState.LOADING if session.is_authenticated
            else LifecycleState.UNAUTHENTICATED
        )
        self.review: Optional[Review] = None
        self.form: Optional[ReviewForm] = None
        self.form_errors: dict = {}
        self.error: Optional[str] = None

        self._fetch_key = None
        self._mutating = False
        self._refresh_task: Optional[asyncio.Task] = None
        self._unsubscribe = session.subscribe(self._on_session_change)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def _current_key(self) -> tuple:
        return (self.coffee_id, self.session.epoch)

    async def load(self) -> None:
        """Fetch the user's review for the current coffee (also used to retry)."""
        if not self.session.is_authenticated:
            self._enter_unauthenticated()
            return

        key = self._current_key()
        self._fetch_key = key
        self.error = None
        self._set_state(LifecycleState.LOADING)

        try:
            review = await self.repository.fetch_mine(key[0])
        except AuthError:
            if self._is_current_fetch(key):
                self._enter_unauthenticated()
            return
        except ReviewClientError as exc:
            if self._is_current_fetch(key):
                self.error = exc.message
            return

        if not self._is_current_fetch(key):
            logger.debug('stale_fetch_discarded', coffee_id=key[0], current=self.coffee_id)
            return
        self._fetch_key = None

        if review is None:
            self._show_create_form()
        else:
            self._show_review(review)

    async def set_coffee(self, coffee_id: str) -> None:
        """Switch to another coffee; the previous coffee's review is dropped."""
        coffee_id = str(coffee_id)
        if coffee_id == self.coffee_id:
            return
        self.coffee_id = coffee_id
        self.review = None
        self.form = None
        self.form_errors = {}
        await self.load()

    def _is_current_fetch(self, key: tuple) -> bool:
        return key == self._fetch_key and key == self._current_key()

    def _on_session_change(self, authenticated: bool) -> None:
        if not authenticated:
            self._enter_unauthenticated()
            return

        # New user or new credential: whatever was shown belongs to the old one
        self.review = None
        self.form = None
        self.form_errors = {}
        self.error = None
        self._fetch_key = None
        self._set_state(LifecycleState.LOADING)
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No event loop: whoever owns the controller calls load()
            return
        self._refresh_task = loop.create_task(self.load())
        self._refresh_task.add_done_callback(self._log_refresh_failure)

    def _log_refresh_failure(self, task: asyncio.Task) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                'review_refresh_failed',
                coffee_id=self.coffee_id,
                error=str(exc),
                exc_info=exc,
            )

    # ------------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------------

    def start_editing(self) -> bool:
        if self.state is not LifecycleState.VIEWING:
            return False
        self.form = ReviewForm.from_review(self.review)
        self.form_errors = {}
        self._set_state(LifecycleState.EDITING)
        return True

    def cancel_editing(self) -> bool:
        """Back to VIEWING; whatever was typed into the edit form is thrown away."""
        if self.state is not LifecycleState.EDITING:
            return False
        self.form = None
        self.form_errors = {}
        self._set_state(LifecycleState.VIEWING)
        return True

    def update_form(self, **changes) -> None:
        if self.form is None:
            raise RuntimeError(f'No form is open in state {self.state.value}')
        self.form = self.form.copy(**changes)

    def dismiss_error(self) -> None:
        self.error = None

    @requires(AUTHENTICATED)
    async def submit(self, form: Optional[ReviewForm] = None) -> bool:
        """
        Create (NO_REVIEW) or update (EDITING) the review.

        Returns:
            True if the review was saved
        """
        form = form if form is not None else self.form
        if form is None:
            return False
        if self.state is LifecycleState.NO_REVIEW:
            return await self._run_mutation('create', self._create, form)
        if self.state is LifecycleState.EDITING:
            return await self._run_mutation('update', self._update, form)
        logger.info('submit_ignored', state=self.state.value, coffee_id=self.coffee_id)
        return False

    @requires(AUTHENTICATED)
    async def delete(self) -> bool:
        if self.state is not LifecycleState.VIEWING:
            logger.info('delete_ignored', state=self.state.value, coffee_id=self.coffee_id)
            return False
        return await self._run_mutation('delete', self._delete)

    def on_capability_denied(self, capability) -> None:
        self._enter_unauthenticated()

    def close(self) -> None:
        """Detach from the session; call when the view goes away."""
        self._unsubscribe()
        if self._refresh_task is not None and not self._refresh_task.done():
            self._refresh_task.cancel()

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def _run_mutation(self, name: str, operation, *args) -> bool:
        # One mutation at a time, so two creates can never race each other
        if self._mutating:
            logger.info('mutation_ignored', action=name, reason='another mutation in flight')
            return False

        self._mutating = True
        key = self._current_key()
        self.error = None
        try:
            return await operation(key, *args)
        except ValidationError as exc:
            if key == self._current_key():
                self.form_errors = exc.errors or {'non_field_errors': [exc.message]}
            return False
        except ConflictError:
            logger.info('review_conflict_resync', coffee_id=key[0])
            if key == self._current_key():
                await self.load()
            return False
        except NotFoundError:
            # The review vanished underneath us; reload what the server has
            if key == self._current_key():
                await self.load()
            return False
        except AuthError:
            if key == self._current_key():
                self._enter_unauthenticated()
            return False
        except ReviewClientError as exc:
            if key == self._current_key():
                self.error = exc.message
            return False
        finally:
            self._mutating = False

    async def _create(self, key: tuple, form: ReviewForm) -> bool:
        review = await self.repository.create(key[0], form)
        if key != self._current_key():
            return False
        self._show_review(review)
        return True

    async def _update(self, key: tuple, form: ReviewForm) -> bool:
        review = await self.repository.update(self.review, key[0], form)
        if key != self._current_key():
            return False
        self._show_review(review)
        return True

    async def _delete(self, key: tuple) -> bool:
        await self.repository.delete(self.review.id)
        if key != self._current_key():
            return False
        self._show_create_form()
        return True

    # ------------------------------------------------------------------
    # State helpers
    # ------------------------------------------------------------------

    def _show_review(self, review: Review) -> None:
        self.review = review
        self.form = None
        self.form_errors = {}
        self._set_state(LifecycleState.VIEWING)

    def _show_create_form(self) -> None:
        self.review = None
        self.form = empty_form()
        self.form_errors = {}
        self._set_state(LifecycleState.NO_REVIEW)

    def _enter_unauthenticated(self) -> None:
        self.review = None
        self.form = None
        self.form_errors = {}
        self._fetch_key = None
        self._set_state(LifecycleState.UNAUTHENTICATED)

    def _set_state(self, state: LifecycleState) -> None:
        if state is not self.state:
            logger.debug(
                'review_lifecycle_transition',
                coffee_id=self.coffee_id,
                source=self.state.value,
                target=state.value,
            )
        self.state = state
