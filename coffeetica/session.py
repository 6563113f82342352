"""Session provider - the only holder of the current identity and credential."""

from typing import Callable, List, Optional

import structlog

from .models import SessionUser

logger = structlog.get_logger(__name__)

SessionListener = Callable[[bool], None]


class SessionProvider:
    """
    Holds identity, role set and bearer credential for the signed-in user.

    Components never read the credential store directly; they ask the
    provider and subscribe to identity changes.
    """

    def __init__(self):
        self._user: Optional[SessionUser] = None
        self._credential: Optional[str] = None
        self._listeners: List[SessionListener] = []
        self._epoch = 0

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None and bool(self._credential)

    @property
    def current_user(self) -> Optional[SessionUser]:
        return self._user

    @property
    def credential(self) -> Optional[str]:
        return self._credential

    @property
    def epoch(self) -> int:
        """Incremented on every sign-in/sign-out; used to spot stale results."""
        return self._epoch

    def has_role(self, name: str) -> bool:
        return self._user is not None and name in self._user.roles

    def sign_in(self, credential: str, user: SessionUser) -> None:
        if not credential:
            raise ValueError('credential is required')
        previous = self._user
        self._credential = credential
        self._user = user
        self._epoch += 1
        logger.info(
            'session_signed_in',
            user_id=user.id,
            roles=sorted(user.roles),
            switched_from=previous.id if previous else None,
        )
        # Listeners hear about user switches and token refreshes too
        self._notify(True)

    def sign_out(self) -> None:
        was_authenticated = self.is_authenticated
        self._credential = None
        self._user = None
        self._epoch += 1
        if was_authenticated:
            logger.info('session_signed_out')
            self._notify(False)

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """
        Register a callback for sign-ins and sign-outs.

        Returns:
            A function that removes the listener again
        """
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, authenticated: bool) -> None:
        for listener in list(self._listeners):
            listener(authenticated)
