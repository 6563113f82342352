"""Capability gates declared on actions instead of checked at call sites."""

import functools
from typing import Callable

import structlog

from .session import SessionProvider

logger = structlog.get_logger(__name__)


class Capability:
    """A named predicate over the session."""

    def __init__(self, name: str, predicate: Callable[[SessionProvider], bool]):
        self.name = name
        self._predicate = predicate

    def allows(self, session: SessionProvider) -> bool:
        return bool(self._predicate(session))

    def __or__(self, other: 'Capability') -> 'Capability':
        return Capability(
            f'{self.name}|{other.name}',
            lambda session: self.allows(session) or other.allows(session),
        )

    def __repr__(self):
        return f'Capability({self.name!r})'


def role(name: str) -> Capability:
    return Capability(f'role:{name}', lambda session: session.has_role(name))


AUTHENTICATED = Capability('authenticated', lambda session: session.is_authenticated)
MODERATOR = role('Admin') | role('SuperAdmin')


def requires(capability: Capability):
    """
    Gate a coroutine method on a capability of ``self.session``.

    When the session lacks the capability, ``self.on_capability_denied`` is
    called with it and the action returns False without running.
    """
    def decorator(method):
        @functools.wraps(method)
        async def wrapper(self, *args, **kwargs):
            if not capability.allows(self.session):
                logger.info('capability_denied', capability=capability.name, action=method.__name__)
                self.on_capability_denied(capability)
                return False
            return await method(self, *args, **kwargs)

        wrapper.required_capability = capability
        return wrapper

    return decorator
