"""Session state: who is signed in, broadcast to subscribers."""

from __future__ import annotations

import contextlib
import logging
from collections.abc import Callable
from enum import StrEnum

from incidentsync.models.identity import Identity

_logger = logging.getLogger(__name__)

IdentityListener = Callable[[Identity | None], None]


class SessionState(StrEnum):
    LOADING = "loading"
    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"


class SessionProvider:
    """Broadcast subject for the active identity.

    Starts in :attr:`SessionState.LOADING` with no identity. Every
    transition is pushed to all subscribers with the new identity (or
    ``None``). Subscribers are called synchronously in subscription order;
    one that raises is logged and skipped.
    """

    def __init__(self) -> None:
        self._state = SessionState.LOADING
        self._identity: Identity | None = None
        self._id_token: str | None = None
        self._listeners: list[IdentityListener] = []

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def current_identity(self) -> Identity | None:
        return self._identity

    @property
    def is_authenticated(self) -> bool:
        return self._state == SessionState.AUTHENTICATED

    def subscribe(self, listener: IdentityListener) -> Callable[[], None]:
        """Register *listener*; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            with contextlib.suppress(ValueError):
                self._listeners.remove(listener)

        return _unsubscribe

    def authenticate(self, identity: Identity, *, id_token: str | None = None) -> None:
        """Mark *identity* as signed in."""
        self._id_token = id_token
        self._transition(SessionState.AUTHENTICATED, identity)

    def sign_out(self) -> None:
        self._id_token = None
        self._transition(SessionState.UNAUTHENTICATED, None)

    def mark_unauthenticated(self) -> None:
        """Resolve the initial loading state with nobody signed in."""
        self.sign_out()

    async def get_id_token(self) -> str | None:
        """Bearer token for remote store requests, if signed in."""
        return self._id_token if self.is_authenticated else None

    def _transition(self, state: SessionState, identity: Identity | None) -> None:
        _logger.debug(
            "Session %s -> %s (identity=%s)",
            self._state,
            state,
            identity.id if identity is not None else None,
        )
        self._state = state
        self._identity = identity
        for listener in list(self._listeners):
            try:
                listener(identity)
            except Exception:
                _logger.exception("Session listener failed")
