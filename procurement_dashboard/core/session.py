"""Credential holder for spreadsheet access.

The sign-in flow (external) moves a session through
``unset -> pending -> active -> expired``. Stores never mutate it; they take a
``snapshot()`` at the start of each request and use that token for the whole
request.
"""

import logging
import time
from enum import Enum
from typing import Callable, Optional

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    UNSET = "unset"
    PENDING = "pending"
    ACTIVE = "active"
    EXPIRED = "expired"


class SessionInfo(BaseModel):
    """Public view of a session, without the token."""

    state: SessionState
    expires_at: Optional[float] = None


class SessionContext:
    """Holds the bearer token used for spreadsheet calls."""

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._state = SessionState.UNSET
        self._token: Optional[str] = None
        self._expires_at: Optional[float] = None

    @classmethod
    def with_token(cls, token: str, expires_in: Optional[float] = None) -> "SessionContext":
        session = cls()
        session.activate(token, expires_in)
        return session

    @property
    def state(self) -> SessionState:
        if self._state == SessionState.ACTIVE and self._is_past_expiry():
            self._state = SessionState.EXPIRED
            logger.info("Access token expired")
        return self._state

    def begin(self) -> None:
        """Mark a sign-in as in progress. Any previous token stops being used."""
        self._state = SessionState.PENDING
        self._token = None
        self._expires_at = None

    def activate(self, token: str, expires_in: Optional[float] = None) -> None:
        if not token:
            raise ValueError("token must be a non-empty string")
        self._token = token
        self._expires_at = self._clock() + expires_in if expires_in else None
        self._state = SessionState.ACTIVE
        logger.info("Access token received")

    def expire(self) -> None:
        if self._state == SessionState.ACTIVE:
            logger.warning("Access token rejected by backend, session marked expired")
        self._state = SessionState.EXPIRED

    def clear(self) -> None:
        self._state = SessionState.UNSET
        self._token = None
        self._expires_at = None

    def snapshot(self) -> Optional[str]:
        """Token to use for one request, or None when not signed in."""
        if self.state != SessionState.ACTIVE:
            return None
        return self._token

    def info(self) -> SessionInfo:
        return SessionInfo(state=self.state, expires_at=self._expires_at)

    def _is_past_expiry(self) -> bool:
        return self._expires_at is not None and self._clock() >= self._expires_at
