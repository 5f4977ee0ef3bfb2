"""CalendarSession — the one OAuth token the process holds for the calendar."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

logger = logging.getLogger(__name__)

# Google access tokens from the implicit flow last one hour
DEFAULT_TOKEN_LIFETIME_S = 3599


class CalendarSession:
    """Explicit token holder, created once and injected where needed.

    The OAuth implicit flow runs in the browser; the resulting access token
    is handed over through ``login`` and dropped with ``logout``.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._access_token: str | None = None
        self._expires_at: float = 0.0

    @property
    def access_token(self) -> str | None:
        return self._access_token if self.is_valid() else None

    @property
    def expires_at(self) -> float:
        return self._expires_at

    def login(self, access_token: str, expires_in: int | None = None) -> None:
        if not access_token or not access_token.strip():
            raise ValueError("access_token must not be empty")
        lifetime = expires_in or DEFAULT_TOKEN_LIFETIME_S
        self._access_token = access_token.strip()
        self._expires_at = self._clock() + lifetime
        logger.info("Calendar session opened (expires in %ds)", lifetime)

    def logout(self) -> str | None:
        """Forget the token and return it so the caller can revoke it."""
        token = self._access_token
        self._access_token = None
        self._expires_at = 0.0
        if token:
            logger.info("Calendar session closed")
        return token

    def expire(self) -> None:
        """Drop a token the calendar service has rejected."""
        if self._access_token:
            logger.warning("Calendar token rejected, session expired")
        self._access_token = None
        self._expires_at = 0.0

    def is_valid(self) -> bool:
        return self._access_token is not None and self._clock() < self._expires_at
