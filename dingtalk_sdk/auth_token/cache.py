"""In-memory enterprise access token cache."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from ..constants import (
    DEFAULT_ACCESS_TOKEN_TTL_SECONDS,
    MIN_ACCESS_TOKEN_TTL_SECONDS,
    TOKEN_REFRESH_MARGIN_SECONDS,
)
from ..logs.logger import logger


@dataclass(frozen=True, slots=True)
class CachedToken:
    """A token and the monotonic instant it expires at."""

    token: str
    expires_at: float


def normalize_token_ttl(expires_in_seconds: int | float | None) -> float:
    """Lifetime to assume for a freshly issued token.

    Positive values are floored at ``MIN_ACCESS_TOKEN_TTL_SECONDS``; a missing
    or non-positive value falls back to ``DEFAULT_ACCESS_TOKEN_TTL_SECONDS``.
    """
    if expires_in_seconds is not None and expires_in_seconds > 0:
        return float(max(expires_in_seconds, MIN_ACCESS_TOKEN_TTL_SECONDS))
    return float(DEFAULT_ACCESS_TOKEN_TTL_SECONDS)


class AccessTokenCache:
    """Thread-safe single-entry token cache with proactive refresh.

    ``get`` stops returning a token ``refresh_margin`` seconds before it
    expires so callers re-issue it before DingTalk starts rejecting it. The
    lock only guards reading or swapping the entry and is never held across
    I/O. Concurrent refreshes are not de-duplicated; the last store wins.
    """

    def __init__(
        self,
        refresh_margin: float = TOKEN_REFRESH_MARGIN_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._refresh_margin = refresh_margin
        self._clock = clock
        self._lock = threading.Lock()
        self._entry: CachedToken | None = None

    @property
    def refresh_margin(self) -> float:
        return self._refresh_margin

    def get(self) -> str | None:
        """Return the cached token if it is still outside the refresh margin."""
        now = self._clock()
        with self._lock:
            entry = self._entry
        if entry is None or now + self._refresh_margin >= entry.expires_at:
            return None
        return entry.token

    def store(self, token: str, expires_in_seconds: int | float | None = None) -> None:
        ttl = normalize_token_ttl(expires_in_seconds)
        entry = CachedToken(token=token, expires_at=self._clock() + ttl)
        with self._lock:
            self._entry = entry
        logger.log_event("token", "cache_store", level=logging.DEBUG, ttl=ttl)

    def clear(self) -> None:
        with self._lock:
            had_entry = self._entry is not None
            self._entry = None
        if had_entry:
            logger.log_event("token", "cache_clear", level=logging.DEBUG)


__all__ = ["AccessTokenCache", "CachedToken", "normalize_token_ttl"]
