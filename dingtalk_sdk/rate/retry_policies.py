"""Retry policy abstraction.

``RetryConfig`` is the declarative description handed to the transports; the
builders below turn it into Tenacity retrying objects. Retries only ever
happen inside a transport, before the SDK classifies the final outcome.
Central event logging is performed here so transports don't duplicate
per-attempt logging.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    Retrying,
    retry_if_exception,
    stop_after_attempt,
    stop_after_delay,
)

from ..constants import (
    DEFAULT_BASE_BACKOFF_SECONDS,
    DEFAULT_MAX_RETRIES,
    RETRY_MAX_BACKOFF_SECONDS,
)
from ..errors.internal import TransportError
from ..logs.logger import logger


@dataclass(frozen=True)
class RetryConfig:
    """Retry policy for SDK HTTP requests.

    ``max_retries`` counts retries after the first request, so
    ``max_retries=2`` allows up to 3 total attempts.
    """

    max_retries: int = DEFAULT_MAX_RETRIES
    base_backoff: float = DEFAULT_BASE_BACKOFF_SECONDS
    max_backoff: float = RETRY_MAX_BACKOFF_SECONDS

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if self.base_backoff < 0:
            raise ValueError("base_backoff must be >= 0")

    @classmethod
    def standard(cls) -> RetryConfig:
        """Conservative default policy (2 retries, 200ms base backoff)."""
        return cls()

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1

    def compute_delay(self, attempt_index: int) -> float:
        delay = self.base_backoff * (2**attempt_index)
        return min(delay, self.max_backoff)


NO_RETRY = RetryConfig(max_retries=0)


def _should_retry(exc: BaseException) -> bool:
    return isinstance(exc, TransportError) and exc.retryable


class _BackoffWait:
    """Exponential backoff that honors a server supplied retry-after hint."""

    def __init__(self, config: RetryConfig) -> None:
        self._config = config

    def __call__(self, retry_state: RetryCallState) -> float:
        delay = self._config.compute_delay(retry_state.attempt_number - 1)
        outcome = retry_state.outcome
        if outcome is not None and outcome.failed:
            exc = outcome.exception()
            hint = getattr(exc, "retry_after", None)
            if hint is not None:
                delay = max(delay, min(float(hint), self._config.max_backoff))
        return delay


def _before_sleep(method: str, url: str, max_attempts: int):
    def _log(retry_state: RetryCallState) -> None:
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        wait = retry_state.next_action.sleep if retry_state.next_action else 0.0
        logger.log_event(
            "http",
            "retry",
            level=logging.WARNING,
            method=method,
            url=url,
            attempt=retry_state.attempt_number,
            max_attempts=max_attempts,
            wait_time=round(wait, 3),
            error=str(exc),
            error_type=type(exc).__name__,
        )

    return _log


def _retry_kwargs(
    config: RetryConfig | None,
    *,
    method: str,
    url: str,
    idempotent: bool,
    total_timeout: float | None,
) -> dict[str, object]:
    policy = config if config is not None and idempotent else NO_RETRY
    stop = stop_after_attempt(policy.max_attempts)
    if total_timeout is not None:
        stop = stop | stop_after_delay(total_timeout)
    return {
        "stop": stop,
        "wait": _BackoffWait(policy),
        "retry": retry_if_exception(_should_retry),
        "before_sleep": _before_sleep(method, url, policy.max_attempts),
        "reraise": True,
    }


def build_async_retrying(
    config: RetryConfig | None,
    *,
    method: str,
    url: str,
    idempotent: bool = True,
    total_timeout: float | None = None,
) -> AsyncRetrying:
    """Tenacity ``AsyncRetrying`` for one request.

    Non-idempotent requests get a single attempt; the last error is re-raised
    once attempts are exhausted.
    """
    return AsyncRetrying(
        **_retry_kwargs(
            config, method=method, url=url, idempotent=idempotent, total_timeout=total_timeout
        )
    )


def build_retrying(
    config: RetryConfig | None,
    *,
    method: str,
    url: str,
    idempotent: bool = True,
    total_timeout: float | None = None,
) -> Retrying:
    """Blocking counterpart of ``build_async_retrying``."""
    return Retrying(
        **_retry_kwargs(
            config, method=method, url=url, idempotent=idempotent, total_timeout=total_timeout
        )
    )


__all__ = [
    "NO_RETRY",
    "RetryConfig",
    "build_async_retrying",
    "build_retrying",
]
