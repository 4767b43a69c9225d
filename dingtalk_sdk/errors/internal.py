"""Internal transport failure types.

These exceptions are raised by the HTTP transports only. Never surface raw
aiohttp / httpx / JSON errors to retry code; wrap them in ``TransportError``
instead. Service code converts every ``TransportError`` into a public
``DingTalkError`` before it reaches callers.

Classes:
  InternalError        – Base for all internal errors.
  TransportError       – Structured failure reported by a transport.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum


class InternalError(Exception):
    """Base class for internal errors with metadata support.

    Attributes:
        data: Dictionary containing arbitrary structured context data.
    """

    data: dict[str, object]

    def __init__(
        self, message: str, *, data: Mapping[str, object] | None = None
    ) -> None:
        super().__init__(message)
        # Copy into a plain dict to avoid unexpected mutations from caller.
        self.data = dict(data) if data else {}


class TransportErrorCode(str, Enum):
    """Failure categories a transport can report."""

    TIMEOUT = "timeout"
    DEADLINE_EXCEEDED = "deadline_exceeded"
    TRANSPORT = "transport"
    RETRY_BUDGET_EXHAUSTED = "retry_budget_exhausted"
    CIRCUIT_OPEN = "circuit_open"
    HTTP_STATUS = "http_status"
    INVALID_REQUEST = "invalid_request"


_ALWAYS_RETRYABLE = frozenset(
    {
        TransportErrorCode.TIMEOUT,
        TransportErrorCode.DEADLINE_EXCEEDED,
        TransportErrorCode.TRANSPORT,
        TransportErrorCode.RETRY_BUDGET_EXHAUSTED,
        TransportErrorCode.CIRCUIT_OPEN,
    }
)


def is_retryable_status(status: int | None) -> bool:
    return status is not None and (status == 429 or 500 <= status <= 599)


class TransportError(InternalError):
    """Structured failure of a single HTTP exchange.

    Args:
        code: Failure category.
        message: Human readable description (never contains secrets).
        status: HTTP status code when the server answered.
        request_id: Correlation id taken from response headers or body.
        retry_after: Server supplied retry hint in seconds.
        body_snippet: Redacted, length bounded copy of the response body.
    """

    def __init__(
        self,
        code: TransportErrorCode,
        message: str,
        *,
        status: int | None = None,
        request_id: str | None = None,
        retry_after: float | None = None,
        body_snippet: str | None = None,
    ) -> None:
        super().__init__(
            message,
            data={"code": code.value, "status": status, "request_id": request_id},
        )
        self.code = code
        self.message = message
        self.status = status
        self.request_id = request_id
        self.retry_after = retry_after
        self.body_snippet = body_snippet

    @property
    def retryable(self) -> bool:
        if self.code in _ALWAYS_RETRYABLE:
            return True
        if self.code is TransportErrorCode.HTTP_STATUS:
            return is_retryable_status(self.status)
        return False


__all__ = [
    "InternalError",
    "TransportError",
    "TransportErrorCode",
    "is_retryable_status",
]
