"""Public error model of the SDK.

Every failure surfaced to callers is a ``DingTalkError``. The error behaves as
a closed tagged union: ``kind()`` names the variant and only the payload of
that variant is populated. New categories are added as new ``ErrorKind``
members, never by subclassing.
"""

from __future__ import annotations

from collections.abc import Collection
from dataclasses import dataclass
from enum import Enum

from ..constants import DEFAULT_RETRYABLE_API_CODES


class ErrorKind(str, Enum):
    """Stable high-level error category."""

    AUTH = "auth"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    RATE_LIMITED = "rate_limited"
    API = "api"
    TRANSPORT = "transport"
    SERIALIZATION = "serialization"
    TIMESTAMP = "timestamp"
    SIGNATURE = "signature"
    INVALID_CONFIG = "invalid_config"


@dataclass(frozen=True, slots=True)
class HttpError:
    """Structured HTTP error context.

    Attributes:
        status: HTTP status code.
        message: Optional short message from upstream or the transport.
        request_id: Optional request identifier from upstream.
        body_snippet: Optional redacted response body snippet.
    """

    status: int
    message: str | None = None
    request_id: str | None = None
    body_snippet: str | None = None

    def __str__(self) -> str:
        text = f"HTTP {self.status}"
        if self.message:
            text += f": {self.message}"
        if self.request_id:
            text += f" [request-id: {self.request_id}]"
        return text


@dataclass(frozen=True, slots=True)
class _Payload:
    kind: ErrorKind
    detail: str
    status: int | None = None
    code: int | None = None
    request_id: str | None = None
    body_snippet: str | None = None
    retry_after: float | None = None
    retryable: bool = False


class DingTalkError(Exception):
    """Unified SDK error.

    Use the named constructors (``DingTalkError.api(...)``,
    ``DingTalkError.auth(...)`` ...) rather than calling the class directly.
    The payload is frozen once the error is built; ``str(error)`` never
    includes the body snippet.
    """

    def __init__(self, payload: _Payload) -> None:
        super().__init__(_render(payload))
        object.__setattr__(self, "_payload", payload)

    def __setattr__(self, name: str, value: object) -> None:
        # Exception machinery (tracebacks, chaining, notes) uses dunder names.
        if name.startswith("__"):
            super().__setattr__(name, value)
            return
        raise AttributeError(f"DingTalkError is immutable (cannot set {name!r})")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"DingTalkError is immutable (cannot delete {name!r})")

    def __reduce__(self):
        return (type(self), (self._payload,))

    # ---- named constructors ----
    @classmethod
    def api(
        cls,
        code: int,
        message: str,
        request_id: str | None = None,
        body_snippet: str | None = None,
        *,
        retryable_codes: Collection[int] = DEFAULT_RETRYABLE_API_CODES,
    ) -> DingTalkError:
        return cls(
            _Payload(
                ErrorKind.API,
                message,
                code=code,
                request_id=request_id,
                body_snippet=body_snippet,
                retryable=code in retryable_codes,
            )
        )

    @classmethod
    def auth(cls, error: HttpError) -> DingTalkError:
        return cls._from_http(ErrorKind.AUTH, error)

    @classmethod
    def not_found(cls, error: HttpError) -> DingTalkError:
        return cls._from_http(ErrorKind.NOT_FOUND, error)

    @classmethod
    def conflict(cls, error: HttpError) -> DingTalkError:
        return cls._from_http(ErrorKind.CONFLICT, error)

    @classmethod
    def rate_limited(
        cls, error: HttpError, retry_after: float | None = None
    ) -> DingTalkError:
        return cls._from_http(
            ErrorKind.RATE_LIMITED, error, retry_after=retry_after, retryable=True
        )

    @classmethod
    def transport(
        cls,
        message: str,
        *,
        status: int | None = None,
        request_id: str | None = None,
        body_snippet: str | None = None,
        retry_after: float | None = None,
        retryable: bool = False,
    ) -> DingTalkError:
        return cls(
            _Payload(
                ErrorKind.TRANSPORT,
                message,
                status=status,
                request_id=request_id,
                body_snippet=body_snippet,
                retry_after=retry_after,
                retryable=retryable,
            )
        )

    @classmethod
    def serialization(cls, message: str) -> DingTalkError:
        return cls(_Payload(ErrorKind.SERIALIZATION, message))

    @classmethod
    def timestamp(cls, message: str) -> DingTalkError:
        return cls(_Payload(ErrorKind.TIMESTAMP, message))

    @classmethod
    def signature(cls) -> DingTalkError:
        return cls(_Payload(ErrorKind.SIGNATURE, ""))

    @classmethod
    def invalid_config(cls, message: str) -> DingTalkError:
        return cls(_Payload(ErrorKind.INVALID_CONFIG, message))

    @classmethod
    def _from_http(
        cls,
        kind: ErrorKind,
        error: HttpError,
        *,
        retry_after: float | None = None,
        retryable: bool = False,
    ) -> DingTalkError:
        return cls(
            _Payload(
                kind,
                str(error),
                status=error.status,
                request_id=error.request_id,
                body_snippet=error.body_snippet,
                retry_after=retry_after,
                retryable=retryable,
            )
        )

    # ---- accessors ----
    def kind(self) -> ErrorKind:
        """Return the stable high-level error category."""
        return self._payload.kind

    def status(self) -> int | None:
        """Return the HTTP status code when the server answered."""
        return self._payload.status

    def code(self) -> int | None:
        """Return the DingTalk business error code for API errors."""
        return self._payload.code

    def message(self) -> str:
        return self._payload.detail

    def request_id(self) -> str | None:
        """Return the DingTalk or transport request id when present."""
        return self._payload.request_id

    def body_snippet(self) -> str | None:
        """Return the redacted response body snippet if one was retained."""
        return self._payload.body_snippet

    def is_retryable(self) -> bool:
        """Return True if the error is likely transient and safe to retry."""
        return self._payload.retryable

    def retry_after(self) -> float | None:
        """Return the retry-after hint in seconds when upstream provided one."""
        return self._payload.retry_after

    def is_auth_error(self) -> bool:
        return self._payload.kind is ErrorKind.AUTH

    def __repr__(self) -> str:
        p = self._payload
        return (
            f"DingTalkError(kind={p.kind.value}, status={p.status}, "
            f"code={p.code}, request_id={p.request_id!r})"
        )


_TITLES = {
    ErrorKind.AUTH: "Authentication failed",
    ErrorKind.NOT_FOUND: "Resource not found",
    ErrorKind.CONFLICT: "Resource conflict",
    ErrorKind.RATE_LIMITED: "Rate limited",
    ErrorKind.TRANSPORT: "HTTP transport error",
    ErrorKind.SERIALIZATION: "Serialization error",
    ErrorKind.TIMESTAMP: "Timestamp generation failed",
    ErrorKind.INVALID_CONFIG: "Invalid configuration",
}


def _render(payload: _Payload) -> str:
    if payload.kind is ErrorKind.API:
        return f"API error (code={payload.code}): {payload.detail}"
    if payload.kind is ErrorKind.SIGNATURE:
        return "Signature generation failed"
    return f"{_TITLES[payload.kind]}: {payload.detail}"


__all__ = ["DingTalkError", "ErrorKind", "HttpError"]
