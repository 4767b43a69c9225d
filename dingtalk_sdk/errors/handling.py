"""Error classification pipeline.

Converts transport outcomes and DingTalk business envelopes into the public
``DingTalkError`` taxonomy. Body snippets attached to errors are always
truncated first and redacted second; the raw body never leaves this module.
"""

from __future__ import annotations

import email.utils
import json
import logging
import time
from collections.abc import Collection, Mapping
from typing import TYPE_CHECKING, Any

from ..constants import DEFAULT_RETRYABLE_API_CODES
from ..logging_config import log_structured_error
from ..utils.redact import redact_text, truncate_snippet
from .internal import TransportError, TransportErrorCode
from .types import DingTalkError, ErrorKind, HttpError

if TYPE_CHECKING:
    from ..config import BodySnippetConfig


def parse_retry_after(value: str | None, *, now: float | None = None) -> float | None:
    """Parse a ``Retry-After`` header value into seconds.

    Accepts both delta-seconds and an HTTP-date. Dates in the past yield 0.
    Unparseable values yield ``None``.
    """
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    try:
        seconds = float(value)
    except ValueError:
        seconds = None
    if seconds is not None:
        return max(seconds, 0.0)
    try:
        when = email.utils.parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if when is None:
        return None
    current = time.time() if now is None else now
    return max(when.timestamp() - current, 0.0)


def body_snippet_for_error(body: str, config: BodySnippetConfig | None) -> str | None:
    """Return a truncated, redacted snippet of ``body`` or ``None`` if disabled."""
    if config is None or not config.enabled:
        return None
    return redact_text(truncate_snippet(body, config.max_bytes))


def api_error(
    code: int,
    message: str,
    request_id: str | None = None,
    body_snippet: str | None = None,
    *,
    retryable_codes: Collection[int] = DEFAULT_RETRYABLE_API_CODES,
) -> DingTalkError:
    return DingTalkError.api(
        code, message, request_id, body_snippet, retryable_codes=retryable_codes
    )


def classify_transport_error(error: TransportError) -> DingTalkError:
    """Map a transport failure onto the public error taxonomy.

    HTTP status table: 401/403 auth, 404 not found, 409/412 conflict,
    429 rate limited, anything else a (possibly retryable) transport error.
    """
    if error.code is TransportErrorCode.HTTP_STATUS and error.status is not None:
        http = HttpError(
            status=error.status,
            message=error.message or None,
            request_id=error.request_id,
            body_snippet=error.body_snippet,
        )
        status = error.status
        if status in (401, 403):
            return DingTalkError.auth(http)
        if status == 404:
            return DingTalkError.not_found(http)
        if status in (409, 412):
            return DingTalkError.conflict(http)
        if status == 429:
            return DingTalkError.rate_limited(http, error.retry_after)

    return DingTalkError.transport(
        error.message,
        status=error.status,
        request_id=error.request_id,
        body_snippet=error.body_snippet,
        retry_after=error.retry_after,
        retryable=error.retryable,
    )


def decode_envelope(body: str) -> dict[str, Any] | None:
    """Decode ``body`` as a JSON object, or ``None`` for anything else."""
    try:
        payload = json.loads(body)
    except ValueError:
        return None
    return payload if isinstance(payload, dict) else None


def _errcode(payload: Mapping[str, Any]) -> int | None:
    raw = payload.get("errcode")
    if raw is None or isinstance(raw, bool):
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


def envelope_request_id(payload: Mapping[str, Any]) -> str | None:
    for key in ("request_id", "requestId", "requestid"):
        value = payload.get(key)
        if value:
            return str(value)
    return None


def check_envelope(
    payload: Mapping[str, Any],
    body: str,
    snippet_config: BodySnippetConfig | None,
    retryable_codes: Collection[int] = DEFAULT_RETRYABLE_API_CODES,
) -> None:
    """Raise an ``API`` error if a decoded envelope carries a non-zero errcode."""
    errcode = _errcode(payload)
    if errcode is None or errcode == 0:
        return
    message = payload.get("errmsg") or "unknown dingtalk api error"
    raise api_error(
        errcode,
        str(message),
        envelope_request_id(payload),
        body_snippet_for_error(body, snippet_config),
        retryable_codes=retryable_codes,
    )


def validate_standard_api_response(
    body: str,
    snippet_config: BodySnippetConfig | None,
    retryable_codes: Collection[int] = DEFAULT_RETRYABLE_API_CODES,
) -> None:
    """Check a raw response body for a DingTalk ``{errcode, errmsg}`` failure.

    Bodies that are not JSON objects, or carry no ``errcode``, pass.
    """
    payload = decode_envelope(body)
    if payload is not None:
        check_envelope(payload, body, snippet_config, retryable_codes)


def log_error(message: str, error: DingTalkError, context: dict | None = None) -> None:
    """Log a classified error with structured context.

    Expected client side failures (auth, not found, conflict, invalid config)
    are logged at WARNING, everything else at ERROR.
    """
    error_context = {"kind": error.kind().value}
    if error.status() is not None:
        error_context["http_status"] = error.status()
    if error.code() is not None:
        error_context["code"] = error.code()
    if error.request_id():
        error_context["request_id"] = error.request_id()
    if context:
        error_context.update(context)
    level = (
        logging.WARNING
        if error.kind()
        in (ErrorKind.AUTH, ErrorKind.NOT_FOUND, ErrorKind.CONFLICT, ErrorKind.INVALID_CONFIG)
        else logging.ERROR
    )
    log_structured_error(
        error_type=error.kind().value,
        message=message,
        exception=error,
        context=error_context,
        level=level,
    )


__all__ = [
    "api_error",
    "body_snippet_for_error",
    "check_envelope",
    "classify_transport_error",
    "decode_envelope",
    "envelope_request_id",
    "log_error",
    "parse_retry_after",
    "validate_standard_api_response",
]
