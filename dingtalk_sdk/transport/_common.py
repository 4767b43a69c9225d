"""Pieces shared by the aiohttp and httpx transports."""

from __future__ import annotations

import logging
from collections.abc import Mapping

from ..config import BodySnippetConfig, ClientConfig
from ..errors.handling import (
    body_snippet_for_error,
    decode_envelope,
    envelope_request_id,
    parse_retry_after,
)
from ..errors.internal import TransportError, TransportErrorCode
from ..logs.logger import logger
from ..utils.url import append_query, strip_query
from .types import HttpRequest

_REQUEST_ID_HEADERS = ("x-acs-request-id", "x-request-id", "request-id", "x-acs-trace-id")


def request_url(request: HttpRequest) -> str:
    return append_query(request.url, request.query)


def request_headers(config: ClientConfig, request: HttpRequest) -> dict[str, str]:
    headers = config.user_agent_headers
    headers.update(request.headers)
    return headers


def may_retry(config: ClientConfig, request: HttpRequest) -> bool:
    return request.idempotent or config.retry_non_idempotent


def status_error(
    status: int,
    headers: Mapping[str, str],
    body: bytes,
    snippet_config: BodySnippetConfig,
    reason: str | None = None,
) -> TransportError:
    """Build the ``HTTP_STATUS`` failure for a response with status >= 400.

    ``headers`` must be keyed by lower-case name.
    """
    text = body.decode("utf-8", errors="replace")
    payload = decode_envelope(text) or {}
    request_id = next((headers[h] for h in _REQUEST_ID_HEADERS if headers.get(h)), None)
    if request_id is None:
        request_id = envelope_request_id(payload)
    message = payload.get("message") or payload.get("errmsg") or reason or f"HTTP {status}"
    return TransportError(
        TransportErrorCode.HTTP_STATUS,
        str(message),
        status=status,
        request_id=request_id,
        retry_after=parse_retry_after(headers.get("retry-after")),
        body_snippet=body_snippet_for_error(text, snippet_config),
    )


def log_request(request: HttpRequest) -> None:
    logger.log_event(
        "http", "request", level=logging.DEBUG, method=request.method, url=strip_query(request.url)
    )


def log_response(request: HttpRequest, status: int, elapsed: float) -> None:
    logger.log_event(
        "http",
        "response",
        level=logging.DEBUG,
        method=request.method,
        url=strip_query(request.url),
        status=status,
        elapsed_ms=int(elapsed * 1000),
    )


def log_give_up(request: HttpRequest, attempts: int, error: TransportError) -> None:
    logger.log_event(
        "http",
        "give_up",
        level=logging.WARNING,
        method=request.method,
        url=strip_query(request.url),
        attempt=attempts,
        code=error.code.value,
        status=error.status,
    )
