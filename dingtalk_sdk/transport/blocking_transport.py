"""httpx backed blocking transport, the synchronous twin of ``AsyncTransport``."""

from __future__ import annotations

import time

import httpx

from ..config import ClientConfig
from ..errors.internal import TransportError, TransportErrorCode
from ..rate.retry_policies import build_retrying
from ..utils.redact import redact_text
from ..utils.url import strip_query
from ._common import (
    log_give_up,
    log_request,
    log_response,
    may_retry,
    request_headers,
    request_url,
    status_error,
)
from .types import HttpRequest, HttpResponse, lower_headers


class BlockingTransport:
    """Blocking HTTP collaborator used by ``BlockingClient``.

    Args:
        config: Client configuration.
        client: Optional ``httpx.Client``; tests pass one built on
            ``httpx.MockTransport``. When omitted one is created and owned.
    """

    def __init__(self, config: ClientConfig, client: httpx.Client | None = None) -> None:
        self._config = config
        self._owns_client = client is None
        self._client = client or httpx.Client(
            timeout=httpx.Timeout(config.request_timeout, connect=config.connect_timeout),
            trust_env=not config.no_system_proxy,
        )

    def send(self, request: HttpRequest) -> HttpResponse:
        """Send ``request``, retrying transient failures.

        ``total_timeout`` bounds the time spent across attempts; an attempt
        already in flight runs until its own ``request_timeout``.
        """
        log_request(request)
        retrying = build_retrying(
            self._config.retry,
            method=request.method,
            url=strip_query(request.url),
            idempotent=may_retry(self._config, request),
            total_timeout=self._config.total_timeout,
        )
        attempts = 0
        try:
            for attempt in retrying:
                with attempt:
                    attempts = attempt.retry_state.attempt_number
                    return self._send_once(request)
        except TransportError as e:
            if e.retryable:
                log_give_up(request, attempts, e)
            raise
        raise AssertionError("unreachable")  # pragma: no cover

    def _send_once(self, request: HttpRequest) -> HttpResponse:
        started = time.monotonic()
        try:
            resp = self._client.request(
                request.method,
                request_url(request),
                headers=request_headers(self._config, request),
                content=request.body,
            )
        except httpx.TimeoutException as e:
            raise TransportError(
                TransportErrorCode.TIMEOUT,
                f"request timed out after {self._config.request_timeout}s",
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(
                TransportErrorCode.TRANSPORT, redact_text(f"{type(e).__name__}: {e}")
            ) from e

        status = resp.status_code
        headers = lower_headers(resp.headers)
        body = resp.content
        log_response(request, status, time.monotonic() - started)
        if status >= 400:
            raise status_error(
                status, headers, body, self._config.body_snippet, resp.reason_phrase or None
            )
        return HttpResponse(status=status, headers=headers, body=body)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()


__all__ = ["BlockingTransport"]
