"""aiohttp backed transport.

Each ``send`` runs the request under a Tenacity ``AsyncRetrying`` built from
the client's ``RetryConfig``. Failures leave this module only as
``TransportError``; raw aiohttp exceptions are wrapped at the boundary.
"""

from __future__ import annotations

import asyncio
import time

import aiohttp
import yarl

from ..config import ClientConfig
from ..errors.internal import TransportError, TransportErrorCode
from ..rate.retry_policies import build_async_retrying
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


class AsyncTransport:
    """Asynchronous HTTP collaborator used by ``Client``.

    Args:
        config: Client configuration (timeouts, proxy toggle, retry policy).
        session: Optional externally managed ``aiohttp.ClientSession``. When
            omitted a session is created lazily and closed by ``close()``.
    """

    def __init__(
        self, config: ClientConfig, session: aiohttp.ClientSession | None = None
    ) -> None:
        self._config = config
        self._session = session
        self._owns_session = session is None

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or getattr(self._session, "closed", False):
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(
                    total=self._config.request_timeout,
                    connect=self._config.connect_timeout,
                ),
                trust_env=not self._config.no_system_proxy,
            )
            self._owns_session = True
        return self._session

    async def send(self, request: HttpRequest) -> HttpResponse:
        """Send ``request``, retrying transient failures.

        Raises:
            TransportError: Final failure after retries (or a deadline hit).
        """
        log_request(request)
        total_timeout = self._config.total_timeout
        if total_timeout is None:
            return await self._send_with_retries(request)
        try:
            return await asyncio.wait_for(self._send_with_retries(request), total_timeout)
        except TimeoutError as e:
            raise TransportError(
                TransportErrorCode.DEADLINE_EXCEEDED,
                f"request deadline of {total_timeout}s exceeded",
            ) from e

    async def _send_with_retries(self, request: HttpRequest) -> HttpResponse:
        retrying = build_async_retrying(
            self._config.retry,
            method=request.method,
            url=strip_query(request.url),
            idempotent=may_retry(self._config, request),
            total_timeout=self._config.total_timeout,
        )
        attempts = 0
        try:
            async for attempt in retrying:
                with attempt:
                    attempts = attempt.retry_state.attempt_number
                    return await self._send_once(request)
        except TransportError as e:
            if e.retryable:
                log_give_up(request, attempts, e)
            raise
        raise AssertionError("unreachable")  # pragma: no cover

    async def _send_once(self, request: HttpRequest) -> HttpResponse:
        session = await self._get_session()
        # Path segments and the webhook sign are already percent-encoded.
        url = yarl.URL(request_url(request), encoded=True)
        started = time.monotonic()
        try:
            async with session.request(
                request.method,
                url,
                headers=request_headers(self._config, request),
                data=request.body,
            ) as resp:
                body = await resp.read()
                status = resp.status
                headers = lower_headers(resp.headers)
                reason = getattr(resp, "reason", None)
        except TimeoutError as e:
            raise TransportError(
                TransportErrorCode.TIMEOUT,
                f"request timed out after {self._config.request_timeout}s",
            ) from e
        except aiohttp.ClientError as e:
            raise TransportError(
                TransportErrorCode.TRANSPORT, redact_text(f"{type(e).__name__}: {e}")
            ) from e

        log_response(request, status, time.monotonic() - started)
        if status >= 400:
            raise status_error(status, headers, body, self._config.body_snippet, reason)
        return HttpResponse(status=status, headers=headers, body=body)

    async def close(self) -> None:
        if self._session is not None and self._owns_session:
            if not getattr(self._session, "closed", False):
                await self._session.close()
            self._session = None


__all__ = ["AsyncTransport"]
