"""Blocking DingTalk client."""

from __future__ import annotations

from collections.abc import Sequence

import httpx

from ..api.blocking_enterprise import BlockingEnterpriseService
from ..api.blocking_webhook import BlockingWebhookService
from ..config import ClientConfig
from ..errors.handling import classify_transport_error, log_error
from ..errors.internal import TransportError
from ..transport.blocking_transport import BlockingTransport
from ..transport.types import HttpRequest, HttpResponse
from ..utils.url import endpoint_url, strip_query


class BlockingClient:
    """Entry point for synchronous code; mirrors ``Client``."""

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        http_client: httpx.Client | None = None,
        transport: BlockingTransport | None = None,
    ) -> None:
        self.config = config or ClientConfig()
        self._transport = transport or BlockingTransport(self.config, http_client)

    def webhook(self, token: str, secret: str | None = None) -> BlockingWebhookService:
        return BlockingWebhookService(self, token, secret)

    def enterprise(
        self, appkey: str, appsecret: str, robot_code: str
    ) -> BlockingEnterpriseService:
        return BlockingEnterpriseService(self, appkey, appsecret, robot_code)

    def webhook_endpoint(self, segments: Sequence[str]) -> str:
        return endpoint_url(self.config.webhook_base_url, segments)

    def enterprise_endpoint(self, segments: Sequence[str]) -> str:
        return endpoint_url(self.config.enterprise_base_url, segments)

    def execute(self, request: HttpRequest) -> HttpResponse:
        try:
            return self._transport.send(request)
        except TransportError as e:
            error = classify_transport_error(e)
            log_error(
                f"{request.method} {strip_query(request.url)} failed",
                error,
                context={"transport_code": e.code.value},
            )
            raise error from e

    def close(self) -> None:
        self._transport.close()

    def __enter__(self) -> BlockingClient:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


__all__ = ["BlockingClient"]
