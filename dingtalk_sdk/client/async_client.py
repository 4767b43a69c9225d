"""Asynchronous DingTalk client."""

from __future__ import annotations

from collections.abc import Sequence

import aiohttp

from ..api.enterprise import EnterpriseService
from ..api.webhook import WebhookService
from ..config import ClientConfig
from ..errors.handling import classify_transport_error, log_error
from ..errors.internal import TransportError
from ..transport.async_transport import AsyncTransport
from ..transport.types import HttpRequest, HttpResponse
from ..utils.url import endpoint_url, strip_query


class Client:
    """Entry point for asyncio applications.

    Holds the configuration and one ``AsyncTransport``; services created by
    ``webhook()`` and ``enterprise()`` share both.

    Example:
        async with Client() as client:
            robot = client.webhook("token", secret="SEC...")
            await robot.send_text_message("hello")
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: AsyncTransport | None = None,
    ) -> None:
        self.config = config or ClientConfig()
        self._transport = transport or AsyncTransport(self.config, session)

    def webhook(self, token: str, secret: str | None = None) -> WebhookService:
        return WebhookService(self, token, secret)

    def enterprise(self, appkey: str, appsecret: str, robot_code: str) -> EnterpriseService:
        return EnterpriseService(self, appkey, appsecret, robot_code)

    def webhook_endpoint(self, segments: Sequence[str]) -> str:
        return endpoint_url(self.config.webhook_base_url, segments)

    def enterprise_endpoint(self, segments: Sequence[str]) -> str:
        return endpoint_url(self.config.enterprise_base_url, segments)

    async def execute(self, request: HttpRequest) -> HttpResponse:
        """Send ``request`` through the transport.

        Raises:
            DingTalkError: The classified transport failure.
        """
        try:
            return await self._transport.send(request)
        except TransportError as e:
            error = classify_transport_error(e)
            log_error(
                f"{request.method} {strip_query(request.url)} failed",
                error,
                context={"transport_code": e.code.value},
            )
            raise error from e

    async def close(self) -> None:
        await self._transport.close()

    async def __aenter__(self) -> Client:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()


__all__ = ["Client"]
