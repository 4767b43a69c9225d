"""Async webhook robot service."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from ..errors.types import DingTalkError
from ..logs.logger import logger
from ..signature import build_webhook_url
from ..transport.types import HttpRequest
from ..types import webhook as messages
from ..types.webhook import ActionCardButton, FeedCardLink
from ._common import parse_message_response, report_error

if TYPE_CHECKING:
    from ..client.async_client import Client


class WebhookService:
    """Sends custom robot messages to a group webhook.

    Each send returns the raw response body once the ``errcode`` envelope has
    been checked. When ``secret`` is set every request is signed with a fresh
    timestamp.
    """

    def __init__(self, client: Client, token: str, secret: str | None = None) -> None:
        self._client = client
        self._token = token
        self._secret = secret

    def __repr__(self) -> str:
        return f"WebhookService(signed={self._secret is not None})"

    async def _send_message(self, message: dict[str, Any]) -> str:
        url = build_webhook_url(self._client.config.webhook_base_url, self._token, self._secret)
        logger.log_event(
            "webhook",
            "send",
            level=logging.DEBUG,
            msgtype=message["msgtype"],
            signed=self._secret is not None,
        )
        try:
            response = await self._client.execute(HttpRequest.json("POST", url, message))
            return parse_message_response(response, self._client.config)
        except DingTalkError as e:
            report_error(f"webhook {message['msgtype']} send", e)
            raise

    async def send_text_message(
        self,
        content: str,
        at_mobiles: Sequence[str] | None = None,
        at_user_ids: Sequence[str] | None = None,
        is_at_all: bool | None = None,
    ) -> str:
        return await self._send_message(
            messages.text_message(content, at_mobiles, at_user_ids, is_at_all)
        )

    async def send_link_message(
        self, title: str, text: str, message_url: str, pic_url: str | None = None
    ) -> str:
        return await self._send_message(messages.link_message(title, text, message_url, pic_url))

    async def send_markdown_message(
        self,
        title: str,
        text: str,
        at_mobiles: Sequence[str] | None = None,
        at_user_ids: Sequence[str] | None = None,
        is_at_all: bool | None = None,
    ) -> str:
        return await self._send_message(
            messages.markdown_message(title, text, at_mobiles, at_user_ids, is_at_all)
        )

    async def send_action_card_message_single(
        self,
        title: str,
        text: str,
        single_title: str,
        single_url: str,
        btn_orientation: str | None = None,
    ) -> str:
        return await self._send_message(
            messages.action_card_single_message(
                title, text, single_title, single_url, btn_orientation
            )
        )

    async def send_action_card_message_multi(
        self,
        title: str,
        text: str,
        btns: Sequence[ActionCardButton],
        btn_orientation: str | None = None,
    ) -> str:
        return await self._send_message(
            messages.action_card_multi_message(title, text, btns, btn_orientation)
        )

    async def send_feed_card_message(self, links: Sequence[FeedCardLink]) -> str:
        return await self._send_message(messages.feed_card_message(links))


__all__ = ["WebhookService"]
