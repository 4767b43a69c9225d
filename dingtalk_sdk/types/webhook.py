"""Webhook robot message payloads.

Each ``*_message`` builder returns the JSON document posted to
``robot/send``; optional fields are omitted rather than sent as ``null``.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class ActionCardButton:
    """Button of a multi-button ``actionCard`` message."""

    title: str
    action_url: str

    def to_dict(self) -> dict[str, str]:
        return {"title": self.title, "actionURL": self.action_url}


@dataclass(frozen=True, slots=True)
class FeedCardLink:
    """Entry of a ``feedCard`` message."""

    title: str
    message_url: str
    pic_url: str

    def to_dict(self) -> dict[str, str]:
        return {"title": self.title, "messageURL": self.message_url, "picURL": self.pic_url}


def build_at(
    at_mobiles: Sequence[str] | None = None,
    at_user_ids: Sequence[str] | None = None,
    is_at_all: bool | None = None,
) -> dict[str, Any] | None:
    """Return the ``at`` block, or ``None`` when nobody is mentioned."""
    if at_mobiles is None and at_user_ids is None and is_at_all is None:
        return None
    at: dict[str, Any] = {}
    if at_mobiles is not None:
        at["atMobiles"] = list(at_mobiles)
    if at_user_ids is not None:
        at["atUserIds"] = list(at_user_ids)
    if is_at_all is not None:
        at["isAtAll"] = is_at_all
    return at


def _with_at(message: dict[str, Any], at: dict[str, Any] | None) -> dict[str, Any]:
    if at is not None:
        message["at"] = at
    return message


def text_message(
    content: str,
    at_mobiles: Sequence[str] | None = None,
    at_user_ids: Sequence[str] | None = None,
    is_at_all: bool | None = None,
) -> dict[str, Any]:
    return _with_at(
        {"msgtype": "text", "text": {"content": content}},
        build_at(at_mobiles, at_user_ids, is_at_all),
    )


def link_message(
    title: str, text: str, message_url: str, pic_url: str | None = None
) -> dict[str, Any]:
    link = {"title": title, "text": text, "messageUrl": message_url}
    if pic_url is not None:
        link["picUrl"] = pic_url
    return {"msgtype": "link", "link": link}


def markdown_message(
    title: str,
    text: str,
    at_mobiles: Sequence[str] | None = None,
    at_user_ids: Sequence[str] | None = None,
    is_at_all: bool | None = None,
) -> dict[str, Any]:
    return _with_at(
        {"msgtype": "markdown", "markdown": {"title": title, "text": text}},
        build_at(at_mobiles, at_user_ids, is_at_all),
    )


def action_card_single_message(
    title: str,
    text: str,
    single_title: str,
    single_url: str,
    btn_orientation: str | None = None,
) -> dict[str, Any]:
    card: dict[str, Any] = {"title": title, "text": text}
    if btn_orientation is not None:
        card["btnOrientation"] = btn_orientation
    card["singleTitle"] = single_title
    card["singleURL"] = single_url
    return {"msgtype": "actionCard", "actionCard": card}


def action_card_multi_message(
    title: str,
    text: str,
    btns: Sequence[ActionCardButton],
    btn_orientation: str | None = None,
) -> dict[str, Any]:
    card: dict[str, Any] = {"title": title, "text": text}
    if btn_orientation is not None:
        card["btnOrientation"] = btn_orientation
    card["btns"] = [btn.to_dict() for btn in btns]
    return {"msgtype": "actionCard", "actionCard": card}


def feed_card_message(links: Sequence[FeedCardLink]) -> dict[str, Any]:
    return {"msgtype": "feedCard", "feedCard": {"links": [link.to_dict() for link in links]}}


__all__ = [
    "ActionCardButton",
    "FeedCardLink",
    "action_card_multi_message",
    "action_card_single_message",
    "build_at",
    "feed_card_message",
    "link_message",
    "markdown_message",
    "text_message",
]
