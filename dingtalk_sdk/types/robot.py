"""Enterprise robot (``v1.0/robot``) message request bodies."""

from __future__ import annotations

import json
from typing import Any

from ..constants import DEFAULT_MSG_KEY


def msg_param(title: str, text: str) -> str:
    """``msgParam`` is sent as a JSON document embedded in a string."""
    return json.dumps({"title": title, "text": text}, ensure_ascii=False, separators=(",", ":"))


def group_message_request(
    robot_code: str, open_conversation_id: str, title: str, text: str
) -> dict[str, Any]:
    return {
        "msgParam": msg_param(title, text),
        "msgKey": DEFAULT_MSG_KEY,
        "robotCode": robot_code,
        "openConversationId": open_conversation_id,
    }


def oto_message_request(robot_code: str, user_id: str, title: str, text: str) -> dict[str, Any]:
    return {
        "msgParam": msg_param(title, text),
        "msgKey": DEFAULT_MSG_KEY,
        "robotCode": robot_code,
        "userIds": [user_id],
    }


__all__ = ["group_message_request", "msg_param", "oto_message_request"]
