"""Request builders and response parsers shared by async and blocking services.

Everything here is free of I/O so both service flavours stay thin wrappers
around ``client.execute``.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import TYPE_CHECKING, Any, TypeVar

from ..constants import TOKEN_INVALID_API_CODES
from ..errors.handling import (
    api_error,
    check_envelope,
    envelope_request_id,
    log_error,
    validate_standard_api_response,
)
from ..errors.internal import TransportError
from ..errors.types import DingTalkError, ErrorKind
from ..transport.types import HttpRequest, HttpResponse

if TYPE_CHECKING:
    from ..auth_token.credentials import AppCredentials
    from ..config import ClientConfig

T = TypeVar("T")

ACCESS_TOKEN_HEADER = "x-acs-dingtalk-access-token"

GROUP_MESSAGE_PATH = ("v1.0", "robot", "groupMessages", "send")
OTO_MESSAGE_PATH = ("v1.0", "robot", "oToMessages", "batchSend")

USER_GET_PATH = ("topapi", "v2", "user", "get")
USER_GET_BY_MOBILE_PATH = ("topapi", "v2", "user", "getbymobile")
USER_GET_BY_UNIONID_PATH = ("topapi", "user", "getbyunionid")
USER_LIST_PATH = ("topapi", "v2", "user", "list")
USER_CREATE_PATH = ("topapi", "v2", "user", "create")
USER_UPDATE_PATH = ("topapi", "v2", "user", "update")
USER_DELETE_PATH = ("topapi", "v2", "user", "delete")
DEPARTMENT_GET_PATH = ("topapi", "v2", "department", "get")
DEPARTMENT_LIST_SUB_PATH = ("topapi", "v2", "department", "listsub")
DEPARTMENT_LIST_SUB_IDS_PATH = ("topapi", "v2", "department", "listsubid")
DEPARTMENT_CREATE_PATH = ("topapi", "v2", "department", "create")
DEPARTMENT_UPDATE_PATH = ("topapi", "v2", "department", "update")
DEPARTMENT_DELETE_PATH = ("topapi", "v2", "department", "delete")
PROCESS_INSTANCE_CREATE_PATH = ("topapi", "processinstance", "create")
PROCESS_INSTANCE_GET_PATH = ("topapi", "processinstance", "get")
PROCESS_INSTANCE_LIST_IDS_PATH = ("topapi", "processinstance", "listids")
PROCESS_INSTANCE_TERMINATE_PATH = ("topapi", "process", "instance", "terminate")


# ---- request builders ----


def token_request(url: str, credentials: AppCredentials) -> HttpRequest:
    return HttpRequest(
        method="GET",
        url=url,
        query=(("appkey", credentials.appkey), ("appsecret", credentials.appsecret)),
    )


def topapi_request(url: str, access_token: str, body: Mapping[str, Any]) -> HttpRequest:
    return HttpRequest.json("POST", url, body, query=(("access_token", access_token),))


def robot_request(url: str, access_token: str, body: Mapping[str, Any]) -> HttpRequest:
    return HttpRequest.json("POST", url, body, headers={ACCESS_TOKEN_HEADER: access_token})


def reply_target(data: Mapping[str, Any]) -> tuple[str, str]:
    """Pick where a reply to an incoming callback message goes.

    Private chats (``conversationType == "1"``) reply one-to-one to the
    sender; anything else replies to the group conversation.

    Returns:
        ``("oto", sender_staff_id)`` or ``("group", conversation_id)``.
    """
    if data.get("conversationType") == "1":
        sender = data.get("senderStaffId")
        if not isinstance(sender, str):
            raise DingTalkError.invalid_config("Missing senderStaffId")
        return "oto", sender
    conversation_id = data.get("conversationId")
    if not isinstance(conversation_id, str):
        raise DingTalkError.invalid_config("Missing conversationId")
    return "group", conversation_id


# ---- response parsers ----


def _json_object(response: HttpResponse) -> tuple[dict[str, Any], str]:
    text = response.text()
    payload = response.json()
    if not isinstance(payload, dict):
        raise DingTalkError.serialization("expected a JSON object in response body")
    return payload, text


def parse_token_response(
    response: HttpResponse, config: ClientConfig
) -> tuple[str, int | None]:
    """Return ``(access_token, expires_in)`` from a ``gettoken`` response."""
    payload, text = _json_object(response)
    check_envelope(payload, text, config.body_snippet, config.retryable_api_codes)
    token = payload.get("access_token")
    if not token:
        raise api_error(-1, "No access token returned")
    expires_in = payload.get("expires_in")
    if not isinstance(expires_in, int) or isinstance(expires_in, bool):
        expires_in = None
    return str(token), expires_in


def parse_field(
    response: HttpResponse, config: ClientConfig, name: str, message: str
) -> Any:
    """Check the envelope and return ``payload[name]``; missing is API code -1."""
    payload, text = _json_object(response)
    check_envelope(payload, text, config.body_snippet, config.retryable_api_codes)
    value = payload.get(name)
    if value is None:
        raise api_error(-1, message, envelope_request_id(payload))
    return value


def parse_topapi_result(response: HttpResponse, config: ClientConfig) -> Any:
    return parse_field(response, config, "result", "Missing result field in topapi response")


def parse_topapi_unit(response: HttpResponse, config: ClientConfig) -> None:
    payload, text = _json_object(response)
    check_envelope(payload, text, config.body_snippet, config.retryable_api_codes)


def parse_message_response(response: HttpResponse, config: ClientConfig) -> str:
    """Return the raw body of a message send after the envelope check."""
    body = response.text()
    validate_standard_api_response(body, config.body_snippet, config.retryable_api_codes)
    return body


def typed(parser: Callable[[Any], T]) -> Callable[[HttpResponse, ClientConfig], T]:
    """Compose ``parse_topapi_result`` with a model ``from_dict``."""

    def _parse(response: HttpResponse, config: ClientConfig) -> T:
        return parser(parse_topapi_result(response, config))

    return _parse


# ---- token invalidation ----


def invalidates_token(error: DingTalkError) -> bool:
    """True when DingTalk rejected the access token the call was made with."""
    if error.kind() is ErrorKind.AUTH:
        return True
    return error.kind() is ErrorKind.API and error.code() in TOKEN_INVALID_API_CODES


def report_error(operation: str, error: DingTalkError) -> None:
    # Errors classified from a TransportError were already logged by the client.
    if not isinstance(error.__cause__, TransportError):
        log_error(f"DingTalk call failed in {operation}", error)


def path(segments: Sequence[str]) -> str:
    return "/".join(segments)


__all__ = [
    "ACCESS_TOKEN_HEADER",
    "invalidates_token",
    "parse_field",
    "parse_message_response",
    "parse_token_response",
    "parse_topapi_result",
    "parse_topapi_unit",
    "reply_target",
    "report_error",
    "robot_request",
    "token_request",
    "topapi_request",
    "typed",
]
