"""Async enterprise robot, contact and approval service."""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable, Mapping, Sequence
from typing import TYPE_CHECKING, Any, TypeVar

from ..auth_token.cache import AccessTokenCache
from ..auth_token.credentials import AppCredentials
from ..errors.types import DingTalkError
from ..logs.logger import logger
from ..transport.types import HttpRequest, HttpResponse
from ..types import robot
from ..types.enterprise import (
    ApprovalCreateProcessInstanceRequest,
    ApprovalListProcessInstanceIdsRequest,
    ApprovalListProcessInstanceIdsResult,
    ApprovalProcessInstance,
    ApprovalTerminateProcessInstanceRequest,
    ContactCreateDepartmentRequest,
    ContactCreateDepartmentResult,
    ContactCreateUserRequest,
    ContactCreateUserResult,
    ContactDeleteDepartmentRequest,
    ContactDeleteUserRequest,
    ContactDepartment,
    ContactGetDepartmentRequest,
    ContactGetUserByMobileRequest,
    ContactGetUserByUnionIdRequest,
    ContactGetUserRequest,
    ContactListSubDepartmentIdsRequest,
    ContactListSubDepartmentIdsResult,
    ContactListSubDepartmentsRequest,
    ContactListSubDepartmentsResult,
    ContactListUsersRequest,
    ContactListUsersResult,
    ContactUpdateDepartmentRequest,
    ContactUpdateUserRequest,
    ContactUser,
)
from . import _common as c

if TYPE_CHECKING:
    from ..client.async_client import Client
    from ..config import ClientConfig

T = TypeVar("T")


class EnterpriseService:
    """Enterprise application calls authenticated with an access token.

    The token is issued through ``gettoken`` and kept in an
    ``AccessTokenCache`` owned by this service (unless caching is disabled in
    ``ClientConfig``). ``clone()`` returns a copy sharing the same cache.
    When DingTalk rejects the token the cache is cleared so the next call
    issues a new one.
    """

    def __init__(
        self,
        client: Client,
        appkey: str,
        appsecret: str,
        robot_code: str,
        *,
        token_cache: AccessTokenCache | None = None,
    ) -> None:
        self._client = client
        self._credentials = AppCredentials(appkey, appsecret)
        self._robot_code = robot_code
        if token_cache is None and client.config.cache_access_token:
            token_cache = AccessTokenCache(client.config.token_refresh_margin)
        self._token_cache = token_cache

    def __repr__(self) -> str:
        return (
            f"EnterpriseService(credentials={self._credentials!r}, "
            f"robot_code={self._robot_code!r})"
        )

    @property
    def robot_code(self) -> str:
        return self._robot_code

    @property
    def token_cache(self) -> AccessTokenCache | None:
        return self._token_cache

    def clone(self) -> EnterpriseService:
        return copy.copy(self)

    # ---- token ----
    async def get_access_token(self) -> str:
        """Return a usable access token, issuing a new one when needed."""
        if self._token_cache is not None:
            token = self._token_cache.get()
            if token is not None:
                logger.log_event(
                    "token", "cache_hit", level=logging.DEBUG, appkey=self._credentials.appkey
                )
                return token

        logger.log_event(
            "token", "issue_request", level=logging.DEBUG, appkey=self._credentials.appkey
        )
        url = self._client.webhook_endpoint(["gettoken"])
        try:
            response = await self._client.execute(c.token_request(url, self._credentials))
            token, expires_in = c.parse_token_response(response, self._client.config)
        except DingTalkError as e:
            c.report_error("gettoken", e)
            raise

        if self._token_cache is not None:
            self._token_cache.store(token, expires_in)
        logger.log_event(
            "token",
            "issued",
            appkey=self._credentials.appkey,
            expires_in=expires_in,
        )
        return token

    # ---- plumbing ----
    async def _authenticated(
        self,
        operation: str,
        build: Callable[[str], HttpRequest],
        parse: Callable[[HttpResponse, ClientConfig], T],
    ) -> T:
        access_token = await self.get_access_token()
        logger.log_event("enterprise", "call", level=logging.DEBUG, endpoint=operation)
        try:
            response = await self._client.execute(build(access_token))
            return parse(response, self._client.config)
        except DingTalkError as e:
            if self._token_cache is not None and c.invalidates_token(e):
                self._token_cache.clear()
            c.report_error(operation, e)
            raise

    async def _topapi(
        self,
        segments: Sequence[str],
        body: Mapping[str, Any],
        parse: Callable[[HttpResponse, ClientConfig], T],
    ) -> T:
        url = self._client.webhook_endpoint(segments)
        return await self._authenticated(
            c.path(segments), lambda token: c.topapi_request(url, token, body), parse
        )

    async def _send_robot_message(self, segments: Sequence[str], body: Mapping[str, Any]) -> str:
        url = self._client.enterprise_endpoint(segments)
        return await self._authenticated(
            c.path(segments),
            lambda token: c.robot_request(url, token, body),
            c.parse_message_response,
        )

    # ---- robot messages ----
    async def send_group_message(self, open_conversation_id: str, title: str, text: str) -> str:
        logger.log_event("enterprise", "send", level=logging.DEBUG, target="group")
        return await self._send_robot_message(
            c.GROUP_MESSAGE_PATH,
            robot.group_message_request(self._robot_code, open_conversation_id, title, text),
        )

    async def send_oto_message(self, user_id: str, title: str, text: str) -> str:
        logger.log_event("enterprise", "send", level=logging.DEBUG, target="user")
        return await self._send_robot_message(
            c.OTO_MESSAGE_PATH,
            robot.oto_message_request(self._robot_code, user_id, title, text),
        )

    async def reply_message(self, data: Mapping[str, Any], title: str, text: str) -> str:
        """Reply to an incoming robot callback payload.

        Private chats get a one-to-one message to ``senderStaffId``; group
        chats get a group message to ``conversationId``.

        Raises:
            DingTalkError: ``INVALID_CONFIG`` when the required id is missing.
        """
        kind, target = c.reply_target(data)
        if kind == "oto":
            return await self.send_oto_message(target, title, text)
        return await self.send_group_message(target, title, text)

    # ---- contacts: users ----
    async def contact_get_user(self, request: ContactGetUserRequest) -> ContactUser:
        return await self._topapi(
            c.USER_GET_PATH, request.to_dict(), c.typed(ContactUser.from_dict)
        )

    async def contact_get_user_by_mobile(
        self, request: ContactGetUserByMobileRequest
    ) -> ContactUser:
        return await self._topapi(
            c.USER_GET_BY_MOBILE_PATH, request.to_dict(), c.typed(ContactUser.from_dict)
        )

    async def contact_get_user_by_unionid(
        self, request: ContactGetUserByUnionIdRequest
    ) -> ContactUser:
        return await self._topapi(
            c.USER_GET_BY_UNIONID_PATH, request.to_dict(), c.typed(ContactUser.from_dict)
        )

    async def contact_list_users(self, request: ContactListUsersRequest) -> ContactListUsersResult:
        return await self._topapi(
            c.USER_LIST_PATH, request.to_dict(), c.typed(ContactListUsersResult.from_dict)
        )

    async def contact_create_user(
        self, request: ContactCreateUserRequest
    ) -> ContactCreateUserResult:
        return await self._topapi(
            c.USER_CREATE_PATH, request.to_dict(), c.typed(ContactCreateUserResult.from_dict)
        )

    async def contact_update_user(self, request: ContactUpdateUserRequest) -> None:
        await self._topapi(c.USER_UPDATE_PATH, request.to_dict(), c.parse_topapi_unit)

    async def contact_delete_user(self, request: ContactDeleteUserRequest) -> None:
        await self._topapi(c.USER_DELETE_PATH, request.to_dict(), c.parse_topapi_unit)

    # ---- contacts: departments ----
    async def contact_get_department(
        self, request: ContactGetDepartmentRequest
    ) -> ContactDepartment:
        return await self._topapi(
            c.DEPARTMENT_GET_PATH, request.to_dict(), c.typed(ContactDepartment.from_dict)
        )

    async def contact_list_sub_departments(
        self, request: ContactListSubDepartmentsRequest
    ) -> ContactListSubDepartmentsResult:
        return await self._topapi(
            c.DEPARTMENT_LIST_SUB_PATH,
            request.to_dict(),
            c.typed(ContactListSubDepartmentsResult.from_dict),
        )

    async def contact_list_sub_department_ids(
        self, request: ContactListSubDepartmentIdsRequest
    ) -> ContactListSubDepartmentIdsResult:
        return await self._topapi(
            c.DEPARTMENT_LIST_SUB_IDS_PATH,
            request.to_dict(),
            c.typed(ContactListSubDepartmentIdsResult.from_dict),
        )

    async def contact_create_department(
        self, request: ContactCreateDepartmentRequest
    ) -> ContactCreateDepartmentResult:
        return await self._topapi(
            c.DEPARTMENT_CREATE_PATH,
            request.to_dict(),
            c.typed(ContactCreateDepartmentResult.from_dict),
        )

    async def contact_update_department(self, request: ContactUpdateDepartmentRequest) -> None:
        await self._topapi(c.DEPARTMENT_UPDATE_PATH, request.to_dict(), c.parse_topapi_unit)

    async def contact_delete_department(self, request: ContactDeleteDepartmentRequest) -> None:
        await self._topapi(c.DEPARTMENT_DELETE_PATH, request.to_dict(), c.parse_topapi_unit)

    # ---- approvals ----
    async def approval_create_process_instance(
        self, request: ApprovalCreateProcessInstanceRequest
    ) -> str:
        """Create an approval instance and return its id."""
        value = await self._topapi(
            c.PROCESS_INSTANCE_CREATE_PATH,
            request.to_dict(),
            lambda response, config: c.parse_field(
                response, config, "process_instance_id", "Missing process_instance_id in response"
            ),
        )
        return str(value)

    async def approval_get_process_instance(
        self, process_instance_id: str
    ) -> ApprovalProcessInstance:
        return await self._topapi(
            c.PROCESS_INSTANCE_GET_PATH,
            {"process_instance_id": process_instance_id},
            lambda response, config: ApprovalProcessInstance.from_dict(
                c.parse_field(
                    response,
                    config,
                    "process_instance",
                    "Missing process_instance field in response",
                )
            ),
        )

    async def approval_list_process_instance_ids(
        self, request: ApprovalListProcessInstanceIdsRequest
    ) -> ApprovalListProcessInstanceIdsResult:
        return await self._topapi(
            c.PROCESS_INSTANCE_LIST_IDS_PATH,
            request.to_dict(),
            c.typed(ApprovalListProcessInstanceIdsResult.from_dict),
        )

    async def approval_terminate_process_instance(
        self, request: ApprovalTerminateProcessInstanceRequest
    ) -> None:
        await self._topapi(
            c.PROCESS_INSTANCE_TERMINATE_PATH,
            {"request": request.to_dict()},
            c.parse_topapi_unit,
        )


__all__ = ["EnterpriseService"]
