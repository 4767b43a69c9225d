import json

import pytest

from dingtalk_sdk.auth_token import AppCredentials
from dingtalk_sdk.errors import DingTalkError, ErrorKind
from dingtalk_sdk.types import (
    ActionCardButton,
    ApprovalCreateProcessInstanceRequest,
    ApprovalFormComponentValue,
    ApprovalListProcessInstanceIdsResult,
    ApprovalProcessInstance,
    ApprovalTerminateProcessInstanceRequest,
    ContactCreateUserRequest,
    ContactDepartment,
    ContactListSubDepartmentIdsResult,
    ContactListSubDepartmentsResult,
    ContactListUsersRequest,
    ContactListUsersResult,
    ContactUpdateDepartmentRequest,
    FeedCardLink,
)
from dingtalk_sdk.types import webhook
from dingtalk_sdk.types.robot import group_message_request, oto_message_request


def test_app_credentials_repr_hides_secret():
    creds = AppCredentials("key-1", "super-secret")
    assert "super-secret" not in repr(creds)
    assert "<redacted>" in repr(creds)
    assert creds.appsecret == "super-secret"


def test_requests_omit_none_and_merge_extra():
    assert ContactListUsersRequest(dept_id=1, cursor=0, size=10).to_dict() == {
        "dept_id": 1,
        "cursor": 0,
        "size": 10,
    }
    request = ContactCreateUserRequest(
        name="Alice", mobile="13800000000", dept_id_list="1,2", extra={"title": "Eng"}
    )
    assert request.to_dict() == {
        "name": "Alice",
        "mobile": "13800000000",
        "dept_id_list": "1,2",
        "title": "Eng",
    }
    assert ContactUpdateDepartmentRequest(dept_id=5, name="Ops").to_dict() == {
        "dept_id": 5,
        "name": "Ops",
    }


def test_terminate_request_serializes_optional_remark():
    body = ApprovalTerminateProcessInstanceRequest(
        "PROC-1", "user-1", is_system=True, remark="cancelled"
    ).to_dict()
    assert body == {
        "process_instance_id": "PROC-1",
        "operating_userid": "user-1",
        "is_system": True,
        "remark": "cancelled",
    }


def test_create_process_instance_serializes_form_values():
    body = ApprovalCreateProcessInstanceRequest(
        process_code="PROC-X",
        originator_user_id="u-1",
        dept_id=1,
        form_component_values=[ApprovalFormComponentValue("Reason", "travel")],
    ).to_dict()
    assert body["form_component_values"] == [{"name": "Reason", "value": "travel"}]
    assert "approvers" not in body


def test_list_users_result_parses_known_and_extra_fields():
    parsed = ContactListUsersResult.from_dict(
        {
            "has_more": True,
            "next_cursor": 30,
            "list": [{"userid": "u-1", "name": "Alice", "title": "Eng"}],
            "unknown_flag": 1,
        }
    )
    assert parsed.has_more is True
    assert parsed.next_cursor == 30
    assert parsed.list[0].userid == "u-1"
    assert parsed.list[0].extra == {"title": "Eng"}
    assert parsed.extra == {"unknown_flag": 1}


def test_department_aliases():
    assert ContactDepartment.from_dict({"id": 7, "name": "R&D"}).dept_id == 7
    subs = ContactListSubDepartmentsResult.from_dict({"dept_list": [{"dept_id": 2}]})
    assert [d.dept_id for d in subs.departments] == [2]
    bare = ContactListSubDepartmentsResult.from_dict([{"dept_id": 3, "parent_id": 1}])
    assert bare.departments[0].parent_id == 1
    ids = ContactListSubDepartmentIdsResult.from_dict({"department_ids": [4, 5]})
    assert ids.dept_id_list == [4, 5]


def test_process_instance_keeps_extra():
    parsed = ApprovalProcessInstance.from_dict({"process_instance_id": "P-1", "biz_id": "B-1"})
    assert parsed.process_instance_id == "P-1"
    assert parsed.extra == {"biz_id": "B-1"}


def test_list_ids_requires_list_field():
    with pytest.raises(DingTalkError) as exc:
        ApprovalListProcessInstanceIdsResult.from_dict({"next_cursor": 1})
    assert exc.value.kind() is ErrorKind.SERIALIZATION
    parsed = ApprovalListProcessInstanceIdsResult.from_dict({"list": ["a"], "next_cursor": 2})
    assert parsed.list == ["a"]
    assert parsed.next_cursor == 2


def test_result_type_mismatch_is_serialization_error():
    with pytest.raises(DingTalkError) as exc:
        ContactListUsersResult.from_dict({"next_cursor": "abc"})
    assert exc.value.kind() is ErrorKind.SERIALIZATION
    with pytest.raises(DingTalkError):
        ContactDepartment.from_dict("not an object")


def test_webhook_payloads():
    assert webhook.text_message("hi") == {"msgtype": "text", "text": {"content": "hi"}}
    assert webhook.text_message("hi", is_at_all=True)["at"] == {"isAtAll": True}
    assert webhook.link_message("t", "x", "https://m")["link"] == {
        "title": "t",
        "text": "x",
        "messageUrl": "https://m",
    }
    single = webhook.action_card_single_message("t", "x", "Read", "https://r", "1")
    assert single["actionCard"] == {
        "title": "t",
        "text": "x",
        "btnOrientation": "1",
        "singleTitle": "Read",
        "singleURL": "https://r",
    }
    multi = webhook.action_card_multi_message("t", "x", [ActionCardButton("A", "https://a")])
    assert multi["actionCard"]["btns"] == [{"title": "A", "actionURL": "https://a"}]
    feed = webhook.feed_card_message([FeedCardLink("F", "https://f", "https://p")])
    assert feed == {
        "msgtype": "feedCard",
        "feedCard": {
            "links": [{"title": "F", "messageURL": "https://f", "picURL": "https://p"}]
        },
    }


def test_robot_message_bodies_embed_msg_param_as_string():
    group = group_message_request("robot-1", "cid-1", "Title", "**hi**")
    assert group["msgKey"] == "sampleMarkdown"
    assert group["openConversationId"] == "cid-1"
    assert json.loads(group["msgParam"]) == {"title": "Title", "text": "**hi**"}
    oto = oto_message_request("robot-1", "user-1", "T", "x")
    assert oto["userIds"] == ["user-1"]
    assert oto["robotCode"] == "robot-1"


def test_oto_body_always_lists_the_recipient():
    assert oto_message_request("robot-1", "", "T", "x")["userIds"] == [""]
