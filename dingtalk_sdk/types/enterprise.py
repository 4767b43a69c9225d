"""Typed request and result models for contact and approval calls.

Requests serialize with ``to_dict()``: ``None`` fields are omitted and
``extra`` entries are merged in as pass-through fields. Results parse with
``from_dict()`` and keep any field they do not model in ``extra``.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any

from ..errors.types import DingTalkError


def _request_dict(request: Any) -> dict[str, Any]:
    body: dict[str, Any] = {}
    for f in dataclasses.fields(request):
        if f.name == "extra":
            continue
        value = getattr(request, f.name)
        if value is None:
            continue
        body[f.name] = value
    body.update(getattr(request, "extra", None) or {})
    return body


def _require_mapping(data: Any, model: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise DingTalkError.serialization(
            f"{model}: expected a JSON object, got {type(data).__name__}"
        )
    return dict(data)


def _take(data: dict[str, Any], name: str, *aliases: str) -> Any:
    for key in (name, *aliases):
        if key in data:
            return data.pop(key)
    return None


def _opt_str(value: Any) -> str | None:
    return None if value is None else str(value)


def _opt_int(value: Any, model: str, name: str) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool):
        raise DingTalkError.serialization(f"{model}.{name}: expected an integer")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise DingTalkError.serialization(f"{model}.{name}: expected an integer") from e


def _opt_bool(value: Any, model: str, name: str) -> bool | None:
    if value is None or isinstance(value, bool):
        return value
    raise DingTalkError.serialization(f"{model}.{name}: expected a boolean")


def _list(value: Any, model: str, name: str) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise DingTalkError.serialization(f"{model}.{name}: expected a list")
    return value


# ---- requests ----


@dataclass
class ContactGetUserRequest:
    userid: str
    language: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return _request_dict(self)


@dataclass
class ContactGetUserByMobileRequest:
    mobile: str

    def to_dict(self) -> dict[str, Any]:
        return _request_dict(self)


@dataclass
class ContactGetUserByUnionIdRequest:
    unionid: str

    def to_dict(self) -> dict[str, Any]:
        return _request_dict(self)


@dataclass
class ContactListUsersRequest:
    """Page through the users of one department."""

    dept_id: int
    cursor: int
    size: int
    language: str | None = None
    order_field: str | None = None
    contain_access_limit: bool | None = None

    def to_dict(self) -> dict[str, Any]:
        return _request_dict(self)


@dataclass
class ContactCreateUserRequest:
    """Create a user.

    ``dept_id_list`` is the comma separated id string DingTalk expects.
    """

    name: str
    mobile: str
    dept_id_list: str
    userid: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return _request_dict(self)


@dataclass
class ContactUpdateUserRequest:
    userid: str
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return _request_dict(self)


@dataclass
class ContactDeleteUserRequest:
    userid: str

    def to_dict(self) -> dict[str, Any]:
        return _request_dict(self)


@dataclass
class ContactGetDepartmentRequest:
    dept_id: int
    language: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return _request_dict(self)


@dataclass
class ContactListSubDepartmentsRequest:
    dept_id: int
    language: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return _request_dict(self)


@dataclass
class ContactListSubDepartmentIdsRequest:
    dept_id: int
    language: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return _request_dict(self)


@dataclass
class ContactCreateDepartmentRequest:
    name: str
    parent_id: int
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return _request_dict(self)


@dataclass
class ContactUpdateDepartmentRequest:
    dept_id: int
    name: str | None = None
    parent_id: int | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return _request_dict(self)


@dataclass
class ContactDeleteDepartmentRequest:
    dept_id: int

    def to_dict(self) -> dict[str, Any]:
        return _request_dict(self)


@dataclass(frozen=True)
class ApprovalFormComponentValue:
    name: str
    value: str

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "value": self.value}


@dataclass
class ApprovalCreateProcessInstanceRequest:
    process_code: str
    originator_user_id: str
    dept_id: int
    form_component_values: list[ApprovalFormComponentValue] = field(default_factory=list)
    approvers: str | None = None
    cc_list: str | None = None
    cc_position: str | None = None

    def to_dict(self) -> dict[str, Any]:
        body = _request_dict(self)
        body["form_component_values"] = [v.to_dict() for v in self.form_component_values]
        return body


@dataclass
class ApprovalListProcessInstanceIdsRequest:
    """List instance ids started between two epoch-millisecond instants."""

    start_time: int
    end_time: int
    cursor: int
    size: int
    process_code: str | None = None
    userid_list: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return _request_dict(self)


@dataclass
class ApprovalTerminateProcessInstanceRequest:
    process_instance_id: str
    operating_userid: str
    is_system: bool | None = None
    remark: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return _request_dict(self)


# ---- results ----


@dataclass
class ContactUser:
    userid: str | None = None
    unionid: str | None = None
    name: str | None = None
    mobile: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> ContactUser:
        rest = _require_mapping(data, "ContactUser")
        return cls(
            userid=_opt_str(_take(rest, "userid")),
            unionid=_opt_str(_take(rest, "unionid")),
            name=_opt_str(_take(rest, "name")),
            mobile=_opt_str(_take(rest, "mobile")),
            extra=rest,
        )


@dataclass
class ContactListUsersResult:
    has_more: bool | None = None
    next_cursor: int | None = None
    list: list[ContactUser] = field(default_factory=list)
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> ContactListUsersResult:
        model = "ContactListUsersResult"
        rest = _require_mapping(data, model)
        return cls(
            has_more=_opt_bool(_take(rest, "has_more"), model, "has_more"),
            next_cursor=_opt_int(_take(rest, "next_cursor"), model, "next_cursor"),
            list=[ContactUser.from_dict(u) for u in _list(_take(rest, "list"), model, "list")],
            extra=rest,
        )


@dataclass
class ContactCreateUserResult:
    userid: str | None = None
    unionid: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> ContactCreateUserResult:
        rest = _require_mapping(data, "ContactCreateUserResult")
        return cls(
            userid=_opt_str(_take(rest, "userid")),
            unionid=_opt_str(_take(rest, "unionid")),
            extra=rest,
        )


@dataclass
class ContactDepartment:
    dept_id: int | None = None
    name: str | None = None
    parent_id: int | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> ContactDepartment:
        model = "ContactDepartment"
        rest = _require_mapping(data, model)
        return cls(
            dept_id=_opt_int(_take(rest, "dept_id", "id"), model, "dept_id"),
            name=_opt_str(_take(rest, "name")),
            parent_id=_opt_int(_take(rest, "parent_id"), model, "parent_id"),
            extra=rest,
        )


@dataclass
class ContactListSubDepartmentsResult:
    departments: list[ContactDepartment] = field(default_factory=list)
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> ContactListSubDepartmentsResult:
        # department/listsub returns the department array itself as ``result``
        if isinstance(data, list):
            return cls(departments=[ContactDepartment.from_dict(d) for d in data])
        model = "ContactListSubDepartmentsResult"
        rest = _require_mapping(data, model)
        items = _list(
            _take(rest, "departments", "dept_list", "department", "list"), model, "departments"
        )
        return cls(departments=[ContactDepartment.from_dict(d) for d in items], extra=rest)


@dataclass
class ContactListSubDepartmentIdsResult:
    dept_id_list: list[int] = field(default_factory=list)
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> ContactListSubDepartmentIdsResult:
        model = "ContactListSubDepartmentIdsResult"
        rest = _require_mapping(data, model)
        items = _list(
            _take(rest, "dept_id_list", "list", "department_ids"), model, "dept_id_list"
        )
        return cls(
            dept_id_list=[_opt_int(i, model, "dept_id_list") for i in items],
            extra=rest,
        )


@dataclass
class ContactCreateDepartmentResult:
    dept_id: int | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> ContactCreateDepartmentResult:
        model = "ContactCreateDepartmentResult"
        rest = _require_mapping(data, model)
        return cls(dept_id=_opt_int(_take(rest, "dept_id", "id"), model, "dept_id"), extra=rest)


@dataclass
class ApprovalProcessInstance:
    process_instance_id: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> ApprovalProcessInstance:
        rest = _require_mapping(data, "ApprovalProcessInstance")
        return cls(process_instance_id=_opt_str(_take(rest, "process_instance_id")), extra=rest)


@dataclass
class ApprovalListProcessInstanceIdsResult:
    list: list[str]
    next_cursor: int | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> ApprovalListProcessInstanceIdsResult:
        model = "ApprovalListProcessInstanceIdsResult"
        rest = _require_mapping(data, model)
        if "list" not in rest:
            raise DingTalkError.serialization(f"{model}: missing field `list`")
        ids = _list(rest.pop("list"), model, "list")
        return cls(
            list=[str(i) for i in ids],
            next_cursor=_opt_int(_take(rest, "next_cursor"), model, "next_cursor"),
            extra=rest,
        )


__all__ = [
    "ApprovalCreateProcessInstanceRequest",
    "ApprovalFormComponentValue",
    "ApprovalListProcessInstanceIdsRequest",
    "ApprovalListProcessInstanceIdsResult",
    "ApprovalProcessInstance",
    "ApprovalTerminateProcessInstanceRequest",
    "ContactCreateDepartmentRequest",
    "ContactCreateDepartmentResult",
    "ContactCreateUserRequest",
    "ContactCreateUserResult",
    "ContactDeleteDepartmentRequest",
    "ContactDeleteUserRequest",
    "ContactDepartment",
    "ContactGetDepartmentRequest",
    "ContactGetUserByMobileRequest",
    "ContactGetUserByUnionIdRequest",
    "ContactGetUserRequest",
    "ContactListSubDepartmentIdsRequest",
    "ContactListSubDepartmentIdsResult",
    "ContactListSubDepartmentsRequest",
    "ContactListSubDepartmentsResult",
    "ContactListUsersRequest",
    "ContactListUsersResult",
    "ContactUpdateDepartmentRequest",
    "ContactUpdateUserRequest",
    "ContactUser",
]
