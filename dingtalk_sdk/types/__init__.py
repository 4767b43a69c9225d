"""Public request, result and message types."""

from .enterprise import (
    ApprovalCreateProcessInstanceRequest,
    ApprovalFormComponentValue,
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
from .webhook import ActionCardButton, FeedCardLink

__all__ = [
    "ActionCardButton",
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
    "FeedCardLink",
]
