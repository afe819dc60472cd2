"""Common module — shared utilities for the leave portal."""

from portal.common.constants import (
    APPROVAL_CHAIN,
    APPROVER_IDS,
    CALENDAR_ROLES,
    DATE_FORMAT,
    DEFAULT_EVENT_COLOR,
    LEAVE_COLORS,
    ROLE_FILTER_VIEWERS,
    UNKNOWN_LABEL,
    ApprovalStatus,
    Decision,
    Role,
)
from portal.common.exceptions import (
    ApiError,
    ApiResponseError,
    ApiUnavailableError,
    AppException,
    ForbiddenException,
    NotFoundException,
    SessionExpiredError,
    register_exception_handlers,
)
from portal.common.resource import Resource, ResourceStatus, load_resource

__all__ = [
    # Constants / Enums
    "ApprovalStatus",
    "Decision",
    "Role",
    "APPROVAL_CHAIN",
    "APPROVER_IDS",
    "CALENDAR_ROLES",
    "ROLE_FILTER_VIEWERS",
    "LEAVE_COLORS",
    "DEFAULT_EVENT_COLOR",
    "DATE_FORMAT",
    "UNKNOWN_LABEL",
    # Exceptions
    "AppException",
    "ApiError",
    "ApiResponseError",
    "ApiUnavailableError",
    "ForbiddenException",
    "NotFoundException",
    "SessionExpiredError",
    "register_exception_handlers",
    # Fetch state
    "Resource",
    "ResourceStatus",
    "load_resource",
]
