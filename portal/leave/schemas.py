"""Leave Pydantic v2 schemas — parsing API responses and validating form input.

Naming conventions:
  - *Create        → form input forwarded to the API (write)
  - *Out           → API response snapshots (read)
  - *Brief         → compact embedded representations

The API speaks camelCase in places (``startDate``, ``leaveType``) and is not
consistent about the HR approval key, so read models accept every spelling
seen on the wire.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Any, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

from portal.common.constants import ApprovalStatus, UNKNOWN_LABEL


def _to_str(value: Any) -> Any:
    return str(value) if isinstance(value, int) else value


def _to_date(value: Any) -> Any:
    """Accept ``YYYY-MM-DD`` or any ISO datetime string and keep the date part."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str) and len(value) >= 10:
        return value[:10]
    return value


def _to_approval(value: Any) -> Any:
    if value is None:
        return ApprovalStatus.pending
    if isinstance(value, str):
        wanted = value.replace(" ", "").replace("_", "").lower()
        for status in ApprovalStatus:
            if status.value.lower() == wanted:
                return status
    return value


def _null_as(default: Any) -> BeforeValidator:
    """Read a JSON ``null`` in a display-only field as ``default``."""

    def coerce(value: Any) -> Any:
        return default if value is None else value

    return BeforeValidator(coerce)


ApiId = Annotated[str, BeforeValidator(_to_str)]
ApiDate = Annotated[date, BeforeValidator(_to_date)]
Approval = Annotated[ApprovalStatus, BeforeValidator(_to_approval)]
Text = Annotated[str, _null_as("")]
Label = Annotated[str, _null_as(UNKNOWN_LABEL)]
Status = Annotated[str, _null_as(ApprovalStatus.pending.value)]
Amount = Annotated[Decimal, _null_as(Decimal("0"))]
Flag = Annotated[bool, _null_as(False)]


# ═════════════════════════════════════════════════════════════════════
# Embedded / shared
# ═════════════════════════════════════════════════════════════════════


class EmployeeBrief(BaseModel):
    """Minimal employee info embedded in leave responses."""

    model_config = ConfigDict(extra="ignore")

    id: Optional[ApiId] = None
    fullname: Label = UNKNOWN_LABEL
    email: Optional[str] = None
    role: Optional[str] = None


class LeaveTypeOut(BaseModel):
    """Leave type reference data (also embedded in requests and balances)."""

    model_config = ConfigDict(extra="ignore")

    id: Optional[ApiId] = None
    label: Label = Field(
        UNKNOWN_LABEL, validation_alias=AliasChoices("leave_type", "label"),
    )


# ═════════════════════════════════════════════════════════════════════
# Leave Request (read)
# ═════════════════════════════════════════════════════════════════════


class LeaveRequestOut(BaseModel):
    """Leave request snapshot with its three approval stages."""

    model_config = ConfigDict(extra="ignore")

    id: ApiId
    employee: Optional[EmployeeBrief] = None
    leave_type: Optional[LeaveTypeOut] = Field(
        None, validation_alias=AliasChoices("leaveType", "leave_type"),
    )
    reason: Text = ""
    start_date: ApiDate = Field(validation_alias=AliasChoices("startDate", "start_date"))
    end_date: ApiDate = Field(validation_alias=AliasChoices("endDate", "end_date"))
    status: Status = ApprovalStatus.pending.value
    manager_approval: Approval = ApprovalStatus.pending
    hr_approval: Approval = Field(
        ApprovalStatus.pending,
        validation_alias=AliasChoices("HR_approval", "hr_approval"),
    )
    director_approval: Approval = ApprovalStatus.pending

    @property
    def employee_name(self) -> str:
        return self.employee.fullname if self.employee else UNKNOWN_LABEL

    @property
    def leave_type_label(self) -> str:
        return self.leave_type.label if self.leave_type else UNKNOWN_LABEL


# ═════════════════════════════════════════════════════════════════════
# Leave Balance
# ═════════════════════════════════════════════════════════════════════


class LeaveBalanceOut(BaseModel):
    """Balance for one leave type. ``remaining`` is shown as sent, never recomputed."""

    model_config = ConfigDict(extra="ignore")

    id: ApiId
    leave_type: Optional[LeaveTypeOut] = Field(
        None, validation_alias=AliasChoices("leaveType", "leave_type"),
    )
    allocated: Amount = Field(
        Decimal("0"), validation_alias=AliasChoices("allocated_leave", "allocated"),
    )
    used: Amount = Field(
        Decimal("0"), validation_alias=AliasChoices("used_leave", "used"),
    )
    remaining: Amount = Field(
        Decimal("0"), validation_alias=AliasChoices("remaining_leave", "remaining"),
    )

    @property
    def leave_type_label(self) -> str:
        return self.leave_type.label if self.leave_type else UNKNOWN_LABEL


# ═════════════════════════════════════════════════════════════════════
# Leave Request (create)
# ═════════════════════════════════════════════════════════════════════


class LeaveRequestCreate(BaseModel):
    """Leave request form input."""

    leave_type_id: str = Field(..., min_length=1)
    reason: str = Field(..., max_length=1000)
    start_date: date = Field(..., description="Leave start date (inclusive)")
    end_date: date = Field(..., description="Leave end date (inclusive)")

    @field_validator("reason")
    @classmethod
    def reason_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Reason is required.")
        return v

    @model_validator(mode="after")
    def validate_dates(self) -> "LeaveRequestCreate":
        if self.start_date > self.end_date:
            raise ValueError("Start date must be on or before end date.")
        return self

    def to_api_payload(self) -> dict[str, str]:
        return {
            "leave_type_id": self.leave_type_id,
            "reason": self.reason,
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat(),
        }
