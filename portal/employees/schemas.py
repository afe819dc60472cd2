"""Employee schemas — API snapshots, admin form input and bulk-upload results."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from portal.common.constants import Role
from portal.leave.schemas import ApiDate, ApiId, Flag, Text


def _parse_role(value: Any) -> Role:
    role = Role.parse(value) if isinstance(value, str) else None
    if role is None:
        raise ValueError("Select a valid role.")
    return role


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


# ═════════════════════════════════════════════════════════════════════
# Response
# ═════════════════════════════════════════════════════════════════════


class EmployeeOut(BaseModel):
    """Employee row as listed by the API."""

    model_config = ConfigDict(extra="ignore")

    id: ApiId
    fullname: Text = ""
    email: Text = ""
    role: Text = ""
    join_date: Optional[ApiDate] = Field(
        None, validation_alias=AliasChoices("joinDate", "join_date"),
    )
    soft_delete: Flag = False


# ═════════════════════════════════════════════════════════════════════
# Create / Update
# ═════════════════════════════════════════════════════════════════════


class EmployeeCreate(BaseModel):
    """Admin registration form (individual create)."""

    fullname: str = Field(..., min_length=2, max_length=200)
    email: str = Field(..., min_length=3, max_length=320)
    password: str = Field(..., min_length=1)
    role: Role
    manager_email: Optional[str] = None
    hr_email: Optional[str] = None
    director_email: Optional[str] = None

    @field_validator("role", mode="before")
    @classmethod
    def role_is_known(cls, v: Any) -> Role:
        return _parse_role(v)

    @field_validator("email")
    @classmethod
    def email_has_at(cls, v: str) -> str:
        v = v.strip()
        if "@" not in v:
            raise ValueError("Enter a valid email address.")
        return v

    @field_validator("manager_email", "hr_email", "director_email")
    @classmethod
    def optional_emails(cls, v: Optional[str]) -> Optional[str]:
        return _blank_to_none(v)

    def to_api_payload(self, now: Optional[datetime] = None) -> dict[str, str]:
        stamp = (now or datetime.now(timezone.utc)).isoformat()
        return {
            "fullname": self.fullname.strip(),
            "email": self.email,
            "password": self.password,
            "role": self.role.value,
            "managerEmail": self.manager_email or "",
            "hrEmail": self.hr_email or "",
            "directorEmail": self.director_email or "",
            "created_at": stamp,
            "updated_at": stamp,
        }


class EmployeeUpdate(BaseModel):
    """Edit form for an existing employee."""

    id: str = Field(..., min_length=1)
    fullname: str = Field(..., min_length=2, max_length=200)
    email: str = Field(..., min_length=3, max_length=320)
    role: Role
    join_date: Optional[date] = None

    @field_validator("role", mode="before")
    @classmethod
    def role_is_known(cls, v: Any) -> Role:
        return _parse_role(v)

    def to_api_payload(self, today: Optional[date] = None) -> dict[str, Any]:
        return {
            "id": self.id,
            "fullname": self.fullname.strip(),
            "email": self.email.strip(),
            "role": self.role.value,
            "joinDate": (self.join_date or today or date.today()).isoformat(),
            "soft_delete": False,
        }


# ═════════════════════════════════════════════════════════════════════
# Bulk upload
# ═════════════════════════════════════════════════════════════════════


class BulkUploadResult(BaseModel):
    """How many employees the API reports as added by a spreadsheet upload."""

    added: int = 0
    message: Optional[str] = None

    @classmethod
    def from_response(cls, body: Any) -> "BulkUploadResult":
        if isinstance(body, list):
            return cls(added=len(body))
        if not isinstance(body, dict):
            return cls()
        message = body.get("message") if isinstance(body.get("message"), str) else None
        for key in ("count", "added", "inserted"):
            value = body.get(key)
            if isinstance(value, int) and not isinstance(value, bool):
                return cls(added=value, message=message)
        employees = body.get("employees")
        if isinstance(employees, list):
            return cls(added=len(employees), message=message)
        return cls(message=message)
