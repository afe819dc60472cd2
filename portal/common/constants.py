"""Enums and constants for the leave portal — matching the remote API's string values."""

from __future__ import annotations

import enum


# ── Roles ───────────────────────────────────────────────────────────

class Role(str, enum.Enum):
    employee = "Employee"
    manager = "Manager"
    hr = "HR"
    director = "Director"

    @classmethod
    def parse(cls, value: str | None) -> "Role | None":
        """Case-insensitive lookup; ``None`` for unknown or empty values."""
        if not value:
            return None
        wanted = value.strip().lower()
        for role in cls:
            if role.value.lower() == wanted:
                return role
        return None


# Roles that act in the approval chain, in chain order
APPROVAL_CHAIN: tuple[Role, ...] = (Role.manager, Role.hr, Role.director)

# Identifier the API expects in PATCH /leaveRequest/:id → {"id": ...}
APPROVER_IDS: dict[Role, str] = {
    Role.manager: "Manager",
    Role.hr: "Hr",
    Role.director: "Director",
}

CALENDAR_ROLES: tuple[Role, ...] = APPROVAL_CHAIN

# Calendar viewers that may additionally filter by the employee's role
ROLE_FILTER_VIEWERS: frozenset[Role] = frozenset({Role.hr, Role.director})


# ── Leave ───────────────────────────────────────────────────────────

class ApprovalStatus(str, enum.Enum):
    pending = "Pending"
    approved = "Approved"
    rejected = "Rejected"
    not_required = "NotRequired"


class Decision(str, enum.Enum):
    approve = "approve"
    reject = "reject"


# ── Calendar ────────────────────────────────────────────────────────

LEAVE_COLORS: dict[str, str] = {
    "Casual Leave": "#3B82F6",
    "Sick Leave": "#EF4444",
    "Earned Leave": "#A78BFA",
    "Compensatory Off": "#6B7280",
    "Unpaid Leave": "#10B981",
    "Maternity/Paternity Leave": "#F59E0B",
}
DEFAULT_EVENT_COLOR = "#3B82F6"


# ── Misc constants ──────────────────────────────────────────────────

DATE_FORMAT = "%d-%b-%Y"          # 19-Feb-2026
UNKNOWN_LABEL = "Unknown"
