"""Approval gating — which role may act on a leave request next.

Pure functions over the three approval fields of a ``LeaveRequestOut``. Every
approver dashboard filters through ``can_act`` so the Manager → HR → Director
ordering lives in one place. This is display gating only: the API enforces
the chain, and a request the portal hides can still be decided by a direct
API call.
"""

from __future__ import annotations

from typing import Iterable, Optional

from portal.common.constants import APPROVAL_CHAIN, ApprovalStatus, Role
from portal.leave.schemas import LeaveRequestOut

_PENDING = ApprovalStatus.pending
_APPROVED = ApprovalStatus.approved


def can_act(role: Role, request: LeaveRequestOut) -> bool:
    """True when ``role`` has an outstanding decision on ``request``."""
    if role is Role.manager:
        return request.manager_approval is _PENDING
    if role is Role.hr:
        return (
            request.manager_approval is not _PENDING
            and request.hr_approval is _PENDING
        )
    if role is Role.director:
        return (
            request.hr_approval is _APPROVED
            and request.director_approval is _PENDING
        )
    return False


def actionable_for(role: Role, requests: Iterable[LeaveRequestOut]) -> list[LeaveRequestOut]:
    """Keep only the requests ``role`` may approve or reject, preserving order."""
    return [req for req in requests if can_act(role, req)]


def next_approver(request: LeaveRequestOut) -> Optional[Role]:
    """First role in chain order that may act, or ``None`` if nobody is awaited."""
    for role in APPROVAL_CHAIN:
        if can_act(role, request):
            return role
    return None
