"""Approval service — approver queue and Approve/Reject decisions."""

from __future__ import annotations

from typing import Any

from portal.api_client import LeaveApiClient
from portal.approvals.workflow import actionable_for
from portal.common.constants import APPROVER_IDS, Decision, Role
from portal.common.exceptions import ForbiddenException
from portal.common.parsing import parse_list
from portal.common.resource import Resource, load_resource
from portal.leave.schemas import LeaveRequestOut


class ApprovalService:

    @staticmethod
    async def get_queue(api: LeaveApiClient, role: Role) -> list[LeaveRequestOut]:
        """Requests from /leaveRequests/approver on which ``role`` may act now."""
        requests = parse_list(LeaveRequestOut, await api.list_approver_requests())
        return actionable_for(role, requests)

    @staticmethod
    async def load_queue(api: LeaveApiClient, role: Role) -> Resource[list[LeaveRequestOut]]:
        return await load_resource(lambda: ApprovalService.get_queue(api, role))

    @staticmethod
    async def decide(
        api: LeaveApiClient,
        role: Role,
        request_id: str,
        decision: Decision,
    ) -> Any:
        approver_id = APPROVER_IDS.get(role)
        if approver_id is None:
            raise ForbiddenException(
                detail=f"Role '{role.value}' cannot approve leave requests.",
            )
        return await api.decide_leave_request(
            request_id, approver_id, approved=decision is Decision.approve,
        )
