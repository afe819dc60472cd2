"""Leave service — the employee-facing screens: types, own requests, balances, submission."""

from __future__ import annotations

import enum
from typing import Any, Optional

from portal.api_client import LeaveApiClient
from portal.common.parsing import parse_list
from portal.common.resource import Resource, load_resource
from portal.leave.schemas import (
    LeaveBalanceOut,
    LeaveRequestCreate,
    LeaveRequestOut,
    LeaveTypeOut,
)


class EmployeeView(str, enum.Enum):
    requests = "requests"
    balances = "balances"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["EmployeeView"]:
        try:
            return cls(value) if value else None
        except ValueError:
            return None


class LeaveService:
    """Reads and writes for the requester's own leave."""

    @staticmethod
    async def get_leave_types(api: LeaveApiClient) -> list[LeaveTypeOut]:
        return parse_list(LeaveTypeOut, await api.list_leave_types())

    @staticmethod
    async def get_my_requests(api: LeaveApiClient) -> list[LeaveRequestOut]:
        return parse_list(LeaveRequestOut, await api.list_my_leave_requests())

    @staticmethod
    async def get_balances(api: LeaveApiClient) -> list[LeaveBalanceOut]:
        return parse_list(LeaveBalanceOut, await api.list_leave_balances())

    @staticmethod
    async def submit_request(api: LeaveApiClient, body: LeaveRequestCreate) -> Any:
        return await api.create_leave_request(body.to_api_payload())

    @staticmethod
    async def employee_dashboard(
        api: LeaveApiClient,
        view: Optional[EmployeeView],
    ) -> dict[str, Any]:
        """Template context for the employee section.

        Leave types are fetched on every render for the request form; the
        requests or balances table only when that view is selected.
        """
        leave_types = await load_resource(lambda: LeaveService.get_leave_types(api))

        my_requests: Resource[list[LeaveRequestOut]] = Resource.idle()
        balances: Resource[list[LeaveBalanceOut]] = Resource.idle()
        if view is EmployeeView.requests:
            my_requests = await load_resource(lambda: LeaveService.get_my_requests(api))
        elif view is EmployeeView.balances:
            balances = await load_resource(lambda: LeaveService.get_balances(api))

        return {
            "view": view.value if view else None,
            "leave_types": leave_types,
            "my_requests": my_requests,
            "balances": balances,
        }
