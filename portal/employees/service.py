"""Employee service — HR employee management over the API.

Every list is a fresh snapshot; search runs over that snapshot only.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional

from portal.api_client import LeaveApiClient
from portal.common.exceptions import NotFoundException
from portal.common.parsing import parse_list
from portal.employees.schemas import (
    BulkUploadResult,
    EmployeeCreate,
    EmployeeOut,
    EmployeeUpdate,
)


def search_employees(employees: list[EmployeeOut], query: Optional[str]) -> list[EmployeeOut]:
    """Case-insensitive substring match on full name or email."""
    needle = (query or "").strip().lower()
    if not needle:
        return list(employees)
    return [
        emp for emp in employees
        if needle in emp.fullname.lower() or needle in emp.email.lower()
    ]


class EmployeeService:

    @staticmethod
    async def list_active(api: LeaveApiClient) -> list[EmployeeOut]:
        return parse_list(EmployeeOut, await api.list_employees())

    @staticmethod
    async def list_deleted(api: LeaveApiClient) -> list[EmployeeOut]:
        return parse_list(EmployeeOut, await api.list_deleted_employees())

    @staticmethod
    async def get_employee(api: LeaveApiClient, employee_id: str) -> EmployeeOut:
        for emp in await EmployeeService.list_active(api):
            if emp.id == employee_id:
                return emp
        raise NotFoundException(entity_type="Employee", entity_id=employee_id)

    @staticmethod
    async def create(
        api: LeaveApiClient, body: EmployeeCreate, now: Optional[datetime] = None,
    ) -> Any:
        return await api.create_employee(body.to_api_payload(now))

    @staticmethod
    async def update(
        api: LeaveApiClient, body: EmployeeUpdate, today: Optional[date] = None,
    ) -> Any:
        return await api.update_employee(body.id, body.to_api_payload(today))

    @staticmethod
    async def soft_delete(api: LeaveApiClient, employee_id: str) -> Any:
        return await api.set_employee_deleted(employee_id, True)

    @staticmethod
    async def restore(api: LeaveApiClient, employee_id: str) -> Any:
        return await api.set_employee_deleted(employee_id, False)

    @staticmethod
    async def bulk_upload(
        api: LeaveApiClient,
        filename: str,
        content: bytes,
        content_type: Optional[str],
    ) -> BulkUploadResult:
        body = await api.bulk_upload_employees(filename, content, content_type)
        return BulkUploadResult.from_response(body)
