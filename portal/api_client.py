"""HTTP client for the remote leave-management API.

One ``LeaveApiClient`` is opened per portal request. It carries the user's
API session cookies (what a browser client sends with
``credentials: include``), maps transport and HTTP failures onto the portal's
exception hierarchy, and returns decoded JSON. Parsing into read models
happens in the service layer.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

import httpx

from portal.common.exceptions import (
    ApiResponseError,
    ApiUnavailableError,
    SessionExpiredError,
)

logger = logging.getLogger(__name__)


def _error_text(response: httpx.Response, fallback: str) -> str:
    """Server-reported message from a JSON ``error``/``message`` field, else ``fallback``."""
    try:
        body = response.json()
    except (json.JSONDecodeError, ValueError):
        return fallback
    if isinstance(body, dict):
        for key in ("error", "message"):
            value = body.get(key)
            if isinstance(value, str) and value.strip():
                return value
    return fallback


class LeaveApiClient:
    """Thin async wrapper around the leave API endpoints."""

    def __init__(
        self,
        base_url: str,
        *,
        cookies: Optional[dict[str, str]] = None,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            cookies=cookies or None,
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    async def __aenter__(self) -> "LeaveApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    @property
    def session_cookies(self) -> dict[str, str]:
        """Cookies currently held for the API (including any set by the last response)."""
        return {cookie.name: cookie.value for cookie in self._client.cookies.jar}

    # ── Core request ────────────────────────────────────────────────

    async def _request(
        self,
        method: str,
        path: str,
        *,
        fallback: str,
        json_body: Any = None,
        files: Any = None,
        expire_on_401: bool = True,
    ) -> Any:
        logger.debug("API %s %s", method, path)
        try:
            response = await self._client.request(method, path, json=json_body, files=files)
        except httpx.HTTPError as exc:
            logger.warning("API %s %s failed: %s", method, path, exc)
            raise ApiUnavailableError() from exc

        if response.status_code == 401 and expire_on_401:
            logger.info("API %s %s answered 401; session expired", method, path)
            raise SessionExpiredError()

        if response.is_error:
            detail = _error_text(response, fallback)
            logger.warning(
                "API %s %s answered %s: %s", method, path, response.status_code, detail,
            )
            raise ApiResponseError(response.status_code, detail)

        if not response.content:
            return None
        try:
            return response.json()
        except (json.JSONDecodeError, ValueError) as exc:
            logger.warning("API %s %s returned an unreadable body", method, path)
            raise ApiUnavailableError(
                "The leave service returned an unreadable response.",
            ) from exc

    async def _get_list(self, path: str, fallback: str) -> list[Any]:
        body = await self._request("GET", path, fallback=fallback)
        if body is None:
            return []
        if not isinstance(body, list):
            raise ApiUnavailableError("The leave service returned an unexpected response.")
        return body

    # ── Auth ────────────────────────────────────────────────────────

    async def login(self, email: str, password: str) -> Any:
        """POST /login. A 401 here means bad credentials, not an expired session."""
        return await self._request(
            "POST",
            "/login",
            json_body={"email": email, "password": password},
            fallback="Login failed",
            expire_on_401=False,
        )

    # ── Leave ───────────────────────────────────────────────────────

    async def list_leave_types(self) -> list[Any]:
        return await self._get_list("/leaveTypes", "Failed to load leave types.")

    async def list_my_leave_requests(self) -> list[Any]:
        return await self._get_list("/leaveRequests", "Unable to load leave requests.")

    async def list_leave_balances(self) -> list[Any]:
        return await self._get_list("/leaveBalance", "Unable to load leave balances.")

    async def list_approver_requests(self) -> list[Any]:
        return await self._get_list(
            "/leaveRequests/approver", "Failed to fetch leave requests",
        )

    async def list_calendar_requests(self, role: str) -> list[Any]:
        return await self._get_list(
            f"/leaveRequests/calendar/{role}",
            "Unable to fetch leave data. Please try again later.",
        )

    async def create_leave_request(self, payload: dict[str, Any]) -> Any:
        return await self._request(
            "POST", "/leaveRequest",
            json_body=payload, fallback="Failed to submit leave request",
        )

    async def decide_leave_request(
        self, request_id: str, approver_id: str, approved: bool,
    ) -> Any:
        return await self._request(
            "PATCH", f"/leaveRequest/{request_id}",
            json_body={"id": approver_id, "approved": approved},
            fallback="Failed to update leave request",
        )

    # ── Employees ───────────────────────────────────────────────────

    async def list_employees(self) -> list[Any]:
        return await self._get_list("/employees", "Failed to fetch employees")

    async def list_deleted_employees(self) -> list[Any]:
        return await self._get_list("/employee/restore", "Failed to fetch deleted employees")

    async def create_employee(self, payload: dict[str, Any]) -> Any:
        return await self._request(
            "POST", "/employees", json_body=payload, fallback="Failed to create employee",
        )

    async def update_employee(self, employee_id: str, payload: dict[str, Any]) -> Any:
        return await self._request(
            "PUT", f"/employees/{employee_id}",
            json_body=payload, fallback="Failed to update employee",
        )

    async def set_employee_deleted(self, employee_id: str, deleted: bool) -> Any:
        return await self._request(
            "PATCH", f"/employee/{employee_id}",
            json_body={"soft_delete": deleted},
            fallback="Failed to delete employee" if deleted else "Failed to restore employee",
        )

    async def bulk_upload_employees(
        self, filename: str, content: bytes, content_type: Optional[str],
    ) -> Any:
        return await self._request(
            "POST", "/employees/bulk-upload",
            files={"file": (filename, content, content_type or "application/octet-stream")},
            fallback="Bulk upload failed",
        )
