"""Shared test fixtures — fake leave API, app, client, session helpers, payload factories.

The remote API is replaced by ``FakeLeaveApi`` behind an ``httpx.MockTransport``
injected through ``create_app(api_transport=...)``, so every upstream call is
recorded and no network is touched.
"""

from __future__ import annotations

import os

# Set test settings before any other import touches pydantic-settings
os.environ.setdefault("SESSION_SECRET", "test-secret-for-ci-do-not-use-in-production")
os.environ.setdefault("API_BASE_URL", "http://leave-api.test")

import json
from typing import Any, AsyncGenerator, Callable, Optional, Union

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from portal.auth.session import issue_session_token
from portal.common.constants import Role
from portal.config import settings
from portal.main import create_app

Handler = Callable[[httpx.Request], httpx.Response]


# ── Fake upstream API ───────────────────────────────────────────────

class FakeLeaveApi:
    """Canned responses keyed by (method, path); every request is recorded."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Handler] = {}
        self.requests: list[httpx.Request] = []

    def on(
        self,
        method: str,
        path: str,
        json_body: Any = None,
        *,
        status: int = 200,
        headers: Optional[dict[str, str]] = None,
        handler: Optional[Handler] = None,
    ) -> None:
        def canned(request: httpx.Request) -> httpx.Response:
            return httpx.Response(status, json=json_body, headers=headers)

        self.routes[(method, path)] = handler or canned

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [
            r for r in self.requests
            if r.method == method and r.url.path == path
        ]

    def json_of(self, request: httpx.Request) -> Any:
        return json.loads(request.content)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"error": "Not found"})
        return route(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self._handle)


@pytest.fixture
def fake_api() -> FakeLeaveApi:
    return FakeLeaveApi()


@pytest.fixture(autouse=True)
def _reset_rate_limiter():
    """Reset rate limiter storage between tests to prevent cross-test interference."""
    from portal.common.rate_limit import limiter

    limiter.reset()
    yield


# ── FastAPI test client ─────────────────────────────────────────────

@pytest.fixture
async def app(fake_api):
    """Create a fresh app instance talking to the fake API."""
    yield create_app(api_transport=fake_api.transport)


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client wired to the test app."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


# ── Session helpers ─────────────────────────────────────────────────

API_COOKIES = {"connect.sid": "s%3Aupstream-session"}


def login_as(
    client: AsyncClient,
    role: Role,
    *,
    expired: bool = False,
    role_hint: Optional[str] = None,
) -> None:
    """Put a portal session for ``role`` in the client's cookie jar."""
    token = issue_session_token(role, API_COOKIES, expired=expired)
    client.cookies.set(settings.SESSION_COOKIE_NAME, token)
    client.cookies.set(settings.ROLE_COOKIE_NAME, role_hint or role.value)


def deleted_cookies(response: httpx.Response) -> set[str]:
    """Names of cookies the response expires."""
    names = set()
    for header in response.headers.get_list("set-cookie"):
        name = header.split("=", 1)[0]
        if "max-age=0" in header.lower():
            names.add(name)
    return names


# ── Payload factories ───────────────────────────────────────────────

def make_leave_request(
    id: Union[int, str] = 1,
    *,
    fullname: str = "Asha Rao",
    employee_role: str = "Employee",
    leave_type: str = "Casual Leave",
    start: str = "2026-03-02T00:00:00.000Z",
    end: str = "2026-03-04T00:00:00.000Z",
    reason: Optional[str] = "Family function",
    manager: Optional[str] = "Pending",
    hr: Optional[str] = "Pending",
    director: Optional[str] = "Pending",
    hr_key: str = "HR_approval",
) -> dict[str, Any]:
    """Leave request shaped like the API sends it (camelCase, nested relations)."""
    return {
        "id": id,
        "employee": {"id": 10, "fullname": fullname, "email": "asha@example.com", "role": employee_role},
        "leaveType": {"id": 3, "leave_type": leave_type},
        "reason": reason,
        "startDate": start,
        "endDate": end,
        "status": "Pending",
        "manager_approval": manager,
        hr_key: hr,
        "director_approval": director,
    }


def make_employee(
    id: Union[int, str] = 10,
    *,
    fullname: str = "Asha Rao",
    email: Optional[str] = "asha@example.com",
    role: str = "Employee",
    join_date: str = "2024-01-15T00:00:00.000Z",
    soft_delete: bool = False,
) -> dict[str, Any]:
    return {
        "id": id,
        "fullname": fullname,
        "email": email,
        "role": role,
        "joinDate": join_date,
        "soft_delete": soft_delete,
    }


LEAVE_TYPES = [
    {"id": 1, "leave_type": "Casual Leave"},
    {"id": 2, "leave_type": "Sick Leave"},
]
