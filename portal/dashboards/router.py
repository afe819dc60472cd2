"""Dashboard router — ``GET /`` renders the login form or the session role's dashboard.

Each dashboard is a full re-fetch on every render; mutations elsewhere
redirect back here.
"""

from typing import Any, Awaitable, Callable, Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import Response

from portal.api_client import LeaveApiClient
from portal.approvals.service import ApprovalService
from portal.approvals.workflow import next_approver
from portal.auth.router import render_login
from portal.auth.session import PortalSession, read_session, set_role_hint
from portal.common.constants import Role
from portal.config import settings
from portal.dependencies import get_api
from portal.leave.service import EmployeeView, LeaveService
from portal.templating import render

router = APIRouter(tags=["dashboards"])

DashboardBuilder = Callable[[LeaveApiClient, PortalSession, Optional[EmployeeView]], Awaitable[dict[str, Any]]]


# ── Per-role context builders ───────────────────────────────────────

async def _employee_context(
    api: LeaveApiClient, session: PortalSession, view: Optional[EmployeeView],
) -> dict[str, Any]:
    context = await LeaveService.employee_dashboard(api, view)
    context["next_approver"] = next_approver
    return context


async def _approver_context(
    api: LeaveApiClient, session: PortalSession, view: Optional[EmployeeView],
) -> dict[str, Any]:
    return {"queue": await ApprovalService.load_queue(api, session.role)}


async def _hr_context(
    api: LeaveApiClient, session: PortalSession, view: Optional[EmployeeView],
) -> dict[str, Any]:
    # HR is also an employee: own requests and balances sit under the queue
    context = await _approver_context(api, session, view)
    context.update(await _employee_context(api, session, view))
    return context


DASHBOARDS: dict[Role, tuple[str, DashboardBuilder]] = {
    Role.employee: ("dashboards/employee.html", _employee_context),
    Role.manager: ("dashboards/manager.html", _approver_context),
    Role.hr: ("dashboards/hr.html", _hr_context),
    Role.director: ("dashboards/director.html", _approver_context),
}


# ── GET / ───────────────────────────────────────────────────────────

@router.get("/")
async def home(
    request: Request,
    view: Optional[str] = Query(None),
    api: LeaveApiClient = Depends(get_api),
) -> Response:
    session = read_session(request)
    if session is None:
        response = render_login(request)
        if settings.ROLE_COOKIE_NAME in request.cookies:
            # stale hint without a valid session
            response.delete_cookie(settings.ROLE_COOKIE_NAME, samesite="lax")
        return response

    template, build = DASHBOARDS[session.role]
    context = await build(api, session, EmployeeView.parse(view))
    response = render(request, template, context)
    set_role_hint(response, session.role)
    return response
