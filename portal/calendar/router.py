"""Calendar router — the team leave calendar page and its JSON event feed."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from portal.api_client import LeaveApiClient
from portal.auth.dependencies import require_role
from portal.auth.session import PortalSession
from portal.calendar.service import CalendarService, filter_events
from portal.common.constants import (
    CALENDAR_ROLES,
    LEAVE_COLORS,
    ROLE_FILTER_VIEWERS,
    Role,
)
from portal.dependencies import get_api
from portal.templating import render

router = APIRouter(prefix="/calendar", tags=["calendar"])

calendar_roles = require_role(*CALENDAR_ROLES)


# ── GET /calendar ───────────────────────────────────────────────────

@router.get("")
async def calendar_page(
    request: Request,
    search: Optional[str] = Query(None, max_length=200),
    role: Optional[str] = Query(None),
    leave_type: Optional[str] = Query(None),
    session: PortalSession = Depends(calendar_roles),
):
    """Page shell only; the widget pulls ``/calendar/events`` with the same filters."""
    return render(
        request,
        "calendar.html",
        {
            "search": search or "",
            "role_filter": role or "",
            "leave_type": leave_type or "",
            "show_role_filter": session.role in ROLE_FILTER_VIEWERS,
            "roles": list(Role),
            "leave_colors": LEAVE_COLORS,
        },
    )


# ── GET /calendar/events ────────────────────────────────────────────

@router.get("/events")
async def calendar_events(
    search: Optional[str] = Query(None, max_length=200),
    role: Optional[str] = Query(None),
    leave_type: Optional[str] = Query(None),
    session: PortalSession = Depends(calendar_roles),
    api: LeaveApiClient = Depends(get_api),
):
    events = await CalendarService.load_events(api, session.role)
    visible = filter_events(events, search, role, leave_type, session.role)
    return JSONResponse([e.to_fullcalendar() for e in visible])
