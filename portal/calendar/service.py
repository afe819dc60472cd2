"""Calendar service — leave requests to events, plus the filter controls."""

from __future__ import annotations

from typing import Iterable, Optional

from portal.api_client import LeaveApiClient
from portal.calendar.schemas import CalendarEvent
from portal.common.constants import (
    DEFAULT_EVENT_COLOR,
    LEAVE_COLORS,
    ROLE_FILTER_VIEWERS,
    Role,
)
from portal.common.parsing import parse_list
from portal.leave.schemas import LeaveRequestOut


def event_color(leave_type: str) -> str:
    return LEAVE_COLORS.get(leave_type, DEFAULT_EVENT_COLOR)


def map_event(request: LeaveRequestOut) -> CalendarEvent:
    name = request.employee_name
    leave_type = request.leave_type_label
    return CalendarEvent(
        id=request.id,
        title=f"{name} ({leave_type})",
        start=request.start_date,
        end=request.end_date,
        leave_type=leave_type,
        employee_name=name,
        role=request.employee.role if request.employee else None,
        color=event_color(leave_type),
    )


def filter_events(
    events: Iterable[CalendarEvent],
    search: Optional[str],
    role: Optional[str],
    leave_type: Optional[str],
    viewer_role: Role,
) -> list[CalendarEvent]:
    """Apply the calendar filters; every supplied filter must match.

    ``search`` is a case-insensitive substring of the employee name. The
    ``role`` filter is ignored unless the viewer is HR or Director.
    """
    needle = (search or "").strip().lower()
    wanted_role = Role.parse(role) if viewer_role in ROLE_FILTER_VIEWERS else None
    wanted_type = (leave_type or "").strip()

    result = []
    for event in events:
        if needle and needle not in event.employee_name.lower():
            continue
        if wanted_role is not None and Role.parse(event.role) is not wanted_role:
            continue
        if wanted_type and event.leave_type != wanted_type:
            continue
        result.append(event)
    return result


class CalendarService:

    @staticmethod
    async def load_events(api: LeaveApiClient, viewer_role: Role) -> list[CalendarEvent]:
        requests = parse_list(
            LeaveRequestOut, await api.list_calendar_requests(viewer_role.value),
        )
        return [map_event(r) for r in requests]
