"""Calendar schemas — one leave request as a calendar event."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Any, Optional

from pydantic import BaseModel


class CalendarEvent(BaseModel):
    """Leave request mapped for the calendar. ``end`` is inclusive."""

    id: str
    title: str
    start: date
    end: date
    leave_type: str
    employee_name: str
    role: Optional[str] = None
    color: str

    def to_fullcalendar(self) -> dict[str, Any]:
        # FullCalendar treats an all-day end as exclusive
        return {
            "id": self.id,
            "title": self.title,
            "start": self.start.isoformat(),
            "end": (self.end + timedelta(days=1)).isoformat(),
            "allDay": True,
            "color": self.color,
            "extendedProps": {
                "employeeName": self.employee_name,
                "leaveType": self.leave_type,
                "role": self.role,
                "lastDay": self.end.isoformat(),
            },
        }
