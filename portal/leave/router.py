"""Leave router — leave request submission.

Listing the requester's leave and balances happens on the dashboard itself
(see ``portal.dashboards``); this router only handles the form post.
"""

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import RedirectResponse
from pydantic import ValidationError

from portal.api_client import LeaveApiClient
from portal.auth.dependencies import get_current_session
from portal.auth.session import PortalSession
from portal.common.exceptions import ApiResponseError, ApiUnavailableError
from portal.common.notices import flash
from portal.dependencies import get_api
from portal.leave.schemas import LeaveRequestCreate
from portal.leave.service import LeaveService

router = APIRouter(tags=["leave"])


def _first_error(exc: ValidationError) -> str:
    message = exc.errors()[0].get("msg", "Invalid leave request.")
    return message.removeprefix("Value error, ")


# ── POST /leave-requests ────────────────────────────────────────────

@router.post("/leave-requests")
async def submit_leave_request(
    request: Request,
    leave_type_id: str = Form(""),
    reason: str = Form(""),
    startDate: str = Form(""),
    endDate: str = Form(""),
    session: PortalSession = Depends(get_current_session),
    api: LeaveApiClient = Depends(get_api),
):
    """Validate the form, forward it to the API, then show the re-fetched list."""
    try:
        body = LeaveRequestCreate(
            leave_type_id=leave_type_id,
            reason=reason,
            start_date=startDate,
            end_date=endDate,
        )
    except ValidationError as exc:
        flash(request, _first_error(exc), "error")
        return RedirectResponse("/", status_code=303)

    try:
        await LeaveService.submit_request(api, body)
    except (ApiResponseError, ApiUnavailableError) as exc:
        flash(request, exc.detail, "error")
        return RedirectResponse("/", status_code=303)

    flash(request, "Leave request submitted successfully")
    return RedirectResponse("/?view=requests", status_code=303)
