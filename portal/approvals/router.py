"""Approvals router — Approve/Reject buttons on the Manager, HR and Director dashboards."""

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import RedirectResponse

from portal.api_client import LeaveApiClient
from portal.approvals.service import ApprovalService
from portal.auth.dependencies import require_role
from portal.auth.session import PortalSession
from portal.common.constants import APPROVAL_CHAIN, Decision
from portal.common.exceptions import ApiResponseError, ApiUnavailableError
from portal.common.notices import flash
from portal.dependencies import get_api

router = APIRouter(prefix="/approvals", tags=["approvals"])


# ── POST /approvals/{request_id} ────────────────────────────────────

@router.post("/{request_id}")
async def decide_leave_request(
    request: Request,
    request_id: str,
    decision: Decision = Form(...),
    session: PortalSession = Depends(require_role(*APPROVAL_CHAIN)),
    api: LeaveApiClient = Depends(get_api),
):
    """Send the decision as the session's approver role, then re-fetch the queue."""
    try:
        await ApprovalService.decide(api, session.role, request_id, decision)
    except (ApiResponseError, ApiUnavailableError) as exc:
        flash(request, exc.detail, "error")
    else:
        verb = "approved" if decision is Decision.approve else "rejected"
        flash(request, f"Leave request {verb} successfully")
    return RedirectResponse("/", status_code=303)
