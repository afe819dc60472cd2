"""Auth router — login form, logout, and session-ending error handlers."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, Form, Request
from fastapi.responses import RedirectResponse, Response
from pydantic import ValidationError

from portal.api_client import LeaveApiClient
from portal.auth import service
from portal.auth.dependencies import LoginRequiredException
from portal.auth.schemas import LoginRequest
from portal.auth.session import end_session, read_session, start_session
from portal.common.exceptions import (
    ApiResponseError,
    ApiUnavailableError,
    SessionExpiredError,
    problem_response,
    wants_json,
)
from portal.common.rate_limit import limiter
from portal.config import settings
from portal.dependencies import get_api
from portal.templating import render

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])

GENERIC_LOGIN_ERROR = "Something went wrong. Please try again."


def render_login(
    request: Request,
    *,
    email: str = "",
    error: Optional[str] = None,
    status_code: int = 200,
) -> Response:
    return render(
        request, "login.html", {"email": email, "error": error}, status_code=status_code,
    )


# ── GET /login ──────────────────────────────────────────────────────

@router.get("/login")
async def login_form(request: Request):
    if read_session(request) is not None:
        return RedirectResponse("/", status_code=303)
    return render_login(request)


# ── POST /login ─────────────────────────────────────────────────────

@router.post("/login")
@limiter.limit(settings.LOGIN_RATE_LIMIT)
async def login_submit(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    api: LeaveApiClient = Depends(get_api),
):
    try:
        credentials = LoginRequest(email=email, password=password)
    except ValidationError:
        return render_login(
            request, email=email, error="Email and password are required.", status_code=422,
        )

    try:
        result = await service.login(api, credentials)
    except ApiResponseError as exc:
        logger.info("Login rejected for %s: %s", credentials.email, exc.detail)
        return render_login(
            request, email=credentials.email, error=exc.detail,
            status_code=401 if exc.upstream_status < 500 else exc.status_code,
        )
    except ApiUnavailableError:
        return render_login(
            request, email=credentials.email, error=GENERIC_LOGIN_ERROR, status_code=503,
        )

    logger.info("Login succeeded for %s as %s", credentials.email, result.role.value)
    response = RedirectResponse("/", status_code=303)
    start_session(response, result.role, result.api_cookies)
    return response


# ── POST /logout ────────────────────────────────────────────────────

@router.post("/logout")
async def logout(request: Request):
    response = RedirectResponse("/", status_code=303)
    end_session(response)
    return response


# ── Handlers ────────────────────────────────────────────────────────

async def _handle_login_required(request: Request, exc: LoginRequiredException) -> Response:
    if wants_json(request):
        return problem_response(request, exc)
    return RedirectResponse("/", status_code=303)


async def _handle_session_expired(request: Request, exc: SessionExpiredError) -> Response:
    if wants_json(request):
        response: Response = problem_response(request, exc)
    else:
        response = render(
            request,
            "login.html",
            {"email": "", "error": exc.detail, "current_role": None},
            status_code=exc.status_code,
        )
    end_session(response)
    return response


def register_auth_handlers(app: FastAPI) -> None:
    """Attach the session-ending handlers (more specific than AppException)."""
    app.add_exception_handler(LoginRequiredException, _handle_login_required)  # type: ignore[arg-type]
    app.add_exception_handler(SessionExpiredError, _handle_session_expired)    # type: ignore[arg-type]
