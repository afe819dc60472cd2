"""Custom exceptions and error handlers (RFC 7807 for JSON, error page for HTML)."""

from __future__ import annotations

from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response

BASE_ERROR_URI = "https://leave-portal.local/errors"


# ── Exception hierarchy ─────────────────────────────────────────────

class AppException(Exception):
    """Base for all portal exceptions → RFC 7807 JSON or the error page."""

    def __init__(
        self,
        status_code: int,
        error_type: str,
        title: str,
        detail: str,
        errors: Optional[dict[str, Any]] = None,
    ) -> None:
        self.status_code = status_code
        self.error_type = error_type
        self.title = title
        self.detail = detail
        self.errors = errors
        super().__init__(detail)


class NotFoundException(AppException):
    """404 — entity not found in the fetched snapshot."""

    def __init__(self, entity_type: str, entity_id: Any) -> None:
        super().__init__(
            status_code=404,
            error_type="not-found",
            title=f"{entity_type} Not Found",
            detail=f"{entity_type} with id '{entity_id}' does not exist.",
        )


class ForbiddenException(AppException):
    """403 — the session role may not use this screen."""

    def __init__(
        self,
        detail: str = "You do not have permission to perform this action.",
    ) -> None:
        super().__init__(
            status_code=403,
            error_type="forbidden",
            title="Forbidden",
            detail=detail,
        )


# ── Remote API failures ─────────────────────────────────────────────

class ApiError(AppException):
    """Base for failures talking to the remote leave API."""


class ApiUnavailableError(ApiError):
    """502 — network failure or an unparsable response body."""

    def __init__(
        self,
        detail: str = "Unable to reach the leave service. Please try again.",
    ) -> None:
        super().__init__(
            status_code=502,
            error_type="api-unavailable",
            title="Leave Service Unavailable",
            detail=detail,
        )


class ApiResponseError(ApiError):
    """Non-2xx answer from the API carrying its own error text."""

    def __init__(self, upstream_status: int, detail: str) -> None:
        self.upstream_status = upstream_status
        super().__init__(
            status_code=upstream_status if 400 <= upstream_status < 500 else 502,
            error_type="api-error",
            title="Leave Service Error",
            detail=detail,
        )


class SessionExpiredError(ApiError):
    """401 from the API — the portal session no longer maps to a valid API session."""

    def __init__(
        self,
        detail: str = "Your session has expired. Please log in again.",
    ) -> None:
        super().__init__(
            status_code=401,
            error_type="session-expired",
            title="Session Expired",
            detail=detail,
        )


# ── RFC 7807 builder ────────────────────────────────────────────────

def _build_problem_detail(exc: AppException, request: Request) -> dict[str, Any]:
    body: dict[str, Any] = {
        "type": f"{BASE_ERROR_URI}/{exc.error_type}",
        "title": exc.title,
        "status": exc.status_code,
        "detail": exc.detail,
        "instance": str(request.url.path),
    }
    if exc.errors:
        body["errors"] = exc.errors
    return body


def wants_json(request: Request) -> bool:
    """True for JSON feeds and clients that only accept JSON."""
    if request.url.path.endswith("/events") or request.url.path == "/health":
        return True
    accept = request.headers.get("accept", "")
    return "application/json" in accept and "text/html" not in accept


# ── FastAPI handlers ────────────────────────────────────────────────

def problem_response(request: Request, exc: AppException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=_build_problem_detail(exc, request),
        media_type="application/problem+json",
    )


async def _handle_app_exception(
    request: Request,
    exc: AppException,
) -> Response:
    if wants_json(request):
        return problem_response(request, exc)

    from portal.templating import render

    return render(
        request,
        "error.html",
        {"title": exc.title, "detail": exc.detail, "status": exc.status_code},
        status_code=exc.status_code,
    )


async def _handle_validation_error(
    request: Request,
    exc: RequestValidationError,
) -> Response:
    field_errors: dict[str, list[str]] = {}
    for err in exc.errors():
        loc = err.get("loc", ())
        name = (
            ".".join(str(p) for p in loc[1:])
            if len(loc) > 1
            else str(loc[0]) if loc else "unknown"
        )
        field_errors.setdefault(name, []).append(err.get("msg", "Invalid value"))

    if not wants_json(request):
        from portal.templating import render

        detail = "; ".join(
            f"{name}: {', '.join(messages)}" for name, messages in field_errors.items()
        )
        return render(
            request,
            "error.html",
            {"title": "Validation Error", "detail": detail, "status": 422},
            status_code=422,
        )

    return JSONResponse(
        status_code=422,
        content={
            "type": f"{BASE_ERROR_URI}/validation-error",
            "title": "Validation Error",
            "status": 422,
            "detail": "Request validation failed.",
            "instance": str(request.url.path),
            "errors": field_errors,
        },
        media_type="application/problem+json",
    )


# ── Registration helper (called from main.py) ──────────────────────

def register_exception_handlers(app: FastAPI) -> None:
    """Attach all custom exception handlers to the FastAPI app."""
    app.add_exception_handler(AppException, _handle_app_exception)          # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _handle_validation_error)  # type: ignore[arg-type]
