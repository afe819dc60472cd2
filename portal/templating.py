"""Jinja2 environment shared by every router."""

from __future__ import annotations

import pathlib
from datetime import date
from decimal import Decimal
from typing import Any, Optional

from fastapi import Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from portal.auth.session import read_session
from portal.common.constants import DATE_FORMAT, UNKNOWN_LABEL
from portal.common.notices import pop_notices
from portal.config import settings

# Resolve relative to this file (avoids cwd issues)
TEMPLATES_DIR = pathlib.Path(__file__).resolve().parent / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def _format_date(value: Optional[date]) -> str:
    return value.strftime(DATE_FORMAT) if value else UNKNOWN_LABEL


def _format_number(value: Any) -> str:
    if isinstance(value, Decimal):
        normalized = value.normalize()
        return format(normalized, "f")
    return str(value)


templates.env.filters["date"] = _format_date
templates.env.filters["num"] = _format_number


def render(
    request: Request,
    name: str,
    context: Optional[dict[str, Any]] = None,
    status_code: int = 200,
) -> HTMLResponse:
    """Render ``name`` with the notices and session role every page needs."""
    session = read_session(request)
    ctx: dict[str, Any] = {
        "notices": pop_notices(request),
        "notice_ttl_ms": settings.NOTICE_TTL_SECONDS * 1000,
        "current_role": session.role if session else None,
    }
    ctx.update(context or {})
    return templates.TemplateResponse(request, name, ctx, status_code=status_code)
