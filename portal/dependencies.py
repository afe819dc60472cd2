"""Shared FastAPI dependencies."""

from typing import AsyncGenerator

from fastapi import Request

from portal.api_client import LeaveApiClient
from portal.auth.session import read_session
from portal.config import settings


async def get_api(request: Request) -> AsyncGenerator[LeaveApiClient, None]:
    """Open an API client carrying the caller's API session cookies (if any)."""
    session = read_session(request)
    async with LeaveApiClient(
        settings.API_BASE_URL,
        cookies=session.api_cookies if session else None,
        timeout=settings.API_TIMEOUT_SECONDS,
        transport=getattr(request.app.state, "api_transport", None),
    ) as api:
        yield api
