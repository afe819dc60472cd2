"""Leave Portal — FastAPI Application Factory."""

import logging
from typing import Optional

import httpx
from fastapi import FastAPI
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.middleware.sessions import SessionMiddleware

from portal.approvals.router import router as approvals_router
from portal.auth.router import register_auth_handlers
from portal.auth.router import router as auth_router
from portal.calendar.router import router as calendar_router
from portal.common.exceptions import register_exception_handlers
from portal.common.rate_limit import limiter
from portal.config import settings
from portal.dashboards.router import router as dashboards_router
from portal.employees.router import router as employees_router
from portal.leave.router import router as leave_router


def create_app(api_transport: Optional[httpx.AsyncBaseTransport] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    ``api_transport`` replaces the network transport of every upstream API
    client (tests pass an ``httpx.MockTransport``).
    """
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    app = FastAPI(
        title="Leave Portal",
        description="Role-based dashboards over the leave management API",
        version="1.0.0",
        docs_url="/api/docs" if settings.ENVIRONMENT != "production" else None,
        redoc_url=None,
    )
    app.state.api_transport = api_transport

    # Exception handlers (RFC 7807 / error page, then session-ending ones)
    register_exception_handlers(app)
    register_auth_handlers(app)

    # Rate limiting (slowapi)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Flash notices live in a signed cookie separate from the portal session
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.SESSION_SECRET,
        session_cookie="portal_notices",
        same_site="lax",
        https_only=settings.COOKIE_SECURE,
    )

    # Health check (no auth)
    @app.get("/health", tags=["system"])
    async def health_check():
        return {
            "status": "healthy",
            "version": "1.0.0",
            "environment": settings.ENVIRONMENT,
        }

    # Register routers
    app.include_router(auth_router)
    app.include_router(dashboards_router)
    app.include_router(leave_router)
    app.include_router(approvals_router)
    app.include_router(employees_router)
    app.include_router(calendar_router)

    return app


app = create_app()
