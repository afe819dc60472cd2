"""Auth dependencies — portal session lookup and role gating.

Role gating here only decides which portal screens a session may open. The
remote API enforces the real authorization on every call.
"""

from __future__ import annotations

from typing import Callable

from fastapi import Depends, Request

from portal.auth.session import PortalSession, read_session
from portal.common.constants import Role
from portal.common.exceptions import AppException, ForbiddenException


class LoginRequiredException(AppException):
    """401 — no valid portal session; HTML callers are sent to the login form."""

    def __init__(self) -> None:
        super().__init__(
            status_code=401,
            error_type="login-required",
            title="Login Required",
            detail="Please log in to continue.",
        )


# ── Core dependency ─────────────────────────────────────────────────

async def get_current_session(request: Request) -> PortalSession:
    """Return the decoded portal session or raise ``LoginRequiredException``."""
    session = read_session(request)
    if session is None:
        raise LoginRequiredException()
    request.state.user_role = session.role
    return session


# ── Role-based dependency ───────────────────────────────────────────

def require_role(*allowed_roles: Role) -> Callable:
    """Return a FastAPI dependency that enforces role membership."""

    async def _check(
        session: PortalSession = Depends(get_current_session),
    ) -> PortalSession:
        if session.role not in allowed_roles:
            raise ForbiddenException(
                detail=f"Role '{session.role.value}' is not permitted. Required: {[r.value for r in allowed_roles]}.",
            )
        return session

    return _check
