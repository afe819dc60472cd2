"""Portal session — signed JWT cookie plus the readable role hint.

The ``role`` cookie only tells the browser which dashboard to expect. Access
is decided by ``portal_session``: an HttpOnly JWT holding the role and the
remote API's own session cookies. The remote API remains the authority; a
401 from it ends the portal session regardless of what either cookie says.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Request, Response
from jose import ExpiredSignatureError, JWTError, jwt

from portal.common.constants import Role
from portal.config import settings

_TOKEN_TYPE = "portal_session"


@dataclass(frozen=True)
class PortalSession:
    role: Role
    api_cookies: dict[str, str] = field(default_factory=dict)


# ── Token helpers ───────────────────────────────────────────────────

def issue_session_token(
    role: Role,
    api_cookies: dict[str, str],
    expired: bool = False,
) -> str:
    now = datetime.now(timezone.utc)
    if expired:
        exp = now - timedelta(hours=1)
    else:
        exp = now + timedelta(hours=settings.SESSION_EXPIRY_HOURS)
    payload = {
        "role": role.value,
        "api": dict(api_cookies),
        "type": _TOKEN_TYPE,
        "iat": now,
        "exp": exp,
    }
    return jwt.encode(payload, settings.SESSION_SECRET, algorithm=settings.SESSION_ALGORITHM)


def decode_session_token(token: str) -> Optional[PortalSession]:
    """Return the session for a valid token, ``None`` for anything else."""
    try:
        payload = jwt.decode(
            token,
            settings.SESSION_SECRET,
            algorithms=[settings.SESSION_ALGORITHM],
        )
    except ExpiredSignatureError:
        return None
    except JWTError:
        return None

    if payload.get("type") != _TOKEN_TYPE:
        return None
    role = Role.parse(payload.get("role"))
    if role is None:
        return None
    cookies = payload.get("api") or {}
    if not isinstance(cookies, dict):
        return None
    return PortalSession(role=role, api_cookies={str(k): str(v) for k, v in cookies.items()})


def read_session(request: Request) -> Optional[PortalSession]:
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not token:
        return None
    return decode_session_token(token)


# ── Cookie lifecycle ────────────────────────────────────────────────

def start_session(response: Response, role: Role, api_cookies: dict[str, str]) -> None:
    max_age = settings.SESSION_EXPIRY_HOURS * 3600
    response.set_cookie(
        settings.SESSION_COOKIE_NAME,
        issue_session_token(role, api_cookies),
        max_age=max_age,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
    )
    set_role_hint(response, role)


def set_role_hint(response: Response, role: Role) -> None:
    response.set_cookie(
        settings.ROLE_COOKIE_NAME,
        role.value,
        max_age=settings.SESSION_EXPIRY_HOURS * 3600,
        httponly=False,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
    )


def end_session(response: Response) -> None:
    response.delete_cookie(settings.SESSION_COOKIE_NAME, samesite="lax")
    response.delete_cookie(settings.ROLE_COOKIE_NAME, samesite="lax")
