"""Auth service — credential exchange with the remote API."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from portal.api_client import LeaveApiClient
from portal.auth.schemas import LoginRequest
from portal.common.constants import Role
from portal.common.exceptions import ApiResponseError


@dataclass(frozen=True)
class LoginResult:
    role: Role
    api_cookies: dict[str, str]


def extract_role(body: Any) -> Role:
    """Read the role from ``{token: {role}}`` or, failing that, ``{role}``."""
    raw = None
    if isinstance(body, dict):
        token = body.get("token")
        if isinstance(token, dict):
            raw = token.get("role")
        if raw is None:
            raw = body.get("role")
    role = Role.parse(raw) if isinstance(raw, str) else None
    if role is None:
        raise ApiResponseError(502, "Login response did not include a valid role.")
    return role


async def login(api: LeaveApiClient, credentials: LoginRequest) -> LoginResult:
    """POST the credentials; keep the role and whatever session cookies the API set."""
    body = await api.login(credentials.email, credentials.password)
    return LoginResult(role=extract_role(body), api_cookies=api.session_cookies)
