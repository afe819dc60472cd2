"""One-shot inline messages carried across a redirect in the Starlette session."""

from __future__ import annotations

from typing import Literal

from fastapi import Request

NoticeKind = Literal["success", "error", "info"]

_SESSION_KEY = "notices"


def flash(request: Request, text: str, kind: NoticeKind = "success") -> None:
    if "session" not in request.scope:
        return
    notices = list(request.session.get(_SESSION_KEY, []))
    notices.append({"text": text, "kind": kind})
    request.session[_SESSION_KEY] = notices


def pop_notices(request: Request) -> list[dict[str, str]]:
    if "session" not in request.scope:
        return []
    return request.session.pop(_SESSION_KEY, [])
