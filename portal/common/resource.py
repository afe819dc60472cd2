"""Fetch-state wrapper shared by every screen.

A ``Resource`` records where one API fetch stands (idle, success, error)
together with its data or error text, so templates branch on one status
field instead of each view juggling its own loading/error flags.

A server-rendered page is only sent once its fetches have settled, so no
``Resource`` is ever rendered as ``loading``. While a mutation is in flight
the browser holds that state instead: forms marked ``data-once`` in
``base.html`` disable their submit buttons until the next page arrives.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, Optional, TypeVar

from portal.common.exceptions import ApiResponseError, ApiUnavailableError

T = TypeVar("T")


class ResourceStatus(str, enum.Enum):
    idle = "idle"
    loading = "loading"
    success = "success"
    error = "error"


@dataclass(frozen=True)
class Resource(Generic[T]):
    status: ResourceStatus = ResourceStatus.idle
    data: Optional[T] = None
    error: Optional[str] = None

    @classmethod
    def idle(cls) -> "Resource[T]":
        return cls()

    @classmethod
    def ok(cls, data: T) -> "Resource[T]":
        return cls(status=ResourceStatus.success, data=data)

    @classmethod
    def failed(cls, message: str) -> "Resource[T]":
        return cls(status=ResourceStatus.error, error=message)

    @property
    def is_idle(self) -> bool:
        return self.status is ResourceStatus.idle

    @property
    def is_success(self) -> bool:
        return self.status is ResourceStatus.success

    @property
    def is_error(self) -> bool:
        return self.status is ResourceStatus.error

    @property
    def is_empty(self) -> bool:
        return self.is_success and not self.data


async def load_resource(fetch: Callable[[], Awaitable[T]]) -> Resource[T]:
    """Run ``fetch`` and fold API failures into an error resource.

    ``SessionExpiredError`` is not caught: it must reach the global handler
    that ends the portal session.
    """
    try:
        return Resource.ok(await fetch())
    except (ApiResponseError, ApiUnavailableError) as exc:
        return Resource.failed(exc.detail)
