"""Turn API JSON into read models; malformed payloads count as parse failures."""

from __future__ import annotations

import logging
from typing import Any, Iterable, TypeVar

from pydantic import BaseModel, ValidationError

from portal.common.exceptions import ApiUnavailableError

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def parse_list(model: type[M], items: Iterable[Any]) -> list[M]:
    try:
        return [model.model_validate(item) for item in items]
    except ValidationError as exc:
        logger.warning("Unexpected %s payload: %s", model.__name__, exc.errors()[:3])
        raise ApiUnavailableError(
            "The leave service returned data the portal could not read.",
        ) from exc
