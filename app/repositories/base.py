from __future__ import annotations

import logging
from typing import Any, Type, TypeVar

from pydantic import BaseModel, ValidationError

T = TypeVar("T", bound=BaseModel)

log = logging.getLogger(__name__)


def unwrap_items(payload: Any) -> list:
    # upstream answers with a bare list or {"items": [...]} / {"data": [...]}
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for key in ("items", "data"):
            items = payload.get(key)
            if isinstance(items, list):
                return items
    return []


def parse_records(payload: Any, model: Type[T], source: str) -> list[T]:
    """Validate records one by one, a malformed record is dropped instead of failing the batch."""
    out: list[T] = []
    for raw in unwrap_items(payload):
        try:
            out.append(model.model_validate(raw))
        except ValidationError as e:
            rid = raw.get("id") if isinstance(raw, dict) else None
            log.warning("Skipping malformed %s record id=%s: %s", source, rid, e.errors()[0].get("msg", "invalid"))
    return out
