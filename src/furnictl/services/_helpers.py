"""Shared service-layer helper functions."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel


def now_iso() -> str:
    """Current UTC time as standard ISO 8601.

    Only the service/CLI boundary calls this; the domain layer always
    receives ``now`` as an argument.
    """
    return datetime.now(UTC).isoformat()


def dump(value: Any) -> Any:
    """JSON-ready form of a domain value (models, lists of models, plain data)."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, list):
        return [dump(item) for item in value]
    return value
