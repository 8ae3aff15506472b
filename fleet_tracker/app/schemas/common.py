"""
Shared Pydantic building blocks.

Every schema serializes with camelCase keys on the wire while keeping
snake_case attribute names in Python.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional
from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema: camelCase aliases, ORM attribute loading, stripped strings."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True
        str_strip_whitespace = True


class Pagination(CamelModel):
    """Offset pagination descriptor returned next to every list."""
    total: int
    limit: int
    skip: int
    has_more: bool

    @classmethod
    def build(cls, total: int, limit: int, skip: int, returned: int) -> "Pagination":
        return cls(total=total, limit=limit, skip=skip, has_more=skip + returned < total)


def dump(model: Optional[BaseModel]) -> Optional[Dict[str, Any]]:
    """Serialize a schema instance to its JSON wire form."""
    if model is None:
        return None
    return model.model_dump(by_alias=True, mode="json")


def envelope(message: str, data: Any = None) -> Dict[str, Any]:
    """Build the uniform success envelope."""
    return {"success": True, "message": message, "data": data}


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Timestamps are stored as naive UTC."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
