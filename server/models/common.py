"""Shared pydantic building blocks for entity schemas.

Documents are stored with camelCase keys. Every entity decodes a raw document
exactly once, through ``from_document``, which is where missing fields pick
up their defaults.
"""

import re
from datetime import datetime
from typing import Any, Dict, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

E = TypeVar("E", bound="EntityModel")

_NON_NUMERIC = re.compile(r"[^0-9.]")


def parse_money(value: Any) -> float:
    """Parse a display amount such as ``"$3,000.50"`` into a float.

    Numbers pass through; unparseable or empty values become 0.0.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)
    cleaned = _NON_NUMERIC.sub("", str(value))
    try:
        return float(cleaned) if cleaned else 0.0
    except ValueError:
        return 0.0


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase field names."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_document(self) -> Dict[str, Any]:
        """Fields explicitly provided, keyed as stored."""
        return self.model_dump(by_alias=True, exclude_unset=True)


class EntityModel(CamelModel):
    """A record mirrored from a stored document."""

    id: str

    @classmethod
    def from_document(cls: Type[E], doc_id: str, data: Dict[str, Any]) -> E:
        return cls.model_validate({**data, "id": doc_id})


class Address(CamelModel):
    full_name: str = ""
    address_line1: str = ""
    address_line2: Optional[str] = None
    city: str = ""
    state: str = ""
    postal_code: str = ""
    country: str = ""
    phone: Optional[str] = None
    is_default: bool = False

    @property
    def location(self) -> str:
        return f"{self.city}, {self.state}, {self.country}"


class Note(CamelModel):
    id: str
    text: str
    created_at: Optional[datetime] = None
    created_by: str = ""


def to_wire(value: Any) -> Any:
    """JSON-ready camelCase form of a model, or of a list or dict of models."""
    if isinstance(value, BaseModel):
        return value.model_dump(by_alias=True, mode="json")
    if isinstance(value, list):
        return [to_wire(v) for v in value]
    if isinstance(value, dict):
        return {k: to_wire(v) for k, v in value.items()}
    return value
