"""SQLModel table backing the document store."""

from datetime import datetime, timezone
from typing import Dict, Any
from sqlmodel import SQLModel, Field, Column, DateTime, JSON
from sqlalchemy import func


class StoredDocument(SQLModel, table=True):
    """One JSON document in a named collection.

    Documents are addressed by ``(collection, id)``. The ``data`` column holds
    the document body with camelCase keys exactly as services wrote it.
    """

    __tablename__ = "documents"

    collection: str = Field(primary_key=True, max_length=100)
    id: str = Field(primary_key=True, max_length=255)
    data: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), server_default=func.now())
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), onupdate=func.now())
    )
