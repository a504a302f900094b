"""Document store client.

A small document-database API (collections of JSON documents addressed by a
store-assigned string id) layered on the SQL ``documents`` table. Services
only ever talk to the store through this module; they never build SQL.

Query semantics:
- Filters are evaluated against the top-level document fields. A document
  missing the filtered field only matches ``!=`` and ``not-in``.
- ``order_by`` sorts are stable and applied right to left; documents missing
  a sort field sort after every document that has it, in either direction.
- Timestamps are written as UTC ISO-8601 strings with microsecond precision
  so range filters on them compare correctly.
"""

import uuid
from dataclasses import dataclass, replace
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Dict, List, NamedTuple, Optional, Tuple

from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select

from core.database import Database
from core.exceptions import DocumentNotFoundError, StoreError
from core.logging import get_logger, log_store_call
from models.database import StoredDocument

logger = get_logger(__name__)

ASCENDING = "asc"
DESCENDING = "desc"

_MISSING = object()


class _ServerTimestamp:
    """Sentinel replaced with the write time when a document is stored."""

    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


SERVER_TIMESTAMP = _ServerTimestamp()


def format_timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def encode_value(value: Any, now: datetime) -> Any:
    """Convert a Python value into its JSON document representation."""
    if value is SERVER_TIMESTAMP:
        return format_timestamp(now)
    if isinstance(value, datetime):
        return format_timestamp(value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, BaseModel):
        return encode_value(value.model_dump(by_alias=True, exclude_none=True), now)
    if isinstance(value, dict):
        return {str(k): encode_value(v, now) for k, v in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [encode_value(v, now) for v in value]
    return value


def new_document_id() -> str:
    return uuid.uuid4().hex[:20]


class Document(NamedTuple):
    id: str
    data: Dict[str, Any]


class FieldFilter(NamedTuple):
    field: str
    op: str
    value: Any


_OPERATORS = {"==", "!=", "<", "<=", ">", ">=", "in", "not-in", "array-contains"}


@dataclass(frozen=True)
class Query:
    """Immutable query builder over one collection."""

    collection: str
    filters: Tuple[FieldFilter, ...] = ()
    orders: Tuple[Tuple[str, str], ...] = ()
    max_results: Optional[int] = None

    def where(self, field_name: str, op: str, value: Any) -> "Query":
        if op not in _OPERATORS:
            raise ValueError(f"Unsupported filter operator: {op}")
        return replace(self, filters=self.filters + (FieldFilter(field_name, op, value),))

    def order_by(self, field_name: str, direction: str = ASCENDING) -> "Query":
        return replace(self, orders=self.orders + ((field_name, direction),))

    def limit(self, count: int) -> "Query":
        return replace(self, max_results=count)


def query(collection: str) -> Query:
    return Query(collection=collection)


def _type_rank(value: Any) -> int:
    if value is None:
        return 0
    if isinstance(value, bool):
        return 1
    if isinstance(value, (int, float)):
        return 2
    if isinstance(value, str):
        return 3
    return 4


def _sort_key(value: Any) -> Tuple[int, Any]:
    rank = _type_rank(value)
    return (rank, str(value) if rank == 4 else value)


def _compare(left: Any, op: str, right: Any) -> bool:
    if op == "==":
        return left == right
    if op == "!=":
        return left != right
    if op == "in":
        return left in right
    if op == "not-in":
        return left not in right
    if op == "array-contains":
        return isinstance(left, list) and right in left
    if _type_rank(left) != _type_rank(right) or left is None:
        return False
    if op == "<":
        return left < right
    if op == "<=":
        return left <= right
    if op == ">":
        return left > right
    return left >= right


def matches(data: Dict[str, Any], flt: FieldFilter, now: datetime) -> bool:
    value = data.get(flt.field, _MISSING)
    if value is _MISSING:
        return flt.op in ("!=", "not-in")
    return _compare(value, flt.op, encode_value(flt.value, now))


def apply_query(documents: List[Document], q: Query, now: Optional[datetime] = None) -> List[Document]:
    """Filter, sort and limit already-loaded documents."""
    now = now or datetime.now(timezone.utc)
    result = [d for d in documents if all(matches(d.data, f, now) for f in q.filters)]

    for field_name, direction in reversed(q.orders):
        present = [d for d in result if d.data.get(field_name) is not None]
        missing = [d for d in result if d.data.get(field_name) is None]
        present.sort(key=lambda d: _sort_key(d.data[field_name]), reverse=direction == DESCENDING)
        result = present + missing

    if q.max_results is not None:
        result = result[:q.max_results]
    return result


class DocumentStore:
    """Async client for the document collections."""

    def __init__(self, database: Database):
        self.database = database

    async def list(self, q: Query) -> List[Document]:
        """Run a query and return matching documents."""
        try:
            async with self.database.get_session() as session:
                stmt = select(StoredDocument).where(StoredDocument.collection == q.collection)
                result = await session.execute(stmt)
                rows = result.scalars().all()
        except SQLAlchemyError as e:
            log_store_call(logger, "list", q.collection, False, error=str(e))
            raise StoreError("list", q.collection, str(e)) from e

        documents = [Document(row.id, dict(row.data or {})) for row in rows]
        documents = apply_query(documents, q)
        log_store_call(logger, "list", q.collection, True, count=len(documents))
        return documents

    async def get(self, collection: str, doc_id: str) -> Optional[Document]:
        """Fetch a single document, or None when it does not exist."""
        try:
            async with self.database.get_session() as session:
                row = await session.get(StoredDocument, (collection, doc_id))
        except SQLAlchemyError as e:
            log_store_call(logger, "get", collection, False, doc_id=doc_id, error=str(e))
            raise StoreError("get", collection, str(e)) from e

        log_store_call(logger, "get", collection, True, doc_id=doc_id, found=row is not None)
        if row is None:
            return None
        return Document(row.id, dict(row.data or {}))

    async def add(self, collection: str, data: Dict[str, Any]) -> str:
        """Create a document with a generated id and return the id."""
        doc_id = new_document_id()
        await self.set(collection, doc_id, data)
        return doc_id

    async def set(self, collection: str, doc_id: str, data: Dict[str, Any], merge: bool = False) -> None:
        """Create or overwrite a document. With ``merge`` only the given fields change."""
        now = datetime.now(timezone.utc)
        encoded = encode_value(data, now)
        try:
            async with self.database.get_session() as session:
                row = await session.get(StoredDocument, (collection, doc_id))
                if row is None:
                    session.add(StoredDocument(collection=collection, id=doc_id, data=encoded))
                else:
                    row.data = {**(row.data or {}), **encoded} if merge else encoded
                    row.updated_at = now
                await session.commit()
        except SQLAlchemyError as e:
            log_store_call(logger, "set", collection, False, doc_id=doc_id, error=str(e))
            raise StoreError("set", collection, str(e)) from e
        log_store_call(logger, "set", collection, True, doc_id=doc_id, merge=merge)

    async def update(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        """Merge fields into an existing document; raises if it does not exist."""
        now = datetime.now(timezone.utc)
        encoded = encode_value(data, now)
        try:
            async with self.database.get_session() as session:
                row = await session.get(StoredDocument, (collection, doc_id))
                if row is None:
                    raise DocumentNotFoundError(collection, doc_id)
                row.data = {**(row.data or {}), **encoded}
                row.updated_at = now
                await session.commit()
        except SQLAlchemyError as e:
            log_store_call(logger, "update", collection, False, doc_id=doc_id, error=str(e))
            raise StoreError("update", collection, str(e)) from e
        log_store_call(logger, "update", collection, True, doc_id=doc_id)

    async def delete(self, collection: str, doc_id: str) -> None:
        """Delete a document. Deleting a missing document is not an error."""
        try:
            async with self.database.get_session() as session:
                row = await session.get(StoredDocument, (collection, doc_id))
                if row is not None:
                    await session.delete(row)
                    await session.commit()
        except SQLAlchemyError as e:
            log_store_call(logger, "delete", collection, False, doc_id=doc_id, error=str(e))
            raise StoreError("delete", collection, str(e)) from e
        log_store_call(logger, "delete", collection, True, doc_id=doc_id)
