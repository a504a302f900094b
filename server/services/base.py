"""Read-through cached access to a document collection.

Every data-access service is built on ``CachedCollectionService``: one
``TimeBoxedCache`` slot holds the decoded result of the collection's default
query. Only that unfiltered listing is cached; parameterised queries always go
to the store and never touch the slot.

Error policy:
- Reads log the failure and answer with the service's fallback.
- Writes log the failure and re-raise it unchanged. The slot is cleared only
  after the write succeeded, so a failed write leaves cached data in place.
"""

from typing import Any, Awaitable, Callable, Dict, Generic, List, Optional, Type, TypeVar

from pydantic import ValidationError as SchemaError

from core.cache import DEFAULT_TTL_MS, Clock, TimeBoxedCache, now_ms
from core.document_store import DESCENDING, SERVER_TIMESTAMP, Document, DocumentStore, Query, query
from core.logging import get_logger
from models.common import EntityModel

logger = get_logger(__name__)

E = TypeVar("E", bound=EntityModel)
R = TypeVar("R")


class CachedCollectionService(Generic[E]):
    """Cached reads and cache-invalidating writes for one collection."""

    collection: str = ""
    entity: Type[EntityModel] = EntityModel
    order_field: Optional[str] = "createdAt"
    order_direction: str = DESCENDING
    # Serve the fallback (uncached) when the store holds no documents
    fallback_on_empty: bool = False

    def __init__(self, store: DocumentStore, ttl_ms: int = DEFAULT_TTL_MS, clock: Clock = now_ms):
        self.store = store
        self.clock = clock
        self.cache: TimeBoxedCache[List[E]] = TimeBoxedCache(self.collection, ttl_ms=ttl_ms, clock=clock)

    # ------------------------------------------------------------------
    # Decoding
    # ------------------------------------------------------------------

    def default_query(self) -> Query:
        q = query(self.collection)
        if self.order_field:
            q = q.order_by(self.order_field, self.order_direction)
        return q

    def fallback(self) -> List[E]:
        return []

    def decode(self, doc: Document) -> E:
        return self.entity.from_document(doc.id, doc.data)

    def decode_all(self, docs: List[Document]) -> List[E]:
        entities = []
        for doc in docs:
            try:
                entities.append(self.decode(doc))
            except SchemaError as e:
                logger.warning("Skipping undecodable document",
                               collection=self.collection, doc_id=doc.id, error=str(e))
        return entities

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_all(self) -> List[E]:
        """Every entity in the collection, served from the cache while fresh."""
        cached = self.cache.get()
        if cached is not None:
            return cached

        try:
            docs = await self.store.list(self.default_query())
        except Exception as e:
            logger.error("Failed to fetch collection", collection=self.collection, error=str(e))
            return self.fallback()

        entities = self.decode_all(docs)
        if not entities and self.fallback_on_empty:
            return self.fallback()

        self.cache.set(entities)
        return entities

    async def get_by_id(self, doc_id: str) -> Optional[E]:
        """Direct lookup that never consults or fills the cache."""
        try:
            doc = await self.store.get(self.collection, doc_id)
        except Exception as e:
            logger.error("Failed to fetch document", collection=self.collection,
                         doc_id=doc_id, error=str(e))
            return None
        if doc is None:
            return None
        try:
            return self.decode(doc)
        except SchemaError as e:
            logger.warning("Undecodable document", collection=self.collection,
                           doc_id=doc_id, error=str(e))
            return None

    async def _query(self, q: Query, fallback: Optional[Callable[[], List[E]]] = None) -> List[E]:
        """Run a parameterised query. Bypasses the cache in both directions."""
        try:
            docs = await self.store.list(q)
        except Exception as e:
            logger.error("Query failed", collection=q.collection,
                         filters=[tuple(f) for f in q.filters], error=str(e))
            return fallback() if fallback else []
        entities = self.decode_all(docs)
        if not entities and fallback:
            return fallback()
        return entities

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def _mutate(self, operation: str, write: Awaitable[R], **context) -> R:
        """Await a store write, clear the slot on success, log and re-raise on failure."""
        try:
            result = await write
        except Exception as e:
            logger.error("Write failed", collection=self.collection,
                         operation=operation, error=str(e), **context)
            raise
        self.clear_cache()
        logger.info("Write completed", collection=self.collection, operation=operation, **context)
        return result

    async def create(self, data: Dict[str, Any]) -> str:
        """Add a document and return its new id."""
        return await self._mutate("create", self.store.add(self.collection, data))

    async def update(self, doc_id: str, data: Dict[str, Any]) -> None:
        """Merge fields into an existing document."""
        await self._mutate("update", self.store.update(self.collection, doc_id, data), doc_id=doc_id)

    async def delete(self, doc_id: str) -> None:
        await self._mutate("delete", self.store.delete(self.collection, doc_id), doc_id=doc_id)

    async def soft_delete(self, doc_id: str) -> None:
        """Flag a document deleted while keeping it in the store."""
        await self._mutate("soft_delete", self.store.set(
            self.collection, doc_id, {"deleted": True, "deletedAt": SERVER_TIMESTAMP}, merge=True),
            doc_id=doc_id)

    def clear_cache(self) -> None:
        self.cache.clear()
