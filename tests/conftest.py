"""Shared fixtures: a throwaway SQLite document store, object storage and a fake clock."""

from collections import Counter

import pytest

from core.config import Settings
from core.database import Database
from core.document_store import DocumentStore
from core.exceptions import StoreError
from core.object_storage import ObjectStorage

START_MS = 1_700_000_000_000
TTL_MS = 300_000


class FakeClock:
    """Callable epoch-millisecond clock that only moves when told to."""

    def __init__(self, now: int = START_MS):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class CountingStore(DocumentStore):
    """DocumentStore that counts calls and can be switched to fail."""

    def __init__(self, database: Database):
        super().__init__(database)
        self.calls = Counter()
        self.failing = False

    def _enter(self, operation: str, collection: str) -> None:
        self.calls[operation] += 1
        if self.failing:
            raise StoreError(operation, collection, "store offline")

    async def list(self, q):
        self._enter("list", q.collection)
        return await super().list(q)

    async def get(self, collection, doc_id):
        self._enter("get", collection)
        return await super().get(collection, doc_id)

    async def set(self, collection, doc_id, data, merge=False):
        self._enter("set", collection)
        return await super().set(collection, doc_id, data, merge=merge)

    async def update(self, collection, doc_id, data):
        self._enter("update", collection)
        return await super().update(collection, doc_id, data)

    async def delete(self, collection, doc_id):
        self._enter("delete", collection)
        return await super().delete(collection, doc_id)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'store.db'}",
        storage_root=str(tmp_path / "objects"),
        storage_public_url="http://testserver/storage",
        log_format="console",
        log_level="WARNING",
    )


@pytest.fixture
async def database(settings):
    db = Database(settings)
    await db.startup()
    yield db
    await db.shutdown()


@pytest.fixture
def store(database):
    return CountingStore(database)


@pytest.fixture
def storage(settings):
    return ObjectStorage(settings)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def service_kwargs(clock):
    return {"ttl_ms": TTL_MS, "clock": clock}
