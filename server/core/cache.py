"""Time-boxed single-slot caches used by the data-access services.

Each service owns one ``TimeBoxedCache`` per cached query shape. A slot holds
a single value plus the epoch-millisecond timestamp of the fetch that produced
it. Freshness is a single elapsed-time comparison; there is no eviction, no
size bound and no cross-instance invalidation.

All state is plain in-process memory touched only from the event loop, so no
locking is needed: concurrent callers race with last-write-wins on the slot.
"""

import time
from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar

from core.logging import get_logger, log_cache_operation

logger = get_logger(__name__)

T = TypeVar("T")

Clock = Callable[[], int]

DEFAULT_TTL_MS = 5 * 60 * 1000


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    """Contents of a cache slot."""

    value: Optional[T] = None
    fetched_at: int = 0


EMPTY_ENTRY: CacheEntry = CacheEntry()


def is_fresh(entry: CacheEntry, ttl: int, now: int) -> bool:
    """True iff the entry holds a value fetched less than ``ttl`` ms before ``now``."""
    if entry.value is None:
        return False
    elapsed = now - entry.fetched_at
    return 0 <= elapsed < ttl


def store(value: T, now: int) -> CacheEntry[T]:
    return CacheEntry(value=value, fetched_at=now)


def clear() -> CacheEntry:
    return EMPTY_ENTRY


class TimeBoxedCache(Generic[T]):
    """A named single-slot cache with a fixed TTL."""

    def __init__(self, name: str, ttl_ms: int = DEFAULT_TTL_MS, clock: Clock = now_ms):
        self.name = name
        self.ttl_ms = ttl_ms
        self.clock = clock
        self.entry: CacheEntry[T] = EMPTY_ENTRY

    def get(self) -> Optional[T]:
        """Return the cached value if fresh, else None."""
        if is_fresh(self.entry, self.ttl_ms, self.clock()):
            log_cache_operation(logger, "get", self.name, hit=True)
            return self.entry.value
        log_cache_operation(logger, "get", self.name, hit=False)
        return None

    def peek(self) -> Optional[T]:
        """Return whatever the slot holds, ignoring freshness."""
        return self.entry.value

    def set(self, value: T) -> None:
        self.entry = store(value, self.clock())
        log_cache_operation(logger, "set", self.name, ttl_ms=self.ttl_ms)

    def clear(self) -> None:
        self.entry = clear()
        log_cache_operation(logger, "clear", self.name)

    @property
    def fetched_at(self) -> int:
        return self.entry.fetched_at

    def is_fresh(self) -> bool:
        return is_fresh(self.entry, self.ttl_ms, self.clock())
