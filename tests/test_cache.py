from core.cache import CacheEntry, TimeBoxedCache, clear, is_fresh, store

from conftest import FakeClock

TTL = 300_000


def test_never_populated_slot_is_not_fresh():
    assert not is_fresh(CacheEntry(), TTL, 10**12)
    assert not is_fresh(clear(), TTL, 0)


def test_fresh_until_ttl_elapses():
    entry = store(["a"], 1_000)
    assert is_fresh(entry, TTL, 1_000)
    assert is_fresh(entry, TTL, 1_000 + TTL - 1)
    assert not is_fresh(entry, TTL, 1_000 + TTL)


def test_clock_moving_backwards_is_stale():
    entry = store(["a"], 5_000)
    assert not is_fresh(entry, TTL, 4_999)


def test_empty_list_is_a_cacheable_value():
    assert is_fresh(store([], 0), TTL, 1)


def test_clear_resets_slot():
    entry = clear()
    assert entry.value is None
    assert entry.fetched_at == 0


def test_time_boxed_cache_expires_with_clock():
    clock = FakeClock(1_000)
    cache = TimeBoxedCache("products", ttl_ms=TTL, clock=clock)
    assert cache.get() is None

    cache.set([1, 2])
    assert cache.get() == [1, 2]
    assert cache.fetched_at == 1_000

    clock.advance(TTL - 1)
    assert cache.get() == [1, 2]
    clock.advance(1)
    assert cache.get() is None
    assert cache.peek() == [1, 2]


def test_time_boxed_cache_clear():
    cache = TimeBoxedCache("orders", ttl_ms=TTL, clock=FakeClock())
    cache.set(["x"])
    cache.clear()
    assert cache.get() is None
    assert cache.peek() is None
    assert not cache.is_fresh()
