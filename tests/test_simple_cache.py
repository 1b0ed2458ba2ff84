"""Unit tests for the in-memory SimpleTTLCache."""

import threading

import pytest

from verify_client.utils.simple_cache import MISSING, SimpleTTLCache, build_cache_key


def test_build_cache_key_prefixes_direction() -> None:
    assert build_cache_key("d", "123") == "d-123"
    assert build_cache_key("r", "123") == "r-123"
    assert build_cache_key("d", "123") != build_cache_key("r", "123")


def test_set_then_get_returns_value(clock) -> None:
    cache = SimpleTTLCache(ttl_seconds=10, clock=clock)

    assert cache.get("missing") is MISSING

    cache.set("key", 42)
    assert cache.get("key") == 42

    stats = cache.stats()
    assert stats["hits"] == 1
    assert stats["misses"] == 1


def test_none_is_a_cacheable_value(clock) -> None:
    cache = SimpleTTLCache(ttl_seconds=10, clock=clock)
    cache.set("key", None)

    assert cache.get("key") is None
    assert cache.stats()["hits"] == 1


def test_expired_entry_reads_as_missing_but_is_kept(clock) -> None:
    cache = SimpleTTLCache(ttl_seconds=5, clock=clock)
    cache.set("key", {"data": True})

    clock.advance(4.5)
    assert cache.get("key") == {"data": True}

    clock.advance(0.5)
    assert cache.get("key") is MISSING

    stats = cache.stats()
    assert stats["entries"] == 1
    assert stats["evictions"] == 0


def test_set_replaces_previous_entry_and_refreshes_ttl(clock) -> None:
    cache = SimpleTTLCache(ttl_seconds=5, clock=clock)
    cache.set("key", {"a": 1})

    clock.advance(6)
    cache.set("key", {"b": 2})

    assert cache.get("key") == {"b": 2}
    assert len(cache) == 1


def test_unbounded_by_default(clock) -> None:
    cache = SimpleTTLCache(ttl_seconds=100, clock=clock)
    for idx in range(500):
        cache.set(f"k-{idx}", idx)

    assert cache.stats()["entries"] == 500
    assert cache.stats()["max_entries"] is None


def test_lru_eviction_removes_least_recently_used(clock) -> None:
    cache = SimpleTTLCache(ttl_seconds=100, max_entries=2, clock=clock)
    cache.set("a", 1)
    cache.set("b", 2)

    # Access "a" so that "b" becomes least recently used
    assert cache.get("a") == 1

    cache.set("c", 3)

    assert cache.get("a") == 1
    assert cache.get("c") == 3
    assert cache.get("b") is MISSING
    assert cache.stats()["evictions"] == 1


def test_clear_resets_state(clock) -> None:
    cache = SimpleTTLCache(ttl_seconds=10, clock=clock)
    cache.set("a", 1)
    cache.set("b", 2)
    cache.get("a")

    cache.clear()

    stats = cache.stats()
    assert stats["entries"] == 0
    assert stats["hits"] == 0
    assert stats["misses"] == 0
    assert stats["evictions"] == 0


@pytest.mark.parametrize(
    "kwargs",
    [
        {"ttl_seconds": 0},
        {"ttl_seconds": 10, "max_entries": 0},
    ],
)
def test_invalid_constructor_args(kwargs: dict) -> None:
    with pytest.raises(ValueError):
        SimpleTTLCache(**kwargs)


def test_thread_safety_under_concurrent_sets() -> None:
    cache = SimpleTTLCache(ttl_seconds=30)
    total_keys = 50

    def _writer(idx: int) -> None:
        cache.set(f"k-{idx}", {"v": idx})

    threads = [threading.Thread(target=_writer, args=(i,)) for i in range(total_keys)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert cache.stats()["entries"] == total_keys
    assert cache.get("k-0") == {"v": 0}
    assert cache.get("k-49") == {"v": 49}
