"""TTL cache tests driven by a fake clock."""

from __future__ import annotations

from pickledger.cache import TTLCache


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now


def test_entries_expire_after_ttl() -> None:
    clock = FakeClock()
    cache = TTLCache(ttl_seconds=60, time_fn=clock)
    cache.set("sinner", 1)

    clock.now += 59
    assert cache.get("sinner") == 1

    clock.now += 1
    assert cache.get("sinner") is None
    assert len(cache) == 0


def test_missing_key_returns_default() -> None:
    cache = TTLCache(ttl_seconds=60)
    assert cache.get("nobody", "fallback") == "fallback"


def test_oldest_entry_is_evicted_when_full() -> None:
    clock = FakeClock()
    cache = TTLCache(ttl_seconds=60, max_items=2, time_fn=clock)
    cache.set("a", 1)
    clock.now += 1
    cache.set("b", 2)
    clock.now += 1
    cache.set("c", 3)

    assert cache.get("a") is None
    assert cache.get("b") == 2
    assert cache.get("c") == 3


def test_clear() -> None:
    cache = TTLCache(ttl_seconds=60)
    cache.set("a", 1)
    cache.clear()
    assert len(cache) == 0
