"""Tests for the in-memory TTL cache."""

from fatsecret_proxy.services.cache import InMemoryCache
from tests.conftest import FakeClock


def test_get_returns_value_within_ttl(cache: InMemoryCache, clock: FakeClock) -> None:
    cache.set("search:apple:25", ["apple"], ttl_seconds=60)
    clock.advance(59)

    assert cache.get("search:apple:25") == ["apple"]


def test_get_expires_lazily(cache: InMemoryCache, clock: FakeClock) -> None:
    cache.set("food:1", {"food_id": "1"}, ttl_seconds=60)
    clock.advance(60)

    assert len(cache) == 1
    assert cache.get("food:1") is None
    assert len(cache) == 0


def test_set_overwrites_entry_and_lifetime(
    cache: InMemoryCache, clock: FakeClock
) -> None:
    cache.set("token:basic", "old", ttl_seconds=10)
    clock.advance(5)
    cache.set("token:basic", "new", ttl_seconds=10)
    clock.advance(8)

    assert cache.get("token:basic") == "new"


def test_delete_and_clear(cache: InMemoryCache) -> None:
    cache.set("a", 1, ttl_seconds=60)
    cache.set("b", 2, ttl_seconds=60)

    cache.delete("a")
    cache.delete("missing")
    assert cache.get("a") is None
    assert cache.get("b") == 2

    cache.clear()
    assert len(cache) == 0


def test_purge_expired(cache: InMemoryCache, clock: FakeClock) -> None:
    cache.set("short", 1, ttl_seconds=5)
    cache.set("long", 2, ttl_seconds=500)
    clock.advance(10)

    assert cache.purge_expired() == 1
    assert cache.get("long") == 2


def test_default_clock_uses_real_time() -> None:
    cache = InMemoryCache()
    cache.set("key", "value", ttl_seconds=60)

    assert cache.get("key") == "value"
