"""TTL key-value cache shared by tokens, searches and food details."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Protocol


class Cache(Protocol):
    """Cache interface for simple key-value data."""

    def get(self, key: str) -> object | None:
        """Return a cached value if present and not expired."""

    def set(self, key: str, value: object, ttl_seconds: float) -> None:
        """Store a cached value with a TTL in seconds."""

    def delete(self, key: str) -> None:
        """Evict a cached value if present."""

    def clear(self) -> None:
        """Evict every cached value."""


def utc_now() -> datetime:
    """Return the current UTC time."""
    return datetime.now(tz=UTC)


@dataclass(frozen=True)
class CacheEntry:
    """A cached value with its creation time and lifetime."""

    key: str
    value: object
    created_at: datetime
    ttl_seconds: float

    @property
    def expires_at(self) -> datetime:
        return self.created_at + timedelta(seconds=self.ttl_seconds)

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at


@dataclass
class InMemoryCache(Cache):
    """In-memory cache with lazy expiry on read."""

    clock: Callable[[], datetime] = utc_now
    _entries: dict[str, CacheEntry] = field(default_factory=dict, init=False)

    def get(self, key: str) -> object | None:
        """Return a cached value if it hasn't expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.is_expired(self.clock()):
            self._entries.pop(key, None)
            return None
        return entry.value

    def set(self, key: str, value: object, ttl_seconds: float) -> None:
        """Store a cached value with a TTL, replacing any previous entry."""
        self._entries[key] = CacheEntry(
            key=key,
            value=value,
            created_at=self.clock(),
            ttl_seconds=max(ttl_seconds, 0),
        )

    def delete(self, key: str) -> None:
        """Evict a cached value."""
        self._entries.pop(key, None)

    def clear(self) -> None:
        """Evict every cached value."""
        self._entries.clear()

    def purge_expired(self) -> int:
        """Drop expired entries and return how many were removed."""
        now = self.clock()
        expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def __len__(self) -> int:
        return len(self._entries)
