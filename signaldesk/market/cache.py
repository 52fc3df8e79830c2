"""Short-TTL response cache.

An explicit object owned by whoever fetches; it stores one value with the
time it was stored.  Callers pass the current time in, which keeps expiry
deterministic under test.
"""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    """A cached value and the epoch-ms timestamp it was stored at."""

    value: T
    timestamp_ms: int


class ResponseCache(Generic[T]):
    """Single-slot cache with a time-to-live in milliseconds."""

    def __init__(self, ttl_ms: int = 2000) -> None:
        self.ttl_ms = ttl_ms
        self._entry: Optional[CacheEntry[T]] = None

    @property
    def entry(self) -> Optional[CacheEntry[T]]:
        return self._entry

    def is_fresh(self, now_ms: int) -> bool:
        """True if a value is stored and younger than the TTL."""
        if self._entry is None:
            return False
        return now_ms - self._entry.timestamp_ms < self.ttl_ms

    def get(self, now_ms: int) -> Optional[T]:
        """Return the cached value if still fresh, else ``None``."""
        if not self.is_fresh(now_ms):
            return None
        return self._entry.value  # type: ignore[union-attr]

    def put(self, value: T, now_ms: int) -> None:
        self._entry = CacheEntry(value=value, timestamp_ms=now_ms)
