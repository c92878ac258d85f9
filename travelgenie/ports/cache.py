"""Cache port - Injectable caching abstraction.

Geocoding adapters cache both hits and confirmed misses, so a lookup
reports whether the key was present separately from the value.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Protocol, Tuple, TypeVar

T = TypeVar("T")


class CachePort(Protocol[T]):
    """Port for caching.

    Implementation: adapters/cache/memory_cache.py (InMemoryCache)
    """

    def lookup(self, key: str) -> Tuple[bool, Optional[T]]:
        """Return (found, value); value may legitimately be None."""
        ...

    def store(self, key: str, value: Optional[T], ttl: Optional[float] = None) -> None:
        """Store ``value`` under ``key``, optionally overriding the TTL."""
        ...

    def invalidate(self, key: str) -> bool:
        """Drop ``key``; True if it was present."""
        ...

    def clear(self) -> int:
        """Drop every entry and return how many there were."""
        ...

    def stats(self) -> Dict[str, Any]:
        """Return size and hit/miss counters."""
        ...
