"""Thread-safe in-memory LRU cache.

Used by the geocoding adapter, whose lookups run in worker threads.
A stored None is a real entry (a confirmed "not found"), which is why
``lookup`` returns a found flag next to the value.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Dict, Generic, Optional, Tuple, TypeVar

T = TypeVar("T")


@dataclass
class InMemoryCache(Generic[T]):
    """LRU cache with optional TTL.

    Attributes:
        default_ttl_seconds: Default time-to-live for entries (None = no expiry)
        max_size: Maximum number of entries (None = unlimited)
        name: Cache name for logging

    Example:
        cache = InMemoryCache[GeoLocation](name="geocode", max_size=1000)
        found, location = cache.lookup("louvre museum, paris")
    """

    default_ttl_seconds: Optional[float] = None
    max_size: Optional[int] = None
    name: str = "cache"

    _store: "OrderedDict[str, Tuple[Optional[T], float]]" = field(
        default_factory=OrderedDict, repr=False
    )
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)
    _hits: int = field(default=0, repr=False)
    _misses: int = field(default=0, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(f"cache.{self.name}")

    def lookup(self, key: str) -> Tuple[bool, Optional[T]]:
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                self._misses += 1
                return False, None

            value, expiry = entry
            if time.monotonic() > expiry:
                del self._store[key]
                self._logger.debug("Cache entry expired", extra={"key": key})
                self._misses += 1
                return False, None

            self._store.move_to_end(key)
            self._hits += 1
            return True, value

    def store(self, key: str, value: Optional[T], ttl: Optional[float] = None) -> None:
        effective_ttl = ttl if ttl is not None else self.default_ttl_seconds
        expiry = time.monotonic() + effective_ttl if effective_ttl is not None else float("inf")
        with self._lock:
            self._store[key] = (value, expiry)
            self._store.move_to_end(key)
            if self.max_size is not None:
                while len(self._store) > self.max_size:
                    evicted, _ = self._store.popitem(last=False)
                    self._logger.debug(
                        "Cache evicted entry",
                        extra={"key": evicted, "reason": "max_size"},
                    )

    def invalidate(self, key: str) -> bool:
        with self._lock:
            return self._store.pop(key, None) is not None

    def clear(self) -> int:
        with self._lock:
            count = len(self._store)
            self._store.clear()
            self._hits = 0
            self._misses = 0
            self._logger.info("Cache cleared", extra={"entries_cleared": count})
            return count

    def stats(self) -> Dict[str, Any]:
        with self._lock:
            total = self._hits + self._misses
            return {
                "size": len(self._store),
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate_percent": round(self._hits / total * 100, 1) if total else 0.0,
            }

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)
