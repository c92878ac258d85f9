"""Cache adapters - Implementations of the CachePort.

Available implementations:
- InMemoryCache: Thread-safe LRU cache with optional TTL
"""

from .memory_cache import InMemoryCache

__all__ = ["InMemoryCache"]
