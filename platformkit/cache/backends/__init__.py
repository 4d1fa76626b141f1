"""
PlatformKit - Cache Backends

Exports available cache backend implementations.

The Redis backend is imported lazily by factory.py so the memory backend works
without a Redis client configured.
"""

from .memory import InMemoryCache, ShardedStore, new_in_memory_cache

__all__ = [
    "InMemoryCache",
    "ShardedStore",
    "new_in_memory_cache",
]
