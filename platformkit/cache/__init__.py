"""
PlatformKit - Cache Module

Typed caches with pluggable backends.

Usage:
    from platformkit.cache import CacheEntryNotFoundError, new_in_memory_cache

    cache = new_in_memory_cache(int, "t", 60)
    cache.set("a", 7)
    try:
        value = cache.get("b")
    except CacheEntryNotFoundError:
        value = None
"""

from ..errors import CacheEntryNotFoundError
from .backends.memory import InMemoryCache, new_in_memory_cache
from .factory import (
    close_all_caches,
    create_cache,
    get_cache,
    list_cache_instances,
    reset_cache_factory,
)
from .interface import Cache

__all__ = [
    # Interface
    "Cache",
    "CacheEntryNotFoundError",
    # Memory backend
    "InMemoryCache",
    "new_in_memory_cache",
    # Factory functions
    "create_cache",
    "get_cache",
    "close_all_caches",
    "list_cache_instances",
    "reset_cache_factory",
]
