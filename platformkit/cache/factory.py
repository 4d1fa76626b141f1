"""
PlatformKit - Cache Factory

Creates named typed caches from configuration and keeps a registry of them.

Key points:
- Backend chosen by CacheConfig.backend (memory | redis), memory by default
- The redis backend needs a connected client, passed in or opened from config
- Created caches are registered by name; asking for the same name returns the
  existing instance, provided the value type (and TTL, when given) match

Examples:
    from platformkit.cache.factory import create_cache

    sessions = create_cache(Session, "sessions", ttl=timedelta(minutes=5))
    counters = create_cache(int, "counters", config=CacheConfig(ttl_seconds=60))
"""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import TYPE_CHECKING, Any

from ..config import CacheBackend, CacheConfig, get_config
from ..errors import ConfigurationError, PlatformKitError
from .backends.memory import InMemoryCache, ttl_seconds
from .interface import Cache

if TYPE_CHECKING:
    from redis import Redis

logger = logging.getLogger(__name__)

# Global cache instances registry
_cache_instances: dict[str, Cache[Any]] = {}
# Value type and TTL (seconds) each registered cache was created with
_cache_specs: dict[str, tuple[Any, float]] = {}


def _create_memory_cache(value_type: Any, name: str, ttl: float | timedelta, config: CacheConfig) -> Cache[Any]:
    """Internal helper to construct a memory cache."""
    return InMemoryCache(
        name,
        ttl,
        value_type,
        shards=config.shards,
        max_entries=config.max_entries,
    )


def _create_redis_cache(value_type: Any, name: str, ttl: float | timedelta, redis: Redis | None) -> Cache[Any]:
    """Internal helper to construct a redis cache."""
    if redis is None:
        raise ConfigurationError(
            "A redis client must be supplied when CACHE_BACKEND=redis",
            details={"cache_name": name, "backend": "redis"},
        )

    from .backends.redis import RedisCache

    return RedisCache(name, ttl, value_type, client=redis)


def create_cache(
    value_type: Any,
    name: str = "default",
    ttl: float | timedelta | None = None,
    config: CacheConfig | None = None,
    redis: Redis | None = None,
) -> Cache[Any]:
    """
    Create a typed cache based on configuration.

    Args:
        value_type: Type of the cached values
        name: Cache instance name (registry key, logs, redis namespace)
        ttl: Entry TTL; defaults to config.ttl_seconds
        config: Cache configuration (uses global config if not provided)
        redis: Connected client, required for the redis backend

    Returns:
        Configured cache instance

    Raises:
        BadArgumentError: If the TTL is not positive
        ConfigurationError: If the backend is unknown or cannot be built, or
            if a cache with this name exists with another value type or TTL
    """
    if name in _cache_instances:
        _check_registered_spec(name, value_type, ttl)
        logger.debug("Returning existing cache instance: %s", name)
        return _cache_instances[name]

    if config is None:
        config = get_config().cache

    if ttl is None:
        ttl = config.ttl_seconds

    backend = CacheBackend(config.backend)
    logger.info(
        "Creating cache instance '%s' with backend: %s",
        name,
        backend.value,
        extra={"cache_name": name, "backend": backend.value},
    )

    try:
        if backend == CacheBackend.MEMORY:
            cache = _create_memory_cache(value_type, name, ttl, config)
        elif backend == CacheBackend.REDIS:
            cache = _create_redis_cache(value_type, name, ttl, redis)
        else:
            raise ConfigurationError(
                f"Unknown cache backend: {backend}",
                details={"backend": str(backend), "supported": ["memory", "redis"]},
            )
    except PlatformKitError:
        raise
    except Exception as e:
        logger.error(
            "Unexpected error creating cache instance '%s': %s",
            name,
            e,
            extra={"cache_name": name, "backend": backend.value, "error": str(e)},
            exc_info=True,
        )
        raise ConfigurationError(
            f"Failed to create cache instance '{name}': {e}",
            details={"cache_name": name, "backend": backend.value, "error": str(e)},
        ) from e

    _cache_instances[name] = cache
    _cache_specs[name] = (value_type, ttl_seconds(ttl))
    return cache


def _check_registered_spec(name: str, value_type: Any, ttl: float | timedelta | None) -> None:
    """
    Ensure a repeated request for name matches the registered cache.

    The TTL is compared only when given explicitly; omitting it fetches the
    existing cache whatever its TTL.
    """
    registered_type, registered_ttl = _cache_specs[name]
    if value_type != registered_type:
        raise ConfigurationError(
            f"Cache instance '{name}' already exists with value type {registered_type!r}, requested {value_type!r}",
            details={"cache_name": name, "registered": repr(registered_type), "requested": repr(value_type)},
        )
    if ttl is not None and ttl_seconds(ttl) != registered_ttl:
        raise ConfigurationError(
            f"Cache instance '{name}' already exists with TTL {registered_ttl}s, requested {ttl_seconds(ttl)}s",
            details={"cache_name": name, "registered_ttl": registered_ttl, "requested_ttl": ttl_seconds(ttl)},
        )


def get_cache(name: str = "default") -> Cache[Any]:
    """
    Get an existing cache instance by name.

    Raises:
        ConfigurationError: If no cache with that name was created
    """
    try:
        return _cache_instances[name]
    except KeyError:
        raise ConfigurationError(
            f"Cache instance '{name}' has not been created",
            details={"cache_name": name, "known": list(_cache_instances)},
        ) from None


def close_all_caches() -> None:
    """
    Drop all cache instances.

    Shutdown hook. Caches hold no resources of their own; redis clients are
    closed by their provider.
    """
    if not _cache_instances:
        logger.debug("No cache instances to close")
        return

    logger.info("Closing %d cache instance(s)...", len(_cache_instances))
    _cache_instances.clear()
    _cache_specs.clear()


def reset_cache_factory() -> None:
    """
    Reset the cache factory by clearing all instance references.

    Warning: Only use this in testing contexts.
    """
    count = len(_cache_instances)
    _cache_instances.clear()
    _cache_specs.clear()
    logger.debug("Reset cache factory, cleared %d instance reference(s)", count)


def list_cache_instances() -> list[str]:
    """List all registered cache instance names."""
    return list(_cache_instances.keys())
