"""
PlatformKit - Redis Cache Backend

Typed cache stored in Redis:
- Values encoded with the same codec as the memory backend
- One TTL per cache, applied with PX on every SET
- Keys prefixed with the cache name so caches sharing a server do not collide

Redis errors are not translated; they propagate to the caller.

Example:
    cache = RedisCache("sessions", timedelta(minutes=5), Session, client=redis_client)
    cache.set("abc", session)
    session = cache.get("abc")
"""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any, TypeVar

from redis import Redis

from ...errors import BadArgumentError, CacheEntryNotFoundError
from ..codec import ValueCodec
from ..interface import Cache
from .memory import check_key, ttl_seconds

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RedisCache(Cache[T]):
    """Redis-backed typed cache."""

    def __init__(
        self,
        name: str,
        ttl: float | timedelta,
        value_type: Any,
        client: Redis,
    ) -> None:
        """
        Initialize Redis cache.

        Args:
            name: Cache name; also the key namespace
            ttl: Entry time-to-live, seconds or timedelta; must be positive
            value_type: Type of the cached values
            client: Connected Redis client (owned by the caller)
        """
        seconds = ttl_seconds(ttl)
        if seconds <= 0:
            raise BadArgumentError(
                f"invalid TTL for cache {name}: {ttl}, TTL must be a positive duration",
                details={"cache_name": name, "ttl": seconds},
            )

        self.name = name.strip() or "cache"
        self.ttl = seconds
        self._ttl_ms = max(1, int(seconds * 1000))
        self._codec: ValueCodec[T] = ValueCodec(value_type)
        self._client = client

    def _make_key(self, key: str) -> str:
        """Create namespaced key."""
        return f"{self.name}:{key}"

    def get(self, key: str) -> T:
        check_key(key)
        data = self._client.get(self._make_key(key))
        if data is None:
            raise CacheEntryNotFoundError(key, self.name)
        if isinstance(data, str):
            data = data.encode("utf-8")
        return self._codec.decode(key, data)

    def set(self, key: str, value: T) -> None:
        check_key(key)
        data = self._codec.encode(key, value)
        self._client.set(self._make_key(key), data, px=self._ttl_ms)

    def remove(self, key: str) -> None:
        check_key(key)
        self._client.delete(self._make_key(key))

    def __repr__(self) -> str:
        return f"RedisCache(name={self.name!r}, ttl={self.ttl})"
