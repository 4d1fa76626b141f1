"""
PlatformKit - Memory Cache Backend

In-memory typed cache backed by a sharded store of TTL caches.
Thread-safe and suitable for single-process deployments.
"""

import logging
import threading
import time
from collections.abc import Callable
from datetime import timedelta
from typing import Any, TypeVar

from cachetools import TTLCache

from ...errors import BadArgumentError, CacheEntryNotFoundError, UnknownError
from ..codec import ValueCodec
from ..interface import Cache

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_SHARDS = 64
DEFAULT_MAX_ENTRIES = 100_000


def ttl_seconds(ttl: float | timedelta) -> float:
    """Normalize a TTL given as seconds or timedelta to seconds."""
    if isinstance(ttl, timedelta):
        return ttl.total_seconds()
    return float(ttl)


def check_key(key: str) -> None:
    if not key:
        raise BadArgumentError("cache key must be a non-empty string", details={"key": key})


class ShardedStore:
    """
    Byte store split into shards, each a TTLCache behind its own lock.

    Expired entries are dropped lazily: reads treat them as absent and every
    write sweeps its shard. sweep() expires all shards at once.
    """

    def __init__(
        self,
        ttl: float,
        shards: int = DEFAULT_SHARDS,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        timer: Callable[[], float] = time.monotonic,
    ):
        if shards < 1:
            raise ValueError(f"shards must be >= 1, got {shards}")
        if max_entries < 1:
            raise ValueError(f"max_entries must be >= 1, got {max_entries}")

        per_shard = -(-max_entries // shards)
        self._shards: list[TTLCache[str, bytes]] = [
            TTLCache(maxsize=per_shard, ttl=ttl, timer=timer) for _ in range(shards)
        ]
        self._locks = [threading.Lock() for _ in range(shards)]

    def _index(self, key: str) -> int:
        return hash(key) % len(self._shards)

    def get(self, key: str) -> bytes | None:
        i = self._index(key)
        with self._locks[i]:
            return self._shards[i].get(key)

    def set(self, key: str, data: bytes) -> None:
        i = self._index(key)
        with self._locks[i]:
            self._shards[i][key] = data

    def delete(self, key: str) -> bool:
        i = self._index(key)
        with self._locks[i]:
            return self._shards[i].pop(key, None) is not None

    def sweep(self) -> int:
        """Expire outdated entries in every shard. Returns how many were dropped."""
        dropped = 0
        for shard, lock in zip(self._shards, self._locks, strict=True):
            with lock:
                dropped += len(shard.expire())
        return dropped

    def __len__(self) -> int:
        total = 0
        for shard, lock in zip(self._shards, self._locks, strict=True):
            with lock:
                shard.expire()
                total += len(shard)
        return total


class InMemoryCache(Cache[T]):
    """
    In-memory typed cache.

    Features:
    - Values encoded to bytes with a TypeAdapter for T
    - One TTL for every entry; set() restarts it
    - Sharded storage with per-shard locking
    - Hit/miss counters via stats()
    """

    def __init__(
        self,
        name: str,
        ttl: float | timedelta,
        value_type: Any,
        shards: int = DEFAULT_SHARDS,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        timer: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize memory cache.

        Args:
            name: Cache name, used in logs and errors
            ttl: Entry time-to-live, seconds or timedelta; must be positive
            value_type: Type of the cached values
            shards: Number of independently locked shards
            max_entries: Capacity across all shards
            timer: Clock used for expiry (monotonic seconds)

        Raises:
            BadArgumentError: If ttl is not positive or value_type is unsupported
            UnknownError: If the backing store cannot be created
        """
        seconds = ttl_seconds(ttl)
        if seconds <= 0:
            raise BadArgumentError(
                f"invalid TTL for cache {name}: {ttl}, TTL must be a positive duration",
                details={"cache_name": name, "ttl": seconds},
            )

        self.name = name
        self.ttl = seconds
        self._codec: ValueCodec[T] = ValueCodec(value_type)

        try:
            self._store = ShardedStore(seconds, shards=shards, max_entries=max_entries, timer=timer)
        except (ValueError, TypeError) as e:
            raise UnknownError(
                f"failed to create cache: {name}, error: {e}",
                details={"cache_name": name, "shards": shards, "max_entries": max_entries},
            ) from e

        self._stats_lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._sets = 0
        self._removes = 0

        logger.debug(
            "Created in-memory cache '%s'",
            name,
            extra={"cache_name": name, "ttl": seconds, "shards": shards, "max_entries": max_entries},
        )

    def get(self, key: str) -> T:
        """Retrieve and decode the value for key."""
        check_key(key)
        data = self._store.get(key)
        if data is None:
            with self._stats_lock:
                self._misses += 1
            raise CacheEntryNotFoundError(key, self.name)

        with self._stats_lock:
            self._hits += 1
        return self._codec.decode(key, data)

    def set(self, key: str, value: T) -> None:
        """Encode and store value under key."""
        check_key(key)
        data = self._codec.encode(key, value)
        self._store.set(key, data)
        with self._stats_lock:
            self._sets += 1

    def remove(self, key: str) -> None:
        """Delete key from cache."""
        check_key(key)
        if self._store.delete(key):
            with self._stats_lock:
                self._removes += 1

    def sweep(self) -> int:
        """Drop expired entries now rather than on the next write."""
        dropped = self._store.sweep()
        if dropped:
            logger.debug("Swept %d expired entries from cache '%s'", dropped, self.name)
        return dropped

    def stats(self) -> dict[str, Any]:
        """Get cache statistics."""
        size = len(self._store)
        with self._stats_lock:
            total_requests = self._hits + self._misses
            hit_rate = (self._hits / total_requests * 100) if total_requests > 0 else 0.0

            return {
                "backend": "memory",
                "name": self.name,
                "size": size,
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": round(hit_rate, 2),
                "sets": self._sets,
                "removes": self._removes,
            }

    def __repr__(self) -> str:
        return f"InMemoryCache(name={self.name!r}, ttl={self.ttl}, value_type={self._codec.value_type!r})"


def new_in_memory_cache(
    value_type: Any,
    name: str,
    ttl: float | timedelta,
    **options: Any,
) -> InMemoryCache[Any]:
    """
    Create an in-memory cache for values of value_type.

    Example:
        cache = new_in_memory_cache(int, "counters", timedelta(minutes=1))
        cache.set("a", 7)
        assert cache.get("a") == 7
    """
    return InMemoryCache(name, ttl, value_type, **options)
