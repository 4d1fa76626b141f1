"""
PlatformKit - Cache Interface

Defines the abstract interface that all typed cache backends implement.
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

T = TypeVar("T")


class Cache(ABC, Generic[T]):
    """
    Abstract base class for typed caches.

    A cache stores values of a single type T under string keys. Every entry
    expires after the cache's TTL; expired entries behave as absent.
    Implementations are safe for concurrent use.
    """

    @abstractmethod
    def get(self, key: str) -> T:
        """
        Retrieve a value from the cache.

        Args:
            key: Cache key

        Returns:
            The decoded value

        Raises:
            CacheEntryNotFoundError: If the key is absent or expired
            UnknownError: If the stored value cannot be decoded into T
        """

    @abstractmethod
    def set(self, key: str, value: T) -> None:
        """
        Store a value in the cache, resetting the entry's TTL.

        Args:
            key: Cache key
            value: Value to cache (must be encodable as T)

        Raises:
            UnknownError: If the value cannot be encoded
        """

    @abstractmethod
    def remove(self, key: str) -> None:
        """
        Remove a key from the cache.

        Removing a key that is not present is not an error.
        """
