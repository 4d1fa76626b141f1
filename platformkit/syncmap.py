"""
PlatformKit - Concurrent Map

A typed map safe for use from many threads, with a compute-if-absent
operation that runs the value generator at most once per key.

Reads never take a lock: single dict operations are atomic in CPython.
A single map-wide lock serialises generators, across keys as well; this keeps
the implementation simple at the cost of contention between slow generators.
"""

import threading
from collections.abc import Callable, Hashable
from typing import Generic, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class SyncMap(Generic[K, V]):
    """Thread-safe generic map."""

    def __init__(self) -> None:
        self._data: dict[K, V] = {}
        self._lock = threading.Lock()

    def store(self, key: K, value: V) -> None:
        """Insert or overwrite the value for key."""
        self._data[key] = value

    def load(self, key: K) -> tuple[V | None, bool]:
        """Return (value, True) if key is present, else (None, False)."""
        try:
            return self._data[key], True
        except KeyError:
            return None, False

    def load_or_store(self, key: K, generator: Callable[[K], V]) -> V:
        """
        Return the value for key, generating and storing it if absent.

        generator is called synchronously, at most once for the same key while
        the key stays absent, even when many threads miss at the same time.
        Exceptions raised by generator propagate and nothing is stored.
        """
        value, present = self.load(key)
        if present:
            return value  # type: ignore[return-value]

        with self._lock:
            # A racing caller may have stored it while we waited for the lock
            value, present = self.load(key)
            if present:
                return value  # type: ignore[return-value]
            value = generator(key)
            self.store(key, value)
            return value

    def load_or_store_value(self, key: K, value: V) -> tuple[V, bool]:
        """
        Store value if key is absent.

        Returns:
            (existing value, True) if key was present, else (value, False)
        """
        sentinel = object()
        existing = self._data.get(key, sentinel)
        if existing is not sentinel:
            return existing, True  # type: ignore[return-value]
        actual = self._data.setdefault(key, value)
        return actual, actual is not value

    def delete(self, key: K) -> None:
        self._data.pop(key, None)

    def clear(self) -> None:
        self._data.clear()

    def keys(self) -> list[K]:
        """Snapshot of the keys, in no particular order."""
        return list(self._data.copy())

    def values(self) -> list[V]:
        """Snapshot of the values, in no particular order."""
        return list(self._data.copy().values())

    def range(self, visitor: Callable[[K, V], bool | None]) -> None:
        """
        Call visitor for each entry of a snapshot of the map.

        Iteration stops early when visitor returns False. Entries stored or
        deleted while ranging may or may not be observed.
        """
        for key, value in self._data.copy().items():
            if visitor(key, value) is False:
                break

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __repr__(self) -> str:
        return f"SyncMap({len(self._data)} entries)"
