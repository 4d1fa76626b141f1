"""
PlatformKit - Concurrent Map Tests

Covers basic map operations and the at-most-once generator guarantee of
load_or_store under contention.
"""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from platformkit.syncmap import SyncMap


class TestSyncMapBasics:
    def test_store_and_load(self) -> None:
        m: SyncMap[str, int] = SyncMap()
        m.store("a", 1)

        assert m.load("a") == (1, True)
        assert m.load("b") == (None, False)

    def test_store_overwrites(self) -> None:
        m: SyncMap[str, int] = SyncMap()
        m.store("a", 1)
        m.store("a", 2)

        assert m.load("a") == (2, True)
        assert len(m) == 1

    def test_load_distinguishes_stored_none(self) -> None:
        m: SyncMap[str, int | None] = SyncMap()
        m.store("a", None)

        assert m.load("a") == (None, True)

    def test_delete(self) -> None:
        m: SyncMap[str, int] = SyncMap()
        m.store("a", 1)
        m.delete("a")
        m.delete("never")

        assert "a" not in m
        assert len(m) == 0

    def test_load_or_store_value(self) -> None:
        m: SyncMap[str, int] = SyncMap()

        assert m.load_or_store_value("a", 1) == (1, False)
        assert m.load_or_store_value("a", 2) == (1, True)

    def test_keys_values_and_clear(self) -> None:
        m: SyncMap[str, int] = SyncMap()
        for i, key in enumerate("abc"):
            m.store(key, i)

        assert sorted(m.keys()) == ["a", "b", "c"]
        assert sorted(m.values()) == [0, 1, 2]

        m.clear()
        assert m.keys() == []
        assert m.load("a") == (None, False)

    def test_range_visits_every_entry(self) -> None:
        m: SyncMap[str, int] = SyncMap()
        for i in range(5):
            m.store(f"k{i}", i)

        seen: dict[str, int] = {}
        m.range(lambda k, v: seen.__setitem__(k, v))

        assert seen == {f"k{i}": i for i in range(5)}

    def test_range_stops_when_visitor_returns_false(self) -> None:
        m: SyncMap[str, int] = SyncMap()
        for i in range(10):
            m.store(f"k{i}", i)

        visited: list[str] = []

        def visit(key: str, value: int) -> bool:
            visited.append(key)
            return len(visited) < 3

        m.range(visit)
        assert len(visited) == 3

    def test_range_tolerates_mutation(self) -> None:
        m: SyncMap[str, int] = SyncMap()
        for i in range(5):
            m.store(f"k{i}", i)

        def visit(key: str, value: int) -> None:
            m.delete(key)
            m.store(key + "-new", value)

        m.range(visit)
        assert len(m) == 5


class TestLoadOrStore:
    def test_generator_called_once_for_present_key(self) -> None:
        m: SyncMap[str, int] = SyncMap()
        calls: list[str] = []

        def generate(key: str) -> int:
            calls.append(key)
            return len(key)

        assert m.load_or_store("abc", generate) == 3
        assert m.load_or_store("abc", generate) == 3
        assert calls == ["abc"]

    def test_generator_error_stores_nothing(self) -> None:
        m: SyncMap[str, int] = SyncMap()

        def fail(key: str) -> int:
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            m.load_or_store("a", fail)

        assert "a" not in m
        assert m.load_or_store("a", lambda k: 1) == 1

    def test_concurrent_callers_share_one_generation(self) -> None:
        m: SyncMap[str, int] = SyncMap()
        counter = 0
        counter_lock = threading.Lock()
        start = threading.Barrier(100)

        def generate(key: str) -> int:
            nonlocal counter
            with counter_lock:
                counter += 1
            return 42

        def call() -> int:
            start.wait()
            return m.load_or_store("k", generate)

        with ThreadPoolExecutor(max_workers=100) as pool:
            results = list(pool.map(lambda _: call(), range(100)))

        assert counter == 1
        assert results == [42] * 100

    def test_distinct_keys_each_generated_once(self) -> None:
        m: SyncMap[int, int] = SyncMap()
        calls: SyncMap[int, int] = SyncMap()

        def generate(key: int) -> int:
            assert calls.load_or_store_value(key, 1) == (1, False)
            return key * 2

        with ThreadPoolExecutor(max_workers=16) as pool:
            results = list(pool.map(lambda i: m.load_or_store(i % 10, generate), range(200)))

        assert results == [(i % 10) * 2 for i in range(200)]
        assert sorted(calls.keys()) == list(range(10))
