"""
PlatformKit - Test Configuration and Shared Fixtures

Provides pytest configuration and shared fixtures for unit and integration tests.
"""

import os
from collections.abc import Generator
from typing import Any

import pytest

# Set test environment
os.environ["APP_NAME"] = "svc"
os.environ["ENV_NAME"] = "dev1"
os.environ["ENV_TYPE"] = "test"
os.environ["LOG_LEVEL"] = "DEBUG"


# Redis availability checker
def is_redis_available() -> bool:
    """Check if Redis server is available for testing."""
    import socket

    try:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        sock.settimeout(1)
        result = sock.connect_ex(("localhost", 6379))
        sock.close()
        return result == 0
    except OSError:
        return False


# Skip marker for Redis tests
redis_available = pytest.mark.skipif(not is_redis_available(), reason="Redis server not available")


@pytest.fixture
def test_redis_url() -> str:
    """Get Redis URL for testing (database 15 for isolation)."""
    return os.environ.get("TEST_REDIS_URL", "redis://localhost:6379/15")


@pytest.fixture
def redis_client(test_redis_url: str) -> Generator[Any, None, None]:
    """
    Create a Redis client for testing.

    Automatically skips tests if Redis is not available.
    Clears the test database before and after each test.
    """
    from redis import Redis
    from redis.exceptions import RedisError

    client = Redis.from_url(test_redis_url)

    # Ensure we can connect
    try:
        client.ping()
    except RedisError as e:
        client.close()
        pytest.skip(f"Redis not available for testing: {e}")

    # Clear test database before test
    client.flushdb()

    yield client

    # Cleanup after test
    try:
        client.flushdb()
    finally:
        client.close()


@pytest.fixture
def mock_env_memory(monkeypatch: pytest.MonkeyPatch) -> None:
    """Set environment variables for memory cache backend."""
    monkeypatch.setenv("CACHE_BACKEND", "memory")
    monkeypatch.setenv("CACHE_TTL_SECONDS", "3600")
    monkeypatch.setenv("CACHE_SHARDS", "4")
    monkeypatch.setenv("CACHE_MAX_ENTRIES", "100")


@pytest.fixture
def fake_clock() -> "FakeClock":
    """Manually advanced monotonic clock for expiry tests."""
    return FakeClock()


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def reset_global_state() -> Generator[None, None, None]:
    """Reset cache factory, config and secrets singletons after each test."""
    yield
    from platformkit.cache.factory import reset_cache_factory
    from platformkit.config import reset_config
    from platformkit.secrets import reset_secrets_manager

    reset_cache_factory()
    reset_secrets_manager()
    reset_config()
