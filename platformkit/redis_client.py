"""
PlatformKit - Redis Client

Opens the process-wide Redis connection from configuration.

Production clients are refused under the ``test`` environment type; tests use
in-process fakes behind the same interfaces instead.
"""

import logging

from redis import Redis
from redis.exceptions import RedisError

from .config import RootConfig
from .errors import BadArgumentError, BadStateError, UnknownError

logger = logging.getLogger(__name__)


def open_redis(config: RootConfig) -> Redis:
    """
    Parse the configured URL, connect and ping.

    Raises:
        BadArgumentError: If redis.url is missing or malformed
        UnknownError: If the server cannot be reached
    """
    url = config.redis.url
    if not url:
        raise BadArgumentError("redis url is not configured", details={"env": "REDIS_URL"})

    try:
        client = Redis.from_url(url, socket_timeout=config.redis.socket_timeout)
    except ValueError as e:
        raise BadArgumentError(
            f"failed to parse redis url: {url}, error: {e}",
            details={"url": url},
        ) from e

    try:
        client.ping()
    except RedisError as e:
        client.close()
        raise UnknownError(f"failed to connect to redis: {e}", details={"url": url}) from e

    logger.info("Connected to redis: %s", url, extra={"url": url})
    return client


class RedisProvider:
    """Owns the Redis client for the lifetime of the process."""

    def __init__(self, config: RootConfig):
        if config.is_test:
            raise BadStateError(
                f"refusing to open redis in a test environment: {config.env.name}",
                details={"env_name": config.env.name, "env_type": config.env.type.value},
            )
        self.client = open_redis(config)

    def health_check(self) -> None:
        """Ping the server; raises the client's error when it is unreachable."""
        self.client.ping()

    def close(self) -> None:
        """Shutdown hook: close the connection pool."""
        self.client.close()
        logger.debug("Redis client closed")
