"""
PlatformKit - Configuration Loader

Loads and validates configuration from environment variables and .env files.
Provides a singleton configuration instance for the process.
"""

import logging
import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import ValidationError

from ..errors import ConfigurationError
from .schemas import RootConfig

logger = logging.getLogger(__name__)

_config_instance: RootConfig | None = None


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


def _build_config_dict() -> dict[str, Any]:
    """Map environment variables onto the RootConfig structure."""
    config_dict: dict[str, Any] = {
        "name": os.getenv("APP_NAME", ""),
        "env": {
            "name": os.getenv("ENV_NAME", ""),
            "type": os.getenv("ENV_TYPE", "local"),
        },
        "log_level": os.getenv("LOG_LEVEL", "INFO"),
        "secrets": {
            "prefix_fmt": os.getenv("SECRETS_PREFIX_FMT") or "%s/%s",
            "key_fmt": os.getenv("SECRETS_KEY_FMT") or "%s",
        },
        "datadog": {
            "tracing": _env_bool("DATADOG_TRACING"),
        },
        "redis": {
            "url": os.getenv("REDIS_URL"),
            "socket_timeout": float(os.getenv("REDIS_SOCKET_TIMEOUT", "5")),
        },
        "cache": {
            "backend": os.getenv("CACHE_BACKEND", "memory"),
            "ttl_seconds": float(os.getenv("CACHE_TTL_SECONDS", "300")),
            "shards": int(os.getenv("CACHE_SHARDS", "64")),
            "max_entries": int(os.getenv("CACHE_MAX_ENTRIES", "100000")),
        },
        "aws": {
            "region": os.getenv("AWS_REGION"),
            "endpoint_url": os.getenv("AWS_ENDPOINT_URL"),
        },
    }
    return config_dict


def load_config(
    env_file: str | None = None,
    reload: bool = False,
) -> RootConfig:
    """
    Load configuration from environment variables and .env file.

    Args:
        env_file: Path to .env file (default: .env in the working directory)
        reload: Force reload even if config already loaded

    Returns:
        Validated RootConfig instance

    Raises:
        ConfigurationError: If configuration is invalid
    """
    global _config_instance

    if _config_instance is not None and not reload:
        return _config_instance

    env_path = Path(env_file) if env_file else Path.cwd() / ".env"

    if env_path.exists():
        logger.info("Loading environment from %s", env_path)
        try:
            load_dotenv(env_path, override=True)
        except Exception as e:
            logger.error(
                "Failed to load .env file from %s: %s",
                env_path,
                e,
                extra={"path": str(env_path), "error": str(e)},
                exc_info=True,
            )
            raise ConfigurationError(
                f"Failed to load environment file: {e}",
                details={"path": str(env_path), "error": str(e)},
            ) from e
    else:
        logger.debug("No .env file found, using environment variables only")

    try:
        config_dict = _build_config_dict()
    except ValueError as e:
        raise ConfigurationError(
            f"Malformed numeric configuration value: {e}",
            details={"error": str(e)},
        ) from e

    try:
        _config_instance = RootConfig(**config_dict)
    except ValidationError as e:
        logger.error(
            "Configuration validation failed: %s",
            e,
            extra={"validation_errors": e.errors(include_url=False)},
        )
        raise ConfigurationError(
            "Configuration validation failed. Check your environment variables and configuration.",
            details={"validation_errors": e.errors(include_url=False)},
        ) from e

    logger.info(
        "Configuration loaded for %s (environment: %s)",
        _config_instance.name,
        _config_instance.env.name,
        extra={"env_type": _config_instance.env.type.value, "cache_backend": _config_instance.cache.backend.value},
    )
    return _config_instance


def get_config() -> RootConfig:
    """
    Get the current configuration instance, loading it on first access.

    Returns:
        Current RootConfig instance
    """
    if _config_instance is None:
        return load_config()

    return _config_instance


def reload_config(env_file: str | None = None) -> RootConfig:
    """Force reload configuration."""
    return load_config(env_file=env_file, reload=True)


def reset_config() -> None:
    """Drop the cached configuration instance. Used by tests."""
    global _config_instance
    _config_instance = None
