"""
PlatformKit - Configuration Module

Provides typed configuration loading and validation.
"""

from .loader import get_config, load_config, reload_config, reset_config
from .schemas import (
    AWSConfig,
    CacheBackend,
    CacheConfig,
    DatadogConfig,
    EnvConfig,
    EnvType,
    LogLevel,
    RedisConfig,
    RootConfig,
    SecretsConfig,
)

__all__ = [
    # Loader functions
    "load_config",
    "get_config",
    "reload_config",
    "reset_config",
    # Main config
    "RootConfig",
    # Enums
    "EnvType",
    "CacheBackend",
    "LogLevel",
    # Config sections
    "EnvConfig",
    "SecretsConfig",
    "DatadogConfig",
    "RedisConfig",
    "CacheConfig",
    "AWSConfig",
]
