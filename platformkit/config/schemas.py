"""
PlatformKit - Configuration Schemas

Typed configuration models using Pydantic for validation and type safety.
All configuration is defined here and validated when it is loaded.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class EnvType(str, Enum):
    """Runtime environment type."""

    PROD = "prod"
    SANDBOX = "sandbox"
    LOCAL = "local"
    TEST = "test"


class CacheBackend(str, Enum):
    """Supported cache backends."""

    MEMORY = "memory"
    REDIS = "redis"


class LogLevel(str, Enum):
    """Log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class EnvConfig(BaseModel):
    """Environment the process runs in."""

    name: str = Field(..., min_length=1, description="Environment name, e.g. 'dev1'")
    type: EnvType = Field(default=EnvType.LOCAL, description="Environment type")


class SecretsConfig(BaseModel):
    """Secret id composition settings."""

    prefix_fmt: str = Field(default="%s/%s", description="Prefix format, receives (app name, env name)")
    key_fmt: str = Field(default="%s", description="Key format, receives the secret name")

    @field_validator("prefix_fmt")
    @classmethod
    def validate_prefix_fmt(cls, v: str) -> str:
        """Ensure the prefix format accepts exactly two arguments."""
        try:
            v % ("app", "env")
        except (TypeError, ValueError) as e:
            raise ValueError(f"prefix_fmt must take two %s arguments: {e}") from e
        return v

    @field_validator("key_fmt")
    @classmethod
    def validate_key_fmt(cls, v: str) -> str:
        """Ensure the key format accepts exactly one argument."""
        try:
            v % ("key",)
        except (TypeError, ValueError) as e:
            raise ValueError(f"key_fmt must take one %s argument: {e}") from e
        return v


class DatadogConfig(BaseModel):
    """Tracing configuration."""

    tracing: bool = Field(default=False, description="Enable SDK tracing hooks")


class RedisConfig(BaseModel):
    """Remote key-value store connection."""

    url: str | None = Field(default=None, description="Redis connection URL")
    socket_timeout: float = Field(default=5.0, gt=0, description="Socket timeout in seconds")


class CacheConfig(BaseModel):
    """Cache configuration."""

    backend: CacheBackend = Field(default=CacheBackend.MEMORY, description="Cache backend to use")
    ttl_seconds: float = Field(default=300, gt=0, description="Default TTL in seconds")
    shards: int = Field(default=64, ge=1, description="Number of shards (memory backend)")
    max_entries: int = Field(default=100_000, ge=1, description="Max entries across all shards (memory backend)")


class AWSConfig(BaseModel):
    """AWS SDK settings."""

    region: str | None = Field(default=None, description="AWS region (SDK default chain when unset)")
    endpoint_url: str | None = Field(default=None, description="Endpoint override, e.g. a local emulator")


class RootConfig(BaseModel):
    """Root configuration of a service built on PlatformKit."""

    name: str = Field(..., min_length=1, description="Application name")
    env: EnvConfig
    log_level: LogLevel = Field(default=LogLevel.INFO, description="Logging level")

    secrets: SecretsConfig = Field(default_factory=SecretsConfig)
    datadog: DatadogConfig = Field(default_factory=DatadogConfig)
    redis: RedisConfig = Field(default_factory=RedisConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    aws: AWSConfig = Field(default_factory=AWSConfig)

    model_config = ConfigDict(validate_assignment=True)

    @property
    def is_test(self) -> bool:
        return self.env.type == EnvType.TEST
