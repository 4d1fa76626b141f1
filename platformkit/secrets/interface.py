"""
PlatformKit - Secrets Manager Interface

Defines the secrets manager contract and the composition of qualified secret
ids from the application name, environment name and secret name.
"""

from abc import ABC, abstractmethod

from ..config import RootConfig
from ..context import Context

# Example: awesome-service/dev1
DEFAULT_PREFIX_FMT = "%s/%s"
DEFAULT_KEY_FMT = "%s"


class SecretIdFormatter:
    """
    Builds qualified secret ids.

    The prefix is computed once: ``prefix_fmt % (app_name, env_name)``.
    Named secrets resolve to ``<prefix>/<key_fmt % name>``.
    """

    def __init__(
        self,
        app_name: str,
        env_name: str,
        prefix_fmt: str = DEFAULT_PREFIX_FMT,
        key_fmt: str = DEFAULT_KEY_FMT,
    ):
        self.prefix = (prefix_fmt or DEFAULT_PREFIX_FMT) % (app_name, env_name)
        self.key_fmt = key_fmt or DEFAULT_KEY_FMT

    @classmethod
    def from_config(cls, config: RootConfig) -> "SecretIdFormatter":
        return cls(
            config.name,
            config.env.name,
            prefix_fmt=config.secrets.prefix_fmt,
            key_fmt=config.secrets.key_fmt,
        )

    def secret_id(self, name: str) -> str:
        return f"{self.prefix}/{self.key_fmt % (name,)}"

    def binary_secret_id(self, secret_id: str) -> str:
        # No separator between prefix and id; existing binary secrets are stored under these ids
        return self.prefix + secret_id


class SecretsManager(ABC):
    """
    Retrieves named string or binary secrets.

    Every lookup takes a Context and raises its error if the context is done
    before the lookup completes. Errors from the backing store are raised
    unchanged; retry policy is up to the caller.
    """

    def __init__(self, ids: SecretIdFormatter):
        self.ids = ids

    def get_secret(self, ctx: Context, name: str) -> str:
        """Retrieve the string secret registered under the logical name."""
        return self.get_secret_verbatim(ctx, self.ids.secret_id(name))

    @abstractmethod
    def get_secret_verbatim(self, ctx: Context, secret_id: str) -> str:
        """Retrieve a string secret by its qualified id, used as is."""

    def get_binary_secret(self, ctx: Context, secret_id: str) -> bytes:
        """Retrieve a binary secret; the id is appended directly to the prefix."""
        return self.get_binary_secret_verbatim(ctx, self.ids.binary_secret_id(secret_id))

    @abstractmethod
    def get_binary_secret_verbatim(self, ctx: Context, secret_id: str) -> bytes:
        """Retrieve a binary secret by its qualified id, used as is."""
