"""
PlatformKit - Secrets Manager Factory

Selects the secrets manager for the configured environment:
- env.type test: InMemorySecretsManager, no AWS access
- anything else: AWSSecretsManager
"""

from __future__ import annotations

import logging
from typing import Any

from ..config import RootConfig, get_config
from .aws import AWSSecretsManager
from .interface import SecretIdFormatter, SecretsManager
from .memory import InMemorySecretsManager

logger = logging.getLogger(__name__)

# Global instance
_secrets_manager: SecretsManager | None = None


def create_secrets_manager(config: RootConfig | None = None, client: Any = None) -> SecretsManager:
    """
    Create a secrets manager.

    Args:
        config: Root configuration (uses global config if not provided)
        client: Pre-built boto3 secretsmanager client; built from config if omitted

    Raises:
        UnknownError: If the AWS client cannot be built
    """
    if config is None:
        config = get_config()

    ids = SecretIdFormatter.from_config(config)
    if config.is_test:
        logger.info("Test environment, using in-memory secrets manager", extra={"prefix": ids.prefix})
        return InMemorySecretsManager(ids)

    logger.info("Using AWS secrets manager", extra={"prefix": ids.prefix})
    if client is None:
        return AWSSecretsManager.from_config(config)
    return AWSSecretsManager(client, ids)


def get_secrets_manager() -> SecretsManager:
    """Get the process-wide secrets manager, created from global config on first use."""
    global _secrets_manager
    if _secrets_manager is None:
        _secrets_manager = create_secrets_manager()
    return _secrets_manager


def reset_secrets_manager() -> None:
    """
    Drop the process-wide secrets manager.

    Warning: Only use this in testing contexts.
    """
    global _secrets_manager
    if isinstance(_secrets_manager, AWSSecretsManager):
        _secrets_manager.close()
    _secrets_manager = None
