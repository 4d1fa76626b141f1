"""
PlatformKit - Secrets Module

Named secret retrieval, qualified by application and environment.

Usage:
    from platformkit import context
    from platformkit.secrets import create_secrets_manager

    secrets = create_secrets_manager()
    ctx, cancel = context.with_timeout(context.background(), 5)
    try:
        password = secrets.get_secret(ctx, "db-pwd")
    finally:
        cancel()
"""

from .aws import AWSSecretsManager
from .factory import create_secrets_manager, get_secrets_manager, reset_secrets_manager
from .interface import DEFAULT_KEY_FMT, DEFAULT_PREFIX_FMT, SecretIdFormatter, SecretsManager
from .memory import InMemorySecretsManager

__all__ = [
    "SecretsManager",
    "SecretIdFormatter",
    "DEFAULT_PREFIX_FMT",
    "DEFAULT_KEY_FMT",
    "AWSSecretsManager",
    "InMemorySecretsManager",
    "create_secrets_manager",
    "get_secrets_manager",
    "reset_secrets_manager",
]
