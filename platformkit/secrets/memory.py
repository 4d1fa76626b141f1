"""
PlatformKit - In-Memory Secrets Manager

Secrets manager for test environments. Secrets are seeded by qualified id;
lookups are recorded so tests can assert which ids were requested.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from ..context import Context
from ..errors import NotFoundError
from ..log import logger_from_ctx
from ..syncmap import SyncMap
from .interface import SecretIdFormatter, SecretsManager

logger = logging.getLogger(__name__)


class InMemorySecretsManager(SecretsManager):
    """
    Holds secrets in a process-local map.

    A stored ``str`` is a string secret and a stored ``bytes`` is a binary
    secret. Asking for the other kind returns an empty value, the way a secret
    with only the other payload set does.
    """

    def __init__(self, ids: SecretIdFormatter, secrets: Mapping[str, str | bytes] | None = None):
        super().__init__(ids)
        self._secrets: SyncMap[str, str | bytes] = SyncMap()
        self.requested: list[str] = []
        for secret_id, value in (secrets or {}).items():
            self.put(secret_id, value)

    def put(self, secret_id: str, value: str | bytes) -> None:
        """Store a secret under its qualified id."""
        self._secrets.store(secret_id, value)

    def put_secret(self, name: str, value: str) -> None:
        """Store a string secret under the id ``get_secret(name)`` resolves to."""
        self.put(self.ids.secret_id(name), value)

    def put_binary_secret(self, secret_id: str, value: bytes) -> None:
        """Store a binary secret under the id ``get_binary_secret(secret_id)`` resolves to."""
        self.put(self.ids.binary_secret_id(secret_id), value)

    def get_secret_verbatim(self, ctx: Context, secret_id: str) -> str:
        value = self._lookup(ctx, secret_id, "GetSecret")
        return value if isinstance(value, str) else ""

    def get_binary_secret_verbatim(self, ctx: Context, secret_id: str) -> bytes:
        value = self._lookup(ctx, secret_id, "GetBinarySecret")
        return value if isinstance(value, bytes) else b""

    def _lookup(self, ctx: Context, secret_id: str, operation: str) -> str | bytes:
        log = logger_from_ctx(ctx, logger)
        log.info("%s: %s", operation, secret_id, extra={"secret_id": secret_id})

        err = ctx.err()
        if err is not None:
            raise err

        self.requested.append(secret_id)
        value, ok = self._secrets.load(secret_id)
        if not ok:
            log.error("Failed to retrieve secret: %s", secret_id, extra={"secret_id": secret_id})
            raise NotFoundError(
                f"secret not found: {secret_id}",
                details={"secret_id": secret_id},
            )
        return value
