"""
PlatformKit - AWS Secrets Manager

SecretsManager backed by AWS Secrets Manager through boto3.

SDK calls run on a small worker pool so the calling thread can give up as soon
as its Context is cancelled or times out, even while the request is in flight.
"""

from __future__ import annotations

import contextvars
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from .. import context as ctxlib
from ..aws import new_client
from ..config import RootConfig
from ..context import CanceledError, Context, DeadlineExceededError
from ..log import get_logger_for_type, logger_from_ctx
from .interface import SecretIdFormatter, SecretsManager

DEFAULT_MAX_WORKERS = 8


class AWSSecretsManager(SecretsManager):
    """Fetches secrets with GetSecretValue."""

    def __init__(
        self,
        client: Any,
        ids: SecretIdFormatter,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ):
        """
        Args:
            client: boto3 ``secretsmanager`` client (thread-safe)
            ids: Qualified id builder
            max_workers: Concurrent in-flight lookups
        """
        super().__init__(ids)
        self._client = client
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="secrets")
        self._logger = get_logger_for_type(self)

    @classmethod
    def from_config(cls, config: RootConfig, client: Any = None) -> AWSSecretsManager:
        if client is None:
            client = new_client("secretsmanager", config)
        return cls(client, SecretIdFormatter.from_config(config))

    def get_secret_verbatim(self, ctx: Context, secret_id: str) -> str:
        response = self._get_secret_value(ctx, secret_id, "GetSecret")
        return response.get("SecretString") or ""

    def get_binary_secret_verbatim(self, ctx: Context, secret_id: str) -> bytes:
        response = self._get_secret_value(ctx, secret_id, "GetBinarySecret")
        return response.get("SecretBinary") or b""

    def _get_secret_value(self, ctx: Context, secret_id: str, operation: str) -> dict[str, Any]:
        log = logger_from_ctx(ctx, self._logger)
        log.info("%s: %s", operation, secret_id, extra={"secret_id": secret_id})

        err = ctx.err()
        if err is not None:
            log.warning("%s aborted before the request: %s", operation, err, extra={"secret_id": secret_id})
            raise err

        # Carry contextvars (trace id) into the worker thread
        call_ctx = contextvars.copy_context()
        future = self._executor.submit(call_ctx.run, self._client.get_secret_value, SecretId=secret_id)
        try:
            return ctxlib.wait(ctx, future)
        except (CanceledError, DeadlineExceededError) as e:
            log.warning("%s aborted: %s", operation, e, extra={"secret_id": secret_id})
            raise
        except (ClientError, BotoCoreError) as e:
            log.error(
                "Failed to retrieve secret: %s",
                secret_id,
                extra={"secret_id": secret_id, "error": str(e)},
            )
            raise

    def close(self) -> None:
        """Stop the worker pool. Lookups in flight are abandoned."""
        self._executor.shutdown(wait=False, cancel_futures=True)
