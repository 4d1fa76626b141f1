"""
PlatformKit - AWS Clients

Builds boto3 clients from configuration, instrumented with tracing hooks when
datadog.tracing is enabled.
"""

import logging
from typing import Any

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError

from .config import RootConfig
from .errors import UnknownError
from .tracing import instrument_client

logger = logging.getLogger(__name__)


def new_client(service: str, config: RootConfig, session: boto3.session.Session | None = None) -> Any:
    """
    Create a boto3 client for service.

    Region and endpoint come from config.aws; unset values fall back to the
    SDK's default resolution chain (environment, shared config, instance role).

    Raises:
        UnknownError: If the SDK cannot build the client
    """
    session = session or boto3.session.Session()
    try:
        client = session.client(
            service,
            region_name=config.aws.region,
            endpoint_url=config.aws.endpoint_url,
            config=BotoConfig(user_agent_extra=f"{config.name}/{config.env.name}"),
        )
    except BotoCoreError as e:
        raise UnknownError(
            f"failed to build AWS client for {service}, error: {e}",
            details={"service": service, "region": config.aws.region},
        ) from e

    if config.datadog.tracing:
        instrument_client(client)

    logger.debug(
        "Created AWS client for %s",
        service,
        extra={"service": service, "region": client.meta.region_name, "tracing": config.datadog.tracing},
    )
    return client
