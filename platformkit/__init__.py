"""
PlatformKit - Service Platform Utilities

Shared building blocks for backend services: typed caches, secrets retrieval,
cancellable contexts, a concurrent map and reference helpers.
"""

__version__ = "1.0.0"

from .errors import (
    BadArgumentError,
    BadStateError,
    CacheEntryNotFoundError,
    ConfigurationError,
    ErrorCode,
    NotFoundError,
    PlatformKitError,
    UnknownError,
)
from .syncmap import SyncMap

__all__ = [
    "__version__",
    "ErrorCode",
    "PlatformKitError",
    "UnknownError",
    "BadArgumentError",
    "BadStateError",
    "NotFoundError",
    "CacheEntryNotFoundError",
    "ConfigurationError",
    "SyncMap",
]
