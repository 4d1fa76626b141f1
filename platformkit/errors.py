"""
PlatformKit - Core Error Types

Defines the standard exception hierarchy for the platform utilities.
All classified errors inherit from PlatformKitError and carry an ErrorCode so
callers can branch on the error kind rather than on message text.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """
    Standard error codes.

    Codes are stable strings; they travel through logs and API responses.
    """

    # Caught panics/unexpected failures; the original error is wrapped
    PANIC = "PANIC"
    UNKNOWN = "UNKNOWN"

    # Caller supplied an invalid argument (bad TTL, malformed URL, ...)
    BAD_ARGUMENT = "BAD_ARGUMENT"

    # The process is in a state where the operation cannot run
    BAD_STATE = "BAD_STATE"

    NOT_FOUND = "NOT_FOUND"
    NOT_AUTHENTICATED = "NOT_AUTHENTICATED"
    NOT_ALLOWED = "NOT_ALLOWED"
    NOT_VALID = "NOT_VALID"
    CONFLICT = "CONFLICT"

    CACHE_ENTRY_NOT_FOUND = "CACHE_ENTRY_NOT_FOUND"


_STATUS_CODES: dict[ErrorCode, int] = {
    ErrorCode.BAD_ARGUMENT: 409,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.CACHE_ENTRY_NOT_FOUND: 404,
    ErrorCode.NOT_AUTHENTICATED: 401,
    ErrorCode.NOT_ALLOWED: 403,
    ErrorCode.NOT_VALID: 422,
    ErrorCode.CONFLICT: 409,
}


class PlatformKitError(Exception):
    """Base exception for all PlatformKit errors."""

    default_code: ErrorCode = ErrorCode.UNKNOWN

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        code: ErrorCode | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.code = code or self.default_code
        self.status_code = _STATUS_CODES.get(self.code, 500)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses and structured logs."""
        return {
            "error": self.__class__.__name__,
            "code": self.code.value,
            "message": self.message,
            "details": self.details,
        }


class UnknownError(PlatformKitError):
    """Wraps a third-party or system error whose cause is not classified."""

    default_code = ErrorCode.UNKNOWN


class BadArgumentError(PlatformKitError):
    """Raised when an argument is invalid (non-positive TTL, malformed URL, ...)."""

    default_code = ErrorCode.BAD_ARGUMENT


class BadStateError(PlatformKitError):
    """Raised when the process is in a state where the operation is not allowed."""

    default_code = ErrorCode.BAD_STATE


class NotFoundError(PlatformKitError):
    """Raised when a requested resource is not found."""

    default_code = ErrorCode.NOT_FOUND


class CacheEntryNotFoundError(NotFoundError):
    """
    Raised by Cache.get when the key is absent or expired.

    This is the cache-miss sentinel: catch it to branch on a miss.
    """

    default_code = ErrorCode.CACHE_ENTRY_NOT_FOUND

    def __init__(self, key: str, cache_name: str | None = None):
        details: dict[str, Any] = {"key": key}
        if cache_name is not None:
            details["cache_name"] = cache_name
        super().__init__("cache entry not found", details)
        self.key = key


class ConfigurationError(BadStateError):
    """Raised when configuration is invalid or missing."""


def error_code_of(error: BaseException) -> ErrorCode:
    """
    Classify any exception into an ErrorCode.

    Args:
        error: Exception to categorize

    Returns:
        The error's own code for PlatformKit errors, UNKNOWN otherwise
    """
    if isinstance(error, PlatformKitError):
        return error.code
    return ErrorCode.UNKNOWN
