"""
PlatformKit - Error Type Tests
"""

import pytest

from platformkit.errors import (
    BadArgumentError,
    BadStateError,
    CacheEntryNotFoundError,
    ConfigurationError,
    ErrorCode,
    NotFoundError,
    PlatformKitError,
    UnknownError,
    error_code_of,
)


@pytest.mark.parametrize(
    ("error", "code", "status"),
    [
        (UnknownError("x"), ErrorCode.UNKNOWN, 500),
        (BadArgumentError("x"), ErrorCode.BAD_ARGUMENT, 409),
        (BadStateError("x"), ErrorCode.BAD_STATE, 500),
        (NotFoundError("x"), ErrorCode.NOT_FOUND, 404),
        (CacheEntryNotFoundError("k"), ErrorCode.CACHE_ENTRY_NOT_FOUND, 404),
    ],
)
def test_default_codes(error: PlatformKitError, code: ErrorCode, status: int) -> None:
    assert error.code == code
    assert error.status_code == status
    assert error_code_of(error) == code


def test_explicit_code_overrides_default() -> None:
    error = PlatformKitError("conflict", code=ErrorCode.CONFLICT)

    assert error.code == ErrorCode.CONFLICT
    assert error.status_code == 409


def test_configuration_error_is_bad_state() -> None:
    error = ConfigurationError("missing")

    assert isinstance(error, BadStateError)
    assert error.code == ErrorCode.BAD_STATE


def test_cache_miss_is_matchable_as_not_found() -> None:
    with pytest.raises(NotFoundError) as exc_info:
        raise CacheEntryNotFoundError("k", "sessions")

    assert str(exc_info.value) == "cache entry not found"
    assert exc_info.value.details == {"key": "k", "cache_name": "sessions"}


def test_to_dict() -> None:
    error = BadArgumentError("bad ttl", details={"ttl": 0})

    assert error.to_dict() == {
        "error": "BadArgumentError",
        "code": "BAD_ARGUMENT",
        "message": "bad ttl",
        "details": {"ttl": 0},
    }


def test_unclassified_errors_are_unknown() -> None:
    assert error_code_of(RuntimeError("boom")) == ErrorCode.UNKNOWN


def test_code_names_match_values() -> None:
    assert all(code.name == code.value for code in ErrorCode)
    assert PlatformKitError("bad input", code=ErrorCode.NOT_VALID).status_code == 422
