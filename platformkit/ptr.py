"""
PlatformKit - Reference Helpers

A mutable box standing in for a pointer to a value, and conversions between
boxed and plain values.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar, overload

T = TypeVar("T")


@dataclass
class Ref(Generic[T]):
    """A mutable reference to a value."""

    value: T


def format_ptr(p: Ref[T] | None) -> str:
    """Format the referenced value, or "<nil>" when p is None."""
    if p is None:
        return "<nil>"
    return f"{p.value}"


def to_ptr(v: T) -> Ref[T]:
    """Box v in a new reference."""
    return Ref(v)


@overload
def to_value(p: Ref[T] | None, zero: Callable[[], T]) -> T: ...


@overload
def to_value(p: Ref[T] | None, zero: None = None) -> T | None: ...


def to_value(p: Ref[T] | None, zero: Callable[[], T] | None = None) -> T | None:
    """
    Unbox p.

    Args:
        p: Reference, possibly None
        zero: Factory for the value returned when p is None, e.g. ``int`` or ``str``

    Returns:
        p.value, else zero(), else None
    """
    if p is None:
        return zero() if zero is not None else None
    return p.value
