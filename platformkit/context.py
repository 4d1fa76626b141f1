"""
PlatformKit - Context

Request-scoped contexts that carry values, a deadline and a cancellation
signal across API boundaries and threads.

Contexts form a tree: cancelling a context cancels every context derived from
it. ``detach`` creates a context that keeps the parent's values but is cut off
from its deadline and cancellation, for background work that must outlive the
request that started it.

Example:
    ctx, cancel = with_timeout(with_value(background(), "tenant", "acme"), 5)
    try:
        secret = secrets.get_secret(ctx, "db-pwd")
    finally:
        cancel()
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from collections.abc import Callable
from concurrent.futures import Future
from concurrent.futures import wait as wait_futures
from datetime import UTC, datetime, timedelta
from typing import Any, TypeVar

T = TypeVar("T")

CancelFunc = Callable[..., None]

# How often wait() re-checks the context while a future is running
_POLL_INTERVAL = 0.05


class CanceledError(Exception):
    """Reported by Context.err after the context was cancelled."""

    def __init__(self, message: str = "context canceled"):
        super().__init__(message)


class DeadlineExceededError(TimeoutError):
    """Reported by Context.err after the context's deadline passed."""

    def __init__(self, message: str = "context deadline exceeded"):
        super().__init__(message)


class _NeverDone(threading.Event):
    """An event that can never be set."""

    def set(self) -> None:
        return None


_NEVER_DONE = _NeverDone()


class Context(ABC):
    """
    Carries a deadline, a cancellation signal and request-scoped values.

    Implementations are safe for concurrent use.
    """

    @abstractmethod
    def deadline(self) -> datetime | None:
        """Time at which the context will be cancelled, None if it has none."""

    @abstractmethod
    def done(self) -> threading.Event:
        """Event set when the context is cancelled or its deadline passes."""

    @abstractmethod
    def err(self) -> BaseException | None:
        """None while the context is live, CanceledError/DeadlineExceededError after."""

    @abstractmethod
    def value(self, key: Any) -> Any:
        """Value associated with key, or None."""

    def cause(self) -> BaseException | None:
        """Why the context was cancelled; defaults to err()."""
        return self.err()

    def _propagate_cancel(self, child: _CancelContext) -> None:
        """Arrange for child to be cancelled together with this context."""
        return None

    def _remove_child(self, child: _CancelContext) -> None:
        return None


class _EmptyContext(Context):
    def __init__(self, name: str):
        self._name = name

    def deadline(self) -> datetime | None:
        return None

    def done(self) -> threading.Event:
        return _NEVER_DONE

    def err(self) -> BaseException | None:
        return None

    def value(self, key: Any) -> Any:
        return None

    def __repr__(self) -> str:
        return f"context.{self._name}"


_BACKGROUND = _EmptyContext("Background")


class _ValueContext(Context):
    def __init__(self, parent: Context, key: Any, val: Any):
        self._parent = parent
        self._key = key
        self._val = val

    def deadline(self) -> datetime | None:
        return self._parent.deadline()

    def done(self) -> threading.Event:
        return self._parent.done()

    def err(self) -> BaseException | None:
        return self._parent.err()

    def value(self, key: Any) -> Any:
        if key == self._key:
            return self._val
        return self._parent.value(key)

    def cause(self) -> BaseException | None:
        return self._parent.cause()

    def _propagate_cancel(self, child: _CancelContext) -> None:
        self._parent._propagate_cancel(child)

    def _remove_child(self, child: _CancelContext) -> None:
        self._parent._remove_child(child)

    def __repr__(self) -> str:
        return f"{self._parent!r}.WithValue({self._key!r}, {self._val!r})"


class _CancelContext(Context):
    def __init__(self, parent: Context):
        self._parent = parent
        self._lock = threading.Lock()
        self._done = threading.Event()
        self._err: BaseException | None = None
        self._cause: BaseException | None = None
        self._children: set[_CancelContext] = set()
        # Must run last: the parent may cancel us right away
        parent._propagate_cancel(self)

    def deadline(self) -> datetime | None:
        return self._parent.deadline()

    def done(self) -> threading.Event:
        return self._done

    def err(self) -> BaseException | None:
        with self._lock:
            return self._err

    def value(self, key: Any) -> Any:
        return self._parent.value(key)

    def cause(self) -> BaseException | None:
        with self._lock:
            return self._cause

    def _propagate_cancel(self, child: _CancelContext) -> None:
        with self._lock:
            if self._err is None:
                self._children.add(child)
                return
            err, cause = self._err, self._cause
        child._cancel(False, err, cause)

    def _remove_child(self, child: _CancelContext) -> None:
        with self._lock:
            self._children.discard(child)

    def _cancel(self, remove_from_parent: bool, err: BaseException, cause: BaseException | None) -> None:
        with self._lock:
            if self._err is not None:
                return
            self._err = err
            self._cause = cause if cause is not None else err
            children, self._children = self._children, set()
            self._done.set()

        for child in children:
            child._cancel(False, err, self._cause)

        if remove_from_parent:
            self._parent._remove_child(self)

    def __repr__(self) -> str:
        return f"{self._parent!r}.WithCancel"


class _DeadlineContext(_CancelContext):
    def __init__(self, parent: Context, when: datetime):
        self._deadline = when
        self._timer: threading.Timer | None = None
        super().__init__(parent)

        remaining = (when - datetime.now(UTC)).total_seconds()
        if remaining <= 0:
            self._cancel(True, DeadlineExceededError(), None)
            return

        with self._lock:
            if self._err is None:
                self._timer = threading.Timer(remaining, self._cancel, args=(True, DeadlineExceededError(), None))
                self._timer.daemon = True
                self._timer.start()

    def deadline(self) -> datetime | None:
        return self._deadline

    def _cancel(self, remove_from_parent: bool, err: BaseException, cause: BaseException | None) -> None:
        super()._cancel(remove_from_parent, err, cause)
        with self._lock:
            timer, self._timer = self._timer, None
        if timer is not None:
            timer.cancel()

    def __repr__(self) -> str:
        return f"{self._parent!r}.WithDeadline({self._deadline.isoformat()})"


class _DetachedContext(Context):
    """
    Keeps the parent's values, drops its deadline and cancellation.

    cause() is pinned to None so the parent's cancellation cause never leaks
    through the detach boundary.
    """

    def __init__(self, parent: Context):
        self._parent = parent

    def deadline(self) -> datetime | None:
        return None

    def done(self) -> threading.Event:
        return _NEVER_DONE

    def err(self) -> BaseException | None:
        return None

    def value(self, key: Any) -> Any:
        return self._parent.value(key)

    def cause(self) -> BaseException | None:
        return None

    def __repr__(self) -> str:
        return f"{self._parent!r}.Detached"


def background() -> Context:
    """The root context: never cancelled, no deadline, no values."""
    return _BACKGROUND


def with_value(parent: Context, key: Any, value: Any) -> Context:
    """Derive a context in which key is associated with value."""
    return _ValueContext(parent, key, value)


def with_cancel(parent: Context) -> tuple[Context, CancelFunc]:
    """
    Derive a cancellable context.

    The returned cancel function accepts an optional cause, reported by
    cause(ctx). Calling it more than once is a no-op.
    """
    ctx = _CancelContext(parent)

    def cancel(cause: BaseException | None = None) -> None:
        ctx._cancel(True, CanceledError(), cause)

    return ctx, cancel


def with_deadline(parent: Context, when: datetime) -> tuple[Context, CancelFunc]:
    """Derive a context that is cancelled at when (naive datetimes are local time)."""
    when = when.astimezone(UTC)
    current = parent.deadline()
    if current is not None and current <= when:
        # The parent expires first; its deadline governs
        return with_cancel(parent)

    ctx = _DeadlineContext(parent, when)

    def cancel(cause: BaseException | None = None) -> None:
        ctx._cancel(True, CanceledError(), cause)

    return ctx, cancel


def with_timeout(parent: Context, timeout: float | timedelta) -> tuple[Context, CancelFunc]:
    """Derive a context that is cancelled after timeout (seconds or timedelta)."""
    if isinstance(timeout, timedelta):
        timeout = timeout.total_seconds()
    return with_deadline(parent, datetime.now(UTC) + timedelta(seconds=timeout))


def detach(parent: Context) -> Context:
    """
    Derive a context that forwards value lookups to parent but has no deadline,
    is never cancelled and reports no cancellation cause.
    """
    return _DetachedContext(parent)


def cause(ctx: Context) -> BaseException | None:
    """The cause passed to cancel, else ctx.err(); None while ctx is live."""
    return ctx.cause()


def sleep(ctx: Context, seconds: float) -> BaseException | None:
    """
    Sleep for seconds or until ctx is done.

    Returns:
        None if the full duration elapsed, cause(ctx) if ctx finished first
    """
    if ctx.done().wait(seconds):
        return cause(ctx)
    return None


def wait(ctx: Context, future: Future[T]) -> T:
    """
    Wait for future's result unless ctx finishes first.

    Raises:
        The context's error (CanceledError or DeadlineExceededError) when ctx is
        done before the future; the future's own exception otherwise.
    """
    done = ctx.done()
    while True:
        if done.is_set():
            future.cancel()
            err = ctx.err()
            raise err if err is not None else CanceledError()
        finished, _ = wait_futures([future], timeout=_POLL_INTERVAL)
        if finished:
            return future.result()
