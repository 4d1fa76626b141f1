"""
PlatformKit - Context Tests

Cancellation propagation, deadlines, cancellation causes, detached contexts,
and the sleep/wait helpers.
"""

import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import UTC, datetime, timedelta

import pytest

from platformkit import context
from platformkit.context import CanceledError, DeadlineExceededError


class TestBackground:
    def test_never_done(self) -> None:
        ctx = context.background()

        assert ctx.deadline() is None
        assert ctx.err() is None
        assert ctx.value("anything") is None
        assert not ctx.done().is_set()
        assert context.cause(ctx) is None

    def test_done_event_cannot_be_set(self) -> None:
        done = context.background().done()
        done.set()

        assert not done.is_set()


class TestWithValue:
    def test_lookup_walks_up_the_chain(self) -> None:
        ctx = context.with_value(context.background(), "a", 1)
        ctx = context.with_value(ctx, "b", 2)

        assert ctx.value("a") == 1
        assert ctx.value("b") == 2
        assert ctx.value("c") is None

    def test_inner_value_shadows_outer(self) -> None:
        ctx = context.with_value(context.background(), "a", 1)
        ctx = context.with_value(ctx, "a", 2)

        assert ctx.value("a") == 2


class TestWithCancel:
    def test_cancel_sets_err_and_done(self) -> None:
        ctx, cancel = context.with_cancel(context.background())
        assert ctx.err() is None

        cancel()

        assert ctx.done().is_set()
        assert isinstance(ctx.err(), CanceledError)
        assert isinstance(context.cause(ctx), CanceledError)

    def test_cancel_with_cause(self) -> None:
        ctx, cancel = context.with_cancel(context.background())
        reason = RuntimeError("shutting down")

        cancel(reason)

        assert isinstance(ctx.err(), CanceledError)
        assert context.cause(ctx) is reason

    def test_cancel_is_idempotent(self) -> None:
        ctx, cancel = context.with_cancel(context.background())
        first = RuntimeError("first")

        cancel(first)
        cancel(RuntimeError("second"))

        assert context.cause(ctx) is first

    def test_cancel_propagates_to_children(self) -> None:
        parent, cancel = context.with_cancel(context.background())
        child, child_cancel = context.with_cancel(context.with_value(parent, "k", "v"))
        grandchild, _ = context.with_cancel(child)

        cancel()

        assert child.done().is_set()
        assert grandchild.done().is_set()
        assert isinstance(grandchild.err(), CanceledError)
        assert grandchild.value("k") == "v"
        child_cancel()

    def test_child_cancel_does_not_affect_parent(self) -> None:
        parent, cancel = context.with_cancel(context.background())
        child, child_cancel = context.with_cancel(parent)

        child_cancel()

        assert child.err() is not None
        assert parent.err() is None
        cancel()

    def test_child_of_cancelled_parent_starts_cancelled(self) -> None:
        parent, cancel = context.with_cancel(context.background())
        cancel()

        child, _ = context.with_cancel(parent)

        assert child.done().is_set()
        assert isinstance(child.err(), CanceledError)


class TestDeadline:
    def test_timeout_expires(self) -> None:
        ctx, cancel = context.with_timeout(context.background(), 0.05)
        try:
            assert ctx.done().wait(2)
            assert isinstance(ctx.err(), DeadlineExceededError)
            assert isinstance(ctx.err(), TimeoutError)
        finally:
            cancel()

    def test_past_deadline_is_done_immediately(self) -> None:
        ctx, cancel = context.with_deadline(context.background(), datetime.now(UTC) - timedelta(seconds=1))

        assert ctx.done().is_set()
        assert isinstance(ctx.err(), DeadlineExceededError)
        cancel()

    def test_deadline_reported(self) -> None:
        when = datetime.now(UTC) + timedelta(minutes=5)
        ctx, cancel = context.with_deadline(context.background(), when)

        assert ctx.deadline() == when
        cancel()
        assert isinstance(ctx.err(), CanceledError)

    def test_earlier_parent_deadline_wins(self) -> None:
        parent, cancel_parent = context.with_timeout(context.background(), timedelta(seconds=10))
        child, cancel_child = context.with_timeout(parent, timedelta(minutes=10))

        assert child.deadline() == parent.deadline()
        cancel_child()
        cancel_parent()

    def test_timeout_propagates_to_children(self) -> None:
        parent, cancel = context.with_timeout(context.background(), 0.05)
        child, child_cancel = context.with_cancel(parent)

        assert child.done().wait(2)
        assert isinstance(child.err(), DeadlineExceededError)
        child_cancel()
        cancel()


class TestDetach:
    def test_detached_context_keeps_values_only(self) -> None:
        parent = context.with_value(context.background(), "k", "v")
        parent, cancel = context.with_timeout(parent, timedelta(minutes=1))

        detached = context.detach(parent)
        cancel(RuntimeError("request finished"))

        assert parent.done().is_set()
        assert detached.deadline() is None
        assert not detached.done().is_set()
        assert detached.err() is None
        assert detached.value("k") == "v"
        assert context.cause(detached) is None

    def test_children_of_detached_context_are_independent(self) -> None:
        parent, cancel = context.with_cancel(context.background())
        child, child_cancel = context.with_cancel(context.detach(parent))

        cancel()

        assert child.err() is None
        child_cancel()
        assert isinstance(child.err(), CanceledError)


class TestSleep:
    def test_full_duration_returns_none(self) -> None:
        assert context.sleep(context.background(), 0.01) is None

    def test_returns_cause_when_cancelled(self) -> None:
        ctx, cancel = context.with_cancel(context.background())
        reason = RuntimeError("stop")
        threading.Timer(0.05, cancel, args=(reason,)).start()

        assert context.sleep(ctx, 5) is reason

    def test_returns_deadline_error_on_timeout(self) -> None:
        ctx, cancel = context.with_timeout(context.background(), 0.05)

        assert isinstance(context.sleep(ctx, 5), DeadlineExceededError)
        cancel()


class TestWait:
    def test_returns_result(self) -> None:
        with ThreadPoolExecutor(max_workers=1) as pool:
            future = pool.submit(lambda: 42)
            assert context.wait(context.background(), future) == 42

    def test_propagates_future_exception(self) -> None:
        def fail() -> None:
            raise ValueError("bad")

        with ThreadPoolExecutor(max_workers=1) as pool:
            future = pool.submit(fail)
            with pytest.raises(ValueError, match="bad"):
                context.wait(context.background(), future)

    def test_raises_context_error_first(self) -> None:
        release = threading.Event()
        ctx, cancel = context.with_timeout(context.background(), 0.05)

        with ThreadPoolExecutor(max_workers=1) as pool:
            future = pool.submit(release.wait, 5)
            try:
                with pytest.raises(DeadlineExceededError):
                    context.wait(ctx, future)
            finally:
                release.set()
                cancel()
