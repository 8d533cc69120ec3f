"""
Tests for TimeoutGuard and operation normalization.
"""

import asyncio
import concurrent.futures
import gc
from datetime import timedelta

import anyio
import pytest

from hother.deadline import (
    CancellationToken,
    ManualCancellation,
    TimeoutCancellation,
    TimeoutGuard,
    WaitOutcome,
    WaitStatus,
    ensure_running,
)
from tests.conftest import never, value_after


class TestEnsureRunning:
    @pytest.mark.anyio
    async def test_coroutine_becomes_task(self):
        future = ensure_running(value_after(0, 1))
        assert isinstance(future, asyncio.Task)
        assert await future == 1

    @pytest.mark.anyio
    async def test_future_passes_through(self):
        future = asyncio.get_running_loop().create_future()
        assert ensure_running(future) is future

    @pytest.mark.anyio
    async def test_task_passes_through(self):
        task = asyncio.create_task(value_after(0, 2))
        assert ensure_running(task) is task
        await task

    @pytest.mark.anyio
    async def test_concurrent_future_is_wrapped(self):
        cf = concurrent.futures.Future()
        future = ensure_running(cf)
        assert isinstance(future, asyncio.Future)
        cf.set_result(3)
        assert await future == 3

    def test_rejects_non_awaitable(self):
        with pytest.raises(TypeError):
            ensure_running(42)


class TestTimeoutGuard:
    @pytest.mark.anyio
    async def test_context_on_success(self):
        guard = TimeoutGuard(1.0, name="quick")
        assert guard.context.status == WaitStatus.PENDING

        assert await guard.wait(value_after(0.01, "ok")) == "ok"

        assert guard.context.status == WaitStatus.FINISHED
        assert guard.context.outcome == WaitOutcome.COMPLETED
        assert guard.context.name == "quick"
        assert guard.context.error is None
        assert guard.timeout_source.released
        assert not guard.timeout_source.triggered

    @pytest.mark.anyio
    async def test_single_use(self):
        guard = TimeoutGuard(1.0)
        await guard.wait(value_after(0, None))

        second = value_after(0, None)
        with pytest.raises(RuntimeError):
            await guard.wait(second)
        # The rejected coroutine is closed rather than left unawaited
        assert second.cr_frame is None

    @pytest.mark.anyio
    async def test_timedelta_timeout(self):
        guard = TimeoutGuard(timedelta(milliseconds=20))
        assert guard.timeout == 0.02
        with pytest.raises(TimeoutCancellation) as exc_info:
            await guard.wait(never())
        assert exc_info.value.timeout_seconds == 0.02
        assert exc_info.value.context is guard.context
        assert guard.context.outcome == WaitOutcome.TIMED_OUT

    def test_rejects_bad_timeout(self):
        with pytest.raises(TypeError):
            TimeoutGuard("soon")
        with pytest.raises(ValueError):
            TimeoutGuard(float("nan"))

    @pytest.mark.anyio
    async def test_no_timeout_no_token(self):
        guard = TimeoutGuard(None)
        assert guard.timeout_source is None
        assert guard.token_source is None
        assert await guard.wait(value_after(0.02, 5)) == 5

    @pytest.mark.anyio
    async def test_no_timeout_with_token(self):
        token = CancellationToken()
        guard = TimeoutGuard(None, token)

        async def cancel_soon():
            await anyio.sleep(0.02)
            await token.cancel(message="caller gave up")

        async with anyio.create_task_group() as tg:
            tg.start_soon(cancel_soon)
            with pytest.raises(ManualCancellation, match="caller gave up"):
                await guard.wait(never())

        assert guard.context.outcome == WaitOutcome.CANCELLED
        assert guard.token_source.triggered

    @pytest.mark.anyio
    async def test_operation_is_not_cancelled_on_timeout(self):
        task = asyncio.create_task(value_after(0.1, "late"))

        with pytest.raises(TimeoutCancellation):
            await TimeoutGuard(0.01).wait(task)

        assert not task.cancelled()
        assert await task == "late"

    @pytest.mark.anyio
    async def test_same_task_can_be_timed_twice(self):
        task = ensure_running(value_after(0.05, "done"))

        with pytest.raises(TimeoutCancellation):
            await TimeoutGuard(0.01).wait(task)
        assert await TimeoutGuard(1.0).wait(task) == "done"

    @pytest.mark.anyio
    async def test_cancelled_operation_propagates_its_cancellation(self):
        future = asyncio.get_running_loop().create_future()
        future.cancel()

        with pytest.raises(asyncio.CancelledError):
            await TimeoutGuard(1.0).wait(future)

    @pytest.mark.anyio
    async def test_outer_cancellation_releases_timer(self):
        guard = TimeoutGuard(10.0)

        with anyio.move_on_after(0.02) as scope:
            await guard.wait(never())

        assert scope.cancelled_caught
        assert guard.timeout_source.released
        assert not guard.timeout_source.triggered
        assert guard.context.outcome is None

    @pytest.mark.anyio
    async def test_token_detached_after_wait(self):
        token = CancellationToken()
        guard = TimeoutGuard(1.0, token)
        await guard.wait(value_after(0, 1))

        await token.cancel()
        assert not guard.token_source.triggered

    @pytest.mark.anyio
    async def test_outer_cancellation_retrieves_late_failure(self):
        errors = []
        loop = asyncio.get_running_loop()
        previous_handler = loop.get_exception_handler()
        loop.set_exception_handler(lambda _loop, context: errors.append(context["message"]))

        async def fail_later():
            await anyio.sleep(0.03)
            raise ValueError("late")

        try:
            with anyio.move_on_after(0.01):
                await TimeoutGuard(10.0).wait(fail_later())

            await anyio.sleep(0.05)
            gc.collect()
            await anyio.sleep(0)
        finally:
            loop.set_exception_handler(previous_handler)

        assert errors == []
