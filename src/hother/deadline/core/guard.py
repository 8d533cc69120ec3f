"""
Race an operation against a deadline and an optional cancellation token.
"""

import asyncio
import concurrent.futures
import inspect
from collections.abc import Awaitable
from datetime import timedelta
from typing import Any, Generic, TypeVar

import anyio

from hother.deadline.core.exceptions import ManualCancellation, TimeoutCancellation
from hother.deadline.core.models import WaitContext, WaitOutcome
from hother.deadline.core.token import CancellationToken
from hother.deadline.sources.base import CancellationSource
from hother.deadline.sources.composite import AnyOfSource
from hother.deadline.sources.timeout import TimeoutSource, to_seconds
from hother.deadline.sources.token import TokenSource
from hother.deadline.utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


def ensure_running(operation: Awaitable[T] | concurrent.futures.Future) -> asyncio.Future:
    """
    Turn an operation into a running future.

    Futures and tasks are returned unchanged. Coroutines and other awaitables are
    scheduled as a task, so callers that want to time the same work more than once
    should call this themselves and pass the result around.

    Raises:
        TypeError: If the operation is not awaitable
    """
    if isinstance(operation, asyncio.Future):
        return operation
    if isinstance(operation, concurrent.futures.Future):
        return asyncio.wrap_future(operation)
    if inspect.isawaitable(operation):
        return asyncio.ensure_future(operation)
    raise TypeError(f"An awaitable is required, got {type(operation).__name__}")


def _consume_result(future: asyncio.Future) -> None:
    if future.cancelled():
        return
    exc = future.exception()
    if exc is not None:
        logger.debug("Abandoned operation failed", error=repr(exc))


class TimeoutGuard(Generic[T]):
    """
    One timed wait.

    Each guard owns its deadline timer and its internal cancel scope, so it can be
    awaited only once. The operation itself is never cancelled: if the deadline or
    the token wins, the operation keeps running and its result is dropped.

    Example:
        guard = TimeoutGuard(5.0, token)
        data = await guard.wait(fetch())
    """

    def __init__(
        self,
        timeout: float | timedelta | None,
        token: CancellationToken | None = None,
        *,
        name: str | None = None,
    ):
        """
        Args:
            timeout: Deadline in seconds or as timedelta; None waits without one
            token: Optional caller-owned cancellation token
            name: Optional name used in logs
        """
        self.timeout = to_seconds(timeout)
        self.token = token
        self.context = WaitContext(name=name, timeout_seconds=self.timeout)

        self.timeout_source: TimeoutSource | None = None
        self.token_source: TokenSource | None = None
        sources: list[CancellationSource] = []
        if self.timeout is not None:
            self.timeout_source = TimeoutSource(self.timeout)
            sources.append(self.timeout_source)
        if token is not None:
            self.token_source = TokenSource(token)
            sources.append(self.token_source)
        self._linked = AnyOfSource(sources, name=name) if sources else None
        self._used = False

    async def wait(self, operation: Awaitable[T]) -> T:
        """
        Wait for the operation, the deadline or the token, whichever comes first.

        Returns:
            The operation's result

        Raises:
            TimeoutCancellation: The deadline elapsed first
            ManualCancellation: The token was cancelled first
            Exception: Whatever the operation itself raised, unchanged
        """
        if self._used:
            if inspect.iscoroutine(operation):
                operation.close()
            raise RuntimeError("TimeoutGuard can only be awaited once")
        self._used = True

        future = ensure_running(operation)
        owned = future is not operation

        self.context.start()
        logger.debug("Wait started", **self.context.log_context())

        outcome: WaitOutcome | None = None
        try:
            async with anyio.create_task_group() as task_group:
                try:
                    with anyio.CancelScope() as scope:
                        if self._linked is not None:
                            await self._linked.start_monitoring(scope, task_group)
                        await asyncio.wait((future,))
                    outcome = self._classify(future)
                finally:
                    if self._linked is not None:
                        await self._linked.stop_monitoring()
        finally:
            if owned and outcome is not WaitOutcome.COMPLETED:
                # Nobody else holds this task; keep its late failure from being reported as unretrieved
                future.add_done_callback(_consume_result)

        return self._report(outcome, future)

    def _classify(self, future: asyncio.Future) -> WaitOutcome:
        # A finished operation wins ties with the deadline and the token
        if future.done():
            return WaitOutcome.COMPLETED
        if self.token is not None and self.token.is_cancelled:
            return WaitOutcome.CANCELLED
        return WaitOutcome.TIMED_OUT

    def _report(self, outcome: WaitOutcome, future: asyncio.Future) -> Any:
        if outcome is WaitOutcome.COMPLETED:
            error = future.exception() if not future.cancelled() else asyncio.CancelledError()
            self.context.finish(outcome, error)
            logger.debug("Wait completed", **self.context.log_context())
            return future.result()

        self.context.finish(outcome)
        logger.info("Wait ended before operation", **self.context.log_context())
        if outcome is WaitOutcome.CANCELLED:
            raise ManualCancellation(message=self.token.message, context=self.context) from None
        raise TimeoutCancellation(self.timeout, context=self.context) from None

    def __repr__(self) -> str:
        return f"TimeoutGuard(timeout={self.timeout}, token={self.token}, status={self.context.status.value})"
