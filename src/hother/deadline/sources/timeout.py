"""
Deadline timer source.
"""

import math
from datetime import timedelta

import anyio
from anyio.abc import TaskGroup

from hother.deadline.core.models import CancellationReason
from hother.deadline.sources.base import CancellationSource
from hother.deadline.utils.logging import get_logger

logger = get_logger(__name__)


def to_seconds(timeout: float | timedelta | None) -> float | None:
    """
    Normalize a duration to seconds.

    Raises:
        TypeError: If the value is not a number, timedelta or None
        ValueError: If the value is NaN
    """
    if timeout is None:
        return None
    if isinstance(timeout, timedelta):
        return timeout.total_seconds()
    if isinstance(timeout, bool) or not isinstance(timeout, int | float):
        raise TypeError(f"timeout must be seconds, a timedelta or None, got {type(timeout).__name__}")
    seconds = float(timeout)
    if math.isnan(seconds):
        raise ValueError("timeout must not be NaN")
    return seconds


class TimeoutSource(CancellationSource):
    """
    One-shot timer that cancels the scope once the timeout elapses.

    Zero and negative timeouts count as already elapsed: the timer still runs as a
    task and fires on its first turn, so the caller gets a real race instead of an
    immediate failure.
    """

    def __init__(self, timeout: float | timedelta, name: str | None = None):
        """
        Initialize timeout source.

        Args:
            timeout: Timeout duration in seconds or as timedelta
            name: Optional name for the source
        """
        super().__init__(CancellationReason.TIMEOUT, name)

        seconds = to_seconds(timeout)
        if seconds is None:
            raise TypeError("TimeoutSource needs a timeout")

        self.timeout = seconds
        self.started = False
        self.released = False
        self._timer_scope: anyio.CancelScope | None = None

    @property
    def armed(self) -> bool:
        """True while the timer is started, not yet fired and not released."""
        return self.started and not self.triggered and not self.released

    async def start_monitoring(self, scope: anyio.CancelScope, task_group: TaskGroup) -> None:
        """
        Arm the timer.

        Args:
            scope: Cancel scope to cancel when the timer fires
            task_group: Task group that runs the timer
        """
        self.scope = scope
        self._timer_scope = anyio.CancelScope()
        self.started = True
        task_group.start_soon(self._run_timer, name=f"{self.name}-timer")

        logger.debug(
            "Timeout source armed",
            source=self.name,
            timeout_seconds=self.timeout,
        )

    async def _run_timer(self) -> None:
        if self.released:
            return
        with self._timer_scope:
            await anyio.sleep(max(self.timeout, 0.0))
            self.triggered = True
            await self.trigger_cancellation(f"Timed out after {self.timeout}s")

    async def stop_monitoring(self) -> None:
        """Release the timer."""
        if self._timer_scope is not None:
            self._timer_scope.cancel()
        self.released = True

        logger.debug(
            "Timeout source released",
            source=self.name,
            triggered=self.triggered,
        )
