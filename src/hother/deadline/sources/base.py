"""
Base class for cancellation sources.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

import anyio
from anyio.abc import TaskGroup

from hother.deadline.core.models import CancellationReason
from hother.deadline.utils.logging import get_logger

logger = get_logger(__name__)


class CancellationSource(ABC):
    """
    Abstract base class for cancellation sources.

    A source watches for one cause of early termination and cancels the scope it
    was started with when that cause occurs. Cancelling an already cancelled scope
    is a no-op, so the first source to trigger wins.
    """

    def __init__(self, reason: CancellationReason, name: str | None = None):
        """
        Initialize cancellation source.

        Args:
            reason: The cancellation reason this source will use
            name: Optional name for the source
        """
        self.reason = reason
        self.name = name or self.__class__.__name__
        self.scope: anyio.CancelScope | None = None
        self._cancel_callback: Callable[[CancellationReason, str], Any] | None = None
        self.triggered: bool = False

    @abstractmethod
    async def start_monitoring(self, scope: anyio.CancelScope, task_group: TaskGroup) -> None:
        """
        Start monitoring for the cancellation condition.

        Args:
            scope: The cancel scope to trigger when the condition is met
            task_group: Task group owning any background work of the source
        """
        self.scope = scope

    @abstractmethod
    async def stop_monitoring(self) -> None:
        """Stop monitoring and release resources."""

    def set_cancel_callback(self, callback: Callable[[CancellationReason, str], Any]) -> None:
        """
        Set callback to be called when cancellation is triggered.

        Args:
            callback: Callback function that accepts reason and message
        """
        self._cancel_callback = callback

    async def trigger_cancellation(self, message: str | None = None) -> None:
        """
        Trigger cancellation with the configured reason.

        Args:
            message: Optional cancellation message
        """
        if self.scope is None or self.scope.cancel_called:
            return

        logger.debug(
            "Cancellation triggered",
            source=self.name,
            reason=self.reason.value,
            message=message,
        )

        if self._cancel_callback:
            try:
                result = self._cancel_callback(self.reason, message or "")
                if hasattr(result, "__await__"):
                    await result
            except Exception as e:
                logger.error(
                    "Error in cancellation callback",
                    source=self.name,
                    error=str(e),
                    exc_info=True,
                )

        self.scope.cancel()

    def __str__(self) -> str:
        return f"{self.name}(reason={self.reason.value})"
