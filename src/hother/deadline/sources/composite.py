"""
Composite source that fires when any of its component sources fires.
"""

from functools import partial

import anyio
from anyio.abc import TaskGroup

from hother.deadline.core.models import CancellationReason
from hother.deadline.sources.base import CancellationSource
from hother.deadline.utils.logging import get_logger

logger = get_logger(__name__)


class AnyOfSource(CancellationSource):
    """
    Logical OR of several sources feeding one cancel scope.

    Every component is started against the same scope. The first one to trigger is
    recorded in ``triggered_source``; later triggers find the scope already
    cancelled and do nothing.
    """

    def __init__(
        self,
        sources: list[CancellationSource],
        name: str | None = None,
    ):
        """
        Initialize composite source.

        Args:
            sources: List of cancellation sources to combine
            name: Optional name for the source
        """
        # Replaced by the reason of whichever component triggers first
        super().__init__(CancellationReason.MANUAL, name or "any_of")

        if not sources:
            raise ValueError("At least one source is required")

        self.sources = sources
        self.triggered_source: CancellationSource | None = None

    async def start_monitoring(self, scope: anyio.CancelScope, task_group: TaskGroup) -> None:
        """
        Start monitoring all component sources.

        Args:
            scope: Cancel scope to trigger when any source triggers
            task_group: Task group for component background work
        """
        self.scope = scope
        for source in self.sources:
            source.set_cancel_callback(partial(self._on_component_triggered, source))
            await source.start_monitoring(scope, task_group)

        logger.debug(
            "Composite source activated",
            source=self.name,
            source_types=[type(s).__name__ for s in self.sources],
        )

    def _on_component_triggered(self, source: CancellationSource, reason: CancellationReason, message: str) -> None:
        if self.triggered_source is None:
            self.triggered_source = source
            self.reason = reason
            self.triggered = True

    async def stop_monitoring(self) -> None:
        """Stop every component source, even if one of them fails."""
        for source in self.sources:
            try:
                await source.stop_monitoring()
            except Exception as e:
                logger.error(
                    "Error stopping source",
                    source=str(source),
                    error=str(e),
                    exc_info=True,
                )

        logger.debug(
            "Composite source stopped",
            source=self.name,
            triggered_source=str(self.triggered_source) if self.triggered_source else None,
        )
