"""
Source that follows a caller-owned cancellation token.
"""

import anyio
from anyio.abc import TaskGroup

from hother.deadline.core.models import CancellationReason
from hother.deadline.core.token import CancellationToken
from hother.deadline.sources.base import CancellationSource
from hother.deadline.utils.logging import get_logger

logger = get_logger(__name__)


class TokenSource(CancellationSource):
    """
    Cancels the scope when the token is cancelled.

    The token is only observed. A token that is already cancelled triggers during
    start_monitoring.
    """

    def __init__(self, token: CancellationToken, name: str | None = None):
        super().__init__(CancellationReason.MANUAL, name)
        self.token = token
        self._registered = False

    async def start_monitoring(self, scope: anyio.CancelScope, task_group: TaskGroup) -> None:
        self.scope = scope
        self._registered = True
        await self.token.register_callback(self._on_token_cancelled)

        logger.debug("Token source activated", source=self.name, token_id=self.token.id)

    async def _on_token_cancelled(self, token: CancellationToken) -> None:
        if not self._registered:
            return
        self.triggered = True
        await self.trigger_cancellation(token.message)

    async def stop_monitoring(self) -> None:
        """Detach from the token."""
        if self._registered:
            self.token.unregister_callback(self._on_token_cancelled)
            self._registered = False
