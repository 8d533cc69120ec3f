"""
Cancellation token shared between a caller and the waits it starts.
"""

import uuid
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from typing import Any

import anyio
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from hother.deadline.core.models import CancellationReason
from hother.deadline.utils.logging import get_logger

logger = get_logger(__name__)

TokenCallback = Callable[["CancellationToken"], Awaitable[Any] | Any]


class CancellationToken(BaseModel):
    """
    Level-triggered cancellation signal owned by the caller.

    Cancelling more than once has no further effect. Waits only observe the token;
    they never cancel it.

    Attributes:
        id: Unique token identifier
        is_cancelled: Whether the token has been cancelled
        reason: Reason for cancellation
        message: Optional cancellation message
        cancelled_at: When the token was cancelled
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    is_cancelled: bool = False
    reason: CancellationReason | None = None
    message: str | None = None
    cancelled_at: datetime | None = None

    _event: Any = PrivateAttr(default=None)
    _callbacks: Any = PrivateAttr(default=None)

    def __init__(self, **data):
        super().__init__(**data)
        self._event = None
        self._callbacks = []

    def __hash__(self) -> int:
        return hash(self.id)

    def __eq__(self, other) -> bool:
        if not isinstance(other, CancellationToken):
            return False
        return self.id == other.id

    def _get_event(self) -> anyio.Event:
        # Created lazily so tokens can be built outside a running event loop
        if self._event is None:
            self._event = anyio.Event()
            if self.is_cancelled:
                self._event.set()
        return self._event

    async def cancel(
        self,
        reason: CancellationReason = CancellationReason.MANUAL,
        message: str | None = None,
    ) -> bool:
        """
        Cancel the token.

        Args:
            reason: Reason for cancellation
            message: Optional cancellation message

        Returns:
            True if token was cancelled, False if already cancelled
        """
        if self.is_cancelled:
            logger.debug(
                "Token already cancelled",
                token_id=self.id,
                original_reason=self.reason.value if self.reason else None,
            )
            return False

        self.is_cancelled = True
        self.reason = reason
        self.message = message
        self.cancelled_at = datetime.now(UTC)
        self._get_event().set()

        logger.debug(
            "Token cancelled",
            token_id=self.id,
            reason=reason.value,
            message=message,
            callback_count=len(self._callbacks),
        )

        for callback in list(self._callbacks):
            await self._run_callback(callback)
        return True

    async def wait_for_cancel(self) -> None:
        """Wait until token is cancelled."""
        await self._get_event().wait()

    async def register_callback(self, callback: TokenCallback) -> None:
        """
        Register a callback to be called once on cancellation.

        The callback receives the token and may be sync or async. If the token is
        already cancelled it is called immediately.

        Args:
            callback: Callable that accepts the token
        """
        self._callbacks.append(callback)
        if self.is_cancelled:
            await self._run_callback(callback)

    def unregister_callback(self, callback: TokenCallback) -> bool:
        """
        Remove a previously registered callback.

        Returns:
            True if the callback was registered
        """
        try:
            self._callbacks.remove(callback)
        except ValueError:
            return False
        return True

    async def _run_callback(self, callback: TokenCallback) -> None:
        try:
            result = callback(self)
            if hasattr(result, "__await__"):
                await result
        except Exception as e:
            logger.error(
                "Error in cancellation callback",
                token_id=self.id,
                error=str(e),
                exc_info=True,
            )

    def __str__(self) -> str:
        if self.is_cancelled:
            return f"CancellationToken(id={self.id[:8]}, cancelled={self.reason.value if self.reason else 'unknown'})"
        return f"CancellationToken(id={self.id[:8]}, active)"
