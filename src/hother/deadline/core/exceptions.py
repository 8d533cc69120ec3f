"""
Exceptions raised by the wrapper itself.

The wrapped operation's own failures are never converted into these.
"""

from hother.deadline.core.models import CancellationReason, WaitContext

TIMEOUT_MESSAGE = "The operation has timed out."
CANCELLED_MESSAGE = "The operation was canceled by the provided cancellation token."


class CancellationError(Exception):
    """
    Base exception for waits that ended before the operation did.

    Attributes:
        reason: The reason for cancellation
        message: Cancellation message
        context: Optional wait context
    """

    def __init__(
        self,
        reason: CancellationReason,
        message: str | None = None,
        context: WaitContext | None = None,
    ):
        self.reason = reason
        self.message = message or f"Wait cancelled: {reason.value}"
        self.context = context
        super().__init__(self.message)


class TimeoutCancellation(CancellationError, TimeoutError):
    """The deadline elapsed before the operation finished."""

    def __init__(
        self,
        timeout_seconds: float | None,
        message: str | None = None,
        context: WaitContext | None = None,
    ):
        self.timeout_seconds = timeout_seconds
        super().__init__(
            CancellationReason.TIMEOUT,
            message or TIMEOUT_MESSAGE,
            context,
        )


class ManualCancellation(CancellationError):
    """The caller's cancellation token fired before the operation finished."""

    def __init__(
        self,
        message: str | None = None,
        context: WaitContext | None = None,
    ):
        super().__init__(
            CancellationReason.MANUAL,
            message or CANCELLED_MESSAGE,
            context,
        )
