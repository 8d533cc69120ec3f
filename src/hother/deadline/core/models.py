"""
Data models for timed waits.
"""

import uuid
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class CancellationReason(str, Enum):
    """Why a wait stopped early."""

    TIMEOUT = "timeout"
    MANUAL = "manual"


class WaitStatus(str, Enum):
    """Lifecycle of a single timed wait."""

    PENDING = "pending"
    RUNNING = "running"
    FINISHED = "finished"


class WaitOutcome(str, Enum):
    """
    Which party ended the race.

    COMPLETED covers both a value and the operation's own failure; the other two are
    the synthetic outcomes raised by the wrapper.
    """

    COMPLETED = "completed"
    TIMED_OUT = "timed_out"
    CANCELLED = "cancelled"


class WaitContext(BaseModel):
    """
    Bookkeeping for one invocation of the timeout combinator.

    Attributes:
        id: Unique wait identifier
        name: Optional human-readable name
        timeout_seconds: Requested deadline, None when unbounded
        status: Current lifecycle status
        outcome: Terminal outcome once finished
        error: Repr of the operation's own failure, if any
        started_at: When the race started
        ended_at: When the race was classified
    """

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str | None = None
    timeout_seconds: float | None = None
    status: WaitStatus = WaitStatus.PENDING
    outcome: WaitOutcome | None = None
    error: str | None = None
    started_at: datetime | None = None
    ended_at: datetime | None = None

    @property
    def duration(self) -> float | None:
        """Seconds between start and classification."""
        if self.started_at is None or self.ended_at is None:
            return None
        return (self.ended_at - self.started_at).total_seconds()

    @property
    def is_finished(self) -> bool:
        return self.status == WaitStatus.FINISHED

    def start(self) -> None:
        self.status = WaitStatus.RUNNING
        self.started_at = datetime.now(UTC)

    def finish(self, outcome: WaitOutcome, error: BaseException | None = None) -> None:
        self.status = WaitStatus.FINISHED
        self.outcome = outcome
        self.ended_at = datetime.now(UTC)
        if error is not None:
            self.error = repr(error)

    def log_context(self) -> dict[str, Any]:
        """Key/value pairs for structured log events."""
        ctx: dict[str, Any] = {
            "wait_id": self.id,
            "wait_name": self.name,
            "timeout_seconds": self.timeout_seconds,
            "status": self.status.value,
        }
        if self.outcome is not None:
            ctx["outcome"] = self.outcome.value
        if self.duration is not None:
            ctx["duration_seconds"] = round(self.duration, 6)
        return ctx
