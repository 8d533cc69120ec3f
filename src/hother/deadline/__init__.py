"""
Deadline - timeouts for already running async operations

Wraps an awaitable in a race against a deadline and an optional cancellation
token, telling apart "the operation failed", "the token was cancelled" and
"the deadline elapsed".
"""

import importlib.metadata

from .core.exceptions import CancellationError, ManualCancellation, TimeoutCancellation
from .core.guard import TimeoutGuard, ensure_running
from .core.models import CancellationReason, WaitContext, WaitOutcome, WaitStatus
from .core.token import CancellationToken
from .utils.decorators import timeout_after, wait_with_timeout, with_timeout

try:
    __version__ = importlib.metadata.version("hother-deadline")
except importlib.metadata.PackageNotFoundError:
    __version__ = "0.0.0+dev"

__all__ = [
    # Models
    "CancellationReason",
    "WaitStatus",
    "WaitOutcome",
    "WaitContext",
    "CancellationToken",
    # Core
    "TimeoutGuard",
    "ensure_running",
    # Exceptions
    "CancellationError",
    "TimeoutCancellation",
    "ManualCancellation",
    # Utilities
    "with_timeout",
    "wait_with_timeout",
    "timeout_after",
]
