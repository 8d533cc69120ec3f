"""
Cancellation sources feeding a wait's internal cancel scope.
"""

from .base import CancellationSource
from .composite import AnyOfSource
from .timeout import TimeoutSource
from .token import TokenSource

__all__ = ["CancellationSource", "AnyOfSource", "TimeoutSource", "TokenSource"]
