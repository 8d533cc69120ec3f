"""
Convenience functions and decorators for timed waits.
"""

from collections.abc import Awaitable, Callable
from datetime import timedelta
from functools import wraps
from typing import TypeVar

from hother.deadline.core.guard import TimeoutGuard
from hother.deadline.core.token import CancellationToken

T = TypeVar("T")
R = TypeVar("R")


async def with_timeout(
    operation: Awaitable[T],
    timeout: float | timedelta | None,
    token: CancellationToken | None = None,
    *,
    name: str | None = None,
) -> T:
    """
    Wait for an operation with a deadline.

    Args:
        operation: Running future/task, or a coroutine to start
        timeout: Deadline in seconds or as timedelta; None waits without one
        token: Optional cancellation token that ends the wait early
        name: Optional name used in logs

    Returns:
        Result of the operation

    Raises:
        TimeoutCancellation: If the deadline elapses first
        ManualCancellation: If the token is cancelled first

    Example:
        data = await with_timeout(fetch_data(), 5.0)
    """
    return await TimeoutGuard(timeout, token, name=name).wait(operation)


async def wait_with_timeout(
    operation: Awaitable[object],
    timeout: float | timedelta | None,
    token: CancellationToken | None = None,
    *,
    name: str | None = None,
) -> None:
    """Like with_timeout, for operations whose result does not matter."""
    await with_timeout(operation, timeout, token, name=name)


def timeout_after(
    timeout: float | timedelta | None,
    *,
    name: str | None = None,
    token_param: str | None = None,
) -> Callable[[Callable[..., Awaitable[R]]], Callable[..., Awaitable[R]]]:
    """
    Decorator that puts every call of an async function under a deadline.

    Args:
        timeout: Deadline applied to each call
        name: Optional name used in logs (defaults to function name)
        token_param: Keyword argument of the call holding a CancellationToken;
            the token is still passed on to the function

    Example:
        @timeout_after(2.0, token_param="token")
        async def fetch(url: str, token: CancellationToken | None = None) -> bytes:
            ...
    """

    def decorator(func: Callable[..., Awaitable[R]]) -> Callable[..., Awaitable[R]]:
        @wraps(func)
        async def wrapper(*args, **kwargs) -> R:
            token = kwargs.get(token_param) if token_param else None
            return await with_timeout(func(*args, **kwargs), timeout, token, name=name or func.__name__)

        wrapper._timeout_params = {
            "timeout": timeout,
            "name": name or func.__name__,
            "token_param": token_param,
        }
        return wrapper

    return decorator
