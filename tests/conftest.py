"""
Shared fixtures and helpers for the test suite.
"""

import asyncio
from contextlib import asynccontextmanager

import anyio
import pytest


@pytest.fixture
def anyio_backend():
    # Operations are asyncio futures, so only the asyncio backend applies
    return "asyncio"


async def never() -> None:
    """An operation that never finishes on its own."""
    await asyncio.Event().wait()


async def value_after(delay: float, value):
    await anyio.sleep(delay)
    return value


async def fail_after_delay(delay: float, error: BaseException):
    await anyio.sleep(delay)
    raise error


@asynccontextmanager
async def assert_elapsed(minimum: float, maximum: float):
    """Assert the block took between minimum and maximum seconds."""
    start = anyio.current_time()
    yield
    elapsed = anyio.current_time() - start
    assert minimum <= elapsed <= maximum, f"took {elapsed:.3f}s, expected {minimum}-{maximum}s"
