#!/usr/bin/env python3
"""
Deadline on an already running task.
"""

# --8<-- [start:imports]
import asyncio

import anyio

from hother.deadline import TimeoutCancellation, TimeoutGuard, with_timeout

# --8<-- [end:imports]


async def fetch_data() -> dict[str, str]:
    """Simulate data fetching."""
    await anyio.sleep(1.0)
    return {"data": "example"}


# --8<-- [start:main]
async def main() -> None:
    # --8<-- [start:example]
    # Succeeds: the deadline is longer than the work
    result = await with_timeout(fetch_data(), 2.0)
    print(f"  Success: {result}")

    # Times out, but the task keeps running and can still be awaited
    task = asyncio.create_task(fetch_data())
    guard = TimeoutGuard(0.5, name="fetch")
    try:
        await guard.wait(task)
    except TimeoutCancellation as e:
        print(f"  {e} (outcome={guard.context.outcome.value}, after {guard.context.duration:.2f}s)")

    print(f"  Late result: {await task}")
    # --8<-- [end:example]


# --8<-- [end:main]


if __name__ == "__main__":
    anyio.run(main)
