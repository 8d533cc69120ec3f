#!/usr/bin/env python3
"""
Stop waiting early with a cancellation token.
"""

# --8<-- [start:imports]
import anyio

from hother.deadline import CancellationToken, ManualCancellation, TimeoutCancellation, with_timeout
from hother.deadline.utils.logging import configure_logging

# --8<-- [end:imports]


# --8<-- [start:main]
async def main() -> None:
    configure_logging(log_level="INFO")

    # --8<-- [start:example]
    token = CancellationToken()

    async def slow_operation() -> str:
        await anyio.sleep(10.0)
        return "finished"

    async def user_gives_up() -> None:
        await anyio.sleep(0.5)
        print("Cancelling wait...")
        await token.cancel(message="User requested cancelation")

    async with anyio.create_task_group() as tg:
        tg.start_soon(user_gives_up)
        try:
            await with_timeout(slow_operation(), 5.0, token)
        except ManualCancellation as e:
            print(f"  Cancelled: {e.message}")
        except TimeoutCancellation:
            print("  Timed out")
    # --8<-- [end:example]


# --8<-- [end:main]


if __name__ == "__main__":
    anyio.run(main)
