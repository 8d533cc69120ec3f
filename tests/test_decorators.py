"""
Tests for the timeout_after decorator.
"""

import anyio
import pytest

from hother.deadline import CancellationToken, ManualCancellation, TimeoutCancellation, timeout_after


class TestTimeoutAfterDecorator:
    """Test @timeout_after decorator."""

    @pytest.mark.anyio
    async def test_basic_decorator(self):
        call_count = 0

        @timeout_after(1.0)
        async def decorated_function(value: int) -> int:
            nonlocal call_count
            call_count += 1
            await anyio.sleep(0.01)
            return value * 2

        assert await decorated_function(21) == 42
        assert call_count == 1
        assert decorated_function.__name__ == "decorated_function"

    @pytest.mark.anyio
    async def test_decorator_with_timeout(self):
        @timeout_after(0.05)
        async def slow_function():
            await anyio.sleep(1.0)
            return "completed"

        with pytest.raises(TimeoutCancellation):
            await slow_function()

    @pytest.mark.anyio
    async def test_decorator_with_token_param(self):
        seen = []

        @timeout_after(1.0, token_param="token")
        async def worker(token: CancellationToken | None = None):
            seen.append(token)
            await anyio.sleep(1.0)

        token = CancellationToken()

        async def cancel_soon():
            await anyio.sleep(0.02)
            await token.cancel()

        async with anyio.create_task_group() as tg:
            tg.start_soon(cancel_soon)
            with pytest.raises(ManualCancellation):
                await worker(token=token)

        assert seen == [token]

    @pytest.mark.anyio
    async def test_token_param_optional(self):
        @timeout_after(1.0, token_param="token")
        async def worker(token=None):
            return "no token"

        assert await worker() == "no token"

    def test_decorator_params(self):
        @timeout_after(2.5, name="fetch")
        async def func():
            pass

        assert func._timeout_params == {"timeout": 2.5, "name": "fetch", "token_param": None}
