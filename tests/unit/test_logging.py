"""
Tests for logging helpers.
"""

import logging

import pytest

from hother.deadline import TimeoutCancellation, with_timeout
from hother.deadline.utils.logging import get_logger
from tests.conftest import never


def test_get_logger_uses_stdlib_name(caplog):
    caplog.set_level(logging.INFO, logger="hother.deadline.test")
    get_logger("hother.deadline.test").info("hello", answer=42)

    assert len(caplog.records) == 1
    record = caplog.records[0]
    assert record.name == "hother.deadline.test"
    assert "hello" in record.getMessage()
    assert "answer" in record.getMessage()


@pytest.mark.anyio
async def test_timeout_is_logged(caplog):
    caplog.set_level(logging.INFO, logger="hother.deadline")
    with pytest.raises(TimeoutCancellation):
        await with_timeout(never(), 0.01, name="logged_wait")

    messages = [r.getMessage() for r in caplog.records if r.name == "hother.deadline.core.guard"]
    assert any("Wait ended before operation" in m and "logged_wait" in m for m in messages)
