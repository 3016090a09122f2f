"""Tests for the run deadline."""

import pytest

from schemasync.core.deadline import Deadline
from schemasync.core.exceptions import RunTimeoutError


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


class TestDeadline:
    def test_no_limit_never_expires(self):
        deadline = Deadline()
        assert deadline.remaining() is None
        assert not deadline.expired()
        deadline.check("anything")

    def test_expires_after_budget(self):
        clock = FakeClock()
        deadline = Deadline(10, clock=clock)
        assert deadline.remaining() == 10
        clock.now += 10
        assert deadline.expired()
        with pytest.raises(RunTimeoutError) as exc_info:
            deadline.check("table users")
        assert "table users" in str(exc_info.value)
        assert exc_info.value.context["timeout"] == 10

    def test_cancel(self):
        deadline = Deadline(60)
        deadline.cancel()
        assert deadline.expired()
        with pytest.raises(RunTimeoutError) as exc_info:
            deadline.sleep(5, "field provisioning")
        assert exc_info.value.context["cancelled"] is True

    def test_sleep_is_capped_by_remaining_time(self):
        clock = FakeClock()
        deadline = Deadline(0.01, clock=clock)
        clock.now += 0.01
        with pytest.raises(RunTimeoutError):
            deadline.sleep(30, "field provisioning")

    def test_sleep_without_limit(self):
        Deadline().sleep(0, "field provisioning")
