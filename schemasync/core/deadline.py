"""Run deadline shared by the engine and the provisioning waiter."""

import threading
import time
from typing import Optional

from schemasync.core.exceptions import RunTimeoutError


class Deadline:
    """Overall time budget for one migration run.

    Sleeping through the deadline wakes up early: waits are done on an event
    so that either the deadline or an explicit ``cancel()`` interrupts them.
    """

    def __init__(
        self,
        seconds: Optional[float] = None,
        clock=time.monotonic,
    ) -> None:
        self._clock = clock
        self._seconds = seconds
        self._expires_at = None if seconds is None else clock() + seconds
        self._cancelled = threading.Event()

    def remaining(self) -> Optional[float]:
        if self._expires_at is None:
            return None
        return max(0.0, self._expires_at - self._clock())

    def expired(self) -> bool:
        if self._cancelled.is_set():
            return True
        remaining = self.remaining()
        return remaining is not None and remaining <= 0

    def cancel(self) -> None:
        self._cancelled.set()

    def check(self, stage: str) -> None:
        """Raise RunTimeoutError if the deadline has passed."""
        if self.expired():
            raise RunTimeoutError(
                f"Migration run timed out during {stage}",
                context={"timeout": self._seconds, "cancelled": self._cancelled.is_set()},
            )

    def sleep(self, seconds: float, stage: str) -> None:
        """Sleep up to ``seconds``, waking early if the deadline expires."""
        remaining = self.remaining()
        timeout = seconds if remaining is None else min(seconds, remaining)
        if timeout > 0:
            self._cancelled.wait(timeout)
        self.check(stage)
