"""Time source for the scheduler."""

from __future__ import annotations

import time
from abc import ABCMeta, abstractmethod
from typing import override


class Clock(metaclass=ABCMeta):
    """A monotonic clock that can also wait."""

    @abstractmethod
    def now(self) -> float:
        """Current time in seconds from an arbitrary origin."""
        raise NotImplementedError()

    @abstractmethod
    def sleep(self, seconds: float) -> None:
        raise NotImplementedError()

    def sleep_until(self, deadline: float) -> None:
        """Sleep until the deadline, returning at once if it has passed."""
        remaining = deadline - self.now()
        if remaining > 0:
            self.sleep(remaining)


class SystemClock(Clock):
    """Wall clock backed by time.monotonic and time.sleep."""

    @override
    def now(self) -> float:
        return time.monotonic()

    @override
    def sleep(self, seconds: float) -> None:
        time.sleep(seconds)
