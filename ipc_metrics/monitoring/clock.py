"""
Clock sources used to time outbound calls.
"""

import time
from abc import ABC, abstractmethod


class Clock(ABC):
    """Nanosecond timestamp source."""

    @abstractmethod
    def nanos(self) -> int:
        """Current timestamp in nanoseconds since an arbitrary fixed epoch."""


class SystemClock(Clock):
    """Monotonic system clock."""

    def nanos(self) -> int:
        return time.monotonic_ns()


class ManualClock(Clock):
    """Clock that only moves when told to, for deterministic timings in tests."""

    def __init__(self, nanos: int = 0) -> None:
        self._nanos = nanos

    def nanos(self) -> int:
        return self._nanos

    def set_nanos(self, nanos: int) -> None:
        self._nanos = nanos

    def advance(self, nanos: int) -> None:
        self._nanos += nanos
