"""
Time sources for the mission engine.

All engine timestamps are integer epoch milliseconds. The dispatcher reads
time only through a Clock so tests and simulations can drive virtual time.
"""

import time
from typing import Protocol, runtime_checkable


@runtime_checkable
class Clock(Protocol):
    """Anything that can report the current time in milliseconds."""

    def now(self) -> int:
        ...


class SystemClock:
    """Wall-clock time."""

    def now(self) -> int:
        return int(time.time() * 1000)


class ManualClock:
    """
    Virtual clock that only moves when told to.

    Used by tests and by fast-forward simulations.
    """

    def __init__(self, start: int = 0):
        self._now = int(start)

    def now(self) -> int:
        return self._now

    def advance(self, ms: float) -> int:
        """Move time forward. Returns the new time."""
        if ms < 0:
            raise ValueError("ManualClock cannot move backwards")
        self._now += int(ms)
        return self._now

    def set(self, ms: int) -> None:
        self._now = int(ms)
