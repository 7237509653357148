"""
Clock - time source and phase derivation for auctions.

The auction never reads the wall clock directly. It asks an injected Clock
for the current time (integer seconds) and derives its temporal phase from
that:

    BIDDING  while now <  end_time
    CLOSED   once  now >= end_time

Clocks are monotonic, so a CLOSED auction never reopens. ManualClock is the
deterministic source used by tests and the demo to fast-forward past a
deadline.
"""

import threading
import time
from enum import IntEnum
from typing import Optional, Protocol

from lossless.utils.logger import get_logger

logger = get_logger("clock")


class Phase(IntEnum):
    """Temporal phase of an auction."""
    BIDDING = 0    # Before end_time
    CLOSED = 1     # At or after end_time


class Clock(Protocol):
    """Source of the current time in whole seconds."""

    def now(self) -> int:
        ...


class SystemClock:
    """
    Wall-clock time, clamped so it never moves backwards.

    A system clock adjustment could otherwise reopen a closed auction.
    """

    def __init__(self):
        self._last = 0
        self._lock = threading.Lock()

    def now(self) -> int:
        with self._lock:
            current = int(time.time())
            if current < self._last:
                logger.warning(f"System time went backwards ({current} < {self._last}), holding")
                return self._last
            self._last = current
            return current


class ManualClock:
    """
    Deterministic clock advanced explicitly by the caller.

    Equivalent of evm_increaseTime + evm_mine on a development chain.
    """

    def __init__(self, start: Optional[int] = None):
        self._now = int(time.time()) if start is None else start
        if self._now < 0:
            raise ValueError(f"Clock cannot start before 0, got {self._now}")

    def now(self) -> int:
        return self._now

    def advance(self, seconds: int) -> int:
        """Move time forward by `seconds`; returns the new time."""
        if seconds < 0:
            raise ValueError(f"Cannot move clock backwards by {-seconds}s")
        self._now += seconds
        logger.debug(f"Clock advanced by {seconds}s to {self._now}")
        return self._now

    def set(self, timestamp: int) -> int:
        """Jump to an absolute timestamp, never earlier than now."""
        if timestamp < self._now:
            raise ValueError(f"Cannot move clock backwards ({timestamp} < {self._now})")
        self._now = timestamp
        return self._now


# =============================================================================
# Phase Helpers
# =============================================================================


def is_before_end(now: int, end_time: int) -> bool:
    return now < end_time


def is_after_end(now: int, end_time: int) -> bool:
    return now >= end_time


def phase_at(now: int, end_time: int) -> Phase:
    """Temporal phase of an auction ending at `end_time`."""
    return Phase.BIDDING if is_before_end(now, end_time) else Phase.CLOSED


def time_remaining(now: int, end_time: int) -> int:
    """Seconds until end_time, floored at zero."""
    return max(0, end_time - now)
