"""Injectable time source for TTL and rate-window bookkeeping."""

from __future__ import annotations

import time
from typing import Protocol


class Clock(Protocol):
    """Anything that can report the current time in seconds."""

    def now(self) -> float:
        """Return the current time in seconds."""


class MonotonicClock:
    """Clock backed by ``time.monotonic``.

    Monotonic time is immune to wall-clock adjustments, which matters for
    expiry arithmetic but means the values are only meaningful relative to
    each other.
    """

    def now(self) -> float:
        return time.monotonic()


__all__ = ["Clock", "MonotonicClock"]
