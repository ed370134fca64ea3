"""Rolling one-minute request counter.

This module provides a thread-safe observational counter of outbound
requests to the Torn API. It never delays or rejects a request.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass

from tornsentinel.services.clock import Clock, MonotonicClock
from tornsentinel.shared.constants import RateWindowConfig

logger = logging.getLogger(__name__)


@dataclass
class RateWindow:
    """Start of the current window and the requests recorded in it."""

    window_started_at: float
    count: int = 0


class RateTracker:
    """Thread-safe rolling-minute request counter.

    A window opens with the first request recorded into it and is expired
    once strictly more than ``window_seconds`` have passed since then. An
    empty or expired window is replaced by the next recorded request.

    Args:
        clock: Time source (default: monotonic clock)
        window_seconds: Window length in seconds (default: 60)
    """

    def __init__(
        self,
        clock: Clock | None = None,
        window_seconds: float = RateWindowConfig.WINDOW_SECONDS,
    ) -> None:
        self._clock = clock or MonotonicClock()
        self.window_seconds = window_seconds
        self._window = RateWindow(window_started_at=self._clock.now(), count=0)
        self._lock = threading.Lock()

    def _is_expired(self, now: float) -> bool:
        return now - self._window.window_started_at > self.window_seconds

    def record_request(self) -> int:
        """Record one outbound request.

        Returns:
            The count for the current window after recording
        """
        with self._lock:
            now = self._clock.now()
            if self._window.count == 0 or self._is_expired(now):
                self._window = RateWindow(window_started_at=now, count=1)
            else:
                self._window.count += 1
            count = self._window.count

        logger.debug("Recorded API request (%d in current window)", count)
        return count

    def current_count(self) -> int:
        """Return the number of requests in the current window.

        An elapsed window is emptied on read and reported as 0. Reads never
        move the window start.
        """
        with self._lock:
            if self._is_expired(self._clock.now()):
                self._window.count = 0
            return self._window.count


__all__ = ["RateTracker", "RateWindow"]
