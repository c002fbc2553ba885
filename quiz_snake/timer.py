"""
Fixed-period tick scheduling.
"""

import time
from typing import Callable, Optional


class TickTimer:
    """
    Polled fixed-period timer.

    The owner calls due() from its own loop (e.g. once per rendered
    frame) and runs at most one tick per call. cancel() may be called
    any number of times.
    """

    def __init__(self, period_ms: int = 150,
                 clock: Callable[[], float] = time.monotonic):
        if period_ms <= 0:
            raise ValueError(f"period_ms must be positive, got {period_ms}")
        self.period = period_ms / 1000.0
        self.clock = clock
        self._next_at: Optional[float] = None

    @property
    def active(self) -> bool:
        return self._next_at is not None

    def start(self) -> None:
        """(Re)starts the schedule; the first tick is one period from now."""
        self._next_at = self.clock() + self.period

    def due(self, now: Optional[float] = None) -> int:
        """
        1 if a tick is due, else 0. Missed periods are dropped: after a
        stall the schedule restarts one period from now.
        """
        if self._next_at is None:
            return 0

        now = self.clock() if now is None else now
        if now < self._next_at:
            return 0

        self._next_at += self.period
        if self._next_at <= now:
            self._next_at = now + self.period
        return 1

    def cancel(self) -> bool:
        """Returns True only for the call that actually stopped the timer."""
        if self._next_at is None:
            return False
        self._next_at = None
        return True
