# ==============================================================================
# Virtual Clock Scheduler
# ==============================================================================
"""
Deterministic Scheduler driven by explicit time advancement.

Nothing happens until advance() or run_pending() is called.  Used by the
test-suite and by the ``outreach session simulate`` command to replay a
session timeline without waiting in real time.
"""

import heapq
import itertools
import logging
from collections import deque
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from functools import partial
from typing import Any

from outreach.base.scheduler import Scheduler, TimerHandle

logger = logging.getLogger(__name__)


class VirtualTimerHandle(TimerHandle):
    """Timer handle for VirtualScheduler."""

    def __init__(self, when: float, callback: Callable[[], Any]):
        self.when = when
        self._callback = callback
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def _run(self) -> None:
        self._callback()


class VirtualScheduler(Scheduler):
    """
    Scheduler with a manually advanced clock.

    Timers fire in deadline order (ties in registration order) while time is
    advanced.  Background work queued with submit() runs whenever the clock
    is advanced or run_pending() is called.
    """

    def __init__(self, start: float = 0.0, wall_start: datetime | None = None):
        """
        Initialize the virtual clock.

        Args:
            start: Initial monotonic time in seconds
            wall_start: Wall-clock time corresponding to *start*
                (default: 2024-01-01T00:00:00Z)
        """
        self._start = start
        self._now = start
        self._wall_start = wall_start or datetime(2024, 1, 1, tzinfo=UTC)
        self._timers: list[tuple[float, int, VirtualTimerHandle]] = []
        self._sequence = itertools.count()
        self._background: deque[Callable[[], Any]] = deque()

    # ------------------------------------------------------------------
    # Scheduler interface
    # ------------------------------------------------------------------

    def now(self) -> float:
        return self._now

    def wall_time(self) -> datetime:
        return self._wall_start + timedelta(seconds=self._now - self._start)

    def call_later(self, delay: float, callback: Callable[[], Any]) -> VirtualTimerHandle:
        handle = VirtualTimerHandle(self._now + max(delay, 0.0), callback)
        heapq.heappush(self._timers, (handle.when, next(self._sequence), handle))
        return handle

    def submit(self, fn: Callable[..., Any], *args: Any) -> None:
        self._background.append(partial(fn, *args))

    # ------------------------------------------------------------------
    # Clock control
    # ------------------------------------------------------------------

    @property
    def elapsed(self) -> float:
        """Seconds advanced since construction."""
        return self._now - self._start

    @property
    def pending_timers(self) -> int:
        """Number of timers that are scheduled and not cancelled."""
        return sum(1 for _, _, handle in self._timers if not handle.cancelled)

    @property
    def pending_work(self) -> int:
        """Number of queued background calls."""
        return len(self._background)

    def run_pending(self) -> int:
        """
        Run queued background work, including work queued while running.

        Failures are logged, matching the asyncio adapter.

        Returns:
            Number of background calls executed
        """
        count = 0
        while self._background:
            work = self._background.popleft()
            count += 1
            try:
                work()
            except Exception:
                logger.exception("Background call failed")
        return count

    def advance(self, seconds: float) -> None:
        """
        Move the clock forward, firing every timer due on the way.

        Args:
            seconds: Non-negative amount of time to advance
        """
        if seconds < 0:
            raise ValueError(f"Cannot advance by a negative amount: {seconds}")

        target = self._now + seconds
        self.run_pending()
        while self._timers and self._timers[0][0] <= target:
            when, _, handle = heapq.heappop(self._timers)
            if handle.cancelled:
                continue
            self._now = when
            handle._run()
            self.run_pending()
        self._now = target

    def advance_to(self, elapsed: float) -> None:
        """Advance until *elapsed* seconds have passed since construction."""
        self.advance(max(elapsed - self.elapsed, 0.0))
