# ==============================================================================
# Scheduler Abstract Base Class
# ==============================================================================
"""
Abstract interface for timers and background work.

Every timer in the session and activity components goes through a
Scheduler instead of ambient wall-clock timers, so that the same code runs
on an asyncio event loop in production and on a virtual clock in tests.

Implementations: AsyncioScheduler (infrastructure), VirtualScheduler (core)
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any


class TimerHandle(ABC):
    """Handle returned by Scheduler.call_later()."""

    @abstractmethod
    def cancel(self) -> None:
        """Cancel the timer. Cancelling twice is a no-op."""
        ...

    @property
    @abstractmethod
    def cancelled(self) -> bool:
        """Whether cancel() has been called."""
        ...


class Scheduler(ABC):
    """
    Single-threaded timer and background-work provider.

    Callbacks registered with call_later() fire in deadline order, ties in
    registration order.  Work passed to submit() is fire-and-forget: the
    caller never waits for it and its failures never reach the caller.
    """

    @abstractmethod
    def now(self) -> float:
        """Monotonic time in seconds."""
        ...

    @abstractmethod
    def call_later(self, delay: float, callback: Callable[[], Any]) -> TimerHandle:
        """
        Run *callback* after *delay* seconds.

        Args:
            delay: Seconds from now (negative values are treated as 0)
            callback: Zero-argument callable

        Returns:
            Handle that can cancel the pending call
        """
        ...

    @abstractmethod
    def submit(self, fn: Callable[..., Any], *args: Any) -> None:
        """
        Run *fn(*args)* in the background without blocking the caller.

        Exceptions raised by *fn* are logged by the scheduler.
        """
        ...

    def wall_time(self) -> datetime:
        """Current wall-clock time (UTC)."""
        return datetime.now(UTC)
