# ==============================================================================
# Activity Timer - Countdown State Machine
# ==============================================================================
"""
Countdown timer with a warning boundary and an expiry boundary.

States::

    IDLE --start()--> RUNNING --(remaining == lead)--> WARNING --(remaining == 0)--> EXPIRED
                         ^                                                             |
                         +------------------------- reset() --------------------------+

    stop() moves any state to STOPPED, which is terminal.

The timer ticks once per second on an injected Scheduler.  Every call to
start()/reset() opens a new cycle; ticks belonging to an earlier cycle are
ignored, so a reset never lets the previous cycle's warning or timeout fire.
"""

import logging
from collections.abc import Callable
from enum import Enum
from typing import Any

from outreach.base.scheduler import Scheduler, TimerHandle
from outreach.core.errors import ConfigurationError, TimerStoppedError

logger = logging.getLogger(__name__)

TICK_SECONDS = 1

RemainingListener = Callable[[int], Any]


class TimerState(str, Enum):
    """Lifecycle states of an ActivityTimer."""

    IDLE = "idle"
    RUNNING = "running"
    WARNING = "warning"
    EXPIRED = "expired"
    STOPPED = "stopped"


def validate_timer_window(timeout_seconds: int, warning_lead_seconds: int) -> None:
    """
    Reject timer windows that cannot produce a warning before expiry.

    A warning lead of 0 is allowed and disables the warning.

    Raises:
        ConfigurationError: If the timeout is not positive, the lead is
            negative, or the lead is not shorter than the timeout
    """
    if timeout_seconds <= 0:
        raise ConfigurationError(f"timeout_seconds must be positive, got {timeout_seconds}")
    if warning_lead_seconds < 0:
        raise ConfigurationError(
            f"warning_lead_seconds must not be negative, got {warning_lead_seconds}"
        )
    if warning_lead_seconds >= timeout_seconds:
        raise ConfigurationError(
            f"warning_lead_seconds ({warning_lead_seconds}) must be less than "
            f"timeout_seconds ({timeout_seconds})"
        )


class ActivityTimer:
    """
    Countdown with warning and timeout callbacks.

    Callbacks run on the scheduler after the state transition has been
    applied, so a callback that raises leaves the timer in its new state.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        on_warning: Callable[[], Any] | None = None,
        on_timeout: Callable[[], Any] | None = None,
    ):
        """
        Initialize an idle timer.

        Args:
            scheduler: Timer provider
            on_warning: Called once per cycle when the warning boundary is reached
            on_timeout: Called once per cycle when the countdown reaches zero
        """
        self._scheduler = scheduler
        self._on_warning = on_warning
        self._on_timeout = on_timeout

        self._state = TimerState.IDLE
        self._timeout_seconds = 0
        self._warning_lead_seconds = 0
        self._remaining = 0
        self._cycle = 0
        self._tick_handle: TimerHandle | None = None
        self._listeners: list[RemainingListener] = []

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def state(self) -> TimerState:
        return self._state

    @property
    def remaining_seconds(self) -> int:
        return self._remaining

    @property
    def warning_active(self) -> bool:
        return self._state == TimerState.WARNING

    @property
    def timeout_seconds(self) -> int:
        return self._timeout_seconds

    @property
    def warning_lead_seconds(self) -> int:
        return self._warning_lead_seconds

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def start(self, timeout_seconds: int, warning_lead_seconds: int = 0) -> None:
        """
        Begin a countdown from *timeout_seconds*.

        Args:
            timeout_seconds: Length of the countdown
            warning_lead_seconds: Seconds before expiry at which the warning
                fires (0 disables the warning)

        Raises:
            ConfigurationError: If the window is invalid
            TimerStoppedError: If the timer has been stopped
        """
        self._ensure_not_stopped()
        validate_timer_window(timeout_seconds, warning_lead_seconds)
        self._timeout_seconds = timeout_seconds
        self._warning_lead_seconds = warning_lead_seconds
        self._begin_cycle()

    def reset(self) -> None:
        """
        Restart the countdown from the full timeout, from any state.

        Pending warning/timeout callbacks of the previous cycle are discarded.

        Raises:
            RuntimeError: If start() has not been called
            TimerStoppedError: If the timer has been stopped
        """
        self._ensure_not_stopped()
        if self._state == TimerState.IDLE:
            raise RuntimeError("Timer has not been started. Call start() first.")
        self._begin_cycle()

    def stop(self) -> None:
        """Halt the countdown and discard all listeners. Terminal."""
        self._cancel_tick()
        self._cycle += 1
        self._state = TimerState.STOPPED
        self._listeners.clear()

    def subscribe(self, listener: RemainingListener) -> Callable[[], None]:
        """
        Observe the remaining time.

        *listener* is called with the remaining seconds whenever the value
        changes (every tick and on every reset).

        Returns:
            Callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _ensure_not_stopped(self) -> None:
        if self._state == TimerState.STOPPED:
            raise TimerStoppedError("Timer has been stopped")

    def _cancel_tick(self) -> None:
        if self._tick_handle is not None:
            self._tick_handle.cancel()
            self._tick_handle = None

    def _begin_cycle(self) -> None:
        self._cancel_tick()
        self._cycle += 1
        self._remaining = self._timeout_seconds
        self._state = TimerState.RUNNING
        cycle = self._cycle
        self._publish()
        if cycle == self._cycle:
            self._schedule_tick(cycle)

    def _schedule_tick(self, cycle: int) -> None:
        self._tick_handle = self._scheduler.call_later(TICK_SECONDS, lambda: self._tick(cycle))

    def _tick(self, cycle: int) -> None:
        if cycle != self._cycle or self._state not in (TimerState.RUNNING, TimerState.WARNING):
            return

        self._tick_handle = None
        self._remaining = max(self._remaining - TICK_SECONDS, 0)
        self._publish()
        if cycle != self._cycle:
            return

        if self._remaining == 0:
            self._state = TimerState.EXPIRED
            logger.debug("Timer expired after %d seconds", self._timeout_seconds)
            if self._on_timeout is not None:
                self._on_timeout()
            return

        self._schedule_tick(cycle)

        if (
            self._state == TimerState.RUNNING
            and self._warning_lead_seconds > 0
            and self._remaining <= self._warning_lead_seconds
        ):
            self._state = TimerState.WARNING
            logger.debug("Timer warning with %d seconds remaining", self._remaining)
            if self._on_warning is not None:
                self._on_warning()

    def _publish(self) -> None:
        for listener in list(self._listeners):
            listener(self._remaining)
