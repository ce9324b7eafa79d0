# ==============================================================================
# Session Lifecycle Controller
# ==============================================================================
"""
Binds an ActivityTimer to user input and the session timeout policy.

- Any input signal resets the countdown while the session is active;
  handling is throttled (default: once per second) so pointer-move storms
  cost one reset per interval.
- At the warning boundary the user is notified once per cycle.
- At expiry the session becomes inactive and ``on_timeout`` runs exactly
  once.  Input is then ignored until rearm() is called.
"""

import logging
from collections.abc import Callable
from typing import Any

from outreach.base.notifier import Notifier
from outreach.base.scheduler import Scheduler
from outreach.core.activity_timer import ActivityTimer, TimerState
from outreach.core.models import SessionState
from outreach.core.signals import InputSignal, SignalBus
from outreach.utils.config import SessionSettings
from outreach.utils.throttle import Throttle

logger = logging.getLogger(__name__)


class SessionLifecycleController:
    """
    Session timeout controller.

    Usage::

        controller = SessionLifecycleController(
            SessionSettings(timeout_minutes=30, warning_minutes=5),
            scheduler,
            signals,
            on_timeout=auth.sign_out,
        )
        controller.start()
        ...
        controller.close()
    """

    def __init__(
        self,
        settings: SessionSettings,
        scheduler: Scheduler,
        signals: SignalBus,
        on_timeout: Callable[[], Any] | None = None,
        notifier: Notifier | None = None,
    ):
        """
        Initialize the controller. Nothing is armed until start().

        Args:
            settings: Validated timeout/warning configuration
            scheduler: Timer provider
            signals: Input signal bus to listen on
            on_timeout: Called once when the session expires
            notifier: Receives the warning and extension messages
        """
        self._settings = settings
        self._signals = signals
        self._on_timeout = on_timeout
        self._notifier = notifier
        self._active = False
        self._started = False

        self._timer = ActivityTimer(
            scheduler,
            on_warning=self._handle_warning,
            on_timeout=self._handle_timeout,
        )
        self._activity_handler = Throttle(
            self._handle_activity,
            settings.activity_throttle_seconds,
            clock=scheduler.now,
        )

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def is_active(self) -> bool:
        return self._active

    @property
    def timer(self) -> ActivityTimer:
        return self._timer

    @property
    def state(self) -> SessionState:
        """Snapshot of remaining time, warning flag and activity flag."""
        return SessionState(
            remaining_seconds=self._timer.remaining_seconds,
            warning_active=self._timer.warning_active,
            active=self._active,
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Register input listeners and start the first countdown."""
        if self._started:
            return
        self._timer.start(self._settings.timeout_seconds, self._settings.warning_seconds)
        for signal in InputSignal:
            self._signals.add_listener(signal, self._activity_handler)
        self._started = True
        self._active = True
        logger.info(
            "Session started (timeout=%dm, warning=%dm)",
            self._settings.timeout_minutes,
            self._settings.warning_minutes,
        )

    def close(self) -> None:
        """Remove every listener and stop the timer."""
        for signal in InputSignal:
            self._signals.remove_listener(signal, self._activity_handler)
        if self._timer.state != TimerState.STOPPED:
            self._timer.stop()
        self._active = False
        self._started = False

    def __enter__(self) -> "SessionLifecycleController":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def reset_timer(self) -> bool:
        """
        Restart the countdown if the session is still active.

        Returns:
            True if the countdown was restarted
        """
        if not self._active:
            return False
        self._timer.reset()
        return True

    def extend_session(self) -> bool:
        """
        Explicitly extend an active session and confirm it to the user.

        Returns:
            True if the session was extended, False if it had already expired
        """
        if not self.reset_timer():
            logger.info("Ignoring session extension: session is no longer active")
            return False
        self._notify("Session Extended", "Your session has been extended")
        return True

    def rearm(self) -> None:
        """Re-activate the controller after a timeout (e.g. after re-login)."""
        if not self._started:
            self.start()
            return
        self._active = True
        self._timer.reset()
        logger.info("Session re-armed")

    def subscribe(self, listener: Callable[[int], Any]) -> Callable[[], None]:
        """Observe remaining seconds; see ActivityTimer.subscribe()."""
        return self._timer.subscribe(listener)

    # ------------------------------------------------------------------
    # Timer and input callbacks
    # ------------------------------------------------------------------

    def _handle_activity(self, signal: InputSignal) -> None:
        if self._active:
            self._timer.reset()

    def _handle_warning(self) -> None:
        logger.info(
            "Session will expire in %d minutes due to inactivity",
            self._settings.warning_minutes,
        )
        self._notify(
            "Session Warning",
            f"Your session will expire in {self._settings.warning_minutes} minutes "
            "due to inactivity",
        )

    def _handle_timeout(self) -> None:
        self._active = False
        logger.info("Session timed out after %d minutes", self._settings.timeout_minutes)
        if self._on_timeout is None:
            return
        try:
            self._on_timeout()
        except Exception:
            logger.exception("Session timeout callback failed")

    def _notify(self, title: str, message: str) -> None:
        if self._notifier is None:
            return
        try:
            self._notifier.notify(title, message)
        except Exception:
            logger.exception("Failed to show notification %r", title)
