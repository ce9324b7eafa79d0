# ==============================================================================
# User Activity Monitor
# ==============================================================================
"""
Records page access and user actions, and watches for prolonged inactivity.

Each logging call does two independent things:
1. queues a write to the remote access log
2. emits an audit event

Neither waits for the other and a failure in one does not abort the other.
Both are skipped silently unless the user is authenticated and approved at
the time of the call.

The inactivity watch is restarted by every input signal.  When a full
window passes without input a ``suspicious_activity`` event is emitted and
the watch re-arms for another window.
"""

import logging
from collections.abc import Callable
from typing import Any

from outreach.base.repositories import AccessLogRepository
from outreach.base.scheduler import Scheduler, TimerHandle
from outreach.core.audit_emitter import AuditEventEmitter
from outreach.core.auth import AuthContext
from outreach.core.models import (
    ActivityAction,
    ActivityEvent,
    AuditEvent,
    DataAccessEvent,
    DataOperation,
    SessionInfo,
    SuspiciousActivityEvent,
    UserActionEvent,
)
from outreach.core.signals import InputSignal, SignalBus
from outreach.utils.config import ActivitySettings

logger = logging.getLogger(__name__)


class UserActivityMonitor:
    """Access logging, audit emission and inactivity watch for one client."""

    def __init__(
        self,
        auth: AuthContext,
        access_log: AccessLogRepository,
        emitter: AuditEventEmitter,
        scheduler: Scheduler,
        signals: SignalBus,
        settings: ActivitySettings | None = None,
        session_info_provider: Callable[[], SessionInfo] | None = None,
    ):
        """
        Initialize the monitor. The inactivity watch starts with start().

        Args:
            auth: Queried on every call for authentication and approval
            access_log: Remote access log collaborator
            emitter: Audit event emitter
            scheduler: Timer provider and background runner
            signals: Input signal bus
            settings: Tracking flags and inactivity window
            session_info_provider: Returns the current client context
        """
        self._auth = auth
        self._access_log = access_log
        self._emitter = emitter
        self._scheduler = scheduler
        self._signals = signals
        self._settings = settings or ActivitySettings()
        self._session_info_provider = session_info_provider or SessionInfo

        self._watch_handle: TimerHandle | None = None
        self._last_activity = scheduler.wall_time()
        self._started = False

    @property
    def watching(self) -> bool:
        """Whether the inactivity watch is armed."""
        return self._watch_handle is not None and not self._watch_handle.cancelled

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Register input listeners and arm the inactivity watch."""
        if self._started or not self._settings.track_user_actions:
            return
        for signal in InputSignal:
            self._signals.add_listener(signal, self._handle_activity)
        self._started = True
        self._last_activity = self._scheduler.wall_time()
        self._arm_watch()

    def close(self) -> None:
        """Cancel the inactivity watch and remove every listener."""
        for signal in InputSignal:
            self._signals.remove_listener(signal, self._handle_activity)
        self._cancel_watch()
        self._started = False

    def __enter__(self) -> "UserActivityMonitor":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def log_page_access(self, resource: str) -> ActivityEvent | None:
        """
        Record a page view of *resource*.

        Returns:
            The recorded event, or None if the call was skipped
        """
        if not self._settings.track_page_views:
            return None
        user_id = self._approved_user_id()
        if user_id is None:
            return None

        event = self._build_event(resource, ActivityAction.PAGE_VIEW)
        self._scheduler.submit(
            self._write_access_log, user_id, resource, ActivityAction.PAGE_VIEW.value
        )
        self._emit(DataAccessEvent(resource=resource, operation=DataOperation.READ))
        return event

    def log_user_action(
        self,
        action: str,
        resource: str,
        details: dict[str, Any] | None = None,
    ) -> ActivityEvent | None:
        """
        Record a named user action on *resource*.

        Args:
            action: Action name (e.g. "send_campaign")
            resource: Resource acted upon
            details: Extra context merged into the audit details

        Returns:
            The recorded event, or None if the call was skipped
        """
        if not self._settings.track_user_actions:
            return None
        user_id = self._approved_user_id()
        if user_id is None:
            return None

        event = self._build_event(resource, ActivityAction.USER_ACTION)
        self._scheduler.submit(self._write_access_log, user_id, resource, action)
        self._emit(
            UserActionEvent(
                resource=resource,
                action=action,
                session_info=event.session_info,
                context=details or {},
            )
        )
        return event

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _approved_user_id(self) -> str | None:
        if not (self._auth.is_authenticated and self._auth.is_approved):
            return None
        return self._auth.user_id

    def _build_event(self, resource: str, action: ActivityAction) -> ActivityEvent:
        return ActivityEvent(
            resource=resource,
            action=action,
            timestamp=self._scheduler.wall_time(),
            session_info=self._session_info_provider(),
        )

    def _write_access_log(self, user_id: str, resource: str, action: str) -> None:
        try:
            self._access_log.log_access(user_id, resource, action)
        except Exception as e:
            logger.error("Error logging %s access to %s: %s", action, resource, e)

    def _emit(self, event: AuditEvent) -> None:
        try:
            self._emitter.emit(event)
        except Exception:
            logger.exception("Error emitting %s audit event", event.event_type)

    def _handle_activity(self, signal: InputSignal) -> None:
        self._last_activity = self._scheduler.wall_time()
        self._arm_watch()

    def _cancel_watch(self) -> None:
        if self._watch_handle is not None:
            self._watch_handle.cancel()
            self._watch_handle = None

    def _arm_watch(self) -> None:
        self._cancel_watch()
        self._watch_handle = self._scheduler.call_later(
            self._settings.inactivity_timeout_minutes * 60, self._on_inactivity
        )

    def _on_inactivity(self) -> None:
        self._watch_handle = None
        if self._approved_user_id() is not None:
            logger.info(
                "No activity for %d minutes", self._settings.inactivity_timeout_minutes
            )
            self._emit(
                SuspiciousActivityEvent(
                    activity="prolonged_inactivity",
                    duration_minutes=self._settings.inactivity_timeout_minutes,
                    last_activity=self._last_activity,
                )
            )
        self._arm_watch()
