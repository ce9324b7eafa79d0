# ==============================================================================
# Activity Runtime - Composition Root
# ==============================================================================
"""
Wires the session and audit components for one client session.

    settings ─┬─> SessionLifecycleController ──(on_timeout)──> AuthContext.sign_out
              ├─> UserActivityMonitor ──> AccessLogRepository
              │                      └──> AuditEventEmitter ──> SecurityLogSink
              └─> SlidingWindowRateLimiter

The session timer and the inactivity watch are independent: each runs its
own timer on the shared scheduler and both listen to the same signal bus.

Usage:
    scheduler = AsyncioScheduler()
    with ActivityRuntime(scheduler) as runtime:
        runtime.auth.sign_in(user)
        runtime.signals.dispatch(InputSignal.KEY_PRESS)
        runtime.monitor.log_page_access("/campaigns")
"""

import logging
from collections.abc import Callable
from typing import Any

from outreach.base.failed_events import FailedEventStore
from outreach.base.notifier import Notifier
from outreach.base.repositories import AccessLogRepository
from outreach.base.scheduler import Scheduler
from outreach.base.sinks import SecurityLogSink
from outreach.core.activity_monitor import UserActivityMonitor
from outreach.core.audit_emitter import AuditEventEmitter
from outreach.core.auth import AuthContext
from outreach.core.models import ActivityEvent, SessionInfo
from outreach.core.session_controller import SessionLifecycleController
from outreach.core.signals import SignalBus
from outreach.utils.config import Settings, get_settings
from outreach.utils.rate_limiter import SlidingWindowRateLimiter

logger = logging.getLogger(__name__)


# ==============================================================================
# Factories
# ==============================================================================


def build_security_log_sink(settings: Settings) -> SecurityLogSink:
    """Remote sink when SECURITY_LOGGER_URL is set, local log sink otherwise."""
    from outreach.infrastructure.security_logger import (
        HttpSecurityLogSink,
        LoggingSecurityLogSink,
    )

    if settings.security_logger.is_configured:
        return HttpSecurityLogSink(settings.security_logger)
    logger.info("SECURITY_LOGGER_URL not set, security events are logged locally")
    return LoggingSecurityLogSink()


def build_failed_event_store(settings: Settings) -> FailedEventStore:
    """Failed event store selected by AUDIT_FAILED_EVENT_STORE."""
    from outreach.infrastructure.failed_events import (
        InMemoryFailedEventStore,
        ValkeyFailedEventStore,
    )

    limit = settings.audit.failed_event_limit
    if settings.audit.failed_event_store == "valkey":
        return ValkeyFailedEventStore(max_entries=limit)
    return InMemoryFailedEventStore(max_entries=limit)


def build_access_log(settings: Settings) -> AccessLogRepository:
    from outreach.infrastructure.repositories import PostgreSQLAccessLogRepository

    return PostgreSQLAccessLogRepository(settings)


# ==============================================================================
# Runtime
# ==============================================================================


class ActivityRuntime:
    """Owns every session/audit component of one client and their lifecycle."""

    def __init__(
        self,
        scheduler: Scheduler,
        settings: Settings | None = None,
        sink: SecurityLogSink | None = None,
        access_log: AccessLogRepository | None = None,
        failed_events: FailedEventStore | None = None,
        notifier: Notifier | None = None,
        session_info_provider: Callable[[], SessionInfo] | None = None,
    ):
        """
        Build the component graph. Nothing is armed until start().

        Collaborators left as None are built from *settings*.
        """
        self.settings = settings or get_settings()
        self.scheduler = scheduler
        self.signals = SignalBus()

        if notifier is None:
            from outreach.infrastructure.notifier import LoggingNotifier

            notifier = LoggingNotifier()

        self.sink = sink or build_security_log_sink(self.settings)
        self.access_log = access_log or build_access_log(self.settings)
        self.failed_events = failed_events or build_failed_event_store(self.settings)

        self.emitter = AuditEventEmitter(
            self.sink,
            scheduler,
            settings=self.settings.audit,
            failed_events=self.failed_events,
            user_id_provider=lambda: self.auth.user_id,
        )
        self.auth = AuthContext(audit=self.emitter)
        self.session = SessionLifecycleController(
            self.settings.session,
            scheduler,
            self.signals,
            on_timeout=self.auth.sign_out,
            notifier=notifier,
        )
        self.monitor = UserActivityMonitor(
            self.auth,
            self.access_log,
            self.emitter,
            scheduler,
            self.signals,
            settings=self.settings.activity,
            session_info_provider=session_info_provider,
        )
        self.rate_limiter = SlidingWindowRateLimiter(
            max_actions=self.settings.rate_limit.max_actions,
            window_seconds=self.settings.rate_limit.window_seconds,
            clock=scheduler.now,
        )
        self._started = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """
        Arm the session timer and inactivity watch, then connect the access log.

        An access log that cannot connect is logged and left disconnected;
        its writes then fail individually and are logged by the monitor.
        """
        if self._started:
            return
        self.session.start()
        self.monitor.start()
        self._started = True
        try:
            self.access_log.connect()
        except Exception:
            logger.exception("Access log connection failed, access entries will not be recorded")
        logger.info("Activity runtime started (session_id=%s)", self.emitter.session_id)

    def close(self) -> None:
        """Clear every timer and listener and release collaborators."""
        self.monitor.close()
        self.session.close()
        if self._started:
            self.access_log.close()
        self.sink.close()
        self._started = False
        logger.info("Activity runtime closed")

    def __enter__(self) -> "ActivityRuntime":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Rate-limited actions
    # ------------------------------------------------------------------

    def perform_action(
        self,
        action: str,
        resource: str,
        details: dict[str, Any] | None = None,
    ) -> ActivityEvent | None:
        """
        Record a user action if its rate limit allows it.

        The limiter is keyed by action name.

        Returns:
            The recorded event, or None if rate limited or not recorded
        """
        if not self.rate_limiter.check_limit(action):
            logger.warning("Rate limit exceeded for action %s", action)
            return None
        return self.monitor.log_user_action(action, resource, details)
