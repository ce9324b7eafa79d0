# ==============================================================================
# Audit Event Emitter
# ==============================================================================
"""
Classifies audit events, normalizes them and forwards them to the remote
security logger.

Delivery is fire-and-forget and at-most-once:
- emit() returns as soon as the record is built and queued on the scheduler
- a failed delivery is logged locally and never raised to the caller
- nothing is retried; undelivered high/critical records are kept in an
  optional FailedEventStore for inspection
"""

import json
import logging
from collections.abc import Callable
from typing import Any
from uuid import uuid4

from outreach.base.failed_events import FailedEventStore
from outreach.base.scheduler import Scheduler
from outreach.base.sinks import SecurityLogSink
from outreach.core.models import (
    AdminAccessEvent,
    AuditEvent,
    AuthAttemptEvent,
    BulkOperationEvent,
    ConfigurationChangeEvent,
    DataAccessEvent,
    DataExportEvent,
    DataOperation,
    SecurityLogRecord,
    Severity,
    SuspiciousActivityEvent,
)
from outreach.core.risk import classify_risk
from outreach.utils.config import AuditSettings

logger = logging.getLogger(__name__)


class AuditEventEmitter:
    """
    Emits classified audit events to a SecurityLogSink.

    Every emitter instance represents one client session; its records share
    a session_id.
    """

    def __init__(
        self,
        sink: SecurityLogSink,
        scheduler: Scheduler,
        settings: AuditSettings | None = None,
        failed_events: FailedEventStore | None = None,
        session_id: str | None = None,
        user_id_provider: Callable[[], str | None] | None = None,
    ):
        """
        Initialize the emitter.

        Args:
            sink: Remote security logging collaborator
            scheduler: Runs deliveries in the background
            settings: Risk thresholds. If None, defaults are used.
            failed_events: Keeps undelivered high/critical records
            session_id: Client session identifier (default: random UUID)
            user_id_provider: Returns the signed-in user id at emit time
        """
        self._sink = sink
        self._scheduler = scheduler
        self._settings = settings or AuditSettings()
        self._failed_events = failed_events
        self._session_id = session_id or str(uuid4())
        self._user_id_provider = user_id_provider

    @property
    def session_id(self) -> str:
        return self._session_id

    # ------------------------------------------------------------------
    # Core API
    # ------------------------------------------------------------------

    def emit(self, event: AuditEvent, severity: Severity | None = None) -> SecurityLogRecord | None:
        """
        Classify *event* and queue it for delivery.

        A record that cannot be built or serialized is logged locally and
        dropped; the error is not raised to the caller.

        Args:
            event: Audit event variant
            severity: Optional escalation; it can raise the classified
                severity but never lower it

        Returns:
            The normalized record that was queued, or None if it was dropped
        """
        try:
            classified = classify_risk(event, self._settings)
            if severity is not None:
                classified = classified.at_least(severity)

            record = SecurityLogRecord(
                timestamp=self._scheduler.wall_time(),
                event_type=event.event_type,
                severity=classified,
                details=event.detail_fields(),
                session_id=self._session_id,
                user_id=self._user_id_provider() if self._user_id_provider else None,
            )

            self._log_locally(record)
        except Exception:
            logger.exception("Failed to build security event %s", event.event_type)
            return None

        self._scheduler.submit(self._deliver, record)
        return record

    # ------------------------------------------------------------------
    # Helpers for common audit events
    # ------------------------------------------------------------------

    def log_data_access(
        self,
        resource: str,
        operation: DataOperation | str = DataOperation.READ,
        success: bool = True,
        record_count: int | None = None,
    ) -> SecurityLogRecord | None:
        return self.emit(
            DataAccessEvent(
                resource=resource,
                operation=DataOperation(operation),
                success=success,
                record_count=record_count,
            )
        )

    def log_bulk_operation(
        self, resource: str, operation: str, affected_records: int
    ) -> SecurityLogRecord | None:
        return self.emit(
            BulkOperationEvent(
                resource=resource, operation=operation, affected_records=affected_records
            )
        )

    def log_data_export(
        self, resource: str, export_format: str, record_count: int
    ) -> SecurityLogRecord | None:
        return self.emit(
            DataExportEvent(resource=resource, export_format=export_format, record_count=record_count)
        )

    def log_configuration_change(
        self, setting_name: str, old_value: Any, new_value: Any
    ) -> SecurityLogRecord | None:
        return self.emit(
            ConfigurationChangeEvent(
                setting_name=setting_name, old_value=old_value, new_value=new_value
            )
        )

    def log_admin_access(
        self, resource: str, action: str, target_user_id: str | None = None
    ) -> SecurityLogRecord | None:
        return self.emit(
            AdminAccessEvent(resource=resource, action=action, target_user_id=target_user_id)
        )

    def log_auth_attempt(
        self, success: bool, email: str | None = None, error: str | None = None
    ) -> SecurityLogRecord | None:
        return self.emit(AuthAttemptEvent(success=success, email=email, error=error))

    def log_suspicious_activity(
        self, activity: str, context: dict[str, Any] | None = None
    ) -> SecurityLogRecord | None:
        return self.emit(SuspiciousActivityEvent(activity=activity, context=context or {}))

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _log_locally(self, record: SecurityLogRecord) -> None:
        payload = json.dumps(record.to_payload())
        logger.info("SECURITY_EVENT: %s", payload)
        if record.severity == Severity.CRITICAL:
            logger.error("CRITICAL AUDIT EVENT: %s", payload)
        elif record.severity == Severity.HIGH:
            logger.warning("HIGH_PRIORITY_SECURITY_ALERT: %s", payload)

    def _deliver(self, record: SecurityLogRecord) -> None:
        try:
            self._sink.send(record)
        except Exception as e:
            logger.error(
                "Failed to log security event %s (%s): %s",
                record.event_id,
                record.event_type,
                e,
            )
            if record.severity.rank >= Severity.HIGH.rank:
                self._keep_failed(record)

    def _keep_failed(self, record: SecurityLogRecord) -> None:
        if self._failed_events is None:
            return
        try:
            self._failed_events.push(record.to_payload())
        except Exception as e:
            logger.error("Failed to store undelivered security event %s: %s", record.event_id, e)
