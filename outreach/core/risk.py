# ==============================================================================
# Audit Risk Classification
# ==============================================================================
"""
Risk tables mapping audit events to severities.

Pure functions with no external dependencies.  Thresholds come from
AuditSettings so deployments can tighten them; the defaults are:

- data access: read -> low, write -> medium, delete -> high;
  a failed access is at least medium
- bulk operation: more than 100 records -> high, otherwise medium
- data export: more than 1000 records -> critical, more than 100 -> high,
  otherwise medium
- configuration changes, admin access and role changes -> high
"""

from collections.abc import Callable

from outreach.core.models import (
    AdminAccessEvent,
    AuditEvent,
    AuthAttemptEvent,
    BulkOperationEvent,
    CampaignLaunchEvent,
    ConfigurationChangeEvent,
    DataAccessEvent,
    DataExportEvent,
    DataOperation,
    RoleChangeEvent,
    Severity,
    SuspiciousActivityEvent,
    UserActionEvent,
)
from outreach.utils.config import AuditSettings

OPERATION_RISK: dict[DataOperation, Severity] = {
    DataOperation.READ: Severity.LOW,
    DataOperation.WRITE: Severity.MEDIUM,
    DataOperation.DELETE: Severity.HIGH,
}

# Suspicious activities with a fixed, lower-than-default severity
SUSPICIOUS_ACTIVITY_RISK: dict[str, Severity] = {
    "prolonged_inactivity": Severity.MEDIUM,
}


def _data_access_risk(event: DataAccessEvent, settings: AuditSettings) -> Severity:
    severity = OPERATION_RISK[event.operation]
    if not event.success:
        severity = severity.at_least(Severity.MEDIUM)
    return severity


def _bulk_operation_risk(event: BulkOperationEvent, settings: AuditSettings) -> Severity:
    if event.affected_records > settings.bulk_high_threshold:
        return Severity.HIGH
    return Severity.MEDIUM


def _data_export_risk(event: DataExportEvent, settings: AuditSettings) -> Severity:
    if event.record_count > settings.export_critical_threshold:
        return Severity.CRITICAL
    if event.record_count > settings.export_high_threshold:
        return Severity.HIGH
    return Severity.MEDIUM


def _auth_attempt_risk(event: AuthAttemptEvent, settings: AuditSettings) -> Severity:
    return Severity.LOW if event.success else Severity.MEDIUM


def _suspicious_activity_risk(event: SuspiciousActivityEvent, settings: AuditSettings) -> Severity:
    return SUSPICIOUS_ACTIVITY_RISK.get(event.activity, Severity.HIGH)


def _fixed(severity: Severity) -> Callable[[AuditEvent, AuditSettings], Severity]:
    return lambda event, settings: severity


_RISK_RULES: dict[type, Callable] = {
    DataAccessEvent: _data_access_risk,
    BulkOperationEvent: _bulk_operation_risk,
    DataExportEvent: _data_export_risk,
    AuthAttemptEvent: _auth_attempt_risk,
    SuspiciousActivityEvent: _suspicious_activity_risk,
    ConfigurationChangeEvent: _fixed(Severity.HIGH),
    AdminAccessEvent: _fixed(Severity.HIGH),
    RoleChangeEvent: _fixed(Severity.HIGH),
    UserActionEvent: _fixed(Severity.LOW),
    CampaignLaunchEvent: _fixed(Severity.MEDIUM),
}


def classify_risk(event: AuditEvent, settings: AuditSettings | None = None) -> Severity:
    """
    Classify an audit event against the risk tables.

    Args:
        event: Any audit event variant
        settings: Threshold overrides. If None, defaults are used.

    Returns:
        Severity for the event

    Raises:
        TypeError: If *event* is not a known audit event variant
    """
    rule = _RISK_RULES.get(type(event))
    if rule is None:
        raise TypeError(f"Unknown audit event type: {type(event).__name__}")
    return rule(event, settings or AuditSettings())
