# ==============================================================================
# Session and Audit Domain Models
# ==============================================================================
"""
Pydantic models for session state, activity events and audit events.

Audit events form a closed set of variants tagged by ``event_type``; each
variant declares its own detail fields instead of carrying a free-form
payload.  ``parse_audit_event()`` validates a plain dict into the matching
variant.

This module is part of the core domain layer and has no external dependencies
beyond Pydantic.
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Literal, Union
from uuid import uuid4

from pydantic import BaseModel, Field, TypeAdapter

# ==============================================================================
# Enums
# ==============================================================================


class Severity(str, Enum):
    """Audit severity, ordered from least to most severe."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    def at_least(self, other: "Severity") -> "Severity":
        """Return the more severe of self and *other*."""
        return self if self.rank >= other.rank else other


_SEVERITY_RANK = {
    Severity.LOW: 0,
    Severity.MEDIUM: 1,
    Severity.HIGH: 2,
    Severity.CRITICAL: 3,
}


class ActivityAction(str, Enum):
    """Kinds of monitored interaction."""

    PAGE_VIEW = "page_view"
    USER_ACTION = "user_action"


class DataOperation(str, Enum):
    """Operations on stored data, used for risk classification."""

    READ = "read"
    WRITE = "write"
    DELETE = "delete"


class UserStatus(str, Enum):
    """Approval status of a dashboard user."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


# ==============================================================================
# Session and Activity
# ==============================================================================


class SessionState(BaseModel):
    """Snapshot of the session lifecycle controller."""

    remaining_seconds: int = Field(..., ge=0, description="Seconds until timeout")
    warning_active: bool = Field(default=False, description="Warning window reached")
    active: bool = Field(default=True, description="Session has not timed out")


class SessionInfo(BaseModel):
    """Client context captured with each activity event."""

    user_agent: str = ""
    url: str = ""
    referrer: str = ""

    model_config = {"frozen": True}


class ActivityEvent(BaseModel):
    """A single monitored interaction. Immutable once built."""

    resource: str
    action: ActivityAction
    timestamp: datetime
    session_info: SessionInfo = Field(default_factory=SessionInfo)

    model_config = {"frozen": True}


class AuthUser(BaseModel):
    """Signed-in dashboard user."""

    id: str
    email: str | None = None
    status: UserStatus = UserStatus.PENDING

    @property
    def is_approved(self) -> bool:
        return self.status == UserStatus.APPROVED


# ==============================================================================
# Audit Event Variants
# ==============================================================================


class _AuditEventBase(BaseModel):
    """Shared behaviour for audit event variants."""

    model_config = {"frozen": True}

    def detail_fields(self) -> dict[str, Any]:
        """Detail mapping sent to the security logger.

        Free-form ``context`` entries are flattened into the mapping; declared
        fields win on key collisions.
        """
        data = self.model_dump(mode="json", exclude={"event_type"}, exclude_none=True)
        context = data.pop("context", None) or {}
        return {**context, **data}


class DataAccessEvent(_AuditEventBase):
    event_type: Literal["data_access"] = "data_access"
    resource: str
    operation: DataOperation = DataOperation.READ
    success: bool = True
    record_count: int | None = Field(default=None, ge=0)


class BulkOperationEvent(_AuditEventBase):
    event_type: Literal["bulk_operation"] = "bulk_operation"
    resource: str
    operation: str
    affected_records: int = Field(..., ge=0)


class DataExportEvent(_AuditEventBase):
    event_type: Literal["data_export"] = "data_export"
    resource: str
    export_format: str
    record_count: int = Field(..., ge=0)


class ConfigurationChangeEvent(_AuditEventBase):
    event_type: Literal["config_update"] = "config_update"
    setting_name: str
    old_value: Any = None
    new_value: Any = None

    @property
    def resource(self) -> str:
        return f"system_configuration.{self.setting_name}"


class AdminAccessEvent(_AuditEventBase):
    event_type: Literal["admin_action"] = "admin_action"
    resource: str
    action: str
    target_user_id: str | None = None


class AuthAttemptEvent(_AuditEventBase):
    event_type: Literal["auth_attempt"] = "auth_attempt"
    success: bool
    email: str | None = None
    error: str | None = None


class SuspiciousActivityEvent(_AuditEventBase):
    event_type: Literal["suspicious_activity"] = "suspicious_activity"
    activity: str
    duration_minutes: int | None = None
    last_activity: datetime | None = None
    context: dict[str, Any] = Field(default_factory=dict)


class UserActionEvent(_AuditEventBase):
    event_type: Literal["user_action"] = "user_action"
    resource: str
    action: str
    session_info: SessionInfo | None = None
    context: dict[str, Any] = Field(default_factory=dict)


class RoleChangeEvent(_AuditEventBase):
    event_type: Literal["role_change"] = "role_change"
    target_user_id: str
    old_role: str | None = None
    new_role: str


class CampaignLaunchEvent(_AuditEventBase):
    event_type: Literal["campaign_launch"] = "campaign_launch"
    campaign_id: str
    channel: Literal["sms", "email", "whatsapp"]
    recipient_count: int = Field(..., ge=0)


AuditEvent = Annotated[
    Union[
        DataAccessEvent,
        BulkOperationEvent,
        DataExportEvent,
        ConfigurationChangeEvent,
        AdminAccessEvent,
        AuthAttemptEvent,
        SuspiciousActivityEvent,
        UserActionEvent,
        RoleChangeEvent,
        CampaignLaunchEvent,
    ],
    Field(discriminator="event_type"),
]

_AUDIT_EVENT_ADAPTER: TypeAdapter[AuditEvent] = TypeAdapter(AuditEvent)


def parse_audit_event(data: dict[str, Any]) -> AuditEvent:
    """Validate a plain dict into the audit event variant named by ``event_type``."""
    return _AUDIT_EVENT_ADAPTER.validate_python(data)


# ==============================================================================
# Normalized Record
# ==============================================================================


class SecurityLogRecord(BaseModel):
    """
    Normalized record handed to the remote security logger.

    Attributes:
        event_id: Unique identifier for this record
        timestamp: When the event was emitted (UTC)
        event_type: Audit event variant tag
        severity: Classified severity
        details: Flattened detail mapping of the audit event
        session_id: Identifier of the emitting client session
        user_id: Signed-in user, if any
    """

    event_id: str = Field(default_factory=lambda: str(uuid4()))
    timestamp: datetime
    event_type: str
    severity: Severity
    details: dict[str, Any] = Field(default_factory=dict)
    session_id: str
    user_id: str | None = None

    model_config = {"frozen": True}

    def to_payload(self) -> dict:
        """Serialize for the security logger request body."""
        return self.model_dump(mode="json", exclude_none=True)
