# ==============================================================================
# Core Domain Logic
# ==============================================================================
"""
Session lifecycle and audit logic with no infrastructure dependencies.

This module contains:
- Domain models (SessionState, ActivityEvent, audit event variants)
- ActivityTimer and SessionLifecycleController (session timeout)
- AuditEventEmitter and risk classification
- UserActivityMonitor (access logging, inactivity watch)
- AuthContext, SignalBus and the VirtualScheduler used in tests

All code here talks to the outside world only through the ports in base/.
"""

from outreach.core.activity_monitor import UserActivityMonitor
from outreach.core.activity_timer import ActivityTimer, TimerState, validate_timer_window
from outreach.core.audit_emitter import AuditEventEmitter
from outreach.core.auth import AuthContext
from outreach.core.models import (
    ActivityAction,
    ActivityEvent,
    AuditEvent,
    AuthUser,
    SecurityLogRecord,
    SessionInfo,
    SessionState,
    Severity,
    UserStatus,
    parse_audit_event,
)
from outreach.core.risk import classify_risk
from outreach.core.session_controller import SessionLifecycleController
from outreach.core.signals import InputSignal, SignalBus
from outreach.core.virtual_clock import VirtualScheduler

__all__ = [
    "ActivityAction",
    "ActivityEvent",
    "ActivityTimer",
    "AuditEvent",
    "AuditEventEmitter",
    "AuthContext",
    "AuthUser",
    "InputSignal",
    "SecurityLogRecord",
    "SessionInfo",
    "SessionLifecycleController",
    "SessionState",
    "Severity",
    "SignalBus",
    "TimerState",
    "UserActivityMonitor",
    "UserStatus",
    "VirtualScheduler",
    "classify_risk",
    "parse_audit_event",
    "validate_timer_window",
]
