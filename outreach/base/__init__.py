# ==============================================================================
# Base Abstract Classes
# ==============================================================================
"""
Abstract base classes defining the ports of the ports-and-adapters architecture.

Core components depend only on these interfaces; infrastructure/ provides
the adapters (asyncio scheduler, HTTP security logger, PostgreSQL access
log, Valkey failed event store).
"""

from outreach.base.failed_events import FailedEventStore
from outreach.base.notifier import Notifier
from outreach.base.repositories import AccessLogRepository
from outreach.base.scheduler import Scheduler, TimerHandle
from outreach.base.sinks import SecurityLogSink

__all__ = [
    "AccessLogRepository",
    "FailedEventStore",
    "Notifier",
    "Scheduler",
    "SecurityLogSink",
    "TimerHandle",
]
