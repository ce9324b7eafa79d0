# ==============================================================================
# Infrastructure Adapters
# ==============================================================================
"""
Adapters for external services (ports-and-adapters architecture).

This module contains concrete implementations of the base/ interfaces:
- scheduler.py - asyncio event loop scheduler
- security_logger.py - remote (HTTP) and local security log sinks
- repositories/ - access log adapters (PostgreSQL)
- failed_events.py - undelivered event stores (memory, Valkey)
- notifier.py - log-backed user notifications
"""

from outreach.infrastructure.failed_events import (
    InMemoryFailedEventStore,
    ValkeyFailedEventStore,
    check_valkey_connection,
    get_valkey_client,
)
from outreach.infrastructure.notifier import LoggingNotifier
from outreach.infrastructure.repositories import (
    PostgreSQLAccessLogRepository,
    check_postgresql_connection,
)
from outreach.infrastructure.scheduler import AsyncioScheduler
from outreach.infrastructure.security_logger import (
    HttpSecurityLogSink,
    LoggingSecurityLogSink,
    check_security_logger_connection,
)

__all__ = [
    # Scheduler
    "AsyncioScheduler",
    # Security logger
    "HttpSecurityLogSink",
    "LoggingSecurityLogSink",
    "check_security_logger_connection",
    # Repositories
    "PostgreSQLAccessLogRepository",
    "check_postgresql_connection",
    # Failed events
    "InMemoryFailedEventStore",
    "ValkeyFailedEventStore",
    "check_valkey_connection",
    "get_valkey_client",
    # Notifier
    "LoggingNotifier",
]
