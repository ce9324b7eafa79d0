# ==============================================================================
# Shared Test Fixtures
# ==============================================================================
"""
Pytest fixtures shared across all test modules.

Provides:
- A VirtualScheduler for deterministic timer tests
- Mock security log sink, access log and notifier
- An emitter, auth context and monitor wired to the mocks
- fakeredis-backed ValkeyFailedEventStore
"""

from unittest.mock import MagicMock

import fakeredis
import pytest

from outreach.base.notifier import Notifier
from outreach.base.repositories import AccessLogRepository
from outreach.base.sinks import SecurityLogSink
from outreach.core.audit_emitter import AuditEventEmitter
from outreach.core.auth import AuthContext
from outreach.core.models import AuthUser, UserStatus
from outreach.core.signals import SignalBus
from outreach.core.virtual_clock import VirtualScheduler
from outreach.infrastructure.failed_events import (
    InMemoryFailedEventStore,
    ValkeyFailedEventStore,
)


@pytest.fixture()
def scheduler():
    """A virtual clock starting at 0 seconds."""
    return VirtualScheduler()


@pytest.fixture()
def signals():
    return SignalBus()


@pytest.fixture()
def sink():
    """A SecurityLogSink mock that accepts every record."""
    return MagicMock(spec=SecurityLogSink)


@pytest.fixture()
def access_log():
    """An AccessLogRepository mock that accepts every write."""
    return MagicMock(spec=AccessLogRepository)


@pytest.fixture()
def notifier():
    return MagicMock(spec=Notifier)


@pytest.fixture()
def failed_events():
    return InMemoryFailedEventStore(max_entries=10)


@pytest.fixture()
def emitter(sink, scheduler, failed_events):
    """An AuditEventEmitter with a fixed session id and no signed-in user."""
    return AuditEventEmitter(
        sink,
        scheduler,
        failed_events=failed_events,
        session_id="session-1",
    )


@pytest.fixture()
def auth(emitter):
    return AuthContext(audit=emitter)


@pytest.fixture()
def approved_user():
    return AuthUser(id="user-1", email="pastor@example.org", status=UserStatus.APPROVED)


@pytest.fixture()
def fake_redis():
    """A clean fakeredis instance for each test.

    Uses decode_responses=True to match get_valkey_client().
    """
    server = fakeredis.FakeServer()
    client = fakeredis.FakeRedis(server=server, decode_responses=True)
    yield client
    client.flushall()
    client.close()


@pytest.fixture()
def valkey_store(fake_redis):
    """A ValkeyFailedEventStore backed by fakeredis, keeping 3 entries."""
    return ValkeyFailedEventStore(client=fake_redis, max_entries=3)
