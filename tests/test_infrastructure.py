# ==============================================================================
# Tests for Infrastructure Adapters
# ==============================================================================
"""
Unit tests for the remote collaborator adapters.

External services are replaced with mocks:
- requests.Session for the HTTP security logger
- psycopg2.connect for the PostgreSQL access log
- a fresh asyncio loop for the AsyncioScheduler
"""

import asyncio
import logging
from datetime import UTC, datetime
from unittest.mock import MagicMock, patch

import psycopg2
import pytest

from outreach.core.errors import AccessLogError, SecurityLogDeliveryError
from outreach.core.models import SecurityLogRecord, Severity
from outreach.infrastructure.notifier import LoggingNotifier
from outreach.infrastructure.repositories import PostgreSQLAccessLogRepository
from outreach.infrastructure.scheduler import AsyncioScheduler
from outreach.infrastructure.security_logger import (
    HttpSecurityLogSink,
    LoggingSecurityLogSink,
    check_security_logger_connection,
)
from outreach.utils.config import PostgresSettings, SecurityLoggerSettings, Settings


@pytest.fixture()
def record():
    return SecurityLogRecord(
        event_id="evt-1",
        timestamp=datetime(2024, 3, 1, 12, 0, tzinfo=UTC),
        event_type="data_export",
        severity=Severity.CRITICAL,
        details={"resource": "contacts", "record_count": 5000},
        session_id="session-1",
    )


@pytest.fixture()
def logger_settings():
    return SecurityLoggerSettings(
        url="https://functions.example.org/security-logger",
        api_key="secret-key",
        timeout_seconds=5,
    )


# ==============================================================================
# Security Logger
# ==============================================================================


class TestHttpSecurityLogSink:
    """Tests for HttpSecurityLogSink."""

    def test_requires_url(self):
        with pytest.raises(ValueError, match="SECURITY_LOGGER_URL"):
            HttpSecurityLogSink(SecurityLoggerSettings(url=None))

    def test_posts_payload_with_bearer_token(self, logger_settings, record):
        session = MagicMock()
        session.post.return_value.ok = True
        sink = HttpSecurityLogSink(logger_settings, session=session)

        sink.send(record)

        session.post.assert_called_once()
        args, kwargs = session.post.call_args
        assert args[0] == "https://functions.example.org/security-logger"
        assert kwargs["json"]["event_type"] == "data_export"
        assert kwargs["json"]["severity"] == "critical"
        assert kwargs["headers"]["Authorization"] == "Bearer secret-key"
        assert kwargs["timeout"] == 5

    def test_non_2xx_raises(self, logger_settings, record):
        session = MagicMock()
        session.post.return_value.ok = False
        session.post.return_value.status_code = 401
        session.post.return_value.text = "Unauthorized"
        sink = HttpSecurityLogSink(logger_settings, session=session)

        with pytest.raises(SecurityLogDeliveryError) as exc_info:
            sink.send(record)
        assert exc_info.value.status_code == 401

    def test_close_closes_session(self, logger_settings):
        session = MagicMock()
        HttpSecurityLogSink(logger_settings, session=session).close()
        session.close.assert_called_once()


class TestLoggingSecurityLogSink:
    """Tests for LoggingSecurityLogSink."""

    def test_logs_payload(self, record, caplog):
        caplog.set_level(logging.INFO, logger="outreach.security")
        LoggingSecurityLogSink().send(record)
        assert '"event_id": "evt-1"' in caplog.text


class TestCheckSecurityLoggerConnection:
    """Tests for check_security_logger_connection()."""

    def test_unconfigured(self):
        assert check_security_logger_connection(SecurityLoggerSettings(url=None)) is False

    @pytest.mark.parametrize("status,expected", [(204, True), (405, True), (503, False)])
    def test_status_codes(self, logger_settings, status, expected):
        with patch("outreach.infrastructure.security_logger.requests.options") as options:
            options.return_value.status_code = status
            assert check_security_logger_connection(logger_settings) is expected


# ==============================================================================
# PostgreSQL Access Log
# ==============================================================================


class TestPostgreSQLAccessLogRepository:
    """Tests for PostgreSQLAccessLogRepository."""

    @pytest.fixture()
    def settings(self):
        return Settings(postgres=PostgresSettings(schema_name="outreach"))

    def test_log_before_connect_raises(self, settings):
        repo = PostgreSQLAccessLogRepository(settings)
        with pytest.raises(RuntimeError, match="Call connect\\(\\) first"):
            repo.log_access("user-1", "/campaigns", "page_view")

    def test_log_access_calls_function(self, settings):
        with patch("outreach.infrastructure.repositories.postgresql.psycopg2.connect") as connect:
            repo = PostgreSQLAccessLogRepository(settings)
            repo.connect()
            repo.log_access("user-1", "/campaigns", "page_view")

        conn = connect.return_value
        assert conn.autocommit is True
        assert "connect_timeout=10" in connect.call_args.args[0]
        cursor = conn.cursor.return_value.__enter__.return_value
        sql, params = cursor.execute.call_args.args
        assert sql.startswith("SELECT outreach.log_user_access(")
        assert params == {"user_id": "user-1", "resource": "/campaigns", "action": "page_view"}

    def test_database_error_wrapped(self, settings):
        with patch("outreach.infrastructure.repositories.postgresql.psycopg2.connect") as connect:
            cursor = connect.return_value.cursor.return_value.__enter__.return_value
            cursor.execute.side_effect = psycopg2.ProgrammingError("permission denied")
            repo = PostgreSQLAccessLogRepository(settings)
            repo.connect()
            with pytest.raises(AccessLogError, match="/campaigns"):
                repo.log_access("user-1", "/campaigns", "page_view")

    def test_close(self, settings):
        with patch("outreach.infrastructure.repositories.postgresql.psycopg2.connect") as connect:
            repo = PostgreSQLAccessLogRepository(settings)
            repo.connect()
            repo.close()
            repo.close()
        connect.return_value.close.assert_called_once()


# ==============================================================================
# Asyncio Scheduler and Notifier
# ==============================================================================


class TestAsyncioScheduler:
    """Tests for AsyncioScheduler."""

    def test_call_later_and_cancel(self):
        async def scenario():
            scheduler = AsyncioScheduler()
            fired = []
            scheduler.call_later(0.01, lambda: fired.append("kept"))
            cancelled = scheduler.call_later(0.01, lambda: fired.append("cancelled"))
            cancelled.cancel()
            await asyncio.sleep(0.05)
            return fired, cancelled.cancelled

        fired, was_cancelled = asyncio.run(scenario())
        assert fired == ["kept"]
        assert was_cancelled

    def test_submit_runs_in_background(self):
        async def scenario():
            scheduler = AsyncioScheduler()
            work = MagicMock()
            scheduler.submit(work, "a", 1)
            await scheduler.drain(timeout=5)
            return work

        asyncio.run(scenario()).assert_called_once_with("a", 1)

    def test_submit_failure_logged(self, caplog):
        async def scenario():
            scheduler = AsyncioScheduler()
            scheduler.submit(MagicMock(side_effect=RuntimeError("boom")))
            await scheduler.drain(timeout=5)
            await asyncio.sleep(0)

        asyncio.run(scenario())
        assert "Background call failed" in caplog.text

    def test_wall_time_is_utc(self):
        async def scenario():
            return AsyncioScheduler().wall_time()

        assert asyncio.run(scenario()).tzinfo is UTC


class TestLoggingNotifier:
    def test_logs_message(self, caplog):
        caplog.set_level(logging.INFO, logger="outreach.infrastructure.notifier")
        LoggingNotifier().notify("Session Warning", "soon")
        assert "Session Warning: soon" in caplog.text
