# ==============================================================================
# Tests for Settings and Signal Bus
# ==============================================================================
"""
Unit tests for environment-driven settings and the input signal bus.
"""

from unittest.mock import MagicMock

import pytest
from pydantic import ValidationError

from outreach.core.signals import InputSignal, SignalBus
from outreach.utils.config import (
    AuditSettings,
    PostgresSettings,
    SecurityLoggerSettings,
    Settings,
    ValkeySettings,
)


class TestSettings:
    """Tests for the settings classes."""

    def test_audit_env(self, monkeypatch):
        monkeypatch.setenv("AUDIT_FAILED_EVENT_STORE", "valkey")
        monkeypatch.setenv("AUDIT_EXPORT_CRITICAL_THRESHOLD", "500")
        settings = AuditSettings()
        assert settings.failed_event_store == "valkey"
        assert settings.export_critical_threshold == 500

    def test_invalid_store_rejected(self, monkeypatch):
        monkeypatch.setenv("AUDIT_FAILED_EVENT_STORE", "disk")
        with pytest.raises(ValidationError):
            AuditSettings()

    def test_security_logger_configured(self, monkeypatch):
        monkeypatch.delenv("SECURITY_LOGGER_URL", raising=False)
        assert not SecurityLoggerSettings().is_configured
        monkeypatch.setenv("SECURITY_LOGGER_URL", "https://functions.example.org/log")
        assert SecurityLoggerSettings().is_configured

    def test_postgres_connection_string(self):
        settings = PostgresSettings(
            host="db", port=5433, user="app", password="pw", database="outreach", sslmode="require"
        )
        assert settings.connection_string == "postgresql://app:pw@db:5433/outreach?sslmode=require"

    @pytest.mark.parametrize(
        "kwargs,expected",
        [
            ({"host": "v", "port": 6379}, "redis://v:6379/0"),
            ({"host": "v", "port": 6380, "ssl": True, "password": "pw"}, "rediss://:pw@v:6380/0"),
        ],
    )
    def test_valkey_url(self, kwargs, expected):
        assert ValkeySettings(**kwargs).url == expected

    def test_nested_sections(self, monkeypatch):
        monkeypatch.setenv("SESSION_TIMEOUT_MINUTES", "45")
        monkeypatch.setenv("RATE_LIMIT_MAX_ACTIONS", "3")
        settings = Settings()
        assert settings.session.timeout_minutes == 45
        assert settings.rate_limit.max_actions == 3


class TestSignalBus:
    """Tests for SignalBus."""

    def test_dispatch_to_registered_listener(self):
        bus = SignalBus()
        listener = MagicMock()
        bus.add_listener(InputSignal.KEY_PRESS, listener)

        assert bus.dispatch(InputSignal.KEY_PRESS) == 1
        listener.assert_called_once_with(InputSignal.KEY_PRESS)
        assert bus.dispatch(InputSignal.SCROLL) == 0

    def test_duplicate_registration_ignored(self):
        bus = SignalBus()
        listener = MagicMock()
        bus.add_listener(InputSignal.SCROLL, listener)
        bus.add_listener(InputSignal.SCROLL, listener)
        assert bus.listener_count(InputSignal.SCROLL) == 1

    def test_remove_unknown_listener(self):
        bus = SignalBus()
        bus.remove_listener(InputSignal.SCROLL, MagicMock())
        assert bus.listener_count() == 0

    def test_listener_removing_itself_during_dispatch(self):
        bus = SignalBus()
        calls = []

        def once(signal):
            calls.append(signal)
            bus.remove_listener(signal, once)

        other = MagicMock()
        bus.add_listener(InputSignal.TOUCH_START, once)
        bus.add_listener(InputSignal.TOUCH_START, other)

        assert bus.dispatch(InputSignal.TOUCH_START) == 2
        other.assert_called_once()
        assert bus.dispatch(InputSignal.TOUCH_START) == 1
        assert calls == [InputSignal.TOUCH_START]
