# ==============================================================================
# Tests for ActivityTimer
# ==============================================================================
"""
Unit tests for the countdown timer.

Tests cover:
- Warning fires exactly at timeout - lead and never earlier
- Timeout fires exactly once per cycle
- Reset discards the previous cycle's warning and timeout
- Many resets in a row leave only the last cycle running
- Window validation
- stop() is terminal
- Remaining-time subscriptions
"""

from unittest.mock import MagicMock

import pytest

from outreach.core.activity_timer import ActivityTimer, TimerState, validate_timer_window
from outreach.core.errors import ConfigurationError, TimerStoppedError

# (timeout_seconds, warning_lead_seconds)
WINDOWS = [(2, 1), (10, 3), (60, 59), (1800, 300)]


@pytest.fixture()
def callbacks():
    return MagicMock(), MagicMock()


@pytest.fixture()
def timer(scheduler, callbacks):
    on_warning, on_timeout = callbacks
    return ActivityTimer(scheduler, on_warning=on_warning, on_timeout=on_timeout)


# ==============================================================================
# Validation
# ==============================================================================


class TestValidateTimerWindow:
    """Tests for validate_timer_window()."""

    def test_valid_window(self):
        validate_timer_window(1800, 300)

    def test_zero_lead_allowed(self):
        """A lead of 0 disables the warning but is valid."""
        validate_timer_window(60, 0)

    @pytest.mark.parametrize("timeout", [0, -1])
    def test_non_positive_timeout_rejected(self, timeout):
        with pytest.raises(ConfigurationError, match="timeout_seconds must be positive"):
            validate_timer_window(timeout, 0)

    def test_negative_lead_rejected(self):
        with pytest.raises(ConfigurationError, match="must not be negative"):
            validate_timer_window(60, -5)

    @pytest.mark.parametrize("lead", [60, 61])
    def test_lead_not_shorter_than_timeout_rejected(self, lead):
        with pytest.raises(ConfigurationError, match="must be less than"):
            validate_timer_window(60, lead)

    def test_configuration_error_is_value_error(self):
        """Callers catching ValueError also catch bad windows."""
        with pytest.raises(ValueError):
            validate_timer_window(10, 10)


# ==============================================================================
# Countdown
# ==============================================================================


class TestCountdown:
    """Tests for the warning and timeout boundaries."""

    def test_initial_state(self, timer):
        assert timer.state == TimerState.IDLE
        assert timer.remaining_seconds == 0

    def test_start_sets_remaining(self, timer):
        timer.start(10, 3)
        assert timer.state == TimerState.RUNNING
        assert timer.remaining_seconds == 10
        assert timer.timeout_seconds == 10
        assert timer.warning_lead_seconds == 3

    def test_remaining_decrements_each_second(self, scheduler, timer):
        timer.start(10, 3)
        scheduler.advance(4)
        assert timer.remaining_seconds == 6

    @pytest.mark.parametrize("timeout,lead", WINDOWS)
    def test_warning_not_before_boundary(self, scheduler, timer, callbacks, timeout, lead):
        on_warning, _ = callbacks
        timer.start(timeout, lead)
        scheduler.advance(timeout - lead - 1)
        on_warning.assert_not_called()
        assert not timer.warning_active

    @pytest.mark.parametrize("timeout,lead", WINDOWS)
    def test_warning_exactly_at_boundary(self, scheduler, timer, callbacks, timeout, lead):
        on_warning, on_timeout = callbacks
        timer.start(timeout, lead)
        scheduler.advance(timeout - lead)
        on_warning.assert_called_once()
        on_timeout.assert_not_called()
        assert timer.state == TimerState.WARNING
        assert timer.warning_active
        assert timer.remaining_seconds == lead

    @pytest.mark.parametrize("timeout,lead", WINDOWS)
    def test_timeout_exactly_at_zero(self, scheduler, timer, callbacks, timeout, lead):
        on_warning, on_timeout = callbacks
        timer.start(timeout, lead)
        scheduler.advance(timeout - 1)
        on_timeout.assert_not_called()
        scheduler.advance(1)
        on_timeout.assert_called_once()
        on_warning.assert_called_once()
        assert timer.state == TimerState.EXPIRED
        assert timer.remaining_seconds == 0

    def test_timeout_fires_once(self, scheduler, timer, callbacks):
        """An expired timer does not keep ticking."""
        _, on_timeout = callbacks
        timer.start(5)
        scheduler.advance(60)
        on_timeout.assert_called_once()
        assert scheduler.pending_timers == 0

    def test_zero_lead_never_warns(self, scheduler, timer, callbacks):
        on_warning, on_timeout = callbacks
        timer.start(5, 0)
        scheduler.advance(5)
        on_warning.assert_not_called()
        on_timeout.assert_called_once()

    def test_default_session_window(self, scheduler, timer, callbacks):
        """30 minute timeout with 5 minute warning and no activity."""
        on_warning, on_timeout = callbacks
        timer.start(30 * 60, 5 * 60)

        scheduler.advance_to(25 * 60 - 1)
        on_warning.assert_not_called()
        scheduler.advance_to(25 * 60)
        on_warning.assert_called_once()

        scheduler.advance_to(30 * 60 - 1)
        on_timeout.assert_not_called()
        scheduler.advance_to(30 * 60)
        on_timeout.assert_called_once()

    def test_warning_callback_failure_keeps_counting(self, scheduler, callbacks):
        """A raising warning callback does not stop the countdown."""
        _, on_timeout = callbacks
        on_warning = MagicMock(side_effect=RuntimeError("toast failed"))
        timer = ActivityTimer(scheduler, on_warning=on_warning, on_timeout=on_timeout)
        timer.start(5, 2)

        with pytest.raises(RuntimeError):
            scheduler.advance(3)
        assert timer.state == TimerState.WARNING

        scheduler.advance(2)
        on_timeout.assert_called_once()


# ==============================================================================
# Reset
# ==============================================================================


class TestReset:
    """Tests for reset()."""

    def test_reset_before_start_raises(self, timer):
        with pytest.raises(RuntimeError, match="not been started"):
            timer.reset()

    def test_reset_restores_full_timeout(self, scheduler, timer):
        timer.start(10, 3)
        scheduler.advance(5)
        timer.reset()
        assert timer.remaining_seconds == 10
        assert timer.state == TimerState.RUNNING

    def test_reset_just_before_warning(self, scheduler, timer, callbacks):
        """Reset at 24:59 of a 30/5 session pushes the warning to 49:59."""
        on_warning, on_timeout = callbacks
        timer.start(30 * 60, 5 * 60)

        scheduler.advance_to(24 * 60 + 59)
        timer.reset()

        scheduler.advance_to(25 * 60)
        on_warning.assert_not_called()

        scheduler.advance_to(49 * 60 + 58)
        on_warning.assert_not_called()
        scheduler.advance_to(49 * 60 + 59)
        on_warning.assert_called_once()

        scheduler.advance_to(54 * 60 + 59)
        on_timeout.assert_called_once()

    @pytest.mark.parametrize("reset_at", [0.5, 7.5, 12.25])
    def test_reset_mid_cycle_restarts_from_reset_instant(self, scheduler, timer, callbacks, reset_at):
        """Warning and timeout are measured from the reset, not from start()."""
        on_warning, on_timeout = callbacks
        timer.start(20, 5)

        scheduler.advance_to(reset_at)
        timer.reset()

        scheduler.advance_to(reset_at + 14)
        on_warning.assert_not_called()
        scheduler.advance_to(reset_at + 15)
        on_warning.assert_called_once()

        scheduler.advance_to(reset_at + 19)
        on_timeout.assert_not_called()
        scheduler.advance_to(reset_at + 20)
        on_timeout.assert_called_once()

    def test_reset_during_warning_clears_flag(self, scheduler, timer, callbacks):
        on_warning, on_timeout = callbacks
        timer.start(10, 3)
        scheduler.advance(8)
        assert timer.warning_active

        timer.reset()
        assert not timer.warning_active

        scheduler.advance(6)
        on_warning.assert_called_once()
        on_timeout.assert_not_called()

    def test_reset_after_expiry_starts_new_cycle(self, scheduler, timer, callbacks):
        on_warning, on_timeout = callbacks
        timer.start(5, 2)
        scheduler.advance(5)
        assert timer.state == TimerState.EXPIRED

        timer.reset()
        scheduler.advance(5)
        assert on_warning.call_count == 2
        assert on_timeout.call_count == 2

    def test_repeated_resets_leave_one_cycle(self, scheduler, timer, callbacks):
        """Only the last of many resets can produce callbacks."""
        on_warning, on_timeout = callbacks
        timer.start(10, 3)
        for _ in range(50):
            scheduler.advance(0.5)
            timer.reset()

        assert scheduler.pending_timers == 1
        scheduler.advance(10)
        on_warning.assert_called_once()
        on_timeout.assert_called_once()


# ==============================================================================
# Stop and Subscribe
# ==============================================================================


class TestStop:
    """Tests for stop()."""

    def test_stop_cancels_callbacks(self, scheduler, timer, callbacks):
        on_warning, on_timeout = callbacks
        timer.start(10, 3)
        timer.stop()
        scheduler.advance(20)
        on_warning.assert_not_called()
        on_timeout.assert_not_called()
        assert timer.state == TimerState.STOPPED
        assert scheduler.pending_timers == 0

    def test_stop_is_terminal(self, timer):
        timer.start(10)
        timer.stop()
        with pytest.raises(TimerStoppedError):
            timer.reset()
        with pytest.raises(TimerStoppedError):
            timer.start(10)

    def test_stop_twice_is_safe(self, timer):
        timer.start(10)
        timer.stop()
        timer.stop()
        assert timer.state == TimerState.STOPPED


class TestSubscribe:
    """Tests for remaining-time subscriptions."""

    def test_listener_sees_every_tick(self, scheduler, timer):
        seen = []
        timer.subscribe(seen.append)
        timer.start(3)
        scheduler.advance(3)
        assert seen == [3, 2, 1, 0]

    def test_listener_sees_reset(self, scheduler, timer):
        seen = []
        timer.start(5)
        timer.subscribe(seen.append)
        scheduler.advance(2)
        timer.reset()
        assert seen == [4, 3, 5]

    def test_unsubscribe(self, scheduler, timer):
        seen = []
        unsubscribe = timer.subscribe(seen.append)
        timer.start(5)
        unsubscribe()
        scheduler.advance(2)
        assert seen == [5]

    def test_stop_drops_listeners(self, scheduler, timer):
        listener = MagicMock()
        timer.subscribe(listener)
        timer.start(5)
        timer.stop()
        listener.reset_mock()
        scheduler.advance(5)
        listener.assert_not_called()
