# ==============================================================================
# Session Commands
# ==============================================================================
"""
Session timeout commands for the outreach CLI.

``outreach session simulate`` replays a session on a virtual clock so the
warning/timeout boundaries for a given configuration and activity pattern
can be checked without waiting.
"""

import json
from typing import Annotated, Optional

import typer
from pydantic import ValidationError
from rich.table import Table

from outreach.base.notifier import Notifier
from outreach.cli.shared import console, format_duration, parse_duration
from outreach.core.session_controller import SessionLifecycleController
from outreach.core.signals import InputSignal, SignalBus
from outreach.core.virtual_clock import VirtualScheduler
from outreach.utils.config import SessionSettings


# ==============================================================================
# Simulation
# ==============================================================================


class _TimelineNotifier(Notifier):
    """Collects notifications into a simulation timeline."""

    def __init__(self, scheduler: VirtualScheduler, timeline: list[dict]):
        self._scheduler = scheduler
        self._timeline = timeline

    def notify(self, title: str, message: str) -> None:
        self._timeline.append(
            {"elapsed": self._scheduler.elapsed, "event": title, "detail": message}
        )


def simulate_session(
    settings: SessionSettings,
    activity_at: list[int],
    duration_seconds: int,
) -> list[dict]:
    """
    Run a session on a virtual clock.

    Args:
        settings: Session timeout configuration
        activity_at: Elapsed seconds at which a key press is dispatched
        duration_seconds: How long to run the simulation

    Returns:
        Timeline entries ``{"elapsed", "event", "detail"}`` in order
    """
    scheduler = VirtualScheduler()
    signals = SignalBus()
    timeline: list[dict] = []

    def on_timeout() -> None:
        timeline.append(
            {"elapsed": scheduler.elapsed, "event": "Session Timeout", "detail": "signed out"}
        )

    controller = SessionLifecycleController(
        settings,
        scheduler,
        signals,
        on_timeout=on_timeout,
        notifier=_TimelineNotifier(scheduler, timeline),
    )

    def dispatch_activity() -> None:
        was_active = controller.is_active
        signals.dispatch(InputSignal.KEY_PRESS)
        detail = "countdown restarted" if was_active else "ignored (session inactive)"
        timeline.append({"elapsed": scheduler.elapsed, "event": "Activity", "detail": detail})

    for at in sorted(activity_at):
        scheduler.call_later(at, dispatch_activity)

    with controller:
        timeline.append(
            {
                "elapsed": 0,
                "event": "Session Start",
                "detail": f"timeout {settings.timeout_minutes}m, warning {settings.warning_minutes}m",
            }
        )
        scheduler.advance(duration_seconds)

    return timeline


# ==============================================================================
# Commands
# ==============================================================================


def session_simulate(
    timeout_minutes: Annotated[
        int, typer.Option("--timeout", "-t", help="Session timeout in minutes")
    ] = 30,
    warning_minutes: Annotated[
        int, typer.Option("--warning", "-w", help="Warning lead time in minutes")
    ] = 5,
    activity_at: Annotated[
        Optional[list[str]],
        typer.Option("--activity-at", "-a", help="Elapsed time of a user input (MM:SS or 90s)"),
    ] = None,
    duration: Annotated[
        Optional[str],
        typer.Option("--duration", "-d", help="Simulated duration (default: timeout + 1 minute)"),
    ] = None,
    json_output: Annotated[
        bool, typer.Option("--json", "-j", help="Output timeline as JSON")
    ] = False,
) -> None:
    """Replay a session on a virtual clock and show warning/timeout times.

    Examples:
        outreach session simulate
        outreach session simulate -t 30 -w 5 --activity-at 24:59
    """
    try:
        settings = SessionSettings(timeout_minutes=timeout_minutes, warning_minutes=warning_minutes)
    except ValidationError as e:
        console.print(f"[red]Invalid session configuration:[/red] {e.errors()[0]['msg']}")
        raise typer.Exit(1)

    activity_seconds = [parse_duration(value) for value in activity_at or []]
    duration_seconds = (
        parse_duration(duration) if duration else settings.timeout_seconds + 60
    )

    timeline = simulate_session(settings, activity_seconds, duration_seconds)

    if json_output:
        print(json.dumps(timeline, indent=2))
        return

    table = Table(title="Session Timeline")
    table.add_column("Elapsed", justify="right")
    table.add_column("Event")
    table.add_column("Detail")
    for entry in timeline:
        table.add_row(format_duration(entry["elapsed"]), entry["event"], entry["detail"])
    console.print(table)
