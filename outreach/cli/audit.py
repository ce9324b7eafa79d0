# ==============================================================================
# Audit Commands
# ==============================================================================
"""
Audit commands for the outreach CLI.

Classify an audit event against the risk tables, and inspect the security
events the remote logger did not accept.
"""

import json
from typing import Annotated

import typer
from pydantic import ValidationError
from rich.table import Table

from outreach.cli.shared import console
from outreach.core.models import parse_audit_event
from outreach.core.risk import classify_risk
from outreach.utils.config import get_settings

_SEVERITY_STYLES = {
    "low": "green",
    "medium": "yellow",
    "high": "red",
    "critical": "bold red",
}


# ==============================================================================
# Commands
# ==============================================================================


def audit_classify(
    event_json: Annotated[
        str,
        typer.Argument(help='Audit event as JSON, e.g. \'{"event_type": "bulk_operation", ...}\''),
    ],
    json_output: Annotated[
        bool, typer.Option("--json", "-j", help="Output as JSON for scripting")
    ] = False,
) -> None:
    """Classify an audit event and show its severity and normalized details.

    Examples:
        outreach audit classify '{"event_type": "data_export", "resource": "churches",
            "export_format": "csv", "record_count": 1500}'
    """
    try:
        event = parse_audit_event(json.loads(event_json))
    except json.JSONDecodeError as e:
        console.print(f"[red]Invalid JSON:[/red] {e}")
        raise typer.Exit(1)
    except ValidationError as e:
        console.print(f"[red]Invalid audit event:[/red] {e.errors()[0]['msg']}")
        raise typer.Exit(1)

    severity = classify_risk(event, get_settings().audit)
    details = event.detail_fields()

    if json_output:
        print(
            json.dumps(
                {"event_type": event.event_type, "severity": severity.value, "details": details},
                indent=2,
            )
        )
        return

    style = _SEVERITY_STYLES[severity.value]
    console.print(f"Event type: [bold]{event.event_type}[/bold]")
    console.print(f"Severity:   [{style}]{severity.value}[/{style}]")
    table = Table(show_header=True)
    table.add_column("Detail")
    table.add_column("Value")
    for key, value in details.items():
        table.add_row(key, json.dumps(value))
    console.print(table)


def audit_failed(
    clear: Annotated[
        bool, typer.Option("--clear", help="Remove the stored events after listing them")
    ] = False,
    json_output: Annotated[
        bool, typer.Option("--json", "-j", help="Output as JSON for scripting")
    ] = False,
) -> None:
    """List high/critical security events the remote logger did not accept.

    Only meaningful with AUDIT_FAILED_EVENT_STORE=valkey; the in-memory store
    does not outlive the process that filled it.
    """
    from outreach.activity_runner import build_failed_event_store

    store = build_failed_event_store(get_settings())
    entries = store.entries()
    removed = store.clear() if clear else 0

    if json_output:
        print(json.dumps({"events": entries, "cleared": removed}, indent=2))
        return

    if not entries:
        console.print("No undelivered security events.")
        return

    table = Table(title="Undelivered Security Events")
    table.add_column("Timestamp")
    table.add_column("Type")
    table.add_column("Severity")
    table.add_column("Event ID")
    for entry in entries:
        severity = entry.get("severity", "")
        style = _SEVERITY_STYLES.get(severity, "white")
        table.add_row(
            entry.get("timestamp", ""),
            entry.get("event_type", ""),
            f"[{style}]{severity}[/{style}]",
            entry.get("event_id", ""),
        )
    console.print(table)
    if clear:
        console.print(f"Cleared {removed} events.")
