# ==============================================================================
# Status Command
# ==============================================================================
"""
Status command for the outreach CLI.

Checks reachability of the remote collaborators: the security logger, the
PostgreSQL access log and (when used) Valkey.
"""

import json
from typing import Annotated

import typer
from rich.table import Table

from outreach.cli.shared import I, console
from outreach.utils.config import get_settings


def show_status(
    json_output: Annotated[
        bool, typer.Option("--json", "-j", help="Output as JSON for scripting")
    ] = False,
) -> None:
    """Show connectivity of the security logger, PostgreSQL and Valkey."""
    from outreach.infrastructure import (
        check_postgresql_connection,
        check_security_logger_connection,
        check_valkey_connection,
    )

    settings = get_settings()

    statuses: dict[str, str] = {}
    if settings.security_logger.is_configured:
        statuses["security_logger"] = (
            "reachable" if check_security_logger_connection(settings.security_logger) else "unreachable"
        )
    else:
        statuses["security_logger"] = "not configured"

    statuses["postgresql"] = (
        "reachable" if check_postgresql_connection(settings) else "unreachable"
    )

    if settings.audit.failed_event_store == "valkey":
        statuses["valkey"] = "reachable" if check_valkey_connection() else "unreachable"
    else:
        statuses["valkey"] = "not used"

    if json_output:
        print(json.dumps(statuses, indent=2))
        return

    table = Table(title="Service Status")
    table.add_column("Service")
    table.add_column("State")
    for name, state in statuses.items():
        icon = {"reachable": I.CHECK, "unreachable": I.CROSS}.get(state, I.WARN)
        table.add_row(name, f"{icon} {state}")
    console.print(table)

    if "unreachable" in statuses.values():
        raise typer.Exit(1)
