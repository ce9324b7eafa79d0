# ==============================================================================
# Outreach CLI
# ==============================================================================
"""
Command-line interface for the outreach session and audit tooling.

Usage:
    outreach --help
    outreach status
    outreach config show
    outreach session simulate --timeout 30 --warning 5 --activity-at 24:59
    outreach audit classify '{"event_type": "bulk_operation", ...}'
    outreach audit failed --clear
"""

import logging
import os

import typer

# ==============================================================================
# App Configuration
# ==============================================================================
# Set consistent terminal width for help output formatting
if "COLUMNS" not in os.environ:
    os.environ["COLUMNS"] = "115"

app = typer.Typer(
    name="outreach",
    help="Outreach session lifecycle and audit logging CLI",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(
    help="Configuration management",
    no_args_is_help=True,
)
app.add_typer(config_app, name="config")

from outreach.cli.config import config_show

config_app.command("show")(config_show)

session_app = typer.Typer(
    help="Session timeout operations",
    no_args_is_help=True,
)
app.add_typer(session_app, name="session")

from outreach.cli.session import session_simulate

session_app.command("simulate")(session_simulate)

audit_app = typer.Typer(
    help="Audit event operations",
    no_args_is_help=True,
)
app.add_typer(audit_app, name="audit")

from outreach.cli.audit import audit_classify, audit_failed

audit_app.command("classify")(audit_classify)
audit_app.command("failed")(audit_failed)

# Status command is imported from outreach.cli.status
from outreach.cli.status import show_status

app.command("status")(show_status)


# ==============================================================================
# Entry Point
# ==============================================================================


def main() -> None:
    """CLI entry point."""
    from outreach.utils.config import get_settings

    logging.basicConfig(
        level=get_settings().log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    app()


if __name__ == "__main__":
    main()
