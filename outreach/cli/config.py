# ==============================================================================
# Config Commands
# ==============================================================================
"""
Configuration commands for the outreach CLI.
"""

import json
from typing import Annotated

import typer
from rich.table import Table

from outreach.cli.shared import console
from outreach.utils.config import get_settings

_MASK = "********"


def _mask(value: str | None, show_secrets: bool) -> str | None:
    if value is None or show_secrets:
        return value
    return _MASK if value else value


# ==============================================================================
# Commands
# ==============================================================================


def config_show(
    json_output: Annotated[
        bool, typer.Option("--json", "-j", help="Output configuration as JSON")
    ] = False,
    show_secrets: Annotated[
        bool, typer.Option("--show-secrets", help="Show passwords and API keys")
    ] = False,
) -> None:
    """Display current configuration (secrets are masked by default)."""
    settings = get_settings()

    config = {
        "session": {
            "timeout_minutes": settings.session.timeout_minutes,
            "warning_minutes": settings.session.warning_minutes,
            "activity_throttle_seconds": settings.session.activity_throttle_seconds,
        },
        "activity": {
            "inactivity_timeout_minutes": settings.activity.inactivity_timeout_minutes,
            "track_page_views": settings.activity.track_page_views,
            "track_user_actions": settings.activity.track_user_actions,
        },
        "audit": {
            "bulk_high_threshold": settings.audit.bulk_high_threshold,
            "export_high_threshold": settings.audit.export_high_threshold,
            "export_critical_threshold": settings.audit.export_critical_threshold,
            "failed_event_store": settings.audit.failed_event_store,
            "failed_event_limit": settings.audit.failed_event_limit,
        },
        "rate_limit": {
            "max_actions": settings.rate_limit.max_actions,
            "window_seconds": settings.rate_limit.window_seconds,
        },
        "security_logger": {
            "url": settings.security_logger.url,
            "api_key": _mask(settings.security_logger.api_key, show_secrets),
            "timeout_seconds": settings.security_logger.timeout_seconds,
        },
        "postgresql": {
            "host": settings.postgres.host,
            "port": settings.postgres.port,
            "database": settings.postgres.database,
            "schema": settings.postgres.schema_name,
            "user": settings.postgres.user,
            "password": _mask(settings.postgres.password, show_secrets),
            "sslmode": settings.postgres.sslmode,
        },
        "valkey": {
            "host": settings.valkey.host,
            "port": settings.valkey.port,
            "ssl_enabled": settings.valkey.ssl,
            "password": _mask(settings.valkey.password, show_secrets),
        },
        "log_level": settings.log_level,
    }

    if json_output:
        print(json.dumps(config, indent=2))
        return

    table = Table(title="Configuration")
    table.add_column("Section", style="cyan")
    table.add_column("Setting")
    table.add_column("Value")
    for section, values in config.items():
        if not isinstance(values, dict):
            table.add_row("general", section, str(values))
            continue
        for i, (key, value) in enumerate(values.items()):
            table.add_row(section if i == 0 else "", key, "-" if value is None else str(value))
    console.print(table)
