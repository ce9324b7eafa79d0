# ==============================================================================
# Shared Utilities for CLI Commands
# ==============================================================================
"""
Shared helpers used across CLI command modules.

This module provides:
- A shared rich Console
- Status icons
- Duration parsing and formatting
"""

import re

import typer
from rich.console import Console

console = Console()


class Icons:
    """Status icons using Unicode symbols."""

    CHECK = "[green]✓[/green]"
    CROSS = "[red]✗[/red]"
    WARN = "[yellow]![/yellow]"


I = Icons

_MMSS_PATTERN = re.compile(r"^(\d+):([0-5]\d)$")
_UNIT_PATTERN = re.compile(r"^(\d+)([smh]?)$", re.IGNORECASE)


def parse_duration(value: str) -> int:
    """Parse '24:59', '1499', '1499s', '25m' or '1h' to seconds.

    Raises:
        typer.BadParameter: If the format is invalid
    """
    value = value.strip()
    match = _MMSS_PATTERN.match(value)
    if match:
        return int(match.group(1)) * 60 + int(match.group(2))

    match = _UNIT_PATTERN.match(value)
    if not match:
        raise typer.BadParameter(
            f"Invalid duration: '{value}'. Use MM:SS or N[s|m|h] (e.g. 24:59, 90s, 25m)"
        )
    multipliers = {"": 1, "s": 1, "m": 60, "h": 3600}
    return int(match.group(1)) * multipliers[match.group(2).lower()]


def format_duration(seconds: float) -> str:
    """Format seconds as MM:SS (minutes are not wrapped at 60)."""
    total = int(seconds)
    return f"{total // 60:02d}:{total % 60:02d}"
