# ==============================================================================
# CLI Commands Module
# ==============================================================================
"""
CLI commands for the outreach session and audit tooling.

Commands are organized into separate modules for maintainability:
- shared.py: Console, icons and duration helpers
- config.py: Configuration display
- session.py: Session timeline simulation
- audit.py: Risk classification and undelivered events
- status.py: Collaborator connectivity
"""

from outreach.cli.audit import audit_classify, audit_failed
from outreach.cli.config import config_show
from outreach.cli.session import session_simulate, simulate_session
from outreach.cli.status import show_status

__all__ = [
    "audit_classify",
    "audit_failed",
    "config_show",
    "session_simulate",
    "show_status",
    "simulate_session",
]
