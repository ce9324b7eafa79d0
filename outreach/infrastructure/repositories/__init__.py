# ==============================================================================
# Database Repository Adapters
# ==============================================================================
"""
Database adapters implementing the repository interfaces from base/repositories.py.

Currently supported:
- PostgreSQL (postgresql.py)
"""

from outreach.infrastructure.repositories.postgresql import (
    PostgreSQLAccessLogRepository,
    check_postgresql_connection,
)

__all__ = [
    "PostgreSQLAccessLogRepository",
    "check_postgresql_connection",
]
