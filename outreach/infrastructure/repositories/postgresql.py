# ==============================================================================
# PostgreSQL Repository Implementations
# ==============================================================================
"""
PostgreSQL implementation of the access log repository.

Provides:
- PostgreSQLAccessLogRepository: calls the log_user_access() stored function
- check_postgresql_connection: reachability check with light retry
"""

import logging

import psycopg2

from outreach.base.repositories import AccessLogRepository
from outreach.core.errors import AccessLogError
from outreach.utils.config import Settings, get_settings
from outreach.utils.retry import POSTGRES_RETRY_EXCEPTIONS, retry_light

logger = logging.getLogger(__name__)

# Connection timeout
CONNECT_TIMEOUT = 10


def _add_connect_timeout(conn_string: str) -> str:
    """Add connect_timeout to connection string if not present."""
    if "connect_timeout" not in conn_string:
        separator = "&" if "?" in conn_string else "?"
        return f"{conn_string}{separator}connect_timeout={CONNECT_TIMEOUT}"
    return conn_string


class PostgreSQLAccessLogRepository(AccessLogRepository):
    """
    PostgreSQL implementation of AccessLogRepository.

    Each entry is written by the ``log_user_access(_user_id, _resource,
    _action)`` function, which applies the row-level security of the
    access log table.  The connection runs in autocommit mode so every call
    is its own transaction.
    """

    def __init__(self, settings: Settings | None = None):
        """
        Initialize the access log repository.

        Args:
            settings: Application settings. If None, uses get_settings().
        """
        self._settings = settings or get_settings()
        self._conn: psycopg2.extensions.connection | None = None
        self._schema = self._settings.postgres.schema_name

    @property
    def schema(self) -> str:
        """Get the database schema name."""
        return self._schema

    def connect(self) -> None:
        """Establish connection to PostgreSQL."""
        conn_string = _add_connect_timeout(self._settings.postgres.connection_string)
        self._conn = psycopg2.connect(conn_string)
        self._conn.autocommit = True
        logger.info("PostgreSQLAccessLogRepository connected (schema=%s)", self._schema)

    def log_access(self, user_id: str, resource: str, action: str) -> None:
        """
        Record one access entry.

        Raises:
            RuntimeError: If connect() has not been called
            AccessLogError: If the database rejects the call
        """
        if self._conn is None:
            raise RuntimeError("PostgreSQL connection not established. Call connect() first.")

        try:
            with self._conn.cursor() as cur:
                cur.execute(
                    f"SELECT {self._schema}.log_user_access(%(user_id)s, %(resource)s, %(action)s)",
                    {"user_id": user_id, "resource": resource, "action": action},
                )
        except psycopg2.Error as e:
            raise AccessLogError(f"log_user_access failed for {resource}: {e}") from e

    def close(self) -> None:
        """Close the PostgreSQL connection."""
        if self._conn:
            self._conn.close()
            self._conn = None
            logger.info("PostgreSQLAccessLogRepository closed")


def check_postgresql_connection(settings: Settings | None = None) -> bool:
    """
    Check if PostgreSQL is reachable.

    Args:
        settings: Application settings. If None, uses get_settings().

    Returns:
        True if connection successful, False otherwise
    """
    settings = settings or get_settings()
    conn_string = _add_connect_timeout(settings.postgres.connection_string)

    @retry_light(POSTGRES_RETRY_EXCEPTIONS, logger)
    def _connect() -> None:
        psycopg2.connect(conn_string).close()

    try:
        _connect()
        return True
    except psycopg2.Error:
        return False
