# ==============================================================================
# Repository Abstract Base Classes
# ==============================================================================
"""
Repository ABCs for data persistence.

These define the "what" (record an access) not the "how" (stored function,
REST call, plain insert).  Concrete implementations in infrastructure/
handle the specifics.

Includes:
- AccessLogRepository: per-user resource access log
"""

from abc import ABC, abstractmethod


class AccessLogRepository(ABC):
    """Repository for user access log entries.

    Writes are not idempotent; recording the same access twice stores two
    entries.
    """

    @abstractmethod
    def connect(self) -> None:
        """Establish connection to the data store."""
        ...

    @abstractmethod
    def log_access(self, user_id: str, resource: str, action: str) -> None:
        """
        Persist one access entry.

        Args:
            user_id: Identifier of the acting user
            resource: Resource that was accessed (page path, table name, ...)
            action: Action performed ("page_view" or a user action name)
        """
        ...

    @abstractmethod
    def close(self) -> None:
        """Close connection and release resources."""
        ...
