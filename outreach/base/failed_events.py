# ==============================================================================
# Failed Event Store Abstract Base Class
# ==============================================================================
"""
Abstract interface for keeping security events that could not be delivered.

Only the most recent entries are kept; older ones are dropped.  Nothing
re-sends them automatically, they are kept for inspection.

Implementations: InMemoryFailedEventStore, ValkeyFailedEventStore
"""

from abc import ABC, abstractmethod


class FailedEventStore(ABC):
    """Bounded store of undelivered security log payloads."""

    @abstractmethod
    def push(self, payload: dict) -> None:
        """
        Append a payload, evicting the oldest entry when full.

        Args:
            payload: JSON-serializable security log record
        """
        ...

    @abstractmethod
    def entries(self) -> list[dict]:
        """
        Return stored payloads, oldest first.
        """
        ...

    @abstractmethod
    def clear(self) -> int:
        """
        Remove all stored payloads.

        Returns:
            Count of payloads removed
        """
        ...
