# ==============================================================================
# Security Log Sink Abstract Base Class
# ==============================================================================
"""
Abstract interface for the remote security logging collaborator.

A sink receives one normalized security log record per call.  It reports
failure by raising; the audit emitter catches and logs the error.

Implementations: HttpSecurityLogSink, LoggingSecurityLogSink
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from outreach.core.models import SecurityLogRecord


class SecurityLogSink(ABC):
    """Destination for normalized security log records."""

    @abstractmethod
    def send(self, record: "SecurityLogRecord") -> None:
        """
        Deliver a single record.

        Args:
            record: Normalized security log record

        Raises:
            Exception: Any delivery failure (network, server, validation)
        """
        ...

    def close(self) -> None:
        """Release resources. Optional override."""
        pass
