# ==============================================================================
# Exceptions
# ==============================================================================
"""
Exception hierarchy for the outreach session and audit components.

Telemetry errors (RemoteCallError and subclasses) are caught and logged by
the emitter and monitor; they never reach the user-facing flow.
"""


class OutreachError(Exception):
    """Base class for all outreach errors."""


class ConfigurationError(OutreachError, ValueError):
    """Invalid timer or session configuration."""


class TimerStoppedError(OutreachError, RuntimeError):
    """Operation attempted on a timer that has been stopped."""


class RemoteCallError(OutreachError):
    """A call to a remote collaborator failed."""


class SecurityLogDeliveryError(RemoteCallError):
    """The security logger rejected or did not receive a record."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class AccessLogError(RemoteCallError):
    """The access log write failed."""
