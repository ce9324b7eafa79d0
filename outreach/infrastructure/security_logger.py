# ==============================================================================
# Security Logger Sinks
# ==============================================================================
"""
Implementations of the SecurityLogSink interface.

Provides:
- HttpSecurityLogSink: POSTs records to the remote security-logger function
- LoggingSecurityLogSink: writes records to a local logger (development)
- check_security_logger_connection: reachability check with light retry
"""

import json
import logging

import requests

from outreach.base.sinks import SecurityLogSink
from outreach.core.errors import SecurityLogDeliveryError
from outreach.core.models import SecurityLogRecord
from outreach.utils.config import SecurityLoggerSettings, get_settings
from outreach.utils.retry import HTTP_RETRY_EXCEPTIONS, retry_light

logger = logging.getLogger(__name__)

# Dedicated logger for records when no remote endpoint is configured
security_logger = logging.getLogger("outreach.security")


class HttpSecurityLogSink(SecurityLogSink):
    """
    HTTP implementation of SecurityLogSink.

    Sends each record as a JSON body with a bearer token.  Any non-2xx
    response raises SecurityLogDeliveryError; there is no retry.
    """

    def __init__(
        self,
        settings: SecurityLoggerSettings | None = None,
        session: requests.Session | None = None,
    ):
        """
        Initialize the sink.

        Args:
            settings: Endpoint settings. If None, uses get_settings().
            session: HTTP session to reuse (default: a new requests.Session)

        Raises:
            ValueError: If no endpoint URL is configured
        """
        self._settings = settings or get_settings().security_logger
        if not self._settings.is_configured:
            raise ValueError("SECURITY_LOGGER_URL is not configured")
        self._session = session or requests.Session()

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._settings.api_key:
            headers["Authorization"] = f"Bearer {self._settings.api_key}"
        return headers

    def send(self, record: SecurityLogRecord) -> None:
        """
        POST a record to the security logger.

        Raises:
            SecurityLogDeliveryError: On a non-2xx response
            requests.exceptions.RequestException: On network errors
        """
        response = self._session.post(
            self._settings.url,
            json=record.to_payload(),
            headers=self._headers(),
            timeout=self._settings.timeout_seconds,
        )
        if not response.ok:
            raise SecurityLogDeliveryError(
                f"Security logger returned {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
            )
        logger.debug("Delivered security event %s", record.event_id)

    def close(self) -> None:
        self._session.close()


class LoggingSecurityLogSink(SecurityLogSink):
    """Writes records to the ``outreach.security`` logger instead of a remote endpoint."""

    def send(self, record: SecurityLogRecord) -> None:
        security_logger.info(json.dumps(record.to_payload()))


def _ping_security_logger(settings: SecurityLoggerSettings) -> requests.Response:
    return requests.options(settings.url, timeout=settings.timeout_seconds)


def check_security_logger_connection(settings: SecurityLoggerSettings | None = None) -> bool:
    """
    Check if the security logger endpoint is reachable.

    Uses light retry logic (3 attempts, ~7 seconds) for connection errors.

    Args:
        settings: Endpoint settings. If None, uses get_settings().

    Returns:
        True if the endpoint answered, False if unreachable or not configured
    """
    settings = settings or get_settings().security_logger
    if not settings.is_configured:
        return False

    ping = retry_light(HTTP_RETRY_EXCEPTIONS, logger)(_ping_security_logger)
    try:
        response = ping(settings)
    except requests.exceptions.RequestException:
        return False
    return response.status_code < 500
