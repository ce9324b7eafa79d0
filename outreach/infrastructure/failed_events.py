# ==============================================================================
# Failed Event Store Implementations
# ==============================================================================
"""
Bounded stores for security events the remote logger did not accept.

Provides:
- InMemoryFailedEventStore: per-process deque
- ValkeyFailedEventStore: Valkey list shared across processes
- get_valkey_client / check_valkey_connection helpers
"""

import json
import logging
from collections import deque

import redis
from redis.backoff import ExponentialBackoff
from redis.retry import Retry

from outreach.base.failed_events import FailedEventStore
from outreach.utils.config import get_settings
from outreach.utils.retry import REDIS_RETRY_EXCEPTIONS, VALKEY_RETRIES

logger = logging.getLogger(__name__)

# Key holding the list of undelivered events
FAILED_EVENTS_KEY = "outreach:security:failed_events"

DEFAULT_MAX_ENTRIES = 10


def get_valkey_client() -> redis.Redis:
    """
    Get a Valkey/Redis client connection.

    Configured with:
    - 10 second socket timeouts for fast failure detection
    - automatic retries with exponential backoff for transient failures

    Returns:
        redis.Redis client instance
    """
    settings = get_settings()
    retry = Retry(ExponentialBackoff(cap=8, base=1), retries=VALKEY_RETRIES)

    return redis.from_url(
        settings.valkey.url,
        decode_responses=True,
        socket_timeout=10,
        socket_connect_timeout=10,
        retry=retry,
        retry_on_error=list(REDIS_RETRY_EXCEPTIONS),
    )


def check_valkey_connection() -> bool:
    """
    Check if Valkey is reachable.

    Uses a shorter timeout (5 seconds) since this is just a health check.

    Returns:
        True if Valkey responds to ping, False otherwise
    """
    settings = get_settings()
    client = redis.from_url(
        settings.valkey.url,
        decode_responses=True,
        socket_timeout=5,
        socket_connect_timeout=5,
    )
    try:
        client.ping()
        return True
    except redis.RedisError:
        return False
    finally:
        client.close()


class InMemoryFailedEventStore(FailedEventStore):
    """Keeps the most recent undelivered events in process memory."""

    def __init__(self, max_entries: int = DEFAULT_MAX_ENTRIES):
        self._entries: deque[dict] = deque(maxlen=max_entries)

    def push(self, payload: dict) -> None:
        self._entries.append(payload)

    def entries(self) -> list[dict]:
        return list(self._entries)

    def clear(self) -> int:
        count = len(self._entries)
        self._entries.clear()
        return count


class ValkeyFailedEventStore(FailedEventStore):
    """
    Valkey implementation of FailedEventStore.

    Payloads are JSON strings in a single list; RPUSH followed by LTRIM
    keeps only the newest ``max_entries``.
    """

    def __init__(
        self,
        client: redis.Redis | None = None,
        key: str = FAILED_EVENTS_KEY,
        max_entries: int = DEFAULT_MAX_ENTRIES,
    ):
        """
        Initialize the store.

        Args:
            client: Redis client. If None, uses get_valkey_client().
            key: List key
            max_entries: Number of payloads to keep
        """
        self._client = client or get_valkey_client()
        self._key = key
        self._max_entries = max_entries

    def push(self, payload: dict) -> None:
        pipe = self._client.pipeline()
        pipe.rpush(self._key, json.dumps(payload))
        pipe.ltrim(self._key, -self._max_entries, -1)
        pipe.execute()

    def entries(self) -> list[dict]:
        result = []
        for raw in self._client.lrange(self._key, 0, -1):
            try:
                result.append(json.loads(raw))
            except json.JSONDecodeError:
                logger.warning("Skipping undecodable failed event entry")
        return result

    def clear(self) -> int:
        count = self._client.llen(self._key)
        self._client.delete(self._key)
        return count
