# ==============================================================================
# Tests for Failed Event Stores
# ==============================================================================
"""
Unit tests for the undelivered security event stores.

Uses fakeredis for the Valkey store so no server is needed.
"""

import json

from outreach.infrastructure.failed_events import (
    FAILED_EVENTS_KEY,
    InMemoryFailedEventStore,
)


def _payload(n: int) -> dict:
    return {"event_id": f"evt-{n}", "event_type": "data_export", "severity": "critical"}


class TestInMemoryFailedEventStore:
    """Tests for InMemoryFailedEventStore."""

    def test_empty(self):
        assert InMemoryFailedEventStore().entries() == []

    def test_keeps_newest(self):
        store = InMemoryFailedEventStore(max_entries=2)
        for n in range(3):
            store.push(_payload(n))
        assert [e["event_id"] for e in store.entries()] == ["evt-1", "evt-2"]

    def test_clear_returns_count(self):
        store = InMemoryFailedEventStore()
        store.push(_payload(1))
        assert store.clear() == 1
        assert store.entries() == []


class TestValkeyFailedEventStore:
    """Tests for ValkeyFailedEventStore."""

    def test_push_stores_json(self, valkey_store, fake_redis):
        valkey_store.push(_payload(1))
        raw = fake_redis.lrange(FAILED_EVENTS_KEY, 0, -1)
        assert [json.loads(r) for r in raw] == [_payload(1)]

    def test_trims_to_max_entries(self, valkey_store):
        for n in range(5):
            valkey_store.push(_payload(n))
        assert [e["event_id"] for e in valkey_store.entries()] == ["evt-2", "evt-3", "evt-4"]

    def test_skips_undecodable_entries(self, valkey_store, fake_redis):
        fake_redis.rpush(FAILED_EVENTS_KEY, "not json")
        valkey_store.push(_payload(1))
        assert valkey_store.entries() == [_payload(1)]

    def test_clear(self, valkey_store, fake_redis):
        valkey_store.push(_payload(1))
        valkey_store.push(_payload(2))
        assert valkey_store.clear() == 2
        assert fake_redis.exists(FAILED_EVENTS_KEY) == 0
        assert valkey_store.entries() == []
