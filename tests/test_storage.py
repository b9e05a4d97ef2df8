"""Tests for the in-memory result/event store."""

from datetime import timedelta

import pytest

from nettools.models import Severity, ToolStatus, utcnow
from nettools.storage import MemoryStore


@pytest.fixture
def empty_store():
    return MemoryStore(seed=False)


class TestSeeding:

    def test_seeded_catalogue_and_events(self):
        store = MemoryStore()

        assert len(store.list_tools()) == 10
        assert len(store.list_events()) == 4

    def test_unseeded_store_is_empty(self, empty_store):
        assert empty_store.list_tools() == []
        assert empty_store.list_events() == []
        assert empty_store.list_results() == []


class TestResults:

    @pytest.mark.parametrize('created, limit', [(5, 3), (2, 10), (4, 4)])
    def test_limit_returns_most_recent(self, empty_store, created, limit):
        ids = [empty_store.create_result('ping').id for _ in range(created)]

        listed = [r.id for r in empty_store.list_results(limit=limit)]

        assert listed == list(reversed(ids))[:min(created, limit)]

    def test_orders_by_creation_time(self, empty_store):
        older = empty_store.create_result('ping')
        newer = empty_store.create_result('ping')
        older.created_at = utcnow() + timedelta(minutes=5)

        assert [r.id for r in empty_store.list_results()] == [older.id, newer.id]

    def test_filter_by_tool_name(self, empty_store):
        empty_store.create_result('ping')
        dns = empty_store.create_result('dns-lookup')

        assert empty_store.list_results(tool_name='dns-lookup') == [dns]

    def test_ids_are_unique(self, empty_store):
        ids = {empty_store.create_result('ping').id for _ in range(50)}
        assert len(ids) == 50

    def test_delete(self, empty_store):
        result = empty_store.create_result('ping', status=ToolStatus.ERROR)

        assert empty_store.delete_result(result.id) is True
        assert empty_store.delete_result(result.id) is False
        assert empty_store.get_result(result.id) is None

    def test_serialized_keys(self, empty_store):
        data = empty_store.create_result('ping', parameters={'host': 'a'}, execution_time=5).to_dict()

        assert set(data) == {
            'id', 'toolName', 'userId', 'parameters', 'results', 'status',
            'executionTime', 'createdAt',
        }
        assert data['status'] == 'completed'


class TestEvents:

    def test_patch_keeps_identity(self, empty_store):
        event = empty_store.create_event({
            'event_type': 'x', 'severity': Severity.INFO, 'message': 'm',
        })
        created_at = event.created_at

        updated = empty_store.update_event(event.id, {
            'resolved': True, 'id': 'other', 'created_at': None,
        })

        assert updated.resolved is True
        assert updated.id == event.id
        assert updated.created_at == created_at

    def test_update_missing_event(self, empty_store):
        assert empty_store.update_event('missing', {'resolved': True}) is None


class TestStats:

    def test_counts(self):
        store = MemoryStore()
        store.create_result('ping', parameters={'host': 'Example.com'})
        store.create_result('whois-lookup', parameters={'domain': 'example.com'})
        store.create_result('subnet-calculate', parameters={'ipAddress': '10.0.0.1'})
        store.create_result('speed-test', parameters={'server': None})

        stats = store.stats()

        assert stats['total_results'] == 4
        assert stats['results_last_24h'] == 4
        assert stats['active_devices'] == 2
        assert stats['open_alerts'] == 2

    def test_resolved_alerts_are_not_counted(self):
        store = MemoryStore()
        for event in store.list_events():
            store.update_event(event.id, {'resolved': True})

        assert store.stats()['open_alerts'] == 0
