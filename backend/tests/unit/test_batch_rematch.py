"""Unit tests for catalog-wide batch re-matching"""

import pytest

from matching.batch import BatchRematcher, BatchRunEntry
from matching.orchestrator import MatchingOrchestrator
from matching.ports import StoreUnavailableError
from models.enums import Category, ListingStatus
from observability.request_id import correlation_scope, get_request_id
from fixtures.factories import make_request, make_listing


@pytest.fixture
def seeded_store(memory_store):
    """Three active requests; only the first has a matching listing."""
    memory_store.add_buy_request(make_request())
    memory_store.add_buy_request(make_request(category=Category.LIVESTOCK, title="Dairy cattle"))
    memory_store.add_buy_request(make_request(category=Category.AUTOMOTIVE, title="Isuzu truck parts"))
    memory_store.add_buy_request(make_request(status=ListingStatus.CLOSED))
    memory_store.add_listing(make_listing())
    return memory_store


def build(store, sink=None, max_workers=1):
    return BatchRematcher(MatchingOrchestrator(store), store, notification_sink=sink, max_workers=max_workers)


class TestBatchRematcher:
    """Test re-matching of every active buy request"""

    def test_one_entry_per_active_request_in_order(self, seeded_store):
        entries = build(seeded_store).run_all_active()

        assert [entry.buy_request_id for entry in entries] == seeded_store.list_active_buy_request_ids()
        assert [entry.matches_found for entry in entries] == [1, 0, 0]

    def test_intents_dispatched_to_sink(self, seeded_store, recording_sink):
        build(seeded_store, sink=recording_sink).run_all_active()

        assert len(recording_sink.intents) == 2

    def test_without_sink_nothing_dispatched(self, seeded_store):
        entries = build(seeded_store, sink=None).run_all_active()
        assert sum(entry.matches_found for entry in entries) == 1

    def test_second_sweep_finds_nothing_new(self, seeded_store, recording_sink):
        rematcher = build(seeded_store, sink=recording_sink)
        rematcher.run_all_active()

        entries = rematcher.run_all_active()

        assert [entry.matches_found for entry in entries] == [0, 0, 0]
        assert len(recording_sink.intents) == 2

    def test_worker_pool_gives_same_result(self, seeded_store):
        entries = build(seeded_store, max_workers=4).run_all_active()

        assert [entry.matches_found for entry in entries] == [1, 0, 0]
        assert len(seeded_store.matches) == 1

    def test_worker_pool_keeps_correlation_id(self, seeded_store):
        seen = []

        class RecordingOrchestrator(MatchingOrchestrator):
            def run_matching(self, buy_request_id):
                seen.append(get_request_id())
                return super().run_matching(buy_request_id)

        rematcher = BatchRematcher(RecordingOrchestrator(seeded_store), seeded_store, max_workers=3)
        with correlation_scope("sweep-7"):
            rematcher.run_all_active()

        assert seen == ["sweep-7"] * 3

    def test_no_active_requests(self, memory_store):
        assert build(memory_store).run_all_active() == []

    def test_store_outage_aborts_sweep(self, seeded_store):
        seeded_store.unavailable = True

        with pytest.raises(StoreUnavailableError):
            build(seeded_store).run_all_active()

    def test_entry_to_dict(self, seeded_store):
        entry = build(seeded_store).run_all_active()[0]

        assert entry.to_dict() == {
            "buy_request_id": str(entry.buy_request_id),
            "matches_found": 1,
        }
        assert isinstance(entry, BatchRunEntry)

    def test_max_workers_floor(self, memory_store):
        assert build(memory_store, max_workers=0).max_workers == 1
