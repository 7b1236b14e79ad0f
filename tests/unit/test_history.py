"""
Unit Tests for the diskcache-backed diagnosis history.
"""
import pytest

from felineneuro.services import DiagnosisHistoryStore


@pytest.fixture
def store(tmp_path):
    history = DiagnosisHistoryStore(tmp_path / "history", max_records=5)
    yield history
    history.close()


class TestHistoryStore:

    def test_record_returns_entry(self, store, waterfall, raw_answers):
        entry = store.record(waterfall.evaluate(raw_answers(neck_flexion=True)))
        assert entry["rule_id"] == "THIAMINE_DEFICIENCY"
        assert entry["engine"] == "waterfall"
        assert entry["urgency"] == "MODERATE"
        assert entry["inputs"]["neck_flexion"] is True
        assert len(entry["id"]) == 32
        assert len(store) == 1

    def test_recent_is_newest_first(self, store, waterfall, raw_answers):
        store.record(waterfall.evaluate(raw_answers(neck_flexion=True)))
        store.record(waterfall.evaluate(raw_answers(recent_trauma=True)))

        records = store.recent()
        assert [r["rule_id"] for r in records] == ["GENERAL_TRAUMA", "THIAMINE_DEFICIENCY"]
        assert [r["rule_id"] for r in store.recent(limit=1)] == ["GENERAL_TRAUMA"]
        assert store.recent(limit=0) == []

    def test_oldest_records_dropped_when_full(self, store, waterfall, raw_answers):
        first = store.record(waterfall.evaluate(raw_answers(neck_flexion=True)))
        for _ in range(5):
            store.record(waterfall.evaluate(raw_answers()))

        assert len(store) == 5
        assert first["id"] not in {r["id"] for r in store.recent(limit=10)}

    def test_analytics(self, store, waterfall, forward_engine, raw_answers):
        store.record(waterfall.evaluate(raw_answers(recent_trauma=True)))
        store.record(waterfall.evaluate(raw_answers(recent_trauma=True)))
        store.record(forward_engine.evaluate(raw_answers(neck_flexion=True)))

        stats = store.analytics()
        assert stats["total"] == 3
        assert stats["most_common_diagnosis"] == "General Traumatic Injury"
        assert stats["by_urgency"] == {"EMERGENCY": 2, "MODERATE": 1}
        assert stats["by_engine"] == {"waterfall": 2, "forward_chaining": 1}

    def test_empty_analytics(self, store):
        stats = store.analytics()
        assert stats["total"] == 0
        assert stats["most_common_diagnosis"] is None

    def test_clear(self, store, waterfall, raw_answers):
        store.record(waterfall.evaluate(raw_answers()))
        store.record(waterfall.evaluate(raw_answers()))
        assert store.clear() == 2
        assert len(store) == 0
        assert store.recent() == []
