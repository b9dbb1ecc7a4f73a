"""Tests for the in-memory sample store."""

import threading

from gcgraph.models.sample import Sample
from gcgraph.services.sample_store import SampleStore


class TestSampleStore:
    """Test appending to and reading from the store."""

    def test_append_keeps_insertion_order(self):
        """Test samples come back oldest first per series."""
        store = SampleStore(capacity=10)
        store.append(0.0, {"used": 1, "total": 2})
        store.append(0.1, {"used": 3, "total": 4})
        snapshot = store.snapshot()
        assert snapshot["used"] == [Sample(t=0.0, v=1), Sample(t=0.1, v=3)]
        assert snapshot["total"] == [Sample(t=0.0, v=2), Sample(t=0.1, v=4)]

    def test_series_order_follows_names(self):
        """Test the snapshot lists series in their configured order."""
        store = SampleStore(series_names=("b", "a"), capacity=10)
        assert list(store.snapshot()) == ["b", "a"]

    def test_capacity_evicts_oldest(self):
        """Test the oldest samples are dropped once capacity is exceeded."""
        store = SampleStore(capacity=3)
        for i in range(5):
            store.append(float(i), {"used": i, "total": i})
        assert [s.t for s in store.snapshot()["used"]] == [2.0, 3.0, 4.0]
        assert len(store) == 3

    def test_snapshot_count_returns_latest(self):
        """Test a bounded snapshot returns only the most recent samples."""
        store = SampleStore(capacity=100)
        for i in range(10):
            store.append(float(i), {"used": i, "total": i})
        assert [s.t for s in store.snapshot(4)["total"]] == [6.0, 7.0, 8.0, 9.0]
        assert store.snapshot(0)["used"] == []

    def test_snapshot_is_a_copy(self):
        """Test changing a snapshot leaves the store untouched."""
        store = SampleStore(capacity=10)
        store.append(0.0, {"used": 1, "total": 1})
        snapshot = store.snapshot()
        snapshot["used"].clear()
        assert store.sizes() == {"used": 1, "total": 1}

    def test_untracked_and_missing_names(self):
        """Test unknown names are ignored and missing names add nothing."""
        store = SampleStore(capacity=10)
        store.append(0.0, {"used": 1, "other": 5})
        assert store.sizes() == {"used": 1, "total": 0}

    def test_empty_store(self):
        """Test an empty store reads as empty series."""
        store = SampleStore(capacity=10)
        assert store.snapshot() == {"used": [], "total": []}
        assert len(store) == 0

    def test_clear(self):
        """Test clearing drops every sample."""
        store = SampleStore(capacity=10)
        store.append(0.0, {"used": 1, "total": 1})
        store.clear()
        assert store.sizes() == {"used": 0, "total": 0}

    def test_concurrent_reads_see_whole_ticks(self):
        """Test readers never observe one series ahead of the other."""
        store = SampleStore(capacity=50)
        done = threading.Event()
        mismatches = []

        def writer():
            for i in range(2000):
                store.append(float(i), {"used": i, "total": i})
            done.set()

        def reader():
            while not done.is_set():
                snapshot = store.snapshot(10)
                used = [s.t for s in snapshot["used"]]
                total = [s.t for s in snapshot["total"]]
                if used != total:
                    mismatches.append((used, total))

        threads = [threading.Thread(target=writer)] + [
            threading.Thread(target=reader) for _ in range(3)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert mismatches == []
        assert len(store) == 50
