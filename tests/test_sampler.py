"""Tests for the periodic sampler."""

import asyncio
import time

import pytest

from gcgraph.core.exceptions import MetricSourceError
from gcgraph.services.sample_store import SampleStore
from gcgraph.services.sampler import Sampler


@pytest.fixture
def store():
    return SampleStore(capacity=100)


class TestSampleOnce:
    """Test single sampler ticks."""

    def test_sample_once_appends_every_series(self, store, fake_source, fake_clock):
        """Test one tick stores one sample per series at the clock time."""
        sampler = Sampler(store, fake_source, fake_clock, interval=0.01)
        sampler.sample_once()
        sampler.sample_once()
        snapshot = store.snapshot()
        assert [(s.t, s.v) for s in snapshot["used"]] == [(0.0, 1.0), (1.0, 2.0)]
        assert [(s.t, s.v) for s in snapshot["total"]] == [(0.0, 2.0), (1.0, 4.0)]
        assert sampler.samples_taken == 2
        assert sampler.last_sample_at is not None

    def test_source_failure_raises(self, store, fake_clock):
        """Test a failing source surfaces as MetricSourceError."""
        def broken():
            raise RuntimeError("counter unavailable")

        sampler = Sampler(store, broken, fake_clock, interval=0.01)
        with pytest.raises(MetricSourceError):
            sampler.sample_once()

    def test_tick_tolerates_failure(self, store, fake_clock):
        """Test a failing tick is counted and nothing is stored."""
        sampler = Sampler(store, lambda: {"used": "many"}, fake_clock, interval=0.01)
        assert sampler.tick() is False
        assert sampler.errors == 1
        assert len(store) == 0

    def test_non_finite_reading_is_skipped(self, store, fake_clock):
        """Test a tick yielding an infinite value stores nothing."""
        sampler = Sampler(store, lambda: {"used": float("inf"), "total": 1}, fake_clock, interval=0.01)
        assert sampler.tick() is False
        assert sampler.errors == 1
        assert len(store) == 0


class TestSamplerLoop:
    """Test the background sampling task."""

    @pytest.mark.asyncio
    async def test_start_and_stop(self, store, fake_source, fake_clock):
        """Test the loop samples until stopped."""
        sampler = Sampler(store, fake_source, fake_clock, interval=0.01)
        sampler.start()
        assert sampler.running
        await asyncio.sleep(0.1)
        await sampler.stop()
        assert not sampler.running
        assert sampler.samples_taken >= 2
        taken = sampler.samples_taken
        await asyncio.sleep(0.05)
        assert sampler.samples_taken == taken

    @pytest.mark.asyncio
    async def test_loop_survives_failures(self, store, fake_clock):
        """Test the loop keeps sampling after a source failure."""
        calls = []

        def flaky():
            calls.append(1)
            if len(calls) == 1:
                raise RuntimeError("first read fails")
            return {"used": 1, "total": 2}

        sampler = Sampler(store, flaky, fake_clock, interval=0.01)
        sampler.start()
        await asyncio.sleep(0.1)
        await sampler.stop()
        assert sampler.errors == 1
        assert len(store) >= 1

    @pytest.mark.asyncio
    async def test_stop_without_start(self, store, fake_source, fake_clock):
        """Test stopping an idle sampler is harmless."""
        sampler = Sampler(store, fake_source, fake_clock, interval=0.01)
        await sampler.stop()
        assert not sampler.running

    @pytest.mark.asyncio
    async def test_slow_source_does_not_block_event_loop(self, store, fake_clock):
        """Test a slow source read leaves the event loop free for other work."""
        def slow():
            time.sleep(0.3)
            return {"used": 1, "total": 2}

        sampler = Sampler(store, slow, fake_clock, interval=0.01)
        sampler.start()
        start = time.monotonic()
        await asyncio.sleep(0.02)
        assert time.monotonic() - start < 0.2
        await sampler.stop()
        assert sampler.samples_taken == 1

    @pytest.mark.asyncio
    async def test_stop_waits_for_running_tick(self, store, fake_source, fake_clock):
        """Test no sample lands after stop returns."""
        sampler = Sampler(store, fake_source, fake_clock, interval=0.01)
        sampler.start()
        await asyncio.sleep(0.05)
        await sampler.stop()
        stored = len(store)
        await asyncio.sleep(0.05)
        assert len(store) == stored
