"""Pytest configuration and fixtures for the gcgraph tests."""

import itertools

import pytest


@pytest.fixture
def test_settings():
    """Settings with no poll delay and a fast sampler."""
    from gcgraph.core.config import Settings
    return Settings(
        poll_delay_seconds=0.0,
        sample_interval_seconds=0.01,
        store_capacity=500,
        initial_scale=1000.0,
    )


@pytest.fixture
def fake_source():
    """Deterministic metric source: ``used`` counts up, ``total`` is twice that."""
    counter = itertools.count(1)

    def source():
        n = next(counter)
        return {"used": n, "total": 2 * n}

    return source


@pytest.fixture
def fake_clock():
    """Clock advancing one time unit per reading, starting at 0."""
    ticks = itertools.count(0)
    return lambda: float(next(ticks))


@pytest.fixture
def context(test_settings, fake_source, fake_clock):
    """Dashboard context wired to the fake source and clock."""
    from gcgraph.core.dependencies import DashboardContext
    return DashboardContext(config=test_settings, source=fake_source, clock=fake_clock)


@pytest.fixture
def client(context):
    """Test client that does not run the lifespan, so the sampler stays idle."""
    from fastapi.testclient import TestClient
    from gcgraph.graph_service import create_app
    return TestClient(create_app(context))
