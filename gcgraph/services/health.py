"""Health checks for the dashboard components."""

import time
from typing import Any, Dict

from gcgraph.services.sample_store import SampleStore
from gcgraph.services.sampler import Sampler

# A sampler whose last sample is older than this many intervals is stale.
STALE_INTERVALS = 50


def check_sampler(sampler: Sampler) -> Dict[str, Any]:
    """
    Check that the sampler runs and produces fresh samples.

    Args:
        sampler: Sampler instance.

    Returns:
        Health status dictionary.
    """
    if not sampler.running:
        return {"status": "unhealthy", "error": "Not running", "samples_taken": sampler.samples_taken}

    if sampler.last_sample_at is None:
        return {"status": "unhealthy", "error": "No samples yet", "samples_taken": 0}

    age = time.time() - sampler.last_sample_at
    if age > sampler.interval * STALE_INTERVALS:
        return {
            "status": "unhealthy",
            "error": f"Last sample {age:.1f}s ago",
            "samples_taken": sampler.samples_taken,
        }

    return {
        "status": "healthy",
        "last_sample_age_ms": round(age * 1000, 2),
        "samples_taken": sampler.samples_taken,
        "errors": sampler.errors,
    }


def check_store(store: SampleStore) -> Dict[str, Any]:
    """
    Check that the sample store holds data.

    Args:
        store: SampleStore instance.

    Returns:
        Health status dictionary.
    """
    sizes = store.sizes()
    if not any(sizes.values()):
        return {"status": "empty", "series": sizes, "capacity": store.capacity}
    return {"status": "healthy", "series": sizes, "capacity": store.capacity}
