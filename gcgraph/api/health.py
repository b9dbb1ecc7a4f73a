"""Health check utilities."""

from typing import Dict

from gcgraph.core.dependencies import DashboardContext
from gcgraph.services.health import check_sampler, check_store


def check_all_components(context: DashboardContext) -> Dict:
    """
    Check all dashboard components.

    Args:
        context: Dashboard context.

    Returns:
        Dictionary with overall status and individual component statuses.
    """
    components = {}
    overall_status = "healthy"

    sampler_status = check_sampler(context.sampler)
    components["sampler"] = sampler_status
    if sampler_status.get("status") != "healthy":
        overall_status = "unhealthy"

    store_status = check_store(context.store)
    components["store"] = store_status
    if store_status.get("status") == "unhealthy":
        overall_status = "unhealthy"

    return {"status": overall_status, "components": components}


def check_readiness(context: DashboardContext) -> Dict:
    """
    Check dashboard readiness.

    Args:
        context: Dashboard context.

    Returns:
        Readiness status dictionary.
    """
    sampler_ready = context.sampler.running
    store_ready = check_store(context.store).get("status") == "healthy"
    return {
        "ready": sampler_ready and store_ready,
        "sampler": sampler_ready,
        "store": store_ready,
    }
