"""Metric sources and clocks feeding the sampler."""

import gc
import math
import os
import sys
import time
from typing import Callable, Dict, Mapping

from gcgraph.core.exceptions import ConfigurationError, MetricSourceError

MetricSource = Callable[[], Mapping[str, float]]
Clock = Callable[[], float]


def gc_object_counts() -> Dict[str, float]:
    """
    Read the interpreter's allocation counters.

    Returns:
        ``used``: objects tracked by the garbage collector.
        ``total``: memory blocks currently allocated by the interpreter.
    """
    return {
        "used": float(len(gc.get_objects())),
        "total": float(sys.getallocatedblocks()),
    }


METRIC_SOURCES: Dict[str, MetricSource] = {
    "gc": gc_object_counts,
}


def get_metric_source(name: str) -> MetricSource:
    """
    Look up a metric source by name.

    Args:
        name: Registered source name.

    Returns:
        The source callable.

    Raises:
        ConfigurationError: If no source is registered under ``name``.
    """
    try:
        return METRIC_SOURCES[name]
    except KeyError:
        known = ", ".join(sorted(METRIC_SOURCES))
        raise ConfigurationError(
            f"Unknown metric source '{name}' (known: {known})") from None


def cpu_clock() -> float:
    """User CPU time consumed by this process, in seconds."""
    return os.times().user


def wall_clock() -> Clock:
    """Build a clock counting monotonic seconds from its creation."""
    start = time.monotonic()

    def clock() -> float:
        return time.monotonic() - start

    return clock


def get_clock(name: str) -> Clock:
    """
    Build the sample clock named ``name``.

    Raises:
        ConfigurationError: If the clock name is unknown.
    """
    if name == "cpu":
        return cpu_clock
    if name == "wall":
        return wall_clock()
    raise ConfigurationError(f"Unknown sample clock '{name}' (known: cpu, wall)")


def read_values(source: MetricSource) -> Dict[str, float]:
    """
    Call a metric source and coerce its values to floats.

    Args:
        source: Metric source callable.

    Returns:
        Mapping of series name to numeric value.

    Raises:
        MetricSourceError: If the source fails or yields non-numeric or
            non-finite values.
    """
    try:
        values = source()
        numeric = {str(name): float(value) for name, value in values.items()}
    except Exception as e:
        raise MetricSourceError(f"Failed to read metric source: {str(e)}") from e

    non_finite = [name for name, value in numeric.items() if not math.isfinite(value)]
    if non_finite:
        raise MetricSourceError(f"Non-finite value for {', '.join(non_finite)}")
    return numeric
