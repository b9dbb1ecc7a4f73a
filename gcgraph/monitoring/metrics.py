"""Prometheus metrics for monitoring."""

from prometheus_client import Counter, Histogram

samples_total = Counter("gcgraph_samples_total",
                        "Total number of sampler ticks stored")
sample_errors_total = Counter(
    "gcgraph_sample_errors_total", "Total number of failed sampler ticks")

polls_total = Counter("gcgraph_polls_total",
                      "Total number of update payloads served")
render_duration_seconds = Histogram(
    "gcgraph_render_duration_seconds", "Time spent rendering a payload", buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5])

scale_changes_total = Counter(
    "gcgraph_scale_changes_total", "Total number of accepted window scale changes")
scale_requests_ignored_total = Counter(
    "gcgraph_scale_requests_ignored_total", "Total number of ignored window scale requests")
