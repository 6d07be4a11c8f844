"""Summary statistics over lookup latency series."""

from idbench.metrics.latency import LatencySummary, compute_stats, percentile, summarize

__all__ = [
    "LatencySummary",
    "compute_stats",
    "percentile",
    "summarize",
]
