"""Latency metrics computation."""

from dataclasses import dataclass
from typing import Sequence
import statistics

NANOS_PER_MICRO = 1_000


@dataclass
class LatencySummary:
    """Summary of one result row, in microseconds."""

    label: str
    sample_count: int
    mean_us: float
    p50_us: float
    p95_us: float
    p99_us: float
    min_us: float
    max_us: float
    stddev_us: float

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "label": self.label,
            "count": self.sample_count,
            "mean_us": self.mean_us,
            "p50_us": self.p50_us,
            "p95_us": self.p95_us,
            "p99_us": self.p99_us,
            "min_us": self.min_us,
            "max_us": self.max_us,
            "stddev_us": self.stddev_us,
        }


def percentile(data: Sequence[float], p: float) -> float:
    """Compute percentile of a sorted sequence.

    Args:
        data: Sorted sequence of values
        p: Percentile (0-100)

    Returns:
        Value at the given percentile, linearly interpolated
    """
    if not data:
        return 0.0
    k = (len(data) - 1) * (p / 100)
    f = int(k)
    c = f + 1 if f + 1 < len(data) else f
    return data[f] + (k - f) * (data[c] - data[f])


def compute_stats(values: Sequence[float]) -> dict:
    """Compute summary statistics for a sequence of values.

    Args:
        values: Sequence of numeric values

    Returns:
        Dictionary with mean, p50, p95, p99, min, max, stddev
    """
    if not values:
        return {
            "mean": 0.0,
            "p50": 0.0,
            "p95": 0.0,
            "p99": 0.0,
            "min": 0.0,
            "max": 0.0,
            "stddev": 0.0,
        }

    sorted_values = sorted(values)
    return {
        "mean": statistics.mean(values),
        "p50": percentile(sorted_values, 50),
        "p95": percentile(sorted_values, 95),
        "p99": percentile(sorted_values, 99),
        "min": min(values),
        "max": max(values),
        "stddev": statistics.stdev(values) if len(values) > 1 else 0.0,
    }


def summarize(label: str, samples_ns: Sequence[int]) -> LatencySummary:
    """Summarize a raw nanosecond series.

    Raises:
        ValueError: if samples_ns is empty
    """
    if not samples_ns:
        raise ValueError(f"No samples for {label}")

    stats = compute_stats([s / NANOS_PER_MICRO for s in samples_ns])
    return LatencySummary(
        label=label,
        sample_count=len(samples_ns),
        mean_us=stats["mean"],
        p50_us=stats["p50"],
        p95_us=stats["p95"],
        p99_us=stats["p99"],
        min_us=stats["min"],
        max_us=stats["max"],
        stddev_us=stats["stddev"],
    )
