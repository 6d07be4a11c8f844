"""Tests for metrics computation."""

import pytest

from idbench.metrics.latency import compute_stats, percentile, summarize


class TestPercentile:
    """Tests for percentile computation."""

    def test_percentile_empty(self) -> None:
        """Test percentile of empty list."""
        assert percentile([], 50) == 0.0

    def test_percentile_single(self) -> None:
        """Test percentile of single element."""
        assert percentile([10.0], 50) == 10.0
        assert percentile([10.0], 99) == 10.0

    def test_percentile_median(self) -> None:
        """Test median calculation."""
        data = sorted([1.0, 2.0, 3.0, 4.0, 5.0])
        assert percentile(data, 50) == 3.0

    def test_percentile_interpolates(self) -> None:
        """Values between ranks are linearly interpolated."""
        assert percentile([0.0, 10.0], 25) == 2.5

    def test_percentile_p95(self) -> None:
        """Test p95 calculation."""
        data = [float(x) for x in range(1, 101)]
        p95 = percentile(data, 95)
        assert 94.0 <= p95 <= 96.0


class TestComputeStats:
    """Tests for compute_stats function."""

    def test_empty_values(self) -> None:
        """Test with empty values."""
        stats = compute_stats([])
        assert stats["mean"] == 0.0
        assert stats["p50"] == 0.0

    def test_single_value(self) -> None:
        """Test with single value."""
        stats = compute_stats([42.0])
        assert stats["mean"] == 42.0
        assert stats["p50"] == 42.0
        assert stats["stddev"] == 0.0

    def test_multiple_values(self) -> None:
        """Test with multiple values."""
        stats = compute_stats([50.0, 10.0, 30.0, 20.0, 40.0])
        assert stats["mean"] == 30.0
        assert stats["p50"] == 30.0
        assert stats["min"] == 10.0
        assert stats["max"] == 50.0


class TestSummarize:
    """Tests for per-row summaries."""

    def test_converts_to_microseconds(self) -> None:
        """Nanosecond samples are reported in microseconds."""
        summary = summarize("local OID", [1_000, 2_000, 3_000])
        assert summary.label == "local OID"
        assert summary.sample_count == 3
        assert summary.mean_us == 2.0
        assert summary.p50_us == 2.0
        assert summary.min_us == 1.0
        assert summary.max_us == 3.0

    def test_to_dict_keys(self) -> None:
        """Serialized summary carries the CSV columns."""
        data = summarize("x", [500]).to_dict()
        assert set(data) == {
            "label", "count", "mean_us", "p50_us", "p95_us",
            "p99_us", "min_us", "max_us", "stddev_us",
        }

    def test_empty_samples_raises(self) -> None:
        """Test that an empty series raises ValueError."""
        with pytest.raises(ValueError, match="No samples"):
            summarize("empty", [])
