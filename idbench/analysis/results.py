"""Write benchmark result rows to CSV."""

import csv
from pathlib import Path
from typing import Sequence

from idbench.metrics.latency import LatencySummary, summarize
from idbench.runner.runner import ResultRow

SUMMARY_FIELDS = [
    "label", "count", "mean_us", "p50_us", "p95_us", "p99_us", "min_us", "max_us", "stddev_us",
]


class ResultWriter:
    """Writes one line per result row: label, then raw nanosecond latencies.

    Values are integers rendered with str(), which never applies locale
    grouping or decimal commas. There is no header row.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def format_row(self, row: ResultRow) -> list[str]:
        return [row.label] + [str(int(ns)) for ns in row.samples_ns]

    def write(self, rows: Sequence[ResultRow]) -> Path:
        """Write all rows in one go and return the output path."""
        lines = [self.format_row(row) for row in rows]
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", newline="") as f:
            writer = csv.writer(f)
            writer.writerows(lines)
        return self.path


def load_results_csv(path: Path) -> list[ResultRow]:
    """Read a file written by ResultWriter back into rows."""
    rows = []
    with open(path, newline="") as f:
        for record in csv.reader(f):
            if not record:
                continue
            rows.append(ResultRow(label=record[0], samples_ns=[int(v) for v in record[1:]]))
    return rows


def write_summary_csv(rows: Sequence[ResultRow], path: Path) -> list[LatencySummary]:
    """Save per-row summary statistics (microseconds) to CSV.

    Args:
        rows: Result rows to summarize
        path: Output CSV path

    Returns:
        The summaries, in row order
    """
    summaries = [summarize(row.label, row.samples_ns) for row in rows]

    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=SUMMARY_FIELDS)
        writer.writeheader()
        writer.writerows(s.to_dict() for s in summaries)
    return summaries
