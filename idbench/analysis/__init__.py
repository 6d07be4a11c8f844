"""Result output."""

from idbench.analysis.results import ResultWriter, load_results_csv, write_summary_csv

__all__ = ["ResultWriter", "load_results_csv", "write_summary_csv"]
