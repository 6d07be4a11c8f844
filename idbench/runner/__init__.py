"""Benchmark runner components."""

from idbench.runner.runner import BenchmarkRunner, PassState, ResultRow
from idbench.runner.store import MockStore, MongoStore, create_store

__all__ = ["BenchmarkRunner", "PassState", "ResultRow", "MockStore", "MongoStore", "create_store"]
