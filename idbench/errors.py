"""Errors raised by a benchmark pass.

None of these are retried: each one aborts the pass it was raised in and,
through the CLI, the whole run.
"""

from typing import Optional


class BenchmarkError(Exception):
    """Base class for failures during a benchmark pass."""

    stage = "benchmark"

    def __init__(self, target: str, scheme: Optional[str] = None, detail: str = ""):
        self.target = target
        self.scheme = scheme
        self.detail = detail
        where = target if scheme is None else f"{target} {scheme}"
        message = f"{self.stage} failed for {where}"
        if detail:
            message += f": {detail}"
        super().__init__(message)


class TargetConnectionError(BenchmarkError):
    """Endpoint unreachable or authentication rejected."""

    stage = "connect"


class ProvisioningError(BenchmarkError):
    """Collection could not be reset."""

    stage = "provision"


class InsertError(BenchmarkError):
    """Bulk insert failed."""

    stage = "insert"


class RetrievalError(BenchmarkError):
    """A lookup query itself failed (a miss is not an error)."""

    stage = "retrieve"
