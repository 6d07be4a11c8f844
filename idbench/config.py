"""Benchmark configuration.

Reads a YAML file describing the targets and run sizes. Without a file the
built-in defaults apply: one local MongoDB target, 1000 inserts, 1000
lookups.
"""

import hashlib
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from idbench.schemes import IdentifierScheme

DEFAULT_INSERTIONS = 1_000


@dataclass(frozen=True)
class Target:
    """A named database endpoint."""

    name: str
    address: str

    @classmethod
    def from_dict(cls, data: dict) -> "Target":
        try:
            return cls(name=str(data["name"]), address=str(data["address"]))
        except (KeyError, TypeError) as e:
            raise ValueError(f"Invalid target entry {data!r}: needs 'name' and 'address'") from e


@dataclass
class BenchmarkConfig:
    """Configuration for a benchmark run."""

    targets: list[Target]
    insertion_count: int = DEFAULT_INSERTIONS
    retrieval_count: Optional[int] = None  # defaults to insertion_count
    schemes: list[IdentifierScheme] = field(
        default_factory=lambda: list(IdentifierScheme)
    )
    database: str = "id-perf"
    collection: str = "documents"
    warmup_retrievals: int = 0
    seed: Optional[int] = None
    output_path: Path = Path("results.csv")
    summary_path: Optional[Path] = None
    server_selection_timeout_ms: int = 30_000
    extra_args: dict = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.retrieval_count is None:
            self.retrieval_count = self.insertion_count
        self.output_path = Path(self.output_path)
        if self.summary_path is not None:
            self.summary_path = Path(self.summary_path)
        self.validate()

    def validate(self) -> None:
        """Reject configurations that cannot produce a meaningful run."""
        if not self.targets:
            raise ValueError("At least one target is required")
        names = [t.name for t in self.targets]
        if len(set(names)) != len(names):
            raise ValueError(f"Target names must be unique: {names}")
        if not self.schemes:
            raise ValueError("At least one identifier scheme is required")
        if self.insertion_count < 1:
            raise ValueError(f"insertion_count must be >= 1, got {self.insertion_count}")
        assert self.retrieval_count is not None
        if self.retrieval_count < 1:
            raise ValueError(f"retrieval_count must be >= 1, got {self.retrieval_count}")
        if self.warmup_retrievals < 0:
            raise ValueError(f"warmup_retrievals must be >= 0, got {self.warmup_retrievals}")

    @classmethod
    def from_dict(cls, data: dict) -> "BenchmarkConfig":
        known_fields = {
            "insertion_count",
            "retrieval_count",
            "database",
            "collection",
            "warmup_retrievals",
            "seed",
            "output_path",
            "summary_path",
            "server_selection_timeout_ms",
        }

        if "targets" not in data:
            raise ValueError("Configuration is missing 'targets'")
        targets = [Target.from_dict(t) for t in data["targets"] or []]

        config_kwargs = {k: v for k, v in data.items() if k in known_fields}
        extra_args = {
            k: v for k, v in data.items()
            if k not in known_fields and k not in ("targets", "schemes")
        }
        if "schemes" in data:
            config_kwargs["schemes"] = [
                IdentifierScheme.from_name(s) for s in data["schemes"] or []
            ]

        return cls(targets=targets, **config_kwargs, extra_args=extra_args)

    @classmethod
    def from_yaml(cls, path: Path) -> "BenchmarkConfig":
        """Load configuration from YAML file."""
        with open(path) as f:
            data = yaml.safe_load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a mapping")
        return cls.from_dict(data)

    def to_dict(self) -> dict:
        data = asdict(self)
        data["schemes"] = [s.name.lower() for s in self.schemes]
        data["output_path"] = str(self.output_path)
        data["summary_path"] = str(self.summary_path) if self.summary_path else None
        return data

    def config_hash(self) -> str:
        """Generate a hash of the configuration for reproducibility."""
        config_str = yaml.dump(self.to_dict(), sort_keys=True)
        return hashlib.sha256(config_str.encode()).hexdigest()[:16]


def default_config() -> BenchmarkConfig:
    """Return the built-in configuration."""
    return BenchmarkConfig(
        targets=[Target(name="mongodb local", address="mongodb://localhost:27117")],
        insertion_count=DEFAULT_INSERTIONS,
    )
