"""Tests for configuration parsing."""

import tempfile
from pathlib import Path

import pytest
import yaml

from idbench.config import BenchmarkConfig, Target, default_config
from idbench.schemes import IdentifierScheme


def write_config(data: dict) -> Path:
    with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
        yaml.dump(data, f)
        return Path(f.name)


class TestBenchmarkConfigParsing:
    """Tests for BenchmarkConfig YAML parsing."""

    def test_parse_minimal_config(self) -> None:
        """Test parsing a minimal configuration."""
        config_path = write_config({
            "targets": [{"name": "local", "address": "mongodb://localhost:27017"}],
        })

        try:
            config = BenchmarkConfig.from_yaml(config_path)
            assert config.targets == [Target("local", "mongodb://localhost:27017")]
            # Check defaults
            assert config.insertion_count == 1000
            assert config.retrieval_count == 1000
            assert config.schemes == [IdentifierScheme.OBJECT_ID, IdentifierScheme.UUID]
            assert config.database == "id-perf"
            assert config.collection == "documents"
            assert config.warmup_retrievals == 0
            assert config.output_path == Path("results.csv")
            assert config.summary_path is None
        finally:
            config_path.unlink()

    def test_parse_full_config(self) -> None:
        """Test parsing a full configuration with all fields."""
        config_path = write_config({
            "targets": [
                {"name": "a", "address": "mongodb://a:27017"},
                {"name": "b", "address": "mongodb://b:27017"},
            ],
            "insertion_count": 200,
            "retrieval_count": 50,
            "schemes": ["uuid"],
            "database": "perf",
            "collection": "docs",
            "warmup_retrievals": 3,
            "seed": 7,
            "output_path": "out/raw.csv",
            "summary_path": "out/summary.csv",
            "server_selection_timeout_ms": 5000,
            "notes": "extra key",
        })

        try:
            config = BenchmarkConfig.from_yaml(config_path)
            assert [t.name for t in config.targets] == ["a", "b"]
            assert config.insertion_count == 200
            assert config.retrieval_count == 50
            assert config.schemes == [IdentifierScheme.UUID]
            assert config.database == "perf"
            assert config.collection == "docs"
            assert config.warmup_retrievals == 3
            assert config.seed == 7
            assert config.output_path == Path("out/raw.csv")
            assert config.summary_path == Path("out/summary.csv")
            assert config.server_selection_timeout_ms == 5000
            assert config.extra_args == {"notes": "extra key"}
        finally:
            config_path.unlink()

    def test_config_hash_deterministic(self) -> None:
        """Test that config hash is deterministic."""
        config_path = write_config({
            "targets": [{"name": "local", "address": "mongodb://localhost:27017"}],
        })

        try:
            config1 = BenchmarkConfig.from_yaml(config_path)
            config2 = BenchmarkConfig.from_yaml(config_path)
            assert config1.config_hash() == config2.config_hash()
        finally:
            config_path.unlink()

    def test_config_hash_changes_with_counts(self) -> None:
        """Different run sizes hash differently."""
        base = default_config()
        other = BenchmarkConfig(targets=base.targets, insertion_count=10)
        assert base.config_hash() != other.config_hash()

    def test_missing_targets(self) -> None:
        """A config without targets is rejected."""
        with pytest.raises(ValueError, match="targets"):
            BenchmarkConfig.from_dict({"insertion_count": 10})

    def test_empty_targets(self) -> None:
        """An empty target list is rejected."""
        with pytest.raises(ValueError, match="At least one target"):
            BenchmarkConfig.from_dict({"targets": []})

    def test_target_missing_address(self) -> None:
        """Target entries need both name and address."""
        with pytest.raises(ValueError, match="Invalid target"):
            BenchmarkConfig.from_dict({"targets": [{"name": "x"}]})

    def test_duplicate_target_names(self) -> None:
        """Labels must be unambiguous."""
        with pytest.raises(ValueError, match="unique"):
            BenchmarkConfig(targets=[Target("x", "mock://a"), Target("x", "mock://b")])

    @pytest.mark.parametrize(
        "field,value",
        [("insertion_count", 0), ("retrieval_count", 0), ("warmup_retrievals", -1)],
    )
    def test_invalid_counts(self, field: str, value: int) -> None:
        """Counts outside their valid range are rejected."""
        with pytest.raises(ValueError, match=field):
            BenchmarkConfig(targets=[Target("x", "mock://a")], **{field: value})

    def test_default_config(self) -> None:
        """Built-in configuration points at a local MongoDB."""
        config = default_config()
        assert config.targets[0].name == "mongodb local"
        assert config.targets[0].address == "mongodb://localhost:27117"
        assert config.insertion_count == config.retrieval_count == 1000

    def test_parse_shipped_configs(self) -> None:
        """Test parsing the config files in configs/."""
        for name in ("default.yaml", "smoke.yaml"):
            config_path = Path("configs") / name
            if config_path.exists():
                config = BenchmarkConfig.from_yaml(config_path)
                assert config.targets
