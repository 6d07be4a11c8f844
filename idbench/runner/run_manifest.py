"""Generate run manifest with environment metadata.

Captures:
- timestamp
- git_sha
- pymongo_version, python_version, platform
- config_hash and targets (names only; addresses may carry credentials)
"""
import json
import platform
import subprocess
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import pymongo

from idbench.config import BenchmarkConfig


def get_git_sha() -> str:
    """Get current git commit SHA."""
    try:
        result = subprocess.run(
            ["git", "rev-parse", "HEAD"],
            capture_output=True,
            text=True,
            timeout=5,
        )
        return result.stdout.strip() if result.returncode == 0 else "unknown"
    except (OSError, subprocess.SubprocessError):
        return "unknown"


def generate_manifest(config: BenchmarkConfig) -> dict[str, Any]:
    """Generate complete run manifest."""
    return {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "git_sha": get_git_sha(),
        "pymongo_version": pymongo.version,
        "python_version": platform.python_version(),
        "platform": platform.platform(),
        "config_hash": config.config_hash(),
        "targets": [t.name for t in config.targets],
        "schemes": [s.label for s in config.schemes],
        "insertion_count": config.insertion_count,
        "retrieval_count": config.retrieval_count,
        "warmup_retrievals": config.warmup_retrievals,
        "seed": config.seed,
    }


def save_manifest(output_path: Path, config: BenchmarkConfig) -> dict[str, Any]:
    """Generate and save manifest to file."""
    manifest = generate_manifest(config)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w") as f:
        json.dump(manifest, f, indent=2)
    return manifest
