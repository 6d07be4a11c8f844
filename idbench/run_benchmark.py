#!/usr/bin/env python3
"""Run the ObjectId vs UUID lookup benchmark against the configured targets."""

import argparse
import asyncio
import dataclasses
import sys
from pathlib import Path
from typing import Optional

from idbench.analysis.results import ResultWriter, write_summary_csv
from idbench.config import BenchmarkConfig, default_config
from idbench.errors import BenchmarkError
from idbench.metrics.latency import summarize
from idbench.runner.run_manifest import save_manifest
from idbench.runner.runner import BenchmarkRunner, ResultRow


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Compare document lookup latency for ObjectId and UUID keys"
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to YAML configuration file (default: built-in local target)",
    )
    parser.add_argument("--output", type=Path, help="Override raw results CSV path")
    parser.add_argument("--summary", type=Path, help="Also write a summary CSV here")
    parser.add_argument("--manifest", type=Path, help="Write run manifest JSON here")
    parser.add_argument("--insertions", type=int, help="Override insertion count")
    parser.add_argument("--retrievals", type=int, help="Override retrieval count")
    parser.add_argument("--warmup", type=int, help="Untimed lookups before each timed series")
    parser.add_argument("--seed", type=int, help="Seed for identifier sampling")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the planned passes without connecting",
    )
    return parser.parse_args(argv)


def load_config(args: argparse.Namespace) -> BenchmarkConfig:
    """Build the run configuration from the file and CLI overrides."""
    config = BenchmarkConfig.from_yaml(args.config) if args.config else default_config()

    overrides = {
        "output_path": args.output,
        "summary_path": args.summary,
        "insertion_count": args.insertions,
        "retrieval_count": args.retrievals,
        "warmup_retrievals": args.warmup,
        "seed": args.seed,
    }
    overrides = {k: v for k, v in overrides.items() if v is not None}
    # Retrievals track insertions unless the config separates them.
    if (
        args.insertions is not None
        and args.retrievals is None
        and config.retrieval_count == config.insertion_count
    ):
        overrides["retrieval_count"] = args.insertions
    return dataclasses.replace(config, **overrides)


def print_summary(rows: list[ResultRow]) -> None:
    sep = "=" * 60
    print(f"\n{sep}")
    print("LOOKUP LATENCY (microseconds)")
    print(sep)
    for row in rows:
        s = summarize(row.label, row.samples_ns)
        print(f"{s.label:<32} p50 {s.p50_us:9.1f}  p95 {s.p95_us:9.1f}  "
              f"p99 {s.p99_us:9.1f}  n={s.sample_count}")


async def run(config: BenchmarkConfig) -> list[ResultRow]:
    runner = BenchmarkRunner(config)
    return await runner.run()


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    if args.config is not None and not args.config.exists():
        print(f"Error: Config file not found: {args.config}", file=sys.stderr)
        return 1

    try:
        config = load_config(args)
    except ValueError as e:
        print(f"Error: Invalid configuration: {e}", file=sys.stderr)
        return 1

    print(f"Config Hash: {config.config_hash()}")
    print(f"Insertions: {config.insertion_count}  Retrievals: {config.retrieval_count}")
    for target in config.targets:
        for scheme in config.schemes:
            print(f"  - {target.name} {scheme.label}")

    if args.dry_run:
        print("\n[Dry run - not executing]")
        return 0

    if args.manifest:
        save_manifest(args.manifest, config)
        print(f"Saved manifest to {args.manifest}")

    try:
        rows = asyncio.run(run(config))
    except BenchmarkError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    output = ResultWriter(config.output_path).write(rows)
    print(f"\nResults saved to {output}")

    if config.summary_path:
        write_summary_csv(rows, config.summary_path)
        print(f"Summary saved to {config.summary_path}")

    print_summary(rows)
    return 0


if __name__ == "__main__":
    sys.exit(main())
