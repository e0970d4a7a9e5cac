#!/usr/bin/env python3
"""Benchmark every level generator profile."""

from __future__ import annotations

import argparse
import json
import random
import time
from pathlib import Path

from delve import config
from delve.environment.generators import GENERATOR_FACTORIES
from delve.environment.tile_types import TileTypeID
from delve.util.rng import derive_seed


class GeneratorBenchmark:
    """Benchmark runner for the map generators."""

    def __init__(self, iterations: int, depth: int, names: list[str]) -> None:
        self.iterations = iterations
        self.depth = depth
        self.names = names
        self.results: dict[str, dict[str, float]] = {}

    def _run_case(self, name: str) -> tuple[float, float]:
        """Run one generator and return (average ms, average floor tiles)."""
        factory = GENERATOR_FACTORIES[name]
        elapsed_total = 0.0
        floor_total = 0

        for i in range(self.iterations):
            rng = random.Random(derive_seed(config.RANDOM_SEED, f"{name}.{i}"))
            generator = factory(self.depth, rng)
            generator.snapshots.enabled = False

            start = time.perf_counter()
            generator.build_map()
            elapsed_total += time.perf_counter() - start
            floor_total += generator.map.count(TileTypeID.FLOOR)

        return (
            (elapsed_total / self.iterations) * 1000.0,
            floor_total / self.iterations,
        )

    def run(self) -> None:
        """Run all selected generators."""
        print("Level Generator Benchmark")
        print("=" * 56)
        print(f"Iterations per generator: {self.iterations}, depth {self.depth}")
        print()
        print(f"{'Generator':>28} {'Time (ms)':>12} {'Floor':>10}")
        print("-" * 56)

        for name in self.names:
            elapsed_ms, floor = self._run_case(name)
            self.results[name] = {"ms": elapsed_ms, "floor": floor}
            print(f"{name:>28} {elapsed_ms:12.2f} {floor:10.0f}")

    def save_results(self, filename: str) -> None:
        """Save benchmark output to a JSON file."""
        with Path(filename).open("w") as f:
            json.dump(self.results, f, indent=2)
        print(f"\nSaved benchmark results to {filename}")

    def compare_with_baseline(self, baseline_file: str) -> None:
        """Compare current run with a saved baseline JSON file."""
        try:
            with Path(baseline_file).open() as f:
                baseline: dict[str, dict[str, float]] = json.load(f)
        except FileNotFoundError:
            print(f"\nBaseline file not found: {baseline_file}")
            return

        print(f"\nComparison vs baseline: {baseline_file}")
        print("=" * 64)

        for name, current in self.results.items():
            if name not in baseline:
                continue

            old_ms = baseline[name].get("ms", 0.0)
            new_ms = current["ms"]
            if old_ms <= 0:
                continue

            delta_pct = ((new_ms - old_ms) / old_ms) * 100.0
            speed_ratio = old_ms / new_ms if new_ms > 0 else 0.0
            trend = "faster" if speed_ratio > 1.0 else "slower"

            print(
                f"{name:>28}: {new_ms:8.2f}ms "
                f"vs {old_ms:8.2f}ms | {speed_ratio:5.2f}x {trend} "
                f"({delta_pct:+6.1f}%)"
            )


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Benchmark level generators")
    parser.add_argument(
        "--iterations",
        type=int,
        default=5,
        help="Number of runs per generator (default: 5)",
    )
    parser.add_argument(
        "--depth", type=int, default=1, help="Dungeon depth (default: 1)"
    )
    parser.add_argument(
        "--only",
        nargs="+",
        choices=sorted(GENERATOR_FACTORIES),
        help="Benchmark only these generators",
    )
    parser.add_argument("--save", type=str, help="Save current results to JSON")
    parser.add_argument(
        "--compare",
        type=str,
        help="Compare current results against baseline JSON",
    )
    args = parser.parse_args(argv)

    benchmark = GeneratorBenchmark(
        iterations=args.iterations,
        depth=args.depth,
        names=args.only or list(GENERATOR_FACTORIES),
    )
    benchmark.run()

    if args.save:
        benchmark.save_results(args.save)

    if args.compare:
        benchmark.compare_with_baseline(args.compare)


if __name__ == "__main__":
    main()
