"""Metrics tracking and export for packing runs.

Provides dataclasses for per-run results and per-strategy aggregates, and
utilities for exporting them to JSON and CSV formats.
"""

from __future__ import annotations

import csv
import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

import numpy as np

from ems_packing.core.models import PackingState


@dataclass
class SimulationResult:
    """Metrics for a single packing run.

    Attributes:
        strategy: Strategy name used for packing.
        utilization: Volume utilization percentage (0-100).
        packed_count: Number of items placed.
        total_items: Number of items offered to the run.
        avg_support: Mean support ratio of placed items, as a percentage.
        time_taken_ms: Wall-clock time of the run in milliseconds.
    """

    strategy: str
    utilization: float
    packed_count: int
    total_items: int
    avg_support: float
    time_taken_ms: float

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary.

        Example:
            >>> r = SimulationResult("ffd", 81.5, 27, 30, 96.0, 4.2)
            >>> r.to_dict()["packed_count"]
            27
        """
        return asdict(self)


@dataclass
class AggregatedStats:
    """Aggregate metrics of one strategy over several runs.

    Attributes:
        strategy: Strategy name.
        runs: Number of runs aggregated.
        avg_utilization: Mean utilization percentage.
        avg_packed_count: Mean number of items placed.
        avg_support: Mean of the per-run average support percentages.
        avg_time_ms: Mean run time in milliseconds.
        best_utilization: Highest utilization percentage of any run.
    """

    strategy: str
    runs: int
    avg_utilization: float
    avg_packed_count: float
    avg_support: float
    avg_time_ms: float
    best_utilization: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def summarize_state(
    state: PackingState,
    strategy: str,
    elapsed_ms: float = 0.0,
) -> SimulationResult:
    """Build a SimulationResult from a finished packing state.

    Args:
        state: Final state of a run.
        strategy: Strategy name to record.
        elapsed_ms: Run time in milliseconds.

    Returns:
        SimulationResult with percentages in 0-100.
    """
    total = len(state.packed_items) + len(state.items_to_pack) + len(state.unpacked_items)
    return SimulationResult(
        strategy=strategy,
        utilization=state.utilization * 100,
        packed_count=len(state.packed_items),
        total_items=total,
        avg_support=state.average_support * 100,
        time_taken_ms=elapsed_ms,
    )


def aggregate_results(results: list[SimulationResult]) -> list[AggregatedStats]:
    """Group results by strategy and aggregate them.

    Strategies keep their first-seen order before sorting; the returned list
    is sorted by average utilization, best first.

    Args:
        results: Per-run results, any strategy mix.

    Returns:
        One AggregatedStats per strategy.
    """
    grouped: dict[str, list[SimulationResult]] = {}
    for result in results:
        grouped.setdefault(result.strategy, []).append(result)

    aggregated = []
    for strategy, runs in grouped.items():
        utilizations = np.array([r.utilization for r in runs], dtype=np.float64)
        aggregated.append(AggregatedStats(
            strategy=strategy,
            runs=len(runs),
            avg_utilization=float(np.mean(utilizations)),
            avg_packed_count=float(np.mean([r.packed_count for r in runs])),
            avg_support=float(np.mean([r.avg_support for r in runs])),
            avg_time_ms=float(np.mean([r.time_taken_ms for r in runs])),
            best_utilization=float(np.max(utilizations)),
        ))

    aggregated.sort(key=lambda s: s.avg_utilization, reverse=True)
    return aggregated


def export_to_json(
    stats: list[AggregatedStats],
    output_path: Path | str,
    results: list[SimulationResult] | None = None,
) -> None:
    """Export aggregated statistics (and optionally raw runs) to JSON.

    Args:
        stats: Aggregated statistics to export.
        output_path: Path to output JSON file.
        results: If given, per-run results are included under "runs".
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    data: dict[str, Any] = {"strategies": [s.to_dict() for s in stats]}
    if results is not None:
        data["runs"] = [r.to_dict() for r in results]

    with output_path.open("w") as f:
        json.dump(data, f, indent=2)


CSV_FIELDS = [
    "strategy", "utilization", "packed_count", "total_items",
    "avg_support", "time_taken_ms",
]


def export_to_csv(results: list[SimulationResult], output_path: Path | str) -> None:
    """Export per-run results to CSV (header only when empty).

    Args:
        results: Per-run results.
        output_path: Path to output CSV file.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with output_path.open("w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=CSV_FIELDS)
        writer.writeheader()
        for result in results:
            writer.writerow(result.to_dict())


def format_summary(stats: list[AggregatedStats], title: str = "Benchmark") -> str:
    """Generate a human-readable table of aggregated statistics.

    Args:
        stats: Aggregated statistics, typically from ``aggregate_results``.
        title: Heading line.

    Returns:
        Formatted multi-line summary string.

    Example:
        >>> s = AggregatedStats("ffd", 5, 80.0, 27.0, 95.0, 3.1, 84.2)
        >>> "ffd" in format_summary([s])
        True
    """
    lines = [
        "=" * 72,
        title,
        "=" * 72,
        f"{'Strategy':<22}{'Runs':>6}{'Avg util':>11}{'Best':>9}"
        f"{'Packed':>9}{'Support':>9}{'ms':>6}",
        "-" * 72,
    ]
    for s in stats:
        lines.append(
            f"{s.strategy:<22}{s.runs:>6}{s.avg_utilization:>10.2f}%"
            f"{s.best_utilization:>8.2f}%{s.avg_packed_count:>9.1f}"
            f"{s.avg_support:>8.1f}%{s.avg_time_ms:>6.1f}"
        )
    lines.append("=" * 72)
    return "\n".join(lines)
