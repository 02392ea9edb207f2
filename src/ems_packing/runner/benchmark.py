"""Multi-run strategy benchmark.

Every run generates ONE synthetic item set and packs it with every
strategy, so all strategies are compared on exactly the same scenario.
The loop yields to the event loop after each run.
"""

from __future__ import annotations

import asyncio
import logging
import random
import time
from dataclasses import dataclass, field

from ems_packing.algorithms.generator import generate_items
from ems_packing.algorithms.placement import (
    PackingStrategy,
    WeightingHeuristic,
    run_to_completion,
)
from ems_packing.config import GeneratorConfig
from ems_packing.core.models import Dimensions
from ems_packing.monitoring.metrics import (
    AggregatedStats,
    SimulationResult,
    aggregate_results,
    summarize_state,
)
from ems_packing.monitoring.telegram_notifier import (
    format_benchmark_start,
    format_benchmark_summary,
    send_telegram,
)

logger = logging.getLogger(__name__)


@dataclass
class BenchmarkReport:
    """Raw per-run results plus per-strategy aggregates."""

    results: list[SimulationResult] = field(default_factory=list)
    stats: list[AggregatedStats] = field(default_factory=list)
    runtime_seconds: float = 0.0


async def run_benchmark(
    container_dims: Dimensions,
    generator_config: GeneratorConfig,
    min_support: float,
    runs: int = 10,
    heuristic: WeightingHeuristic = WeightingHeuristic.VOLUME,
    strategies: list[PackingStrategy] | None = None,
    rng: random.Random | None = None,
    notify: bool = False,
) -> BenchmarkReport:
    """Benchmark strategies over *runs* generated item sets.

    Args:
        container_dims: Container extents.
        generator_config: Item generation settings.
        min_support: Support threshold for every run.
        runs: Number of generated item sets.
        heuristic: Weighting heuristic passed to every run.
        strategies: Strategies to compare (default: all).
        rng: Random source for item generation.
        notify: Send Telegram start/summary messages.

    Returns:
        BenchmarkReport with results sorted per strategy by average utilization.
    """
    rng = rng or random.Random()
    strategies = list(strategies or PackingStrategy)
    names = [s.value for s in strategies]
    started = time.perf_counter()

    if notify:
        await send_telegram(format_benchmark_start(
            runs, generator_config.max_items, names, container_dims.as_tuple(),
        ))

    report = BenchmarkReport()
    for run in range(runs):
        items = generate_items(container_dims, generator_config, rng=rng)
        for strategy in strategies:
            t0 = time.perf_counter()
            state = run_to_completion(strategy, items, container_dims, min_support, heuristic)
            elapsed_ms = (time.perf_counter() - t0) * 1000
            report.results.append(summarize_state(state, strategy.value, elapsed_ms))

        logger.debug("benchmark run %d/%d done", run + 1, runs)
        await asyncio.sleep(0)

    report.stats = aggregate_results(report.results)
    report.runtime_seconds = time.perf_counter() - started
    logger.info("benchmark finished: %d runs x %d strategies in %.1f s",
                runs, len(strategies), report.runtime_seconds)

    if notify:
        await send_telegram(format_benchmark_summary(report.stats, report.runtime_seconds))

    return report
