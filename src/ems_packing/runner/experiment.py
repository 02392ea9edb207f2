"""Command-line runner for packing experiments.

Sub-commands:
    generate   write a synthetic item set to JSON
    pack       pack an item set with one strategy
    optimize   simulated annealing over an item set
    benchmark  compare all strategies over generated item sets

Examples:
    ems-pack generate --seed 7 --output datasets/items.json
    ems-pack pack --items datasets/items.json --strategy ffd --output out/state.json
    ems-pack optimize --items datasets/items.json --iterations 300
    ems-pack benchmark --config settings.yaml --runs 20 --output-dir results
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import random
import sys
from datetime import datetime
from pathlib import Path
from typing import Any

from ems_packing.algorithms.annealing import optimize
from ems_packing.algorithms.generator import generate_items, load_items, save_items
from ems_packing.algorithms.placement import PackingStrategy, run_to_completion
from ems_packing.config import SimulatorSettings, load_settings, parse_settings
from ems_packing.core.models import Item
from ems_packing.errors import ConfigurationError
from ems_packing.monitoring.metrics import (
    export_to_csv,
    export_to_json,
    format_summary,
    summarize_state,
)
from ems_packing.monitoring.telegram_notifier import (
    format_error,
    format_optimization_summary,
    send_telegram,
)
from ems_packing.runner.benchmark import run_benchmark

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ems-pack",
        description="3D bin packing with Empty Maximal Spaces",
    )
    parser.add_argument("--config", help="YAML settings file")
    parser.add_argument("--seed", type=int, help="Random seed (overrides settings)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="Generate a synthetic item set")
    gen.add_argument("--items-count", type=int, help="Target number of items")
    gen.add_argument("--output", required=True, help="Dataset JSON path")

    pack = sub.add_parser("pack", help="Pack an item set")
    pack.add_argument("--items", help="Dataset JSON (generated when omitted)")
    pack.add_argument("--strategy", choices=[s.value for s in PackingStrategy])
    pack.add_argument("--min-support", type=float)
    pack.add_argument("--output", help="Write the final state as JSON")

    opt = sub.add_parser("optimize", help="Simulated annealing over an item set")
    opt.add_argument("--items", help="Dataset JSON (generated when omitted)")
    opt.add_argument("--iterations", type=int)
    opt.add_argument("--min-support", type=float)
    opt.add_argument("--output", help="Write the result as JSON")
    opt.add_argument("--notify", action="store_true", help="Send a Telegram summary")

    bench = sub.add_parser("benchmark", help="Compare strategies")
    bench.add_argument("--runs", type=int)
    bench.add_argument("--min-support", type=float)
    bench.add_argument("--output-dir", default="results", help="Directory for JSON/CSV")
    bench.add_argument("--notify", action="store_true", help="Send Telegram updates")

    return parser


def resolve_settings(args: argparse.Namespace) -> SimulatorSettings:
    """Settings file plus command-line overrides, validated together."""
    data: dict[str, Any] = load_settings(args.config).model_dump()
    if args.seed is not None:
        data["seed"] = args.seed
    if getattr(args, "items_count", None) is not None:
        data["generator"]["max_items"] = args.items_count
    if getattr(args, "iterations", None) is not None:
        data["generator"]["sa_iterations"] = args.iterations
    if getattr(args, "strategy", None) is not None:
        data["packing"]["strategy"] = args.strategy
    if getattr(args, "min_support", None) is not None:
        data["packing"]["min_support"] = args.min_support
    if getattr(args, "runs", None) is not None:
        data["benchmark"]["runs"] = args.runs
    if args.command == "benchmark" and args.notify:
        data["benchmark"]["notify"] = True
    return parse_settings(data)


def _items_for(args: argparse.Namespace, settings: SimulatorSettings, rng: random.Random) -> list[Item]:
    if getattr(args, "items", None):
        return load_items(args.items)
    return generate_items(settings.generator.container_dims, settings.generator, rng=rng)


def _write_json(path: str, data: dict) -> None:
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    with out.open("w") as f:
        json.dump(data, f, indent=2)
    print(f"Saved {out}")


def cmd_generate(args: argparse.Namespace, settings: SimulatorSettings, rng: random.Random) -> int:
    items = generate_items(settings.generator.container_dims, settings.generator, rng=rng)
    save_items(items, args.output, params={
        "seed": settings.seed,
        "max_items": settings.generator.max_items,
        "min_side_len": settings.generator.min_side_len,
        "container": settings.generator.container_dims.to_dict(),
    })
    print(f"Generated {len(items)} items -> {args.output}")
    return 0


def cmd_pack(args: argparse.Namespace, settings: SimulatorSettings, rng: random.Random) -> int:
    items = _items_for(args, settings, rng)
    strategy = settings.packing.strategy
    state = run_to_completion(
        strategy, items, settings.generator.container_dims,
        settings.packing.min_support, settings.packing.heuristic,
    )
    result = summarize_state(state, strategy.value)
    print(
        f"{strategy.label}: packed {result.packed_count}/{result.total_items} items, "
        f"utilization {result.utilization:.2f}%, avg support {result.avg_support:.1f}%, "
        f"{len(state.ems_list)} active EMS"
    )
    if args.output:
        _write_json(args.output, state.to_dict())
    return 0


async def cmd_optimize(args: argparse.Namespace, settings: SimulatorSettings, rng: random.Random) -> int:
    iterations = settings.generator.sa_iterations
    if iterations < 1:
        raise ConfigurationError("Simulated annealing needs at least one iteration")

    items = _items_for(args, settings, rng)
    result = await optimize(
        items, settings.generator.container_dims, iterations,
        settings.packing.min_support, rng=rng,
    )
    summary = format_optimization_summary(
        iterations, result.initial_utilization, result.best_utilization,
    )
    print(summary)
    if args.output:
        _write_json(args.output, result.to_dict())
    if args.notify:
        await send_telegram(summary)
    return 0


async def cmd_benchmark(args: argparse.Namespace, settings: SimulatorSettings, rng: random.Random) -> int:
    try:
        report = await run_benchmark(
            settings.generator.container_dims,
            settings.generator,
            settings.packing.min_support,
            runs=settings.benchmark.runs,
            heuristic=settings.packing.heuristic,
            rng=rng,
            notify=settings.benchmark.notify,
        )
    except Exception as exc:
        if settings.benchmark.notify:
            await send_telegram(format_error(
                type(exc).__name__, str(exc),
                {"runs": settings.benchmark.runs, "seed": settings.seed},
            ))
        raise
    print(format_summary(report.stats, title=f"Benchmark ({settings.benchmark.runs} runs)"))

    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    out_dir = Path(args.output_dir)
    export_to_json(report.stats, out_dir / f"benchmark_{stamp}.json", results=report.results)
    export_to_csv(report.results, out_dir / f"benchmark_{stamp}_runs.csv")
    print(f"Saved results to {out_dir}")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``ems-pack`` console script."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = resolve_settings(args)
        rng = random.Random(settings.seed)
        if args.command == "generate":
            return cmd_generate(args, settings, rng)
        if args.command == "pack":
            return cmd_pack(args, settings, rng)
        if args.command == "optimize":
            return asyncio.run(cmd_optimize(args, settings, rng))
        return asyncio.run(cmd_benchmark(args, settings, rng))
    except ConfigurationError as exc:
        logger.error("invalid configuration: %s", exc)
        return 2


if __name__ == "__main__":
    sys.exit(main())
