"""Placement policy, synthetic item generator and annealing optimizer."""

from .annealing import AnnealingRecord, OptimizationResult, optimize, optimize_sync
from .generator import generate_items, load_items, save_items
from .placement import (
    ORDERING_STRATEGIES,
    PackingStrategy,
    WeightingHeuristic,
    initial_state,
    run_to_completion,
    sort_items,
    step,
)

__all__ = [
    "PackingStrategy",
    "WeightingHeuristic",
    "ORDERING_STRATEGIES",
    "initial_state",
    "run_to_completion",
    "sort_items",
    "step",
    "generate_items",
    "load_items",
    "save_items",
    "AnnealingRecord",
    "OptimizationResult",
    "optimize",
    "optimize_sync",
]
