"""
ems-packing — 3D bin packing with Empty Maximal Spaces.

Public entry points:
    create_container   root EMS of a container
    step               one placement attempt
    run_to_completion  pack a whole item sequence
    optimize           simulated annealing over orderings and rotations
    generate_items     guillotine-cut synthetic item sets
"""

from ems_packing.algorithms.annealing import OptimizationResult, optimize, optimize_sync
from ems_packing.algorithms.generator import generate_items
from ems_packing.algorithms.placement import (
    PackingStrategy,
    WeightingHeuristic,
    run_to_completion,
    step,
)
from ems_packing.config import GeneratorConfig, SimulatorSettings, load_settings
from ems_packing.core.ems import create_container
from ems_packing.core.models import Dimensions, Item, PackingState, PlacedItem, Space

__version__ = "0.1.0"

__all__ = [
    "create_container",
    "step",
    "run_to_completion",
    "optimize",
    "optimize_sync",
    "generate_items",
    "OptimizationResult",
    "PackingStrategy",
    "WeightingHeuristic",
    "GeneratorConfig",
    "SimulatorSettings",
    "load_settings",
    "Dimensions",
    "Item",
    "PackingState",
    "PlacedItem",
    "Space",
]
