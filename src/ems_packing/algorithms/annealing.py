"""
Simulated annealing over item orderings and rotations.

Each candidate solution is an ordered list of (possibly rotated) items.
Its energy is ``1 - utilization`` of a First Fit ``run_to_completion``,
so the packer is used purely as a black-box fitness oracle.

Moves (equal probability):
    swap     — exchange two randomly chosen positions
    rotate   — give one random item a new random rotation 0-5

Acceptance follows the Metropolis criterion: better neighbours are always
accepted, worse ones with probability ``exp((E_cur - E_new) / T)``.
The temperature starts at 1.0 and decays geometrically by 0.99 after
every iteration.  The best solution is tracked apart from the current one
because the walk can move to worse states.

The loop is a coroutine that awaits ``asyncio.sleep(0)`` every
``YIELD_EVERY`` iterations, so a host event loop stays responsive during
long runs.  ``optimize_sync`` runs it to completion for synchronous code.
"""

import asyncio
import logging
import math
import random
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from ems_packing.algorithms.placement import PackingStrategy, run_to_completion
from ems_packing.core.models import Dimensions, Item

logger = logging.getLogger(__name__)


INITIAL_TEMPERATURE: float = 1.0
COOLING_RATE: float = 0.99
YIELD_EVERY: int = 25


@dataclass(frozen=True)
class AnnealingRecord:
    """
    One iteration of the annealing walk.

    Attributes:
        iteration:        0-based iteration index.
        utilization:      Utilization (%) of the current solution after
                          the acceptance decision.
        temperature:      Temperature after cooling.
        accepted:         Whether the neighbour replaced the current solution.
        best_utilization: Best utilization (%) seen so far.
    """
    iteration: int
    utilization: float
    temperature: float
    accepted: bool
    best_utilization: float

    def to_dict(self) -> dict:
        return {
            "iteration": self.iteration,
            "utilization": self.utilization,
            "temperature": self.temperature,
            "accepted": self.accepted,
            "best_utilization": self.best_utilization,
        }


@dataclass
class OptimizationResult:
    """Best item sequence found plus the per-iteration history."""
    items: List[Item]
    history: List[AnnealingRecord] = field(default_factory=list)
    initial_utilization: float = 0.0
    best_utilization: float = 0.0

    def to_dict(self) -> dict:
        return {
            "items": [item.to_dict() for item in self.items],
            "history": [r.to_dict() for r in self.history],
            "initial_utilization": self.initial_utilization,
            "best_utilization": self.best_utilization,
        }


def energy(items: Sequence[Item], container_dims: Dimensions, min_support: float) -> float:
    """``1 - packed_volume / container_volume`` of a First Fit pack."""
    state = run_to_completion(PackingStrategy.FIRST_FIT, items, container_dims, min_support)
    return 1.0 - state.packed_volume / container_dims.volume


def neighbour(items: Sequence[Item], rng: random.Random) -> List[Item]:
    """A new solution one swap or one rotation away from *items*."""
    candidate = list(items)
    if rng.random() < 0.5:
        i = rng.randrange(len(candidate))
        j = rng.randrange(len(candidate))
        candidate[i], candidate[j] = candidate[j], candidate[i]
    else:
        i = rng.randrange(len(candidate))
        candidate[i] = candidate[i].with_rotation(rng.randrange(6))
    return candidate


async def optimize(
    items: Sequence[Item],
    container_dims: Dimensions,
    iterations: int,
    min_support: float,
    rng: Optional[random.Random] = None,
) -> OptimizationResult:
    """
    Search item orderings/rotations that maximise First Fit utilization.

    Args:
        items:          Starting solution.
        container_dims: Container extents.
        iterations:     Number of annealing iterations.
        min_support:    Support threshold passed to every fitness pack.
        rng:            Random source (seed it for reproducible runs).

    Returns:
        ``OptimizationResult`` with the best items seen and one
        ``AnnealingRecord`` per iteration.
    """
    rng = rng or random.Random()
    current = list(items)
    if not current or iterations <= 0:
        util = (1.0 - energy(current, container_dims, min_support)) * 100 if current else 0.0
        return OptimizationResult(items=current, initial_utilization=util, best_utilization=util)

    current_energy = energy(current, container_dims, min_support)
    best, best_energy = list(current), current_energy
    initial_utilization = (1.0 - current_energy) * 100
    temperature = INITIAL_TEMPERATURE
    history: List[AnnealingRecord] = []

    logger.info(
        "annealing %d items for %d iterations (start %.2f%%)",
        len(current), iterations, initial_utilization,
    )

    for iteration in range(iterations):
        if iteration % YIELD_EVERY == 0:
            await asyncio.sleep(0)
            if iteration:
                logger.debug(
                    "iteration %d: T=%.4f current %.2f%% best %.2f%%",
                    iteration, temperature,
                    (1.0 - current_energy) * 100, (1.0 - best_energy) * 100,
                )

        candidate = neighbour(current, rng)
        candidate_energy = energy(candidate, container_dims, min_support)

        accepted = (
            candidate_energy < current_energy
            or math.exp((current_energy - candidate_energy) / temperature) > rng.random()
        )
        if accepted:
            current, current_energy = candidate, candidate_energy
            if current_energy < best_energy:
                best, best_energy = list(current), current_energy

        temperature *= COOLING_RATE
        history.append(AnnealingRecord(
            iteration=iteration,
            utilization=(1.0 - current_energy) * 100,
            temperature=temperature,
            accepted=accepted,
            best_utilization=(1.0 - best_energy) * 100,
        ))

    logger.info(
        "annealing finished: %.2f%% -> %.2f%%",
        initial_utilization, (1.0 - best_energy) * 100,
    )
    return OptimizationResult(
        items=best,
        history=history,
        initial_utilization=initial_utilization,
        best_utilization=(1.0 - best_energy) * 100,
    )


def optimize_sync(
    items: Sequence[Item],
    container_dims: Dimensions,
    iterations: int,
    min_support: float,
    rng: Optional[random.Random] = None,
) -> OptimizationResult:
    """Run ``optimize`` on a fresh event loop and return its result."""
    return asyncio.run(optimize(items, container_dims, iterations, min_support, rng))
