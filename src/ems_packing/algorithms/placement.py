"""
Placement policy — drives a packing run one item at a time.

Algorithm (one step):
  1. If no items are pending, the run is COMPLETE.
  2. Take the first pending item (FIFO).
  3. Sort active EMSs by floor level (z1), then by volume: the lowest and
     smallest space is tried first, which builds dense, low layers.
  4. The first space the item fits in whose min corner passes the support
     check receives the item; the EMS set is re-partitioned.
  5. If no space qualifies the item is moved to the unpacked list.

Strategies only decide the order of the pending queue before the run:

    FIRST_FIT             input order
    FIRST_FIT_DECREASING  descending volume
    FIRST_FIT_HEIGHT      descending height
    CONFLICT_GRAPH        input order (no distinct behaviour yet)

Usage:
    state = run_to_completion(PackingStrategy.FIRST_FIT_DECREASING,
                              items, Dimensions(5870, 2330, 2200), 0.6)
    print(f"{state.utilization:.1%}")
"""

import logging
from dataclasses import replace
from typing import Callable, Dict, List, Optional, Sequence

from ems_packing.core.ems import create_container, merge_history, update_ems
from ems_packing.core.invariants import check_state
from ems_packing.core.models import (
    Dimensions,
    Item,
    PackingState,
    PackingStrategy,
    PlacedItem,
    WeightingHeuristic,
)
from ems_packing.core.support import SupportResult, calculate_support

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# Queue ordering
# ─────────────────────────────────────────────────────────────────────────────

def input_order(items: Sequence[Item]) -> List[Item]:
    return list(items)


def volume_sorted_order(items: Sequence[Item]) -> List[Item]:
    """Largest volume first (stable for equal volumes)."""
    return sorted(items, key=lambda i: i.volume, reverse=True)


def height_sorted_order(items: Sequence[Item]) -> List[Item]:
    """Tallest first (stable for equal heights)."""
    return sorted(items, key=lambda i: i.dims.height, reverse=True)


# Map of strategies to their ordering functions
ORDERING_STRATEGIES: Dict[PackingStrategy, Callable[[Sequence[Item]], List[Item]]] = {
    PackingStrategy.FIRST_FIT: input_order,
    PackingStrategy.FIRST_FIT_DECREASING: volume_sorted_order,
    PackingStrategy.FIRST_FIT_HEIGHT: height_sorted_order,
    PackingStrategy.CONFLICT_GRAPH: input_order,
}


def sort_items(items: Sequence[Item], strategy: PackingStrategy) -> List[Item]:
    """Order *items* for a run with *strategy*.  Never mutates the input."""
    return ORDERING_STRATEGIES[PackingStrategy(strategy)](items)


# ─────────────────────────────────────────────────────────────────────────────
# State machine
# ─────────────────────────────────────────────────────────────────────────────

def initial_state(
    strategy: PackingStrategy,
    items: Sequence[Item],
    container_dims: Dimensions,
) -> PackingState:
    """Fresh state: one EMS spanning the container, items in strategy order."""
    root = create_container(container_dims)
    return PackingState(
        container_dims=container_dims,
        ems_list=(root,),
        ems_history=(root,),
        items_to_pack=tuple(sort_items(items, strategy)),
        next_ems_id=2,
    )


def _apply_placement(
    state: PackingState,
    item: Item,
    position,
    support: SupportResult,
) -> PackingState:
    """Commit *item* at *position*: new PlacedItem, re-partitioned EMS set."""
    x, y, z = position
    placed = PlacedItem(
        item=item, x=x, y=y, z=z,
        supported_by=support.supporters,
        support_ratio=support.ratio,
    )
    step_index = state.step_count + 1
    update = update_ems(state.ems_list, placed.bounding_box(), step_index, state.next_ems_id)
    remaining = state.items_to_pack[1:]

    logger.debug(
        "step %d: placed %s at (%g, %g, %g), support %.2f, %d active EMS",
        step_index, item.id, x, y, z, support.ratio, len(update.active),
    )
    return replace(
        state,
        packed_items=state.packed_items + (placed,),
        items_to_pack=remaining,
        ems_list=update.active,
        ems_history=merge_history(state.ems_history, update.history),
        step_count=step_index,
        next_ems_id=update.next_id,
        is_complete=not remaining,
    )


def step(
    state: PackingState,
    strategy: PackingStrategy,
    min_support: float,
    heuristic: WeightingHeuristic = WeightingHeuristic.VOLUME,
) -> PackingState:
    """
    Attempt to place the first pending item.

    Args:
        state:       Current state (not modified).
        strategy:    Strategy of the run.  Ordering happens before the run,
                     so it does not influence a single step.
        min_support: Required supported base fraction for stacked items.
        heuristic:   Candidate weighting (currently no effect).

    Returns:
        The next state.  A state without pending items comes back COMPLETE.
    """
    if state.is_complete or not state.items_to_pack:
        return replace(state, is_complete=True)

    item = state.items_to_pack[0]
    for space in sorted(state.ems_list, key=lambda s: (s.z1, s.volume)):
        if not space.can_fit(item.dims):
            continue
        position = (space.x1, space.y1, space.z1)
        support = calculate_support(item.dims, position, state.packed_items, min_support)
        if support.valid:
            return _apply_placement(state, item, position, support)

    remaining = state.items_to_pack[1:]
    logger.debug("item %s does not fit any of %d EMS", item.id, len(state.ems_list))
    return replace(
        state,
        items_to_pack=remaining,
        unpacked_items=state.unpacked_items + (item,),
        is_complete=not remaining,
    )


def run_to_completion(
    strategy: PackingStrategy,
    items: Sequence[Item],
    container_dims: Dimensions,
    min_support: float,
    heuristic: WeightingHeuristic = WeightingHeuristic.VOLUME,
    check_invariants: bool = False,
    on_step: Optional[Callable[[PackingState], None]] = None,
) -> PackingState:
    """
    Pack *items* into a fresh container until nothing is pending.

    Args:
        strategy:         Ordering strategy.
        items:            Items to pack.
        container_dims:   Container extents.
        min_support:      Support threshold in [0, 1].
        heuristic:        Candidate weighting (currently no effect).
        check_invariants: Verify every intermediate state (debug mode);
                          raises ``GeometryInvariantError`` on violation.
        on_step:          Optional callback receiving every new state.

    Returns:
        The final, COMPLETE state.
    """
    state = initial_state(strategy, items, container_dims)
    while not state.is_complete:
        state = step(state, strategy, min_support, heuristic)
        if check_invariants:
            check_state(state, min_support)
        if on_step is not None:
            on_step(state)
    return state
