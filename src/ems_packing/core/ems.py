"""
Empty Maximal Space (EMS) partitioner.

The container's free volume is tracked as a set of maximal empty boxes.
They may overlap one another, but none of them overlaps a placed item and
none is contained in another.  When an item is placed, every active space
it cuts into is replaced by up to six sub-spaces, one per item face that
lies strictly inside that space:

    +X: space.x1 -> item.x2      -X: space.x2 -> item.x1
    +Y: space.y1 -> item.y2      -Y: space.y2 -> item.y1
    +Z: space.z1 -> item.z2      -Z: space.z2 -> item.z1

Candidates contained in a surviving (intact) space or in another candidate
of the same batch are redundant and get pruned.  Comparisons are exact:
every split is computed from item and space coordinates, never measured.

Identifiers come from a counter owned by the caller's PackingState rather
than from module state, so concurrent runs cannot interfere.

References:
    Lai, K.K. & Chan, J.W.M. (1997).
    "Developing a simulated annealing algorithm for the cutting stock problem."
    Computers & Industrial Engineering, 32(1), 115-127.
"""

import logging
from dataclasses import replace
from typing import List, NamedTuple, Sequence, Tuple

from ems_packing.core.geometry import contains, intersects
from ems_packing.core.models import Dimensions, Space, SpaceStatus

logger = logging.getLogger(__name__)


class EmsUpdate(NamedTuple):
    """Result of one partitioner pass."""
    active: Tuple[Space, ...]
    history: Tuple[Space, ...]
    next_id: int


def make_ems_id(step_index: int, counter: int) -> str:
    return f"ems-s{step_index}-{counter}"


def create_container(dims: Dimensions, counter: int = 1) -> Space:
    """
    The root EMS spanning the whole container.

    A fresh run starts its id counter at 1, so the root is ``ems-s0-1``
    and the next id handed out is 2.
    """
    return Space(
        x1=0, x2=dims.width,
        y1=0, y2=dims.depth,
        z1=0, z2=dims.height,
        id=make_ems_id(0, counter),
        parent_ids=(),
        step_index=0,
        status=SpaceStatus.ACTIVE,
    )


def split_space(space: Space, item_box) -> List[Tuple[str, float]]:
    """
    The (bound, value) pairs of the sub-spaces *item_box* leaves in *space*.

    A face flush with the space boundary yields nothing on that side.
    """
    cuts: List[Tuple[str, float]] = []
    if item_box.x2 < space.x2:
        cuts.append(("x1", item_box.x2))
    if item_box.x1 > space.x1:
        cuts.append(("x2", item_box.x1))
    if item_box.y2 < space.y2:
        cuts.append(("y1", item_box.y2))
    if item_box.y1 > space.y1:
        cuts.append(("y2", item_box.y1))
    if item_box.z2 < space.z2:
        cuts.append(("z1", item_box.z2))
    if item_box.z1 > space.z1:
        cuts.append(("z2", item_box.z1))
    return cuts


def update_ems(
    active: Sequence[Space],
    item_box,
    step_index: int,
    next_id: int,
) -> EmsUpdate:
    """
    Recompute the active EMS set after placing *item_box*.

    Args:
        active:     Current active spaces.
        item_box:   Bounding box of the placed item (``x1`` .. ``z2``).
        step_index: Step number stamped on new spaces and their ids.
        next_id:    First free value of the run's EMS id counter.

    Returns:
        ``EmsUpdate(active, history, next_id)`` where ``history`` holds one
        record per consumed, pruned or newly activated space, in that order
        of discovery, and ``next_id`` is the advanced counter.
    """
    intact: List[Space] = []
    intersected: List[Space] = []
    for space in active:
        if intersects(space, item_box):
            intersected.append(space)
        else:
            intact.append(space)

    history: List[Space] = [s.with_status(SpaceStatus.CONSUMED) for s in intersected]

    candidates: List[Space] = []
    for parent in intersected:
        for bound, value in split_space(parent, item_box):
            candidates.append(replace(
                parent.with_bound(bound, value),
                id=make_ems_id(step_index, next_id),
                parent_ids=(parent.id,),
                step_index=step_index,
                status=SpaceStatus.ACTIVE,
            ))
            next_id += 1

    survivors: List[Space] = []
    for i, candidate in enumerate(candidates):
        redundant = any(contains(candidate, space) for space in intact)
        if not redundant:
            redundant = any(
                j != i and contains(candidate, other)
                for j, other in enumerate(candidates)
            )
        if redundant:
            history.append(candidate.with_status(SpaceStatus.PRUNED))
        else:
            survivors.append(candidate)
            history.append(candidate)

    logger.debug(
        "step %d: %d intersected, %d candidates, %d kept, %d intact",
        step_index, len(intersected), len(candidates), len(survivors), len(intact),
    )
    return EmsUpdate(tuple(survivors + intact), tuple(history), next_id)


def merge_history(history: Sequence[Space], updates: Sequence[Space]) -> Tuple[Space, ...]:
    """
    Fold *updates* into *history*, keyed by space id.

    A newer record for a known id replaces the older one at its original
    position; unknown ids are appended.
    """
    merged = {space.id: space for space in history}
    for space in updates:
        merged[space.id] = space
    return tuple(merged.values())
