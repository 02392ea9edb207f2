"""
Debug-mode invariant checks over a PackingState.

A violation here is a programming error, not a runtime condition: given
valid inputs the partitioner and placement policy never produce one.
``run_to_completion(..., check_invariants=True)`` calls ``check_state``
after every step.

Checks:
  1. Bounds        — every placed item lies inside the container
  2. Item overlap  — no two placed items intersect
  3. EMS overlap   — no active space intersects a placed item
  4. Redundancy    — no active space is contained in another active space
  5. Support       — floor items have ratio 1.0 and the floor supporter;
                     stacked items meet the threshold
  6. Volume        — packed volume never exceeds the container volume
"""

from ems_packing.core.ems import create_container
from ems_packing.core.geometry import contains, intersects
from ems_packing.core.models import FLOOR, PackingState
from ems_packing.core.support import SUPPORT_EPSILON
from ems_packing.errors import GeometryInvariantError


def check_state(state: PackingState, min_support: float = 0.0) -> None:
    """
    Raise ``GeometryInvariantError`` if *state* breaks any invariant.

    Args:
        state:       State to verify.
        min_support: Support threshold the run was packed with.
    """
    container = create_container(state.container_dims)
    boxes = [p.bounding_box() for p in state.packed_items]

    # ── 1. Bounds ────────────────────────────────────────────────────────
    for placed, box in zip(state.packed_items, boxes):
        if not contains(box, container):
            raise GeometryInvariantError(f"Item {placed.id} extends outside the container")

    # ── 2. Item overlap ──────────────────────────────────────────────────
    for i, a in enumerate(boxes):
        for b in boxes[i + 1:]:
            if intersects(a, b):
                raise GeometryInvariantError(f"Items {a.id} and {b.id} overlap")

    # ── 3. EMS overlap ───────────────────────────────────────────────────
    for space in state.ems_list:
        for box in boxes:
            if intersects(space, box):
                raise GeometryInvariantError(f"{space.id} overlaps placed item {box.id}")

    # ── 4. Redundancy ────────────────────────────────────────────────────
    spaces = state.ems_list
    for i, inner in enumerate(spaces):
        for j, outer in enumerate(spaces):
            if i != j and contains(inner, outer):
                raise GeometryInvariantError(f"{inner.id} is contained in {outer.id}")

    # ── 5. Support ───────────────────────────────────────────────────────
    for placed in state.packed_items:
        if placed.z == 0:
            if placed.support_ratio != 1.0 or placed.supported_by != (FLOOR,):
                raise GeometryInvariantError(f"Floor item {placed.id} has wrong support record")
        elif placed.support_ratio < min_support - SUPPORT_EPSILON:
            raise GeometryInvariantError(
                f"Item {placed.id} support {placed.support_ratio:.3f} "
                f"< required {min_support:.3f}"
            )

    # ── 6. Volume ────────────────────────────────────────────────────────
    if state.packed_volume > state.container_dims.volume * (1 + 1e-9):
        raise GeometryInvariantError(
            f"Packed volume {state.packed_volume} exceeds container "
            f"volume {state.container_dims.volume}"
        )
