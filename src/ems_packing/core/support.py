"""
Support validator — how much of an item's base rests on something.

A placement is supported by the floor (z == 0) or by the top faces of
already placed items at the same height.  Top faces are matched with a
tolerance of one length unit; the final threshold comparison allows a
small epsilon to absorb floating round-off.
"""

from typing import NamedTuple, Sequence, Tuple

from ems_packing.core.geometry import Rect, overlap_area
from ems_packing.core.models import FLOOR, Dimensions, PlacedItem

# Max |top face - z| for a placed item to count as a supporting surface.
SUPPORT_HEIGHT_TOLERANCE: float = 1.0

# Slack on the threshold comparison (ratio >= threshold - epsilon).
SUPPORT_EPSILON: float = 1e-3


class SupportResult(NamedTuple):
    valid: bool
    ratio: float
    supporters: Tuple[str, ...]


def calculate_support(
    dims: Dimensions,
    position: Tuple[float, float, float],
    placed_items: Sequence[PlacedItem],
    min_support: float,
) -> SupportResult:
    """
    Supported fraction of the footprint of *dims* placed at *position*.

    Args:
        dims:         Oriented item dimensions.
        position:     Candidate min corner (x, y, z).
        placed_items: Items already in the container.
        min_support:  Required supported fraction, in [0, 1].

    Returns:
        ``SupportResult(valid, ratio, supporters)``.  Floor placements are
        always valid with ratio 1.0 and supporters ``("floor",)``.
    """
    x, y, z = position
    if z == 0:
        return SupportResult(True, 1.0, (FLOOR,))

    footprint = Rect(x, x + dims.width, y, y + dims.depth)
    supported_area = 0.0
    supporters = []
    for placed in placed_items:
        if abs(placed.z_max - z) >= SUPPORT_HEIGHT_TOLERANCE:
            continue
        area = overlap_area(footprint, Rect(placed.x, placed.x_max, placed.y, placed.y_max))
        if area > 0:
            supported_area += area
            supporters.append(placed.id)

    ratio = supported_area / dims.base_area
    return SupportResult(ratio >= min_support - SUPPORT_EPSILON, ratio, tuple(supporters))
