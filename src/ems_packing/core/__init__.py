"""Core engine: value types, geometry, EMS partitioner and support checks."""

from .ems import EmsUpdate, create_container, merge_history, update_ems
from .geometry import Rect, contains, intersects, overlap_area
from .models import (
    FLOOR,
    Dimensions,
    Item,
    PackingState,
    PackingStrategy,
    PlacedItem,
    Space,
    SpaceStatus,
    WeightingHeuristic,
)
from .support import SupportResult, calculate_support

__all__ = [
    "FLOOR",
    "Dimensions",
    "Item",
    "PackingState",
    "PlacedItem",
    "Space",
    "SpaceStatus",
    "PackingStrategy",
    "WeightingHeuristic",
    "Rect",
    "contains",
    "intersects",
    "overlap_area",
    "EmsUpdate",
    "create_container",
    "merge_history",
    "update_ems",
    "SupportResult",
    "calculate_support",
]
