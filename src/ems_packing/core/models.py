"""
Core value types for the EMS packing engine.

All engine modules import their data types from here so that the
partitioner, the placement policy, the optimizer and the reporting layer
agree on one representation.

Classes:
    PackingStrategy    — queue ordering of a run (ff, ffd, ffh, conflict-graph)
    WeightingHeuristic — candidate weighting option of a run
    Dimensions    — (width, depth, height) along X, Y, Z, with rotations
    SpaceStatus   — lifecycle of an empty maximal space
    Space         — one empty maximal space (EMS), immutable
    Item          — an item to pack, possibly rotated
    PlacedItem    — an item committed at a min-corner position
    PackingState  — complete state of one packing run

Every class is a frozen dataclass and every collection is a tuple, so a
state handed to a caller can never change underneath it.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Tuple


# Sentinel supporter id for items resting on the container floor.
FLOOR = "floor"


# ─────────────────────────────────────────────────────────────────────────────
# Run options
# ─────────────────────────────────────────────────────────────────────────────

class PackingStrategy(str, Enum):
    """Pre-run ordering of the pending queue."""
    FIRST_FIT = "ff"
    FIRST_FIT_DECREASING = "ffd"
    FIRST_FIT_HEIGHT = "ffh"
    CONFLICT_GRAPH = "conflict-graph"

    @property
    def label(self) -> str:
        return _STRATEGY_LABELS[self]


_STRATEGY_LABELS = {
    PackingStrategy.FIRST_FIT: "First Fit (Standard)",
    PackingStrategy.FIRST_FIT_DECREASING: "First Fit Decreasing",
    PackingStrategy.FIRST_FIT_HEIGHT: "First Fit Height",
    PackingStrategy.CONFLICT_GRAPH: "Conflict Graph (Parallel)",
}


class WeightingHeuristic(str, Enum):
    """
    Candidate weighting for the conflict-graph strategy.

    Accepted and threaded through every call, but no weighting is applied
    to placement decisions.
    """
    VOLUME = "volume"
    CORNER = "corner"
    STABILITY = "stability"
    FUTURE_SPACE = "future-space"


# ─────────────────────────────────────────────────────────────────────────────
# Dimensions & rotation
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Dimensions:
    """
    Extents of a cuboid.

    Attributes:
        width:  X-axis extent.
        depth:  Y-axis extent.
        height: Z-axis extent (vertical).
    """
    width: float
    depth: float
    height: float

    @property
    def volume(self) -> float:
        return self.width * self.depth * self.height

    @property
    def base_area(self) -> float:
        """Footprint area on the XY plane."""
        return self.width * self.depth

    def rotated(self, rotation: int) -> "Dimensions":
        """
        Return the dimensions under one of the 6 axis permutations.

        The index is taken modulo 6:
            0 (w, d, h)   1 (w, h, d)   2 (d, w, h)
            3 (d, h, w)   4 (h, w, d)   5 (h, d, w)
        """
        w, d, h = self.width, self.depth, self.height
        permutations = (
            (w, d, h), (w, h, d),
            (d, w, h), (d, h, w),
            (h, w, d), (h, d, w),
        )
        return Dimensions(*permutations[rotation % 6])

    def as_tuple(self) -> Tuple[float, float, float]:
        return (self.width, self.depth, self.height)

    def to_dict(self) -> dict:
        return {"width": self.width, "depth": self.depth, "height": self.height}

    @classmethod
    def from_dict(cls, d: dict) -> "Dimensions":
        return cls(width=d["width"], depth=d["depth"], height=d["height"])


# ─────────────────────────────────────────────────────────────────────────────
# Empty Maximal Space
# ─────────────────────────────────────────────────────────────────────────────

class SpaceStatus(str, Enum):
    """Lifecycle of an EMS.  A space is never mutated; new records are."""
    ACTIVE = "ACTIVE"
    CONSUMED = "CONSUMED"
    PRUNED = "PRUNED"


@dataclass(frozen=True)
class Space:
    """
    An axis-aligned empty box inside the container.

    Bounds are closed min/max coordinates on each axis.  Genealogy fields
    (``parent_ids``, ``step_index``, ``status``) exist for auditing and
    visualisation only; the partitioner never reads them.

    Attributes:
        x1, x2, y1, y2, z1, z2: Min/max coordinates per axis.
        id:          Unique identifier within one packing run.
        parent_ids:  Ids of the spaces this one was split from (empty = root).
        step_index:  Step at which the space was created.
        status:      ACTIVE, CONSUMED or PRUNED.
    """
    x1: float
    x2: float
    y1: float
    y2: float
    z1: float
    z2: float
    id: str = ""
    parent_ids: Tuple[str, ...] = ()
    step_index: int = 0
    status: SpaceStatus = SpaceStatus.ACTIVE

    @property
    def width(self) -> float:
        return self.x2 - self.x1

    @property
    def depth(self) -> float:
        return self.y2 - self.y1

    @property
    def height(self) -> float:
        return self.z2 - self.z1

    @property
    def volume(self) -> float:
        return self.width * self.depth * self.height

    def can_fit(self, dims: Dimensions) -> bool:
        """True when *dims* fits inside this space on all three axes."""
        return (
            self.width >= dims.width
            and self.depth >= dims.depth
            and self.height >= dims.height
        )

    def with_bound(self, bound: str, value: float) -> "Space":
        """Copy of this space with a single bound (``"x1"`` .. ``"z2"``) moved."""
        if bound not in ("x1", "x2", "y1", "y2", "z1", "z2"):
            raise ValueError(f"Unknown bound: {bound!r}")
        return replace(self, **{bound: value})

    def with_status(self, status: SpaceStatus) -> "Space":
        return replace(self, status=status)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "bounds": [self.x1, self.x2, self.y1, self.y2, self.z1, self.z2],
            "volume": self.volume,
            "parent_ids": list(self.parent_ids),
            "step_index": self.step_index,
            "status": self.status.value,
        }

    def __repr__(self) -> str:
        return (
            f"Space({self.id}, x=[{self.x1:.0f},{self.x2:.0f}], "
            f"y=[{self.y1:.0f},{self.y2:.0f}], z=[{self.z1:.0f},{self.z2:.0f}], "
            f"{self.status.value})"
        )


# ─────────────────────────────────────────────────────────────────────────────
# Items
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Item:
    """
    An item to be packed.

    Attributes:
        id:            Unique identifier.
        dims:          Current (possibly rotated) dimensions.
        original_dims: Dimensions before any rotation.
        rotation:      Rotation index 0-5 (see ``Dimensions.rotated``).
        color:         Display attribute, ignored by placement logic.
    """
    id: str
    dims: Dimensions
    original_dims: Dimensions
    rotation: int = 0
    color: str = ""

    @classmethod
    def create(cls, item_id: str, dims: Dimensions, color: str = "") -> "Item":
        """New unrotated item."""
        return cls(id=item_id, dims=dims, original_dims=dims, rotation=0, color=color)

    @property
    def volume(self) -> float:
        return self.dims.volume

    def with_rotation(self, rotation: int) -> "Item":
        """New item with *rotation* applied to the original dimensions."""
        rotation = rotation % 6
        return replace(self, rotation=rotation,
                       dims=self.original_dims.rotated(rotation))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "dims": self.dims.to_dict(),
            "original_dims": self.original_dims.to_dict(),
            "rotation": self.rotation,
            "color": self.color,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "Item":
        dims = Dimensions.from_dict(d["dims"])
        original = Dimensions.from_dict(d.get("original_dims", d["dims"]))
        return cls(id=d["id"], dims=dims, original_dims=original,
                   rotation=d.get("rotation", 0), color=d.get("color", ""))


@dataclass(frozen=True)
class PlacedItem:
    """
    An item committed at a position.  Created once, never moved.

    Attributes:
        item:          The placed item (with its rotation applied).
        x, y, z:       Min corner of the item's bounding box.
        supported_by:  Ids of supporting items, or ``(FLOOR,)``.
        support_ratio: Supported fraction of the base footprint, in [0, 1].
    """
    item: Item
    x: float
    y: float
    z: float
    supported_by: Tuple[str, ...] = ()
    support_ratio: float = 1.0

    @property
    def id(self) -> str:
        return self.item.id

    @property
    def dims(self) -> Dimensions:
        return self.item.dims

    @property
    def volume(self) -> float:
        return self.item.volume

    @property
    def position(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)

    @property
    def x_max(self) -> float:
        return self.x + self.dims.width

    @property
    def y_max(self) -> float:
        return self.y + self.dims.depth

    @property
    def z_max(self) -> float:
        return self.z + self.dims.height

    def bounding_box(self) -> Space:
        """The occupied region, in the same shape as an EMS."""
        return Space(self.x, self.x_max, self.y, self.y_max, self.z, self.z_max,
                     id=self.id, status=SpaceStatus.CONSUMED)

    def to_dict(self) -> dict:
        d = self.item.to_dict()
        d.update({
            "position": [self.x, self.y, self.z],
            "supported_by": list(self.supported_by),
            "support_ratio": self.support_ratio,
        })
        return d


# ─────────────────────────────────────────────────────────────────────────────
# Packing state
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class PackingState:
    """
    The complete state of one packing run.

    Every step produces a new PackingState; nothing is mutated in place.
    ``next_ems_id`` is the run-local EMS id counter, so independent runs can
    never hand out colliding identifiers.
    """
    container_dims: Dimensions
    ems_list: Tuple[Space, ...] = ()
    ems_history: Tuple[Space, ...] = ()
    packed_items: Tuple[PlacedItem, ...] = ()
    items_to_pack: Tuple[Item, ...] = ()
    unpacked_items: Tuple[Item, ...] = ()
    is_complete: bool = False
    step_count: int = 0
    next_ems_id: int = 1

    @property
    def packed_volume(self) -> float:
        return sum(p.volume for p in self.packed_items)

    @property
    def utilization(self) -> float:
        """Packed volume divided by container volume, in [0, 1]."""
        container_volume = self.container_dims.volume
        if container_volume == 0:
            return 0.0
        return self.packed_volume / container_volume

    @property
    def average_support(self) -> float:
        """Mean support ratio of the packed items (0 when nothing is packed)."""
        if not self.packed_items:
            return 0.0
        return sum(p.support_ratio for p in self.packed_items) / len(self.packed_items)

    def to_dict(self) -> dict:
        return {
            "container": self.container_dims.to_dict(),
            "step_count": self.step_count,
            "is_complete": self.is_complete,
            "utilization": self.utilization,
            "packed_items": [p.to_dict() for p in self.packed_items],
            "items_to_pack": [i.to_dict() for i in self.items_to_pack],
            "unpacked_items": [i.to_dict() for i in self.unpacked_items],
            "ems_list": [s.to_dict() for s in self.ems_list],
            "ems_history": [s.to_dict() for s in self.ems_history],
        }

    def __repr__(self) -> str:
        return (
            f"PackingState(step={self.step_count}, "
            f"packed={len(self.packed_items)}, "
            f"pending={len(self.items_to_pack)}, "
            f"unpacked={len(self.unpacked_items)}, "
            f"ems={len(self.ems_list)}, "
            f"fill={self.utilization:.1%})"
        )
