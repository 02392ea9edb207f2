"""
Geometry predicates over axis-aligned boxes and footprints.

Boxes are anything exposing ``x1, x2, y1, y2, z1, z2`` (``Space`` and
``PlacedItem.bounding_box()``); rectangles expose ``x1, x2, y1, y2``.
All functions are pure and total over well-formed inputs.
"""

from typing import NamedTuple


class Rect(NamedTuple):
    """A footprint on the XY plane."""
    x1: float
    x2: float
    y1: float
    y2: float


def contains(inner, outer) -> bool:
    """True iff *inner* lies within *outer* on all three axes (closed bounds)."""
    return (
        inner.x1 >= outer.x1 and inner.x2 <= outer.x2
        and inner.y1 >= outer.y1 and inner.y2 <= outer.y2
        and inner.z1 >= outer.z1 and inner.z2 <= outer.z2
    )


def intersects(a, b) -> bool:
    """
    True iff the boxes overlap with non-zero width on every axis.

    Boxes that only touch along a face, edge or corner do not intersect.
    """
    return (
        a.x1 < b.x2 and a.x2 > b.x1
        and a.y1 < b.y2 and a.y2 > b.y1
        and a.z1 < b.z2 and a.z2 > b.z1
    )


def overlap_area(rect_a, rect_b) -> float:
    """Area of the intersection of two footprints (0 when disjoint)."""
    x_overlap = max(0.0, min(rect_a.x2, rect_b.x2) - max(rect_a.x1, rect_b.x1))
    y_overlap = max(0.0, min(rect_a.y2, rect_b.y2) - max(rect_a.y1, rect_b.y1))
    return x_overlap * y_overlap
