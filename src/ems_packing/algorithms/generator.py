"""
Synthetic item generator — recursive guillotine cuts of the container.

Starting from one box equal to the container, a random pending box is cut
along a random eligible axis at a whole-unit offset that leaves at least
``min_side_len`` on both sides.  Cutting stops when ``max_items`` boxes
exist or after ``max_items * 10`` attempts, so a configuration that cannot
be split further returns fewer items instead of looping forever.

Because the items tile the container exactly, a perfect packer would
reach 100% utilization on every generated set.

Usage:
    from ems_packing.algorithms.generator import generate_items
    items = generate_items(Dimensions(5870, 2330, 2200), config, rng=random.Random(7))
    save_items(items, "datasets/items_30.json")
"""

import json
import logging
import math
import os
import random
from typing import List, Optional, Tuple

from ems_packing.config import GeneratorConfig
from ems_packing.core.models import Dimensions, Item

logger = logging.getLogger(__name__)

_AXES = ("width", "depth", "height")


def generate_items(
    container_dims: Dimensions,
    config: GeneratorConfig,
    rng: Optional[random.Random] = None,
) -> List[Item]:
    """
    Cut *container_dims* into up to ``config.max_items`` items.

    Args:
        container_dims: Container extents; the items tile this volume.
        config:         Uses ``max_items`` and ``min_side_len``.
        rng:            Random source.  Pass a seeded ``random.Random``
                        for reproducible sets.

    Returns:
        Items ``item-1`` .. ``item-N`` with rotation 0.
    """
    rng = rng or random.Random()
    min_side = config.min_side_len
    pending: List[Dimensions] = [container_dims]
    attempts = 0
    max_attempts = config.max_items * 10

    while len(pending) < config.max_items and attempts < max_attempts:
        attempts += 1
        index = rng.randrange(len(pending))
        box = pending[index]
        axes = [a for a in _AXES if _cut_range(getattr(box, a), min_side)]
        if not axes:
            continue
        axis = rng.choice(axes)
        extent = getattr(box, axis)
        lowest, highest = _cut_range(extent, min_side)
        cut = math.floor(min_side + rng.random() * (extent - 2 * min_side))
        cut = min(highest, max(lowest, cut))
        first = _with_extent(box, axis, cut)
        second = _with_extent(box, axis, extent - cut)
        del pending[index]
        pending.extend((first, second))

    if len(pending) < config.max_items:
        logger.info(
            "generated %d of %d items (attempt budget %d exhausted)",
            len(pending), config.max_items, max_attempts,
        )

    return [
        Item.create(f"item-{i + 1}", dims, color=_random_color(rng))
        for i, dims in enumerate(pending)
    ]


def _cut_range(extent: float, min_side: float) -> Optional[Tuple[int, int]]:
    """Whole-unit cut positions leaving at least *min_side* on both sides."""
    lowest = math.ceil(min_side)
    highest = math.floor(extent - min_side)
    if lowest > highest:
        return None
    return lowest, highest


def _with_extent(dims: Dimensions, axis: str, value: float) -> Dimensions:
    values = dims.to_dict()
    values[axis] = value
    return Dimensions.from_dict(values)


def _random_color(rng: random.Random) -> str:
    return f"hsl({rng.randrange(360)}, 70%, 50%)"


# ─── Dataset files ───────────────────────────────────────────────────────────

def save_items(items: List[Item], path: str, params: Optional[dict] = None) -> None:
    """Persist an item list as a dataset JSON file."""
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    data = {
        "name": os.path.splitext(os.path.basename(path))[0],
        "generator": "guillotine",
        "params": params or {},
        "item_count": len(items),
        "items": [item.to_dict() for item in items],
    }
    with open(path, "w") as f:
        json.dump(data, f, indent=2)


def load_items(path: str) -> List[Item]:
    """Load items from a dataset file written by ``save_items``."""
    with open(path) as f:
        data = json.load(f)
    return [Item.from_dict(d) for d in data["items"]]
