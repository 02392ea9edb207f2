"""Shared fixtures for the ems-packing test suite."""

import os
import sys

import pytest

# Ensure the package is importable without an editable install
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from ems_packing.core.models import Dimensions, Item


@pytest.fixture
def container_dims():
    """The default 20 ft container interior."""
    return Dimensions(5870, 2330, 2200)


@pytest.fixture
def small_container():
    """A 10 x 10 x 10 container for hand-checked geometry."""
    return Dimensions(10, 10, 10)


@pytest.fixture
def three_items():
    """Two floor boxes and a wide slab, in input order."""
    return [
        Item.create("a", Dimensions(2000, 1000, 1000)),
        Item.create("b", Dimensions(1000, 1000, 1000)),
        Item.create("c", Dimensions(3870, 1330, 1200)),
    ]
