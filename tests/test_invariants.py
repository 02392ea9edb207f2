"""
Tests for the debug-mode state checks.

Each test builds a state that breaks exactly one rule by hand.
"""

import pytest

from ems_packing.core.invariants import check_state
from ems_packing.core.models import FLOOR, Dimensions, Item, PackingState, PlacedItem, Space
from ems_packing.errors import GeometryInvariantError, PackingError


def placed(item_id, dims, x, y, z, supported_by=(FLOOR,), ratio=1.0):
    return PlacedItem(
        item=Item.create(item_id, Dimensions(*dims)),
        x=x, y=y, z=z, supported_by=supported_by, support_ratio=ratio,
    )


def state_with(small_container, packed=(), spaces=()):
    return PackingState(
        container_dims=small_container,
        ems_list=tuple(spaces),
        packed_items=tuple(packed),
        is_complete=True,
    )


class TestCheckState:
    def test_valid_state_passes(self, small_container):
        state = state_with(
            small_container,
            packed=[placed("a", (5, 10, 10), 0, 0, 0)],
            spaces=[Space(5, 10, 0, 10, 0, 10, id="e1")],
        )
        check_state(state, 0.6)

    def test_item_outside_container(self, small_container):
        state = state_with(small_container, packed=[placed("a", (5, 5, 5), 7, 0, 0)])
        with pytest.raises(GeometryInvariantError, match="outside"):
            check_state(state)

    def test_overlapping_items(self, small_container):
        state = state_with(small_container, packed=[
            placed("a", (5, 5, 5), 0, 0, 0),
            placed("b", (5, 5, 5), 4, 0, 0),
        ])
        with pytest.raises(GeometryInvariantError, match="overlap"):
            check_state(state)

    def test_space_overlapping_item(self, small_container):
        state = state_with(
            small_container,
            packed=[placed("a", (5, 5, 5), 0, 0, 0)],
            spaces=[Space(4, 10, 0, 10, 0, 10, id="e1")],
        )
        with pytest.raises(GeometryInvariantError, match="e1"):
            check_state(state)

    def test_redundant_space(self, small_container):
        state = state_with(small_container, spaces=[
            Space(0, 10, 0, 10, 0, 10, id="outer"),
            Space(0, 5, 0, 5, 0, 5, id="inner"),
        ])
        with pytest.raises(GeometryInvariantError, match="inner is contained in outer"):
            check_state(state)

    def test_floor_item_with_wrong_support_record(self, small_container):
        state = state_with(small_container, packed=[
            placed("a", (5, 5, 5), 0, 0, 0, supported_by=("b",), ratio=0.5),
        ])
        with pytest.raises(GeometryInvariantError, match="Floor item"):
            check_state(state)

    def test_under_supported_item(self, small_container):
        state = state_with(small_container, packed=[
            placed("a", (4, 10, 5), 0, 0, 0),
            placed("b", (10, 10, 5), 0, 0, 5, supported_by=("a",), ratio=0.4),
        ])
        check_state(state, 0.4)
        with pytest.raises(GeometryInvariantError, match="support"):
            check_state(state, 0.6)

    def test_errors_share_a_base_class(self):
        assert issubclass(GeometryInvariantError, PackingError)
