"""
Tests for the EMS partitioner.

Tests cover:
- Root space creation and id format
- Face splitting (corner, centre, exact fit)
- Pruning against intact spaces and within the candidate batch
- Genealogy records (CONSUMED / PRUNED / ACTIVE, parents, step)
- History merging
"""

import pytest

from ems_packing.core.ems import create_container, merge_history, split_space, update_ems
from ems_packing.core.geometry import contains, intersects
from ems_packing.core.models import Dimensions, Space, SpaceStatus


def box(x1, x2, y1, y2, z1, z2, space_id=""):
    return Space(x1, x2, y1, y2, z1, z2, id=space_id)


def bounds(space):
    return (space.x1, space.x2, space.y1, space.y2, space.z1, space.z2)


@pytest.fixture
def root(small_container):
    return create_container(small_container)


# ---------------------------------------------------------------------------
# 1. Root space
# ---------------------------------------------------------------------------

class TestCreateContainer:
    def test_root_spans_container(self, container_dims):
        root = create_container(container_dims)
        assert bounds(root) == (0, 5870, 0, 2330, 0, 2200)
        assert root.volume == pytest.approx(container_dims.volume)

    def test_root_genealogy(self, root):
        assert root.id == "ems-s0-1"
        assert root.parent_ids == ()
        assert root.step_index == 0
        assert root.status is SpaceStatus.ACTIVE


# ---------------------------------------------------------------------------
# 2. Splitting
# ---------------------------------------------------------------------------

class TestSplitting:
    def test_corner_item_leaves_three_spaces(self, root):
        update = update_ems([root], box(0, 4, 0, 5, 0, 6), step_index=1, next_id=2)
        assert [bounds(s) for s in update.active] == [
            (4, 10, 0, 10, 0, 10),
            (0, 10, 5, 10, 0, 10),
            (0, 10, 0, 10, 6, 10),
        ]

    def test_centre_item_leaves_six_spaces(self, root):
        update = update_ems([root], box(3, 6, 3, 6, 3, 6), step_index=1, next_id=2)
        assert len(update.active) == 6
        assert sorted(bounds(s) for s in update.active) == sorted([
            (6, 10, 0, 10, 0, 10), (0, 3, 0, 10, 0, 10),
            (0, 10, 6, 10, 0, 10), (0, 10, 0, 3, 0, 10),
            (0, 10, 0, 10, 6, 10), (0, 10, 0, 10, 0, 3),
        ])

    def test_exact_fit_leaves_nothing(self, root):
        update = update_ems([root], box(0, 10, 0, 10, 0, 10), step_index=1, next_id=2)
        assert update.active == ()
        assert [s.status for s in update.history] == [SpaceStatus.CONSUMED]

    def test_flush_faces_produce_no_candidates(self, root):
        assert split_space(root, box(0, 10, 0, 10, 0, 4)) == [("z1", 4)]

    def test_disjoint_item_is_a_no_op(self):
        space = box(0, 5, 0, 5, 0, 5, "ems-s0-1")
        update = update_ems([space], box(5, 8, 0, 5, 0, 5), step_index=1, next_id=2)
        assert update.active == (space,)
        assert update.history == ()
        assert update.next_id == 2

    def test_new_spaces_never_overlap_the_item(self, root):
        item = box(2, 7, 1, 4, 0, 3)
        update = update_ems([root], item, step_index=1, next_id=2)
        for space in update.active:
            assert not intersects(space, item)


# ---------------------------------------------------------------------------
# 3. Pruning
# ---------------------------------------------------------------------------

class TestPruning:
    def test_candidate_inside_intact_space_is_pruned(self):
        low = box(0, 10, 0, 10, 0, 5, "low")
        left = box(0, 5, 0, 10, 0, 10, "left")
        # Item touches `left` at x=5 only, so `left` stays intact.
        update = update_ems([low, left], box(5, 8, 0, 2, 0, 2), step_index=3, next_id=10)

        pruned = [s for s in update.history if s.status is SpaceStatus.PRUNED]
        assert [bounds(s) for s in pruned] == [(0, 5, 0, 10, 0, 5)]
        assert left in update.active
        assert all(bounds(s) != bounds(pruned[0]) for s in update.active)

    def test_candidate_inside_sibling_candidate_is_pruned(self):
        front = box(0, 10, 0, 5, 0, 10, "front")
        top = box(0, 10, 0, 10, 5, 10, "top")
        update = update_ems([front, top], box(0, 2, 0, 2, 0, 6), step_index=1, next_id=3)

        pruned = [s for s in update.history if s.status is SpaceStatus.PRUNED]
        assert [bounds(s) for s in pruned] == [(0, 10, 0, 5, 6, 10)]
        assert pruned[0].parent_ids == ("front",)
        assert len(update.active) == 5

    def test_no_active_space_contains_another(self, root):
        update = update_ems([root], box(0, 4, 0, 4, 0, 4), step_index=1, next_id=2)
        update = update_ems(update.active, box(4, 8, 0, 4, 0, 4), step_index=2, next_id=update.next_id)
        update = update_ems(update.active, box(0, 4, 0, 4, 4, 8), step_index=3, next_id=update.next_id)
        spaces = update.active
        for i, a in enumerate(spaces):
            for j, b in enumerate(spaces):
                if i != j:
                    assert not contains(a, b), f"{a} inside {b}"


# ---------------------------------------------------------------------------
# 4. Genealogy
# ---------------------------------------------------------------------------

class TestGenealogy:
    def test_ids_parents_and_step(self, root):
        update = update_ems([root], box(0, 4, 0, 5, 0, 6), step_index=1, next_id=2)
        assert [s.id for s in update.active] == ["ems-s1-2", "ems-s1-3", "ems-s1-4"]
        assert all(s.parent_ids == ("ems-s0-1",) for s in update.active)
        assert all(s.step_index == 1 for s in update.active)
        assert update.next_id == 5

    def test_history_records_consumed_then_new(self, root):
        update = update_ems([root], box(0, 4, 0, 5, 0, 6), step_index=1, next_id=2)
        assert update.history[0].id == root.id
        assert update.history[0].status is SpaceStatus.CONSUMED
        assert [s.status for s in update.history[1:]] == [SpaceStatus.ACTIVE] * 3

    def test_inputs_are_not_mutated(self, root):
        update_ems([root], box(0, 4, 0, 5, 0, 6), step_index=1, next_id=2)
        assert root.status is SpaceStatus.ACTIVE

    def test_merge_history_replaces_in_place(self, root):
        child = box(0, 1, 0, 1, 0, 1, "ems-s1-2")
        merged = merge_history([root], [root.with_status(SpaceStatus.CONSUMED), child])
        assert [s.id for s in merged] == ["ems-s0-1", "ems-s1-2"]
        assert merged[0].status is SpaceStatus.CONSUMED


class TestSpaceValue:
    def test_with_bound_copies(self, root):
        moved = root.with_bound("x1", 4)
        assert moved.x1 == 4 and root.x1 == 0
        assert moved.width == 6

    def test_with_bound_rejects_unknown_names(self, root):
        with pytest.raises(ValueError):
            root.with_bound("w", 3)

    def test_can_fit(self, root):
        assert root.can_fit(Dimensions(10, 10, 10))
        assert not root.can_fit(Dimensions(10, 10, 10.5))
