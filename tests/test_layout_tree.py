"""
Tests for the layout tree and its mutations.
"""

import copy
import random

import pytest

from csitui.ui.layout.tree import (
    Pane,
    Split,
    SplitAxis,
    TilingManager,
    ViewType,
    clamp_ratio,
    iter_panes,
    resolve_path,
)


def _count_leaves(node):
    if isinstance(node, Pane):
        return 1
    return sum(_count_leaves(child) for child in node.children)


def _assert_binary(node):
    if isinstance(node, Split):
        assert len(node.children) == 2
        assert 10 <= node.ratio <= 90
        for child in node.children:
            _assert_binary(child)


class TestInitialState:
    """Tests for a freshly created manager."""

    def test_single_empty_pane(self):
        manager = TilingManager()
        assert manager.root == Pane(1, ViewType.EMPTY)
        assert manager.focused_pane_id == 1
        assert manager.next_id == 2
        assert manager.is_default is False
        assert manager.display is None
        assert manager.pane_count() == 1

    def test_next_id_derived_from_tree(self, three_pane_manager):
        manager = TilingManager(root=copy.deepcopy(three_pane_manager.root))
        assert manager.next_id == 4


class TestSplit:
    """Tests for splitting the focused pane."""

    def test_split_scenario(self):
        """Split horizontally, then vertically, then close the newest pane."""
        manager = TilingManager()

        manager.split(SplitAxis.HORIZONTAL)
        assert manager.root == Split(SplitAxis.HORIZONTAL, 50, [Pane(1), Pane(2)])
        assert manager.focused_pane_id == 2

        manager.split(SplitAxis.VERTICAL)
        assert manager.pane_count() == 3
        assert manager.focused_pane_id == 3
        assert manager.root.children[1] == Split(SplitAxis.VERTICAL, 50, [Pane(2), Pane(3)])

        manager.close_focused_pane()
        assert manager.pane_count() == 2
        assert manager.root == Split(SplitAxis.HORIZONTAL, 50, [Pane(1), Pane(2)])
        assert manager.pane_ids() == [1, 2]
        assert manager.focused_pane_id in (1, 2)
        assert manager.next_id == 3

    def test_new_pane_is_empty_and_old_keeps_view(self):
        manager = TilingManager(root=Pane(1, ViewType.SPECTROGRAM))
        manager.split(SplitAxis.VERTICAL)
        assert manager.root.children[0] == Pane(1, ViewType.SPECTROGRAM)
        assert manager.root.children[1] == Pane(2, ViewType.EMPTY)

    def test_split_nested_pane(self, three_pane_manager):
        three_pane_manager.focused_pane_id = 2
        three_pane_manager.split(SplitAxis.HORIZONTAL)

        right = three_pane_manager.root.children[1]
        assert right.children[0] == Split(
            SplitAxis.HORIZONTAL, 50, [Pane(2, ViewType.POLAR), Pane(4)]
        )
        assert three_pane_manager.focused_pane_id == 4
        assert three_pane_manager.next_id == 5

    def test_split_caps_at_ten_panes(self):
        manager = TilingManager()
        for _ in range(20):
            manager.split(SplitAxis.HORIZONTAL)
        assert manager.pane_count() == 10

    def test_split_at_cap_leaves_tree_unchanged(self):
        manager = TilingManager()
        for axis in [SplitAxis.HORIZONTAL, SplitAxis.VERTICAL] * 5:
            manager.split(axis)
        assert manager.pane_count() == 10

        before = copy.deepcopy(manager.root)
        state = (manager.focused_pane_id, manager.next_id, manager.revision)
        manager.split(SplitAxis.VERTICAL)

        assert manager.root == before
        assert (manager.focused_pane_id, manager.next_id, manager.revision) == state

    def test_split_with_stale_focus_is_noop(self, three_pane_manager):
        three_pane_manager.focused_pane_id = 99
        before = copy.deepcopy(three_pane_manager.root)
        three_pane_manager.split(SplitAxis.HORIZONTAL)
        assert three_pane_manager.root == before
        assert three_pane_manager.next_id == 4

    def test_split_bumps_revision(self):
        manager = TilingManager()
        manager.split(SplitAxis.HORIZONTAL)
        assert manager.revision == 1


class TestClose:
    """Tests for closing the focused pane."""

    def test_close_last_pane_is_noop(self):
        manager = TilingManager()
        manager.close_focused_pane()
        assert manager.root == Pane(1)
        assert manager.focused_pane_id == 1
        assert manager.next_id == 2

    def test_close_collapses_parent(self, three_pane_manager):
        three_pane_manager.focused_pane_id = 2
        three_pane_manager.close_focused_pane()

        assert three_pane_manager.root == Split(
            SplitAxis.HORIZONTAL, 40, [Pane(1, ViewType.DASHBOARD), Pane(2, ViewType.PHASE)]
        )

    def test_close_moves_focus_to_first_pane(self, three_pane_manager):
        three_pane_manager.focused_pane_id = 3
        three_pane_manager.close_focused_pane()
        assert three_pane_manager.focused_pane_id == 1

    def test_close_root_child_promotes_sibling_subtree(self, three_pane_manager):
        three_pane_manager.focused_pane_id = 1
        three_pane_manager.close_focused_pane()

        assert three_pane_manager.root == Split(
            SplitAxis.VERTICAL, 50, [Pane(1, ViewType.POLAR), Pane(2, ViewType.PHASE)]
        )
        assert three_pane_manager.focused_pane_id == 1

    def test_reindex_keeps_focus_on_same_logical_pane(self):
        root = Split(
            SplitAxis.HORIZONTAL,
            50,
            [Pane(4, ViewType.POLAR), Split(SplitAxis.VERTICAL, 50, [Pane(7), Pane(9, ViewType.CAMERA)])],
        )
        manager = TilingManager(root=root, focused_pane_id=9, next_id=10)
        manager.reindex()

        assert manager.pane_ids() == [1, 2, 3]
        assert manager.focused_pane_id == 3
        assert manager.find_view(3) is ViewType.CAMERA
        assert manager.next_id == 4

    def test_ids_dense_after_many_closes(self):
        rng = random.Random(7)
        manager = TilingManager()
        for _ in range(200):
            if rng.random() < 0.6:
                manager.split(rng.choice(list(SplitAxis)))
            else:
                ids = manager.pane_ids()
                manager.focused_pane_id = rng.choice(ids)
                before = manager.pane_count()
                manager.close_focused_pane()
                if before > 1:
                    assert manager.pane_ids() == list(range(1, manager.pane_count() + 1))
                    assert 1 <= manager.focused_pane_id <= manager.pane_count()
                    assert manager.next_id == manager.pane_count() + 1

            _assert_binary(manager.root)
            assert manager.pane_count() == _count_leaves(manager.root)
            assert len(set(manager.pane_ids())) == manager.pane_count()
            assert manager.has_pane(manager.focused_pane_id)
            assert manager.next_id > max(manager.pane_ids())


class TestViewAndFocus:
    """Tests for view assignment and focus movement."""

    def test_set_current_view_only_touches_focused(self, three_pane_manager):
        three_pane_manager.focused_pane_id = 3
        three_pane_manager.set_current_view(ViewType.SPECTROGRAM)

        assert three_pane_manager.find_view(3) is ViewType.SPECTROGRAM
        assert three_pane_manager.find_view(1) is ViewType.DASHBOARD
        assert three_pane_manager.find_view(2) is ViewType.POLAR

    def test_set_current_view_with_stale_focus(self, three_pane_manager):
        three_pane_manager.focused_pane_id = 42
        three_pane_manager.set_current_view(ViewType.CAMERA)
        assert ViewType.CAMERA not in [p.view for p in iter_panes(three_pane_manager.root)]

    def test_focus_next_cycles(self, three_pane_manager):
        seen = []
        for _ in range(4):
            three_pane_manager.focus_next()
            seen.append(three_pane_manager.focused_pane_id)
        assert seen == [2, 3, 1, 2]

    def test_focus_next_skips_missing_ids(self):
        root = Split(SplitAxis.HORIZONTAL, 50, [Pane(2), Pane(5)])
        manager = TilingManager(root=root, focused_pane_id=2, next_id=7)
        manager.focus_next()
        assert manager.focused_pane_id == 5
        manager.focus_next()
        assert manager.focused_pane_id == 2

    def test_focus_next_terminates_on_corrupt_next_id(self):
        manager = TilingManager(root=Pane(5), focused_pane_id=5, next_id=3)
        manager.focus_next()
        assert manager.focused_pane_id == 5

    def test_focus_pane(self, three_pane_manager):
        assert three_pane_manager.focus_pane(3) is True
        assert three_pane_manager.focused_pane_id == 3
        assert three_pane_manager.focus_pane(8) is False
        assert three_pane_manager.focused_pane_id == 3

    def test_repair_focus(self, three_pane_manager):
        three_pane_manager.focused_pane_id = 77
        three_pane_manager.repair_focus()
        assert three_pane_manager.focused_pane_id == 1


class TestRatios:
    """Tests for path-addressed ratio changes."""

    def test_set_split_ratio_clamps(self, three_pane_manager):
        three_pane_manager.set_split_ratio([], 5)
        assert three_pane_manager.root.ratio == 10
        three_pane_manager.set_split_ratio([], 95)
        assert three_pane_manager.root.ratio == 90
        three_pane_manager.set_split_ratio([1], 33)
        assert three_pane_manager.root.children[1].ratio == 33

    def test_adjust_converges_to_bounds(self, three_pane_manager):
        for _ in range(3):
            three_pane_manager.adjust_split_ratio([1], -1000)
            assert three_pane_manager.root.children[1].ratio == 10
        for _ in range(3):
            three_pane_manager.adjust_split_ratio([1], 1000)
            assert three_pane_manager.root.children[1].ratio == 90

    @pytest.mark.parametrize("path", [[0], [1, 0], [5], [1, 1, 0], [-1]])
    def test_stale_path_is_noop(self, three_pane_manager, path):
        before = copy.deepcopy(three_pane_manager.root)
        three_pane_manager.set_split_ratio(path, 70)
        three_pane_manager.adjust_split_ratio(path, 10)
        assert three_pane_manager.root == before
        assert three_pane_manager.revision == 0

    def test_ratio_on_single_pane_root_is_noop(self):
        manager = TilingManager()
        manager.set_split_ratio([], 30)
        assert manager.root == Pane(1)

    def test_clamp_ratio(self):
        assert clamp_ratio(-50) == 10
        assert clamp_ratio(50) == 50
        assert clamp_ratio(500) == 90


class TestQueries:
    """Tests for read-only helpers."""

    def test_resolve_path(self, three_pane_manager):
        root = three_pane_manager.root
        assert resolve_path(root, []) is root
        assert resolve_path(root, [1, 0]) == Pane(2, ViewType.POLAR)
        assert resolve_path(root, [0, 0]) is None

    def test_node_at(self, three_pane_manager):
        assert three_pane_manager.node_at([]) is three_pane_manager.root
        assert three_pane_manager.node_at([1]).axis is SplitAxis.VERTICAL
        assert three_pane_manager.node_at([2]) is None

    def test_traversal_order(self, three_pane_manager):
        assert three_pane_manager.pane_ids() == [1, 2, 3]

    def test_ancestor_split_path(self, three_pane_manager):
        assert three_pane_manager.ancestor_split_path(3, SplitAxis.VERTICAL) == [1]
        assert three_pane_manager.ancestor_split_path(3, SplitAxis.HORIZONTAL) == []
        assert three_pane_manager.ancestor_split_path(1, SplitAxis.VERTICAL) is None
        assert three_pane_manager.ancestor_split_path(12, SplitAxis.HORIZONTAL) is None
