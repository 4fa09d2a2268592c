"""
Unit Tests for the Toggle Engine

Tests for toggle_leaf, toggle_subtopic, toggle_topic and the bulk
operations.
"""

import pytest

from curriculum_toolkit.core.models import HierarchySource, Objective, SelectionState, Subtopic, Topic
from curriculum_toolkit.selection import (
    clear,
    clear_source,
    derive_state,
    deselect_all_subtopic,
    deselect_all_topic,
    estimate,
    normalize,
    prune_selection,
    select_all_subtopic,
    select_all_topic,
    toggle_leaf,
    toggle_subtopic,
    toggle_topic,
)


class TestToggleLeaf:
    """Tests for toggle_leaf function."""

    def test_toggle_leaf_when_unselected_then_added(self, single_index):
        assert toggle_leaf(single_index, frozenset(), "O1") == frozenset({"O1"})

    def test_toggle_leaf_when_selected_then_removed(self, single_index):
        assert toggle_leaf(single_index, frozenset({"O1", "O2"}), "O1") == frozenset({"O2"})

    def test_toggle_leaf_twice_then_identity(self, two_index):
        start = frozenset({"O2", "O5"})

        for leaf in two_index.objectives:
            assert toggle_leaf(two_index, toggle_leaf(two_index, start, leaf), leaf) == start

    def test_toggle_leaf_when_unknown_then_noop(self, single_index):
        """Stale ids after a reload are ignored, not errors."""
        start = frozenset({"O1"})

        assert toggle_leaf(single_index, start, "stale") == start

    def test_toggle_leaf_does_not_mutate_input(self, single_index):
        start = {"O1"}

        toggle_leaf(single_index, start, "O2")

        assert start == {"O1"}


class TestToggleCascade:
    """Tests for subtopic and topic toggles."""

    def test_toggle_subtopic_when_none_then_full(self, single_index):
        """Scenario: toggling S1 from nothing selects every objective."""
        result = toggle_subtopic(single_index, frozenset(), "S1")

        assert result == frozenset({"O1", "O2"})

    def test_toggle_subtopic_when_full_then_none(self, single_index):
        assert toggle_subtopic(single_index, frozenset({"O1", "O2"}), "S1") == frozenset()

    def test_toggle_subtopic_when_partial_then_full(self, single_index):
        """Partial completes; it never clears."""
        result = toggle_subtopic(single_index, frozenset({"O1"}), "S1")

        assert result == frozenset({"O1", "O2"})

    def test_toggle_topic_when_partial_subtopics_then_full_topic(self, two_index):
        result = toggle_topic(two_index, frozenset({"O1", "O3"}), "TA")

        assert result == frozenset({"O1", "O2", "O3"})

    def test_toggle_topic_when_partial_across_sources_then_completes_topic(self, two_index):
        """Selection {O1, O4}: toggling TA completes it and leaves source B alone."""
        start = frozenset({"O1", "O4"})

        result = toggle_topic(two_index, start, "TA")

        assert result == frozenset({"O1", "O2", "O3", "O4"})
        assert estimate(two_index, result).minutes_for("B") == estimate(two_index, start).minutes_for("B")

    def test_toggle_topic_when_full_then_clears_only_topic(self, two_index):
        result = toggle_topic(two_index, frozenset({"O1", "O2", "O3", "O4"}), "TA")

        assert result == frozenset({"O4"})

    @pytest.mark.parametrize("node_id", ["TA", "TB", "SA1", "SA2", "SB1", "SB2"])
    @pytest.mark.parametrize("start", [
        frozenset(),
        frozenset({"O1"}),
        frozenset({"O1", "O2", "O3", "O4", "O5", "O6"}),
    ])
    def test_cascade_result_is_none_or_full(self, two_index, node_id, start):
        """After a node toggle every descendant matches the node's new state."""
        if node_id in two_index.topics:
            result = toggle_topic(two_index, start, node_id)
            leaves = set(two_index.topic_to_leaves[node_id])
        else:
            result = toggle_subtopic(two_index, start, node_id)
            leaves = set(two_index.subtopic_to_leaves[node_id])
        assert leaves <= result or not (leaves & result)

    def test_toggle_when_unknown_node_then_noop(self, two_index):
        start = frozenset({"O1"})

        assert toggle_topic(two_index, start, "missing") == start
        assert toggle_subtopic(two_index, start, "missing") == start


class TestSourceIsolation:
    """Toggles in one source never touch another."""

    @pytest.mark.parametrize("node_id", ["TA", "SA1", "SA2", "O1", "O3"])
    def test_toggle_in_source_a_keeps_source_b(self, two_index, node_id):
        """Scenario: B's selection survives every toggle in A."""
        start = frozenset({"O4", "O6", "O2"})
        if node_id in two_index.topics:
            result = toggle_topic(two_index, start, node_id)
        elif node_id in two_index.subtopics:
            result = toggle_subtopic(two_index, start, node_id)
        else:
            result = toggle_leaf(two_index, start, node_id)

        b_leaves = set(two_index.source_to_leaves["B"])
        assert result & b_leaves == start & b_leaves

    def test_toggle_in_source_a_keeps_b_states(self, two_index):
        start = frozenset({"O4", "O5"})

        result = toggle_topic(two_index, start, "TA")

        assert derive_state(two_index, result).topic("TB") is SelectionState.PARTIAL
        assert derive_state(two_index, result).subtopic("SB1") is SelectionState.FULL


class TestBulkOperations:
    """Tests for the select-all, deselect-all, clear and prune operations."""

    def test_select_all_topic_is_idempotent(self, two_index):
        once = select_all_topic(two_index, frozenset({"O4"}), "TA")

        assert once == frozenset({"O1", "O2", "O3", "O4"})
        assert select_all_topic(two_index, once, "TA") == once

    def test_deselect_all_topic_is_idempotent(self, two_index):
        once = deselect_all_topic(two_index, frozenset({"O1", "O3", "O4"}), "TA")

        assert once == frozenset({"O4"})
        assert deselect_all_topic(two_index, once, "TA") == once

    def test_select_all_subtopic_when_partial_then_keeps_others(self, two_index):
        result = select_all_subtopic(two_index, frozenset({"O4", "O1"}), "SB2")

        assert result == frozenset({"O1", "O4", "O6"})
        assert select_all_subtopic(two_index, result, "SB2") == result

    def test_deselect_all_subtopic_only_touches_subtopic(self, two_index):
        result = deselect_all_subtopic(two_index, frozenset({"O4", "O5", "O6"}), "SB1")

        assert result == frozenset({"O6"})

    def test_select_all_when_unknown_then_noop(self, two_index):
        start = frozenset({"O1"})

        assert select_all_topic(two_index, start, "missing") == start
        assert select_all_subtopic(two_index, start, "missing") == start
        assert deselect_all_topic(two_index, start, "missing") == start
        assert deselect_all_subtopic(two_index, start, "missing") == start

    def test_bulk_when_topic_and_subtopic_share_id_then_uses_requested_kind(self):
        """Serial topic and subtopic ids can coincide; the call names the kind."""
        source = HierarchySource("igcse", topics=(
            Topic("1", "First", subtopics=(
                Subtopic("7", "Seven", objectives=(Objective("a", "a", "text"),)),
            )),
            Topic("2", "Second", subtopics=(
                Subtopic("1", "One", objectives=(Objective("b", "b", "text"), Objective("c", "c", "text"))),
            )),
        ))
        index = normalize([source])

        assert select_all_subtopic(index, frozenset(), "1") == frozenset({"b", "c"})
        assert select_all_topic(index, frozenset(), "1") == frozenset({"a"})
        assert deselect_all_subtopic(index, frozenset({"a", "b", "c"}), "1") == frozenset({"a"})
        assert deselect_all_topic(index, frozenset({"a", "b", "c"}), "1") == frozenset({"b", "c"})

    def test_clear_source_keeps_other_sources(self, two_index):
        result = clear_source(two_index, frozenset({"O1", "O3", "O4"}), "A")

        assert result == frozenset({"O4"})

    def test_clear_source_when_unknown_then_noop(self, two_index):
        assert clear_source(two_index, frozenset({"O1"}), "C") == frozenset({"O1"})

    def test_clear_returns_empty(self):
        assert clear() == frozenset()

    def test_prune_selection_drops_unknown(self, two_index):
        assert prune_selection(two_index, ["O1", "gone", "O5"]) == frozenset({"O1", "O5"})

    def test_prune_selection_when_source_id_then_single_source(self, two_index):
        assert prune_selection(two_index, ["O1", "O5"], source_id="B") == frozenset({"O5"})
