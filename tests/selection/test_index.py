"""
Unit Tests for Hierarchy Normalization

Tests for normalize and NormalizedIndex.
"""

import pytest

from curriculum_toolkit.core.models import HierarchySource, Objective, Subtopic, Topic
from curriculum_toolkit.selection import (
    DuplicateLeafId,
    DuplicateNodeId,
    HierarchyError,
    normalize,
)


class TestNormalize:
    """Tests for normalize function."""

    def test_normalize_when_two_sources_then_leaf_slices(self, two_index):
        """Leaf slices per node are ordered by hierarchy position."""
        assert two_index.topic_to_leaves["TA"] == ("O1", "O2", "O3")
        assert two_index.subtopic_to_leaves["SB1"] == ("O4", "O5")
        assert two_index.source_to_leaves["B"] == ("O4", "O5", "O6")

    def test_normalize_ancestry_of_every_leaf(self, two_index):
        ancestry = two_index.leaf_to_ancestors["O5"]

        assert (ancestry.subtopic_id, ancestry.topic_id, ancestry.source_id) == ("SB1", "TB", "B")
        assert two_index.subtopic_to_topic["SA2"] == "TA"
        assert two_index.topic_to_source["TB"] == "B"

    def test_normalize_when_topic_slice_then_union_of_subtopics(self, two_index):
        for topic_id, leaves in two_index.topic_to_leaves.items():
            subtopic_leaves = [
                leaf
                for subtopic_id, topic in two_index.subtopic_to_topic.items() if topic == topic_id
                for leaf in two_index.subtopic_to_leaves[subtopic_id]
            ]
            assert list(leaves) == subtopic_leaves

    def test_normalize_when_empty_then_empty_index(self):
        """Zero sources (still loading) is a valid state."""
        index = normalize([])

        assert index.is_empty
        assert index.leaf_count == 0

    def test_normalize_when_source_without_topics_then_empty_slice(self):
        index = normalize([HierarchySource("igcse")])

        assert index.is_empty
        assert index.source_to_leaves["igcse"] == ()

    def test_normalize_when_subtopic_has_no_objectives_then_empty_slice(self):
        source = HierarchySource("igcse", topics=(
            Topic("T1", "Empty", subtopics=(Subtopic("S1", "Nothing yet"),)),
        ))

        index = normalize([source])

        assert index.subtopic_to_leaves["S1"] == ()
        assert index.topic_to_leaves["T1"] == ()

    def test_normalize_leaves_by_code(self, two_index):
        assert two_index.leaves_by_code["O4"] == ("O4",)


class TestDuplicateIds:
    """Tests for id collision handling."""

    @staticmethod
    def _source(source_id: str, topic_id: str, subtopic_id: str, leaf_ids) -> HierarchySource:
        return HierarchySource(source_id, topics=(
            Topic(topic_id, "Topic", subtopics=(
                Subtopic(subtopic_id, "Subtopic", objectives=tuple(
                    Objective(leaf, leaf, "text") for leaf in leaf_ids
                )),
            )),
        ))

    def test_normalize_when_leaf_id_in_two_sources_then_raises(self):
        """Objective "1.1" in both IGCSE and A Level must not be merged."""
        igcse = self._source("igcse", "ig-1", "ig-1a", ["1.1", "1.2"])
        alevel = self._source("alevel", "al-1", "al-1a", ["1.1"])

        with pytest.raises(DuplicateLeafId) as exc_info:
            normalize([igcse, alevel])

        assert exc_info.value.leaf_id == "1.1"
        assert exc_info.value.first_source == "igcse"
        assert exc_info.value.second_source == "alevel"
        assert "in sources 'igcse' and 'alevel'" in str(exc_info.value)

    def test_normalize_when_leaf_id_twice_in_source_then_raises(self):
        source = self._source("igcse", "T1", "S1", ["1.1", "1.1"])

        with pytest.raises(DuplicateLeafId, match="twice in source 'igcse'"):
            normalize([source])

    def test_normalize_when_duplicate_topic_then_raises(self):
        first = self._source("igcse", "T1", "S1", ["O1"])
        second = self._source("alevel", "T1", "S2", ["O2"])

        with pytest.raises(DuplicateNodeId, match="Duplicate topic id 'T1'"):
            normalize([first, second])

    def test_normalize_when_duplicate_subtopic_then_raises(self):
        first = self._source("igcse", "T1", "S1", ["O1"])
        second = self._source("alevel", "T2", "S1", ["O2"])

        with pytest.raises(DuplicateNodeId) as exc_info:
            normalize([first, second])

        assert exc_info.value.kind == "subtopic"

    def test_normalize_when_topic_and_subtopic_share_id_then_separate_slices(self):
        """Topic and subtopic ids are unique per kind only."""
        first = self._source("igcse", "1", "7", ["a"])
        second = self._source("alevel", "2", "1", ["b", "c"])

        index = normalize([first, second])

        assert index.topic_to_leaves["1"] == ("a",)
        assert index.subtopic_to_leaves["1"] == ("b", "c")
        assert index.subtopic_to_topic["1"] == "2"

    def test_normalize_when_duplicate_source_then_raises(self):
        first = self._source("igcse", "T1", "S1", ["O1"])
        second = self._source("igcse", "T2", "S2", ["O2"])

        with pytest.raises(HierarchyError):
            normalize([first, second])


class TestIndexQueries:
    """Tests for NormalizedIndex query methods."""

    def test_is_leaf(self, two_index):
        assert two_index.is_leaf("O1")
        assert not two_index.is_leaf("TA")
        assert not two_index.is_leaf("SA1")

    def test_source_of(self, two_index):
        assert two_index.source_of("O6") == "B"
        assert two_index.source_of("missing") is None

    def test_known_leaves_drops_unknown(self, two_index):
        assert two_index.known_leaves({"O1", "gone", "TA"}) == frozenset({"O1"})

    def test_repr(self, two_index):
        assert repr(two_index) == "NormalizedIndex(sources=2, topics=2, subtopics=4, objectives=6)"
