"""
Module: selection.index

Purpose:
    Hierarchy Normalizer. Flattens one or more HierarchySource trees into
    a single NormalizedIndex with direct node lookups, ordered leaf slices
    per topic/subtopic/source, and a fixed leaf -> ancestors table.

Key Functions:
    - normalize(): Build a NormalizedIndex from loaded sources

Key Classes:
    - NormalizedIndex: Read-only lookup tables over all sources
    - Ancestry: (subtopic_id, topic_id, source_id) of a leaf
    - HierarchyError / DuplicateLeafId / DuplicateNodeId: Load failures

Dependencies:
    - core.models: HierarchySource, Topic, Subtopic, Objective

Used By:
    - selection.states, selection.toggle, selection.estimate
    - selection.session
    - core.utils.serialization
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional, Sequence, Tuple

from curriculum_toolkit.core.models import HierarchySource, Objective, Subtopic, Topic

logger = logging.getLogger(__name__)


class HierarchyError(Exception):
    """Error normalizing a set of hierarchy sources."""
    pass


class DuplicateLeafId(HierarchyError):
    """
    Two objectives share an id.

    Raised instead of silently merging two distinct objectives.

    Attributes:
        leaf_id: The colliding objective id
        first_source: Source that registered the id first
        second_source: Source that repeated it
    """

    def __init__(self, leaf_id: str, first_source: str, second_source: str):
        if first_source == second_source:
            where = f"twice in source {first_source!r}"
        else:
            where = f"in sources {first_source!r} and {second_source!r}"
        super().__init__(f"Duplicate objective id {leaf_id!r} {where}")
        self.leaf_id = leaf_id
        self.first_source = first_source
        self.second_source = second_source


class DuplicateNodeId(HierarchyError):
    """A source, topic or subtopic id is used more than once."""

    def __init__(self, kind: str, node_id: str):
        super().__init__(f"Duplicate {kind} id {node_id!r}")
        self.kind = kind
        self.node_id = node_id


@dataclass(frozen=True, slots=True)
class Ancestry:
    """Fixed ancestor chain of one objective."""

    subtopic_id: str
    topic_id: str
    source_id: str


@dataclass(frozen=True)
class NormalizedIndex:
    """
    Indexed, read-only view over every loaded hierarchy source.

    Built once per hierarchy load by `normalize()`; safe for the caller to
    cache. All leaf tuples are in hierarchy order.

    Attributes:
        sources: Source id -> HierarchySource (load order)
        topics: Topic id -> Topic
        subtopics: Subtopic id -> Subtopic
        objectives: Objective id -> Objective
        leaf_to_ancestors: Objective id -> Ancestry
        topic_to_leaves: Topic id -> objective ids
        subtopic_to_leaves: Subtopic id -> objective ids
        source_to_leaves: Source id -> objective ids
        subtopic_to_topic: Subtopic id -> topic id
        topic_to_source: Topic id -> source id
        leaves_by_code: Objective code -> objective ids (codes can repeat
            across sources)

    Example:
        >>> index = normalize([igcse, a_level])
        >>> index.leaf_to_ancestors["1.1"].source_id
        'igcse'
    """

    sources: Dict[str, HierarchySource] = field(default_factory=dict)
    topics: Dict[str, Topic] = field(default_factory=dict)
    subtopics: Dict[str, Subtopic] = field(default_factory=dict)
    objectives: Dict[str, Objective] = field(default_factory=dict)
    leaf_to_ancestors: Dict[str, Ancestry] = field(default_factory=dict)
    topic_to_leaves: Dict[str, Tuple[str, ...]] = field(default_factory=dict)
    subtopic_to_leaves: Dict[str, Tuple[str, ...]] = field(default_factory=dict)
    source_to_leaves: Dict[str, Tuple[str, ...]] = field(default_factory=dict)
    subtopic_to_topic: Dict[str, str] = field(default_factory=dict)
    topic_to_source: Dict[str, str] = field(default_factory=dict)
    leaves_by_code: Dict[str, Tuple[str, ...]] = field(default_factory=dict)

    # ─────────────────────────────────────────────────────────────────────────
    # Query Methods
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def is_empty(self) -> bool:
        """True while no objective is loaded (e.g. hierarchy still loading)."""
        return not self.leaf_to_ancestors

    @property
    def leaf_count(self) -> int:
        return len(self.leaf_to_ancestors)

    def is_leaf(self, node_id: str) -> bool:
        return node_id in self.leaf_to_ancestors

    def source_of(self, leaf_id: str) -> Optional[str]:
        """Source id of a leaf, or None for unknown ids."""
        ancestry = self.leaf_to_ancestors.get(leaf_id)
        return ancestry.source_id if ancestry else None

    def known_leaves(self, ids: Iterable[str]) -> frozenset[str]:
        """Subset of ids that are objectives in this index."""
        return frozenset(i for i in ids if i in self.leaf_to_ancestors)

    def __repr__(self) -> str:
        """Concise representation for debugging."""
        return (
            f"NormalizedIndex(sources={len(self.sources)}, topics={len(self.topics)}, "
            f"subtopics={len(self.subtopics)}, objectives={len(self.objectives)})"
        )


def normalize(sources: Sequence[HierarchySource]) -> NormalizedIndex:
    """
    Flatten hierarchy sources into a NormalizedIndex.

    Pure transformation with no side effects. An empty sequence, or
    sources without topics, yield an empty index.

    Args:
        sources: Loaded sources, in display order

    Returns:
        NormalizedIndex over every source

    Raises:
        DuplicateLeafId: If an objective id appears twice (within or across sources)
        DuplicateNodeId: If a source, topic or subtopic id appears twice
            among nodes of the same kind (a topic may share an id with a subtopic)
    """
    source_map: Dict[str, HierarchySource] = {}
    topics: Dict[str, Topic] = {}
    subtopics: Dict[str, Subtopic] = {}
    objectives: Dict[str, Objective] = {}
    ancestors: Dict[str, Ancestry] = {}
    topic_leaves: Dict[str, Tuple[str, ...]] = {}
    subtopic_leaves: Dict[str, Tuple[str, ...]] = {}
    source_leaves: Dict[str, Tuple[str, ...]] = {}
    subtopic_to_topic: Dict[str, str] = {}
    topic_to_source: Dict[str, str] = {}
    by_code: Dict[str, list[str]] = {}

    for source in sources:
        if source.source_id in source_map:
            raise DuplicateNodeId("source", source.source_id)
        source_map[source.source_id] = source

        source_ids: list[str] = []
        for topic in source.topics:
            if topic.id in topics:
                raise DuplicateNodeId("topic", topic.id)
            topics[topic.id] = topic
            topic_to_source[topic.id] = source.source_id

            topic_ids: list[str] = []
            for subtopic in topic.subtopics:
                if subtopic.id in subtopics:
                    raise DuplicateNodeId("subtopic", subtopic.id)
                subtopics[subtopic.id] = subtopic
                subtopic_to_topic[subtopic.id] = topic.id

                for objective in subtopic.objectives:
                    existing = ancestors.get(objective.id)
                    if existing is not None:
                        raise DuplicateLeafId(objective.id, existing.source_id, source.source_id)
                    objectives[objective.id] = objective
                    ancestors[objective.id] = Ancestry(subtopic.id, topic.id, source.source_id)
                    if objective.code:
                        by_code.setdefault(objective.code, []).append(objective.id)

                subtopic_leaves[subtopic.id] = subtopic.leaf_ids
                topic_ids.extend(subtopic.leaf_ids)

            topic_leaves[topic.id] = tuple(topic_ids)
            source_ids.extend(topic_ids)

        source_leaves[source.source_id] = tuple(source_ids)

    index = NormalizedIndex(
        sources=source_map,
        topics=topics,
        subtopics=subtopics,
        objectives=objectives,
        leaf_to_ancestors=ancestors,
        topic_to_leaves=topic_leaves,
        subtopic_to_leaves=subtopic_leaves,
        source_to_leaves=source_leaves,
        subtopic_to_topic=subtopic_to_topic,
        topic_to_source=topic_to_source,
        leaves_by_code={code: tuple(ids) for code, ids in by_code.items()},
    )
    logger.debug(f"Normalized {index!r}")
    return index
