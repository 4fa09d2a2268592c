"""
Module: hierarchy

Purpose:
    Provides the Subtopic, Topic and HierarchySource dataclasses - the
    immutable, ordered curriculum tree a selection is made over.
    One HierarchySource corresponds to one curriculum level (e.g. "IGCSE"
    or "A Level"); its leaf ids must never overlap another source's.

Key Functions:
    - Subtopic.leaf_ids: Ordered objective ids under a subtopic
    - Topic.leaf_ids: Ordered objective ids under a topic
    - Topic.iter_objectives(): Iterate over every objective in a topic
    - HierarchySource.leaf_ids: Ordered objective ids under a source

Dependencies:
    - dataclasses (std)
    - .objectives.Objective

Used By:
    - core.utils.serialization
    - selection.index.normalize
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

from .objectives import Objective


@dataclass(frozen=True, slots=True)
class Subtopic:
    """
    Group of objectives inside a topic (immutable).

    Attributes:
        id: Subtopic id
        name: Display name
        description: Free text
        objectives: Ordered objectives
        practical_work: Required practical activities (descriptive only)
        mathematical_skills: Mathematical requirements (descriptive only)
    """

    id: str
    name: str
    description: str = ""
    objectives: Tuple[Objective, ...] = ()
    practical_work: Tuple[str, ...] = ()
    mathematical_skills: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Subtopic id cannot be empty")

    @property
    def leaf_ids(self) -> Tuple[str, ...]:
        """Objective ids in hierarchy order."""
        return tuple(obj.id for obj in self.objectives)


@dataclass(frozen=True, slots=True)
class Topic:
    """
    Top-level curriculum topic (immutable).

    Attributes:
        id: Topic id, globally unique across sources
        name: Display name
        description: Free text
        specification_code: Official topic code (e.g. "1")
        duration_minutes: Topic-level block estimate, used only when the
            topic is counted as a whole rather than by objectives
        subtopics: Ordered subtopics
        source_id: Back-reference to the owning HierarchySource

    Invariants:
        - duration_minutes >= 0
    """

    id: str
    name: str
    description: str = ""
    specification_code: str = ""
    duration_minutes: int = 0
    subtopics: Tuple[Subtopic, ...] = ()
    source_id: str = ""

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Topic id cannot be empty")
        if self.duration_minutes < 0:
            raise ValueError(
                f"Topic duration cannot be negative for {self.id}: {self.duration_minutes}"
            )

    @property
    def leaf_ids(self) -> Tuple[str, ...]:
        """Objective ids across all subtopics, in hierarchy order."""
        return tuple(obj.id for obj in self.iter_objectives())

    def iter_objectives(self) -> Iterator[Objective]:
        """Iterate over every objective under this topic."""
        for subtopic in self.subtopics:
            yield from subtopic.objectives


@dataclass(frozen=True, slots=True)
class HierarchySource:
    """
    One origin curriculum (immutable once loaded).

    Attributes:
        source_id: Source identifier (e.g. "igcse")
        topics: Ordered topics, each back-referencing this source
        name: Optional display name (e.g. "IGCSE Chemistry Edexcel")

    Example:
        >>> source = HierarchySource("igcse", topics=(topic,), name="IGCSE")
        >>> source.leaf_ids
        ('1.1', '1.2')
    """

    source_id: str
    topics: Tuple[Topic, ...] = ()
    name: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.source_id:
            raise ValueError("HierarchySource source_id cannot be empty")
        for topic in self.topics:
            if topic.source_id and topic.source_id != self.source_id:
                raise ValueError(
                    f"Topic {topic.id} belongs to source {topic.source_id!r}, "
                    f"not {self.source_id!r}"
                )

    @property
    def leaf_ids(self) -> Tuple[str, ...]:
        """Objective ids across all topics, in hierarchy order."""
        return tuple(leaf for topic in self.topics for leaf in topic.leaf_ids)

    def __repr__(self) -> str:
        """Concise representation for debugging."""
        return f"HierarchySource({self.source_id!r}, topics={len(self.topics)})"
