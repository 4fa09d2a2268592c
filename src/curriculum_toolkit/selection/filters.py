"""
Module: selection.filters

Purpose:
    Search and filter criteria for browsing a normalized hierarchy
    (search text, curriculum level, difficulty, Bloom's level).

    Filters only narrow what is shown. They never change toggle
    semantics: a topic or subtopic toggle always cascades over the node's
    full objective slice, including objectives hidden by a filter.

Key Classes:
    - FilterCriteria: Immutable filter settings

Key Functions:
    - filter_topics(): Topics matching search and source filters
    - matching_objectives(): Objectives matching every criterion
    - objective_matches(): Single-objective predicate

Dependencies:
    - selection.index.NormalizedIndex
    - core.models: Objective, Topic, Difficulty, BloomsLevel

Used By:
    - Consumers building a filtered browse view
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Union

from curriculum_toolkit.core.models import BloomsLevel, Difficulty, Objective, Topic

from .index import NormalizedIndex


@dataclass(frozen=True)
class FilterCriteria:
    """
    Filter settings (immutable). None means "all".

    Attributes:
        search: Case-insensitive substring; matched against topic name and
            description, and objective statement, code and keywords
        source_id: Restrict to one hierarchy source (curriculum level)
        difficulty: Restrict objectives to one difficulty
        blooms_level: Restrict objectives to one Bloom's level

    Example:
        >>> criteria = FilterCriteria(search="ionic", difficulty="basic")
        >>> criteria.difficulty
        <Difficulty.BASIC: 'basic'>
    """

    search: str = ""
    source_id: Optional[str] = None
    difficulty: Optional[Union[Difficulty, str]] = None
    blooms_level: Optional[Union[BloomsLevel, str]] = None

    def __post_init__(self) -> None:
        """Coerce string filters to enums; "all" means no filter."""
        object.__setattr__(self, "search", (self.search or "").strip())
        object.__setattr__(self, "difficulty", _coerce(Difficulty, self.difficulty, "difficulty"))
        object.__setattr__(self, "blooms_level", _coerce(BloomsLevel, self.blooms_level, "blooms_level"))
        if self.source_id == "all":
            object.__setattr__(self, "source_id", None)

    @property
    def needle(self) -> str:
        return self.search.lower()

    @property
    def is_empty(self) -> bool:
        return not (self.search or self.source_id or self.difficulty or self.blooms_level)


def _coerce(enum_cls, value, name: str):
    if value is None or value == "all":
        return None
    if isinstance(value, enum_cls):
        return value
    valid = [member.value for member in enum_cls]
    if not isinstance(value, str) or value not in valid:
        raise ValueError(f"Invalid {name} filter: {value!r} (expected one of {valid})")
    return enum_cls(value)


def topic_matches(topic: Topic, criteria: FilterCriteria) -> bool:
    """True if the topic's name or description contains the search text."""
    needle = criteria.needle
    if not needle:
        return True
    return needle in topic.name.lower() or needle in topic.description.lower()


def objective_matches(objective: Objective, criteria: FilterCriteria) -> bool:
    """
    True if the objective satisfies the difficulty, Bloom's and search filters.

    The source filter is not checked here; it needs the index.
    """
    if criteria.difficulty is not None and objective.difficulty != criteria.difficulty:
        return False
    if criteria.blooms_level is not None and objective.blooms_level != criteria.blooms_level:
        return False
    needle = criteria.needle
    if not needle:
        return True
    return (
        needle in objective.statement.lower()
        or needle in objective.code.lower()
        or any(needle in keyword.lower() for keyword in objective.keywords)
    )


def filter_topics(index: NormalizedIndex, criteria: FilterCriteria) -> List[Topic]:
    """
    Topics matching the search text and source filter, in hierarchy order.

    Args:
        index: Normalized hierarchy
        criteria: Filter settings

    Returns:
        Matching topics
    """
    return [
        topic for topic_id, topic in index.topics.items()
        if (criteria.source_id is None or index.topic_to_source[topic_id] == criteria.source_id)
        and topic_matches(topic, criteria)
    ]


def matching_objectives(index: NormalizedIndex, criteria: FilterCriteria) -> List[Objective]:
    """
    Objectives satisfying every criterion, in hierarchy order.

    Args:
        index: Normalized hierarchy
        criteria: Filter settings

    Returns:
        Matching objectives
    """
    result = []
    for leaf_id, objective in index.objectives.items():
        if criteria.source_id is not None and index.source_of(leaf_id) != criteria.source_id:
            continue
        if objective_matches(objective, criteria):
            result.append(objective)
    return result
