"""
Module: objectives

Purpose:
    Provides the Objective dataclass - the leaf of the curriculum hierarchy
    and the only node carrying an authored teaching duration. Also defines
    the Difficulty and BloomsLevel enums used to describe objectives.

Key Classes:
    - Difficulty: basic / intermediate / advanced
    - BloomsLevel: remember ... create
    - Objective: Immutable learning objective (selectable leaf)

Dependencies:
    - dataclasses (std)
    - enum (std)

Used By:
    - core.models.hierarchy.Subtopic
    - core.utils.serialization
    - selection.estimate
    - selection.filters
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class Difficulty(str, Enum):
    """Authored difficulty of an objective."""
    BASIC = "basic"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"

    def __str__(self) -> str:
        return self.value


class BloomsLevel(str, Enum):
    """Bloom's taxonomy level of an objective."""
    REMEMBER = "remember"
    UNDERSTAND = "understand"
    APPLY = "apply"
    ANALYZE = "analyze"
    EVALUATE = "evaluate"
    CREATE = "create"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class Objective:
    """
    Learning objective (leaf node, immutable).

    The finest-grained selectable unit. Topic and subtopic selection is
    always derived from which objectives are selected.

    Attributes:
        id: Globally unique objective id
        code: Specification code (e.g. "5.1"), may repeat across sources
        statement: The objective text
        difficulty: Optional authored difficulty
        blooms_level: Optional Bloom's level
        estimated_teaching_minutes: Non-negative teaching time in minutes
        keywords: Key terms
        command_words: Assessment command words (descriptive only)
        assessment_weight: Relative assessment weight (descriptive only)
        prerequisites: Ids/codes of prerequisite objectives (descriptive only)

    Invariants:
        - id is non-empty
        - estimated_teaching_minutes >= 0

    Example:
        >>> obj = Objective("1.1", "1.1", "Understand the three states of matter",
        ...                 estimated_teaching_minutes=45)
        >>> obj.estimated_teaching_minutes
        45
    """

    id: str
    code: str
    statement: str
    difficulty: Optional[Difficulty] = None
    blooms_level: Optional[BloomsLevel] = None
    estimated_teaching_minutes: int = 0
    keywords: Tuple[str, ...] = ()
    command_words: Tuple[str, ...] = ()
    assessment_weight: int = 0
    prerequisites: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        """Validate objective on construction."""
        if not self.id:
            raise ValueError("Objective id cannot be empty")
        if self.estimated_teaching_minutes < 0:
            raise ValueError(
                f"Teaching minutes cannot be negative for {self.id}: "
                f"{self.estimated_teaching_minutes}"
            )

    def __repr__(self) -> str:
        """Concise representation for debugging."""
        return f"Objective({self.id!r}, code={self.code!r}, minutes={self.estimated_teaching_minutes})"
