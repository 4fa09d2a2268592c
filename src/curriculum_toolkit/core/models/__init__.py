"""
Core Models Package

Immutable, validated data models that serve as the single source of truth.

All models in this package are frozen dataclasses. Hierarchy data is
read-only for the lifetime of an editing session, and every selection
operation produces a new frozenset instead of mutating the old one.
"""

from .objectives import Objective, Difficulty, BloomsLevel
from .hierarchy import Subtopic, Topic, HierarchySource
from .selection import (
    SelectionState,
    DerivedStates,
    SelectionSnapshot,
    SelectionSummary,
    SourceSummary,
)
from .estimate import Estimate

__all__ = [
    "Objective",
    "Difficulty",
    "BloomsLevel",
    "Subtopic",
    "Topic",
    "HierarchySource",
    "SelectionState",
    "DerivedStates",
    "SelectionSnapshot",
    "SelectionSummary",
    "SourceSummary",
    "Estimate",
]
