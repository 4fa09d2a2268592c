"""
Module: selection

Purpose:
    Provides the derived selection models: the tri-state SelectionState,
    the DerivedStates map for every topic/subtopic, the SelectionSnapshot
    handed back to a form, and the per-source SelectionSummary.

    The selection itself is a plain frozenset of objective ids. Topic and
    subtopic selection is never stored - only derived from that set.

Key Functions:
    - SelectionState.from_counts(selected, total): Tri-state rule
    - DerivedStates.topic(id) / DerivedStates.subtopic(id): State lookup
    - SelectionSummary.total_objectives: Count across sources

Dependencies:
    - dataclasses (std)
    - enum (std)

Used By:
    - selection.states
    - selection.estimate
    - selection.session
    - core.utils.serialization
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Mapping, Tuple


class SelectionState(str, Enum):
    """Tri-state summary of a non-leaf node."""
    NONE = "none"
    PARTIAL = "partial"
    FULL = "full"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_counts(cls, selected: int, total: int) -> SelectionState:
        """
        Derive the state from selected/total descendant leaf counts.

        A node with no leaves is always NONE, never FULL.

        Args:
            selected: Number of descendant leaves in the selection
            total: Number of descendant leaves

        Returns:
            NONE, PARTIAL or FULL
        """
        if total == 0 or selected == 0:
            return cls.NONE
        if selected >= total:
            return cls.FULL
        return cls.PARTIAL


@dataclass(frozen=True)
class DerivedStates:
    """
    Tri-state for every topic and subtopic in an index.

    Attributes:
        topic_states: Topic id -> state
        subtopic_states: Subtopic id -> state

    Example:
        >>> states = derive_state(index, frozenset({"O1"}))
        >>> states.subtopic("S1")
        <SelectionState.PARTIAL: 'partial'>
    """

    topic_states: Mapping[str, SelectionState] = field(default_factory=dict)
    subtopic_states: Mapping[str, SelectionState] = field(default_factory=dict)

    def topic(self, topic_id: str) -> SelectionState:
        """State of a topic (NONE for unknown ids)."""
        return self.topic_states.get(topic_id, SelectionState.NONE)

    def subtopic(self, subtopic_id: str) -> SelectionState:
        """State of a subtopic (NONE for unknown ids)."""
        return self.subtopic_states.get(subtopic_id, SelectionState.NONE)


@dataclass(frozen=True)
class SelectionSnapshot:
    """
    Ordered view of a selection for the consuming form.

    All ids are listed in hierarchy order (source, topic, subtopic,
    objective), independent of the order selections were made.

    Attributes:
        topic_ids: Selected topic ids
        subtopic_ids: Selected subtopic ids
        objective_ids: Selected objective ids
        objective_codes: Codes of the selected objectives (same order)
    """

    topic_ids: Tuple[str, ...] = ()
    subtopic_ids: Tuple[str, ...] = ()
    objective_ids: Tuple[str, ...] = ()
    objective_codes: Tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.objective_ids


@dataclass(frozen=True)
class SourceSummary:
    """Selection counts for one hierarchy source."""

    source_id: str
    selected_objectives: int = 0
    total_objectives: int = 0
    full_topics: int = 0
    partial_topics: int = 0
    full_subtopics: int = 0
    partial_subtopics: int = 0


@dataclass(frozen=True)
class SelectionSummary:
    """
    Per-source selection counts.

    Attributes:
        sources: Source id -> SourceSummary, in load order
    """

    sources: Dict[str, SourceSummary] = field(default_factory=dict)

    @property
    def total_objectives(self) -> int:
        """Selected objectives across every source."""
        return sum(s.selected_objectives for s in self.sources.values())

    def __repr__(self) -> str:
        """Concise representation for debugging."""
        parts = ", ".join(
            f"{sid}={s.selected_objectives}/{s.total_objectives}"
            for sid, s in self.sources.items()
        )
        return f"SelectionSummary({parts})"
