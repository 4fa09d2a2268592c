"""
Module: selection.states

Purpose:
    Tri-State Deriver. Computes NONE / PARTIAL / FULL for every topic and
    subtopic from the current objective selection.

    Topic states are computed over the topic's own leaf slice, never from
    its subtopics' states, so both levels always agree with the selection.

Key Functions:
    - derive_state(): States for every topic and subtopic
    - topic_state() / subtopic_state(): State of a single node
    - snapshot(): Ordered selected topic/subtopic/objective ids

Dependencies:
    - selection.index.NormalizedIndex
    - core.models.selection: SelectionState, DerivedStates

Used By:
    - selection.toggle: Current state before flipping
    - selection.estimate: Per-source summary
    - selection.session
"""

from __future__ import annotations

from typing import AbstractSet, Sequence

from curriculum_toolkit.core.models import DerivedStates, SelectionSnapshot, SelectionState

from .index import NormalizedIndex


def _state_of(leaves: Sequence[str], selection: AbstractSet[str]) -> SelectionState:
    selected = sum(1 for leaf in leaves if leaf in selection)
    return SelectionState.from_counts(selected, len(leaves))


def derive_state(index: NormalizedIndex, selection: AbstractSet[str]) -> DerivedStates:
    """
    Derive the tri-state of every topic and subtopic.

    Ids in the selection that are not objectives of the index are ignored.
    An empty index yields empty state maps.

    Args:
        index: Normalized hierarchy
        selection: Selected objective ids

    Returns:
        DerivedStates for every topic and subtopic in the index

    Example:
        >>> states = derive_state(index, frozenset({"O1", "O2"}))
        >>> states.subtopic("S1")
        <SelectionState.FULL: 'full'>
    """
    return DerivedStates(
        topic_states={
            topic_id: _state_of(leaves, selection)
            for topic_id, leaves in index.topic_to_leaves.items()
        },
        subtopic_states={
            subtopic_id: _state_of(leaves, selection)
            for subtopic_id, leaves in index.subtopic_to_leaves.items()
        },
    )


def topic_state(index: NormalizedIndex, selection: AbstractSet[str], topic_id: str) -> SelectionState:
    """State of one topic (NONE for unknown ids)."""
    return _state_of(index.topic_to_leaves.get(topic_id, ()), selection)


def subtopic_state(index: NormalizedIndex, selection: AbstractSet[str], subtopic_id: str) -> SelectionState:
    """State of one subtopic (NONE for unknown ids)."""
    return _state_of(index.subtopic_to_leaves.get(subtopic_id, ()), selection)


def snapshot(
    index: NormalizedIndex,
    selection: AbstractSet[str],
    *,
    include_partial: bool = False,
) -> SelectionSnapshot:
    """
    Ordered view of a selection for the consuming form.

    Topics and subtopics are listed when FULL, or also when PARTIAL if
    include_partial is set. Objectives unknown to the index are omitted.

    Args:
        index: Normalized hierarchy
        selection: Selected objective ids
        include_partial: Also list partially-selected topics/subtopics

    Returns:
        SelectionSnapshot in hierarchy order
    """
    states = derive_state(index, selection)
    listed = {SelectionState.FULL, SelectionState.PARTIAL} if include_partial else {SelectionState.FULL}

    objective_ids = tuple(leaf for leaf in index.objectives if leaf in selection)
    return SelectionSnapshot(
        topic_ids=tuple(t for t, state in states.topic_states.items() if state in listed),
        subtopic_ids=tuple(s for s, state in states.subtopic_states.items() if state in listed),
        objective_ids=objective_ids,
        objective_codes=tuple(index.objectives[leaf].code for leaf in objective_ids),
    )
