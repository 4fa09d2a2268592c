"""
Module: selection.toggle

Purpose:
    Toggle Engine. Produces the next selection from the current one for a
    click on an objective, subtopic or topic, cascading to every
    descendant objective.

    Every operation takes the current selection and returns a new
    frozenset; the input is never mutated and never retained. Each
    operation reads and writes only the target node's own leaf slice, so
    a change in one hierarchy source can never leak into another.

Key Functions:
    - toggle_leaf(): Flip one objective
    - toggle_subtopic() / toggle_topic(): Complete-then-clear cascade
    - select_all_topic() / select_all_subtopic(): Idempotent add of a node's objectives
    - deselect_all_topic() / deselect_all_subtopic(): Idempotent removal
    - clear_source() / clear(): Drop a source's objectives / everything
    - prune_selection(): Drop ids unknown to the index

Dependencies:
    - selection.index.NormalizedIndex
    - selection.states: Current tri-state before flipping

Used By:
    - selection.session: Selection Store
"""

from __future__ import annotations

import logging
from typing import AbstractSet, Iterable, Optional, Sequence

from curriculum_toolkit.core.models import SelectionState

from .index import NormalizedIndex
from .states import subtopic_state, topic_state

logger = logging.getLogger(__name__)


def toggle_leaf(index: NormalizedIndex, selection: AbstractSet[str], leaf_id: str) -> frozenset[str]:
    """
    Flip membership of exactly one objective.

    An id unknown to the index (e.g. stale after a hierarchy reload) is a
    no-op, not an error.

    Args:
        index: Normalized hierarchy
        selection: Current selection
        leaf_id: Objective id to flip

    Returns:
        New selection; toggle_leaf(toggle_leaf(s, x), x) == s
    """
    current = frozenset(selection)
    if not index.is_leaf(leaf_id):
        logger.debug(f"Ignoring toggle of unknown objective {leaf_id!r}")
        return current
    if leaf_id in current:
        return current - {leaf_id}
    return current | {leaf_id}


def toggle_subtopic(index: NormalizedIndex, selection: AbstractSet[str], subtopic_id: str) -> frozenset[str]:
    """
    Toggle every objective of a subtopic.

    FULL clears the subtopic; NONE or PARTIAL completes it to FULL.
    Toggling a partially-selected subtopic therefore never clears it.

    Args:
        index: Normalized hierarchy
        selection: Current selection
        subtopic_id: Subtopic to toggle (unknown ids are a no-op)

    Returns:
        New selection
    """
    leaves = index.subtopic_to_leaves.get(subtopic_id)
    if leaves is None:
        logger.debug(f"Ignoring toggle of unknown subtopic {subtopic_id!r}")
        return frozenset(selection)
    state = subtopic_state(index, selection, subtopic_id)
    return _cascade(selection, leaves, state)


def toggle_topic(index: NormalizedIndex, selection: AbstractSet[str], topic_id: str) -> frozenset[str]:
    """
    Toggle every objective of a topic, across all of its subtopics.

    Same policy as `toggle_subtopic`, applied over the topic's leaf slice
    regardless of the individual subtopic states.

    Args:
        index: Normalized hierarchy
        selection: Current selection
        topic_id: Topic to toggle (unknown ids are a no-op)

    Returns:
        New selection
    """
    leaves = index.topic_to_leaves.get(topic_id)
    if leaves is None:
        logger.debug(f"Ignoring toggle of unknown topic {topic_id!r}")
        return frozenset(selection)
    state = topic_state(index, selection, topic_id)
    return _cascade(selection, leaves, state)


def _cascade(selection: AbstractSet[str], leaves: Sequence[str], state: SelectionState) -> frozenset[str]:
    if state is SelectionState.FULL:
        return frozenset(selection) - frozenset(leaves)
    return frozenset(selection) | frozenset(leaves)


# ─────────────────────────────────────────────────────────────────────────────
# Idempotent Bulk Operations
# ─────────────────────────────────────────────────────────────────────────────

def select_all_topic(index: NormalizedIndex, selection: AbstractSet[str], topic_id: str) -> frozenset[str]:
    """
    Add every objective of a topic.

    Objectives selected elsewhere are kept. Applying it twice has the same
    effect as applying it once. Unknown ids are a no-op.
    """
    return _merge(selection, index.topic_to_leaves.get(topic_id), "topic", topic_id, add=True)


def select_all_subtopic(index: NormalizedIndex, selection: AbstractSet[str], subtopic_id: str) -> frozenset[str]:
    """Add every objective of a subtopic (idempotent, unknown ids are a no-op)."""
    return _merge(selection, index.subtopic_to_leaves.get(subtopic_id), "subtopic", subtopic_id, add=True)


def deselect_all_topic(index: NormalizedIndex, selection: AbstractSet[str], topic_id: str) -> frozenset[str]:
    """Remove every objective of a topic. Idempotent counterpart of `select_all_topic`."""
    return _merge(selection, index.topic_to_leaves.get(topic_id), "topic", topic_id, add=False)


def deselect_all_subtopic(index: NormalizedIndex, selection: AbstractSet[str], subtopic_id: str) -> frozenset[str]:
    """Remove every objective of a subtopic."""
    return _merge(selection, index.subtopic_to_leaves.get(subtopic_id), "subtopic", subtopic_id, add=False)


def _merge(
    selection: AbstractSet[str],
    leaves: Optional[Sequence[str]],
    kind: str,
    node_id: str,
    *,
    add: bool,
) -> frozenset[str]:
    if leaves is None:
        logger.debug(f"Ignoring bulk change of unknown {kind} {node_id!r}")
        return frozenset(selection)
    if add:
        return frozenset(selection) | frozenset(leaves)
    return frozenset(selection) - frozenset(leaves)


def clear_source(index: NormalizedIndex, selection: AbstractSet[str], source_id: str) -> frozenset[str]:
    """Remove every objective of one source, leaving other sources untouched."""
    leaves = index.source_to_leaves.get(source_id, ())
    return frozenset(selection) - frozenset(leaves)


def clear() -> frozenset[str]:
    """Empty selection."""
    return frozenset()


def prune_selection(
    index: NormalizedIndex,
    selection: Iterable[str],
    *,
    source_id: Optional[str] = None,
) -> frozenset[str]:
    """
    Drop ids that are not objectives of the index.

    Used after a hierarchy reload, where previously selected objectives
    may have disappeared.

    Args:
        index: Normalized hierarchy
        selection: Ids to filter
        source_id: If given, also drop objectives of other sources

    Returns:
        Selection containing only known objective ids
    """
    current = frozenset(selection)
    kept = index.known_leaves(current)
    if source_id is not None:
        kept = frozenset(i for i in kept if index.source_of(i) == source_id)
    dropped = len(current) - len(kept)
    if dropped:
        logger.debug(f"Pruned {dropped} unknown objective ids from selection")
    return kept
