"""
Module: selection.session

Purpose:
    Selection Store. Holds the one mutable piece of state - the current
    frozenset of selected objective ids - for a consuming form, applies
    the pure toggle operations to it, and pushes the new estimate to
    explicitly subscribed listeners.

    Derived state (tri-states, estimate, snapshot) is recomputed from the
    stored selection on every read; nothing derived is cached.

Key Classes:
    - SelectionSession: Consumer-owned selection holder

Dependencies:
    - selection.index, selection.states, selection.toggle, selection.estimate

Used By:
    - Form/page code that edits a curriculum selection
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Optional

from curriculum_toolkit.core.models import (
    DerivedStates,
    Estimate,
    SelectionSnapshot,
    SelectionSummary,
)

from . import toggle as ops
from .config import EstimateConfig
from .estimate import MixedCountingModeError, estimate, summarize
from .index import NormalizedIndex
from .states import derive_state, snapshot

logger = logging.getLogger(__name__)

EstimateListener = Callable[[Estimate], None]


class SelectionSession:
    """
    Current selection plus explicit estimate listeners.

    Every mutating method replaces the stored frozenset with the result of
    a pure operation, then notifies listeners if the selection changed.
    An operation that would count a topic both as a whole-topic block and
    by its objectives raises MixedCountingModeError and leaves the session
    unchanged.
    Listeners are called in subscription order; an exception raised by a
    listener propagates to the caller.

    Attributes:
        index: Normalized hierarchy the selection refers to
        selection: Current selected objective ids
        whole_topics: Topics counted by block duration

    Example:
        >>> session = SelectionSession(index)
        >>> unsubscribe = session.subscribe(lambda est: print(est.total_hours))
        >>> session.toggle_subtopic("S1")  # O1 (20 min) + O2 (50 min)
        2
        >>> unsubscribe()
    """

    def __init__(
        self,
        index: NormalizedIndex,
        selection: Iterable[str] = (),
        *,
        whole_topics: Iterable[str] = (),
        config: Optional[EstimateConfig] = None,
    ):
        self._index = index
        self._selection = ops.prune_selection(index, selection)
        self._whole_topics = frozenset(t for t in whole_topics if t in index.topics)
        self._config = config
        self._listeners: List[EstimateListener] = []
        # Fail fast on an initial state mixing both counting modes
        estimate(index, self._selection, self._whole_topics, config=config)

    # ─────────────────────────────────────────────────────────────────────────
    # State
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def index(self) -> NormalizedIndex:
        return self._index

    @property
    def selection(self) -> frozenset[str]:
        return self._selection

    @property
    def whole_topics(self) -> frozenset[str]:
        return self._whole_topics

    def states(self) -> DerivedStates:
        return derive_state(self._index, self._selection)

    def estimate(self) -> Estimate:
        return estimate(self._index, self._selection, self._whole_topics, config=self._config)

    def summary(self) -> SelectionSummary:
        return summarize(self._index, self._selection)

    def snapshot(self, *, include_partial: bool = False) -> SelectionSnapshot:
        return snapshot(self._index, self._selection, include_partial=include_partial)

    # ─────────────────────────────────────────────────────────────────────────
    # Listeners
    # ─────────────────────────────────────────────────────────────────────────

    def subscribe(self, listener: EstimateListener) -> Callable[[], None]:
        """
        Register a listener for estimate changes.

        Returns:
            Callable removing the listener; calling it more than once is a no-op
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _commit(
        self,
        selection: frozenset[str],
        whole_topics: Optional[frozenset[str]] = None,
        *,
        force: bool = False,
    ) -> None:
        whole_topics = self._whole_topics if whole_topics is None else whole_topics
        if not force and selection == self._selection and whole_topics == self._whole_topics:
            return
        # Raises MixedCountingModeError before anything is stored
        current = estimate(self._index, selection, whole_topics, config=self._config)
        self._selection = selection
        self._whole_topics = whole_topics
        for listener in list(self._listeners):
            listener(current)

    # ─────────────────────────────────────────────────────────────────────────
    # Operations
    # ─────────────────────────────────────────────────────────────────────────

    def toggle_leaf(self, leaf_id: str) -> None:
        self._commit(ops.toggle_leaf(self._index, self._selection, leaf_id))

    def toggle_subtopic(self, subtopic_id: str) -> None:
        self._commit(ops.toggle_subtopic(self._index, self._selection, subtopic_id))

    def toggle_topic(self, topic_id: str) -> None:
        self._commit(ops.toggle_topic(self._index, self._selection, topic_id))

    def select_all_topic(self, topic_id: str) -> None:
        self._commit(ops.select_all_topic(self._index, self._selection, topic_id))

    def select_all_subtopic(self, subtopic_id: str) -> None:
        self._commit(ops.select_all_subtopic(self._index, self._selection, subtopic_id))

    def deselect_all_topic(self, topic_id: str) -> None:
        self._commit(ops.deselect_all_topic(self._index, self._selection, topic_id))

    def deselect_all_subtopic(self, subtopic_id: str) -> None:
        self._commit(ops.deselect_all_subtopic(self._index, self._selection, subtopic_id))

    def clear_source(self, source_id: str) -> None:
        self._commit(
            ops.clear_source(self._index, self._selection, source_id),
            frozenset(t for t in self._whole_topics if self._index.topic_to_source[t] != source_id),
        )

    def clear(self) -> None:
        self._commit(ops.clear(), frozenset())

    def set_whole_topic(self, topic_id: str, selected: bool) -> None:
        """
        Count (or stop counting) a topic by its block duration.

        Unknown topic ids are ignored. Whether the topic also has selected
        objectives is checked when the estimate is computed.
        """
        if topic_id not in self._index.topics:
            logger.debug(f"Ignoring whole-topic change for unknown topic {topic_id!r}")
            return
        if selected:
            self._commit(self._selection, self._whole_topics | {topic_id})
        else:
            self._commit(self._selection, self._whole_topics - {topic_id})

    def reload(self, index: NormalizedIndex) -> None:
        """
        Swap in a reloaded hierarchy, pruning ids it no longer contains.

        Listeners are always notified, since durations may have changed.
        """
        previous = self._index
        pruned = ops.prune_selection(index, self._selection)
        whole = frozenset(t for t in self._whole_topics if t in index.topics)
        self._index = index
        try:
            self._commit(pruned, whole, force=True)
        except MixedCountingModeError:
            self._index = previous
            raise
        logger.debug(f"Reloaded session index {previous!r} -> {index!r}")

    def __repr__(self) -> str:
        """Concise representation for debugging."""
        return f"SelectionSession(selected={len(self._selection)}, whole_topics={len(self._whole_topics)})"
