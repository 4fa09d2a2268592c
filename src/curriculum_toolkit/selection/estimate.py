"""
Module: selection.estimate

Purpose:
    Estimate Aggregator. Sums the teaching minutes of every selected
    objective per hierarchy source and converts the total to a rounded
    hour estimate. Optionally adds whole-topic block durations for topics
    chosen without objective-level detail.

    Results are always recomputed from the selection; nothing is cached.

Key Functions:
    - estimate(): Per-source minutes and total hours
    - summarize(): Per-source selection counts

Key Classes:
    - MixedCountingModeError: A topic counted both by block and by objectives

Dependencies:
    - selection.index.NormalizedIndex
    - selection.config.EstimateConfig
    - selection.states.derive_state

Used By:
    - selection.session: Selection Store
"""

from __future__ import annotations

import logging
from typing import AbstractSet, Dict, Iterable, List, Optional

from curriculum_toolkit.core.models import (
    Estimate,
    SelectionState,
    SelectionSummary,
    SourceSummary,
)

from .config import DEFAULT_ESTIMATE_CONFIG, EstimateConfig
from .index import NormalizedIndex
from .states import derive_state

logger = logging.getLogger(__name__)


class MixedCountingModeError(ValueError):
    """
    A topic was passed as a whole-topic block while some of its objectives
    are also selected.

    The two counting modes are mutually exclusive per topic; the caller
    must pick one. They are never reconciled here.
    """

    def __init__(self, topic_ids: List[str]):
        super().__init__(
            f"Topics counted both as whole-topic blocks and by objectives: {topic_ids}"
        )
        self.topic_ids = topic_ids


def estimate(
    index: NormalizedIndex,
    selection: AbstractSet[str],
    selected_whole_topics: Optional[Iterable[str]] = None,
    *,
    config: Optional[EstimateConfig] = None,
) -> Estimate:
    """
    Estimate teaching time for a selection.

    Per source, minutes are the sum of `estimated_teaching_minutes` over the
    selected objectives of that source (plus whole-topic block durations).
    Hours are ceil(total / 60); anything selected reports at least one
    hour, nothing selected reports exactly 0.

    Ids unknown to the index are ignored and do not count as a selection.

    Args:
        index: Normalized hierarchy
        selection: Selected objective ids
        selected_whole_topics: Topic ids counted by their block duration
        config: Rounding policy (default: 60 minutes/hour, 1 hour minimum)

    Returns:
        Estimate with every loaded source present in per_source_minutes

    Raises:
        MixedCountingModeError: If a whole topic also has selected objectives

    Example:
        >>> est = estimate(index, frozenset({"O1", "O2"}))  # 20 + 50 minutes
        >>> est.total_hours
        2
    """
    config = config or DEFAULT_ESTIMATE_CONFIG
    per_source: Dict[str, int] = {source_id: 0 for source_id in index.sources}
    counted = False

    for leaf_id in selection:
        ancestry = index.leaf_to_ancestors.get(leaf_id)
        if ancestry is None:
            continue
        counted = True
        per_source[ancestry.source_id] += index.objectives[leaf_id].estimated_teaching_minutes

    whole_topics = _resolve_whole_topics(index, selection, selected_whole_topics or ())
    for topic_id in whole_topics:
        per_source[index.topic_to_source[topic_id]] += index.topics[topic_id].duration_minutes
        counted = True

    total_minutes = sum(per_source.values())
    result = Estimate(
        per_source_minutes=per_source,
        total_hours=config.hours_for(total_minutes, has_selection=counted),
        whole_topic_ids=tuple(whole_topics),
    )
    logger.debug(f"Estimated {result!r}")
    return result


def _resolve_whole_topics(
    index: NormalizedIndex,
    selection: AbstractSet[str],
    topic_ids: Iterable[str],
) -> List[str]:
    """Known, de-duplicated whole-topic ids in hierarchy order."""
    requested = set(topic_ids)
    unknown = requested - index.topics.keys()
    if unknown:
        logger.debug(f"Ignoring unknown whole-topic ids: {sorted(unknown)}")

    ordered = [topic_id for topic_id in index.topics if topic_id in requested]
    mixed = [
        topic_id for topic_id in ordered
        if any(leaf in selection for leaf in index.topic_to_leaves[topic_id])
    ]
    if mixed:
        raise MixedCountingModeError(mixed)
    return ordered


def summarize(index: NormalizedIndex, selection: AbstractSet[str]) -> SelectionSummary:
    """
    Count selected objectives and FULL/PARTIAL nodes per source.

    Args:
        index: Normalized hierarchy
        selection: Selected objective ids

    Returns:
        SelectionSummary with one entry per loaded source
    """
    states = derive_state(index, selection)
    summaries: Dict[str, SourceSummary] = {}

    for source_id, source in index.sources.items():
        leaves = index.source_to_leaves.get(source_id, ())
        topic_states = [states.topic(topic.id) for topic in source.topics]
        subtopic_states = [
            states.subtopic(subtopic.id)
            for topic in source.topics
            for subtopic in topic.subtopics
        ]
        summaries[source_id] = SourceSummary(
            source_id=source_id,
            selected_objectives=sum(1 for leaf in leaves if leaf in selection),
            total_objectives=len(leaves),
            full_topics=topic_states.count(SelectionState.FULL),
            partial_topics=topic_states.count(SelectionState.PARTIAL),
            full_subtopics=subtopic_states.count(SelectionState.FULL),
            partial_subtopics=subtopic_states.count(SelectionState.PARTIAL),
        )

    return SelectionSummary(sources=summaries)
