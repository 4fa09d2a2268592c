"""
Selection Module

Hierarchical selection and teaching-time estimation over one or more
parallel curriculum sources.

Modules:
    - index: Hierarchy Normalizer (NormalizedIndex, normalize)
    - states: Tri-State Deriver (derive_state, snapshot)
    - toggle: Toggle Engine (toggle_leaf, toggle_subtopic, toggle_topic, ...)
    - estimate: Estimate Aggregator (estimate, summarize)
    - filters: Search and filter criteria
    - session: Selection Store (SelectionSession)
    - config: EstimateConfig
"""

from .config import EstimateConfig
from .index import (
    NormalizedIndex,
    Ancestry,
    normalize,
    HierarchyError,
    DuplicateLeafId,
    DuplicateNodeId,
)
from .states import derive_state, topic_state, subtopic_state, snapshot
from .toggle import (
    toggle_leaf,
    toggle_subtopic,
    toggle_topic,
    select_all_topic,
    select_all_subtopic,
    deselect_all_topic,
    deselect_all_subtopic,
    clear_source,
    clear,
    prune_selection,
)
from .estimate import estimate, summarize, MixedCountingModeError
from .filters import FilterCriteria, filter_topics, matching_objectives, objective_matches
from .session import SelectionSession

__all__ = [
    "EstimateConfig",
    "NormalizedIndex",
    "Ancestry",
    "normalize",
    "HierarchyError",
    "DuplicateLeafId",
    "DuplicateNodeId",
    "derive_state",
    "topic_state",
    "subtopic_state",
    "snapshot",
    "toggle_leaf",
    "toggle_subtopic",
    "toggle_topic",
    "select_all_topic",
    "select_all_subtopic",
    "deselect_all_topic",
    "deselect_all_subtopic",
    "clear_source",
    "clear",
    "prune_selection",
    "estimate",
    "summarize",
    "MixedCountingModeError",
    "FilterCriteria",
    "filter_topics",
    "matching_objectives",
    "objective_matches",
    "SelectionSession",
]
