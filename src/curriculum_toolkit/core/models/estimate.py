"""
Module: estimate

Purpose:
    Provides the Estimate dataclass - the teaching-time estimate handed back
    to the caller. Minutes are kept per source; the total is always
    calculated from them, never stored separately.

Dependencies:
    - dataclasses (std)

Used By:
    - selection.estimate
    - selection.session
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Tuple


@dataclass(frozen=True)
class Estimate:
    """
    Teaching-time estimate for a selection (immutable).

    Attributes:
        per_source_minutes: Source id -> selected minutes
        total_hours: Rounded hour estimate (0 for an empty selection)
        whole_topic_ids: Topics counted by block duration, in hierarchy order

    Invariants:
        - total_hours == 0 iff nothing was counted
        - every minute value >= 0

    Example:
        >>> est = estimate(index, frozenset({"O1", "O2"}))
        >>> est.total_minutes, est.total_hours
        (70, 2)
    """

    per_source_minutes: Dict[str, int] = field(default_factory=dict)
    total_hours: int = 0
    whole_topic_ids: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.total_hours < 0:
            raise ValueError(f"total_hours cannot be negative: {self.total_hours}")
        negative = {s: m for s, m in self.per_source_minutes.items() if m < 0}
        if negative:
            raise ValueError(f"Minutes cannot be negative: {negative}")

    @property
    def total_minutes(self) -> int:
        """Sum of minutes across all sources."""
        return sum(self.per_source_minutes.values())

    def minutes_for(self, source_id: str) -> int:
        """Minutes counted for one source (0 if unknown)."""
        return self.per_source_minutes.get(source_id, 0)

    def __repr__(self) -> str:
        """Concise representation for debugging."""
        return f"Estimate(minutes={self.total_minutes}, hours={self.total_hours})"
