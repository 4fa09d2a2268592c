"""
Module: selection.config

Purpose:
    Configuration dataclass for the teaching-time estimate.
    Immutable configuration with validation on construction.

Key Classes:
    - EstimateConfig: Rounding policy for hour estimates

Dependencies:
    - dataclasses (std)

Used By:
    - selection.estimate: Estimate Aggregator
    - selection.session: Selection Store
"""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class EstimateConfig:
    """
    Rounding policy for converting minutes to hours (immutable).

    Hours are always rounded up, and any non-empty selection reports at
    least `minimum_hours`. An empty selection always reports 0.

    Attributes:
        minutes_per_hour: Minutes in one reported hour
        minimum_hours: Floor applied to any non-empty selection

    Invariants:
        - minutes_per_hour > 0
        - minimum_hours >= 0

    Example:
        >>> config = EstimateConfig()
        >>> config.hours_for(70, has_selection=True)
        2
        >>> config.hours_for(0, has_selection=True)
        1
    """

    minutes_per_hour: int = 60
    minimum_hours: int = 1

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.minutes_per_hour <= 0:
            raise ValueError(f"minutes_per_hour must be positive: {self.minutes_per_hour}")
        if self.minimum_hours < 0:
            raise ValueError(f"minimum_hours must be non-negative: {self.minimum_hours}")

    def hours_for(self, minutes: int, *, has_selection: bool) -> int:
        """
        Convert a minute total into reported hours.

        Args:
            minutes: Total selected minutes (>= 0)
            has_selection: Whether anything was counted

        Returns:
            ceil(minutes / minutes_per_hour), floored at minimum_hours when
            has_selection, or 0 when nothing is selected
        """
        if not has_selection:
            return 0
        hours = math.ceil(minutes / self.minutes_per_hour)
        return max(self.minimum_hours, hours)


DEFAULT_ESTIMATE_CONFIG = EstimateConfig()
