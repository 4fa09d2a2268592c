"""
Curriculum Toolkit Core Package

Shared data models, payload schemas and serialization utilities.

1. **Immutable Data Models**
   - Frozen dataclasses; a loaded hierarchy never changes

2. **Derived State (Never Stored)**
   - Topic/subtopic selection and hour totals are always calculated
     from the objective selection

3. **Validated Boundary**
   - Hierarchy payloads are checked before any model is built, so a
     malformed payload fails at load time
"""

from .models import (
    Objective,
    Subtopic,
    Topic,
    HierarchySource,
    SelectionState,
    Estimate,
)

__all__ = [
    "Objective",
    "Subtopic",
    "Topic",
    "HierarchySource",
    "SelectionState",
    "Estimate",
]
