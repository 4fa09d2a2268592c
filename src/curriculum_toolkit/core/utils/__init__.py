"""
Utilities Module

Serialization helpers at the payload boundary.
"""

from .serialization import (
    deserialize_hierarchy,
    load_hierarchy_json,
    serialize_selection,
    deserialize_selection,
)

__all__ = [
    "deserialize_hierarchy",
    "load_hierarchy_json",
    "serialize_selection",
    "deserialize_selection",
]
