"""
Schemas Package

JSON schema definitions and validation utilities for hierarchy payloads.
"""

from .validator import (
    validate_hierarchy_payload,
    ValidationError,
    HIERARCHY_SCHEMA_NAME,
)

__all__ = [
    "validate_hierarchy_payload",
    "ValidationError",
    "HIERARCHY_SCHEMA_NAME",
]
