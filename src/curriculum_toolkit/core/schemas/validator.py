"""
Schema Validation Utilities

Validates curriculum hierarchy payloads before any model is built.

Hierarchy payloads arrive from an external data-fetching collaborator as
untyped JSON. Checking them here means a malformed payload fails at load
time with a path to the offending node, instead of surfacing later as a
wrong minute total.

- `validate_hierarchy_payload()` does fast structural checks
- `strict=True` additionally runs jsonschema against
  `hierarchy.schema.json`
- Duration fields are deliberately not validated; they are coerced to 0
  during deserialization
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema

from ..models.objectives import BloomsLevel, Difficulty


HIERARCHY_SCHEMA_NAME = "hierarchy"

_DIFFICULTIES = frozenset(d.value for d in Difficulty)
_BLOOMS_LEVELS = frozenset(b.value for b in BloomsLevel)

# Load schemas lazily
_SCHEMAS: dict[str, dict] = {}


def _load_schema(name: str) -> dict:
    """Load a schema from the schemas directory."""
    if name not in _SCHEMAS:
        schema_path = Path(__file__).parent / f"{name}.schema.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")
        with open(schema_path, "r", encoding="utf-8") as f:
            _SCHEMAS[name] = json.load(f)
    return _SCHEMAS[name]


class ValidationError(Exception):
    """Raised when data fails schema validation."""

    def __init__(self, message: str, path: str = "", errors: list[str] | None = None):
        super().__init__(message)
        self.path = path
        self.errors = errors or []


def validate_hierarchy_payload(data: Any, *, strict: bool = False) -> None:
    """
    Validate one hierarchy payload (``{"topics": [...]}``).

    Args:
        data: Decoded JSON payload for a single source
        strict: If True, also validate against the JSON schema

    Raises:
        ValidationError: If data is invalid

    Example:
        >>> validate_hierarchy_payload({"topics": []})
        >>> validate_hierarchy_payload({"topic": []})
        Traceback (most recent call last):
        ...
        ValidationError: Missing required fields: ['topics']
    """
    if not isinstance(data, dict):
        raise ValidationError(
            f"Hierarchy payload must be an object, got {type(data).__name__}",
            path="",
        )

    _require_fields(data, ["topics"], "")
    topics = _require_list(data, "topics", "")

    for i, topic in enumerate(topics):
        _validate_topic(topic, f"topics[{i}]")

    if strict:
        schema = _load_schema(HIERARCHY_SCHEMA_NAME)
        try:
            jsonschema.validate(data, schema)
        except jsonschema.ValidationError as e:
            raise ValidationError(
                f"Schema validation failed: {e.message}",
                path=".".join(str(p) for p in e.absolute_path),
                errors=[e.message],
            ) from e


def _validate_topic(data: Any, path: str) -> None:
    """Validate a topic node and its subtopics."""
    _require_object(data, path)
    _require_fields(data, ["id", "name", "subtopics"], path)
    _validate_id(data["id"], f"{path}.id")
    for i, subtopic in enumerate(_require_list(data, "subtopics", path)):
        _validate_subtopic(subtopic, f"{path}.subtopics[{i}]")


def _validate_subtopic(data: Any, path: str) -> None:
    """Validate a subtopic node and its objectives."""
    _require_object(data, path)
    _require_fields(data, ["id", "name", "objectives"], path)
    _validate_id(data["id"], f"{path}.id")
    for i, objective in enumerate(_require_list(data, "objectives", path)):
        _validate_objective(objective, f"{path}.objectives[{i}]")


def _validate_objective(data: Any, path: str) -> None:
    """Validate an objective (leaf) node."""
    _require_object(data, path)
    _require_fields(data, ["id", "code", "statement"], path)
    _validate_id(data["id"], f"{path}.id")

    _validate_enum(data.get("difficulty"), _DIFFICULTIES, "difficulty", path)
    _validate_enum(data.get("bloomsLevel"), _BLOOMS_LEVELS, "bloomsLevel", path)


def _validate_enum(value: Any, allowed: frozenset[str], key: str, path: str) -> None:
    """Optional enum field: None, or one of the allowed strings."""
    if value is None:
        return
    if not isinstance(value, str) or value not in allowed:
        raise ValidationError(
            f"Invalid {key}: {value!r} (expected one of {sorted(allowed)})",
            path=f"{path}.{key}",
        )


def _validate_id(value: Any, path: str) -> None:
    """Ids must be non-empty strings or integers."""
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise ValidationError(
            f"Invalid id: {value!r} (must be a string or integer)",
            path=path,
        )
    if isinstance(value, str) and not value.strip():
        raise ValidationError("Id cannot be empty", path=path)


def _require_object(data: Any, path: str) -> None:
    if not isinstance(data, dict):
        raise ValidationError(f"{path} must be an object", path=path)


def _require_fields(data: dict[str, Any], required: list[str], path: str) -> None:
    missing = [f for f in required if f not in data]
    if missing:
        prefix = "Missing required fields" if not path else f"{path} missing required fields"
        raise ValidationError(
            f"{prefix}: {missing}",
            path=path,
            errors=[f"Missing field: {f}" for f in missing],
        )


def _require_list(data: dict[str, Any], key: str, path: str) -> list[Any]:
    value = data.get(key)
    if not isinstance(value, list):
        field_path = f"{path}.{key}" if path else key
        raise ValidationError(f"{key} must be a list", path=field_path)
    return value
