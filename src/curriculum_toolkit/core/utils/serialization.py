"""
Serialization Utilities

Provides to/from JSON utilities for hierarchy payloads and persisted
selections.

Hierarchy payloads are untyped JSON from an external collaborator:
- Validation via schemas before deserialization
- Integer ids are converted to strings
- Duration fields are coerced, never rejected: missing, non-numeric,
  non-finite or negative values count as 0
- Topic `timeAllocation` is authored in hours and stored as minutes

Selections are persisted as objective ids (or specification codes) and
restored against a NormalizedIndex, dropping anything it does not know.
"""

from __future__ import annotations

import json
import logging
import math
from pathlib import Path
from typing import TYPE_CHECKING, AbstractSet, Any, Iterable, Mapping

from ..models.hierarchy import HierarchySource, Subtopic, Topic
from ..models.objectives import BloomsLevel, Difficulty, Objective
from ..schemas.validator import ValidationError, validate_hierarchy_payload

if TYPE_CHECKING:
    from curriculum_toolkit.selection.index import NormalizedIndex

logger = logging.getLogger(__name__)

MINUTES_PER_ALLOCATION_HOUR = 60


# ─────────────────────────────────────────────────────────────────────────────
# Hierarchy Deserialization
# ─────────────────────────────────────────────────────────────────────────────

def deserialize_hierarchy(
    data: dict[str, Any],
    source_id: str,
    *,
    name: str | None = None,
    validate: bool = True,
) -> HierarchySource:
    """
    Deserialize one hierarchy source from a payload dictionary.

    Args:
        data: Decoded payload (``{"topics": [...]}``)
        source_id: Id of the source (e.g. "igcse"); stamped on every topic
        name: Optional display name (falls back to payload "name")
        validate: Whether to validate the payload first

    Returns:
        HierarchySource instance

    Raises:
        ValidationError: If validate=True and data is invalid
        ValueError: If data cannot be parsed into models
    """
    if validate:
        validate_hierarchy_payload(data, strict=False)

    topics = tuple(
        _deserialize_topic(topic, source_id, f"topics[{i}]")
        for i, topic in enumerate(data.get("topics", []))
    )
    return HierarchySource(
        source_id=source_id,
        topics=topics,
        name=name if name is not None else data.get("name"),
    )


def load_hierarchy_json(
    path: Path | str,
    source_id: str,
    *,
    name: str | None = None,
    validate: bool = True,
    strict: bool = False,
) -> HierarchySource:
    """
    Load a hierarchy source from a JSON file.

    Args:
        path: Path to the payload file
        source_id: Id of the source
        name: Optional display name
        validate: Whether to validate the payload first
        strict: Also validate against the JSON schema

    Raises:
        FileNotFoundError: If the file does not exist
        ValidationError: If the file is not valid JSON or fails validation
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Hierarchy file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON in {path.name}: {e}", path=str(path)) from e

    if validate and strict:
        validate_hierarchy_payload(data, strict=True)
        validate = False

    source = deserialize_hierarchy(data, source_id, name=name, validate=validate)
    logger.info(f"Loaded {source!r} from {path}")
    return source


def _deserialize_topic(data: dict[str, Any], source_id: str, path: str) -> Topic:
    hours = _coerce_number(data.get("timeAllocation"), f"{path}.timeAllocation")
    subtopics = tuple(
        _deserialize_subtopic(subtopic, f"{path}.subtopics[{i}]")
        for i, subtopic in enumerate(data.get("subtopics", []))
    )
    return Topic(
        id=str(data["id"]),
        name=str(data.get("name", "")),
        description=data.get("description") or "",
        specification_code=str(data.get("specificationCode") or ""),
        duration_minutes=round(hours * MINUTES_PER_ALLOCATION_HOUR),
        subtopics=subtopics,
        source_id=source_id,
    )


def _deserialize_subtopic(data: dict[str, Any], path: str) -> Subtopic:
    objectives = tuple(
        _deserialize_objective(objective, f"{path}.objectives[{i}]")
        for i, objective in enumerate(data.get("objectives", []))
    )
    return Subtopic(
        id=str(data["id"]),
        name=str(data.get("name", "")),
        description=data.get("description") or "",
        objectives=objectives,
        practical_work=tuple(data.get("practicalWork") or ()),
        mathematical_skills=tuple(data.get("mathematicalSkills") or ()),
    )


def _deserialize_objective(data: dict[str, Any], path: str) -> Objective:
    difficulty = data.get("difficulty")
    blooms = data.get("bloomsLevel")
    return Objective(
        id=str(data["id"]),
        code=str(data.get("code", "")),
        statement=str(data.get("statement", "")),
        difficulty=Difficulty(difficulty) if difficulty else None,
        blooms_level=BloomsLevel(blooms) if blooms else None,
        estimated_teaching_minutes=round(
            _coerce_number(data.get("estimatedTeachingMinutes"), f"{path}.estimatedTeachingMinutes")
        ),
        keywords=tuple(data.get("keywords") or ()),
        command_words=tuple(data.get("commandWords") or ()),
        assessment_weight=round(
            _coerce_number(data.get("assessmentWeight"), f"{path}.assessmentWeight")
        ),
        prerequisites=tuple(str(p) for p in data.get("prerequisiteObjectives") or ()),
    )


def _coerce_number(value: Any, path: str) -> float:
    """Non-negative finite number, or 0 for anything else."""
    if value is None:
        return 0.0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        logger.debug(f"Non-numeric value at {path}: {value!r}, using 0")
        return 0.0
    if not math.isfinite(value) or value < 0:
        logger.debug(f"Out-of-range value at {path}: {value!r}, using 0")
        return 0.0
    return float(value)


# ─────────────────────────────────────────────────────────────────────────────
# Selection Serialization
# ─────────────────────────────────────────────────────────────────────────────

def serialize_selection(
    index: NormalizedIndex,
    selection: AbstractSet[str],
    *,
    use_codes: bool = False,
    include_partial: bool = False,
) -> dict[str, list[str]]:
    """
    Serialize a selection to a dictionary.

    Args:
        index: Normalized hierarchy
        selection: Selected objective ids
        use_codes: Persist objective specification codes instead of ids
        include_partial: Also list partially-selected topics/subtopics

    Returns:
        ``{"topics": [...], "subtopics": [...], "objectives": [...]}``
        in hierarchy order

    Note:
        Codes can repeat across sources; restoring a code-based selection
        over several sources needs `source_id` in `deserialize_selection`.
    """
    from curriculum_toolkit.selection.states import snapshot

    snap = snapshot(index, selection, include_partial=include_partial)
    return {
        "topics": list(snap.topic_ids),
        "subtopics": list(snap.subtopic_ids),
        "objectives": list(snap.objective_codes if use_codes else snap.objective_ids),
    }


def deserialize_selection(
    index: NormalizedIndex,
    refs: Iterable[Any] | Mapping[str, Any],
    *,
    source_id: str | None = None,
) -> frozenset[str]:
    """
    Restore a selection from persisted objective ids or codes.

    Each reference is matched as an objective id first, then as a
    specification code. A code shared by several objectives resolves
    only if `source_id` narrows it to one. Unknown and ambiguous
    references are dropped with a warning.

    Args:
        index: Normalized hierarchy
        refs: Objective ids/codes, or the dict from `serialize_selection`
        source_id: Only resolve references to objectives of this source

    Returns:
        Selection containing only objective ids known to the index
    """
    if isinstance(refs, Mapping):
        refs = refs.get("objectives") or ()

    selected: set[str] = set()
    unknown: list[str] = []
    ambiguous: list[str] = []

    for raw in refs:
        ref = str(raw)
        if index.is_leaf(ref) and (source_id is None or index.source_of(ref) == source_id):
            selected.add(ref)
            continue

        candidates = [
            leaf for leaf in index.leaves_by_code.get(ref, ())
            if source_id is None or index.source_of(leaf) == source_id
        ]
        if len(candidates) == 1:
            selected.add(candidates[0])
        elif candidates:
            ambiguous.append(ref)
        else:
            unknown.append(ref)

    if unknown:
        logger.warning(f"Dropped {len(unknown)} unknown selection references: {unknown}")
    if ambiguous:
        logger.warning(
            f"Dropped {len(ambiguous)} ambiguous objective codes (pass source_id): {ambiguous}"
        )
    return frozenset(selected)
