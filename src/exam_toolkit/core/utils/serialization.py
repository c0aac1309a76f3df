"""
Serialization Utilities

Provides to/from JSON utilities for sessions and results - the persistence
boundary used by whatever layer stores in-progress and finished exams.

- Clean separation: `serialize_*` and `deserialize_*` functions
- All models have `to_dict()` and `from_dict()` methods
- Payloads carry a schema_version and are validated before deserialization
- deserialize(serialize(x)) == x for every session and result
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from ..models.results import ExamResult
from ..models.session import ExamSession
from ..schemas.validator import (
    RESULT_SCHEMA_VERSION,
    SESSION_SCHEMA_VERSION,
    ValidationError,
    validate_result,
    validate_session,
)


# ─────────────────────────────────────────────────────────────────────────────
# Session Serialization
# ─────────────────────────────────────────────────────────────────────────────

def serialize_session(session: ExamSession) -> dict[str, Any]:
    """
    Serialize an ExamSession to a dictionary.

    Args:
        session: Session to serialize

    Returns:
        Dictionary suitable for JSON serialization
    """
    data = {"schema_version": SESSION_SCHEMA_VERSION}
    data.update(session.to_dict())
    return data


def deserialize_session(
    data: dict[str, Any],
    *,
    validate: bool = True,
    strict: bool = False,
) -> ExamSession:
    """
    Deserialize an ExamSession from a dictionary.

    Args:
        data: Dictionary from JSON
        validate: Whether to validate before deserializing
        strict: Use full JSON Schema validation

    Returns:
        ExamSession instance

    Raises:
        ValidationError: If the payload is invalid
    """
    if validate:
        validate_session(data, strict=strict)
    try:
        return ExamSession.from_dict(data)
    except (KeyError, TypeError, ValueError) as e:
        raise ValidationError(f"Cannot rebuild session: {e}", errors=[str(e)]) from e


# ─────────────────────────────────────────────────────────────────────────────
# Result Serialization
# ─────────────────────────────────────────────────────────────────────────────

def serialize_result(result: ExamResult) -> dict[str, Any]:
    """Serialize an ExamResult to a dictionary."""
    data = {"schema_version": RESULT_SCHEMA_VERSION}
    data.update(result.to_dict())
    return data


def deserialize_result(
    data: dict[str, Any],
    *,
    validate: bool = True,
    strict: bool = False,
) -> ExamResult:
    """
    Deserialize an ExamResult from a dictionary.

    Raises:
        ValidationError: If the payload is invalid
    """
    if validate:
        validate_result(data, strict=strict)
    try:
        return ExamResult.from_dict(data)
    except (KeyError, TypeError, ValueError) as e:
        raise ValidationError(f"Cannot rebuild result: {e}", errors=[str(e)]) from e


# ─────────────────────────────────────────────────────────────────────────────
# JSON File Utilities
# ─────────────────────────────────────────────────────────────────────────────

def _read_json(path: Path) -> Any:
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Invalid JSON: {e}", path=str(path), errors=[str(e)])


def _write_json(path: Path, data: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)


def save_session_json(session: ExamSession, path: Path) -> None:
    """Save a session to a JSON file."""
    _write_json(path, serialize_session(session))


def load_session_json(path: Path, *, validate: bool = True) -> ExamSession:
    """
    Load a session from a JSON file.

    Raises:
        FileNotFoundError: If file doesn't exist
        ValidationError: If the file content is invalid
    """
    return deserialize_session(_read_json(path), validate=validate)


def save_result_json(result: ExamResult, path: Path) -> None:
    """Save a result to a JSON file."""
    _write_json(path, serialize_result(result))


def load_result_json(path: Path, *, validate: bool = True) -> ExamResult:
    """Load a result from a JSON file."""
    return deserialize_result(_read_json(path), validate=validate)


def load_answers_json(path: Path) -> tuple[dict[str, list[str]], dict[str, dict]]:
    """
    Load submitted answers from a JSON file.

    Expected shape::

        {"answers": {"<qid>": ["o1"]}, "pbq_state": {"<qid>": {"order": [...]}}}

    Returns:
        Tuple of (answer map, pbq state map)
    """
    data = _read_json(path)
    if not isinstance(data, dict):
        raise ValidationError("Answers payload must be an object", path=str(path))
    answers = data.get("answers") or {}
    pbq_state = data.get("pbq_state") or {}
    if not isinstance(answers, dict) or not isinstance(pbq_state, dict):
        raise ValidationError("answers and pbq_state must be objects", path=str(path))
    return answers, pbq_state
