"""
Schema Validation Utilities

Validates serialized session and result payloads before they are turned
back into models.

Two levels:
- Basic checks (default): required fields, schema version, question types
  and per-type payload shape. Cheap enough for every load.
- Strict mode: full JSON Schema validation with jsonschema against the
  *.schema.json files shipped beside this module.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema


# Schema version constants
SESSION_SCHEMA_VERSION = 2  # v2 stores objective bullets per question
RESULT_SCHEMA_VERSION = 1

_QUESTION_TYPES = ("single", "multi", "pbq-order", "pbq-match")
_PBQ_KIND_FOR_TYPE = {"pbq-order": "order", "pbq-match": "match"}


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


def _require(data: dict[str, Any], required: list[str], path: str = "") -> None:
    missing = [f for f in required if f not in data]
    if missing:
        raise ValidationError(
            f"Missing required fields: {missing}",
            path=path,
            errors=[f"Missing field: {f}" for f in missing],
        )


def _strict(data: dict[str, Any], schema_name: str) -> None:
    schema = _load_schema(schema_name)
    try:
        jsonschema.validate(data, schema)
    except jsonschema.ValidationError as e:
        raise ValidationError(
            f"Schema validation failed: {e.message}",
            path=".".join(str(p) for p in e.absolute_path),
            errors=[e.message],
        )


def validate_session(data: dict[str, Any], *, strict: bool = False) -> None:
    """
    Validate serialized session data.

    Args:
        data: Session dictionary to validate
        strict: If True, also validate against session.schema.json

    Raises:
        ValidationError: If data is invalid
    """
    if not isinstance(data, dict):
        raise ValidationError("Session payload must be an object")

    _require(data, ["schema_version", "session_id", "exam", "created_at",
                    "duration_seconds", "config", "questions"])

    version = data.get("schema_version")
    if version != SESSION_SCHEMA_VERSION:
        raise ValidationError(
            f"Unsupported session schema version: {version} (expected {SESSION_SCHEMA_VERSION})",
            path="schema_version",
        )

    duration = data.get("duration_seconds")
    if not isinstance(duration, int) or duration <= 0:
        raise ValidationError(
            f"Invalid duration_seconds: {duration!r} (must be positive integer)",
            path="duration_seconds",
        )

    questions = data.get("questions")
    if not isinstance(questions, list):
        raise ValidationError("questions must be a list", path="questions")

    seen: set[str] = set()
    for i, question in enumerate(questions):
        _validate_question(question, f"questions[{i}]")
        if question["id"] in seen:
            raise ValidationError(
                f"Duplicate question id: {question['id']!r}",
                path=f"questions[{i}].id",
            )
        seen.add(question["id"])

    if strict:
        _strict(data, "session")


def _validate_question(data: Any, path: str) -> None:
    """Validate one serialized question."""
    if not isinstance(data, dict):
        raise ValidationError("question must be an object", path=path)

    _require(data, ["id", "exam", "domain", "objective", "type", "prompt", "correct"], path)

    qtype = data.get("type")
    if qtype not in _QUESTION_TYPES:
        raise ValidationError(f"Invalid question type: {qtype!r}", path=f"{path}.type")

    correct = data.get("correct")
    if not isinstance(correct, list) or not all(isinstance(c, str) for c in correct):
        raise ValidationError("correct must be a list of strings", path=f"{path}.correct")

    if qtype in _PBQ_KIND_FOR_TYPE:
        pbq = data.get("pbq")
        if not isinstance(pbq, dict):
            raise ValidationError(f"{qtype} question must carry a pbq payload", path=f"{path}.pbq")
        expected_kind = _PBQ_KIND_FOR_TYPE[qtype]
        if pbq.get("kind") != expected_kind:
            raise ValidationError(
                f"pbq kind {pbq.get('kind')!r} does not match type {qtype!r}",
                path=f"{path}.pbq.kind",
            )
        return

    options = data.get("options")
    if not isinstance(options, list):
        raise ValidationError("options must be a list", path=f"{path}.options")
    option_ids = set()
    for j, option in enumerate(options):
        if not isinstance(option, dict) or "id" not in option or "text" not in option:
            raise ValidationError(
                "option must have id and text",
                path=f"{path}.options[{j}]",
            )
        option_ids.add(option["id"])

    unknown = [c for c in correct if c not in option_ids]
    if unknown:
        raise ValidationError(
            f"correct ids not among options: {unknown}",
            path=f"{path}.correct",
        )


def validate_result(data: dict[str, Any], *, strict: bool = False) -> None:
    """
    Validate serialized result data.

    Args:
        data: Result dictionary to validate
        strict: If True, also validate against result.schema.json

    Raises:
        ValidationError: If data is invalid
    """
    if not isinstance(data, dict):
        raise ValidationError("Result payload must be an object")

    _require(data, ["schema_version", "percent", "correct_count", "total", "by_domain", "scored"])

    version = data.get("schema_version")
    if version != RESULT_SCHEMA_VERSION:
        raise ValidationError(
            f"Unsupported result schema version: {version} (expected {RESULT_SCHEMA_VERSION})",
            path="schema_version",
        )

    percent = data.get("percent")
    if not isinstance(percent, (int, float)) or not (0 <= percent <= 100):
        raise ValidationError(f"Invalid percent: {percent!r} (must be 0-100)", path="percent")

    scored = data.get("scored")
    if not isinstance(scored, list):
        raise ValidationError("scored must be a list", path="scored")

    total = data.get("total")
    if total != len(scored):
        raise ValidationError(
            f"total ({total}) does not match scored entries ({len(scored)})",
            path="total",
        )

    if strict:
        _strict(data, "result")
