"""Plugin manifest validation.

This module provides runtime validation for exam-variant plugin manifests,
including the weighted domain blueprint each manifest embeds.
"""
from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from exam_toolkit.core.models.objectives import DomainBlueprint

logger = logging.getLogger(__name__)

# =============================================================================
# Schema Versioning
# =============================================================================
# BACKWARD COMPATIBILITY POLICY:
# - Newer code can read older manifest formats without error
# - If loaded manifest_schema_version < expected, a soft warning is logged
# - Version format: integer (easier comparison than semantic versioning strings)
#
# MANIFEST_SCHEMA_VERSION: Version of the plugin manifest format
# Changelog:
#   v1: code, name, default, blueprint, objectives_path, pbq_templates_path
# =============================================================================
MANIFEST_SCHEMA_VERSION = 1

_CODE_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9-]{0,15}$")
_DOMAIN_RE = re.compile(r"^\d+\.0$")


class ManifestValidationError(RuntimeError):
    """Raised when manifest validation fails."""


@dataclass(frozen=True)
class ValidatedManifest:
    """Validated and type-safe manifest data."""
    code: str
    name: str
    default: bool
    blueprint: Tuple[DomainBlueprint, ...]
    objectives_path: str
    pbq_templates_path: str
    manifest_schema_version: int
    generated_at: Optional[str]  # ISO timestamp when generated
    board: Optional[str]  # Certification body (e.g. "CompTIA")


def validate_blueprint(raw: object) -> Tuple[DomainBlueprint, ...]:
    """Validate a raw blueprint list and return typed rows.

    Raises:
        ManifestValidationError: If the blueprint is missing, empty or malformed.
    """
    if not isinstance(raw, list) or not raw:
        raise ManifestValidationError("blueprint must be a non-empty list")

    rows = []
    seen = set()
    for i, entry in enumerate(raw):
        if not isinstance(entry, dict):
            raise ManifestValidationError(f"blueprint[{i}] must be an object")
        domain = str(entry.get("domain", "")).strip()
        if not _DOMAIN_RE.match(domain):
            raise ManifestValidationError(
                f"blueprint[{i}] has invalid domain {domain!r}: expected 'N.0'"
            )
        if domain in seen:
            raise ManifestValidationError(f"blueprint lists domain {domain} twice")
        seen.add(domain)
        weight = entry.get("weight")
        if not isinstance(weight, int) or isinstance(weight, bool) or weight <= 0:
            raise ManifestValidationError(
                f"blueprint[{i}] weight must be a positive integer: {weight!r}"
            )
        rows.append(DomainBlueprint(domain_id=domain, label=str(entry.get("label", "")), weight=weight))
    return tuple(rows)


def validate_manifest(manifest_path: Path) -> ValidatedManifest:
    """Validate manifest.json schema and return typed data.

    Args:
        manifest_path: Path to manifest.json file.

    Returns:
        ValidatedManifest with validated fields.

    Raises:
        ManifestValidationError: If validation fails.
    """
    try:
        text = manifest_path.read_text(encoding="utf-8")
        data = json.loads(text)
    except (OSError, json.JSONDecodeError) as e:
        raise ManifestValidationError(f"Cannot read manifest {manifest_path}: {e}") from e

    if not isinstance(data, dict):
        raise ManifestValidationError(f"Manifest must be a JSON object: {manifest_path}")

    code = str(data.get("code", "")).strip()
    name = str(data.get("name", "")).strip()

    if not _CODE_RE.match(code):
        raise ManifestValidationError(
            f"Invalid code '{code}': must be 1-16 alphanumeric characters or dashes"
        )
    if not name:
        raise ManifestValidationError("Missing 'name' field in manifest")
    if len(name) > 100:
        raise ManifestValidationError(f"Name exceeds 100 characters: {name[:50]}...")

    default = data.get("default", False)
    if not isinstance(default, bool):
        raise ManifestValidationError("default must be a boolean")

    blueprint = validate_blueprint(data.get("blueprint"))

    objectives_path = data.get("objectives_path", "objectives.json")
    pbq_templates_path = data.get("pbq_templates_path", "pbq_templates.json")
    for key, value in (("objectives_path", objectives_path), ("pbq_templates_path", pbq_templates_path)):
        if not isinstance(value, str):
            raise ManifestValidationError(f"{key} must be a string")

    raw_schema = data.get("manifest_schema_version")
    try:
        manifest_schema_version = int(raw_schema) if raw_schema else 1
    except (ValueError, TypeError):
        manifest_schema_version = 1

    board = data.get("board")
    if board is not None and not isinstance(board, str):
        raise ManifestValidationError("board must be a string or null")

    if manifest_schema_version < MANIFEST_SCHEMA_VERSION:
        logger.warning(
            f"Plugin '{code}' has manifest_schema_version {manifest_schema_version}, "
            f"expected {MANIFEST_SCHEMA_VERSION}. Consider regenerating the plugin.",
            extra={"code": code, "manifest_version": manifest_schema_version}
        )

    return ValidatedManifest(
        code=code,
        name=name,
        default=default,
        blueprint=blueprint,
        objectives_path=objectives_path,
        pbq_templates_path=pbq_templates_path,
        manifest_schema_version=manifest_schema_version,
        generated_at=data.get("generated_at"),
        board=board,
    )
