from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

from exam_toolkit.core.models.objectives import DomainBlueprint
from exam_toolkit.plugins.validation import (
    validate_manifest,
    ManifestValidationError,
)

logger = logging.getLogger(__name__)

PLUGINS_DIR_ENV = "EXAM_TOOLKIT_PLUGINS_DIR"


class MissingResourcesError(RuntimeError):
    """Raised when an exam variant's resource bundle cannot be resolved."""


class UnsupportedCodeError(MissingResourcesError):
    """Raised when an exam code is not registered."""


@dataclass(frozen=True)
class ExamPlugin:
    code: str
    name: str
    root: Path
    blueprint: Tuple[DomainBlueprint, ...]
    objectives_path: Path
    pbq_templates_path: Path
    board: Optional[str] = None

    def _read_json(self, path: Path) -> Any:
        if not path.exists():
            raise MissingResourcesError(f"Missing resource for exam {self.code}: {path}")
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as exc:
            raise MissingResourcesError(f"Unreadable resource for exam {self.code}: {path}: {exc}") from exc

    def load_objectives_data(self) -> Dict[str, Dict[str, Any]]:
        """Raw objective catalog snapshot: {objective_id: {domain, title, bullets}}."""
        data = self._read_json(self.objectives_path)
        if not isinstance(data, dict):
            raise MissingResourcesError(f"Objective catalog for {self.code} must be a JSON object")
        return data

    def load_pbq_template_data(self) -> List[Dict[str, Any]]:
        """Raw PBQ template definitions for this variant."""
        data = self._read_json(self.pbq_templates_path)
        templates = data.get("templates") if isinstance(data, dict) else None
        if not isinstance(templates, list):
            raise MissingResourcesError(f"PBQ templates for {self.code} must be a 'templates' list")
        return templates


def _get_bundled_plugins_dir() -> Path:
    """Get the bundled plugins directory (beside this module)."""
    return Path(__file__).resolve().parent


def _get_resource_root() -> Path:
    """Plugins directory: environment override, else the bundled one."""
    override = os.environ.get(PLUGINS_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return _get_bundled_plugins_dir()


def _discover_plugins() -> tuple[Dict[str, ExamPlugin], Optional[str], Optional[str]]:
    """Discover and validate all plugins.

    Returns:
        Tuple of (registry, default_code, error_message).
        If error_message is not None, it indicates a non-fatal error that
        should be reported to the user but doesn't prevent operation.
    """
    root = _get_resource_root()
    registry: Dict[str, ExamPlugin] = {}
    default_code: Optional[str] = None
    error_message: Optional[str] = None
    skipped_plugins: List[str] = []

    if not root.exists():
        return {}, None, f"Resource directory missing: {root}"

    for entry in sorted(root.iterdir()):
        if not entry.is_dir():
            continue
        manifest_path = entry / "manifest.json"
        if not manifest_path.exists():
            continue

        # Per-plugin error handling: a bad plugin is skipped, never fatal
        try:
            validated = validate_manifest(manifest_path)
        except ManifestValidationError as exc:
            logger.warning(f"Skipping invalid plugin {entry.name}: {exc}")
            skipped_plugins.append(entry.name)
            continue

        code = validated.code
        if code in registry:
            logger.warning(f"Duplicate exam code '{code}' - skipping {entry.name}")
            skipped_plugins.append(entry.name)
            continue

        registry[code] = ExamPlugin(
            code=code,
            name=validated.name,
            root=entry,
            blueprint=validated.blueprint,
            objectives_path=(entry / validated.objectives_path).resolve(),
            pbq_templates_path=(entry / validated.pbq_templates_path).resolve(),
            board=validated.board,
        )
        if validated.default:
            default_code = code
        logger.debug(f"Registered exam plugin {code} from {entry.name}")

    if not registry:
        error_message = f"No valid plugins found in {root}"
        if skipped_plugins:
            error_message += f"\nSkipped plugins with errors: {', '.join(skipped_plugins)}"
        return {}, None, error_message

    if skipped_plugins:
        error_message = f"Some plugins could not be loaded: {', '.join(skipped_plugins)}"

    if not default_code or default_code not in registry:
        default_code = sorted(registry.keys())[0]

    return registry, default_code, error_message


# Lazy initialization - plugins are NOT discovered at import time
_PLUGINS: Dict[str, ExamPlugin] = {}
_DEFAULT_CODE: Optional[str] = None
_INIT_ERROR: Optional[str] = None
_INITIALIZED = False


def _ensure_initialized() -> None:
    """Ensure plugin registry is initialized."""
    global _PLUGINS, _DEFAULT_CODE, _INIT_ERROR, _INITIALIZED
    if not _INITIALIZED:
        _PLUGINS, _DEFAULT_CODE, _INIT_ERROR = _discover_plugins()
        _INITIALIZED = True
        if _INIT_ERROR:
            logger.warning(_INIT_ERROR)


def reload_plugins() -> None:
    """Forget discovered plugins and cached resources; rediscover on next use."""
    global _INITIALIZED
    _INITIALIZED = False
    load_objectives_data.cache_clear()
    load_pbq_template_data.cache_clear()


def get_initialization_error() -> Optional[str]:
    """Return any error that occurred during plugin initialization."""
    _ensure_initialized()
    return _INIT_ERROR


def list_exam_plugins() -> Iterable[ExamPlugin]:
    _ensure_initialized()
    return _PLUGINS.values()


def supported_exam_codes() -> list[str]:
    _ensure_initialized()
    return sorted(_PLUGINS.keys())


def default_exam_code() -> Optional[str]:
    _ensure_initialized()
    return _DEFAULT_CODE


def get_exam_plugin(code: Optional[str]) -> ExamPlugin:
    _ensure_initialized()
    if not code:
        code = _DEFAULT_CODE
    plugin = _PLUGINS.get(code)
    if not plugin:
        raise UnsupportedCodeError(f"Unsupported exam code: {code}")
    return plugin


@lru_cache(maxsize=None)
def load_objectives_data(code: Optional[str]) -> Dict[str, Dict[str, Any]]:
    return get_exam_plugin(code).load_objectives_data()


@lru_cache(maxsize=None)
def load_pbq_template_data(code: Optional[str]) -> Tuple[Dict[str, Any], ...]:
    return tuple(get_exam_plugin(code).load_pbq_template_data())
