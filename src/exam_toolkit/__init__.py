"""Top-level package for the practice exam toolkit.

Provides subpackages:
- exam_toolkit.builder – session generation (allocation, MCQs, PBQs)
- exam_toolkit.scoring – answer evaluation
- exam_toolkit.core – models, schemas and serialization
- exam_toolkit.plugins – exam-variant blueprints, objectives and PBQ templates
- exam_toolkit.analytics – attempt records, trends and history
- exam_toolkit.extractor – objectives PDF extraction
"""

from exam_toolkit.builder import create_session
from exam_toolkit.common.constants import (
    EXAM_DURATION_SECONDS,
    EXAM_QUESTION_COUNT,
    MAX_PBQ_COUNT,
)
from exam_toolkit.core.models import ExamResult, ExamSession, SessionConfig
from exam_toolkit.core.utils.serialization import (
    deserialize_result,
    deserialize_session,
    load_result_json,
    load_session_json,
    save_result_json,
    save_session_json,
    serialize_result,
    serialize_session,
)
from exam_toolkit.scoring import score


def _get_version() -> str:
    """Get version from pyproject.toml (dev) or importlib.metadata (installed)."""
    from pathlib import Path

    pyproject = Path(__file__).resolve().parent.parent.parent / "pyproject.toml"
    if pyproject.exists():
        try:
            for line in pyproject.read_text(encoding="utf-8").splitlines():
                if line.strip().startswith("version"):
                    # Parse: version = "0.1.0"
                    return line.split("=")[1].strip().strip('"').strip("'")
        except OSError:
            pass

    from importlib.metadata import PackageNotFoundError, version as pkg_version
    try:
        return pkg_version("exam-toolkit")
    except PackageNotFoundError:
        return "0.0.0"


__version__ = _get_version()
__all__: list[str] = [
    "__version__",
    "create_session",
    "score",
    "EXAM_DURATION_SECONDS",
    "EXAM_QUESTION_COUNT",
    "MAX_PBQ_COUNT",
    "ExamResult",
    "ExamSession",
    "SessionConfig",
    "deserialize_result",
    "deserialize_session",
    "load_result_json",
    "load_session_json",
    "save_result_json",
    "save_session_json",
    "serialize_result",
    "serialize_session",
]
