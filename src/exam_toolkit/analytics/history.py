"""
Module: analytics.history

Purpose:
    Attempt history stored as one JSON file, newest attempt first.
    Reads and writes hold portalocker locks so several processes can
    record attempts into the same file safely.

Key Functions:
    - locked_file(): Context manager for locked file access
    - locked_read_modify_write_json(): Read-modify-write JSON under one lock

Key Classes:
    - AttemptHistory: load()/record()/clear() over a history file

Dependencies:
    - portalocker: Cross-platform file locking

Used By:
    - exam_toolkit.cli: score --history, trends
"""

from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Dict, Generator, List, Optional

import portalocker

from .attempts import Attempt

logger = logging.getLogger(__name__)

HISTORY_SCHEMA_VERSION = 1


@contextmanager
def locked_file(
    path: Path,
    mode: str = 'r',
    lock_type: int = portalocker.LOCK_EX,
) -> Generator:
    """
    Context manager for cross-platform locked file access.

    Args:
        path: Path to file.
        mode: File open mode ('r', 'w', 'a', etc.).
        lock_type: Lock type (LOCK_EX for exclusive, LOCK_SH for shared).

    Yields:
        Open file handle with lock held.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    if 'r' in mode and not path.exists():
        path.touch()

    with open(path, mode, encoding='utf-8') as f:
        portalocker.lock(f, lock_type)
        try:
            yield f
        finally:
            portalocker.unlock(f)


def locked_read_modify_write_json(
    path: Path,
    modifier: Callable[[Dict[str, Any]], Dict[str, Any]],
    default: Callable[[], Dict[str, Any]] = dict,
) -> Dict[str, Any]:
    """
    Read JSON, apply modifier, write back - all with exclusive lock.

    Args:
        path: Path to JSON file.
        modifier: Function that takes existing data, returns modified data.
        default: Factory for default data if the file is missing, empty
            or not valid JSON.

    Returns:
        The modified data that was written.
    """
    with locked_file(path, 'r+', portalocker.LOCK_EX) as f:
        f.seek(0)
        content = f.read()
        existing = default()
        if content.strip():
            try:
                existing = json.loads(content)
            except json.JSONDecodeError as e:
                logger.warning(f"Replacing unreadable JSON in {path}: {e}")

        modified = modifier(existing)

        f.seek(0)
        f.truncate()
        json.dump(modified, f, indent=2, ensure_ascii=False)
        return modified


def _empty_history() -> Dict[str, Any]:
    return {"schema_version": HISTORY_SCHEMA_VERSION, "attempts": []}


class AttemptHistory:
    """
    Newest-first attempt history backed by a JSON file.

    Args:
        path: History file (created on first write)
        max_entries: Keep at most this many attempts; None = unbounded

    Example:
        >>> history = AttemptHistory(Path("history.json"))
        >>> history.record(attempt)
        >>> history.load()[0].attempt_id == attempt.attempt_id
        True
    """

    def __init__(self, path: Path, max_entries: Optional[int] = None) -> None:
        self.path = Path(path)
        self.max_entries = max_entries

    def load(self) -> List[Attempt]:
        """
        All recorded attempts, newest first.

        A missing or empty file is an empty history. Unreadable files and
        malformed entries are logged and skipped.
        """
        if not self.path.exists():
            return []

        with locked_file(self.path, 'r', portalocker.LOCK_SH) as f:
            content = f.read()
        if not content.strip():
            return []

        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            logger.warning(f"Ignoring unreadable attempt history {self.path}: {e}")
            return []

        attempts = []
        for i, raw in enumerate(data.get("attempts", []) if isinstance(data, dict) else []):
            try:
                attempts.append(Attempt.from_dict(raw))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed attempt {i} in {self.path}: {e}")
        return attempts

    def record(self, attempt: Attempt) -> None:
        """Prepend an attempt (newest first)."""

        def prepend(data: Dict[str, Any]) -> Dict[str, Any]:
            if not isinstance(data, dict) or not isinstance(data.get("attempts"), list):
                logger.warning(f"Resetting malformed attempt history {self.path}")
                data = _empty_history()
            data["schema_version"] = HISTORY_SCHEMA_VERSION
            data["attempts"].insert(0, attempt.to_dict())
            if self.max_entries is not None:
                del data["attempts"][self.max_entries:]
            return data

        locked_read_modify_write_json(self.path, prepend, default=_empty_history)
        logger.info(f"Recorded attempt {attempt.attempt_id} ({attempt.percent}%) in {self.path.name}")

    def clear(self) -> None:
        locked_read_modify_write_json(self.path, lambda _: _empty_history(), default=_empty_history)
        logger.info(f"Cleared attempt history {self.path.name}")

    def __len__(self) -> int:
        return len(self.load())
