"""
Module: extractor.objectives

Purpose:
    Offline tooling that turns an exam-objectives PDF into the
    objectives.json snapshot a plugin ships. Never used during session
    building.

Key Functions:
    - parse_objectives_text(): Objectives text -> {id: ObjectiveMeta}
    - extract_pdf_text(): PDF -> plain text (PyMuPDF)
    - extract_objectives_pdf(): PDF -> {id: ObjectiveMeta}
    - write_objectives_json(): Write a plugin objectives.json

Key Classes:
    - ExtractionError: PDF missing or unreadable

Dependencies:
    - fitz (PyMuPDF): PDF text extraction

Text layout:
    "N.0 Domain name" lines open a domain, a line holding just "N.M"
    opens an objective. The objective's block runs to the next id or
    domain header: its first part is the title, every "•" (or
    line-leading "−") starts a bullet.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Dict, List, Optional

import fitz

from exam_toolkit.core.models.objectives import ObjectiveMeta

from .config import ExtractionConfig

logger = logging.getLogger(__name__)

_DOMAIN_HEADER_RE = re.compile(r"^(\d+\.0)\s+(.+)$")
_OBJECTIVE_ID_RE = re.compile(r"^\d+\.[1-9]\d*$")
_PIPE_RE = re.compile(r"\s*\|\s*")
_SPACES_RE = re.compile(r"\s+")


class ExtractionError(RuntimeError):
    """Raised when an objectives PDF cannot be read."""


def _normalize_spaces(text: str) -> str:
    return _SPACES_RE.sub(" ", text).strip()


def _domain_label(line: str) -> Optional[str]:
    match = _DOMAIN_HEADER_RE.match(line)
    if not match:
        return None
    name = _normalize_spaces(_PIPE_RE.sub(" ", match.group(2)))
    return f"{match.group(1)} {name}"


def _split_block(lines: List[str], cfg: ExtractionConfig) -> List[str]:
    """Split an objective block into [title, bullet, ...]."""
    bullet = cfg.bullet_marker
    sub_bullet_re = re.compile(rf"^\s*{re.escape(cfg.sub_bullet_marker)}\s*", re.MULTILINE)
    empty_bullet_re = re.compile(rf"\n{re.escape(bullet)}\s*\n{re.escape(bullet)}")

    text = "\n".join(lines)
    text = sub_bullet_re.sub(f"{bullet} ", text)
    text = text.replace(bullet, f"\n{bullet} ")
    text = empty_bullet_re.sub(f"\n{bullet} ", text)

    parts = (_normalize_spaces(p) for p in text.split(f"\n{bullet}"))
    return [p for p in parts if p]


def parse_objectives_text(
    text: str,
    config: Optional[ExtractionConfig] = None,
) -> Dict[str, ObjectiveMeta]:
    """
    Parse objectives text into catalog entries.

    Args:
        text: Plain text of an objectives document
        config: Marker settings (default ExtractionConfig())

    Returns:
        {objective_id: ObjectiveMeta} in document order. A repeated id
        keeps its last block.

    Example:
        >>> text = "2.0 Networking\\n2.1\\nPorts and protocols\\n• 22 – SSH"
        >>> parse_objectives_text(text)["2.1"].bullets
        ('22 – SSH',)
    """
    cfg = config or ExtractionConfig()
    lines = [ln.replace("\r", "").strip() for ln in text.split("\n")]
    lines = [ln for ln in lines if ln]

    def is_boundary(line: str) -> bool:
        return bool(_DOMAIN_HEADER_RE.match(line) or _OBJECTIVE_ID_RE.match(line))

    objectives: Dict[str, ObjectiveMeta] = {}
    domain: Optional[str] = None
    i = 0
    while i < len(lines):
        line = lines[i]
        label = _domain_label(line)
        if label is not None:
            domain = label
            i += 1
            continue

        if not _OBJECTIVE_ID_RE.match(line):
            i += 1
            continue

        j = i + 1
        while j < len(lines) and not is_boundary(lines[j]):
            j += 1

        parts = _split_block(lines[i + 1:j], cfg)
        if line in objectives:
            logger.warning(f"Objective {line} appears twice; keeping the later block")
        objectives[line] = ObjectiveMeta(
            title=parts[0] if parts else "",
            bullets=tuple(parts[1:]),
            domain=domain,
        )
        i = j

    logger.debug(f"Parsed {len(objectives)} objectives")
    return objectives


def extract_pdf_text(pdf_path: Path, config: Optional[ExtractionConfig] = None) -> str:
    """
    Read a PDF's text, page by page, skipping configured header/footer bands.

    Raises:
        ExtractionError: If the file is missing or PyMuPDF cannot open it
    """
    cfg = config or ExtractionConfig()
    pdf_path = Path(pdf_path)
    if not pdf_path.exists():
        raise ExtractionError(f"PDF not found: {pdf_path}")

    pages: List[str] = []
    try:
        with fitz.open(pdf_path) as doc:
            for page_index in range(cfg.first_page, doc.page_count):
                page = doc[page_index]
                rect = page.rect
                clip = fitz.Rect(
                    rect.x0,
                    rect.y0 + rect.height * cfg.header_ratio,
                    rect.x1,
                    rect.y1 - rect.height * cfg.footer_ratio,
                )
                pages.append(page.get_text("text", clip=clip))
    except (RuntimeError, ValueError) as e:
        raise ExtractionError(f"Cannot read PDF {pdf_path}: {e}") from e

    logger.info(f"Read {len(pages)} pages from {pdf_path.name}")
    return "\n".join(pages)


def extract_objectives_pdf(
    pdf_path: Path,
    config: Optional[ExtractionConfig] = None,
) -> Dict[str, ObjectiveMeta]:
    """Extract catalog entries from an objectives PDF."""
    objectives = parse_objectives_text(extract_pdf_text(pdf_path, config), config)
    if not objectives:
        logger.warning(f"No objectives found in {Path(pdf_path).name}")
    else:
        logger.info(f"Extracted {len(objectives)} objectives from {Path(pdf_path).name}")
    return objectives


def write_objectives_json(objectives: Dict[str, ObjectiveMeta], path: Path) -> None:
    """Write {id: {domain, title, bullets}} in the plugin objectives.json format."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = {oid: meta.to_dict() for oid, meta in objectives.items()}
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, ensure_ascii=False)
        f.write("\n")
    logger.info(f"Wrote {len(payload)} objectives to {path}")
