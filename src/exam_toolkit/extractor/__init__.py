"""
Module: extractor

Purpose:
    Offline extraction of objective catalogs from exam-objectives PDFs.
"""

from .config import ExtractionConfig
from .objectives import (
    ExtractionError,
    extract_objectives_pdf,
    extract_pdf_text,
    parse_objectives_text,
    write_objectives_json,
)

__all__ = [
    "ExtractionConfig",
    "ExtractionError",
    "extract_objectives_pdf",
    "extract_pdf_text",
    "parse_objectives_text",
    "write_objectives_json",
]
