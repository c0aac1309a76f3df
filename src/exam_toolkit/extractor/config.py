"""
Module: extractor.config

Purpose:
    Configuration for objective extraction. Immutable settings with
    validation on construction.

Key Classes:
    - ExtractionConfig: Page clipping and bullet marker settings

Used By:
    - extractor.objectives: PDF text extraction and parsing
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ExtractionConfig:
    """
    Configuration for objective extraction.

    Attributes:
        header_ratio: Fraction of each page ignored at the top (running headers)
        footer_ratio: Fraction of each page ignored at the bottom (page numbers)
        bullet_marker: Marker that starts a bullet
        sub_bullet_marker: Line-leading marker treated as a bullet too
        first_page: First page (0-based) to read
    """
    header_ratio: float = 0.0
    footer_ratio: float = 0.0
    bullet_marker: str = "•"
    sub_bullet_marker: str = "−"  # U+2212 minus sign
    first_page: int = 0

    def __post_init__(self) -> None:
        for name in ("header_ratio", "footer_ratio"):
            value = getattr(self, name)
            if not 0.0 <= value < 0.5:
                raise ValueError(f"{name} must be in [0, 0.5): {value}")
        if not self.bullet_marker or not self.sub_bullet_marker:
            raise ValueError("bullet markers must be non-empty")
        if self.first_page < 0:
            raise ValueError(f"first_page must be >= 0: {self.first_page}")
