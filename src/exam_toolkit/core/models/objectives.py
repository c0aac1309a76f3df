"""
Module: objectives

Purpose:
    Provides ObjectiveMeta (catalog metadata for one exam objective) and
    DomainBlueprint (one weighted row of an exam variant's blueprint).

Key Functions:
    - objective_domain_number(): "2.7" -> "2.0"
    - ObjectiveMeta.to_dict() / from_dict(): Serialization
    - DomainBlueprint.to_dict() / from_dict(): Serialization

Used By:
    - common.objectives: Catalog lookups
    - builder.allocation: Weighted allocation
    - builder.questions: Objective enrichment
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple


def objective_domain_number(objective_id: str) -> str:
    """
    Derive the domain id from an objective id's numeric prefix.

    Example:
        >>> objective_domain_number("2.7")
        '2.0'
    """
    prefix = objective_id.split(".")[0]
    return f"{prefix}.0"


@dataclass(frozen=True)
class ObjectiveMeta:
    """
    Catalog metadata for one objective (immutable).

    Attributes:
        title: Objective statement
        bullets: Ordered descriptive bullets (candidate facts)
        domain: Display domain label like "2.0 Networking", None if unknown
    """

    title: str
    bullets: Tuple[str, ...] = ()
    domain: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "domain": self.domain,
            "title": self.title,
            "bullets": list(self.bullets),
        }

    @classmethod
    def from_dict(cls, data: dict) -> ObjectiveMeta:
        return cls(
            title=data.get("title", ""),
            bullets=tuple(data.get("bullets", [])),
            domain=data.get("domain"),
        )


@dataclass(frozen=True)
class DomainBlueprint:
    """
    Weighted blueprint row for one exam domain (immutable).

    Weights are relative; a variant's weights need not sum to 100.

    Attributes:
        domain_id: Domain number like "3.0"
        label: Display label like "Hardware"
        weight: Positive relative weight

    Invariants:
        - weight > 0
    """

    domain_id: str
    label: str
    weight: int

    def __post_init__(self) -> None:
        if self.weight <= 0:
            raise ValueError(f"Blueprint weight must be positive: {self.domain_id}={self.weight}")

    def to_dict(self) -> dict:
        return {"domain": self.domain_id, "label": self.label, "weight": self.weight}

    @classmethod
    def from_dict(cls, data: dict) -> DomainBlueprint:
        return cls(
            domain_id=str(data["domain"]),
            label=str(data.get("label", "")),
            weight=int(data["weight"]),
        )
