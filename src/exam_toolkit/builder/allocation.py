"""
Module: builder.allocation

Purpose:
    Weighted domain allocation. Splits a fixed question total across
    an exam variant's blueprint domains using largest-remainder
    apportionment.

Key Functions:
    - allocate_by_weight(): Exact per-domain counts for a blueprint

Dependencies:
    - exam_toolkit.core.models: DomainBlueprint

Used By:
    - builder.controller: Step 3 of session building

Invariants:
    - sum(counts.values()) == total
    - every domain receives at least floor(weight / sum * total)
    - no randomness; ties on fractional remainder keep blueprint order
"""

from __future__ import annotations

import logging
import math
from typing import Dict, Sequence

from exam_toolkit.core.models.objectives import DomainBlueprint

logger = logging.getLogger(__name__)


def allocate_by_weight(total: int, blueprint: Sequence[DomainBlueprint]) -> Dict[str, int]:
    """
    Allocate `total` questions across blueprint domains by weight.

    Each domain gets the floor of its exact share; the units left over go
    one each to the domains with the largest fractional remainders.

    Args:
        total: Positive question total
        blueprint: Ordered weighted domains

    Returns:
        {domain_id: count} in blueprint order

    Raises:
        ValueError: If total <= 0 or the blueprint is empty

    Example:
        >>> rows = [DomainBlueprint("1.0", "A", 1), DomainBlueprint("2.0", "B", 1)]
        >>> allocate_by_weight(3, rows)
        {'1.0': 2, '2.0': 1}
    """
    if total <= 0:
        raise ValueError(f"Allocation total must be positive: {total}")
    if not blueprint:
        raise ValueError("Cannot allocate over an empty blueprint")

    weight_sum = sum(row.weight for row in blueprint)
    exact = [row.weight / weight_sum * total for row in blueprint]
    counts = {row.domain_id: math.floor(share) for row, share in zip(blueprint, exact)}

    remaining = total - sum(counts.values())
    # sorted() stays stable with reverse=True: equal remainders keep declaration order
    by_remainder = sorted(
        range(len(blueprint)),
        key=lambda i: exact[i] - math.floor(exact[i]),
        reverse=True,
    )
    for i in range(remaining):
        counts[blueprint[by_remainder[i % len(by_remainder)]].domain_id] += 1

    logger.debug(f"Allocated {total} questions: {counts}")
    return counts
