"""
Module: analytics

Purpose:
    Attempt records, per-objective trends and the attempt history store.
"""

from .attempts import (
    Attempt,
    MissedObjective,
    ObjectiveBreakdown,
    ObjectiveTrend,
    build_attempt,
    compute_objective_trends,
    objective_sort_key,
)
from .history import AttemptHistory

__all__ = [
    "Attempt",
    "MissedObjective",
    "ObjectiveBreakdown",
    "ObjectiveTrend",
    "build_attempt",
    "compute_objective_trends",
    "objective_sort_key",
    "AttemptHistory",
]
