"""
Module: analytics.attempts

Purpose:
    Turn a scored session into an Attempt record (per-domain and
    per-objective breakdowns, missed objectives) and aggregate attempts
    into per-objective trends.

Key Classes:
    - ObjectiveBreakdown: correct/total/accuracy for one objective
    - MissedObjective: missed/total for one objective
    - Attempt: One submitted exam
    - ObjectiveTrend: Aggregate accuracy for one objective across attempts

Key Functions:
    - build_attempt(): Session + result -> Attempt
    - compute_objective_trends(): Attempts -> weakest-first trends
    - objective_sort_key(): Numeric ordering of "N.M" ids

Used By:
    - analytics.history: Persisted attempt history
    - exam_toolkit.cli: score/trends commands
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Tuple

from exam_toolkit.common.identifiers import epoch_millis, iso_utc_millis, random_base36, to_base36, utc_now
from exam_toolkit.core.models import DomainScore, ExamResult, ExamSession
from exam_toolkit.scoring.scorer import round_percent

logger = logging.getLogger(__name__)


def objective_sort_key(objective_id: str) -> Tuple:
    """
    Sort key comparing dotted ids numerically ("2.10" after "2.9").

    Non-numeric segments sort after numeric ones, by text.
    """
    parts = []
    for segment in objective_id.split("."):
        if segment.isdigit():
            parts.append((0, int(segment), ""))
        else:
            parts.append((1, 0, segment))
    return tuple(parts)


def new_attempt_id(moment: Optional[datetime] = None) -> str:
    return f"attempt_{random_base36(8)}_{to_base36(epoch_millis(moment))}"


@dataclass(frozen=True)
class ObjectiveBreakdown:
    objective_id: str
    title: str
    correct: int
    total: int
    accuracy: float

    def to_dict(self) -> dict:
        return {
            "objective_id": self.objective_id,
            "title": self.title,
            "correct": self.correct,
            "total": self.total,
            "accuracy": self.accuracy,
        }

    @classmethod
    def from_dict(cls, data: dict) -> ObjectiveBreakdown:
        return cls(
            objective_id=data["objective_id"],
            title=data.get("title", ""),
            correct=int(data["correct"]),
            total=int(data["total"]),
            accuracy=float(data.get("accuracy", 0.0)),
        )


@dataclass(frozen=True)
class MissedObjective:
    objective_id: str
    title: str
    missed: int
    total: int

    def to_dict(self) -> dict:
        return {
            "objective_id": self.objective_id,
            "title": self.title,
            "missed": self.missed,
            "total": self.total,
        }

    @classmethod
    def from_dict(cls, data: dict) -> MissedObjective:
        return cls(
            objective_id=data["objective_id"],
            title=data.get("title", ""),
            missed=int(data["missed"]),
            total=int(data["total"]),
        )


@dataclass(frozen=True)
class Attempt:
    """
    One submitted exam (immutable).

    Attributes:
        attempt_id: "attempt_<random>_<base36 ms>"
        submitted_at: ISO-8601 UTC submission time
        exam: Exam variant id
        session_id: Session the attempt answered
        percent: Overall score
        correct_count: Questions answered correctly
        total: Questions scored
        duration_seconds: Session duration
        pbq_count: PBQ count the learner requested
        by_domain: Per-domain tallies (result order)
        by_objective: Per-objective tallies, numeric id order
        missed_objectives: Objectives with misses, most missed first
    """

    attempt_id: str
    submitted_at: str
    exam: str
    session_id: str
    percent: float
    correct_count: int
    total: int
    duration_seconds: int
    pbq_count: int
    by_domain: Tuple[DomainScore, ...]
    by_objective: Tuple[ObjectiveBreakdown, ...]
    missed_objectives: Tuple[MissedObjective, ...]

    def to_dict(self) -> dict:
        return {
            "attempt_id": self.attempt_id,
            "submitted_at": self.submitted_at,
            "exam": self.exam,
            "session_id": self.session_id,
            "percent": self.percent,
            "correct_count": self.correct_count,
            "total": self.total,
            "duration_seconds": self.duration_seconds,
            "pbq_count": self.pbq_count,
            "by_domain": [d.to_dict() for d in self.by_domain],
            "by_objective": [o.to_dict() for o in self.by_objective],
            "missed_objectives": [m.to_dict() for m in self.missed_objectives],
        }

    @classmethod
    def from_dict(cls, data: dict) -> Attempt:
        return cls(
            attempt_id=data["attempt_id"],
            submitted_at=data["submitted_at"],
            exam=data["exam"],
            session_id=data["session_id"],
            percent=float(data["percent"]),
            correct_count=int(data["correct_count"]),
            total=int(data["total"]),
            duration_seconds=int(data.get("duration_seconds", 0)),
            pbq_count=int(data.get("pbq_count", 0)),
            by_domain=tuple(DomainScore.from_dict(d) for d in data.get("by_domain", [])),
            by_objective=tuple(ObjectiveBreakdown.from_dict(o) for o in data.get("by_objective", [])),
            missed_objectives=tuple(MissedObjective.from_dict(m) for m in data.get("missed_objectives", [])),
        )


def build_attempt(
    session: ExamSession,
    result: ExamResult,
    *,
    attempt_id: Optional[str] = None,
    submitted_at: Optional[datetime] = None,
) -> Attempt:
    """
    Build an attempt record from a session and its result.

    Questions without a scored entry count as incorrect.

    Args:
        session: Scored session
        result: Result of score(session, ...)
        attempt_id: Explicit id (default: generated)
        submitted_at: Submission time (default: now)
    """
    moment = submitted_at or utc_now()
    correctness = result.correctness

    tallies: Dict[str, List] = {}
    for question in session.questions:
        title = question.objective_title or f"Objective {question.objective}"
        tally = tallies.setdefault(question.objective, [title, 0, 0])
        tally[2] += 1
        if correctness.get(question.id, False):
            tally[1] += 1

    by_objective = sorted(
        (
            ObjectiveBreakdown(
                objective_id=oid,
                title=title,
                correct=correct,
                total=total,
                accuracy=round_percent(correct, total),
            )
            for oid, (title, correct, total) in tallies.items()
        ),
        key=lambda o: objective_sort_key(o.objective_id),
    )

    missed = sorted(
        (
            MissedObjective(o.objective_id, o.title, missed=o.total - o.correct, total=o.total)
            for o in by_objective
            if o.correct < o.total
        ),
        key=lambda m: m.missed,
        reverse=True,
    )

    attempt = Attempt(
        attempt_id=attempt_id or new_attempt_id(moment),
        submitted_at=iso_utc_millis(moment),
        exam=session.exam,
        session_id=session.session_id,
        percent=result.percent,
        correct_count=result.correct_count,
        total=result.total,
        duration_seconds=session.duration_seconds,
        pbq_count=session.config.pbq_count,
        by_domain=result.by_domain,
        by_objective=tuple(by_objective),
        missed_objectives=tuple(missed),
    )
    logger.debug(
        f"Built attempt {attempt.attempt_id} for {session.session_id}: "
        f"{len(by_objective)} objectives, {len(missed)} with misses"
    )
    return attempt


@dataclass(frozen=True)
class ObjectiveTrend:
    """
    Accuracy for one objective across attempts.

    Attributes:
        objective_id: Objective id
        title: Objective title from the most recent attempt
        attempts: Attempts that included the objective
        questions: Questions on the objective across those attempts
        correct: Correct answers across those attempts
        accuracy: Aggregate accuracy (one decimal)
        trend: Per-attempt accuracy, oldest first
    """

    objective_id: str
    title: str
    attempts: int
    questions: int
    correct: int
    accuracy: float
    trend: Tuple[float, ...]

    def to_dict(self) -> dict:
        return {
            "objective_id": self.objective_id,
            "title": self.title,
            "attempts": self.attempts,
            "questions": self.questions,
            "correct": self.correct,
            "accuracy": self.accuracy,
            "trend": list(self.trend),
        }


def compute_objective_trends(attempts: Iterable[Attempt], exam: str) -> List[ObjectiveTrend]:
    """
    Aggregate per-objective accuracy over an exam variant's attempts.

    Args:
        attempts: Attempts, newest first (history order)
        exam: Exam variant to include

    Returns:
        Trends sorted weakest first; equal accuracies keep first-seen order
    """
    selected = [a for a in attempts if a.exam == exam]

    stats: Dict[str, dict] = {}
    for attempt in reversed(selected):
        for entry in attempt.by_objective:
            item = stats.setdefault(
                entry.objective_id,
                {"title": entry.title, "attempts": 0, "questions": 0, "correct": 0, "trend": []},
            )
            item["title"] = entry.title or item["title"]
            item["attempts"] += 1
            item["questions"] += entry.total
            item["correct"] += entry.correct
            item["trend"].append(entry.accuracy)

    trends = [
        ObjectiveTrend(
            objective_id=oid,
            title=item["title"],
            attempts=item["attempts"],
            questions=item["questions"],
            correct=item["correct"],
            accuracy=round_percent(item["correct"], item["questions"]),
            trend=tuple(item["trend"]),
        )
        for oid, item in stats.items()
    ]
    return sorted(trends, key=lambda t: t.accuracy)
