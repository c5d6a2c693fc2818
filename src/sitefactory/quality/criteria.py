"""Weighted-criteria scoring shared by the quality scorer and SEO analyzer."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from pydantic import BaseModel

from sitefactory.types import CheckResult

# Decision thresholds
_GRADE_THRESHOLDS: list[tuple[float, str]] = [
    (90.0, "A+"),
    (80.0, "A"),
    (70.0, "B"),
    (60.0, "C"),
    (50.0, "D"),
]


class Criterion(BaseModel):
    """One scored check.

    ``check`` returns the fraction of ``points`` earned (a bool counts as
    0 or 1). The result is "good" when the fraction reaches
    ``good_threshold``; otherwise it carries ``failure_status`` and
    ``message``.
    """

    item: str
    points: float
    check: Callable[[Any], float]
    message: Callable[[Any], str] | str | None = None
    good_threshold: float = 1.0
    failure_status: str = "needs improvement"


def evaluate_criteria(subject: Any, criteria: list[Criterion]) -> tuple[float, list[CheckResult]]:
    """Score ``subject`` against each criterion. Returns (total, per-check results)."""
    total = 0.0
    results: list[CheckResult] = []
    for criterion in criteria:
        fraction = min(1.0, max(0.0, float(criterion.check(subject))))
        earned = criterion.points * fraction
        total += earned

        good = fraction >= criterion.good_threshold
        message = None
        if not good:
            message = (
                criterion.message(subject) if callable(criterion.message) else criterion.message
            )
        results.append(
            CheckResult(
                item=criterion.item,
                status="good" if good else criterion.failure_status,
                points=earned,
                max_points=criterion.points,
                message=message,
            )
        )
    return total, results


def combine_scores(scores: dict[str, float], weights: dict[str, float]) -> float:
    """Weighted sum of named scores; missing names count as zero."""
    return sum(scores.get(name, 0.0) * weight for name, weight in weights.items())


def get_grade(score: float) -> str:
    """Convert a 0-100 score to a letter grade."""
    for threshold, grade in _GRADE_THRESHOLDS:
        if score >= threshold:
            return grade
    return "F"
