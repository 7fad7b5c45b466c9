"""
Scoring Engine - Derives the overall score, grade and category sub-scores.

Every applicable result counts once:
- pass earns full credit
- neutral earns partial credit (informational, not failing)
- warning / error earn nothing
"""

import math
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from seo_audit.services.scoring.models import Category, CheckResult, Status
from seo_audit.services.scoring.weights import (
    FAILING_GRADE,
    GRADE_BOUNDARIES,
    SCORING_VERSION,
    SCORING_WEIGHTS,
    ScoringWeights,
)
from seo_audit.logger import logger


@dataclass(frozen=True)
class AuditScores:
    """Complete audit scoring result."""
    overall: int
    grade: str
    by_category: dict[Category, int] = field(default_factory=dict)

    # Status counts
    passed: int = 0
    neutral: int = 0
    failed: int = 0

    # Metadata
    scoring_version: str = SCORING_VERSION


def round_half_up(value: float) -> int:
    """Round like JavaScript's Math.round for non-negative values."""
    return int(math.floor(value + 0.5))


def grade_for(score: int) -> str:
    """Map a 0-100 score onto the fixed letter-grade table."""
    for minimum, grade in GRADE_BOUNDARIES:
        if score >= minimum:
            return grade
    return FAILING_GRADE


class ScoringEngine:
    """Weighted pass-rate scoring over a flat result list."""

    def __init__(self, weights: ScoringWeights = SCORING_WEIGHTS):
        self.weights = weights

    def percentage(self, results: Sequence[CheckResult]) -> int:
        """Weighted pass percentage of ``results`` (0 when empty)."""
        total = len(results)
        if total == 0:
            return 0
        passed, neutral, failed = _count(results)
        return round_half_up((self.weights.weighted(passed, neutral, failed) / total) * 100)

    def category_scores(self, results: Iterable[CheckResult]) -> dict[Category, int]:
        """Per-category percentage. Categories without results are omitted."""
        grouped: dict[Category, list[CheckResult]] = {}
        for result in results:
            if result.category is not None:
                grouped.setdefault(result.category, []).append(result)

        return {
            category: self.percentage(grouped[category])
            for category in Category
            if category in grouped
        }

    def score(self, results: Sequence[CheckResult]) -> AuditScores:
        """Score the applicable (non-null) results of one audit run."""
        results = [r for r in results if r is not None]

        passed, neutral, failed = _count(results)

        overall = self.percentage(results)
        grade = grade_for(overall)

        logger.info(
            f"Score: {overall}/100 grade={grade} "
            f"(pass={passed}, neutral={neutral}, fail={failed})"
        )

        return AuditScores(
            overall=overall,
            grade=grade,
            by_category=self.category_scores(results),
            passed=passed,
            neutral=neutral,
            failed=failed,
        )


def _count(results: Iterable[CheckResult]) -> tuple[int, int, int]:
    """(passed, neutral, failed) tallies."""
    passed = neutral = failed = 0
    for result in results:
        if result.status == Status.PASS:
            passed += 1
        elif result.status == Status.NEUTRAL:
            neutral += 1
        else:
            failed += 1
    return passed, neutral, failed
