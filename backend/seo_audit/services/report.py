"""
Report model - the final audit output plus issue prioritization.
"""
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Mapping, Optional, Sequence

from seo_audit.services.scoring.engine import AuditScores
from seo_audit.services.scoring.models import Category, CheckResult, Priority, Status

_NON_ALNUM = re.compile(r"[^a-z0-9]+")

ISSUE_PRIORITIES = (Priority.HIGH, Priority.MEDIUM)


def slugify(name: str) -> str:
    """Lower-case, collapse non-alphanumerics to '-', trim edge hyphens."""
    return _NON_ALNUM.sub("-", name.lower()).strip("-")


def priority_issues(results: Sequence[CheckResult]) -> list[CheckResult]:
    """Non-passing high/medium results, high first, otherwise in input order."""
    issues = [
        r for r in results
        if r.status != Status.PASS and r.priority in ISSUE_PRIORITIES
    ]
    return sorted(issues, key=lambda r: r.priority.rank)


@dataclass(frozen=True)
class Report:
    """Complete audit result."""
    url: str
    overall_score: int
    grade: str
    results: tuple[CheckResult, ...] = ()
    category_scores: Mapping[Category, int] = field(default_factory=lambda: MappingProxyType({}))
    issues: tuple[CheckResult, ...] = ()
    generated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    passed: int = 0
    neutral: int = 0
    failed: int = 0

    @property
    def total_checks(self) -> int:
        return len(self.results)


def build_report(
    url: str,
    results: Sequence[CheckResult],
    scores: AuditScores,
    generated_at: Optional[datetime] = None,
) -> Report:
    """Assemble the report; every result gets an id slug derived from its name."""
    identified = tuple(r.with_id(slugify(r.name)) for r in results)

    return Report(
        url=url,
        overall_score=scores.overall,
        grade=scores.grade,
        results=identified,
        category_scores=MappingProxyType(dict(scores.by_category)),
        issues=tuple(priority_issues(identified)),
        generated_at=generated_at or datetime.now(timezone.utc),
        passed=scores.passed,
        neutral=scores.neutral,
        failed=scores.failed,
    )
