from seo_audit.services.scoring.engine import AuditScores, ScoringEngine, grade_for
from seo_audit.services.scoring.models import Category, CheckResult, Priority, Status

__all__ = [
    "AuditScores",
    "ScoringEngine",
    "grade_for",
    "Category",
    "CheckResult",
    "Priority",
    "Status",
]
