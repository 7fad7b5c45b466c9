"""
Pydantic schemas for audit responses.
"""

from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

from seo_audit.services.report import Report
from seo_audit.services.scoring.models import CheckResult


class CheckResultSchema(BaseModel):
    """Individual check result."""
    id: str
    name: str
    status: Literal["pass", "neutral", "warning", "error"]
    description: str
    priority: Literal["high", "medium", "low"] = "low"
    category: Optional[str] = None
    recommendation: Optional[str] = None
    details: dict[str, Any] = {}

    @classmethod
    def from_result(cls, result: CheckResult) -> "CheckResultSchema":
        return cls(
            id=result.id or "",
            name=result.name,
            status=result.status.value,
            description=result.description,
            priority=result.priority.value,
            category=result.category.value if result.category else None,
            recommendation=result.recommendation,
            details=dict(result.details),
        )


class CategoryScore(BaseModel):
    """Sub-score for one category."""
    category: str
    label: str
    score: int = Field(..., ge=0, le=100)


class AuditReport(BaseModel):
    """Complete audit response."""
    url: str
    generated_at: datetime

    # Scores
    overall_score: int = Field(..., ge=0, le=100)
    grade: Literal["A", "B", "C", "D", "F"]
    category_scores: dict[str, int] = {}
    categories: list[CategoryScore] = []

    # Counts
    total_checks: int = 0
    passed: int = 0
    neutral: int = 0
    failed: int = 0

    # Details
    issues: list[CheckResultSchema] = []
    results: list[CheckResultSchema] = []

    class Config:
        json_schema_extra = {
            "example": {
                "url": "https://example.com",
                "generated_at": "2024-01-01T12:00:05Z",
                "overall_score": 82,
                "grade": "B",
                "category_scores": {"meta": 88, "security": 71},
                "categories": [
                    {"category": "meta", "label": "Meta Tags", "score": 88},
                    {"category": "security", "label": "Security", "score": 71},
                ],
                "total_checks": 64,
                "passed": 41,
                "neutral": 17,
                "failed": 6,
            }
        }

    @classmethod
    def from_report(cls, report: Report) -> "AuditReport":
        return cls(
            url=report.url,
            generated_at=report.generated_at,
            overall_score=report.overall_score,
            grade=report.grade,
            category_scores={category.value: score for category, score in report.category_scores.items()},
            categories=[
                CategoryScore(category=category.value, label=category.label, score=score)
                for category, score in report.category_scores.items()
            ],
            total_checks=report.total_checks,
            passed=report.passed,
            neutral=report.neutral,
            failed=report.failed,
            issues=[CheckResultSchema.from_result(r) for r in report.issues],
            results=[CheckResultSchema.from_result(r) for r in report.results],
        )
