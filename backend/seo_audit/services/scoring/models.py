"""
Result model shared by checks, the orchestrator and the scoring engine.
"""
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Optional


class Status(str, Enum):
    """Outcome of a single check."""
    PASS = "pass"
    NEUTRAL = "neutral"  # informational, partially credited
    WARNING = "warning"
    ERROR = "error"  # hard-missing required element

    @property
    def is_failure(self) -> bool:
        return self in (Status.WARNING, Status.ERROR)


class Priority(str, Enum):
    """Severity used to order the issue list (never to weight scoring)."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {Priority.HIGH: 0, Priority.MEDIUM: 1, Priority.LOW: 2}


class Category(str, Enum):
    """Closed set of sub-score categories, in breakdown order."""
    META = "meta"
    HEADINGS = "headings"
    IMAGES = "images"
    PERFORMANCE = "performance"
    SECURITY = "security"
    TECHNICAL = "technical"
    SOCIAL = "social"

    @property
    def label(self) -> str:
        return CATEGORY_LABELS[self]


CATEGORY_LABELS = {
    Category.META: "Meta Tags",
    Category.HEADINGS: "Headings",
    Category.IMAGES: "Images",
    Category.PERFORMANCE: "Performance",
    Category.SECURITY: "Security",
    Category.TECHNICAL: "Technical",
    Category.SOCIAL: "Social",
}


@dataclass(frozen=True)
class CheckResult:
    """Individual audit check result."""
    name: str
    status: Status
    description: str
    priority: Priority = Priority.LOW
    category: Optional[Category] = None
    recommendation: Optional[str] = None
    details: dict[str, Any] = field(default_factory=dict)
    id: Optional[str] = None

    @property
    def passed(self) -> bool:
        return self.status == Status.PASS

    @property
    def failed(self) -> bool:
        return self.status.is_failure

    def with_id(self, slug: str) -> "CheckResult":
        """Copy of this result carrying a cross-reference slug."""
        return replace(self, id=slug)
