"""
Check contract - audit context, check units and the registration decorators.

A check unit takes the read-only AuditContext and returns a CheckResult,
a list of CheckResults, or None when the rule does not apply to the page.
Network checks may be coroutines; everything else runs synchronously.
"""
import inspect
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Mapping, Optional, Union
from urllib.parse import urlparse

from seo_audit.services.document import ParsedDocument, parse
from seo_audit.services.fetch_client import FetchCollaborator, FetchError
from seo_audit.services.scoring.models import Category, CheckResult, Priority, Status

CheckOutput = Union[CheckResult, list[CheckResult], None]
CheckFunc = Callable[["AuditContext"], Union[CheckOutput, Awaitable[CheckOutput]]]


@dataclass(frozen=True)
class AuditContext:
    """Input bundle shared by reference across every check of one audit."""
    url: str
    document: ParsedDocument
    headers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    raw_html: str = ""
    fetcher: Optional[FetchCollaborator] = None

    @classmethod
    def build(
        cls,
        url: str,
        html: str,
        headers: Optional[Mapping[str, str]] = None,
        fetcher: Optional[FetchCollaborator] = None,
    ) -> "AuditContext":
        """Parse ``html`` and freeze the headers (keys lower-cased)."""
        frozen_headers = MappingProxyType(
            {str(k).lower(): str(v) for k, v in (headers or {}).items()}
        )
        return cls(
            url=url,
            document=parse(html, base_url=url),
            headers=frozen_headers,
            raw_html=html or "",
            fetcher=fetcher,
        )

    @property
    def hostname(self) -> str:
        return urlparse(self.url).hostname or ""

    @property
    def origin(self) -> str:
        parsed = urlparse(self.url)
        return f"{parsed.scheme}://{parsed.netloc}"

    @property
    def is_https(self) -> bool:
        return self.url.lower().startswith("https://")

    def require_fetcher(self) -> FetchCollaborator:
        if self.fetcher is None:
            raise FetchError("No fetch collaborator configured for network checks")
        return self.fetcher


@dataclass(frozen=True)
class CheckUnit:
    """One registered rule evaluator."""
    name: str
    func: CheckFunc
    category: Optional[Category] = None
    is_network: bool = False

    def __call__(self, context: AuditContext) -> Any:
        return self.func(context)

    async def run(self, context: AuditContext) -> CheckOutput:
        """Evaluate the check; synchronous checks resolve immediately."""
        outcome = self.func(context)
        if inspect.isawaitable(outcome):
            outcome = await outcome
        return outcome

    def fallback(self, reason: str) -> CheckResult:
        """Neutral stand-in used when the check could not complete."""
        return CheckResult(
            name=self.name,
            status=Status.NEUTRAL,
            priority=Priority.LOW,
            category=self.category,
            description=f"Could not verify {self.name}: {reason}",
        )


def check(name: str, category: Optional[Category] = None) -> Callable[[CheckFunc], CheckUnit]:
    """Register a function as a (synchronous) check unit."""
    def decorator(func: CheckFunc) -> CheckUnit:
        return CheckUnit(name=name, func=func, category=category, is_network=False)
    return decorator


def network_check(name: str, category: Optional[Category] = None) -> Callable[[CheckFunc], CheckUnit]:
    """Register a coroutine that calls the fetch collaborator."""
    def decorator(func: CheckFunc) -> CheckUnit:
        return CheckUnit(name=name, func=func, category=category, is_network=True)
    return decorator
