"""
Audit Runner - Main entry point for SEO audits.

Coordinates page fetching, check orchestration, scoring and report assembly.
"""
from datetime import datetime, timezone
from typing import Optional, Sequence

from seo_audit.logger import logger
from seo_audit.services.checks.base import AuditContext, CheckUnit
from seo_audit.services.checks.registry import DEFAULT_CHECKS
from seo_audit.services.fetch_client import FetchCollaborator, FetchError, ProxyFetchClient
from seo_audit.services.orchestrator import AuditOrchestrator, ProgressCallback
from seo_audit.services.report import Report, build_report
from seo_audit.services.scoring.engine import ScoringEngine

ALLOWED_SCHEMES = ("http://", "https://")


class AuditRunner:
    """Runs the complete audit pipeline for one URL at a time."""

    def __init__(
        self,
        fetcher: Optional[FetchCollaborator] = None,
        checks: Sequence[CheckUnit] = DEFAULT_CHECKS,
        orchestrator: Optional[AuditOrchestrator] = None,
        scoring_engine: Optional[ScoringEngine] = None,
    ):
        self.fetcher = fetcher
        self.checks = tuple(checks)
        self.orchestrator = orchestrator or AuditOrchestrator()
        self.scoring_engine = scoring_engine or ScoringEngine()

    async def run(self, url: str, progress: Optional[ProgressCallback] = None) -> Report:
        """
        Run complete audit on a URL.

        Args:
            url: Absolute http(s) URL of the page to audit
            progress: Optional callback receiving (percent, stage)

        Returns:
            Report with scores, results and prioritized issues

        Raises:
            FetchError: if the URL is not http(s) or the page cannot be fetched
        """
        if not url.lower().startswith(ALLOWED_SCHEMES):
            raise FetchError(f"Invalid URL (must start with http:// or https://): {url}", status_code=400)

        if self.fetcher is not None:
            return await self._audit(url, self.fetcher, progress)

        async with ProxyFetchClient() as client:
            return await self._audit(url, client, progress)

    async def _audit(
        self, url: str, fetcher: FetchCollaborator, progress: Optional[ProgressCallback]
    ) -> Report:
        started_at = datetime.now(timezone.utc)
        logger.info(f"Starting audit for {url}")

        page = await fetcher.fetch(url)
        context = AuditContext.build(url, page.contents, page.headers, fetcher=fetcher)

        results = await self.orchestrator.run(context, self.checks, progress=progress)
        scores = self.scoring_engine.score(results)

        duration = (datetime.now(timezone.utc) - started_at).total_seconds()
        logger.info(
            f"Audit finished for {url}: {len(results)} results, "
            f"score {scores.overall} ({scores.grade}) in {duration:.2f}s"
        )
        return build_report(url, results, scores)


async def run_audit(
    url: str,
    fetcher: Optional[FetchCollaborator] = None,
    progress: Optional[ProgressCallback] = None,
) -> Report:
    """Audit ``url`` with the default check registry."""
    return await AuditRunner(fetcher=fetcher).run(url, progress=progress)
