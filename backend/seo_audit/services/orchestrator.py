"""
Audit Orchestrator - runs every check unit against one audit context.

Synchronous checks run inline in registration order. Network checks run as
asyncio tasks, bounded by a semaphore and individually time-limited. Any
failure inside a unit is turned into a neutral result; one bad check never
aborts the audit.
"""
import asyncio
from typing import Callable, Optional, Sequence

from seo_audit.config import settings
from seo_audit.logger import logger
from seo_audit.services.checks.base import AuditContext, CheckOutput, CheckUnit
from seo_audit.services.fetch_client import FetchError
from seo_audit.services.scoring.models import CheckResult

ProgressCallback = Callable[[int, str], None]

# Share of the progress bar reserved for the synchronous pass
SYNC_PROGRESS_SHARE = 50


class AuditOrchestrator:
    """Fan-out/fan-in over a check registry. Holds no per-run state."""

    def __init__(self, network_timeout: Optional[float] = None, concurrency: Optional[int] = None):
        self.network_timeout = (
            network_timeout if network_timeout is not None else settings.NETWORK_CHECK_TIMEOUT
        )
        self.concurrency = concurrency if concurrency is not None else settings.NETWORK_CHECK_CONCURRENCY
        if self.concurrency < 1:
            raise ValueError("concurrency must be at least 1")

    async def run(
        self,
        context: AuditContext,
        checks: Sequence[CheckUnit],
        progress: Optional[ProgressCallback] = None,
    ) -> list[CheckResult]:
        """Evaluate ``checks`` and return their results in registration order."""
        slots: list[CheckOutput] = [None] * len(checks)
        tracker = _ProgressTracker(progress)
        network = [(i, unit) for i, unit in enumerate(checks) if unit.is_network]
        local = [(i, unit) for i, unit in enumerate(checks) if not unit.is_network]

        tracker.report(0, "Starting checks")

        for done, (index, unit) in enumerate(local, start=1):
            slots[index] = await self._run_isolated(unit, context)
            tracker.report(done * SYNC_PROGRESS_SHARE // max(len(local), 1), f"Checked {unit.name}")

        if network:
            semaphore = asyncio.Semaphore(self.concurrency)
            tasks = {
                asyncio.create_task(self._run_network(unit, context, semaphore)): (index, unit)
                for index, unit in network
            }
            try:
                finished = 0
                for future in asyncio.as_completed(tasks):
                    await future
                    finished += 1
                    tracker.report(
                        SYNC_PROGRESS_SHARE + finished * (99 - SYNC_PROGRESS_SHARE) // len(network),
                        f"Network checks {finished}/{len(network)}",
                    )
            finally:
                for task in tasks:
                    if not task.done():
                        task.cancel()
            for task, (index, _unit) in tasks.items():
                slots[index] = task.result()

        tracker.report(100, "Audit complete")
        return _flatten(slots)

    async def _run_network(
        self, unit: CheckUnit, context: AuditContext, semaphore: asyncio.Semaphore
    ) -> CheckOutput:
        async with semaphore:
            return await self._run_isolated(unit, context, timeout=self.network_timeout)

    async def _run_isolated(
        self, unit: CheckUnit, context: AuditContext, timeout: Optional[float] = None
    ) -> CheckOutput:
        """Run one unit; convert any failure into the unit's neutral fallback."""
        try:
            if timeout is None:
                return await unit.run(context)
            return await asyncio.wait_for(unit.run(context), timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Check '{unit.name}' timed out after {timeout}s")
            return unit.fallback(f"timed out after {timeout:g}s")
        except FetchError as e:
            logger.warning(f"Check '{unit.name}' network failure: {e}")
            return unit.fallback(str(e))
        except Exception as e:
            logger.exception(f"Check '{unit.name}' failed: {e}")
            return unit.fallback(str(e) or type(e).__name__)


class _ProgressTracker:
    """Forwards monotonic progress to an optional callback, ignoring its errors."""

    def __init__(self, callback: Optional[ProgressCallback]):
        self.callback = callback
        self.last = 0

    def report(self, percent: int, stage: str) -> None:
        percent = min(max(percent, self.last), 100)
        self.last = percent
        if self.callback is None:
            return
        try:
            self.callback(percent, stage)
        except Exception as e:
            logger.warning(f"Progress callback raised, ignoring: {e}")


def _flatten(slots: list[CheckOutput]) -> list[CheckResult]:
    results: list[CheckResult] = []
    for outcome in slots:
        if outcome is None:
            continue
        if isinstance(outcome, CheckResult):
            results.append(outcome)
        else:
            results.extend(r for r in outcome if r is not None)
    return results
