"""
Audit API endpoints.
"""
from fastapi import APIRouter, Depends, HTTPException

from seo_audit.logger import logger
from seo_audit.schemas.audit_request import AuditRequest
from seo_audit.schemas.audit_result import AuditReport
from seo_audit.services.audit_runner import AuditRunner
from seo_audit.services.fetch_client import FetchError

router = APIRouter(tags=["Audit"])


def get_runner() -> AuditRunner:
    return AuditRunner()


@router.post("", response_model=AuditReport)
async def run_audit(request: AuditRequest, runner: AuditRunner = Depends(get_runner)):
    """Audit a page and return the full report."""
    url = request.url.strip()
    logger.info(f"Audit requested for {url}")

    try:
        report = await runner.run(url)
    except FetchError as e:
        logger.warning(f"Audit failed for {url}: {e}")
        status_code = 400 if e.status_code == 400 else 502
        raise HTTPException(status_code=status_code, detail=f"Audit failed: {e}")

    return AuditReport.from_report(report)
