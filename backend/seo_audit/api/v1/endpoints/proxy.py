"""
Fetch collaborator endpoints - page fetch, DNS lookup and TLS inspection.
"""
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from seo_audit.logger import logger
from seo_audit.schemas.proxy import DnsPayload, FetchPayload, ProxyErrorPayload, SSLPayload
from seo_audit.services.proxy_service import ProxyError, ProxyService

router = APIRouter(tags=["Proxy"])

ERROR_RESPONSES = {
    400: {"model": ProxyErrorPayload},
    404: {"model": ProxyErrorPayload},
    408: {"model": ProxyErrorPayload},
    500: {"model": ProxyErrorPayload},
}


def get_proxy_service() -> ProxyService:
    return ProxyService()


def _error_response(e: ProxyError) -> JSONResponse:
    logger.warning(f"Proxy error {e.status_code}: {e.error} ({e.details})")
    body = ProxyErrorPayload(error=e.error, details=e.details)
    return JSONResponse(status_code=e.status_code, content=body.model_dump())


@router.get("/fetch", response_model=FetchPayload, responses=ERROR_RESPONSES)
async def fetch_page(url: Optional[str] = None, service: ProxyService = Depends(get_proxy_service)):
    """Fetch a page with browser-like headers."""
    try:
        return await service.fetch(url)
    except ProxyError as e:
        return _error_response(e)


@router.get("/dns", response_model=DnsPayload, responses=ERROR_RESPONSES)
async def lookup_dns(
    domain: Optional[str] = None,
    type: str = "A",
    service: ProxyService = Depends(get_proxy_service),
):
    """Resolve A or TXT records for a domain."""
    try:
        return await service.dns(domain, type)
    except ProxyError as e:
        return _error_response(e)


@router.get("/ssl", response_model=SSLPayload, responses=ERROR_RESPONSES)
async def inspect_ssl(url: Optional[str] = None, service: ProxyService = Depends(get_proxy_service)):
    """Inspect the TLS certificate of the URL's host."""
    try:
        return await service.ssl(url)
    except ProxyError as e:
        return _error_response(e)


@router.get("/health")
async def proxy_health():
    return {"status": "ok"}
