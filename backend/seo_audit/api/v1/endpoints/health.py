"""
Health check endpoint.
"""

from fastapi import APIRouter

from seo_audit.config import settings

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check():
    """Basic health check."""
    return {"status": "ok", "version": settings.VERSION}
