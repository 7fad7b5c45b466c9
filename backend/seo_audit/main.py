"""
SEO Audit Engine - FastAPI Application Entry Point
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from seo_audit.config import settings
from seo_audit.api.v1.endpoints import audit, health, proxy
from seo_audit.logger import logger

# Create app
app = FastAPI(
    title=settings.APP_NAME,
    description="On-page SEO audit with weighted scoring, plus the fetch/DNS/TLS proxy it relies on",
    version=settings.VERSION,
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router, prefix="/api/v1")
app.include_router(audit.router, prefix="/api/v1/audit")
app.include_router(proxy.router, prefix="/api")

logger.info(f"{settings.APP_NAME} {settings.VERSION} initialized (proxy: {settings.PROXY_BASE_URL})")


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "app": settings.APP_NAME,
        "version": settings.VERSION,
        "docs": "/docs"
    }
