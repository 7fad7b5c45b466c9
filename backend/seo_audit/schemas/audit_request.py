"""
Pydantic schemas for audit requests.
"""

from pydantic import BaseModel, Field


class AuditRequest(BaseModel):
    """Request to run an SEO audit."""
    url: str = Field(..., description="Absolute http(s) URL to audit")

    class Config:
        json_schema_extra = {
            "example": {
                "url": "https://example.com"
            }
        }
