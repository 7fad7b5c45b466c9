"""
Pydantic schemas for the fetch / DNS / TLS proxy responses.
"""
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field


class FetchStatusPayload(BaseModel):
    """Upstream response status."""
    url: str = Field(..., description="Final URL after redirects")
    http_code: int
    content_type: Optional[str] = None


class FetchPayload(BaseModel):
    """Proxied page fetch."""
    contents: str
    headers: dict[str, str] = {}
    status: FetchStatusPayload


class DnsPayload(BaseModel):
    """DNS lookup result."""
    domain: str
    type: Literal["A", "TXT"]
    records: list[str] = []


class SSLPayload(BaseModel):
    """TLS certificate inspection."""
    authorized: bool
    cert: dict[str, Any] = {}
    protocol: Optional[str] = None
    error: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "authorized": True,
                "cert": {
                    "subject": {"CN": "example.com"},
                    "issuer": {"CN": "R3", "O": "Let's Encrypt"},
                    "valid_from": "Jan  1 00:00:00 2025 GMT",
                    "valid_to": "Apr  1 00:00:00 2025 GMT",
                    "subjectaltname": "DNS:example.com, DNS:www.example.com",
                    "fingerprint256": "AB:CD:...",
                    "signature_algorithm": "sha256",
                },
                "protocol": "TLSv1.3",
                "error": None,
            }
        }


class ProxyErrorPayload(BaseModel):
    """Error body returned with non-2xx proxy responses."""
    error: str
    details: Optional[str] = None
