"""
Application configuration using environment variables.
"""
import os
from dataclasses import dataclass, field
from typing import List
from dotenv import load_dotenv

# Load .env file
load_dotenv()

@dataclass
class Settings:
    """Application settings."""
    APP_NAME: str = os.getenv("APP_NAME", "SEO Audit Engine")
    VERSION: str = "1.0.0"

    # Fetch collaborator (proxy) used by the audit engine
    PROXY_BASE_URL: str = os.getenv("PROXY_BASE_URL", "http://localhost:8000/api")

    # HTTP client settings
    HTTP_TIMEOUT: int = int(os.getenv("HTTP_TIMEOUT", "15"))
    HTTP_MAX_REDIRECTS: int = int(os.getenv("HTTP_MAX_REDIRECTS", "5"))

    # Proxy upstream settings
    FETCH_TIMEOUT: int = int(os.getenv("FETCH_TIMEOUT", "10"))
    SSL_TIMEOUT: int = int(os.getenv("SSL_TIMEOUT", "5"))

    # Network checks
    NETWORK_CHECK_TIMEOUT: float = float(os.getenv("NETWORK_CHECK_TIMEOUT", "10"))
    NETWORK_CHECK_CONCURRENCY: int = int(os.getenv("NETWORK_CHECK_CONCURRENCY", "6"))

    # CORS
    CORS_ORIGINS: List[str] = field(default_factory=lambda: [
        origin.strip()
        for origin in os.getenv("CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173").split(",")
        if origin.strip()
    ])

settings = Settings()
