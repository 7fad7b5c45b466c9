"""
Pytest configuration and fixtures for the SEO audit engine tests.
"""
import pytest
from fastapi.testclient import TestClient

from fixtures.sample_pages import MINIMAL_PAGE_HTML, PERFECT_PAGE_HTML, SECURE_HEADERS
from fixtures.stubs import StubFetcher, make_page
from seo_audit.main import app as fastapi_app
from seo_audit.services.checks.base import AuditContext


# ============================================================================
# Context Fixtures
# ============================================================================

@pytest.fixture
def make_context():
    """Factory building an AuditContext from raw HTML."""
    def _make(html: str, url: str = "https://example.com/", headers: dict = None, fetcher=None) -> AuditContext:
        return AuditContext.build(url, html, headers or {}, fetcher=fetcher)
    return _make


@pytest.fixture
def perfect_context(make_context) -> AuditContext:
    return make_context(PERFECT_PAGE_HTML, headers=SECURE_HEADERS)


@pytest.fixture
def minimal_context(make_context) -> AuditContext:
    return make_context(MINIMAL_PAGE_HTML)


# ============================================================================
# Collaborator Fixtures
# ============================================================================

@pytest.fixture
def stub_fetcher() -> StubFetcher:
    """Collaborator that knows nothing; every lookup fails or comes back empty."""
    return StubFetcher()


@pytest.fixture
def minimal_site_fetcher() -> StubFetcher:
    """Collaborator serving the minimal page at https://example.com/."""
    return StubFetcher(pages={"https://example.com/": make_page(MINIMAL_PAGE_HTML)})


# ============================================================================
# API Fixtures
# ============================================================================

@pytest.fixture
def app():
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)
