"""
Unit tests for the proxy-backed fetch collaborator.
"""
import httpx
import pytest

from seo_audit.services.fetch_client import FetchError, ProxyFetchClient

PROXY = "http://proxy.test/api"


def _client(handler) -> ProxyFetchClient:
    return ProxyFetchClient(base_url=PROXY, timeout=5.0, transport=httpx.MockTransport(handler))


class TestFetch:
    """GET /fetch."""

    @pytest.mark.asyncio
    async def test_decodes_payload(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["url"] = request.url.params["url"]
            return httpx.Response(200, json={
                "contents": "<html></html>",
                "headers": {"Content-Encoding": "gzip"},
                "status": {"url": "https://example.com/", "http_code": 200, "content_type": "text/html"},
            })

        async with _client(handler) as client:
            page = await client.fetch("https://example.com")

        assert seen == {"path": "/api/fetch", "url": "https://example.com"}
        assert page.contents == "<html></html>"
        assert page.headers == {"content-encoding": "gzip"}
        assert page.status.url == "https://example.com/"
        assert page.is_success

    @pytest.mark.asyncio
    async def test_upstream_404_is_data(self):
        def handler(request):
            return httpx.Response(200, json={
                "contents": "missing",
                "headers": {},
                "status": {"url": "https://example.com/nope", "http_code": 404},
            })

        async with _client(handler) as client:
            page = await client.fetch("https://example.com/nope")

        assert page.status.http_code == 404
        assert not page.is_success

    @pytest.mark.asyncio
    async def test_proxy_error_raises(self):
        def handler(request):
            return httpx.Response(502, json={"error": "Upstream error", "details": "HTTP 503"})

        async with _client(handler) as client:
            with pytest.raises(FetchError) as exc:
                await client.fetch("https://example.com")

        assert exc.value.status_code == 502
        assert exc.value.details == "HTTP 503"
        assert str(exc.value) == "Upstream error (HTTP 503)"

    @pytest.mark.asyncio
    async def test_non_json_raises(self):
        def handler(request):
            return httpx.Response(200, text="<html>gateway</html>")

        async with _client(handler) as client:
            with pytest.raises(FetchError):
                await client.fetch("https://example.com")

    @pytest.mark.asyncio
    async def test_transport_failure_raises(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        async with _client(handler) as client:
            with pytest.raises(FetchError, match="Proxy request failed"):
                await client.fetch("https://example.com")

    @pytest.mark.asyncio
    async def test_requires_context_manager(self):
        client = _client(lambda request: httpx.Response(200, json={}))

        with pytest.raises(RuntimeError):
            await client.fetch("https://example.com")


class TestDnsAndSsl:
    """GET /dns and /ssl."""

    @pytest.mark.asyncio
    async def test_dns_records(self):
        def handler(request):
            assert request.url.params["type"] == "TXT"
            return httpx.Response(200, json={"domain": "example.com", "type": "TXT", "records": ["v=spf1 -all"]})

        async with _client(handler) as client:
            records = await client.dns("example.com", "TXT")

        assert records == ["v=spf1 -all"]

    @pytest.mark.asyncio
    async def test_dns_empty(self):
        def handler(request):
            return httpx.Response(200, json={"domain": "example.com", "type": "A", "records": []})

        async with _client(handler) as client:
            assert await client.dns("example.com") == []

    @pytest.mark.asyncio
    async def test_ssl_inspection(self):
        def handler(request):
            return httpx.Response(200, json={
                "authorized": False,
                "cert": {"subject": {"CN": "example.com"}},
                "protocol": "TLSv1.2",
                "error": "certificate has expired",
            })

        async with _client(handler) as client:
            inspection = await client.ssl("https://example.com")

        assert inspection.authorized is False
        assert inspection.cert["subject"]["CN"] == "example.com"
        assert inspection.error == "certificate has expired"

    @pytest.mark.asyncio
    async def test_ssl_timeout(self):
        def handler(request):
            return httpx.Response(408, json={"error": "SSL check timeout"})

        async with _client(handler) as client:
            with pytest.raises(FetchError) as exc:
                await client.ssl("https://example.com")

        assert exc.value.status_code == 408
