"""
In-memory fetch collaborator used in place of the proxy.
"""
from typing import Optional, Union

from seo_audit.services.fetch_client import FetchError, FetchResponse, FetchStatus, SSLInspection


def make_page(
    contents: str,
    url: str = "https://example.com/",
    http_code: int = 200,
    headers: Optional[dict] = None,
    content_type: str = "text/html; charset=utf-8",
) -> FetchResponse:
    return FetchResponse(
        contents=contents,
        headers={k.lower(): v for k, v in (headers or {}).items()},
        status=FetchStatus(url=url, http_code=http_code, content_type=content_type),
    )


class StubFetcher:
    """Answers from canned data; unknown URLs raise FetchError."""

    def __init__(
        self,
        pages: Optional[dict[str, Union[FetchResponse, Exception]]] = None,
        dns_records: Optional[dict[tuple[str, str], Union[list[str], Exception]]] = None,
        ssl_result: Optional[Union[SSLInspection, Exception]] = None,
        default: Optional[FetchResponse] = None,
    ):
        self.pages = pages or {}
        self.dns_records = dns_records or {}
        self.ssl_result = ssl_result
        self.default = default
        self.calls: list[tuple] = []

    async def fetch(self, url: str) -> FetchResponse:
        self.calls.append(("fetch", url))
        page = self.pages.get(url, self.default)
        if page is None:
            raise FetchError(f"No stub page for {url}", status_code=404)
        if isinstance(page, Exception):
            raise page
        return page

    async def dns(self, domain: str, record_type: str = "A") -> list[str]:
        self.calls.append(("dns", domain, record_type))
        records = self.dns_records.get((domain, record_type), [])
        if isinstance(records, Exception):
            raise records
        return list(records)

    async def ssl(self, url: str) -> SSLInspection:
        self.calls.append(("ssl", url))
        if self.ssl_result is None:
            raise FetchError("SSL check failed", status_code=500)
        if isinstance(self.ssl_result, Exception):
            raise self.ssl_result
        return self.ssl_result
