"""
Fetch Collaborator client - HTTP access to the fetch / DNS / TLS proxy.

The audit engine never talks to target sites directly; every page fetch,
DNS lookup and certificate inspection goes through the proxy endpoints:

- GET {base}/fetch?url=...        -> {contents, headers, status}
- GET {base}/dns?domain=&type=... -> {domain, type, records}
- GET {base}/ssl?url=...          -> {authorized, cert, protocol, error}
"""
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol

import httpx

from seo_audit.config import settings
from seo_audit.logger import logger


class FetchError(Exception):
    """A fetch through the collaborator failed (transport, proxy or upstream)."""

    def __init__(self, message: str, status_code: Optional[int] = None, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} ({self.details})"
        return self.message


@dataclass(frozen=True)
class FetchStatus:
    """Upstream response status as reported by the proxy."""
    url: str
    http_code: Optional[int] = None
    content_type: Optional[str] = None


@dataclass(frozen=True)
class FetchResponse:
    """Fetched page data container."""
    contents: str
    headers: dict[str, str] = field(default_factory=dict)
    status: FetchStatus = field(default_factory=lambda: FetchStatus(url=""))

    @property
    def is_success(self) -> bool:
        code = self.status.http_code
        return code is not None and 200 <= code < 300


@dataclass(frozen=True)
class SSLInspection:
    """TLS certificate inspection result."""
    authorized: bool
    cert: dict[str, Any] = field(default_factory=dict)
    protocol: Optional[str] = None
    error: Optional[str] = None


class FetchCollaborator(Protocol):
    """Network interface consumed by the audit engine and its network checks."""

    async def fetch(self, url: str) -> FetchResponse: ...

    async def dns(self, domain: str, record_type: str = "A") -> list[str]: ...

    async def ssl(self, url: str) -> SSLInspection: ...


class ProxyFetchClient:
    """FetchCollaborator backed by the HTTP proxy service.

    Use as an async context manager so the underlying connection pool is
    closed when the audit run ends.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.PROXY_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.HTTP_TIMEOUT
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "ProxyFetchClient":
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _get_json(self, path: str, params: dict[str, str]) -> dict[str, Any]:
        """GET a proxy endpoint and decode its JSON body."""
        if self._client is None:
            raise RuntimeError("ProxyFetchClient used outside of 'async with'")

        try:
            response = await self._client.get(path, params=params)
        except httpx.TimeoutException as e:
            raise FetchError(f"Proxy request timed out: {path}") from e
        except httpx.HTTPError as e:
            raise FetchError(f"Proxy request failed: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise FetchError(
                f"Proxy returned non-JSON response for {path}",
                status_code=response.status_code,
            ) from e

        if response.status_code >= 400:
            message = data.get("error") if isinstance(data, dict) else None
            details = data.get("details") if isinstance(data, dict) else None
            raise FetchError(
                message or f"Proxy responded with {response.status_code}",
                status_code=response.status_code,
                details=details,
            )

        if not isinstance(data, dict):
            raise FetchError(f"Unexpected proxy payload for {path}", status_code=response.status_code)
        return data

    async def fetch(self, url: str) -> FetchResponse:
        """Fetch a page. Non-2xx upstream statuses below 500 come back as data."""
        data = await self._get_json("/fetch", {"url": url})
        status = data.get("status") or {}
        headers = {str(k).lower(): str(v) for k, v in (data.get("headers") or {}).items()}

        logger.debug(f"Fetched {url} via proxy (http_code={status.get('http_code')})")
        return FetchResponse(
            contents=data.get("contents") or "",
            headers=headers,
            status=FetchStatus(
                url=status.get("url") or url,
                http_code=status.get("http_code"),
                content_type=status.get("content_type"),
            ),
        )

    async def dns(self, domain: str, record_type: str = "A") -> list[str]:
        """DNS records of the given type; [] when the domain has none."""
        data = await self._get_json("/dns", {"domain": domain, "type": record_type})
        return [str(r) for r in data.get("records") or []]

    async def ssl(self, url: str) -> SSLInspection:
        """Certificate details for the host of ``url``."""
        data = await self._get_json("/ssl", {"url": url})
        return SSLInspection(
            authorized=bool(data.get("authorized")),
            cert=data.get("cert") or {},
            protocol=data.get("protocol"),
            error=data.get("error"),
        )
