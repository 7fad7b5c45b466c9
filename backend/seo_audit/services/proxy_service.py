"""
Proxy Service - server side of the fetch collaborator.

Fetches pages with browser-like headers, resolves DNS records with
dnspython and inspects TLS certificates with the stdlib ``ssl`` module,
decoding them with ``cryptography``.
Failures are raised as ProxyError carrying the HTTP status the API layer
should answer with.
"""
import asyncio
import socket
import ssl
from datetime import datetime
from typing import Any, Optional
from urllib.parse import urlparse

import dns.asyncresolver
import dns.exception
import dns.resolver
import httpx
from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes

from seo_audit.config import settings
from seo_audit.logger import logger
from seo_audit.schemas.proxy import DnsPayload, FetchPayload, FetchStatusPayload, SSLPayload
from seo_audit.services.fetch_client import FetchError, FetchResponse, FetchStatus, SSLInspection
from seo_audit.services.ssrf_protection import HostNotFound, SSRFBlocked, SSRFProtection

BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
    "Accept-Encoding": "gzip, deflate",
}

SUPPORTED_RECORD_TYPES = ("A", "TXT")
TLS_PORT = 443


class ProxyError(Exception):
    """Proxy request failed; ``status_code`` is the HTTP status to return."""

    def __init__(self, status_code: int, error: str, details: Optional[str] = None):
        super().__init__(error)
        self.status_code = status_code
        self.error = error
        self.details = details


def _require_http_url(url: Optional[str]) -> str:
    if not url:
        raise ProxyError(400, "URL is required")
    if not url.lower().startswith(("http://", "https://")):
        raise ProxyError(400, "Invalid URL", "URL must start with http:// or https://")
    return url


# --- TLS inspection (blocking, run in a worker thread) ---

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def _cert_time(moment: datetime) -> str:
    """OpenSSL text form, e.g. 'Jan  1 00:00:00 2025 GMT'."""
    return f"{_MONTHS[moment.month - 1]} {moment.day:2d} {moment:%H:%M:%S} {moment.year} GMT"


def _name_dict(name: x509.Name) -> dict[str, str]:
    return {attribute.rfc4514_attribute_name: attribute.value for attribute in name}


def _alt_names(cert: x509.Certificate) -> str:
    try:
        san = cert.extensions.get_extension_for_class(x509.SubjectAlternativeName).value
    except x509.ExtensionNotFound:
        return ""
    entries = [f"DNS:{name}" for name in san.get_values_for_type(x509.DNSName)]
    entries += [f"IP Address:{address}" for address in san.get_values_for_type(x509.IPAddress)]
    return ", ".join(entries)


def _signature_algorithm(cert: x509.Certificate) -> Optional[str]:
    try:
        algorithm = cert.signature_hash_algorithm
    except UnsupportedAlgorithm:
        return None
    return algorithm.name if algorithm is not None else None


def describe_certificate(der: bytes) -> dict[str, Any]:
    """Decode a DER certificate into the proxy's cert payload."""
    cert = x509.load_der_x509_certificate(der)
    return {
        "subject": _name_dict(cert.subject),
        "issuer": _name_dict(cert.issuer),
        "valid_from": _cert_time(cert.not_valid_before_utc),
        "valid_to": _cert_time(cert.not_valid_after_utc),
        "subjectaltname": _alt_names(cert),
        "serialNumber": format(cert.serial_number, "X"),
        "fingerprint256": cert.fingerprint(hashes.SHA256()).hex(":").upper(),
        "signature_algorithm": _signature_algorithm(cert),
    }


def inspect_certificate(hostname: str, port: int = TLS_PORT, timeout: float = 5.0) -> SSLPayload:
    """Handshake with ``hostname`` and report the certificate.

    A verifying handshake runs first. If verification fails, a second,
    unverified handshake still decodes and reports the certificate.
    """
    context = ssl.create_default_context()
    try:
        with socket.create_connection((hostname, port), timeout=timeout) as sock:
            with context.wrap_socket(sock, server_hostname=hostname) as tls:
                return SSLPayload(
                    authorized=True,
                    cert=describe_certificate(tls.getpeercert(binary_form=True)),
                    protocol=tls.version(),
                )
    except ssl.SSLCertVerificationError as e:
        reason = getattr(e, "verify_message", None) or str(e)

    insecure = ssl.create_default_context()
    insecure.check_hostname = False
    insecure.verify_mode = ssl.CERT_NONE
    with socket.create_connection((hostname, port), timeout=timeout) as sock:
        with insecure.wrap_socket(sock, server_hostname=hostname) as tls:
            der = tls.getpeercert(binary_form=True)
            return SSLPayload(
                authorized=False,
                cert=describe_certificate(der) if der else {},
                protocol=tls.version(),
                error=reason,
            )


class ProxyService:
    """Fetch, DNS and TLS lookups on behalf of the audit engine."""

    def __init__(
        self,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        resolver: Optional[dns.asyncresolver.Resolver] = None,
        validate_targets: bool = True,
    ):
        self._transport = transport
        self._resolver = resolver
        self.validate_targets = validate_targets

    async def _guard(self, url: str) -> None:
        """SSRF check; resolving the host runs in a worker thread."""
        if not self.validate_targets:
            return
        try:
            await asyncio.to_thread(SSRFProtection.validate_url, url)
        except SSRFBlocked as e:
            raise ProxyError(400, "Blocked URL", str(e)) from e
        except HostNotFound as e:
            raise ProxyError(404, "Domain not found", str(e)) from e

    async def _guard_request(self, request: httpx.Request) -> None:
        # Runs for the initial request and for every redirect hop
        await self._guard(str(request.url))

    async def fetch(self, url: Optional[str]) -> FetchPayload:
        """Fetch ``url``; upstream statuses below 500 come back as data."""
        url = _require_http_url(url)
        hooks = {"request": [self._guard_request]} if self.validate_targets else {}

        try:
            async with httpx.AsyncClient(
                timeout=settings.FETCH_TIMEOUT,
                follow_redirects=True,
                max_redirects=settings.HTTP_MAX_REDIRECTS,
                headers=BROWSER_HEADERS,
                transport=self._transport,
                event_hooks=hooks,
            ) as client:
                response = await client.get(url)
        except ProxyError:
            raise
        except httpx.TimeoutException as e:
            raise ProxyError(408, "Request timeout", str(e)) from e
        except httpx.TooManyRedirects as e:
            raise ProxyError(500, "Failed to fetch URL", "Too many redirects") from e
        except httpx.HTTPError as e:
            raise ProxyError(500, "Failed to fetch URL", str(e)) from e

        logger.info(f"Proxy fetch {url} -> {response.status_code} ({response.url})")

        if response.status_code >= 500:
            raise ProxyError(
                response.status_code,
                "Failed to fetch URL",
                f"Upstream server responded with {response.status_code}",
            )

        return FetchPayload(
            contents=response.text,
            headers={k.lower(): v for k, v in response.headers.items()},
            status=FetchStatusPayload(
                url=str(response.url),
                http_code=response.status_code,
                content_type=response.headers.get("content-type"),
            ),
        )

    async def dns(self, domain: Optional[str], record_type: Optional[str] = "A") -> DnsPayload:
        """A or TXT records; a missing name or record set yields []."""
        if not domain:
            raise ProxyError(400, "Domain is required")
        record_type = (record_type or "A").upper()
        if record_type not in SUPPORTED_RECORD_TYPES:
            raise ProxyError(400, "Invalid record type", "Only A and TXT are supported")

        try:
            resolver = self._resolver or dns.asyncresolver.Resolver()
            answer = await resolver.resolve(domain, record_type)
        except (dns.resolver.NXDOMAIN, dns.resolver.NoAnswer):
            return DnsPayload(domain=domain, type=record_type, records=[])
        except dns.exception.DNSException as e:
            raise ProxyError(500, "DNS lookup failed", str(e)) from e

        if record_type == "A":
            records = [rdata.address for rdata in answer]
        else:
            # Long TXT records arrive as several character-strings
            records = [b"".join(rdata.strings).decode("utf-8", errors="replace") for rdata in answer]

        logger.info(f"Proxy DNS {record_type} {domain} -> {len(records)} records")
        return DnsPayload(domain=domain, type=record_type, records=records)

    async def ssl(self, url: Optional[str]) -> SSLPayload:
        """Inspect the TLS certificate served on port 443 of the URL's host."""
        url = _require_http_url(url)
        await self._guard(url)
        hostname = urlparse(url).hostname

        try:
            payload = await asyncio.to_thread(inspect_certificate, hostname, TLS_PORT, settings.SSL_TIMEOUT)
        except (TimeoutError, socket.timeout) as e:
            raise ProxyError(408, "Connection timeout", str(e)) from e
        except (ssl.SSLError, OSError) as e:
            raise ProxyError(500, "SSL check failed", str(e)) from e

        logger.info(f"Proxy SSL {hostname} -> authorized={payload.authorized}")
        return payload


class InProcessFetchClient:
    """FetchCollaborator that calls ProxyService directly, without an HTTP hop."""

    def __init__(self, service: Optional[ProxyService] = None):
        self.service = service or ProxyService()

    async def __aenter__(self) -> "InProcessFetchClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        return None

    @staticmethod
    def _translate(e: ProxyError) -> FetchError:
        return FetchError(e.error, status_code=e.status_code, details=e.details)

    async def fetch(self, url: str) -> FetchResponse:
        try:
            payload = await self.service.fetch(url)
        except ProxyError as e:
            raise self._translate(e) from e
        return FetchResponse(
            contents=payload.contents,
            headers=dict(payload.headers),
            status=FetchStatus(
                url=payload.status.url,
                http_code=payload.status.http_code,
                content_type=payload.status.content_type,
            ),
        )

    async def dns(self, domain: str, record_type: str = "A") -> list[str]:
        try:
            payload = await self.service.dns(domain, record_type)
        except ProxyError as e:
            raise self._translate(e) from e
        return list(payload.records)

    async def ssl(self, url: str) -> SSLInspection:
        try:
            payload = await self.service.ssl(url)
        except ProxyError as e:
            raise self._translate(e) from e
        return SSLInspection(
            authorized=payload.authorized,
            cert=dict(payload.cert),
            protocol=payload.protocol,
            error=payload.error,
        )
