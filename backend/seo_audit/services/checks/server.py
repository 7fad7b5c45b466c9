"""
Server checks that need the network: TLS certificate, DNS records,
redirect behaviour and well-known files.
"""
import ssl
import time
import uuid
from typing import Optional
from urllib.parse import urlparse

from seo_audit.logger import logger
from seo_audit.services.checks.base import AuditContext, network_check
from seo_audit.services.fetch_client import FetchError, SSLInspection
from seo_audit.services.scoring.models import Category, CheckResult, Priority, Status

CUSTOM_404_MIN_LENGTH = 500
REDIRECT_CODES = (301, 302)
WEAK_SIGNATURE_HASHES = ("md5", "sha1")


def _cert_time(value: Optional[str]) -> Optional[float]:
    """Epoch seconds for an OpenSSL-style timestamp ("Jan  1 00:00:00 2030 GMT")."""
    if not value:
        return None
    try:
        return ssl.cert_time_to_seconds(value)
    except ValueError:
        return None


def certificate_checks(
    inspection: SSLInspection, hostname: str, now: Optional[float] = None
) -> dict[str, Optional[bool]]:
    """Individual certificate assertions shown alongside the TLS result.

    An assertion that cannot be determined from the certificate is None.
    """
    cert = inspection.cert
    now = time.time() if now is None else now
    valid_from = _cert_time(cert.get("valid_from"))
    valid_to = _cert_time(cert.get("valid_to"))
    san = cert.get("subjectaltname") or ""
    algorithm = cert.get("signature_algorithm")

    return {
        "The certificate is not used before the activation date.": valid_from is not None and now >= valid_from,
        "The certificate has not expired.": valid_to is not None and now <= valid_to,
        "The hostname is correctly listed in the certificate.": bool(hostname) and hostname in san,
        "The certificate should be trusted by all major web browsers.": inspection.authorized,
        "The certificate was signed with a secure hash.": (
            algorithm.lower() not in WEAK_SIGNATURE_HASHES if algorithm else None
        ),
    }


@network_check("SSL Checker and HTTPS Test", Category.SECURITY)
async def check_ssl_certificate(ctx: AuditContext) -> CheckResult:
    try:
        inspection = await ctx.require_fetcher().ssl(ctx.url)
        if inspection.error and not inspection.cert:
            raise FetchError(inspection.error)
    except FetchError as e:
        return CheckResult(
            name="SSL Checker and HTTPS Test",
            status=Status.NEUTRAL,
            priority=Priority.LOW,
            category=Category.SECURITY,
            description=(
                f"Unable to perform deep SSL analysis: {e}. "
                "Basic HTTPS check will be used as fallback."
            ),
        )

    cert = inspection.cert
    authorized = inspection.authorized
    subject = cert.get("subject") or {}
    issuer = cert.get("issuer") or {}

    return CheckResult(
        name="SSL Checker and HTTPS Test",
        status=Status.PASS if authorized else Status.WARNING,
        priority=Priority.LOW if authorized else Priority.HIGH,
        category=Category.SECURITY,
        description=(
            "This website is successfully using HTTPS, a secure communication protocol over the Internet."
            if authorized
            else "There are issues with your SSL certificate configuration."
        ),
        recommendation=None if authorized else (
            "Install a certificate from a trusted CA that covers this hostname and serve the full chain."
        ),
        details={
            "checks": certificate_checks(inspection, ctx.hostname),
            "common_name": subject.get("CN"),
            "issuer": issuer.get("CN") or issuer.get("O"),
            "valid_from": cert.get("valid_from"),
            "valid_to": cert.get("valid_to"),
            "subject_alt_names": (cert.get("subjectaltname") or "").replace("DNS:", ""),
            "signature_algorithm": cert.get("signature_algorithm"),
            "protocol": inspection.protocol,
        },
    )


@network_check("IP Canonicalization Test", Category.SECURITY)
async def check_ip_canonicalization(ctx: AuditContext) -> CheckResult:
    """The bare IP address should redirect to the domain."""
    fetcher = ctx.require_fetcher()
    domain = ctx.hostname

    try:
        records = await fetcher.dns(domain, "A")
        if not records:
            return CheckResult(
                name="IP Canonicalization Test",
                status=Status.NEUTRAL,
                priority=Priority.LOW,
                category=Category.SECURITY,
                description="Could not resolve IP address to test canonicalization.",
            )

        ip = records[0]
        response = await fetcher.fetch(f"http://{ip}")
    except FetchError as e:
        logger.info(f"IP canonicalization check failed for {domain}: {e}")
        return CheckResult(
            name="IP Canonicalization Test",
            status=Status.NEUTRAL,
            priority=Priority.LOW,
            category=Category.SECURITY,
            description="Unable to perform IP canonicalization test.",
        )

    canonical = domain in response.status.url or response.status.http_code in REDIRECT_CODES
    return CheckResult(
        name="IP Canonicalization Test",
        status=Status.PASS if canonical else Status.WARNING,
        priority=Priority.LOW,
        category=Category.SECURITY,
        description=(
            f"IP address ({ip}) redirects to {domain}."
            if canonical
            else f"The site's IP address ({ip}) does not appear to redirect to the domain. "
                 "This can cause duplicate content issues."
        ),
        recommendation=None if canonical else f"301-redirect requests for http://{ip} to the canonical domain.",
        details={"ip": ip, "final_url": response.status.url},
    )


@network_check("SPF Record Test", Category.SECURITY)
async def check_spf_record(ctx: AuditContext) -> CheckResult:
    try:
        records = await ctx.require_fetcher().dns(ctx.hostname, "TXT")
    except FetchError as e:
        logger.info(f"SPF lookup failed for {ctx.hostname}: {e}")
        return CheckResult(
            name="SPF Record Test",
            status=Status.NEUTRAL,
            priority=Priority.LOW,
            category=Category.SECURITY,
            description="Could not query DNS for SPF record.",
        )

    spf = next((record for record in records if "v=spf1" in record), None)
    return CheckResult(
        name="SPF Record Test",
        status=Status.PASS if spf else Status.WARNING,
        priority=Priority.LOW,
        category=Category.SECURITY,
        description=(
            "This domain has an SPF record, which helps prevent email spoofing."
            if spf
            else "No SPF record found. SPF helps prevent email spoofing and improves deliverability."
        ),
        recommendation=None if spf else 'Publish a TXT record such as "v=spf1 include:_spf.example.com ~all".',
        details={"record": spf} if spf else {},
    )


@network_check("Ads.txt Validation Test", Category.SECURITY)
async def check_ads_txt(ctx: AuditContext) -> CheckResult:
    try:
        response = await ctx.require_fetcher().fetch(f"{ctx.origin}/ads.txt")
    except FetchError as e:
        logger.info(f"ads.txt fetch failed for {ctx.origin}: {e}")
        return CheckResult(
            name="Ads.txt Validation Test",
            status=Status.NEUTRAL,
            priority=Priority.LOW,
            category=Category.SECURITY,
            description="Could not verify ads.txt.",
        )

    # Not every site sells ads, so a missing file is neutral
    found = response.status.http_code == 200 and "google.com" in response.contents.lower()
    return CheckResult(
        name="Ads.txt Validation Test",
        status=Status.PASS if found else Status.NEUTRAL,
        priority=Priority.LOW,
        category=Category.SECURITY,
        description=(
            "This website has a valid ads.txt file."
            if found
            else "No ads.txt file found. This is only needed if the site displays ads."
        ),
    )


@network_check("Custom 404 Page Test", Category.SECURITY)
async def check_custom_404(ctx: AuditContext) -> CheckResult:
    missing_url = f"{ctx.origin}/this-page-definitely-does-not-exist-{uuid.uuid4().hex}"
    try:
        response = await ctx.require_fetcher().fetch(missing_url)
    except FetchError as e:
        logger.info(f"404 check request failed for {ctx.origin}: {e}")
        return CheckResult(
            name="Custom 404 Page Test",
            status=Status.NEUTRAL,
            priority=Priority.LOW,
            category=Category.SECURITY,
            description="Could not verify 404 behavior.",
        )

    is_404 = response.status.http_code == 404
    return CheckResult(
        name="Custom 404 Page Test",
        status=Status.PASS if is_404 else Status.WARNING,
        priority=Priority.LOW if is_404 else Priority.HIGH,
        category=Category.SECURITY,
        description=(
            "Your server correctly returns a 404 status for missing pages."
            if is_404
            else "Your server does not return a 404 status for missing pages (Soft 404). This hurts SEO."
        ),
        recommendation=None if is_404 else (
            "Return a 404 Not Found status for unknown URLs and serve a helpful custom error page."
        ),
        details={
            "http_code": response.status.http_code,
            "custom_page": len(response.contents) > CUSTOM_404_MIN_LENGTH,
        },
    )


def _alternate_host(hostname: str) -> str:
    if hostname.startswith("www."):
        return hostname[len("www."):]
    return f"www.{hostname}"


@network_check("URL Canonicalization Test", Category.TECHNICAL)
async def check_url_canonicalization(ctx: AuditContext) -> CheckResult:
    """The www / non-www twin of the host must end up on the audited host."""
    scheme = urlparse(ctx.url).scheme
    target_url = f"{scheme}://{_alternate_host(ctx.hostname)}"

    try:
        response = await ctx.require_fetcher().fetch(target_url)
    except FetchError as e:
        logger.info(f"Canonicalization request failed for {target_url}: {e}")
        return CheckResult(
            name="URL Canonicalization Test",
            status=Status.NEUTRAL,
            priority=Priority.LOW,
            category=Category.TECHNICAL,
            description="Unable to verify URL canonicalization (www vs non-www).",
        )

    final_url = response.status.url.rstrip("/")
    canonical = (
        final_url == ctx.url.rstrip("/")
        or urlparse(final_url).hostname == ctx.hostname
    )

    return CheckResult(
        name="URL Canonicalization Test",
        status=Status.PASS if canonical else Status.WARNING,
        priority=Priority.LOW if canonical else Priority.HIGH,
        category=Category.TECHNICAL,
        description=(
            "Both www and non-www versions of your URL redirect to the same place."
            if canonical
            else "Your website does not seem to redirect between www and non-www versions. "
                 "This can cause duplicate content issues."
        ),
        recommendation=None if canonical else (
            "Pick the preferred host and 301-redirect the other (www or non-www) to it."
        ),
        details={"checked_url": target_url, "final_url": response.status.url},
    )
