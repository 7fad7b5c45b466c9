"""
Security checks over the page URL, markup and response headers.
"""
import re
from typing import Optional

from seo_audit.services.checks.base import AuditContext, check
from seo_audit.services.scoring.models import Category, CheckResult, Priority, Status

DEPRECATED_TAGS = ("center", "font", "marquee", "blink", "strike")
EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
MAX_REPORTED_URLS = 10


@check("HTTPS/SSL Test", Category.SECURITY)
def check_https(ctx: AuditContext) -> CheckResult:
    secure = ctx.is_https
    return CheckResult(
        name="HTTPS/SSL Test",
        status=Status.PASS if secure else Status.WARNING,
        priority=Priority.LOW if secure else Priority.HIGH,
        category=Category.SECURITY,
        description=(
            "This website is using HTTPS, which is secure."
            if secure
            else "This website is not using HTTPS. This is a security risk."
        ),
        recommendation=None if secure else "Serve the site over HTTPS and redirect all HTTP traffic to it.",
    )


@check("Mixed Content Test", Category.SECURITY)
def check_mixed_content(ctx: AuditContext) -> Optional[CheckResult]:
    """Plain-HTTP resources on an HTTPS page. Not applicable to HTTP pages."""
    if not ctx.is_https:
        return None

    insecure = []
    for element in ctx.document.select("[src], [href]"):
        value = element.get("src") or element.get("href") or ""
        if isinstance(value, list):
            value = " ".join(value)
        if value.lower().startswith("http://"):
            insecure.append(value)

    clean = not insecure
    return CheckResult(
        name="Mixed Content Test",
        status=Status.PASS if clean else Status.WARNING,
        priority=Priority.LOW if clean else Priority.HIGH,
        category=Category.SECURITY,
        description=(
            "No mixed content found."
            if clean
            else f"Found {len(insecure)} insecure resources (HTTP) on an HTTPS page."
        ),
        recommendation=None if clean else "Load every resource over https:// or with a protocol-relative URL.",
        details={"count": len(insecure), "urls": insecure[:MAX_REPORTED_URLS]},
    )


@check("Deprecated HTML Test", Category.SECURITY)
def check_deprecated_html(ctx: AuditContext) -> CheckResult:
    found = {tag: ctx.document.count(tag) for tag in DEPRECATED_TAGS}
    total = sum(found.values())

    return CheckResult(
        name="Deprecated HTML Test",
        status=Status.PASS if total == 0 else Status.WARNING,
        priority=Priority.MEDIUM,
        category=Category.SECURITY,
        description=(
            "No deprecated HTML tags found."
            if total == 0
            else f"Found {total} deprecated HTML tags."
        ),
        details={tag: n for tag, n in found.items() if n},
    )


@check("Plaintext Email Test", Category.SECURITY)
def check_plaintext_emails(ctx: AuditContext) -> CheckResult:
    emails = EMAIL_PATTERN.findall(ctx.document.text_content())
    return CheckResult(
        name="Plaintext Email Test",
        status=Status.PASS if not emails else Status.NEUTRAL,
        priority=Priority.LOW,
        category=Category.SECURITY,
        description=(
            "No plaintext emails found in the page content."
            if not emails
            else f"Found {len(emails)} plaintext email addresses. These may be scraped by spammers."
        ),
        details={"count": len(emails)},
    )


@check("Server Signature Test", Category.SECURITY)
def check_server_signature(ctx: AuditContext) -> CheckResult:
    server = ctx.headers.get("server", "")
    # A version number in the banner leaks the exact server build
    exposed = any(ch.isdigit() for ch in server)

    return CheckResult(
        name="Server Signature Test",
        status=Status.WARNING if exposed else Status.PASS,
        priority=Priority.MEDIUM,
        category=Category.SECURITY,
        description=(
            f'Server signature is exposing version info: "{server}".'
            if exposed
            else "Server signature is hidden or does not expose version info."
        ),
        recommendation="Strip version numbers from the Server response header." if exposed else None,
    )


@check("HSTS Test", Category.SECURITY)
def check_hsts(ctx: AuditContext) -> CheckResult:
    value = ctx.headers.get("strict-transport-security")
    return CheckResult(
        name="HSTS Test",
        status=Status.PASS if value else Status.WARNING,
        priority=Priority.MEDIUM,
        category=Category.SECURITY,
        description=(
            "Strict-Transport-Security header is present."
            if value
            else "Strict-Transport-Security header is missing."
        ),
        details={"strict-transport-security": value} if value else {},
    )


@check("X-Content-Type-Options Test", Category.SECURITY)
def check_content_type_options(ctx: AuditContext) -> CheckResult:
    ok = ctx.headers.get("x-content-type-options", "").lower() == "nosniff"
    return CheckResult(
        name="X-Content-Type-Options Test",
        status=Status.PASS if ok else Status.WARNING,
        priority=Priority.LOW,
        category=Category.SECURITY,
        description=(
            "X-Content-Type-Options is set to nosniff."
            if ok
            else "X-Content-Type-Options header is missing or incorrect."
        ),
    )


@check("X-Frame-Options Test", Category.SECURITY)
def check_frame_options(ctx: AuditContext) -> CheckResult:
    value = ctx.headers.get("x-frame-options", "").upper()
    ok = "DENY" in value or "SAMEORIGIN" in value
    return CheckResult(
        name="X-Frame-Options Test",
        status=Status.PASS if ok else Status.WARNING,
        priority=Priority.LOW,
        category=Category.SECURITY,
        description=(
            "X-Frame-Options is correctly configured."
            if ok
            else "X-Frame-Options header is missing. This can make you vulnerable to clickjacking."
        ),
    )
