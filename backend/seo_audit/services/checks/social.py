"""
Social and analytics checks - tracking tags, Twitter cards, profile links.
"""
from seo_audit.services.checks.base import AuditContext, check
from seo_audit.services.scoring.models import Category, CheckResult, Priority, Status

SOCIAL_PROFILES = (
    ("LinkedIn", "linkedin.com"),
    ("Instagram", "instagram.com"),
    ("YouTube", "youtube.com"),
    ("Pinterest", "pinterest.com"),
)


def _script_sources(ctx: AuditContext) -> list[str]:
    return [(s.get("src") or "").lower() for s in ctx.document.select("script[src]")]


def _inline_scripts(ctx: AuditContext) -> str:
    return "\n".join(s.get_text() for s in ctx.document.select("script:not([src])"))


@check("Google Analytics Test", Category.SOCIAL)
def check_google_analytics(ctx: AuditContext) -> CheckResult:
    sources = _script_sources(ctx)
    inline = _inline_scripts(ctx)

    ga4 = any("googletagmanager.com/gtag/js" in src for src in sources) or "gtag(" in inline or "G-" in inline
    universal = any("google-analytics.com/analytics.js" in src for src in sources) or "UA-" in inline
    found = ga4 or universal
    versions = [name for name, present in (("GA4", ga4), ("Universal Analytics", universal)) if present]

    return CheckResult(
        name="Google Analytics Test",
        status=Status.PASS if found else Status.NEUTRAL,
        priority=Priority.LOW,
        category=Category.SOCIAL,
        description=(
            f"Google Analytics detected ({', '.join(versions)})."
            if found
            else "Google Analytics not detected."
        ),
        details={"versions": versions},
    )


@check("Facebook Pixel Test", Category.SOCIAL)
def check_facebook_pixel(ctx: AuditContext) -> CheckResult:
    found = (
        any("connect.facebook.net" in src for src in _script_sources(ctx))
        or "fbq(" in _inline_scripts(ctx)
    )
    return CheckResult(
        name="Facebook Pixel Test",
        status=Status.PASS if found else Status.NEUTRAL,
        priority=Priority.LOW,
        category=Category.SOCIAL,
        description="Facebook Pixel detected." if found else "Facebook Pixel not detected.",
    )


@check("Google Tag Manager Test", Category.SOCIAL)
def check_tag_manager(ctx: AuditContext) -> CheckResult:
    in_script = any("googletagmanager.com/gtm.js" in src for src in _script_sources(ctx))
    in_noscript = any(
        "googletagmanager.com" in str(tag) for tag in ctx.document.select("noscript")
    )
    found = in_script or in_noscript or "gtm.js" in _inline_scripts(ctx)

    return CheckResult(
        name="Google Tag Manager Test",
        status=Status.PASS if found else Status.NEUTRAL,
        priority=Priority.LOW,
        category=Category.SOCIAL,
        description="Google Tag Manager detected." if found else "Google Tag Manager not detected.",
    )


@check("Twitter Card Tags Test", Category.SOCIAL)
def check_twitter_cards(ctx: AuditContext) -> CheckResult:
    tags = {
        name: ctx.document.exists(f'meta[name="twitter:{name}"]')
        for name in ("card", "title", "image")
    }
    complete = all(tags.values())

    return CheckResult(
        name="Twitter Card Tags Test",
        status=Status.PASS if complete else Status.NEUTRAL,
        priority=Priority.LOW,
        category=Category.SOCIAL,
        description=(
            "Twitter Card tags are properly configured."
            if complete
            else "Twitter Card tags are incomplete or missing."
        ),
        details={f"twitter:{name}": present for name, present in tags.items()},
    )


@check("Social Profile Connectivity", Category.SOCIAL)
def check_social_profiles(ctx: AuditContext) -> list[CheckResult]:
    """One result per social network linked (or not) from the page."""
    hrefs = [(a.get("href") or "").lower() for a in ctx.document.select("a[href]")]
    results = []

    for label, domain in SOCIAL_PROFILES:
        linked = any(domain in href for href in hrefs)
        results.append(CheckResult(
            name=f"{label} Connectivity",
            status=Status.PASS if linked else Status.NEUTRAL,
            priority=Priority.LOW,
            category=Category.SOCIAL,
            description=(
                f"This webpage links to a {label} profile."
                if linked
                else f"No {label} profile link found."
            ),
        ))

    return results
