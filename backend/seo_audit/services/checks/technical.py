"""
Technical SEO checks - document setup, structure, URL shape and links.
"""
import json
import re
from typing import Optional
from urllib.parse import urlparse

from seo_audit.services.checks.base import AuditContext, check
from seo_audit.services.scoring.models import Category, CheckResult, Priority, Status

MIN_TEXT_RATIO_PERCENT = 10
MAX_URL_LENGTH = 100
MIN_READABLE_TEXT = 100
MIN_TOUCH_FONT_PX = 16

BROKEN_HREFS = ("", "#", "javascript:void(0)")
TOUCH_ELEMENTS = 'button, a, input[type="button"], input[type="submit"]'
FONT_SIZE_PATTERN = re.compile(r"font-size\s*:\s*([\d.]+)px", re.IGNORECASE)

JS_LIBRARIES = {
    "jQuery": ("jquery",),
    "React": ("react",),
    "Vue": ("vue",),
    "Angular": ("angular",),
    "Lodash": ("lodash",),
}
CSS_FRAMEWORKS = {
    "Bootstrap": ("bootstrap",),
    "Tailwind CSS": ("tailwind",),
    "Foundation": ("foundation",),
    "Bulma": ("bulma",),
}


def _pass_or(ok: bool, fallback: Status) -> Status:
    return Status.PASS if ok else fallback


# --- Document setup ---

@check("Viewport Meta Tag Test", Category.TECHNICAL)
def check_viewport(ctx: AuditContext) -> CheckResult:
    ok = ctx.document.exists('meta[name="viewport"]')
    return CheckResult(
        name="Viewport Meta Tag Test",
        status=_pass_or(ok, Status.WARNING),
        priority=Priority.LOW if ok else Priority.HIGH,
        category=Category.TECHNICAL,
        description=(
            "This webpage has a viewport meta tag, which is good for mobile devices."
            if ok
            else "No viewport meta tag found. This is important for mobile responsiveness."
        ),
        recommendation=None if ok else (
            'Add <meta name="viewport" content="width=device-width, initial-scale=1"> to the <head>.'
        ),
    )


@check("Language Declaration Test", Category.TECHNICAL)
def check_language(ctx: AuditContext) -> CheckResult:
    lang = ctx.document.html_lang
    return CheckResult(
        name="Language Declaration Test",
        status=_pass_or(bool(lang), Status.NEUTRAL),
        priority=Priority.LOW,
        category=Category.TECHNICAL,
        description=(
            f'This webpage declares its language as "{lang}".'
            if lang
            else "No language declaration found in the HTML tag."
        ),
    )


@check("Favicon Test", Category.TECHNICAL)
def check_favicon(ctx: AuditContext) -> CheckResult:
    ok = ctx.document.exists('link[rel~="icon"]')
    return CheckResult(
        name="Favicon Test",
        status=_pass_or(ok, Status.NEUTRAL),
        priority=Priority.LOW,
        category=Category.TECHNICAL,
        description="This webpage has a favicon." if ok else "No favicon found.",
    )


@check("Canonical URL Test", Category.TECHNICAL)
def check_canonical(ctx: AuditContext) -> CheckResult:
    href = ctx.document.attr('link[rel~="canonical"]', "href")
    return CheckResult(
        name="Canonical URL Test",
        status=_pass_or(bool(href), Status.NEUTRAL),
        priority=Priority.LOW,
        category=Category.TECHNICAL,
        description=(
            "This webpage has a canonical URL defined."
            if href
            else "No canonical URL found. Consider adding one to prevent duplicate content issues."
        ),
        details={"href": href} if href else {},
    )


@check("Robots Meta Tag Test", Category.TECHNICAL)
def check_robots_meta(ctx: AuditContext) -> CheckResult:
    content = ctx.document.attr('meta[name="robots"]', "content")
    return CheckResult(
        name="Robots Meta Tag Test",
        status=Status.NEUTRAL,
        priority=Priority.LOW,
        category=Category.TECHNICAL,
        description=(
            f"Robots meta tag: {content}"
            if content is not None
            else "No robots meta tag found. Default crawling behavior applies."
        ),
    )


@check("Charset Declaration Test", Category.TECHNICAL)
def check_charset(ctx: AuditContext) -> CheckResult:
    ok = ctx.document.exists('meta[charset], meta[http-equiv="Content-Type" i]')
    return CheckResult(
        name="Charset Declaration Test",
        status=_pass_or(ok, Status.WARNING),
        priority=Priority.HIGH,
        category=Category.TECHNICAL,
        description=(
            "Character set declaration found."
            if ok
            else "No character set declaration found. This can cause rendering issues."
        ),
        recommendation=None if ok else 'Declare <meta charset="utf-8"> as the first element of <head>.',
    )


@check("Doctype Test", Category.TECHNICAL)
def check_doctype(ctx: AuditContext) -> CheckResult:
    ok = ctx.document.doctype == "html"
    return CheckResult(
        name="Doctype Test",
        status=_pass_or(ok, Status.WARNING),
        priority=Priority.MEDIUM,
        category=Category.TECHNICAL,
        description=(
            "HTML5 Doctype found."
            if ok
            else "Doctype is missing or not HTML5."
        ),
        recommendation=None if ok else "Start the document with <!DOCTYPE html>.",
    )


# --- Structure ---

@check("Nested Tables Test", Category.TECHNICAL)
def check_nested_tables(ctx: AuditContext) -> CheckResult:
    nested = ctx.document.count("table table")
    return CheckResult(
        name="Nested Tables Test",
        status=_pass_or(nested == 0, Status.WARNING),
        priority=Priority.MEDIUM,
        category=Category.TECHNICAL,
        description=(
            "No nested tables found."
            if nested == 0
            else f"Found {nested} nested tables. This is bad for performance and layout."
        ),
    )


@check("Frameset Test", Category.TECHNICAL)
def check_frames(ctx: AuditContext) -> CheckResult:
    found = ctx.document.exists("frameset, frame")
    return CheckResult(
        name="Frameset Test",
        status=Status.WARNING if found else Status.PASS,
        priority=Priority.HIGH,
        category=Category.TECHNICAL,
        description=(
            "Frames detected. Frames are obsolete and bad for SEO."
            if found
            else "No frames detected."
        ),
        recommendation="Replace frames with regular pages or iframes." if found else None,
    )


@check("Text/HTML Ratio Test", Category.TECHNICAL)
def check_text_ratio(ctx: AuditContext) -> CheckResult:
    html_length = ctx.document.inner_html_length
    text_length = len(ctx.document.text_content())
    ratio = text_length / html_length * 100 if html_length else 0.0
    ok = ratio > MIN_TEXT_RATIO_PERCENT

    return CheckResult(
        name="Text/HTML Ratio Test",
        status=_pass_or(ok, Status.NEUTRAL),
        priority=Priority.LOW,
        category=Category.TECHNICAL,
        description=f"Text to HTML ratio is {ratio:.2f}%.",
        details={"ratio": round(ratio, 2)},
    )


@check("URL Length Test", Category.TECHNICAL)
def check_url_length(ctx: AuditContext) -> CheckResult:
    length = len(ctx.url)
    ok = length < MAX_URL_LENGTH
    return CheckResult(
        name="URL Length Test",
        status=_pass_or(ok, Status.WARNING),
        priority=Priority.LOW,
        category=Category.TECHNICAL,
        description=(
            "URL length is optimal."
            if ok
            else f"URL is too long ({length} characters)."
        ),
        details={"length": length},
    )


@check("URL Underscores Test", Category.TECHNICAL)
def check_url_underscores(ctx: AuditContext) -> CheckResult:
    found = "_" in ctx.url
    return CheckResult(
        name="URL Underscores Test",
        status=Status.WARNING if found else Status.PASS,
        priority=Priority.MEDIUM,
        category=Category.TECHNICAL,
        description=(
            "URL contains underscores. Hyphens are preferred for SEO."
            if found
            else "URL does not contain underscores."
        ),
        recommendation="Use hyphens instead of underscores to separate words in URLs." if found else None,
    )


@check("Breadcrumb Test", Category.TECHNICAL)
def check_breadcrumbs(ctx: AuditContext) -> CheckResult:
    in_schema = any(
        "BreadcrumbList" in script.get_text()
        for script in ctx.document.select('script[type="application/ld+json"]')
    )
    in_markup = ctx.document.exists('nav[aria-label="breadcrumb" i], .breadcrumb')
    found = in_schema or in_markup

    return CheckResult(
        name="Breadcrumb Test",
        status=_pass_or(found, Status.NEUTRAL),
        priority=Priority.LOW,
        category=Category.TECHNICAL,
        description=(
            "Breadcrumbs detected."
            if found
            else "No breadcrumbs detected. Breadcrumbs help with navigation and SEO."
        ),
    )


def _detect(ctx: AuditContext, signatures: dict[str, tuple[str, ...]], selector: str, attribute: str) -> list[str]:
    urls = " ".join((el.get(attribute) or "").lower() for el in ctx.document.select(selector))
    return [name for name, keywords in signatures.items() if any(k in urls for k in keywords)]


@check("JS Libraries Test", Category.TECHNICAL)
def check_js_libraries(ctx: AuditContext) -> CheckResult:
    found = _detect(ctx, JS_LIBRARIES, "script[src]", "src")
    return CheckResult(
        name="JS Libraries Test",
        status=Status.PASS,
        priority=Priority.LOW,
        category=Category.TECHNICAL,
        description=(
            f"Detected JavaScript libraries: {', '.join(found)}."
            if found
            else "No common JavaScript libraries detected."
        ),
        details={"libraries": found},
    )


@check("CSS Frameworks Test", Category.TECHNICAL)
def check_css_frameworks(ctx: AuditContext) -> CheckResult:
    found = _detect(ctx, CSS_FRAMEWORKS, 'link[rel~="stylesheet"]', "href")
    return CheckResult(
        name="CSS Frameworks Test",
        status=Status.PASS,
        priority=Priority.LOW,
        category=Category.TECHNICAL,
        description=(
            f"Detected CSS frameworks: {', '.join(found)}."
            if found
            else "No common CSS frameworks detected."
        ),
        details={"frameworks": found},
    )


# --- Structured data ---

def _schema_type(data) -> str:
    if isinstance(data, list):
        return ", ".join(_schema_type(item) for item in data) or "Unknown"
    if not isinstance(data, dict):
        return "Unknown"
    if data.get("@type"):
        value = data["@type"]
        return ", ".join(value) if isinstance(value, list) else str(value)
    if "@graph" in data:
        return "Multiple types (Graph)"
    return "Unknown"


@check("Structured Data (Schema.org) Test", Category.TECHNICAL)
def check_json_ld(ctx: AuditContext) -> CheckResult:
    """Every JSON-LD block must parse; its @type is reported."""
    scripts = ctx.document.select('script[type="application/ld+json"]')
    types: list[str] = []
    invalid = 0

    for script in scripts:
        try:
            types.append(_schema_type(json.loads(script.get_text())))
        except ValueError:
            invalid += 1

    count = len(scripts)
    if count == 0:
        status = Status.NEUTRAL
        description = "No Schema.org structured data (JSON-LD) found."
    elif invalid:
        status = Status.WARNING
        description = f"Found {count} JSON-LD blocks, {invalid} of them with invalid JSON."
    else:
        status = Status.PASS
        description = f"Found {count} Schema.org structured data blocks."

    return CheckResult(
        name="Structured Data (Schema.org) Test",
        status=status,
        priority=Priority.MEDIUM if count == 0 else Priority.LOW,
        category=Category.TECHNICAL,
        description=description,
        recommendation=None if status == Status.PASS else (
            'Add valid JSON-LD in a <script type="application/ld+json"> block (Organization, WebSite, Article, ...).'
        ),
        details={"count": count, "types": types, "invalid": invalid},
    )


@check("Microdata Schema Test", Category.TECHNICAL)
def check_microdata(ctx: AuditContext) -> CheckResult:
    count = ctx.document.count("[itemscope]")
    return CheckResult(
        name="Microdata Schema Test",
        status=_pass_or(count > 0, Status.NEUTRAL),
        priority=Priority.LOW,
        category=Category.TECHNICAL,
        description=(
            f"Found {count} microdata items."
            if count
            else "No microdata schema found."
        ),
        details={"count": count},
    )


# --- Mobile ---

@check("Mobile-Friendly Test", Category.TECHNICAL)
def check_mobile_friendly(ctx: AuditContext) -> CheckResult:
    content = (ctx.document.attr('meta[name="viewport"]', "content") or "").replace(" ", "")
    ok = "width=device-width" in content and "initial-scale=1" in content

    return CheckResult(
        name="Mobile-Friendly Test",
        status=_pass_or(ok, Status.WARNING),
        priority=Priority.LOW if ok else Priority.HIGH,
        category=Category.TECHNICAL,
        description=(
            "This webpage is mobile-friendly with a proper viewport configuration."
            if ok
            else "Viewport is not configured for mobile devices."
        ),
        recommendation=None if ok else 'Set the viewport content to "width=device-width, initial-scale=1".',
    )


@check("Touch Elements Size Test", Category.TECHNICAL)
def check_touch_elements(ctx: AuditContext) -> CheckResult:
    small = 0
    for element in ctx.document.select(TOUCH_ELEMENTS):
        match = FONT_SIZE_PATTERN.search(element.get("style") or "")
        if match and float(match.group(1)) < MIN_TOUCH_FONT_PX:
            small += 1

    return CheckResult(
        name="Touch Elements Size Test",
        status=_pass_or(small == 0, Status.NEUTRAL),
        priority=Priority.LOW,
        category=Category.TECHNICAL,
        description=(
            "Touch elements appear to be properly sized."
            if small == 0
            else f"{small} touch elements may be too small for mobile devices."
        ),
        details={"small_elements": small},
    )


@check("Font Readability Test", Category.TECHNICAL)
def check_font_readability(ctx: AuditContext) -> Optional[CheckResult]:
    if ctx.document.body is None:
        return None

    ok = len(ctx.document.text_content().strip()) > MIN_READABLE_TEXT
    return CheckResult(
        name="Font Readability Test",
        status=_pass_or(ok, Status.NEUTRAL),
        priority=Priority.LOW,
        category=Category.TECHNICAL,
        description=(
            "Page has sufficient text content for readability."
            if ok
            else "Page has very little text content."
        ),
    )


# --- Links ---

def _is_internal(ctx: AuditContext, href: str) -> bool:
    if not href.startswith("http"):
        return True
    return urlparse(href).hostname == ctx.hostname


@check("Internal Linking Test", Category.TECHNICAL)
def check_internal_links(ctx: AuditContext) -> CheckResult:
    hrefs = [a.get("href") or "" for a in ctx.document.select("a[href]")]
    internal = sum(1 for href in hrefs if _is_internal(ctx, href))

    return CheckResult(
        name="Internal Linking Test",
        status=_pass_or(internal > 0, Status.NEUTRAL),
        priority=Priority.LOW,
        category=Category.TECHNICAL,
        description=(
            f"This webpage has {internal} internal links."
            if internal
            else "No internal links found. Internal linking helps with site structure."
        ),
        details={"internal": internal},
    )


@check("External Links Test", Category.TECHNICAL)
def check_external_links(ctx: AuditContext) -> CheckResult:
    external = [
        a for a in ctx.document.select('a[href^="http"]')
        if not _is_internal(ctx, a.get("href") or "")
    ]
    nofollow = sum(1 for a in external if "nofollow" in (a.get("rel") or []))

    return CheckResult(
        name="External Links Test",
        status=Status.NEUTRAL,
        priority=Priority.LOW,
        category=Category.TECHNICAL,
        description=f"This webpage has {len(external)} external links ({nofollow} with nofollow).",
        details={"external": len(external), "nofollow": nofollow},
    )


@check("Broken Links Test", Category.TECHNICAL)
def check_broken_links(ctx: AuditContext) -> CheckResult:
    broken = [
        a.get("href") for a in ctx.document.select("a[href]")
        if (a.get("href") or "").strip() in BROKEN_HREFS
    ]

    return CheckResult(
        name="Broken Links Test",
        status=Status.WARNING if broken else Status.PASS,
        priority=Priority.MEDIUM,
        category=Category.TECHNICAL,
        description=(
            f"Found {len(broken)} potentially broken or empty links."
            if broken
            else "No obviously broken links found."
        ),
        recommendation="Point every link at a real destination or use a <button> for scripted actions." if broken else None,
        details={"count": len(broken)},
    )
