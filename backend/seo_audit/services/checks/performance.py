"""
Performance checks - request counts, page weight, DOM size, caching hints.

All of these are computed from the markup and response headers already in
hand; nothing here makes a network call.
"""
from seo_audit.services.checks.base import AuditContext, check
from seo_audit.services.scoring.models import Category, CheckResult, Priority, Status

MAX_HTTP_REQUESTS = 100
HIGH_HTTP_REQUESTS = 150
MAX_INLINE_STYLES = 100
MAX_DOM_ELEMENTS = 1500
MAX_RENDER_BLOCKING = 5
MIN_MINIFIED_RATIO = 0.5

PAGE_SIZE_GOOD_KB = 200
PAGE_SIZE_OK_KB = 500
PAGE_SIZE_HEAVY_KB = 1000

COMPRESSION_ENCODINGS = ("gzip", "br", "deflate")
CDN_KEYWORDS = ("cdn", "cloudinary", "fastly", "akamai", "cloudfront", "static", "cdnjs", "unpkg", "wp.com")
OPTIMIZED_IMAGE_FORMATS = (".webp", ".avif", ".svg")


def _resource_urls(ctx: AuditContext) -> list[str]:
    scripts = [el.get("src") or "" for el in ctx.document.select("script[src]")]
    styles = [el.get("href") or "" for el in ctx.document.select('link[rel~="stylesheet"]')]
    return scripts + styles


@check("HTTP Requests Test", Category.PERFORMANCE)
def check_http_requests(ctx: AuditContext) -> CheckResult:
    scripts = ctx.document.count("script[src]")
    styles = ctx.document.count('link[rel~="stylesheet"]')
    images = ctx.document.count("img[src]")
    total = scripts + styles + images
    ok = total <= MAX_HTTP_REQUESTS

    return CheckResult(
        name="HTTP Requests Test",
        status=Status.PASS if ok else Status.WARNING,
        priority=Priority.HIGH if total > HIGH_HTTP_REQUESTS else Priority.LOW,
        category=Category.PERFORMANCE,
        description=f"This webpage makes approximately {total} HTTP requests.",
        recommendation=None if ok else (
            "Combine scripts and stylesheets, lazy-load below-the-fold images and drop unused resources."
        ),
        details={"scripts": scripts, "stylesheets": styles, "images": images, "total": total},
    )


@check("Resource Minification Test", Category.PERFORMANCE)
def check_minification(ctx: AuditContext) -> CheckResult:
    resources = _resource_urls(ctx)
    minified = sum(1 for url in resources if ".min." in url)
    ok = bool(resources) and minified / len(resources) >= MIN_MINIFIED_RATIO

    return CheckResult(
        name="Resource Minification Test",
        status=Status.PASS if ok else Status.NEUTRAL,
        priority=Priority.MEDIUM,
        category=Category.PERFORMANCE,
        description=(
            "Most resources appear to be minified."
            if ok
            else "Consider minifying JavaScript and CSS files to reduce file size."
        ),
        details={"resources": len(resources), "minified": minified},
    )


@check("Page Size Test", Category.PERFORMANCE)
def check_page_size(ctx: AuditContext) -> CheckResult:
    # Two-decimal KB, compared as reported
    size_kb = round(len(ctx.raw_html.encode("utf-8")) / 1024, 2)

    if size_kb < PAGE_SIZE_GOOD_KB:
        status = Status.PASS
    elif size_kb < PAGE_SIZE_OK_KB:
        status = Status.NEUTRAL
    else:
        status = Status.WARNING

    return CheckResult(
        name="Page Size Test",
        status=status,
        priority=Priority.MEDIUM if size_kb > PAGE_SIZE_HEAVY_KB else Priority.LOW,
        category=Category.PERFORMANCE,
        description=f"The HTML size of this webpage is approximately {size_kb}KB.",
        details={"size_kb": size_kb},
    )


@check("Inline CSS Test", Category.PERFORMANCE)
def check_inline_css(ctx: AuditContext) -> CheckResult:
    count = ctx.document.count("[style]")
    ok = count < MAX_INLINE_STYLES

    return CheckResult(
        name="Inline CSS Test",
        status=Status.PASS if ok else Status.NEUTRAL,
        priority=Priority.LOW,
        category=Category.PERFORMANCE,
        description=(
            f"This webpage uses {count} inline styles, which is acceptable."
            if ok
            else f"This webpage uses {count} inline styles. Consider moving to external CSS."
        ),
        details={"count": count},
    )


@check("GZIP Compression Test", Category.PERFORMANCE)
def check_compression(ctx: AuditContext) -> CheckResult:
    encoding = ctx.headers.get("content-encoding", "").lower()
    ok = any(name in encoding for name in COMPRESSION_ENCODINGS)

    return CheckResult(
        name="GZIP Compression Test",
        status=Status.PASS if ok else Status.WARNING,
        priority=Priority.LOW if ok else Priority.HIGH,
        category=Category.PERFORMANCE,
        description=(
            f"Compression is enabled ({encoding})."
            if ok
            else "No compression detected. Enable GZIP or Brotli to reduce file sizes."
        ),
        recommendation=None if ok else "Enable gzip or Brotli compression for text responses on the web server.",
    )


@check("DOM Size Test", Category.PERFORMANCE)
def check_dom_size(ctx: AuditContext) -> CheckResult:
    count = ctx.document.element_count
    ok = count < MAX_DOM_ELEMENTS

    return CheckResult(
        name="DOM Size Test",
        status=Status.PASS if ok else Status.NEUTRAL,
        priority=Priority.LOW if ok else Priority.MEDIUM,
        category=Category.PERFORMANCE,
        description=(
            f"DOM size is reasonable ({count} elements)."
            if ok
            else f"Large DOM size detected ({count} elements). Consider simplifying the page structure."
        ),
        details={"elements": count},
    )


@check("CDN Usage Test", Category.PERFORMANCE)
def check_cdn_usage(ctx: AuditContext) -> CheckResult:
    urls = [url.lower() for url in _resource_urls(ctx)]
    urls += [(img.get("src") or "").lower() for img in ctx.document.select("img[src]")]
    cdn_urls = [url for url in urls if any(keyword in url for keyword in CDN_KEYWORDS)]

    return CheckResult(
        name="CDN Usage Test",
        status=Status.PASS if cdn_urls else Status.NEUTRAL,
        priority=Priority.LOW,
        category=Category.PERFORMANCE,
        description=(
            "This webpage is serving resources through a CDN."
            if cdn_urls
            else "No CDN usage detected. Consider using a CDN for static assets."
        ),
        details={"cdn_resources": len(cdn_urls)},
    )


@check("Image Metadata Test", Category.PERFORMANCE)
def check_image_metadata(ctx: AuditContext) -> CheckResult:
    sources = [(img.get("src") or "").lower() for img in ctx.document.select("img")]
    # Vacuously optimized when the page has no images
    optimized = all(any(fmt in src for fmt in OPTIMIZED_IMAGE_FORMATS) for src in sources)

    return CheckResult(
        name="Image Metadata Test",
        status=Status.PASS if optimized else Status.NEUTRAL,
        priority=Priority.LOW,
        category=Category.PERFORMANCE,
        description=(
            "Images are using optimized formats."
            if optimized
            else "Consider stripping image metadata and using optimized formats."
        ),
    )


@check("Browser Caching Test", Category.PERFORMANCE)
def check_browser_caching(ctx: AuditContext) -> CheckResult:
    cache_control = ctx.headers.get("cache-control", "")
    ok = "max-age" in cache_control.lower()

    return CheckResult(
        name="Browser Caching Test",
        status=Status.PASS if ok else Status.NEUTRAL,
        priority=Priority.LOW,
        category=Category.PERFORMANCE,
        description=(
            "Browser caching is enabled via Cache-Control."
            if ok
            else "No Cache-Control max-age found. Consider enabling browser caching."
        ),
        details={"cache-control": cache_control} if cache_control else {},
    )


@check("Render Blocking Resources Test", Category.PERFORMANCE)
def check_render_blocking(ctx: AuditContext) -> CheckResult:
    scripts = ctx.document.count("head script:not([async]):not([defer])")
    styles = ctx.document.count('head link[rel~="stylesheet"]')
    total = scripts + styles
    ok = total < MAX_RENDER_BLOCKING

    return CheckResult(
        name="Render Blocking Resources Test",
        status=Status.PASS if ok else Status.WARNING,
        priority=Priority.MEDIUM,
        category=Category.PERFORMANCE,
        description=(
            "Minimal render-blocking resources detected."
            if ok
            else f"Found {total} render-blocking resources in the head."
        ),
        recommendation=None if ok else "Add async or defer to head scripts and inline critical CSS.",
        details={"scripts": scripts, "stylesheets": styles},
    )
