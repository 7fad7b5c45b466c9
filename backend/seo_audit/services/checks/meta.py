"""
Meta tag checks - title, description, Open Graph, keywords.
"""
from seo_audit.services.checks.base import AuditContext, check
from seo_audit.services.scoring.models import Category, CheckResult, Priority, Status

TITLE_MIN_LENGTH = 10
TITLE_MAX_LENGTH = 100

DESCRIPTION_MIN_LENGTH = 50
DESCRIPTION_MAX_LENGTH = 500
DESCRIPTION_PREFERRED_MAX = 100

RELATED_KEYWORDS = ("marketing", "traffic", "rankings", "analytics", "content", "local seo")


@check("Meta Title Test", Category.META)
def check_meta_title(ctx: AuditContext) -> CheckResult:
    """Title present and between 10 and 100 characters."""
    title = ctx.document.select_one("title")
    text = title.get_text().strip() if title is not None else ""
    length = len(text)
    in_range = TITLE_MIN_LENGTH <= length <= TITLE_MAX_LENGTH

    if in_range:
        status = Status.PASS
    elif length == 0:
        status = Status.WARNING
    else:
        status = Status.NEUTRAL

    if length == 0:
        priority = Priority.HIGH
        description = "No title tag found. Title tags are essential for SEO."
    else:
        priority = Priority.LOW if in_range else Priority.MEDIUM
        description = (
            f"This webpage is using a title tag with a length of {length} characters. "
            f"We recommend using a title with a length between {TITLE_MIN_LENGTH} - {TITLE_MAX_LENGTH} characters."
        )

    return CheckResult(
        name="Meta Title Test",
        status=status,
        priority=priority,
        category=Category.META,
        description=description,
        recommendation=None if in_range else (
            f"Rewrite the <title> in the <head> to {TITLE_MIN_LENGTH}-{TITLE_MAX_LENGTH} characters, "
            "describing the page and including its main keyword."
        ),
        details={"text": text, "length": length} if title is not None else {},
    )


@check("Meta Description Test", Category.META)
def check_meta_description(ctx: AuditContext) -> CheckResult:
    content = (ctx.document.attr('meta[name="description"]', "content") or "").strip()
    length = len(content)
    in_range = DESCRIPTION_MIN_LENGTH <= length <= DESCRIPTION_MAX_LENGTH

    if in_range:
        status = Status.PASS
    elif length == 0:
        status = Status.WARNING
    else:
        status = Status.NEUTRAL

    if length == 0:
        priority = Priority.HIGH
        description = "No meta description found. Meta descriptions help search engines understand your page."
    else:
        off_target = length > DESCRIPTION_PREFERRED_MAX or length < DESCRIPTION_MIN_LENGTH
        priority = Priority.MEDIUM if off_target else Priority.LOW
        description = (
            f"This webpage is using a meta description tag with a length of {length} characters. "
            f"We recommend keeping it between {DESCRIPTION_MIN_LENGTH} and {DESCRIPTION_MAX_LENGTH} characters."
        )

    return CheckResult(
        name="Meta Description Test",
        status=status,
        priority=priority,
        category=Category.META,
        description=description,
        recommendation=None if in_range else (
            'Add or update <meta name="description" content="..."> with a compelling '
            f"{DESCRIPTION_MIN_LENGTH}-{DESCRIPTION_MAX_LENGTH} character summary."
        ),
        details={"text": content, "length": length} if content else {},
    )


@check("Social Media Meta Tags Test", Category.META)
def check_open_graph(ctx: AuditContext) -> CheckResult:
    og_count = ctx.document.count('meta[property^="og:"]')
    has_title = ctx.document.exists('meta[property="og:title"]')
    has_image = ctx.document.exists('meta[property="og:image"]')
    essentials = has_title and has_image

    return CheckResult(
        name="Social Media Meta Tags Test",
        status=Status.PASS if essentials else Status.NEUTRAL,
        priority=Priority.LOW,
        category=Category.META,
        description=(
            "This webpage is using social media meta tags (Open Graph)."
            if essentials
            else f"Found {og_count} Open Graph tags. Recommended tags: og:title, og:image, etc."
        ),
        details={"og:title": has_title, "og:image": has_image, "og_tag_count": og_count},
    )


@check("Meta Keywords Test", Category.META)
def check_meta_keywords(ctx: AuditContext) -> CheckResult:
    # Informational only; search engines ignore the tag
    present = ctx.document.exists('meta[name="keywords"]')
    return CheckResult(
        name="Meta Keywords Test",
        status=Status.NEUTRAL,
        priority=Priority.LOW,
        category=Category.META,
        description=(
            "Meta keywords tag found. Note: Most search engines ignore this tag."
            if present
            else "No meta keywords tag found. Most modern search engines ignore this tag anyway."
        ),
    )


@check("Related Keywords Test", Category.META)
def check_related_keywords(ctx: AuditContext) -> CheckResult:
    text = ctx.document.text_content().lower()
    found = [keyword for keyword in RELATED_KEYWORDS if keyword in text]

    return CheckResult(
        name="Related Keywords Test",
        status=Status.PASS if found else Status.NEUTRAL,
        priority=Priority.LOW,
        category=Category.META,
        description=(
            f"Found {len(found)} contextually related keywords."
            if found
            else "Consider adding more contextually relevant keywords to your content."
        ),
        details={"keywords": found},
    )
