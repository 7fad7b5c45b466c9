"""
Image checks - alt text, responsive sources, modern formats, titles.
"""
from typing import Optional

from seo_audit.services.checks.base import AuditContext, check
from seo_audit.services.scoring.engine import round_half_up
from seo_audit.services.scoring.models import Category, CheckResult, Priority, Status

MAX_MISSING_ALT_RATIO = 0.10
MIN_SRCSET_PERCENT = 20
MIN_TITLE_RATIO = 0.5
MODERN_FORMATS = (".webp", ".avif")


@check("Image Alt Text Test", Category.IMAGES)
def check_image_alt(ctx: AuditContext) -> Optional[CheckResult]:
    """At most 10% of images may lack alt text. Skipped on image-free pages."""
    images = ctx.document.select("img")
    if not images:
        return None

    missing = [img for img in images if not (img.get("alt") or "").strip()]
    ok = len(missing) <= len(images) * MAX_MISSING_ALT_RATIO

    return CheckResult(
        name="Image Alt Text Test",
        status=Status.PASS if ok else Status.WARNING,
        priority=Priority.LOW if ok else Priority.HIGH,
        category=Category.IMAGES,
        description=(
            "All images have proper alt text."
            if ok
            else 'This webpage is using "img" tags with empty or missing "alt" attribute!'
        ),
        recommendation=None if ok else (
            'Add a short descriptive alt="..." to each content image; use alt="" only for decorative ones.'
        ),
        details={
            "total": len(images),
            "missing": len(missing),
            "missing_sources": [img.get("src") or "" for img in missing[:10]],
        },
    )


@check("Responsive Images Test", Category.IMAGES)
def check_responsive_images(ctx: AuditContext) -> Optional[CheckResult]:
    images = ctx.document.select("img")
    if not images:
        return None

    with_srcset = sum(1 for img in images if img.has_attr("srcset"))
    percent = round_half_up(with_srcset / len(images) * 100)
    ok = percent > MIN_SRCSET_PERCENT

    return CheckResult(
        name="Responsive Images Test",
        status=Status.PASS if ok else Status.NEUTRAL,
        priority=Priority.LOW if ok else Priority.HIGH,
        category=Category.IMAGES,
        description=(
            f"{percent}% of images use srcset for responsive design."
            if ok
            else "Consider using srcset attribute for responsive images."
        ),
        details={"total": len(images), "with_srcset": with_srcset, "percent": percent},
    )


@check("Modern Image Formats Test", Category.IMAGES)
def check_modern_formats(ctx: AuditContext) -> CheckResult:
    sources = [(img.get("src") or "").lower() for img in ctx.document.select("img[src]")]
    modern = [src for src in sources if any(fmt in src for fmt in MODERN_FORMATS)]

    return CheckResult(
        name="Modern Image Formats Test",
        status=Status.PASS if modern else Status.NEUTRAL,
        priority=Priority.LOW,
        category=Category.IMAGES,
        description=(
            "Website uses modern image formats (WebP/AVIF)."
            if modern
            else "Consider using modern image formats like WebP or AVIF for better compression."
        ),
        details={"modern_images": len(modern)},
    )


@check("Image Title Attribute Test", Category.IMAGES)
def check_image_titles(ctx: AuditContext) -> Optional[CheckResult]:
    images = ctx.document.select("img")
    if not images:
        return None

    with_title = sum(1 for img in images if img.has_attr("title"))
    ok = with_title > len(images) * MIN_TITLE_RATIO

    return CheckResult(
        name="Image Title Attribute Test",
        status=Status.PASS if ok else Status.NEUTRAL,
        priority=Priority.LOW,
        category=Category.IMAGES,
        description=(
            "Most images have title attributes."
            if ok
            else "Consider adding title attributes to images for better accessibility."
        ),
        details={"total": len(images), "with_title": with_title},
    )
