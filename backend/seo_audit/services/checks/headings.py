"""
Heading structure checks.
"""
from seo_audit.services.checks.base import AuditContext, check
from seo_audit.services.scoring.models import Category, CheckResult, Priority, Status


@check("H1 Heading Tag Test", Category.HEADINGS)
def check_h1(ctx: AuditContext) -> CheckResult:
    """Exactly one <h1>; none is an error, several a warning."""
    count = ctx.document.count("h1")

    if count == 1:
        status = Status.PASS
        description = "This webpage has exactly one H1 heading tag."
    elif count > 1:
        status = Status.WARNING
        description = f"This webpage has {count} H1 heading tags."
    else:
        status = Status.ERROR
        description = "No H1 heading tag found. H1 tags are important for SEO and page structure."

    return CheckResult(
        name="H1 Heading Tag Test",
        status=status,
        priority=Priority.HIGH if count == 0 else Priority.LOW,
        category=Category.HEADINGS,
        description=description,
        recommendation=None if count == 1 else (
            "Use exactly one <h1> containing the main keyword; demote any extra ones to <h2> or <h3>."
        ),
        details={"count": count},
    )


@check("H2 Heading Tags Test", Category.HEADINGS)
def check_h2(ctx: AuditContext) -> CheckResult:
    count = ctx.document.count("h2")
    return CheckResult(
        name="H2 Heading Tags Test",
        status=Status.PASS if count > 0 else Status.NEUTRAL,
        priority=Priority.MEDIUM if count == 0 else Priority.LOW,
        category=Category.HEADINGS,
        description=(
            f"This webpage has {count} H2 tags, which is good for content structure."
            if count
            else "No H2 tags found. H2 tags help structure your content."
        ),
        details={"count": count},
    )


@check("Heading Hierarchy Test", Category.HEADINGS)
def check_heading_hierarchy(ctx: AuditContext) -> CheckResult:
    counts = {f"h{level}": ctx.document.count(f"h{level}") for level in (1, 2, 3)}
    distribution = ", ".join(f"{tag.upper()}({n})" for tag, n in counts.items())

    return CheckResult(
        name="Heading Hierarchy Test",
        status=Status.NEUTRAL,
        priority=Priority.LOW,
        category=Category.HEADINGS,
        description=f"Heading distribution: {distribution}",
        details=counts,
    )
