"""
Crawl file checks - robots.txt and sitemap.xml, fetched through the proxy.
"""
from dataclasses import dataclass, field

from seo_audit.logger import logger
from seo_audit.services.checks.base import AuditContext, network_check
from seo_audit.services.fetch_client import FetchError
from seo_audit.services.scoring.models import Category, CheckResult, Priority, Status


@dataclass
class RobotsRules:
    """Parsed robots.txt data."""
    groups: list[dict] = field(default_factory=list)
    sitemaps: list[str] = field(default_factory=list)
    allows_all: bool = True
    disallowed_bots: list[str] = field(default_factory=list)


def parse_robots(content: str) -> RobotsRules:
    """Group robots.txt directives into (agents, rules) blocks.

    Consecutive User-agent lines share a block; a User-agent line after
    rules starts a new one. Sitemap directives are global.
    """
    data = RobotsRules()
    current = {"agents": [], "rules": []}

    for line in content.splitlines():
        line = line.split("#", 1)[0].strip()
        if ":" not in line:
            continue
        key, value = line.split(":", 1)
        key = key.strip().lower()
        value = value.strip()

        if key == "user-agent":
            if current["rules"]:
                data.groups.append(current)
                current = {"agents": [], "rules": []}
            current["agents"].append(value)
        elif key in ("disallow", "allow"):
            current["rules"].append((key, value))
        elif key == "sitemap":
            data.sitemaps.append(value)

    if current["agents"]:
        data.groups.append(current)

    for group in data.groups:
        blocks_root = any(rule == ("disallow", "/") for rule in group["rules"])
        if not blocks_root:
            continue
        if "*" in group["agents"]:
            data.allows_all = False
        for agent in group["agents"]:
            if agent != "*" and agent not in data.disallowed_bots:
                data.disallowed_bots.append(agent)

    return data


@network_check("Sitemap.xml Test", Category.TECHNICAL)
async def check_sitemap(ctx: AuditContext) -> CheckResult:
    sitemap_url = f"{ctx.origin}/sitemap.xml"
    try:
        response = await ctx.require_fetcher().fetch(sitemap_url)
    except FetchError as e:
        logger.info(f"Sitemap fetch failed for {sitemap_url}: {e}")
        return CheckResult(
            name="Sitemap.xml Test",
            status=Status.NEUTRAL,
            priority=Priority.MEDIUM,
            category=Category.TECHNICAL,
            description="Unable to check for sitemap.xml.",
        )

    contents = response.contents
    is_index = "<sitemapindex" in contents
    found = response.is_success and ("<urlset" in contents or is_index)

    return CheckResult(
        name="Sitemap.xml Test",
        status=Status.PASS if found else Status.WARNING,
        priority=Priority.LOW if found else Priority.HIGH,
        category=Category.TECHNICAL,
        description=(
            "This website has a sitemap.xml file."
            if found
            else "No sitemap.xml found. Sitemaps help search engines discover your pages."
        ),
        recommendation=None if found else (
            "Publish an XML sitemap at /sitemap.xml and reference it from robots.txt."
        ),
        details={
            "url": sitemap_url,
            "is_index": is_index,
            "url_count": contents.count("<loc>") if found else 0,
        },
    )


@network_check("Robots.txt Test", Category.TECHNICAL)
async def check_robots_txt(ctx: AuditContext) -> CheckResult:
    robots_url = f"{ctx.origin}/robots.txt"
    try:
        response = await ctx.require_fetcher().fetch(robots_url)
    except FetchError as e:
        logger.info(f"robots.txt fetch failed for {robots_url}: {e}")
        return CheckResult(
            name="Robots.txt Test",
            status=Status.NEUTRAL,
            priority=Priority.LOW,
            category=Category.TECHNICAL,
            description="Unable to check for robots.txt.",
        )

    contents = response.contents
    found = "user-agent" in contents.lower()
    if not found:
        return CheckResult(
            name="Robots.txt Test",
            status=Status.WARNING,
            priority=Priority.MEDIUM,
            category=Category.TECHNICAL,
            description="No robots.txt file found.",
            recommendation="Add a robots.txt at the site root with at least a User-agent group and a Sitemap line.",
        )

    rules = parse_robots(contents)
    details = {
        "sitemaps": rules.sitemaps,
        "allows_all": rules.allows_all,
        "disallowed_bots": rules.disallowed_bots,
    }

    if not rules.allows_all:
        return CheckResult(
            name="Robots.txt Test",
            status=Status.WARNING,
            priority=Priority.HIGH,
            category=Category.TECHNICAL,
            description="robots.txt blocks all crawlers from the whole site (Disallow: /).",
            recommendation="Remove the site-wide Disallow: / for User-agent: * unless the site must stay unindexed.",
            details=details,
        )

    return CheckResult(
        name="Robots.txt Test",
        status=Status.PASS,
        priority=Priority.LOW,
        category=Category.TECHNICAL,
        description="This website has a robots.txt file.",
        details=details,
    )
