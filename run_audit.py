import argparse
import asyncio
import sys

import httpx

from seo_audit.schemas.audit_result import AuditReport
from seo_audit.services.audit_runner import AuditRunner
from seo_audit.services.fetch_client import FetchError, ProxyFetchClient
from seo_audit.services.proxy_service import InProcessFetchClient


def print_progress(percent: int, stage: str) -> None:
    print(f"[{percent:3d}%] {stage}")


def print_report(data: dict) -> None:
    print(f"\nURL:   {data['url']}")
    print(f"Score: {data['overall_score']}/100  Grade: {data['grade']}")
    print(f"Checks: {data['total_checks']} (pass={data['passed']}, neutral={data['neutral']}, fail={data['failed']})")

    print("\nCategories:")
    for category in data["categories"]:
        print(f"  {category['label']:<12} {category['score']:>3}")

    print(f"\nPriority issues ({len(data['issues'])}):")
    for issue in data["issues"]:
        print(f"  [{issue['priority'].upper():<6}] {issue['name']}: {issue['description']}")


async def audit_in_process(url: str, proxy: str = None) -> dict:
    client = ProxyFetchClient(base_url=proxy) if proxy else InProcessFetchClient()
    async with client as fetcher:
        report = await AuditRunner(fetcher=fetcher).run(url, progress=print_progress)
    return AuditReport.from_report(report).model_dump(mode="json")


def audit_via_api(url: str, api_base: str) -> dict:
    print(f"Sending POST request to {api_base}/audit...")
    resp = httpx.post(f"{api_base}/audit", json={"url": url}, timeout=120.0)
    resp.raise_for_status()
    return resp.json()


def main() -> int:
    parser = argparse.ArgumentParser(description="Run an SEO audit and print the report")
    parser.add_argument("url", help="Page to audit (http:// or https://)")
    parser.add_argument("--proxy", help="Use a running proxy (e.g. http://localhost:8000/api) instead of in-process lookups")
    parser.add_argument("--api", help="Call a running API (e.g. http://localhost:8000/api/v1) instead of auditing in-process")
    args = parser.parse_args()

    print(f"Starting audit for {args.url}...")
    try:
        if args.api:
            data = audit_via_api(args.url, args.api.rstrip("/"))
        else:
            data = asyncio.run(audit_in_process(args.url, args.proxy))
    except (FetchError, httpx.HTTPError) as e:
        print(f"Audit failed: {e}")
        return 1

    print_report(data)
    return 0


if __name__ == "__main__":
    sys.exit(main())
