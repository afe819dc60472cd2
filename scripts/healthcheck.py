#!/usr/bin/env python3
"""Leave Portal Health Check — verify the portal and the leave API it fronts.

Checks:
  1. Portal responds on /health (HTTP 200, status "healthy")
  2. Leave API base URL answers GET /leaveTypes (any non-5xx answer counts
     as reachable; a 401 just means the endpoint is auth-protected)

Usage:
    python scripts/healthcheck.py                                  # localhost defaults / .env
    python scripts/healthcheck.py --url http://localhost:8000
    python scripts/healthcheck.py --api-url https://leave-api.example.com
    python scripts/healthcheck.py --json                           # machine-readable output

Exit codes:
    0 = all checks passed
    1 = one or more checks failed
    2 = critical failure (cannot reach the portal at all)
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from datetime import datetime, timezone

import httpx
from dotenv import load_dotenv

load_dotenv()

DEFAULT_PORTAL_URL = os.getenv("PORTAL_URL", "http://localhost:8000")
DEFAULT_API_URL = os.getenv("API_BASE_URL", "http://localhost:3000")


# ══════════════════════════════════════════════════════════════════════
# Check result model
# ══════════════════════════════════════════════════════════════════════

class CheckResult:
    """Single health check result."""

    def __init__(self, name: str, passed: bool, message: str,
                 detail: str = "", severity: str = "error",
                 unreachable: bool = False):
        self.name = name
        self.passed = passed
        self.message = message
        self.detail = detail
        self.severity = severity  # "error", "warning", "info"
        self.unreachable = unreachable

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "passed": self.passed,
            "message": self.message,
            "detail": self.detail,
            "severity": self.severity,
        }

    def __str__(self) -> str:
        icon = "✅" if self.passed else ("⚠️" if self.severity == "warning" else "❌")
        s = f"{icon} {self.name}: {self.message}"
        if self.detail:
            s += f"\n     {self.detail}"
        return s


# ══════════════════════════════════════════════════════════════════════
# Health checks
# ══════════════════════════════════════════════════════════════════════

def check_portal_health(client: httpx.Client, base_url: str) -> CheckResult:
    """Check that the portal /health endpoint responds correctly."""
    health_url = f"{base_url.rstrip('/')}/health"
    try:
        resp = client.get(health_url)
    except httpx.HTTPError as e:
        return CheckResult(
            "Portal", False,
            "Cannot connect to portal",
            str(e),
            unreachable=True,
        )

    if resp.status_code != 200:
        return CheckResult(
            "Portal", False,
            f"HTTP {resp.status_code} (expected 200)",
            f"URL: {health_url}",
        )
    try:
        body = resp.json()
    except ValueError:
        return CheckResult("Portal", False, "Response is not JSON", f"URL: {health_url}")

    if body.get("status") != "healthy":
        return CheckResult(
            "Portal", False,
            f"Status: {body.get('status', 'missing')} (expected 'healthy')",
            f"Response: {json.dumps(body)}",
        )

    return CheckResult(
        "Portal", True,
        f"Healthy (v{body.get('version', 'unknown')}, {body.get('environment', 'unknown')})",
        f"URL: {health_url}",
    )


def check_leave_api(client: httpx.Client, api_url: str) -> CheckResult:
    """Check that the leave API base URL is reachable."""
    probe_url = f"{api_url.rstrip('/')}/leaveTypes"
    try:
        resp = client.get(probe_url)
    except httpx.HTTPError as e:
        return CheckResult(
            "Leave API", False,
            "Cannot connect to leave API",
            str(e),
        )

    if resp.status_code >= 500:
        return CheckResult(
            "Leave API", False,
            f"HTTP {resp.status_code} from /leaveTypes",
            f"URL: {probe_url}",
        )
    if resp.status_code in (401, 403):
        return CheckResult(
            "Leave API", True,
            "Reachable (endpoint is auth-protected)",
            f"URL: {probe_url}",
            severity="warning",
        )
    return CheckResult(
        "Leave API", True,
        f"Reachable (HTTP {resp.status_code})",
        f"URL: {probe_url}",
    )


# ══════════════════════════════════════════════════════════════════════
# Runner
# ══════════════════════════════════════════════════════════════════════

def run_healthcheck(portal_url: str, api_url: str, timeout: float = 10) -> list[CheckResult]:
    """Run all health checks and return results."""
    with httpx.Client(timeout=timeout) as client:
        return [
            check_portal_health(client, portal_url),
            check_leave_api(client, api_url),
        ]


def exit_code(results: list[CheckResult]) -> int:
    if any(r.unreachable for r in results):
        return 2
    if any(not r.passed for r in results):
        return 1
    return 0


def main():
    parser = argparse.ArgumentParser(
        description="Leave Portal Health Check",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--url", type=str, default=DEFAULT_PORTAL_URL,
                        help=f"Portal base URL (default: {DEFAULT_PORTAL_URL})")
    parser.add_argument("--api-url", type=str, default=DEFAULT_API_URL,
                        help=f"Leave API base URL (default: {DEFAULT_API_URL})")
    parser.add_argument("--json", dest="output_json", action="store_true",
                        help="Output results as JSON")
    parser.add_argument("--timeout", type=float, default=10,
                        help="HTTP timeout in seconds (default: 10)")
    args = parser.parse_args()

    now = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")

    if not args.output_json:
        print(f"""
{'=' * 60}
  LEAVE PORTAL — HEALTH CHECK
  Portal : {args.url}
  API    : {args.api_url}
  Time   : {now}
{'=' * 60}
""")

    results = run_healthcheck(args.url, args.api_url, timeout=args.timeout)

    if args.output_json:
        output = {
            "timestamp": now,
            "target": args.url,
            "api": args.api_url,
            "checks": [r.to_dict() for r in results],
            "all_passed": all(r.passed for r in results),
        }
        print(json.dumps(output, indent=2))
    else:
        for result in results:
            print(result)
            print()

        failed = sum(1 for r in results if not r.passed)
        print(f"{'=' * 60}")
        if failed == 0:
            print(f"  ✅ ALL {len(results)} CHECKS PASSED")
        else:
            print(f"  ❌ {failed}/{len(results)} CHECKS FAILED")
        print(f"{'=' * 60}")

    sys.exit(exit_code(results))


if __name__ == "__main__":
    main()
