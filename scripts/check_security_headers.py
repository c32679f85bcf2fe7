#!/usr/bin/env python3
"""
Check a running dashboard for gate behaviour and security headers.

Sends one GET per path (in parallel, redirects not followed) and reports the
status, redirect target and any missing baseline security header. Static
paths are expected to carry none of them.

Usage:
  python scripts/check_security_headers.py [--base-url URL] [--session TOKEN] [PATH ...]
  Or set env: GATE_BASE_URL, GATE_SESSION
Exit code 1 when a non-static response misses a baseline header.
"""

import argparse
import os
import sys
from concurrent.futures import ThreadPoolExecutor, as_completed

import requests

BASELINE = {
    "x-content-type-options": "nosniff",
    "x-frame-options": "DENY",
    "x-xss-protection": "1; mode=block",
    "referrer-policy": "strict-origin-when-cross-origin",
}

DEFAULT_PATHS = [
    "/api/health",
    "/api/status",
    "/_next/static/chunk.js",
    "/dashboard",
    "/orders",
    "/admin",
    "/auth/login",
    "/unknown/path",
]

SESSION_COOKIE = "restaurant-dashboard-session"
# requests' default agent is screened out as a scanner
USER_AGENT = "dashgate-header-check/1.0"


def check_path(
    base_url: str, path: str, session: str | None
) -> tuple[str, int, str | None, list[str]]:
    """GET one path; return (path, status, location, missing baseline headers)."""
    cookies = {SESSION_COOKIE: session} if session else None
    try:
        r = requests.get(
            base_url.rstrip("/") + path,
            cookies=cookies,
            headers={"User-Agent": USER_AGENT},
            allow_redirects=False,
            timeout=10,
        )
    except requests.RequestException:
        return (path, -1, None, [])
    headers = {k.lower(): v for k, v in r.headers.items()}
    missing = [
        name for name, value in BASELINE.items() if headers.get(name) != value
    ]
    return (path, r.status_code, r.headers.get("location"), missing)


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Check gate decisions and security headers on a running server."
    )
    parser.add_argument(
        "--base-url",
        default=os.environ.get("GATE_BASE_URL", "http://localhost:8000"),
        help="Server base URL (default http://localhost:8000)",
    )
    parser.add_argument(
        "--session",
        default=os.environ.get("GATE_SESSION", ""),
        help=f"Value for the {SESSION_COOKIE} cookie (presence only is checked)",
    )
    parser.add_argument("paths", nargs="*", default=DEFAULT_PATHS)
    args = parser.parse_args()

    print(f"Checking {len(args.paths)} paths on {args.base_url}")
    print("---")

    results: list[tuple[str, int, str | None, list[str]]] = []
    with ThreadPoolExecutor(max_workers=min(8, len(args.paths)) or 1) as executor:
        futures = [
            executor.submit(check_path, args.base_url, p, args.session or None)
            for p in args.paths
        ]
        for fut in as_completed(futures):
            results.append(fut.result())

    failed = 0
    for path, code, location, missing in sorted(results):
        code_str = str(code) if code >= 0 else "ERR"
        line = f"{path} HTTP {code_str}"
        if location:
            line += f" -> {location}"
        is_static = path.startswith("/_next") or path in ("/favicon.ico", "/robots.txt")
        if missing and not is_static and code >= 0:
            failed += 1
            line += f"  MISSING: {', '.join(missing)}"
        print(line)

    print("---")
    print(f"Done. {len(results) - failed} ok, {failed} missing headers.")
    if failed:
        sys.exit(1)


if __name__ == "__main__":
    main()
