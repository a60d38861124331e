#!/usr/bin/env python3
"""
Hit the certificate endpoints with N parallel requests using x-api-key.

Useful after a long idle period or a database restart: every request should
come back 200 (a dead pooled connection is replaced and the query retried once).

Usage:
  python scripts/check_gateway.py [--base-url URL] [--api-key KEY] [--concurrent N]
  Or set env: GATEWAY_URL, API_KEY, CONCURRENT
"""

import argparse
import os
import sys
from concurrent.futures import ThreadPoolExecutor, as_completed

import httpx

PATHS = ["/certificadosAPS", "/certificadosFONE", "/certificadosCECAP"]


def do_request(base_url: str, path: str, api_key: str, index: int) -> tuple[int, str, int]:
    """Send one GET request; return (index, path, status_code)."""
    try:
        r = httpx.get(f"{base_url}{path}", headers={"x-api-key": api_key}, timeout=30)
        return (index, path, r.status_code)
    except httpx.HTTPError:
        return (index, path, -1)  # -1 = transport error


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Send N parallel GETs to the certificate endpoints."
    )
    parser.add_argument(
        "--base-url",
        default=os.environ.get("GATEWAY_URL", "http://localhost:5000"),
    )
    parser.add_argument(
        "--api-key",
        default=os.environ.get("API_KEY", ""),
        help="Value for x-api-key (or set API_KEY env)",
    )
    parser.add_argument(
        "--concurrent",
        type=int,
        default=int(os.environ.get("CONCURRENT", "20")),
        help="Number of concurrent requests (default 20)",
    )
    args = parser.parse_args()

    if not args.api_key:
        print("Error: --api-key or API_KEY env required", file=sys.stderr)
        sys.exit(1)

    base_url = args.base_url.rstrip("/")
    print(f"Sending {args.concurrent} concurrent GET requests to {base_url}")
    print("---")

    results: list[tuple[int, str, int]] = []
    with ThreadPoolExecutor(max_workers=args.concurrent) as executor:
        futures = [
            executor.submit(do_request, base_url, PATHS[i % len(PATHS)], args.api_key, i)
            for i in range(1, args.concurrent + 1)
        ]
        for fut in as_completed(futures):
            idx, path, code = fut.result()
            results.append((idx, path, code))
            code_str = str(code) if code >= 0 else "ERR"
            print(f"{idx} {path} HTTP {code_str}")

    print("---")
    ok = sum(1 for *_, c in results if c == 200)
    forbidden = sum(1 for *_, c in results if c == 403)
    server_err = sum(1 for *_, c in results if c == 500)
    err = sum(1 for *_, c in results if c < 0)
    print(f"Done. 200={ok} 403={forbidden} 500={server_err} errors={err}")
    print("403 = wrong API key or origin; 500 = query failed after one retry.")
    sys.exit(0 if ok == len(results) else 1)


if __name__ == "__main__":
    main()
