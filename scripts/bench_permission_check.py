#!/usr/bin/env python3
"""Benchmark permission checks: latency (p50, p95, p99) and QPS.

Runs GET /v1/me/permissions/check over every entity/action pair, first
with the RoleGate keys evicted from Redis (cold), then again (warm).

Usage:
  export API_URL=http://localhost:8000 KEYCLOAK_URL=... REDIS_URL=redis://localhost:6379/0
  uv run python scripts/bench_permission_check.py [--rounds 20]
"""
from __future__ import annotations

import argparse
import itertools
import os
import statistics
import sys
import time

import httpx
import redis

ENTITIES = (
    "User", "Brand", "Category", "Permission", "Product", "Product Review",
    "Shipping Class", "Sub Category", "Tax Class", "Tax Status", "FAQ",
    "News Letter", "Pop Up Banner", "Privacy & Policy", "Terms & Conditions",
    "Order", "Role", "Notification", "Media",
)
ACTIONS = ("canCreate", "canRead", "canUpdate", "canDelete")


def get_token(
    keycloak_url: str,
    realm: str,
    client_id: str,
    client_secret: str,
    username: str,
    password: str,
) -> str:
    url = f"{keycloak_url.rstrip('/')}/realms/{realm}/protocol/openid-connect/token"
    r = httpx.post(
        url,
        data={
            "grant_type": "password",
            "client_id": client_id,
            "client_secret": client_secret,
            "username": username,
            "password": password,
        },
        headers={"Content-Type": "application/x-www-form-urlencoded"},
        timeout=30.0,
    )
    r.raise_for_status()
    return r.json()["access_token"]


def evict_cache(redis_url: str, prefix: str) -> int:
    """Delete every key under prefix (SCAN, not KEYS)."""
    client = redis.Redis.from_url(redis_url)
    try:
        keys = list(client.scan_iter(match=f"{prefix}:*", count=500))
        return client.delete(*keys) if keys else 0
    finally:
        client.close()


def run_phase(
    client: httpx.Client, api_url: str, headers: dict[str, str], rounds: int
) -> tuple[list[float], int, float]:
    latencies: list[float] = []
    errors = 0
    start = time.perf_counter()
    for _ in range(rounds):
        for entity, action in itertools.product(ENTITIES, ACTIONS):
            t0 = time.perf_counter()
            r = client.get(
                f"{api_url}/v1/me/permissions/check",
                params={"entity": entity, "action": action},
                headers=headers,
            )
            elapsed = time.perf_counter() - t0
            if r.status_code == 200:
                latencies.append(elapsed)
            else:
                errors += 1
    return latencies, errors, time.perf_counter() - start


def summarize(label: str, latencies: list[float], errors: int, total: float) -> str:
    n = len(latencies)
    if n == 0:
        return f"{label}: no successful checks (errors={errors})\n"
    ordered = sorted(latencies)
    p50 = statistics.median(ordered) * 1000
    p95 = ordered[int(n * 0.95) - 1] * 1000 if n >= 20 else p50
    p99 = ordered[int(n * 0.99) - 1] * 1000 if n >= 100 else p95
    return (
        f"{label} (checks={n}, errors={errors})\n"
        f"  QPS: {n / total:.2f}\n"
        f"  Latency: p50={p50:.1f} ms, p95={p95:.1f} ms, p99={p99:.1f} ms\n"
        f"  Total time: {total:.2f} s\n"
    )


def main() -> int:
    parser = argparse.ArgumentParser(description="Benchmark permission checks")
    parser.add_argument("--rounds", type=int, default=10, help="Passes over every entity/action pair")
    parser.add_argument("--output", type=str, default="/results/bench_permission_check.txt", help="Output file path")
    args = parser.parse_args()

    api_url = os.environ.get("API_URL", "http://localhost:8000").rstrip("/")
    redis_url = os.environ.get("REDIS_URL", "redis://localhost:6379/0")
    prefix = os.environ.get("CACHE_PREFIX", "rolegate")
    keycloak_url = os.environ.get("KEYCLOAK_URL", "http://localhost:8080")
    realm = os.environ.get("KEYCLOAK_REALM", "rolegate")
    client_id = os.environ.get("KEYCLOAK_CLIENT_ID", "rolegate-api")
    client_secret = os.environ.get("KEYCLOAK_CLIENT_SECRET", "rolegate-api-secret")
    user = os.environ.get("BENCH_USER", "testuser")
    password = os.environ.get("BENCH_PASSWORD", "testpass")

    print("Getting token...")
    token = get_token(keycloak_url, realm, client_id, client_secret, user, password)
    headers = {"Authorization": f"Bearer {token}"}

    print(f"Evicted {evict_cache(redis_url, prefix)} cached keys")
    with httpx.Client(timeout=30.0) as client:
        cold = run_phase(client, api_url, headers, 1)
        warm = run_phase(client, api_url, headers, args.rounds)

    summary = summarize("Cold cache", *cold) + summarize("Warm cache", *warm)
    print(summary)

    try:
        os.makedirs(os.path.dirname(args.output) or ".", exist_ok=True)
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(summary)
        print(f"Wrote {args.output}")
    except OSError as e:
        print(f"Could not write {args.output}: {e}", file=sys.stderr)

    return 0 if warm[0] else 1


if __name__ == "__main__":
    sys.exit(main())
