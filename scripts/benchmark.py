#!/usr/bin/env python3
"""Load test for the public storefront endpoints.

Usage:
    uv run python scripts/benchmark.py --base-url http://localhost:8000 --concurrency 10 --requests 200
"""

import argparse
import asyncio
import statistics
import time

import httpx

ORIGIN = "https://kzmusicstore.com.br"

# (method, path, params, json body)
ENDPOINTS = [
    ("GET", "/api/v1/recommendations", {"store": "br"}, None),
    ("GET", "/api/v1/recommendations", {"store": "global"}, None),
    ("GET", "/api/v1/quiz", {"store": "br"}, None),
    ("POST", "/api/v1/track", {}, {"event": "view", "store": "br"}),
    ("POST", "/api/v1/track", {}, {"event": "click", "handle": "fone-kz-edx-pro", "store": "br"}),
    ("GET", "/api/v1/health", {}, None),
]


def endpoint_label(method: str, path: str, body: dict | None) -> str:
    if body:
        return f"{method} {path} [{body['event']}]"
    return f"{method} {path}"


async def make_request(
    client: httpx.AsyncClient, method: str, url: str, params: dict, body: dict | None, client_ip: str
) -> tuple[float, int]:
    headers = {"Origin": ORIGIN, "X-Forwarded-For": client_ip}
    start = time.perf_counter()
    try:
        resp = await client.request(method, url, params=params, json=body, headers=headers)
        return time.perf_counter() - start, resp.status_code
    except httpx.HTTPError:
        return time.perf_counter() - start, 0


async def run_benchmark(base_url: str, concurrency: int, total_requests: int) -> None:
    labels = [endpoint_label(m, p, b) for m, p, _, b in ENDPOINTS]
    results: dict[str, list[float]] = {label: [] for label in labels}
    errors: dict[str, int] = {label: 0 for label in labels}

    sem = asyncio.Semaphore(concurrency)

    async def bounded_request(client: httpx.AsyncClient, i: int) -> None:
        method, path, params, body = ENDPOINTS[i % len(ENDPOINTS)]
        label = labels[i % len(ENDPOINTS)]
        # Spread beacons over many addresses so the rate limiter stays out of the way
        client_ip = f"10.0.{(i // 250) % 256}.{i % 250}"
        async with sem:
            duration, status = await make_request(
                client, method, f"{base_url}{path}", params, body, client_ip
            )
        if 200 <= status < 300:
            results[label].append(duration)
        else:
            errors[label] += 1

    async with httpx.AsyncClient(timeout=30.0) as client:
        overall_start = time.perf_counter()
        await asyncio.gather(*(bounded_request(client, i) for i in range(total_requests)))
        overall_duration = time.perf_counter() - overall_start

    print(f"\n{'=' * 70}")
    print("STOREFRONT CURATION - BENCHMARK REPORT")
    print(f"{'=' * 70}")
    print(f"Total requests: {total_requests} | Concurrency: {concurrency}")
    print(f"Total time: {overall_duration:.2f}s | RPS: {total_requests / overall_duration:.1f}")
    print(f"{'=' * 70}\n")

    for label, latencies in results.items():
        if not latencies:
            print(f"{label}: No successful requests (errors: {errors[label]})")
            continue
        sorted_lat = sorted(latencies)
        p95_idx = min(int(len(sorted_lat) * 0.95), len(sorted_lat) - 1)
        print(label)
        print(f"  Requests : {len(latencies)} OK, {errors[label]} errors")
        print(f"  Avg      : {statistics.mean(latencies) * 1000:.1f}ms")
        print(f"  P50      : {statistics.median(latencies) * 1000:.1f}ms")
        print(f"  P95      : {sorted_lat[p95_idx] * 1000:.1f}ms")
        print()


def main() -> None:
    parser = argparse.ArgumentParser(description="Benchmark the storefront curation API")
    parser.add_argument("--base-url", default="http://localhost:8000")
    parser.add_argument("--concurrency", type=int, default=10)
    parser.add_argument("--requests", type=int, default=120)
    args = parser.parse_args()

    asyncio.run(run_benchmark(args.base_url, args.concurrency, args.requests))


if __name__ == "__main__":
    main()
