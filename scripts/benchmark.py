import time
import json
import statistics
from typing import Tuple
import requests


API_BASE = "http://localhost:8000"


def time_request(method: str, path: str, **kwargs) -> Tuple[float, int, dict]:
    url = f"{API_BASE}{path}"
    start = time.perf_counter()
    resp = requests.request(method, url, timeout=120, **kwargs)
    elapsed = (time.perf_counter() - start) * 1000.0
    payload = {}
    try:
        payload = resp.json()
    except ValueError:
        payload = {"text": resp.text[:2000]}
    return elapsed, resp.status_code, payload


def bench_endpoint(label: str, method: str, path: str, iterations: int, **kwargs) -> dict:
    latencies = []
    source_counts = []
    for i in range(iterations):
        ms, code, payload = time_request(method, path, **kwargs)
        print(f"{label} {i+1}/{iterations}: {ms:.1f} ms (HTTP {code})")
        latencies.append(ms)
        source_counts.append(len(payload.get("sources", [])))
    p50 = statistics.median(latencies)
    p95 = statistics.quantiles(latencies, n=20)[18] if len(latencies) >= 2 else latencies[-1]
    return {
        "endpoint": path,
        "iterations": iterations,
        "p50_ms": p50,
        "p95_ms": p95,
        "avg_sources": statistics.mean(source_counts),
        "samples": latencies,
    }


def bench_query(iterations=5):
    return bench_endpoint(
        "Query",
        "POST",
        "/rag/query",
        iterations,
        json={"question": "UMKM apa saja yang menjual produk makanan di Bandung?"},
    )


# Insights prompts are long, keep the sample small
def bench_insights(iterations=2):
    return bench_endpoint("Insights", "GET", "/rag/insights", iterations)


def main():
    print("Checking health...")
    ms, code, health = time_request("GET", "/health")
    print(f"Health: {code} in {ms:.1f} ms -> {health.get('status')}")

    print("Checking status...")
    ms, code, status = time_request("GET", "/status")
    print(f"Status: {code} in {ms:.1f} ms -> ready={status.get('system_ready')}")

    print("Benchmarking /rag/query...")
    results = [bench_query()]

    print("Benchmarking /rag/insights...")
    results.append(bench_insights())

    print("\nResults:")
    print(json.dumps(results, indent=2))


if __name__ == "__main__":
    main()
