#!/usr/bin/env python3
"""Transform throughput benchmark.

Measures the cost of:
  1. build_waterfall      (depth resolution + positioning + sort)
  2. build_service_graph  (per-service totals + edges + layout)
  3. self_times           (parent/child index over a waterfall)

Target: a 1,000-span trace transforms in well under a frame (16ms).

Usage:
    uv run python benchmarks/bench_transform.py
"""

from __future__ import annotations

import time

from spanlens._service_graph import build_service_graph
from spanlens._span_context import self_times
from spanlens._types import Span
from spanlens._waterfall import build_waterfall

BASE_NS = 1_700_000_000_000_000_000


def make_trace(span_count: int = 1000, fanout: int = 4, services: int = 8) -> list[Span]:
    """A balanced call tree with ``fanout`` children per span."""
    spans: list[Span] = []
    for i in range(span_count):
        parent = f"s{(i - 1) // fanout}" if i else None
        spans.append(Span(
            trace_id="bench",
            span_id=f"s{i}",
            parent_span_id=parent,
            name=f"op-{i % 17}",
            start_time=BASE_NS + i * 1_000_000,
            end_time=BASE_NS + i * 1_000_000 + 5_000_000,
            status="error" if i % 50 == 0 else "ok",
            service_name=f"svc-{i % services}",
        ))
    return spans


def bench_waterfall(spans: list[Span], iterations: int = 200) -> float:
    # Warmup
    for _ in range(10):
        build_waterfall(spans)

    start = time.perf_counter_ns()
    for _ in range(iterations):
        build_waterfall(spans)
    elapsed = time.perf_counter_ns() - start

    return elapsed / iterations


def bench_service_graph(spans: list[Span], iterations: int = 200) -> float:
    for _ in range(10):
        build_service_graph(spans)

    start = time.perf_counter_ns()
    for _ in range(iterations):
        build_service_graph(spans)
    elapsed = time.perf_counter_ns() - start

    return elapsed / iterations


def bench_self_times(spans: list[Span], iterations: int = 200) -> float:
    data = build_waterfall(spans)
    assert data is not None
    for _ in range(10):
        self_times(data.spans)

    start = time.perf_counter_ns()
    for _ in range(iterations):
        self_times(data.spans)
    elapsed = time.perf_counter_ns() - start

    return elapsed / iterations


def main() -> None:
    print("=" * 60)
    print("Spanlens Transform Benchmark (1,000 spans)")
    print("=" * 60)

    spans = make_trace()
    results: list[tuple[str, float, str]] = []

    ns = bench_waterfall(spans)
    status = "PASS" if ns < 16_000_000 else "WARN" if ns < 50_000_000 else "FAIL"
    results.append(("build_waterfall", ns, f"{status} (target < 16ms)"))

    ns = bench_service_graph(spans)
    status = "PASS" if ns < 16_000_000 else "WARN" if ns < 50_000_000 else "FAIL"
    results.append(("build_service_graph", ns, f"{status} (target < 16ms)"))

    ns = bench_self_times(spans)
    status = "PASS" if ns < 5_000_000 else "WARN" if ns < 20_000_000 else "FAIL"
    results.append(("self_times", ns, f"{status} (target < 5ms)"))

    print()
    for name, ns_val, note in results:
        if ns_val >= 1_000_000:
            display = f"{ns_val / 1_000_000:.2f}ms"
        else:
            display = f"{ns_val / 1000:.0f}μs"
        print(f"  {name:40s}  {display:>10s}   {note}")

    print()
    all_pass = all("PASS" in r[2] or "WARN" in r[2] for r in results)
    if all_pass:
        print("All benchmarks within acceptable range.")
    else:
        print("WARNING: Some benchmarks exceeded target. Review above.")


if __name__ == "__main__":
    main()
