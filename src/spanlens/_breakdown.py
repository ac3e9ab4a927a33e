"""Per-service time breakdown and span latency percentiles for one trace."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

from spanlens._colors import get_service_color
from spanlens._config import DEFAULT_CONFIG, TraceViewConfig
from spanlens._service import resolve_service_name
from spanlens._service_graph import _ServiceTotals
from spanlens._types import SpanStatus, WaterfallData


@dataclass(frozen=True)
class ServiceStats:
    """Aggregate time spent in one service."""

    name: str
    color: str
    span_count: int
    total_duration_ms: float
    error_count: int
    percentage: float


@dataclass(frozen=True)
class DurationPercentiles:
    p50: float
    p95: float
    p99: float
    max: float


@dataclass(frozen=True)
class ServiceBreakdown:
    services: tuple[ServiceStats, ...]
    percentiles: DurationPercentiles


def percentile(values: Sequence[float], pct: float) -> float:
    """Nearest-rank percentile; 0 for an empty sequence."""
    if not values:
        return 0.0
    ordered = sorted(values)
    index = math.ceil((pct / 100) * len(ordered)) - 1
    return ordered[max(0, index)]


def service_breakdown(
    data: WaterfallData,
    config: TraceViewConfig | None = None,
) -> ServiceBreakdown:
    """Summarize where the trace's time went, busiest service first.

    ``percentage`` is a service's summed span time relative to the trace
    duration; summed time can exceed the trace when spans overlap, so
    percentages are not expected to add up to 100.
    """
    config = config or DEFAULT_CONFIG
    totals: dict[str, _ServiceTotals] = {}
    durations: list[float] = []

    for span in data.spans:
        name = resolve_service_name(span, fallback=config.unknown_service)
        duration_ms = span.duration_ms
        if math.isfinite(duration_ms):
            durations.append(duration_ms)
        else:
            duration_ms = 0.0

        entry = totals.setdefault(name, _ServiceTotals())
        entry.span_count += 1
        entry.total_duration_ms += duration_ms
        if span.status is SpanStatus.ERROR:
            entry.error_count += 1

    trace_ms = data.total_duration_ms
    stats = [
        ServiceStats(
            name=name,
            color=get_service_color(name),
            span_count=entry.span_count,
            total_duration_ms=entry.total_duration_ms,
            error_count=entry.error_count,
            percentage=(entry.total_duration_ms / trace_ms * 100) if trace_ms > 0 else 0.0,
        )
        for name, entry in totals.items()
    ]
    stats.sort(key=lambda s: s.total_duration_ms, reverse=True)

    return ServiceBreakdown(
        services=tuple(stats),
        percentiles=DurationPercentiles(
            p50=percentile(durations, 50),
            p95=percentile(durations, 95),
            p99=percentile(durations, 99),
            max=max(durations, default=0.0),
        ),
    )
