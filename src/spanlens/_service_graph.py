"""Service graph builder: services as nodes, cross-service calls as edges."""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass

from spanlens._attributes import normalize_status
from spanlens._colors import get_service_color
from spanlens._config import DEFAULT_CONFIG, TraceViewConfig
from spanlens._depth import flatten_tree
from spanlens._service import resolve_service_name
from spanlens._timestamps import calculate_duration_ms
from spanlens._types import (
    ServiceEdge,
    ServiceGraph,
    ServiceNode,
    Span,
    SpanStatus,
    SpanTreeNode,
)

logger = logging.getLogger("spanlens.service_graph")


@dataclass
class _ServiceTotals:
    span_count: int = 0
    total_duration_ms: float = 0.0
    error_count: int = 0


@dataclass
class _EdgeTotals:
    call_count: int = 0
    total_duration_ms: float = 0.0


def layout_radius(service_count: int, config: TraceViewConfig = DEFAULT_CONFIG) -> float:
    """Circle radius for ``service_count`` nodes, capped at ``config.max_radius``."""
    return min(config.max_radius, config.base_radius + service_count * config.radius_step)


def circular_layout(
    count: int,
    config: TraceViewConfig = DEFAULT_CONFIG,
) -> list[tuple[float, float]]:
    """Evenly spaced positions on a circle, first position at twelve o'clock."""
    radius = layout_radius(count, config)
    positions: list[tuple[float, float]] = []
    for i in range(count):
        angle = (i / count) * 2 * math.pi - math.pi / 2
        positions.append((
            config.center_x + radius * math.cos(angle),
            config.center_y + radius * math.sin(angle),
        ))
    return positions


def build_service_graph(
    spans: Sequence[Span],
    config: TraceViewConfig | None = None,
) -> ServiceGraph:
    """Aggregate one trace's spans into a service call graph.

    Nodes keep the order in which services are first seen, which also fixes
    their layout positions. An edge ``A -> B`` is recorded for every span in
    service B whose parent span (present in ``spans``) belongs to service A;
    relations inside one service produce no edge.
    """
    config = config or DEFAULT_CONFIG

    services: dict[str, _ServiceTotals] = {}
    service_of: dict[str, str] = {}
    labels: list[str] = []
    durations: list[float] = []

    for span in spans:
        service = resolve_service_name(span, fallback=config.unknown_service)
        duration_ms = calculate_duration_ms(span.start_time, span.end_time)
        labels.append(service)
        durations.append(duration_ms)
        service_of[span.span_id] = service

        totals = services.setdefault(service, _ServiceTotals())
        totals.span_count += 1
        totals.total_duration_ms += duration_ms
        if normalize_status(span.status) is SpanStatus.ERROR:
            totals.error_count += 1

    edges: dict[tuple[str, str], _EdgeTotals] = {}
    for span, child_service, duration_ms in zip(spans, labels, durations):
        if not span.parent_span_id:
            continue
        parent_service = service_of.get(span.parent_span_id)
        if parent_service is None:
            logger.debug(
                "Span %s references missing parent %s", span.span_id, span.parent_span_id
            )
            continue
        if parent_service == child_service:
            continue

        edge = edges.setdefault((parent_service, child_service), _EdgeTotals())
        edge.call_count += 1
        edge.total_duration_ms += duration_ms

    positions = circular_layout(len(services), config)
    nodes = tuple(
        ServiceNode(
            id=name,
            name=name,
            span_count=totals.span_count,
            total_duration_ms=totals.total_duration_ms,
            error_count=totals.error_count,
            x=x,
            y=y,
            color=get_service_color(name),
        )
        for (name, totals), (x, y) in zip(services.items(), positions)
    )
    return ServiceGraph(
        nodes=nodes,
        edges=tuple(
            ServiceEdge(
                from_service=source,
                to_service=target,
                call_count=totals.call_count,
                total_duration_ms=totals.total_duration_ms,
            )
            for (source, target), totals in edges.items()
        ),
    )


def build_service_graph_from_tree(
    roots: Sequence[SpanTreeNode],
    config: TraceViewConfig | None = None,
) -> ServiceGraph:
    """Flatten span trees (keeping parent links) and build the service graph."""
    return build_service_graph(flatten_tree(roots), config)
