"""Waterfall builder: positioned, depth-annotated, time-ordered spans of one trace."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import replace
from types import MappingProxyType

from spanlens._attributes import attributes_to_dict, normalize_status
from spanlens._depth import resolve_depths, walk_tree
from spanlens._service import explicit_service_name, resource_service_name
from spanlens._timestamps import calculate_duration_ms, to_ms
from spanlens._types import Span, SpanEvent, SpanTreeNode, VisualizationSpan, WaterfallData

logger = logging.getLogger("spanlens.waterfall")


def _normalize_event(event: SpanEvent) -> SpanEvent:
    return replace(event, timestamp=to_ms(event.timestamp))


def _to_visualization_span(
    span: Span,
    *,
    depth: int,
    parent_span_id: str | None,
    min_start_ms: float,
    total_duration_ms: float,
) -> VisualizationSpan:
    start_ms = to_ms(span.start_time)
    duration_ms = calculate_duration_ms(span.start_time, span.end_time)
    if total_duration_ms > 0:
        start_percent = (start_ms - min_start_ms) / total_duration_ms * 100
        width_percent = duration_ms / total_duration_ms * 100
    else:
        start_percent = 0.0
        width_percent = 100.0

    return VisualizationSpan(
        trace_id=span.trace_id,
        span_id=span.span_id,
        name=span.name,
        parent_span_id=parent_span_id,
        start_time_ms=start_ms,
        end_time_ms=to_ms(span.end_time),
        duration_ms=duration_ms,
        status=normalize_status(span.status),
        depth=depth,
        start_percent=start_percent,
        width_percent=width_percent,
        attributes=MappingProxyType(attributes_to_dict(span.attributes)),
        attribute_pairs=tuple(span.attributes),
        events=tuple(_normalize_event(ev) for ev in span.events),
        links=tuple(span.links),
        service_name=explicit_service_name(span) or resource_service_name(span),
        resource=MappingProxyType(dict(span.resource or {})),
        flags=span.flags,
        kind=span.kind,
        instrumentation_scope_name=span.instrumentation_scope_name,
        instrumentation_scope_version=span.instrumentation_scope_version,
    )


def _build(
    entries: Sequence[tuple[Span, int, str | None]],
) -> WaterfallData:
    """Position ``(span, depth, parent_span_id)`` entries against the shared trace window."""
    min_start_ms = min(to_ms(span.start_time) for span, _, _ in entries)
    max_end_ms = max(to_ms(span.end_time) for span, _, _ in entries)
    total_duration_ms = max(0.0, max_end_ms - min_start_ms)

    visual = [
        _to_visualization_span(
            span,
            depth=depth,
            parent_span_id=parent_span_id,
            min_start_ms=min_start_ms,
            total_duration_ms=total_duration_ms,
        )
        for span, depth, parent_span_id in entries
    ]
    # list.sort is stable: equal (start, depth) keep input order
    visual.sort(key=lambda vs: (vs.start_time_ms, vs.depth))

    return WaterfallData(
        spans=tuple(visual),
        total_duration_ms=total_duration_ms,
        span_count=len(visual),
    )


def build_waterfall(
    spans: Sequence[Span],
    trace_id: str | None = None,
) -> WaterfallData | None:
    """Build waterfall data from a flat span collection.

    When ``trace_id`` is given only spans of that trace are used. Returns
    ``None`` when there is nothing to show.
    """
    trace_spans = [s for s in spans if trace_id is None or s.trace_id == trace_id]
    if not trace_spans:
        logger.debug("No spans for trace %s", trace_id)
        return None

    depths = resolve_depths(trace_spans)
    return _build([(s, depths.get(s.span_id, 0), s.parent_span_id) for s in trace_spans])


def build_waterfall_from_tree(roots: Sequence[SpanTreeNode]) -> WaterfallData | None:
    """Build waterfall data from pre-nested span trees.

    Depth is the nesting level. A node without ``parent_span_id`` reports
    the id of the node it is nested under.
    """
    if not roots:
        return None
    walked = walk_tree(roots)
    if not walked:
        return None

    return _build([
        (
            node,
            depth,
            node.parent_span_id or (parent.span_id if parent is not None else None),
        )
        for node, depth, parent in walked
    ])
