"""Span context: parent, direct children and approximate self time."""

from __future__ import annotations

from collections.abc import Sequence

from spanlens._timestamps import calculate_duration_ms
from spanlens._types import Span, SpanContext, VisualizationSpan

AnySpan = Span | VisualizationSpan


def span_duration_ms(span: AnySpan) -> float:
    """Normalized duration of a raw or visualization span."""
    if isinstance(span, VisualizationSpan):
        return span.duration_ms
    return calculate_duration_ms(span.start_time, span.end_time)


def span_context(span: AnySpan, spans: Sequence[AnySpan]) -> SpanContext:
    """Resolve ``span``'s parent and children within ``spans`` and its self time.

    Self time is the span's duration minus the summed durations of its direct
    children, floored at 0. Children that run concurrently are each counted
    in full, so a span that fans out in parallel usually reports 0 even when
    it did exclusive work of its own.
    """
    parent = None
    if span.parent_span_id:
        parent = next((s for s in spans if s.span_id == span.parent_span_id), None)

    children = tuple(
        s for s in spans if s.parent_span_id == span.span_id and s.span_id != span.span_id
    )
    child_duration_ms = sum(span_duration_ms(c) for c in children)

    return SpanContext(
        span=span,
        parent=parent,
        children=children,
        child_duration_ms=child_duration_ms,
        self_time_ms=max(0.0, span_duration_ms(span) - child_duration_ms),
    )


def self_times(spans: Sequence[AnySpan]) -> dict[str, float]:
    """Self time of every span, keyed by span id, using the same approximation."""
    child_totals: dict[str, float] = {}
    for s in spans:
        if s.parent_span_id and s.parent_span_id != s.span_id:
            child_totals[s.parent_span_id] = (
                child_totals.get(s.parent_span_id, 0.0) + span_duration_ms(s)
            )
    return {
        s.span_id: max(0.0, span_duration_ms(s) - child_totals.get(s.span_id, 0.0))
        for s in spans
    }
