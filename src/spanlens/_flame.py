"""Flame graph nodes built from waterfall data."""

from __future__ import annotations

from dataclasses import dataclass, field

from spanlens._types import VisualizationSpan, WaterfallData


@dataclass
class FlameNode:
    """A waterfall span linked to its children, with self time."""

    span: VisualizationSpan
    children: list[FlameNode] = field(default_factory=list)
    self_time_ms: float = 0.0

    @property
    def x(self) -> float:
        return self.span.start_percent

    @property
    def width(self) -> float:
        return self.span.width_percent

    @property
    def depth(self) -> int:
        return self.span.depth


def build_flame_graph(data: WaterfallData) -> list[FlameNode]:
    """Link waterfall spans into trees and return the roots.

    Spans whose parent is not in the waterfall become roots. Children keep
    waterfall order. Self time follows the span-context rule: duration minus
    the summed durations of direct children, floored at 0.
    """
    pairs = [(span, FlameNode(span=span, self_time_ms=span.duration_ms)) for span in data.spans]
    nodes = {span.span_id: node for span, node in pairs}

    roots: list[FlameNode] = []
    for span, node in pairs:
        parent = nodes.get(span.parent_span_id) if span.parent_span_id else None
        if parent is not None and parent is not node:
            parent.children.append(node)
        else:
            roots.append(node)

    for _, node in pairs:
        children_ms = sum(child.span.duration_ms for child in node.children)
        node.self_time_ms = max(0.0, node.span.duration_ms - children_ms)

    return roots


def flatten_flame_graph(roots: list[FlameNode]) -> list[FlameNode]:
    """Pre-order listing of every node reachable from ``roots``."""
    result: list[FlameNode] = []
    stack = list(reversed(roots))
    while stack:
        node = stack.pop()
        result.append(node)
        stack.extend(reversed(node.children))
    return result
