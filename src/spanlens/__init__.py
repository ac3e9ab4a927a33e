"""Spanlens: trace analytics transforms for distributed-tracing visualizations."""

from __future__ import annotations

from spanlens._attributes import attributes_to_dict, normalize_status
from spanlens._breakdown import (
    DurationPercentiles,
    ServiceBreakdown,
    ServiceStats,
    percentile,
    service_breakdown,
)
from spanlens._colors import (
    SERVICE_COLORS,
    SPAN_STATUS_COLORS,
    get_service_color,
    get_span_status_color,
)
from spanlens._config import DEFAULT_CONFIG, TraceViewConfig
from spanlens._depth import flatten_tree, resolve_depths, walk_tree
from spanlens._errors import error_details
from spanlens._flame import FlameNode, build_flame_graph, flatten_flame_graph
from spanlens._format import format_duration
from spanlens._otlp import TraceDecodeError, spans_from_otlp
from spanlens._service import (
    SERVICE_NAME_STRATEGIES,
    resolve_service_name,
)
from spanlens._service_graph import (
    build_service_graph,
    build_service_graph_from_tree,
    circular_layout,
)
from spanlens._span_context import self_times, span_context
from spanlens._timestamps import NANO_THRESHOLD, calculate_duration_ms, nano_to_ms, to_ms
from spanlens._types import (
    ErrorDetails,
    ServiceEdge,
    ServiceGraph,
    ServiceNode,
    Span,
    SpanContext,
    SpanEvent,
    SpanKind,
    SpanLink,
    SpanStatus,
    SpanTreeNode,
    VisualizationSpan,
    WaterfallData,
)
from spanlens._waterfall import build_waterfall, build_waterfall_from_tree
from spanlens._wire import (
    span_from_dict,
    spans_from_response,
    tree_from_response,
    tree_node_from_dict,
)

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_CONFIG",
    "NANO_THRESHOLD",
    "SERVICE_COLORS",
    "SERVICE_NAME_STRATEGIES",
    "SPAN_STATUS_COLORS",
    "DurationPercentiles",
    "ErrorDetails",
    "FlameNode",
    "ServiceBreakdown",
    "ServiceEdge",
    "ServiceGraph",
    "ServiceNode",
    "ServiceStats",
    "Span",
    "SpanContext",
    "SpanEvent",
    "SpanKind",
    "SpanLink",
    "SpanStatus",
    "SpanTreeNode",
    "TraceDecodeError",
    "TraceViewConfig",
    "VisualizationSpan",
    "WaterfallData",
    "__version__",
    "attributes_to_dict",
    "build_flame_graph",
    "build_service_graph",
    "build_service_graph_from_tree",
    "build_waterfall",
    "build_waterfall_from_tree",
    "calculate_duration_ms",
    "circular_layout",
    "error_details",
    "flatten_flame_graph",
    "flatten_tree",
    "format_duration",
    "get_service_color",
    "get_span_status_color",
    "nano_to_ms",
    "normalize_status",
    "percentile",
    "resolve_depths",
    "resolve_service_name",
    "self_times",
    "service_breakdown",
    "span_context",
    "span_from_dict",
    "spans_from_otlp",
    "spans_from_response",
    "to_ms",
    "tree_from_response",
    "tree_node_from_dict",
    "walk_tree",
]
