"""Core types: enums, input span records, and derived visualization structures."""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

AttributePair = tuple[str, Any]


class SpanKind(enum.Enum):
    """Type of span operation."""

    INTERNAL = "internal"
    SERVER = "server"
    CLIENT = "client"
    PRODUCER = "producer"
    CONSUMER = "consumer"


class SpanStatus(enum.Enum):
    """Normalized status of a span."""

    UNSET = "unset"
    OK = "ok"
    ERROR = "error"


@dataclass(frozen=True)
class SpanEvent:
    """A named, timestamped record inside a span."""

    name: str
    timestamp: int | float
    attributes: tuple[AttributePair, ...] = ()


@dataclass(frozen=True)
class SpanLink:
    """A reference from one span to a span in the same or another trace."""

    trace_id: str
    span_id: str
    attributes: tuple[AttributePair, ...] = ()


@dataclass(frozen=True)
class Span:
    """Immutable raw span record as delivered by trace storage.

    ``start_time``/``end_time`` are raw numbers of ambiguous unit (nanoseconds
    or milliseconds) and ``attributes`` keeps wire order, duplicate keys
    included.
    """

    trace_id: str
    span_id: str
    name: str
    start_time: int | float
    end_time: int | float
    parent_span_id: str | None = None
    status: str = ""
    attributes: tuple[AttributePair, ...] = ()
    events: tuple[SpanEvent, ...] = ()
    links: tuple[SpanLink, ...] = ()
    service_name: str | None = None
    resource: Mapping[str, Any] = field(default_factory=dict)
    flags: int | None = None
    kind: str | None = None
    instrumentation_scope_name: str | None = None
    instrumentation_scope_version: str | None = None


@dataclass(frozen=True)
class SpanTreeNode(Span):
    """A span already nested under its parent by the storage layer."""

    children: tuple[SpanTreeNode, ...] = ()

    def to_span(self, parent_span_id: str | None = None) -> Span:
        """Return the flat record, optionally overriding the parent reference."""
        return Span(
            trace_id=self.trace_id,
            span_id=self.span_id,
            name=self.name,
            start_time=self.start_time,
            end_time=self.end_time,
            parent_span_id=parent_span_id if parent_span_id is not None else self.parent_span_id,
            status=self.status,
            attributes=self.attributes,
            events=self.events,
            links=self.links,
            service_name=self.service_name,
            resource=self.resource,
            flags=self.flags,
            kind=self.kind,
            instrumentation_scope_name=self.instrumentation_scope_name,
            instrumentation_scope_version=self.instrumentation_scope_version,
        )


@dataclass(frozen=True)
class VisualizationSpan:
    """Span positioned inside its trace, ready for waterfall rendering.

    All times are milliseconds, event timestamps included. ``attributes`` and
    ``resource`` are read-only views and take no part in hashing.
    """

    trace_id: str
    span_id: str
    name: str
    parent_span_id: str | None
    start_time_ms: float
    end_time_ms: float
    duration_ms: float
    status: SpanStatus
    depth: int
    start_percent: float
    width_percent: float
    attributes: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}), hash=False)
    attribute_pairs: tuple[AttributePair, ...] = ()
    events: tuple[SpanEvent, ...] = ()
    links: tuple[SpanLink, ...] = ()
    service_name: str | None = None
    resource: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}), hash=False)
    flags: int | None = None
    kind: str | None = None
    instrumentation_scope_name: str | None = None
    instrumentation_scope_version: str | None = None


@dataclass(frozen=True)
class WaterfallData:
    """Sorted visualization spans of one trace and the shared trace window."""

    spans: tuple[VisualizationSpan, ...]
    total_duration_ms: float
    span_count: int


@dataclass(frozen=True)
class ServiceNode:
    """A service in the call graph with aggregate stats and layout position."""

    id: str
    name: str
    span_count: int
    total_duration_ms: float
    error_count: int
    x: float
    y: float
    color: str


@dataclass(frozen=True)
class ServiceEdge:
    """Directed caller -> callee edge between two services."""

    from_service: str
    to_service: str
    call_count: int
    total_duration_ms: float


@dataclass(frozen=True)
class ServiceGraph:
    nodes: tuple[ServiceNode, ...]
    edges: tuple[ServiceEdge, ...]


@dataclass(frozen=True)
class SpanContext:
    """Parent, direct children and approximate self time of one span."""

    span: Span | VisualizationSpan
    parent: Span | VisualizationSpan | None
    children: tuple[Span | VisualizationSpan, ...]
    child_duration_ms: float
    self_time_ms: float


@dataclass(frozen=True)
class ErrorDetails:
    """Error type, message and stack trace recorded on a failed span."""

    type: str | None = None
    message: str | None = None
    stacktrace: str | None = None
