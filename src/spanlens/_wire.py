"""JSON wire adapters for trace query responses.

Span dictionaries use the storage API field names (``start_time_unix_nano``,
``end_time_unix_nano``, attributes as ``[key, value]`` pairs). Missing or
malformed fields fall back to neutral defaults rather than raising.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from spanlens._types import AttributePair, Span, SpanEvent, SpanLink, SpanTreeNode


def _pairs(raw: Any) -> tuple[AttributePair, ...]:
    if isinstance(raw, Mapping):
        return tuple((str(k), v) for k, v in raw.items())
    if not isinstance(raw, (list, tuple)):
        return ()
    return tuple(
        (item[0], item[1])
        for item in raw
        if isinstance(item, (list, tuple)) and len(item) >= 2 and isinstance(item[0], str)
    )


def _str_or_none(raw: Any) -> str | None:
    return raw if isinstance(raw, str) and raw else None


def _int_or_none(raw: Any) -> int | None:
    return raw if isinstance(raw, int) and not isinstance(raw, bool) else None


def _events(raw: Any) -> tuple[SpanEvent, ...]:
    if not isinstance(raw, (list, tuple)):
        return ()
    return tuple(
        SpanEvent(
            name=str(ev.get("name", "")),
            timestamp=ev.get("timestamp", 0),
            attributes=_pairs(ev.get("attributes")),
        )
        for ev in raw
        if isinstance(ev, Mapping)
    )


def _links(raw: Any) -> tuple[SpanLink, ...]:
    if not isinstance(raw, (list, tuple)):
        return ()
    return tuple(
        SpanLink(
            trace_id=str(link.get("trace_id", "")),
            span_id=str(link.get("span_id", "")),
            attributes=_pairs(link.get("attributes")),
        )
        for link in raw
        if isinstance(link, Mapping)
    )


def _span_fields(raw: Mapping[str, Any]) -> dict[str, Any]:
    resource = raw.get("resource")
    status = raw.get("status")
    return {
        "trace_id": str(raw.get("trace_id", "")),
        "span_id": str(raw.get("span_id", "")),
        "parent_span_id": _str_or_none(raw.get("parent_span_id")),
        "name": str(raw.get("name", "")),
        "start_time": raw.get("start_time_unix_nano", 0),
        "end_time": raw.get("end_time_unix_nano", 0),
        "status": "" if status is None else str(status),
        "attributes": _pairs(raw.get("attributes")),
        "events": _events(raw.get("events")),
        "links": _links(raw.get("links")),
        "service_name": _str_or_none(raw.get("service_name")),
        "resource": dict(resource) if isinstance(resource, Mapping) else {},
        "flags": _int_or_none(raw.get("flags")),
        "kind": _str_or_none(raw.get("kind")),
    }


def span_from_dict(raw: Mapping[str, Any]) -> Span:
    """Build a Span from one stored-span JSON object."""
    return Span(**_span_fields(raw))


def tree_node_from_dict(raw: Mapping[str, Any]) -> SpanTreeNode:
    """Build a SpanTreeNode (and its nested children) from a tree JSON object."""
    children = raw.get("children")
    if not isinstance(children, (list, tuple)):
        children = []
    return SpanTreeNode(
        **_span_fields(raw),
        children=tuple(tree_node_from_dict(c) for c in children if isinstance(c, Mapping)),
    )


def spans_from_response(payload: Mapping[str, Any]) -> list[Span]:
    """Spans of a ``{"spans": [...]}`` traces query response."""
    raw_spans = payload.get("spans")
    if not isinstance(raw_spans, (list, tuple)):
        return []
    return [span_from_dict(s) for s in raw_spans if isinstance(s, Mapping)]


def tree_from_response(payload: Mapping[str, Any]) -> list[SpanTreeNode]:
    """Root nodes of a ``{"roots": [...]}`` trace tree response."""
    roots = payload.get("roots")
    if not isinstance(roots, (list, tuple)):
        return []
    return [tree_node_from_dict(r) for r in roots if isinstance(r, Mapping)]
