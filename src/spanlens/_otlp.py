"""OTLP decoder: converts OTLP trace protobufs into Span records."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from google.protobuf.message import DecodeError
from opentelemetry.proto.collector.trace.v1.trace_service_pb2 import (
    ExportTraceServiceRequest,
)
from opentelemetry.proto.common.v1.common_pb2 import AnyValue, KeyValue
from opentelemetry.proto.trace.v1.trace_pb2 import (
    ResourceSpans,
    TracesData,
)
from opentelemetry.proto.trace.v1.trace_pb2 import (
    Span as OtlpSpan,
)
from opentelemetry.proto.trace.v1.trace_pb2 import (
    Status as OtlpStatus,
)

from spanlens._types import AttributePair, Span, SpanEvent, SpanKind, SpanLink, SpanStatus

logger = logging.getLogger("spanlens.otlp")

_KIND_MAP: dict[int, SpanKind] = {
    OtlpSpan.SPAN_KIND_INTERNAL: SpanKind.INTERNAL,
    OtlpSpan.SPAN_KIND_SERVER: SpanKind.SERVER,
    OtlpSpan.SPAN_KIND_CLIENT: SpanKind.CLIENT,
    OtlpSpan.SPAN_KIND_PRODUCER: SpanKind.PRODUCER,
    OtlpSpan.SPAN_KIND_CONSUMER: SpanKind.CONSUMER,
}

# Named statuses: the numeric OTLP codes do not match the "0"=ok/"2"=error aliases.
_STATUS_MAP: dict[int, SpanStatus] = {
    OtlpStatus.STATUS_CODE_UNSET: SpanStatus.UNSET,
    OtlpStatus.STATUS_CODE_OK: SpanStatus.OK,
    OtlpStatus.STATUS_CODE_ERROR: SpanStatus.ERROR,
}


class TraceDecodeError(ValueError):
    """Raised when a payload is not a valid OTLP trace message."""


def _any_value_to_python(value: AnyValue) -> Any:
    """Convert an OTLP AnyValue protobuf to a plain Python value."""
    which = value.WhichOneof("value")
    if which is None:
        return None
    if which == "array_value":
        return [_any_value_to_python(v) for v in value.array_value.values]
    if which == "kvlist_value":
        return {kv.key: _any_value_to_python(kv.value) for kv in value.kvlist_value.values}
    return getattr(value, which)


def _attribute_pairs(attributes: Iterable[KeyValue]) -> tuple[AttributePair, ...]:
    """Keep wire order and duplicate keys."""
    return tuple((kv.key, _any_value_to_python(kv.value)) for kv in attributes)


def _hex_id(raw: bytes) -> str | None:
    return raw.hex() if raw else None


def _otlp_to_span(
    otlp: OtlpSpan,
    resource: dict[str, Any],
    scope_name: str | None,
    scope_version: str | None,
) -> Span:
    """Convert a single OTLP Span protobuf to a Span record."""
    kind = _KIND_MAP.get(otlp.kind)
    return Span(
        trace_id=otlp.trace_id.hex(),
        span_id=otlp.span_id.hex(),
        parent_span_id=_hex_id(otlp.parent_span_id),
        name=otlp.name,
        start_time=otlp.start_time_unix_nano,
        end_time=otlp.end_time_unix_nano,
        status=_STATUS_MAP.get(otlp.status.code, SpanStatus.UNSET).value,
        attributes=_attribute_pairs(otlp.attributes),
        events=tuple(
            SpanEvent(
                name=ev.name,
                timestamp=ev.time_unix_nano,
                attributes=_attribute_pairs(ev.attributes),
            )
            for ev in otlp.events
        ),
        links=tuple(
            SpanLink(
                trace_id=link.trace_id.hex(),
                span_id=link.span_id.hex(),
                attributes=_attribute_pairs(link.attributes),
            )
            for link in otlp.links
        ),
        resource=resource,
        flags=otlp.flags,
        kind=kind.value if kind is not None else None,
        instrumentation_scope_name=scope_name,
        instrumentation_scope_version=scope_version,
    )


def _resource_spans_to_spans(resource_spans: Iterable[ResourceSpans]) -> list[Span]:
    spans: list[Span] = []
    for rs in resource_spans:
        resource = dict(_attribute_pairs(rs.resource.attributes))
        for ss in rs.scope_spans:
            scope_name = ss.scope.name or None
            scope_version = ss.scope.version or None
            for otlp in ss.spans:
                spans.append(_otlp_to_span(otlp, dict(resource), scope_name, scope_version))
    return spans


def spans_from_otlp(
    payload: bytes | ExportTraceServiceRequest | TracesData,
) -> list[Span]:
    """Decode an OTLP trace export into flat Span records.

    Accepts a serialized ``ExportTraceServiceRequest`` or an already parsed
    ``ExportTraceServiceRequest``/``TracesData`` message. Resource attributes
    (including ``service.name``) land in each span's ``resource``.
    """
    if isinstance(payload, (bytes, bytearray, memoryview)):
        request = ExportTraceServiceRequest()
        try:
            request.ParseFromString(bytes(payload))
        except DecodeError as exc:
            logger.debug("Failed to decode %d byte OTLP payload", len(payload), exc_info=True)
            raise TraceDecodeError("payload is not an OTLP trace export") from exc
        return _resource_spans_to_spans(request.resource_spans)
    return _resource_spans_to_spans(payload.resource_spans)
