"""Tests for the OTLP decoder."""

from __future__ import annotations

import pytest
from opentelemetry.proto.collector.trace.v1.trace_service_pb2 import (
    ExportTraceServiceRequest,
)
from opentelemetry.proto.common.v1.common_pb2 import (
    AnyValue,
    ArrayValue,
    InstrumentationScope,
    KeyValue,
    KeyValueList,
)
from opentelemetry.proto.resource.v1.resource_pb2 import Resource
from opentelemetry.proto.trace.v1.trace_pb2 import (
    ResourceSpans,
    ScopeSpans,
    TracesData,
)
from opentelemetry.proto.trace.v1.trace_pb2 import Span as OtlpSpan
from opentelemetry.proto.trace.v1.trace_pb2 import Status as OtlpStatus

from spanlens._otlp import TraceDecodeError, _any_value_to_python, spans_from_otlp
from spanlens._service_graph import build_service_graph
from spanlens._types import SpanKind
from spanlens._waterfall import build_waterfall

TRACE_ID = "0123456789abcdef0123456789abcdef"
ROOT_ID = "abcdef0123456789"
CHILD_ID = "1234567890abcdef"
BASE_NS = 1_700_000_000_000_000_000


def _kv(key: str, value: object) -> KeyValue:
    if isinstance(value, bool):
        av = AnyValue(bool_value=value)
    elif isinstance(value, int):
        av = AnyValue(int_value=value)
    elif isinstance(value, float):
        av = AnyValue(double_value=value)
    else:
        av = AnyValue(string_value=str(value))
    return KeyValue(key=key, value=av)


def _make_otlp_span(**overrides: object) -> OtlpSpan:
    """Create an OTLP Span with sensible defaults."""
    defaults: dict[str, object] = {
        "trace_id": bytes.fromhex(TRACE_ID),
        "span_id": bytes.fromhex(ROOT_ID),
        "name": "GET /orders",
        "kind": OtlpSpan.SPAN_KIND_SERVER,
        "start_time_unix_nano": BASE_NS,
        "end_time_unix_nano": BASE_NS + 100_000_000,
        "status": OtlpStatus(code=OtlpStatus.STATUS_CODE_OK),
    }
    defaults.update(overrides)
    return OtlpSpan(**defaults)  # type: ignore[arg-type]


def _make_request(
    spans: list[OtlpSpan],
    service_name: str = "orders",
) -> ExportTraceServiceRequest:
    resource = Resource(attributes=[
        _kv("service.name", service_name),
        _kv("deployment.environment", "test"),
    ])
    scope = InstrumentationScope(name="spanlens-tests", version="1.2.3")
    return ExportTraceServiceRequest(resource_spans=[
        ResourceSpans(resource=resource, scope_spans=[ScopeSpans(scope=scope, spans=spans)])
    ])


class TestAnyValue:
    def test_scalars(self) -> None:
        assert _any_value_to_python(AnyValue(string_value="x")) == "x"
        assert _any_value_to_python(AnyValue(int_value=42)) == 42
        assert _any_value_to_python(AnyValue(double_value=1.5)) == 1.5
        assert _any_value_to_python(AnyValue(bool_value=False)) is False
        assert _any_value_to_python(AnyValue(bytes_value=b"\x01")) == b"\x01"

    def test_empty(self) -> None:
        assert _any_value_to_python(AnyValue()) is None

    def test_array(self) -> None:
        value = AnyValue(array_value=ArrayValue(values=[
            AnyValue(int_value=1),
            AnyValue(string_value="two"),
        ]))
        assert _any_value_to_python(value) == [1, "two"]

    def test_kvlist(self) -> None:
        value = AnyValue(kvlist_value=KeyValueList(values=[_kv("a", 1), _kv("b", True)]))
        assert _any_value_to_python(value) == {"a": 1, "b": True}


class TestSpansFromOtlp:
    def test_basic_fields(self) -> None:
        (span,) = spans_from_otlp(_make_request([_make_otlp_span()]))
        assert span.trace_id == TRACE_ID
        assert span.span_id == ROOT_ID
        assert span.parent_span_id is None
        assert span.name == "GET /orders"
        assert span.start_time == BASE_NS
        assert span.end_time == BASE_NS + 100_000_000
        assert span.kind == SpanKind.SERVER.value

    def test_parent_span_id(self) -> None:
        otlp = _make_otlp_span(
            span_id=bytes.fromhex(CHILD_ID),
            parent_span_id=bytes.fromhex(ROOT_ID),
        )
        (span,) = spans_from_otlp(_make_request([otlp]))
        assert span.parent_span_id == ROOT_ID

    @pytest.mark.parametrize(
        ("code", "expected"),
        [
            (OtlpStatus.STATUS_CODE_OK, "ok"),
            (OtlpStatus.STATUS_CODE_ERROR, "error"),
            (OtlpStatus.STATUS_CODE_UNSET, "unset"),
        ],
    )
    def test_status_is_named(self, code: int, expected: str) -> None:
        otlp = _make_otlp_span(status=OtlpStatus(code=code))  # type: ignore[arg-type]
        (span,) = spans_from_otlp(_make_request([otlp]))
        assert span.status == expected

    def test_attributes_keep_order_and_duplicates(self) -> None:
        otlp = _make_otlp_span(attributes=[_kv("k", "v1"), _kv("n", 3), _kv("k", "v2")])
        (span,) = spans_from_otlp(_make_request([otlp]))
        assert span.attributes == (("k", "v1"), ("n", 3), ("k", "v2"))

    def test_resource_and_scope(self) -> None:
        (span,) = spans_from_otlp(_make_request([_make_otlp_span()], service_name="billing"))
        assert span.resource["service.name"] == "billing"
        assert span.resource["deployment.environment"] == "test"
        assert span.service_name is None
        assert span.instrumentation_scope_name == "spanlens-tests"
        assert span.instrumentation_scope_version == "1.2.3"

    def test_events_and_links(self) -> None:
        otlp = _make_otlp_span(
            events=[OtlpSpan.Event(
                name="exception",
                time_unix_nano=BASE_NS + 5,
                attributes=[_kv("exception.type", "ValueError")],
            )],
            links=[OtlpSpan.Link(
                trace_id=bytes.fromhex(TRACE_ID),
                span_id=bytes.fromhex(CHILD_ID),
            )],
        )
        (span,) = spans_from_otlp(_make_request([otlp]))
        assert span.events[0].name == "exception"
        assert span.events[0].timestamp == BASE_NS + 5
        assert span.events[0].attributes == (("exception.type", "ValueError"),)
        assert span.links[0].span_id == CHILD_ID
        assert span.links[0].trace_id == TRACE_ID

    def test_serialized_bytes(self) -> None:
        request = _make_request([_make_otlp_span()])
        spans = spans_from_otlp(request.SerializeToString())
        assert [s.span_id for s in spans] == [ROOT_ID]

    def test_traces_data(self) -> None:
        request = _make_request([_make_otlp_span()])
        data = TracesData(resource_spans=request.resource_spans)
        assert len(spans_from_otlp(data)) == 1

    def test_empty_request(self) -> None:
        assert spans_from_otlp(ExportTraceServiceRequest()) == []
        assert spans_from_otlp(b"") == []

    def test_garbage_bytes_raise(self) -> None:
        with pytest.raises(TraceDecodeError):
            spans_from_otlp(b"\xff\xff\xff\xff")

    def test_decoded_spans_feed_transforms(self) -> None:
        root = _make_otlp_span()
        child = _make_otlp_span(
            span_id=bytes.fromhex(CHILD_ID),
            parent_span_id=bytes.fromhex(ROOT_ID),
            name="SELECT orders",
            kind=OtlpSpan.SPAN_KIND_CLIENT,
            end_time_unix_nano=BASE_NS + 50_000_000,
        )
        orders = _make_request([root])
        db = _make_request([child], service_name="postgres")
        request = ExportTraceServiceRequest(
            resource_spans=[*orders.resource_spans, *db.resource_spans]
        )
        spans = spans_from_otlp(request)

        data = build_waterfall(spans, trace_id=TRACE_ID)
        assert data is not None
        assert data.total_duration_ms == pytest.approx(100.0)
        assert [s.width_percent for s in data.spans] == pytest.approx([100.0, 50.0])
        assert [s.service_name for s in data.spans] == ["orders", "postgres"]

        graph = build_service_graph(spans)
        assert [(e.from_service, e.to_service) for e in graph.edges] == [
            ("orders", "postgres")
        ]
