"""Spanlens Quick Start — turn a trace query response into view models."""

import spanlens

BASE_NS = 1_700_000_000_000_000_000

# 1. A traces query response, as returned by the storage API
response = {
    "spans": [
        {
            "trace_id": "trace-1",
            "span_id": "gateway",
            "name": "GET /checkout",
            "start_time_unix_nano": BASE_NS,
            "end_time_unix_nano": BASE_NS + 120_000_000,
            "status": "ok",
            "resource": {"service.name": "gateway"},
        },
        {
            "trace_id": "trace-1",
            "span_id": "cart",
            "parent_span_id": "gateway",
            "name": "cart.load",
            "start_time_unix_nano": BASE_NS + 10_000_000,
            "end_time_unix_nano": BASE_NS + 60_000_000,
            "status": "ok",
            "service_name": "cart",
        },
        {
            "trace_id": "trace-1",
            "span_id": "payments",
            "parent_span_id": "gateway",
            "name": "payments.charge",
            "start_time_unix_nano": BASE_NS + 65_000_000,
            "end_time_unix_nano": BASE_NS + 110_000_000,
            "status": "2",
            "attributes": [["error.type", "CardDeclined"], ["error.message", "insufficient funds"]],
            "service_name": "payments",
        },
    ]
}
spans = spanlens.spans_from_response(response)

# 2. Waterfall: depth, position and width of every span
waterfall = spanlens.build_waterfall(spans, trace_id="trace-1")
assert waterfall is not None
print(f"Trace: {waterfall.span_count} spans, {spanlens.format_duration(waterfall.total_duration_ms)}")
for vs in waterfall.spans:
    print(
        f"  {'  ' * vs.depth}{vs.name:<20s} "
        f"{vs.start_percent:5.1f}% +{vs.width_percent:5.1f}%  {vs.status}"
    )

# 3. Service graph: which service calls which
graph = spanlens.build_service_graph(spans)
for edge in graph.edges:
    print(f"  {edge.from_service} -> {edge.to_service} ({edge.call_count} calls)")

# 4. Span context: parent, children and self time of the root span
ctx = spanlens.span_context(waterfall.spans[0], waterfall.spans)
print(f"Self time of {ctx.span.name}: {spanlens.format_duration(ctx.self_time_ms)}")

# 5. Error details for failed spans
for vs in waterfall.spans:
    details = spanlens.error_details(vs)
    if details is not None:
        print(f"  {vs.name} failed: {details.type}: {details.message}")
