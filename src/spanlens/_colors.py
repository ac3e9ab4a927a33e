"""Service and status colour assignment."""

from __future__ import annotations

from spanlens._types import SpanStatus

SERVICE_COLORS: tuple[str, ...] = (
    "#632CA6",  # purple
    "#4A90D9",  # blue
    "#27AE60",  # green
    "#E67E22",  # orange
    "#16A085",  # teal
    "#E91E63",  # pink
    "#5C6BC0",  # indigo
    "#FFA000",  # amber
    "#00BCD4",  # cyan
    "#E53935",  # red
)

SPAN_STATUS_COLORS: dict[SpanStatus, str] = {
    SpanStatus.OK: "#3FB950",
    SpanStatus.ERROR: "#F85149",
    SpanStatus.UNSET: "#6E7681",
}


def _string_hash(value: str) -> int:
    """31-multiplier hash over UTF-16 code units, wrapped to signed 32 bit."""
    h = 0
    encoded = value.encode("utf-16-le")
    for i in range(0, len(encoded), 2):
        code_unit = encoded[i] | (encoded[i + 1] << 8)
        h = ((h << 5) - h + code_unit) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return abs(h)


def get_service_color(service_name: str) -> str:
    """Return a stable palette colour for a service name."""
    if not service_name:
        return SERVICE_COLORS[0]
    return SERVICE_COLORS[_string_hash(service_name) % len(SERVICE_COLORS)]


def get_span_status_color(status: SpanStatus = SpanStatus.UNSET) -> str:
    return SPAN_STATUS_COLORS.get(status, SPAN_STATUS_COLORS[SpanStatus.UNSET])
