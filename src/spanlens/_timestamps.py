"""Timestamp normalization: ambiguous nanosecond/millisecond values to ms."""

from __future__ import annotations

import math

# 2100-01-01T00:00:00Z in milliseconds. Anything larger is taken to be nanoseconds.
NANO_THRESHOLD = 4_102_444_800_000

_NANOS_PER_MS = 1_000_000


def _as_number(value: object) -> int | float | None:
    # bool is an int subclass but never a timestamp
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


def to_ms(timestamp: object) -> float:
    """Convert a raw timestamp of unknown unit to milliseconds.

    Each value is classified on its own: values above ``NANO_THRESHOLD`` are
    nanoseconds, everything else is already milliseconds. Non-numeric or
    non-finite input yields ``0.0``.
    """
    value = _as_number(timestamp)
    if value is None:
        return 0.0
    try:
        if value > NANO_THRESHOLD:
            return value / _NANOS_PER_MS
        return float(value)
    except OverflowError:
        return 0.0


def calculate_duration_ms(start_time: object, end_time: object) -> float:
    """Duration between two raw timestamps, clamped to 0 when negative or non-finite."""
    duration = to_ms(end_time) - to_ms(start_time)
    if not math.isfinite(duration) or duration < 0:
        return 0.0
    return duration


def nano_to_ms(nanos: object) -> int:
    """Floor a value known to be nanoseconds to whole milliseconds.

    Unlike ``to_ms`` no unit is inferred, so only use it where the source
    guarantees nanoseconds (OTLP ``*_unix_nano`` fields). Non-finite input
    yields 0.
    """
    value = _as_number(nanos)
    if value is None:
        return 0
    try:
        return math.floor(value / _NANOS_PER_MS)
    except OverflowError:
        return 0
