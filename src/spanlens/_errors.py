"""Error detail extraction for failed spans."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from spanlens._attributes import attributes_to_dict
from spanlens._types import ErrorDetails, SpanStatus, VisualizationSpan

_EXCEPTION_EVENT = "exception"


def _first_str(attrs: Mapping[str, Any], *keys: str) -> str | None:
    for key in keys:
        value = attrs.get(key)
        if value is not None and value != "":
            return str(value)
    return None


def error_details(span: VisualizationSpan) -> ErrorDetails | None:
    """Return what is known about a failed span's error, or None if it did not fail.

    ``error.*`` attributes take precedence over OpenTelemetry ``exception.*``
    attributes, which in turn take precedence over an ``exception`` event.
    """
    if span.status is not SpanStatus.ERROR:
        return None

    attrs = span.attributes
    details = ErrorDetails(
        type=_first_str(attrs, "error.type", "exception.type"),
        message=_first_str(attrs, "error.message", "exception.message"),
        stacktrace=_first_str(attrs, "error.stack", "exception.stacktrace"),
    )
    if details.type or details.message or details.stacktrace:
        return details

    for event in span.events:
        if event.name == _EXCEPTION_EVENT:
            event_attrs = attributes_to_dict(event.attributes)
            return ErrorDetails(
                type=_first_str(event_attrs, "exception.type"),
                message=_first_str(event_attrs, "exception.message"),
                stacktrace=_first_str(event_attrs, "exception.stacktrace"),
            )
    return details
