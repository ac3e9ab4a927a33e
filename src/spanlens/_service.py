"""Service label resolution.

A span's service is found by trying each strategy in
``SERVICE_NAME_STRATEGIES`` in order and taking the first non-empty answer.
"""

from __future__ import annotations

from collections.abc import Callable

from spanlens._types import Span, VisualizationSpan

ServiceSpan = Span | VisualizationSpan
ServiceNameStrategy = Callable[[ServiceSpan], str | None]

RESOURCE_SERVICE_KEYS: tuple[str, ...] = ("service.name", "service_name")


def explicit_service_name(span: ServiceSpan) -> str | None:
    return span.service_name or None


def resource_service_name(span: ServiceSpan) -> str | None:
    resource = span.resource or {}
    for key in RESOURCE_SERVICE_KEYS:
        value = resource.get(key)
        if isinstance(value, str) and value:
            return value
    return None


def name_prefix_service_name(span: ServiceSpan) -> str | None:
    """First dot-delimited segment of the span name, e.g. ``api`` for ``api.get``."""
    return (span.name or "").split(".")[0] or None


SERVICE_NAME_STRATEGIES: tuple[ServiceNameStrategy, ...] = (
    explicit_service_name,
    resource_service_name,
    name_prefix_service_name,
)


def resolve_service_name(
    span: ServiceSpan,
    fallback: str = "unknown",
    strategies: tuple[ServiceNameStrategy, ...] = SERVICE_NAME_STRATEGIES,
) -> str:
    """Return the first label produced by ``strategies``, else ``fallback``."""
    for strategy in strategies:
        label = strategy(span)
        if label:
            return label
    return fallback
