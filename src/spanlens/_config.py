"""Transform configuration."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class TraceViewConfig:
    """Immutable layout and labelling configuration.

    The service graph places N services on a circle of radius
    ``min(max_radius, base_radius + N * radius_step)`` centred on
    (``center_x``, ``center_y``).
    """

    center_x: float = 400.0
    center_y: float = 250.0
    base_radius: float = 50.0
    radius_step: float = 20.0
    max_radius: float = 150.0
    unknown_service: str = "unknown"


DEFAULT_CONFIG = TraceViewConfig()
