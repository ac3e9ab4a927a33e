"""Human-readable duration formatting."""

from __future__ import annotations


def format_duration(ms: float) -> str:
    """Format a millisecond duration as μs, ms or s.

    Usage::

        format_duration(0.25)    # "250μs"
        format_duration(12.3456) # "12.35ms"
        format_duration(1500)    # "1.50s"
    """
    if ms < 0.001:
        return "0μs"
    if ms < 1:
        return f"{ms * 1000:.0f}μs"
    if ms < 1000:
        return f"{ms:.2f}ms"
    return f"{ms / 1000:.2f}s"
