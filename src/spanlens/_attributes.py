"""Attribute and status normalization."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from spanlens._types import SpanStatus

_STATUS_ALIASES: dict[str, SpanStatus] = {
    "ok": SpanStatus.OK,
    "0": SpanStatus.OK,
    "error": SpanStatus.ERROR,
    "2": SpanStatus.ERROR,
}


def attributes_to_dict(
    attrs: Iterable[Any] | Mapping[str, Any] | None,
) -> dict[str, Any]:
    """Fold an ordered attribute sequence into a mapping.

    Later occurrences of a key overwrite earlier ones. A mapping is copied
    unchanged; items that are not ``(str, value)`` pairs are skipped.
    """
    if attrs is None:
        return {}
    if isinstance(attrs, Mapping):
        return dict(attrs)

    result: dict[str, Any] = {}
    for item in attrs:
        if not isinstance(item, (tuple, list)) or len(item) < 2:
            continue
        key, value = item[0], item[1]
        if isinstance(key, str):
            result[key] = value
    return result


def normalize_status(status: object) -> SpanStatus:
    """Map a raw status value onto ``SpanStatus``; anything unrecognized is UNSET."""
    if isinstance(status, SpanStatus):
        return status
    if status is None:
        return SpanStatus.UNSET
    return _STATUS_ALIASES.get(str(status).strip().lower(), SpanStatus.UNSET)
