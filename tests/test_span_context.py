"""Tests for _span_context module."""

from __future__ import annotations

import pytest

from spanlens._span_context import self_times, span_context, span_duration_ms
from spanlens._types import Span
from spanlens._waterfall import build_waterfall


def _make_span(
    span_id: str,
    start: int,
    end: int,
    parent: str | None = None,
) -> Span:
    return Span(
        trace_id="t1",
        span_id=span_id,
        parent_span_id=parent,
        name=f"svc.{span_id}",
        start_time=start,
        end_time=end,
    )


def test_self_time_non_overlapping_children() -> None:
    root = _make_span("root", 0, 100)
    spans = [root, _make_span("a", 0, 30, "root"), _make_span("b", 40, 60, "root")]
    ctx = span_context(root, spans)
    assert ctx.child_duration_ms == 50
    assert ctx.self_time_ms == 50


def test_self_time_overlapping_children_clamped() -> None:
    root = _make_span("root", 0, 100)
    spans = [root, _make_span("a", 0, 80, "root"), _make_span("b", 10, 80, "root")]
    ctx = span_context(root, spans)
    assert ctx.child_duration_ms == 150
    assert ctx.self_time_ms == 0


def test_parent_and_children() -> None:
    root = _make_span("root", 0, 100)
    mid = _make_span("mid", 10, 50, "root")
    leaf = _make_span("leaf", 20, 30, "mid")
    other = _make_span("other", 60, 70, "root")
    ctx = span_context(mid, [root, mid, leaf, other])
    assert ctx.parent is root
    assert ctx.children == (leaf,)
    assert ctx.span is mid
    assert ctx.self_time_ms == 30


def test_dangling_parent_is_none() -> None:
    orphan = _make_span("o", 0, 10, "missing")
    ctx = span_context(orphan, [orphan])
    assert ctx.parent is None
    assert ctx.children == ()
    assert ctx.self_time_ms == 10


def test_leaf_self_time_is_duration() -> None:
    leaf = _make_span("leaf", 5, 25)
    assert span_context(leaf, [leaf]).self_time_ms == 20


def test_self_parent_is_not_its_own_child() -> None:
    loop = _make_span("loop", 0, 10, "loop")
    ctx = span_context(loop, [loop])
    assert ctx.children == ()
    assert ctx.parent is loop
    assert ctx.self_time_ms == 10


def test_self_parent_copy_is_not_its_own_child() -> None:
    loop = _make_span("loop", 0, 10, "loop")
    copy = _make_span("loop", 0, 10, "loop")
    child = _make_span("c", 2, 6, "loop")
    ctx = span_context(copy, [loop, child])
    assert ctx.children == (child,)
    assert ctx.self_time_ms == 6
    assert ctx.self_time_ms == self_times([loop, child])["loop"]


def test_works_with_visualization_spans() -> None:
    ns = 1_000_000
    base = 1_700_000_000_000 * ns
    data = build_waterfall([
        _make_span("root", base, base + 100 * ns),
        _make_span("a", base, base + 30 * ns, "root"),
        _make_span("b", base + 40 * ns, base + 60 * ns, "root"),
    ])
    assert data is not None
    root = data.spans[0]
    ctx = span_context(root, data.spans)
    assert ctx.self_time_ms == pytest.approx(50.0)
    assert {c.span_id for c in ctx.children} == {"a", "b"}


def test_span_duration_ms_clamps() -> None:
    assert span_duration_ms(_make_span("x", 50, 10)) == 0


def test_self_times_for_all_spans() -> None:
    spans = [
        _make_span("root", 0, 100),
        _make_span("a", 0, 30, "root"),
        _make_span("b", 40, 60, "root"),
        _make_span("b1", 40, 70, "b"),
    ]
    assert self_times(spans) == {"root": 50, "a": 30, "b": 0, "b1": 30}
