"""Span depth resolution for flat (parent reference) and nested (tree) input."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence

from spanlens._types import Span, SpanTreeNode

logger = logging.getLogger("spanlens.depth")


def resolve_depths(spans: Sequence[Span]) -> dict[str, int]:
    """Compute the nesting depth of every span from its parent references.

    A span whose parent is missing from ``spans`` is a root (depth 0).
    Ancestor chains are walked iteratively and every visited span is
    memoized, so shared ancestors are resolved once. When a walk would
    re-enter a span already on the current path (a parent cycle), the span
    that points back into the path is forced to depth 0.
    """
    by_id: dict[str, Span] = {s.span_id: s for s in spans}
    depths: dict[str, int] = {}

    for span in spans:
        if span.span_id in depths:
            continue

        path: list[str] = []
        on_path: set[str] = set()
        current = span
        base = -1
        while True:
            known = depths.get(current.span_id)
            if known is not None:
                base = known
                break
            path.append(current.span_id)
            on_path.add(current.span_id)

            parent_id = current.parent_span_id
            parent = by_id.get(parent_id) if parent_id else None
            if parent is None:
                break
            if parent.span_id in on_path:
                logger.debug(
                    "Parent cycle at span %s (parent %s); treating as root",
                    current.span_id,
                    parent.span_id,
                )
                break
            current = parent

        depth = base
        for span_id in reversed(path):
            depth += 1
            depths[span_id] = depth

    return depths


def walk_tree(
    roots: Sequence[SpanTreeNode],
) -> list[tuple[SpanTreeNode, int, SpanTreeNode | None]]:
    """Pre-order walk returning ``(node, depth, structural_parent)`` triples.

    Roots are depth 0. A node that appears again among its own descendants
    is skipped so a malformed tree cannot loop forever.
    """
    visited: list[tuple[SpanTreeNode, int, SpanTreeNode | None]] = []
    on_path: set[int] = set()
    stack: list[tuple[SpanTreeNode | None, Iterator[SpanTreeNode]]] = [(None, iter(roots))]

    while stack:
        owner, pending = stack[-1]
        node = next(pending, None)
        if node is None:
            stack.pop()
            if owner is not None:
                on_path.discard(id(owner))
            continue
        if id(node) in on_path:
            logger.debug("Span %s re-enters its own ancestry; skipping", node.span_id)
            continue

        visited.append((node, len(stack) - 1, owner))
        on_path.add(id(node))
        stack.append((node, iter(node.children)))

    return visited


def flatten_tree(roots: Sequence[SpanTreeNode]) -> list[Span]:
    """Flatten a span tree into flat records, keeping parent/child identity.

    A child without its own ``parent_span_id`` inherits the id of the node it
    is nested under.
    """
    flat: list[Span] = []
    for node, _depth, parent in walk_tree(roots):
        if not node.parent_span_id and parent is not None:
            flat.append(node.to_span(parent_span_id=parent.span_id))
        else:
            flat.append(node.to_span())
    return flat
