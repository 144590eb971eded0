"""Ancestor lookup over the plain edge list."""

from __future__ import annotations

from collections import defaultdict, deque
from collections.abc import Iterable, Mapping
from typing import Protocol

__all__ = ["EdgeLike", "build_incoming_index", "walk_ancestors", "find_ancestors"]

IncomingIndex = Mapping[str, set[str]]


class EdgeLike(Protocol):
    @property
    def source(self) -> str: ...

    @property
    def target(self) -> str: ...


def build_incoming_index(edges: Iterable[EdgeLike]) -> IncomingIndex:
    """Map each block id to the sources of its incoming edges."""
    incoming: dict[str, set[str]] = defaultdict(set)
    for edge in edges:
        incoming[edge.target].add(edge.source)
    return incoming


def walk_ancestors(incoming: IncomingIndex, block_id: str) -> set[str]:
    """Breadth-first walk of a prebuilt incoming index from ``block_id``."""
    ancestors: set[str] = set()
    queue: deque[str] = deque([block_id])
    while queue:
        node = queue.popleft()
        for source in incoming.get(node, ()):
            if source not in ancestors:
                ancestors.add(source)
                queue.append(source)
    return ancestors


def find_ancestors(edges: Iterable[EdgeLike], block_id: str) -> set[str]:
    """Return every block with a directed path to ``block_id``.

    Walks the edges backwards breadth-first. The block itself is only part of
    the result when it lies on a cycle. Callers looking up many blocks should
    build the index once with ``build_incoming_index`` and use
    ``walk_ancestors``.

    Args:
        edges: Editor edges or serialized connections.
        block_id: Block whose ancestors are wanted.

    Returns:
        Set of ancestor block ids.

    Example:
        >>> find_ancestors([Edge(source="a", target="b"), Edge(source="b", target="c")], "c")
        {'a', 'b'}
    """
    return walk_ancestors(build_incoming_index(edges), block_id)
