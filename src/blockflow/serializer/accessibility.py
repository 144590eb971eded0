"""Accessibility map: which blocks a block may reference outputs from.

For a block B the set is B itself, every graph ancestor of B, the workflow's
start block, and every co-member of each loop/parallel that lists B. Members
of one container see each other regardless of edge direction because
execution order inside a subflow belongs to the container.

The map is built once per serialization call and exposed read-only.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Any

from blockflow.logging import get_logger
from blockflow.serializer.config import DEFAULTS
from blockflow.serializer.models import BlockState, Loop, Parallel
from blockflow.serializer.paths import EdgeLike, build_incoming_index, walk_ancestors

__all__ = [
    "AccessibilityMap",
    "REFERENCE_PATTERN",
    "find_start_block_id",
    "build_accessibility_map",
    "normalize_block_name",
    "find_block_references",
    "find_inaccessible_references",
    "check_references",
]

logger = get_logger(__name__)

AccessibilityMap = Mapping[str, frozenset[str]]

# <blockname.path.to.field>
REFERENCE_PATTERN = re.compile(r"<([^<>\s.]+)\.[^<>]*>")


def find_start_block_id(blocks: Mapping[str, BlockState]) -> str | None:
    """Id of the first block whose type is a start block type."""
    for block_id, block in blocks.items():
        if block.type in DEFAULTS.START_BLOCK_TYPES:
            return block_id
    return None


def build_accessibility_map(
    blocks: Mapping[str, BlockState],
    edges: Iterable[EdgeLike],
    loops: Mapping[str, Loop] | None = None,
    parallels: Mapping[str, Parallel] | None = None,
) -> AccessibilityMap:
    """Compute the accessibility set of every block.

    Args:
        blocks: Blocks keyed by id.
        edges: Plain edge list.
        loops: Loop registry keyed by container id.
        parallels: Parallel registry keyed by container id.

    Returns:
        Read-only map of block id to frozen accessibility set.
    """
    incoming = build_incoming_index(edges)
    start_id = find_start_block_id(blocks)

    memberships: dict[str, set[str]] = {}
    containers = [*(loops or {}).values(), *(parallels or {}).values()]
    for container in containers:
        members = set(container.nodes)
        for node_id in container.nodes:
            memberships.setdefault(node_id, set()).update(members)

    accessible: dict[str, frozenset[str]] = {}
    for block_id in blocks:
        ids = {block_id}
        ids.update(walk_ancestors(incoming, block_id))
        if start_id is not None:
            ids.add(start_id)
        ids.update(memberships.get(block_id, ()))
        accessible[block_id] = frozenset(ids)

    return MappingProxyType(accessible)


# =============================================================================
# Reference Checks
# =============================================================================


def normalize_block_name(name: str) -> str:
    return re.sub(r"\s+", "", name).lower()


def _iter_strings(value: Any) -> Iterable[str]:
    if isinstance(value, str):
        yield value
    elif isinstance(value, Mapping):
        for item in value.values():
            yield from _iter_strings(item)
    elif isinstance(value, (list, tuple)):
        for item in value:
            yield from _iter_strings(item)


def find_block_references(params: Mapping[str, Any]) -> list[str]:
    """Normalized block names referenced by ``<name.path>`` tags in params.

    Names are returned in first-seen order without duplicates; reserved
    prefixes such as ``loop`` or ``start`` are dropped.
    """
    names: list[str] = []
    for text in _iter_strings(params):
        for match in REFERENCE_PATTERN.finditer(text):
            name = normalize_block_name(match.group(1))
            if name in DEFAULTS.REFERENCE_PREFIXES or name in names:
                continue
            names.append(name)
    return names


def find_inaccessible_references(
    params: Mapping[str, Any],
    accessible_ids: Iterable[str],
    all_blocks: Mapping[str, BlockState],
) -> list[str]:
    """Referenced block names that resolve to a block outside ``accessible_ids``.

    Names that match no block are ignored.
    """
    by_name: dict[str, str] = {}
    for other_id, other in all_blocks.items():
        if other.name:
            by_name.setdefault(normalize_block_name(other.name), other_id)

    allowed = set(accessible_ids)
    inaccessible = []
    for name in find_block_references(params):
        target_id = by_name.get(name)
        if target_id is not None and target_id not in allowed:
            inaccessible.append(name)
    return inaccessible


def check_references(
    block: BlockState,
    params: Mapping[str, Any],
    accessible_ids: Iterable[str],
    all_blocks: Mapping[str, BlockState],
) -> list[str]:
    """Log a warning per inaccessible reference; never raises.

    Returns:
        The inaccessible names, for callers that want to surface them.
    """
    inaccessible = find_inaccessible_references(params, accessible_ids, all_blocks)
    for name in inaccessible:
        logger.warning(
            "inaccessible_block_reference",
            block_id=block.id,
            block_name=block.name,
            reference=name,
        )
    return inaccessible
