"""Canonical parameter resolution.

Some logical parameters are edited through more than one sub-field: a basic
widget (a dropdown, a credential picker) and one or more advanced variants
(a free-text input). Every such sub-field declares the same
``canonical_param_id``. Before a block is serialized the group is collapsed
to a single value under the canonical id:

    basic present, advanced present  -> advanced in advanced mode, else basic
    only advanced present            -> advanced
    only basic present               -> basic, unless in advanced mode
    neither                          -> no value (key omitted)

All source keys are removed. A group none of whose source keys appear in the
bag is left untouched, which makes resolution idempotent.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from blockflow.serializer.catalog.schemas import SubBlockSchema
from blockflow.serializer.types import SubBlockMode

__all__ = [
    "CanonicalGroup",
    "build_canonical_index",
    "has_value",
    "resolve_canonical_value",
    "resolve_canonical_params",
]

_MISSING = object()


@dataclass(frozen=True, slots=True)
class CanonicalGroup:
    """Sub-fields sharing one canonical param id.

    Attributes:
        canonical_id: The logical param id written to the bag.
        basic_ids: Non-advanced sub-field ids, in catalog order.
        advanced_ids: Advanced sub-field ids, in catalog order.
    """

    canonical_id: str
    basic_ids: tuple[str, ...] = ()
    advanced_ids: tuple[str, ...] = ()

    @property
    def source_ids(self) -> tuple[str, ...]:
        return self.basic_ids + self.advanced_ids


def build_canonical_index(
    sub_blocks: Iterable[SubBlockSchema],
) -> dict[str, CanonicalGroup]:
    """Group sub-fields by canonical param id, preserving catalog order."""
    basic: dict[str, list[str]] = {}
    advanced: dict[str, list[str]] = {}
    for sub_block in sub_blocks:
        canonical_id = sub_block.canonical_param_id
        if canonical_id is None:
            continue
        target = advanced if sub_block.mode is SubBlockMode.ADVANCED else basic
        ids = target.setdefault(canonical_id, [])
        if sub_block.id not in ids:
            ids.append(sub_block.id)
        basic.setdefault(canonical_id, [])
        advanced.setdefault(canonical_id, [])

    return {
        canonical_id: CanonicalGroup(
            canonical_id=canonical_id,
            basic_ids=tuple(basic[canonical_id]),
            advanced_ids=tuple(advanced[canonical_id]),
        )
        for canonical_id in basic
    }


def has_value(value: Any) -> bool:
    """True unless the value is None, a blank string, or an empty collection."""
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip() != ""
    if isinstance(value, (list, tuple, dict, set)):
        return len(value) > 0
    return True


def _first_present(ids: Iterable[str], values: Mapping[str, Any]) -> Any:
    for field_id in ids:
        value = values.get(field_id)
        if has_value(value):
            return value
    return _MISSING


def resolve_canonical_value(
    group: CanonicalGroup,
    values: Mapping[str, Any],
    advanced_mode: bool,
) -> tuple[bool, Any]:
    """Pick the active value of one canonical group.

    Returns:
        ``(True, value)`` when a value was chosen, ``(False, None)`` otherwise.
    """
    basic = _first_present(group.basic_ids, values)
    advanced = _first_present(group.advanced_ids, values)

    if basic is not _MISSING and advanced is not _MISSING:
        return True, advanced if advanced_mode else basic
    if advanced is not _MISSING:
        return True, advanced
    if basic is not _MISSING and not advanced_mode:
        return True, basic
    return False, None


def resolve_canonical_params(
    params: Mapping[str, Any],
    sub_blocks: Iterable[SubBlockSchema],
    advanced_mode: bool,
) -> dict[str, Any]:
    """Collapse every canonical group in ``params``.

    Args:
        params: Parameter bag; not modified.
        sub_blocks: Catalog sub-fields of the block.
        advanced_mode: Whether the block is in advanced mode.

    Returns:
        New bag with source keys replaced by canonical keys.

    Example:
        >>> resolve_canonical_params(
        ...     {"modelBasic": "gpt-4", "modelAdvanced": "custom-llm"},
        ...     sub_blocks,
        ...     advanced_mode=False,
        ... )
        {'model': 'gpt-4'}
    """
    resolved = dict(params)
    for group in build_canonical_index(sub_blocks).values():
        if not any(field_id in resolved for field_id in group.source_ids):
            continue

        chosen, value = resolve_canonical_value(group, resolved, advanced_mode)
        for field_id in group.source_ids:
            resolved.pop(field_id, None)
        if chosen:
            resolved[group.canonical_id] = value
        else:
            resolved.pop(group.canonical_id, None)
    return resolved
