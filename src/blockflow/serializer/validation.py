"""Pre-execution validation of a workflow graph.

Two checks run before execution resources are committed, both only when the
caller asks for validation:

- required user fields: every active tool parameter that is required and
  user-only must hold a value (checked per tool block during serialization)
- subflow collections: every ``forEach`` loop and ``collection`` parallel must
  point at something that plausibly has items (checked once, before any block
  is serialized)

Both raise a ``WorkflowValidationError`` naming the offending block.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from blockflow.logging import get_logger
from blockflow.serializer.catalog.protocol import BlockCatalog
from blockflow.serializer.catalog.schemas import BlockSchema
from blockflow.serializer.errors import EmptyCollectionError, MissingRequiredFieldsError
from blockflow.serializer.models import BlockState, Loop, Parallel
from blockflow.serializer.params import is_sub_block_active, is_trigger_block
from blockflow.serializer.tool_selection import select_tool
from blockflow.serializer.types import LoopType, ParallelType

__all__ = [
    "COLLECTION_DATA_KEY",
    "is_missing",
    "find_missing_required_fields",
    "validate_required_fields",
    "has_collection_items",
    "validate_subflow_collections",
]

logger = get_logger(__name__)

# Container data key holding the collection when the registry entry has none.
COLLECTION_DATA_KEY = "collection"


# =============================================================================
# Required User Fields
# =============================================================================


def is_missing(value: Any) -> bool:
    return value is None or value == ""


def find_missing_required_fields(
    block: BlockState,
    schema: BlockSchema,
    params: Mapping[str, Any],
    catalog: BlockCatalog,
    tool_id: str | None = None,
) -> list[str]:
    """Display names of active required user-only params left empty.

    A param is active when at least one sub-field feeding it is shown in the
    block's current mode and its visibility condition holds. Params with no
    backing sub-field are always active.

    Args:
        block: Editor block.
        schema: Catalog schema of the block.
        params: Resolved params of the block.
        catalog: Catalog used to look up the tool schema.
        tool_id: Already-resolved tool id; resolved from ``params`` if None.

    Returns:
        Display names in tool-param order; empty when nothing is missing or
        the tool is not in the catalog.
    """
    if tool_id is None:
        tool_id = select_tool(schema, params, block_id=block.id, block_type=block.type)
    tool = catalog.get_tool(tool_id) if tool_id else None
    if tool is None:
        logger.debug(
            "required_fields_skipped_unknown_tool",
            block_id=block.id,
            tool_id=tool_id,
        )
        return []

    advanced_mode = block.advanced_mode is True
    trigger_mode = is_trigger_block(block, schema)
    values = dict(params)

    missing: list[str] = []
    for param_id in tool.required_user_params():
        sources = schema.sub_blocks_for_param(param_id)
        if sources and not any(
            is_sub_block_active(sb, values, advanced_mode, trigger_mode)
            for sb in sources
        ):
            continue
        if is_missing(values.get(param_id)):
            titled = next((sb.title for sb in sources if sb.title), None)
            missing.append(titled or param_id)
    return missing


def validate_required_fields(
    block: BlockState,
    schema: BlockSchema,
    params: Mapping[str, Any],
    catalog: BlockCatalog,
    tool_id: str | None = None,
) -> None:
    """Raise when a tool block leaves required user fields empty.

    Trigger blocks are never checked.

    Raises:
        MissingRequiredFieldsError: Listing every missing field of the block.
    """
    if is_trigger_block(block, schema):
        return

    missing = find_missing_required_fields(block, schema, params, catalog, tool_id)
    if not missing:
        return

    block_name = block.name or block.id
    logger.info(
        "required_fields_missing",
        block_id=block.id,
        block_type=block.type,
        missing_fields=missing,
    )
    raise MissingRequiredFieldsError(
        block_id=block.id,
        block_type=block.type,
        block_name=block_name,
        missing_fields=missing,
    )


# =============================================================================
# Subflow Collections
# =============================================================================


def has_collection_items(value: Any) -> bool:
    """Whether a collection source plausibly yields at least one item.

    - lists and dicts must be non-empty
    - strings must be non-blank; text starting with ``[`` or ``{`` is parsed
      and must be non-empty, while unparseable text is accepted as a dynamic
      expression resolved at runtime
    - anything else has no items
    """
    if isinstance(value, (list, tuple, dict)):
        return len(value) > 0
    if not isinstance(value, str):
        return False

    text = value.strip()
    if not text:
        return False
    if text.startswith(("[", "{")):
        try:
            parsed = json.loads(text)
        except json.JSONDecodeError:
            return True
        if isinstance(parsed, (list, dict)):
            return len(parsed) > 0
        return True
    return True


def _collection_source(registry_value: Any, block: BlockState | None) -> Any:
    if registry_value is not None:
        return registry_value
    if block is not None and block.data:
        return block.data.get(COLLECTION_DATA_KEY)
    return None


def validate_subflow_collections(
    blocks: Mapping[str, BlockState],
    loops: Mapping[str, Loop],
    parallels: Mapping[str, Parallel],
) -> None:
    """Raise when a forEach loop or collection parallel has nothing to iterate.

    The source is the registry entry's ``forEachItems``/``distribution``,
    falling back to the container block's ``data["collection"]``.

    Raises:
        EmptyCollectionError: Naming the first offending container.
    """
    for loop_id, loop in loops.items():
        if loop.loop_type is not LoopType.FOR_EACH:
            continue
        block = blocks.get(loop_id)
        if not has_collection_items(_collection_source(loop.for_each_items, block)):
            _raise_empty(loop_id, "loop", block)

    for parallel_id, parallel in parallels.items():
        if parallel.parallel_type is not ParallelType.COLLECTION:
            continue
        block = blocks.get(parallel_id)
        if not has_collection_items(
            _collection_source(parallel.distribution, block)
        ):
            _raise_empty(parallel_id, "parallel", block)


def _raise_empty(container_id: str, container_type: str, block: BlockState | None) -> None:
    block_name = (block.name if block is not None else "") or container_id
    logger.info(
        "subflow_collection_invalid",
        block_id=container_id,
        block_type=container_type,
    )
    raise EmptyCollectionError(
        block_id=container_id,
        container_type=container_type,
        block_name=block_name,
    )
