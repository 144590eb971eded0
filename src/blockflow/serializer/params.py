"""Parameter extraction for tool blocks.

Turns the editor's sub-field values into the flat ``config.params`` bag:

1. keep values whose sub-field is shown in the block's current mode
2. fill absent values from catalog default functions
3. collapse canonical groups (see ``canonical``)
4. mirror ``triggerMode``/``advancedMode`` into the bag when set
"""

from __future__ import annotations

from typing import Any

from blockflow.serializer.canonical import resolve_canonical_params
from blockflow.serializer.catalog.conditions import evaluate_condition
from blockflow.serializer.catalog.schemas import BlockSchema, SubBlockSchema
from blockflow.serializer.config import DEFAULTS
from blockflow.serializer.models import BlockState
from blockflow.serializer.types import BlockCategory, SubBlockMode

__all__ = [
    "TRIGGER_MODE_PARAM",
    "ADVANCED_MODE_PARAM",
    "is_trigger_block",
    "is_mode_compatible",
    "is_sub_block_active",
    "extract_params",
]

TRIGGER_MODE_PARAM = "triggerMode"
ADVANCED_MODE_PARAM = "advancedMode"


def is_trigger_block(block: BlockState, schema: BlockSchema) -> bool:
    """A block is a trigger when flagged so or when its category is triggers."""
    return block.trigger_mode is True or schema.category is BlockCategory.TRIGGERS


def is_mode_compatible(
    sub_block: SubBlockSchema,
    advanced_mode: bool,
    trigger_mode: bool = False,
) -> bool:
    """Whether a sub-field is shown for the given block modes.

    Advanced-only fields need advanced mode, trigger-only fields need trigger
    mode; everything else is always shown.
    """
    if sub_block.mode is SubBlockMode.ADVANCED:
        return advanced_mode
    if sub_block.mode is SubBlockMode.TRIGGER:
        return trigger_mode
    return True


def is_sub_block_active(
    sub_block: SubBlockSchema,
    params: dict[str, Any],
    advanced_mode: bool,
    trigger_mode: bool = False,
) -> bool:
    """Mode-compatible and its visibility condition holds over ``params``."""
    return is_mode_compatible(
        sub_block, advanced_mode, trigger_mode
    ) and evaluate_condition(sub_block.condition, params)


def _keeps_input_format(
    block: BlockState, schema: BlockSchema, sub_block_id: str, value: Any
) -> bool:
    # A start/trigger input schema that holds fields survives mode filtering.
    if sub_block_id != DEFAULTS.INPUT_FORMAT_FIELD:
        return False
    is_entry = (
        block.type in DEFAULTS.START_BLOCK_TYPES
        or schema.category is BlockCategory.TRIGGERS
    )
    return is_entry and isinstance(value, list) and len(value) > 0


def extract_params(block: BlockState, schema: BlockSchema) -> dict[str, Any]:
    """Build the parameter bag of a tool block.

    Sub-field values without a catalog declaration are kept as-is.

    Args:
        block: Editor block.
        schema: Catalog schema for ``block.type``.

    Returns:
        Flat parameter bag.
    """
    advanced_mode = block.advanced_mode is True
    trigger_mode = is_trigger_block(block, schema)

    params: dict[str, Any] = {}
    for sub_block_id, state in block.sub_blocks.items():
        config = schema.find_sub_block(sub_block_id)
        if (
            config is None
            or is_mode_compatible(config, advanced_mode, trigger_mode)
            or _keeps_input_format(block, schema, sub_block_id, state.value)
        ):
            params[sub_block_id] = state.value

    for config in schema.sub_blocks:
        if params.get(config.id) is not None or config.default is None:
            continue
        if is_mode_compatible(config, advanced_mode, trigger_mode):
            params[config.id] = config.default(params)

    params = resolve_canonical_params(params, schema.sub_blocks, advanced_mode)

    if trigger_mode:
        params[TRIGGER_MODE_PARAM] = True
    if advanced_mode:
        params[ADVANCED_MODE_PARAM] = True
    return params
