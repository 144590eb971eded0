"""Block-level serialization between editor blocks and IR blocks.

Container blocks (``loop``/``parallel``) never touch the catalog: their data
bag becomes ``config.params`` verbatim. Every other block is resolved against
its catalog schema:

1. extract params (mode filter, defaults, canonical resolution, mode flags)
2. select the concrete tool
3. optionally check required user fields and output references
4. declare input types and merge the parsed response format into outputs
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from blockflow.logging import get_logger
from blockflow.serializer.accessibility import check_references as check_block_references
from blockflow.serializer.catalog.protocol import BlockCatalog
from blockflow.serializer.catalog.schemas import BlockSchema
from blockflow.serializer.config import DEFAULTS, ContainerMetadataDefaults
from blockflow.serializer.errors import UnknownBlockTypeError
from blockflow.serializer.models import BlockState, SubBlockState
from blockflow.serializer.params import (
    ADVANCED_MODE_PARAM,
    TRIGGER_MODE_PARAM,
    extract_params,
)
from blockflow.serializer.response_format import parse_response_format_safely
from blockflow.serializer.schema import BlockConfig, BlockMetadata, SerializedBlock
from blockflow.serializer.tool_selection import select_tool
from blockflow.serializer.types import BlockCategory, ContainerType
from blockflow.serializer.validation import validate_required_fields

__all__ = [
    "container_defaults",
    "get_block_schema",
    "serialize_block",
    "deserialize_block",
]

logger = get_logger(__name__)


def container_defaults(container: ContainerType) -> ContainerMetadataDefaults:
    if container is ContainerType.LOOP:
        return DEFAULTS.LOOP
    return DEFAULTS.PARALLEL


def get_block_schema(catalog: BlockCatalog, block_type: str) -> BlockSchema:
    """Look up a block schema, failing on unknown types.

    Raises:
        UnknownBlockTypeError: If the catalog has no schema for the type.
    """
    schema = catalog.get_block(block_type)
    if schema is None:
        raise UnknownBlockTypeError(block_type)
    return schema


# =============================================================================
# Serialize
# =============================================================================


def _serialize_container(block: BlockState, container: ContainerType) -> SerializedBlock:
    defaults = container_defaults(container)
    return SerializedBlock(
        id=block.id,
        position=block.position.model_copy(),
        config=BlockConfig(tool="", params=dict(block.data or {})),
        inputs={},
        outputs=dict(block.outputs),
        metadata=BlockMetadata(
            id=block.type,
            name=block.name or defaults.name,
            description=defaults.description,
            category=BlockCategory.SUBFLOW,
            color=defaults.color,
        ),
        enabled=block.enabled,
    )


def serialize_block(
    block: BlockState,
    *,
    catalog: BlockCatalog,
    validate_required: bool = False,
    accessible_block_ids: Iterable[str] | None = None,
    all_blocks: Mapping[str, BlockState] | None = None,
    check_references: bool = True,
) -> SerializedBlock:
    """Serialize one editor block into an IR block.

    Args:
        block: Editor block.
        catalog: Block/tool catalog.
        validate_required: Raise when required user fields are empty.
        accessible_block_ids: Accessibility set of the block; reference
            checks run only when this and ``all_blocks`` are given.
        all_blocks: Every block of the workflow, used to resolve references
            by name.
        check_references: Warn about references to inaccessible blocks.

    Returns:
        The serialized block.

    Raises:
        UnknownBlockTypeError: If a non-container type is not in the catalog.
        MissingRequiredFieldsError: If validation is requested and fails.
    """
    container = ContainerType.of(block.type)
    if container is not None:
        return _serialize_container(block, container)

    schema = get_block_schema(catalog, block.type)
    params = extract_params(block, schema)
    tool_id = select_tool(schema, params, block_id=block.id, block_type=block.type)

    if validate_required:
        validate_required_fields(block, schema, params, catalog, tool_id)

    if (
        check_references
        and accessible_block_ids is not None
        and all_blocks is not None
    ):
        check_block_references(block, params, accessible_block_ids, all_blocks)

    outputs = dict(block.outputs)
    response_format = parse_response_format_safely(
        params.get(DEFAULTS.RESPONSE_FORMAT_PARAM),
        block_id=block.id,
        block_type=block.type,
    )
    if response_format is not None:
        outputs[DEFAULTS.RESPONSE_FORMAT_PARAM] = response_format

    return SerializedBlock(
        id=block.id,
        position=block.position.model_copy(),
        config=BlockConfig(tool=tool_id, params=params),
        inputs={name: spec.type for name, spec in schema.inputs.items()},
        outputs=outputs,
        metadata=BlockMetadata(
            id=block.type,
            name=block.name,
            description=schema.description,
            category=schema.category,
            color=schema.color,
        ),
        enabled=block.enabled,
    )


# =============================================================================
# Deserialize
# =============================================================================


def deserialize_block(serialized: SerializedBlock, catalog: BlockCatalog) -> BlockState:
    """Rebuild an editor block from an IR block.

    Sub-field values are looked up by catalog sub-field id; canonical values
    stay under their canonical key and are not split back into the basic and
    advanced fields.

    Raises:
        UnknownBlockTypeError: If a non-container type is not in the catalog.
    """
    block_type = serialized.block_type
    params = serialized.config.params

    if ContainerType.of(block_type) is not None:
        return BlockState(
            id=serialized.id,
            type=block_type,
            name=serialized.metadata.name,
            position=serialized.position.model_copy(),
            outputs=dict(serialized.outputs),
            enabled=serialized.enabled,
            data=dict(params),
        )

    schema = get_block_schema(catalog, block_type)
    sub_blocks: dict[str, SubBlockState] = {}
    for config in schema.sub_blocks:
        if config.id in sub_blocks:
            continue
        sub_blocks[config.id] = SubBlockState(
            id=config.id,
            type=config.type,
            value=params.get(config.id),
        )

    return BlockState(
        id=serialized.id,
        type=block_type,
        name=serialized.metadata.name,
        position=serialized.position.model_copy(),
        sub_blocks=sub_blocks,
        outputs=dict(serialized.outputs),
        enabled=serialized.enabled,
        advanced_mode=params.get(ADVANCED_MODE_PARAM) is True,
        trigger_mode=(
            params.get(TRIGGER_MODE_PARAM) is True
            or schema.category is BlockCategory.TRIGGERS
        ),
    )
