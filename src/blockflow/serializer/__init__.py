"""Workflow serialization and pre-execution validation.

Converts the editor's block graph to the persisted IR (``SerializedWorkflow``)
and back, resolving tools and parameters through a pluggable block catalog.
"""

from __future__ import annotations

from blockflow.serializer.accessibility import (
    build_accessibility_map,
    check_references,
    find_start_block_id,
)
from blockflow.serializer.blocks import deserialize_block, serialize_block
from blockflow.serializer.canonical import resolve_canonical_params
from blockflow.serializer.catalog import (
    BlockCatalog,
    BlockRegistry,
    BlockSchema,
    CatalogRegistry,
    FieldCondition,
    InputSchema,
    SubBlockSchema,
    ToolParamSchema,
    ToolRegistry,
    ToolSchema,
    load_catalog,
)
from blockflow.serializer.config import DEFAULTS
from blockflow.serializer.errors import (
    DuplicateComponentError,
    EmptyCollectionError,
    MissingRequiredFieldsError,
    ReferenceResolutionError,
    SerializerError,
    UnknownBlockTypeError,
    UnsupportedVersionError,
    WorkflowDefinitionError,
    WorkflowParseError,
    WorkflowValidationError,
)
from blockflow.serializer.models import (
    BlockState,
    ConnectionCondition,
    Edge,
    Loop,
    Parallel,
    Position,
    SubBlockState,
    WorkflowState,
)
from blockflow.serializer.parser import (
    parse_serialized_workflow,
    parse_workflow_state,
    validate_ir_schema,
)
from blockflow.serializer.paths import find_ancestors
from blockflow.serializer.response_format import parse_response_format_safely
from blockflow.serializer.schema import (
    BlockConfig,
    BlockMetadata,
    SerializedBlock,
    SerializedConnection,
    SerializedLoop,
    SerializedParallel,
    SerializedWorkflow,
)
from blockflow.serializer.types import (
    BlockCategory,
    ConditionType,
    ContainerType,
    LoopType,
    ParallelType,
    ParamVisibility,
    SubBlockMode,
)
from blockflow.serializer.validation import (
    validate_required_fields,
    validate_subflow_collections,
)
from blockflow.serializer.workflow import (
    WorkflowSerializer,
    deserialize_workflow,
    serialize_workflow,
)
from blockflow.serializer.writer import WorkflowWriter

__all__ = [
    # Orchestration
    "WorkflowSerializer",
    "serialize_workflow",
    "deserialize_workflow",
    "serialize_block",
    "deserialize_block",
    # Building blocks
    "build_accessibility_map",
    "check_references",
    "find_ancestors",
    "find_start_block_id",
    "parse_response_format_safely",
    "resolve_canonical_params",
    "validate_required_fields",
    "validate_subflow_collections",
    # Persistence
    "WorkflowWriter",
    "parse_serialized_workflow",
    "parse_workflow_state",
    "validate_ir_schema",
    # Catalog
    "BlockCatalog",
    "BlockRegistry",
    "BlockSchema",
    "CatalogRegistry",
    "FieldCondition",
    "InputSchema",
    "SubBlockSchema",
    "ToolParamSchema",
    "ToolRegistry",
    "ToolSchema",
    "load_catalog",
    # Models
    "BlockConfig",
    "BlockMetadata",
    "BlockState",
    "ConnectionCondition",
    "Edge",
    "Loop",
    "Parallel",
    "Position",
    "SerializedBlock",
    "SerializedConnection",
    "SerializedLoop",
    "SerializedParallel",
    "SerializedWorkflow",
    "SubBlockState",
    "WorkflowState",
    # Types
    "BlockCategory",
    "ConditionType",
    "ContainerType",
    "LoopType",
    "ParallelType",
    "ParamVisibility",
    "SubBlockMode",
    # Errors
    "DuplicateComponentError",
    "EmptyCollectionError",
    "MissingRequiredFieldsError",
    "ReferenceResolutionError",
    "SerializerError",
    "UnknownBlockTypeError",
    "UnsupportedVersionError",
    "WorkflowDefinitionError",
    "WorkflowParseError",
    "WorkflowValidationError",
    # Constants
    "DEFAULTS",
]
