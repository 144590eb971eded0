"""Workflow-level serialization orchestrator.

``WorkflowSerializer`` composes the accessibility map, the subflow collection
check and the block serializer into one call per direction:

    ir = WorkflowSerializer(catalog).serialize_workflow(blocks, edges, loops)
    state = WorkflowSerializer(catalog).deserialize_workflow(ir)

Each call owns its inputs and returns fresh objects; nothing is shared
between calls.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from blockflow.logging import get_logger
from blockflow.serializer.accessibility import build_accessibility_map
from blockflow.serializer.blocks import deserialize_block, serialize_block
from blockflow.serializer.catalog.protocol import BlockCatalog
from blockflow.serializer.config import DEFAULTS
from blockflow.serializer.errors import ReferenceResolutionError
from blockflow.serializer.models import (
    BlockState,
    ConnectionCondition,
    Edge,
    Loop,
    Parallel,
    WorkflowState,
)
from blockflow.serializer.schema import (
    SerializedBlock,
    SerializedConnection,
    SerializedLoop,
    SerializedParallel,
    SerializedWorkflow,
)
from blockflow.serializer.types import ContainerType
from blockflow.serializer.validation import validate_subflow_collections

__all__ = [
    "WorkflowSerializer",
    "serialize_workflow",
    "deserialize_workflow",
]

logger = get_logger(__name__)


def _copy_condition(
    condition: ConnectionCondition | None,
) -> ConnectionCondition | None:
    return condition.model_copy() if condition is not None else None


class WorkflowSerializer:
    """Converts editor graphs to the IR and back.

    Attributes:
        catalog: Block/tool catalog used for every block.
        check_references: Warn about ``<block.path>`` references to blocks
            outside the referencing block's accessibility set.

    Example:
        ```python
        serializer = WorkflowSerializer(catalog)
        ir = serializer.serialize_workflow(
            blocks, edges, loops, parallels, validate_required=True
        )
        print(ir.to_json())
        ```
    """

    def __init__(self, catalog: BlockCatalog, *, check_references: bool = True) -> None:
        self.catalog = catalog
        self.check_references = check_references

    def serialize_workflow(
        self,
        blocks: Mapping[str, BlockState],
        edges: Iterable[Edge],
        loops: Mapping[str, Loop] | None = None,
        parallels: Mapping[str, Parallel] | None = None,
        validate_required: bool = False,
    ) -> SerializedWorkflow:
        """Serialize an editor graph.

        Args:
            blocks: Blocks keyed by id.
            edges: Plain edge list.
            loops: Loop registry; None means no loops.
            parallels: Parallel registry; None means no parallels.
            validate_required: Run the pre-execution checks. The collection
                check runs before any block is serialized.

        Returns:
            The IR, tagged with the current version.

        Raises:
            ReferenceResolutionError: If an edge or container names an
                unknown block, or a loop/parallel entry has no matching
                container block.
            UnknownBlockTypeError: If a block type is not in the catalog.
            WorkflowValidationError: If validation is requested and fails.
        """
        loops = loops or {}
        parallels = parallels or {}
        edge_list = list(edges)

        self._check_graph_references(blocks, edge_list, loops, parallels)

        accessibility = build_accessibility_map(blocks, edge_list, loops, parallels)

        if validate_required:
            validate_subflow_collections(blocks, loops, parallels)

        serialized_blocks: list[SerializedBlock] = [
            serialize_block(
                block,
                catalog=self.catalog,
                validate_required=validate_required,
                accessible_block_ids=accessibility.get(block_id),
                all_blocks=blocks,
                check_references=self.check_references,
            )
            for block_id, block in blocks.items()
        ]

        connections = [
            SerializedConnection(
                source=edge.source,
                target=edge.target,
                source_handle=edge.source_handle,
                target_handle=edge.target_handle,
                condition=_copy_condition(edge.condition),
            )
            for edge in edge_list
        ]

        workflow = SerializedWorkflow(
            version=DEFAULTS.VERSION,
            blocks=serialized_blocks,
            connections=connections,
            loops={
                loop_id: SerializedLoop.model_validate(loop.model_dump())
                for loop_id, loop in loops.items()
            },
            parallels={
                parallel_id: SerializedParallel.model_validate(parallel.model_dump())
                for parallel_id, parallel in parallels.items()
            },
        )

        logger.debug(
            "workflow_serialized",
            block_count=len(workflow.blocks),
            connection_count=len(workflow.connections),
            loop_count=len(workflow.loops),
            parallel_count=len(workflow.parallels or {}),
        )
        return workflow

    def deserialize_workflow(self, workflow: SerializedWorkflow) -> WorkflowState:
        """Rebuild the editor graph from the IR.

        Edges receive fresh ids; edge identity is not persisted.

        Raises:
            UnknownBlockTypeError: If a block type is not in the catalog.
        """
        blocks = {
            serialized.id: deserialize_block(serialized, self.catalog)
            for serialized in workflow.blocks
        }
        edges = [
            Edge(
                source=connection.source,
                target=connection.target,
                source_handle=connection.source_handle,
                target_handle=connection.target_handle,
                condition=_copy_condition(connection.condition),
            )
            for connection in workflow.connections
        ]

        state = WorkflowState(
            blocks=blocks,
            edges=edges,
            loops={
                loop_id: Loop.model_validate(loop.model_dump())
                for loop_id, loop in workflow.loops.items()
            },
            parallels={
                parallel_id: Parallel.model_validate(parallel.model_dump())
                for parallel_id, parallel in (workflow.parallels or {}).items()
            },
        )

        logger.debug(
            "workflow_deserialized",
            block_count=len(state.blocks),
            edge_count=len(state.edges),
        )
        return state

    def serialize_block(self, block: BlockState, validate_required: bool = False) -> SerializedBlock:
        """Serialize one block on its own.

        Reference checks need the whole graph's accessibility map, so they
        only run through ``serialize_workflow``; ``check_references`` has no
        effect here.
        """
        return serialize_block(
            block,
            catalog=self.catalog,
            validate_required=validate_required,
        )

    def deserialize_block(self, serialized: SerializedBlock) -> BlockState:
        return deserialize_block(serialized, self.catalog)

    def _check_graph_references(
        self,
        blocks: Mapping[str, BlockState],
        edges: list[Edge],
        loops: Mapping[str, Loop],
        parallels: Mapping[str, Parallel],
    ) -> None:
        known = list(blocks.keys())
        for edge in edges:
            for endpoint in (edge.source, edge.target):
                if endpoint not in blocks:
                    raise ReferenceResolutionError("block", endpoint, known)
        for kind, registry in (
            (ContainerType.LOOP, loops),
            (ContainerType.PARALLEL, parallels),
        ):
            container_ids = [i for i, b in blocks.items() if b.type == kind.value]
            for registry_key, container in registry.items():
                # Both the key and the entry id name a container block.
                for container_id in (registry_key, container.id):
                    if container_id not in container_ids:
                        raise ReferenceResolutionError(
                            kind.value, container_id, container_ids
                        )
                for node_id in container.nodes:
                    if node_id not in blocks:
                        raise ReferenceResolutionError("block", node_id, known)


# =============================================================================
# Module-level API
# =============================================================================


def serialize_workflow(
    blocks: Mapping[str, BlockState],
    edges: Iterable[Edge],
    loops: Mapping[str, Loop] | None = None,
    parallels: Mapping[str, Parallel] | None = None,
    validate_required: bool = False,
    *,
    catalog: BlockCatalog,
    check_references: bool = True,
) -> SerializedWorkflow:
    """Serialize an editor graph with a one-off ``WorkflowSerializer``."""
    serializer = WorkflowSerializer(catalog, check_references=check_references)
    return serializer.serialize_workflow(
        blocks, edges, loops, parallels, validate_required=validate_required
    )


def deserialize_workflow(
    workflow: SerializedWorkflow, *, catalog: BlockCatalog
) -> WorkflowState:
    """Rebuild an editor graph with a one-off ``WorkflowSerializer``."""
    return WorkflowSerializer(catalog).deserialize_workflow(workflow)
