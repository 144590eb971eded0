"""Pydantic schema models for the serialized workflow (IR).

This module defines the persisted, execution-ready form of a workflow:
- SerializedWorkflow: Top-level IR with a version tag
- SerializedBlock: One block with its resolved tool and flat params
- SerializedConnection: Flat edge with optional handles and condition
- SerializedLoop / SerializedParallel: Container registries

The JSON shape is a compatibility contract: stored workflows tagged
``version: "1.0"`` must keep loading.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field, model_validator

from blockflow.serializer.config import DEFAULTS
from blockflow.serializer.models import ConnectionCondition, GraphModel, Position
from blockflow.serializer.types import (
    BlockCategory,
    ContainerType,
    LoopType,
    ParallelType,
)

__all__ = [
    "BlockConfig",
    "BlockMetadata",
    "SerializedBlock",
    "SerializedConnection",
    "SerializedLoop",
    "SerializedParallel",
    "SerializedWorkflow",
]


# =============================================================================
# Block Models
# =============================================================================


class BlockConfig(GraphModel):
    """Resolved tool id and flat parameter bag.

    Fields:
        tool: Concrete tool id; empty string for containers.
        params: Parameters after mode filtering and canonical resolution.
    """

    tool: str = ""
    params: dict[str, Any] = Field(default_factory=dict)


class BlockMetadata(GraphModel):
    """Descriptive block metadata.

    Fields:
        id: The block type.
        name: Display name.
        description: Catalog description.
        category: Catalog category, or ``subflow`` for containers.
        color: Display color.
    """

    id: str
    name: str = ""
    description: str = ""
    category: BlockCategory = BlockCategory.BLOCKS
    color: str = ""


class SerializedBlock(GraphModel):
    """One block in the IR."""

    id: str = Field(..., min_length=1)
    position: Position = Field(default_factory=Position)
    config: BlockConfig = Field(default_factory=BlockConfig)
    inputs: dict[str, str] = Field(default_factory=dict)
    outputs: dict[str, Any] = Field(default_factory=dict)
    metadata: BlockMetadata
    enabled: bool = True

    @property
    def block_type(self) -> str:
        return self.metadata.id


# =============================================================================
# Connection and Container Models
# =============================================================================


class SerializedConnection(GraphModel):
    source: str
    target: str
    source_handle: str | None = None
    target_handle: str | None = None
    condition: ConnectionCondition | None = None


class SerializedLoop(GraphModel):
    id: str
    nodes: list[str] = Field(default_factory=list)
    iterations: int = Field(default=5, ge=0)
    loop_type: LoopType = LoopType.FOR
    for_each_items: Any = None


class SerializedParallel(GraphModel):
    id: str
    nodes: list[str] = Field(default_factory=list)
    distribution: Any = None
    count: int | None = Field(default=None, ge=0)
    parallel_type: ParallelType | None = None


# =============================================================================
# Top-Level Workflow
# =============================================================================


class SerializedWorkflow(GraphModel):
    """Top-level serialized workflow.

    Validation Rules:
        - block ids are unique
        - every id referenced by a connection, loop or parallel is a block id
        - every loop/parallel entry is keyed by and named after a container
          block of the same kind

    Convenience Methods:
        - to_dict(): camelCase dict with None values omitted
        - to_json(): JSON string
        - from_dict(): validated instance from a dict
    """

    version: str = DEFAULTS.VERSION
    blocks: list[SerializedBlock] = Field(default_factory=list)
    connections: list[SerializedConnection] = Field(default_factory=list)
    loops: dict[str, SerializedLoop] = Field(default_factory=dict)
    parallels: dict[str, SerializedParallel] | None = None

    @model_validator(mode="after")
    def validate_block_references(self) -> SerializedWorkflow:
        """Ensure every referenced id exists among the blocks."""
        ids = [block.id for block in self.blocks]
        if len(ids) != len(set(ids)):
            duplicates = {i for i in ids if ids.count(i) > 1}
            raise ValueError(f"Duplicate block ids in workflow: {duplicates}")

        known = set(ids)
        for connection in self.connections:
            for endpoint in (connection.source, connection.target):
                if endpoint not in known:
                    raise ValueError(
                        f"Connection references unknown block '{endpoint}'"
                    )
        registries = (
            (ContainerType.LOOP, self.loops),
            (ContainerType.PARALLEL, self.parallels or {}),
        )
        for kind, registry in registries:
            container_ids = {b.id for b in self.blocks if b.block_type == kind.value}
            for registry_key, container in registry.items():
                for container_id in (registry_key, container.id):
                    if container_id not in container_ids:
                        raise ValueError(
                            f"{kind.value.capitalize()} '{container_id}' has no "
                            f"matching {kind.value} block"
                        )
                missing = [n for n in container.nodes if n not in known]
                if missing:
                    raise ValueError(
                        f"Container '{container.id}' references unknown blocks: "
                        f"{', '.join(missing)}"
                    )
        return self

    def get_block(self, block_id: str) -> SerializedBlock | None:
        for block in self.blocks:
            if block.id == block_id:
                return block
        return None

    def to_dict(self) -> dict[str, Any]:
        """Convert to the persisted dict form."""
        # Import here to avoid circular imports
        from blockflow.serializer.writer import WorkflowWriter

        return WorkflowWriter().to_dict(self)

    def to_json(self, indent: int | None = 2) -> str:
        """Convert to a JSON string."""
        from blockflow.serializer.writer import WorkflowWriter

        return WorkflowWriter().to_json(self, indent=indent)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SerializedWorkflow:
        """Create a validated workflow from a dict.

        Raises:
            pydantic.ValidationError: If validation fails.
        """
        return cls.model_validate(data)
