"""Pydantic models for the editor-side workflow graph.

These mirror what the visual editor holds in memory: blocks keyed by id,
plain edges between them, and the loop/parallel registries that record which
blocks live inside each container. Field names are snake_case in Python and
camelCase on the wire (``subBlocks``, ``sourceHandle``, ``forEachItems``).
"""

from __future__ import annotations

import uuid
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from blockflow.serializer.types import ConditionType, LoopType, ParallelType

__all__ = [
    "GraphModel",
    "Position",
    "SubBlockState",
    "BlockState",
    "ConnectionCondition",
    "Edge",
    "Loop",
    "Parallel",
    "WorkflowState",
]


class GraphModel(BaseModel):
    """Base for graph models: camelCase aliases, snake_case attributes."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class Position(GraphModel):
    x: float = 0.0
    y: float = 0.0


class SubBlockState(GraphModel):
    """Current value of one sub-field of a block."""

    id: str
    type: str = "short-input"
    value: Any = None


class BlockState(GraphModel):
    """A block as the editor holds it.

    Fields:
        id: Unique block id.
        type: Block type; ``loop``/``parallel`` for containers, otherwise a
            catalog block type.
        name: Display name.
        position: Canvas position.
        sub_blocks: Sub-field id to current value.
        outputs: Declared output shapes.
        enabled: Disabled blocks are serialized but skipped by the executor.
        advanced_mode: Editor shows advanced sub-fields.
        trigger_mode: Block acts as a trigger.
        data: Container config bag (iteration kind, collection, count).
    """

    id: str = Field(..., min_length=1)
    type: str = Field(..., min_length=1)
    name: str = ""
    position: Position = Field(default_factory=Position)
    sub_blocks: dict[str, SubBlockState] = Field(default_factory=dict)
    outputs: dict[str, Any] = Field(default_factory=dict)
    enabled: bool = True
    advanced_mode: bool | None = None
    trigger_mode: bool | None = None
    data: dict[str, Any] | None = None

    def value_of(self, sub_block_id: str) -> Any:
        """Return the current value of a sub-field, or None when absent."""
        state = self.sub_blocks.get(sub_block_id)
        return state.value if state is not None else None


class ConnectionCondition(GraphModel):
    """Branch tag and expression carried by a conditional connection."""

    type: ConditionType
    expression: str | None = None


class Edge(GraphModel):
    """Directed edge between two blocks.

    Edge identity is editor-local; a fresh id is generated when none is given.
    """

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    source: str
    target: str
    source_handle: str | None = None
    target_handle: str | None = None
    condition: ConnectionCondition | None = None


class Loop(GraphModel):
    """Loop registry entry; ``id`` matches the loop container block id."""

    id: str
    nodes: list[str] = Field(default_factory=list)
    iterations: int = Field(default=5, ge=0)
    loop_type: LoopType = LoopType.FOR
    for_each_items: Any = None


class Parallel(GraphModel):
    """Parallel registry entry; ``id`` matches the parallel container block id."""

    id: str
    nodes: list[str] = Field(default_factory=list)
    distribution: Any = None
    count: int | None = Field(default=None, ge=0)
    parallel_type: ParallelType | None = None


class WorkflowState(GraphModel):
    """A complete editor graph.

    Validation Rules:
        - every loop/parallel entry is keyed by and named after a container
          block of the same kind
        - every loop/parallel member must exist in ``blocks``
        - every edge endpoint must exist in ``blocks``
    """

    blocks: dict[str, BlockState] = Field(default_factory=dict)
    edges: list[Edge] = Field(default_factory=list)
    loops: dict[str, Loop] = Field(default_factory=dict)
    parallels: dict[str, Parallel] = Field(default_factory=dict)

    @model_validator(mode="after")
    def validate_references(self) -> WorkflowState:
        """Ensure edges and container members point at existing blocks."""
        for edge in self.edges:
            for endpoint in (edge.source, edge.target):
                if endpoint not in self.blocks:
                    raise ValueError(
                        f"Edge '{edge.id}' references unknown block '{endpoint}'"
                    )
        for kind, registry in (("Loop", self.loops), ("Parallel", self.parallels)):
            block_type = kind.lower()
            for container_id, container in registry.items():
                for name in (container_id, container.id):
                    block = self.blocks.get(name)
                    if block is None or block.type != block_type:
                        raise ValueError(
                            f"{kind} '{name}' has no matching {block_type} block"
                        )
                missing = [n for n in container.nodes if n not in self.blocks]
                if missing:
                    raise ValueError(
                        f"{kind} '{container_id}' references unknown blocks: "
                        f"{', '.join(missing)}"
                    )
        return self
