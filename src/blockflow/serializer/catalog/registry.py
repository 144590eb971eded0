"""In-memory catalog registries.

``BlockRegistry`` and ``ToolRegistry`` hold schemas by name and support
decorator-style registration of schema factories. ``CatalogRegistry`` is the
facade that satisfies the ``BlockCatalog`` protocol.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

from blockflow.serializer.catalog.schemas import BlockSchema, ToolSchema
from blockflow.serializer.errors import (
    DuplicateComponentError,
    ReferenceResolutionError,
)

__all__ = ["BlockRegistry", "ToolRegistry", "CatalogRegistry"]


class BlockRegistry:
    """Registry of block schemas keyed by block type.

    Example:
        ```python
        registry = BlockRegistry()
        registry.register(BlockSchema(type="api", tools=("http_request",)))

        @registry.register
        def agent_block() -> BlockSchema:
            return BlockSchema(type="agent", ...)
        ```
    """

    def __init__(self) -> None:
        self._blocks: dict[str, BlockSchema] = {}

    def register(
        self, schema: BlockSchema | Callable[[], BlockSchema]
    ) -> BlockSchema | Callable[[], BlockSchema]:
        """Register a block schema, or a zero-argument factory returning one.

        Returns:
            The argument unchanged, so this also works as a decorator.

        Raises:
            DuplicateComponentError: If the block type is already registered.
        """
        resolved = schema if isinstance(schema, BlockSchema) else schema()
        if resolved.type in self._blocks:
            raise DuplicateComponentError(
                component_type="block",
                component_name=resolved.type,
            )
        self._blocks[resolved.type] = resolved
        return schema

    def get(self, block_type: str) -> BlockSchema:
        """Look up a block schema.

        Raises:
            ReferenceResolutionError: If no block is registered with this type.
        """
        if block_type not in self._blocks:
            raise ReferenceResolutionError(
                reference_type="block",
                reference_name=block_type,
                available_names=list(self._blocks.keys()),
            )
        return self._blocks[block_type]

    def list_names(self) -> list[str]:
        return sorted(self._blocks.keys())

    def has(self, block_type: str) -> bool:
        return block_type in self._blocks


class ToolRegistry:
    """Registry of tool schemas keyed by tool id."""

    def __init__(self) -> None:
        self._tools: dict[str, ToolSchema] = {}

    def register(
        self, schema: ToolSchema | Callable[[], ToolSchema]
    ) -> ToolSchema | Callable[[], ToolSchema]:
        """Register a tool schema, or a zero-argument factory returning one.

        Raises:
            DuplicateComponentError: If the tool id is already registered.
        """
        resolved = schema if isinstance(schema, ToolSchema) else schema()
        if resolved.id in self._tools:
            raise DuplicateComponentError(
                component_type="tool",
                component_name=resolved.id,
            )
        self._tools[resolved.id] = resolved
        return schema

    def get(self, tool_id: str) -> ToolSchema:
        """Look up a tool schema.

        Raises:
            ReferenceResolutionError: If no tool is registered with this id.
        """
        if tool_id not in self._tools:
            raise ReferenceResolutionError(
                reference_type="tool",
                reference_name=tool_id,
                available_names=list(self._tools.keys()),
            )
        return self._tools[tool_id]

    def list_names(self) -> list[str]:
        return sorted(self._tools.keys())

    def has(self, tool_id: str) -> bool:
        return tool_id in self._tools


class CatalogRegistry:
    """Facade over block and tool registries implementing ``BlockCatalog``.

    Attributes:
        blocks: Registry for block schemas.
        tools: Registry for tool schemas.

    Example:
        ```python
        catalog = CatalogRegistry.from_schemas(
            blocks=[api_block, agent_block],
            tools=[http_request_tool],
        )
        serializer = WorkflowSerializer(catalog)
        ```
    """

    def __init__(
        self,
        blocks: BlockRegistry | None = None,
        tools: ToolRegistry | None = None,
    ) -> None:
        self.blocks = blocks if blocks is not None else BlockRegistry()
        self.tools = tools if tools is not None else ToolRegistry()

    @classmethod
    def from_schemas(
        cls,
        blocks: Iterable[BlockSchema] = (),
        tools: Iterable[ToolSchema] = (),
    ) -> CatalogRegistry:
        catalog = cls()
        for block in blocks:
            catalog.blocks.register(block)
        for tool in tools:
            catalog.tools.register(tool)
        return catalog

    def get_block(self, block_type: str) -> BlockSchema | None:
        if not self.blocks.has(block_type):
            return None
        return self.blocks.get(block_type)

    def get_tool(self, tool_id: str) -> ToolSchema | None:
        if not self.tools.has(tool_id):
            return None
        return self.tools.get(tool_id)
