"""Catalog capability consumed by the serializer.

The serializer never imports concrete block definitions. It asks a
``BlockCatalog`` for the schema of a block type or a tool id; anything that
implements these two lookups (an in-memory registry, a generated module, an
adapter over a remote catalog loaded ahead of time) can be plugged in.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from blockflow.serializer.catalog.schemas import BlockSchema, ToolSchema

__all__ = ["BlockCatalog"]


@runtime_checkable
class BlockCatalog(Protocol):
    """Read-only lookup of block and tool schemas.

    Both lookups return None for unknown ids; the serializer decides whether
    that is fatal (unknown block type) or skippable (unknown tool).
    """

    def get_block(self, block_type: str) -> BlockSchema | None: ...

    def get_tool(self, tool_id: str) -> ToolSchema | None: ...
