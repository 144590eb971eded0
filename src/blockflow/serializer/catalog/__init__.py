"""Block and tool catalog: schemas, lookup protocol, registries."""

from __future__ import annotations

from blockflow.serializer.catalog.conditions import FieldCondition, evaluate_condition
from blockflow.serializer.catalog.loader import load_catalog
from blockflow.serializer.catalog.protocol import BlockCatalog
from blockflow.serializer.catalog.registry import (
    BlockRegistry,
    CatalogRegistry,
    ToolRegistry,
)
from blockflow.serializer.catalog.schemas import (
    BlockSchema,
    DefaultValueFn,
    InputSchema,
    SubBlockSchema,
    ToolParamSchema,
    ToolSchema,
    ToolSelectorFn,
)

__all__ = [
    "BlockCatalog",
    "BlockRegistry",
    "BlockSchema",
    "CatalogRegistry",
    "DefaultValueFn",
    "FieldCondition",
    "InputSchema",
    "SubBlockSchema",
    "ToolParamSchema",
    "ToolRegistry",
    "ToolSchema",
    "ToolSelectorFn",
    "evaluate_condition",
    "load_catalog",
]
