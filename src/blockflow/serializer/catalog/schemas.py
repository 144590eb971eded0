"""Catalog schema models for block and tool definitions.

The catalog describes every non-container block type: its sub-fields, how a
concrete tool is chosen from the resolved parameters, which inputs it
declares, and which tool parameters must be filled in by the user.
Container blocks (``loop``/``parallel``) are not catalog entries.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from blockflow.serializer.catalog.conditions import FieldCondition
from blockflow.serializer.types import BlockCategory, ParamVisibility, SubBlockMode

__all__ = [
    "DefaultValueFn",
    "ToolSelectorFn",
    "SubBlockSchema",
    "InputSchema",
    "BlockSchema",
    "ToolParamSchema",
    "ToolSchema",
]

# Computes a default for an absent sub-field from the params collected so far.
DefaultValueFn = Callable[[dict[str, Any]], Any]

# Chooses the concrete tool id from the resolved params.
ToolSelectorFn = Callable[[dict[str, Any]], str]


class _CatalogModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class SubBlockSchema(_CatalogModel):
    """One editor sub-field of a block.

    Fields:
        id: Sub-field id; also the param key unless canonicalized.
        title: Display name used in validation messages.
        type: Editor widget type.
        mode: Editor mode the field is shown in.
        canonical_param_id: Logical param this field feeds, shared by its
            basic and advanced variants.
        condition: Visibility condition over the block's params.
        default: Computes a value when the field is absent.
    """

    id: str = Field(..., min_length=1)
    title: str | None = None
    type: str = "short-input"
    mode: SubBlockMode = SubBlockMode.BOTH
    canonical_param_id: str | None = None
    condition: FieldCondition | None = None
    default: DefaultValueFn | None = None

    @property
    def display_name(self) -> str:
        return self.title or self.id


class InputSchema(_CatalogModel):
    """Declared input port of a block."""

    type: str = "string"
    description: str = ""


class BlockSchema(_CatalogModel):
    """Catalog definition of a block type.

    Validation Rules:
        - ``category`` may not be ``subflow`` (reserved for containers)
        - a canonical param id may not equal any sub-field id
    """

    type: str = Field(..., min_length=1)
    name: str = ""
    description: str = ""
    category: BlockCategory = BlockCategory.BLOCKS
    color: str = "#6B7280"
    sub_blocks: tuple[SubBlockSchema, ...] = ()
    tools: tuple[str, ...] = ()
    tool_selector: ToolSelectorFn | None = None
    inputs: dict[str, InputSchema] = Field(default_factory=dict)
    outputs: dict[str, Any] = Field(default_factory=dict)

    @field_validator("category")
    @classmethod
    def validate_category(cls, v: BlockCategory) -> BlockCategory:
        if v is BlockCategory.SUBFLOW:
            raise ValueError("Category 'subflow' is reserved for container blocks")
        return v

    @model_validator(mode="after")
    def validate_canonical_ids(self) -> BlockSchema:
        """Keep canonical ids disjoint from sub-field ids."""
        sub_block_ids = {sb.id for sb in self.sub_blocks}
        clashes = {
            sb.canonical_param_id
            for sb in self.sub_blocks
            if sb.canonical_param_id is not None
            and sb.canonical_param_id in sub_block_ids
        }
        if clashes:
            raise ValueError(
                f"Canonical param ids must differ from sub-field ids: {clashes}"
            )
        return self

    @property
    def default_tool(self) -> str:
        """First declared tool, or empty string when the block has none."""
        return self.tools[0] if self.tools else ""

    def find_sub_block(self, sub_block_id: str) -> SubBlockSchema | None:
        for sub_block in self.sub_blocks:
            if sub_block.id == sub_block_id:
                return sub_block
        return None

    def sub_blocks_for_param(self, param_id: str) -> list[SubBlockSchema]:
        """Sub-fields feeding a param, directly or through a canonical id."""
        return [
            sb
            for sb in self.sub_blocks
            if sb.id == param_id or sb.canonical_param_id == param_id
        ]


class ToolParamSchema(_CatalogModel):
    type: str = "string"
    required: bool = False
    visibility: ParamVisibility = ParamVisibility.USER_OR_LLM
    description: str = ""


class ToolSchema(_CatalogModel):
    id: str = Field(..., min_length=1)
    name: str = ""
    params: dict[str, ToolParamSchema] = Field(default_factory=dict)

    def required_user_params(self) -> list[str]:
        """Param ids that are required and only the user can supply."""
        return [
            name
            for name, param in self.params.items()
            if param.required and param.visibility is ParamVisibility.USER_ONLY
        ]
