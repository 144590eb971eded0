"""Resolution of the concrete tool a block invokes."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from blockflow.logging import get_logger
from blockflow.serializer.catalog.schemas import BlockSchema
from blockflow.serializer.config import DEFAULTS

__all__ = ["ToolSelection", "try_select_tool", "select_tool", "is_custom_tool"]

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class ToolSelection:
    """Outcome of tool resolution.

    Attributes:
        tool_id: Selected tool, or the block's first declared tool on failure.
        error: Exception raised by the selector, if any.
    """

    tool_id: str
    error: Exception | None = None

    @property
    def fell_back(self) -> bool:
        return self.error is not None


def is_custom_tool(entry: Any) -> bool:
    """True for agent tool entries defined inline rather than in the catalog."""
    return isinstance(entry, Mapping) and entry.get("type") == DEFAULTS.CUSTOM_TOOL_TYPE


def _selector_params(block_type: str, params: Mapping[str, Any]) -> dict[str, Any]:
    selector_params = dict(params)
    tools = params.get(DEFAULTS.TOOLS_PARAM)
    if block_type == DEFAULTS.AGENT_BLOCK_TYPE and isinstance(tools, list):
        selector_params[DEFAULTS.TOOLS_PARAM] = [
            entry for entry in tools if not is_custom_tool(entry)
        ]
    return selector_params


def try_select_tool(
    schema: BlockSchema,
    params: Mapping[str, Any],
    block_type: str | None = None,
) -> ToolSelection:
    """Run the block's tool selector without logging.

    Agent blocks hand the selector only their catalog tools; custom tool
    entries stay in the params untouched.
    """
    if schema.tool_selector is None:
        return ToolSelection(tool_id=schema.default_tool)

    selector_params = _selector_params(block_type or schema.type, params)
    try:
        tool_id = schema.tool_selector(selector_params)
    except Exception as e:
        return ToolSelection(tool_id=schema.default_tool, error=e)
    return ToolSelection(tool_id=tool_id)


def select_tool(
    schema: BlockSchema,
    params: Mapping[str, Any],
    *,
    block_id: str,
    block_type: str | None = None,
) -> str:
    """Resolve the tool id, logging and falling back when the selector fails.

    Args:
        schema: Catalog schema of the block.
        params: Resolved params of the block.
        block_id: Block id, for the log record.
        block_type: Block type; defaults to the schema type.

    Returns:
        Selected tool id, or the first declared tool.
    """
    selection = try_select_tool(schema, params, block_type)
    if selection.fell_back:
        logger.warning(
            "tool_selection_failed",
            block_id=block_id,
            block_type=block_type or schema.type,
            error=str(selection.error),
            fallback_tool=selection.tool_id,
        )
    return selection.tool_id
