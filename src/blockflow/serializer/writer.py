"""Workflow writer for persisting SerializedWorkflow.

Converts the IR to a dict, YAML or JSON. Output uses the camelCase wire
names, omits None values and preserves empty collections.

Usage:
    writer = WorkflowWriter()
    data = writer.to_dict(workflow)
    yaml_str = writer.to_yaml(workflow)
    json_str = writer.to_json(workflow, indent=2)
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import yaml

if TYPE_CHECKING:
    from blockflow.serializer.schema import SerializedWorkflow

__all__ = ["WorkflowWriter"]


class WorkflowWriter:
    """Serializes SerializedWorkflow to dict, YAML and JSON.

    Example:
        >>> writer = WorkflowWriter()
        >>> writer.to_dict(SerializedWorkflow())["version"]
        '1.0'
    """

    def to_dict(self, workflow: SerializedWorkflow) -> dict[str, Any]:
        """Convert to a plain dict with wire field names.

        Field order follows the model: version, blocks, connections, loops,
        parallels.
        """
        data: dict[str, Any] = workflow.model_dump(
            mode="json", by_alias=True, exclude_none=True
        )
        return data

    def to_yaml(self, workflow: SerializedWorkflow) -> str:
        data = self.to_dict(workflow)
        result: str = yaml.safe_dump(
            data,
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
        )
        return result

    def to_json(self, workflow: SerializedWorkflow, indent: int | None = 2) -> str:
        """Convert to a JSON string.

        Args:
            workflow: Workflow to convert.
            indent: Spaces per level; None for compact output.
        """
        data = self.to_dict(workflow)
        return json.dumps(data, indent=indent, ensure_ascii=False)
