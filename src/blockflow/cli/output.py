"""Output formatting utilities for the blockflow CLI."""

from __future__ import annotations

from enum import Enum

from blockflow.serializer.schema import SerializedWorkflow
from blockflow.serializer.writer import WorkflowWriter

__all__ = [
    "OutputFormat",
    "format_error",
    "format_success",
    "render_workflow",
]


class OutputFormat(str, Enum):
    """Document formats the CLI can write."""

    JSON = "json"
    YAML = "yaml"


def format_error(
    message: str, details: list[str] | None = None, suggestion: str | None = None
) -> str:
    """Format an error message with optional details and suggestion.

    Example:
        >>> print(format_error(
        ...     "Workflow validation failed",
        ...     details=["Block: fetch (api)"],
        ...     suggestion="Fill in the missing fields",
        ... ))
        Error: Workflow validation failed
          Block: fetch (api)
        Suggestion: Fill in the missing fields
    """
    lines = [f"Error: {message}"]

    if details:
        for detail in details:
            lines.append(f"  {detail}")

    if suggestion:
        lines.append(f"Suggestion: {suggestion}")

    return "\n".join(lines)


def format_success(message: str) -> str:
    return f"Success: {message}"


def render_workflow(
    workflow: SerializedWorkflow,
    output_format: OutputFormat = OutputFormat.JSON,
    indent: int = 2,
) -> str:
    """Render an IR document as JSON or YAML text."""
    writer = WorkflowWriter()
    if output_format is OutputFormat.YAML:
        return writer.to_yaml(workflow)
    return writer.to_json(workflow, indent=indent or None)
