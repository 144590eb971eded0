"""Parser for persisted workflows and editor graphs.

This module provides functions for loading workflow documents:
- parse_content: Parse JSON or YAML text to a dict with error handling
- validate_version: Check the IR version tag is supported
- validate_ir_schema: Validate a dict against the SerializedWorkflow schema
- parse_serialized_workflow: Main entry point for IR documents
- parse_workflow_state: Load an editor graph (blocks, edges, loops, parallels)

JSON is a subset of YAML, so one YAML loader handles both formats.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ValidationError

from blockflow.serializer.config import DEFAULTS
from blockflow.serializer.errors import UnsupportedVersionError, WorkflowParseError
from blockflow.serializer.models import WorkflowState
from blockflow.serializer.schema import SerializedWorkflow

__all__ = [
    "parse_content",
    "validate_version",
    "validate_ir_schema",
    "parse_serialized_workflow",
    "parse_workflow_state",
    "load_serialized_workflow",
    "load_workflow_state",
]


# =============================================================================
# Text Parsing
# =============================================================================


def parse_content(content: str, file_path: str | None = None) -> dict[str, Any]:
    """Parse JSON or YAML text to a dict.

    Args:
        content: Document text.
        file_path: Source path, for error messages.

    Returns:
        Parsed document.

    Raises:
        WorkflowParseError: If the content is empty, malformed, or not an
            object.

    Examples:
        >>> parse_content('{"version": "1.0", "blocks": []}')["version"]
        '1.0'
    """
    if not content or content.isspace():
        raise WorkflowParseError("Empty workflow content", file_path=file_path)

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        line_number = None
        mark = getattr(e, "problem_mark", None)
        if mark is not None:
            line_number = mark.line + 1

        raise WorkflowParseError(
            f"Syntax error: {e}",
            file_path=file_path,
            line_number=line_number,
            parse_error=e,
        ) from e

    if not isinstance(data, dict):
        raise WorkflowParseError(
            f"Workflow document must be an object (dict), got {type(data).__name__}",
            file_path=file_path,
        )
    return data


# =============================================================================
# Validation
# =============================================================================


def validate_version(data: dict[str, Any], file_path: str | None = None) -> None:
    """Check the version tag is supported.

    A missing tag is treated as the current version.

    Raises:
        UnsupportedVersionError: If the version is not supported.
    """
    version = str(data.get("version", DEFAULTS.VERSION))
    if version not in DEFAULTS.SUPPORTED_VERSIONS:
        raise UnsupportedVersionError(
            requested_version=version,
            supported_versions=list(DEFAULTS.SUPPORTED_VERSIONS),
            file_path=file_path,
        )


def _format_validation_error(e: ValidationError) -> str:
    error_details = []
    for error in e.errors():
        loc = ".".join(str(x) for x in error["loc"])
        msg = error["msg"]
        error_details.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(error_details)


def _validate_model(
    model: type[BaseModel], data: dict[str, Any], file_path: str | None
) -> Any:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise WorkflowParseError(
            f"Schema validation failed: {_format_validation_error(e)}",
            file_path=file_path,
            parse_error=e,
        ) from e


def validate_ir_schema(
    data: dict[str, Any], file_path: str | None = None
) -> SerializedWorkflow:
    """Validate a dict against the SerializedWorkflow schema.

    Raises:
        WorkflowParseError: If schema validation fails.
    """
    workflow: SerializedWorkflow = _validate_model(SerializedWorkflow, data, file_path)
    return workflow


# =============================================================================
# Entry Points
# =============================================================================


def parse_serialized_workflow(
    content: str, file_path: str | None = None
) -> SerializedWorkflow:
    """Parse a persisted IR document.

    Raises:
        WorkflowParseError: If parsing or schema validation fails.
        UnsupportedVersionError: If the version tag is not supported.
    """
    data = parse_content(content, file_path)
    validate_version(data, file_path)
    return validate_ir_schema(data, file_path)


def parse_workflow_state(content: str, file_path: str | None = None) -> WorkflowState:
    """Parse an editor graph document.

    Raises:
        WorkflowParseError: If parsing or schema validation fails.
    """
    data = parse_content(content, file_path)
    state: WorkflowState = _validate_model(WorkflowState, data, file_path)
    return state


def _read(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        raise WorkflowParseError(
            f"Cannot read workflow file: {e}",
            file_path=str(path),
            parse_error=e,
        ) from e


def load_serialized_workflow(path: Path) -> SerializedWorkflow:
    return parse_serialized_workflow(_read(path), str(path))


def load_workflow_state(path: Path) -> WorkflowState:
    return parse_workflow_state(_read(path), str(path))
