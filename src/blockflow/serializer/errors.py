"""Error types for workflow serialization and pre-execution validation.

Exception Hierarchy:
    SerializerError (base for all serializer errors)
    ├── WorkflowDefinitionError (structurally invalid input)
    │   ├── UnknownBlockTypeError (block type missing from the catalog)
    │   ├── WorkflowParseError (JSON/YAML parsing failures)
    │   ├── UnsupportedVersionError (unsupported IR version)
    │   ├── DuplicateComponentError (duplicate catalog registration)
    │   └── ReferenceResolutionError (unknown catalog reference)
    └── WorkflowValidationError (pre-execution check failed for one block)
        ├── MissingRequiredFieldsError (required user fields left empty)
        └── EmptyCollectionError (loop/parallel collection is empty)

Structural errors are not retryable without fixing the input. Validation
errors are expected: they name the offending block so the caller can surface
them to the user and retry after the workflow is edited.
"""

from __future__ import annotations

from blockflow.exceptions import BlockflowError

__all__ = [
    "SerializerError",
    "WorkflowDefinitionError",
    "UnknownBlockTypeError",
    "WorkflowParseError",
    "UnsupportedVersionError",
    "DuplicateComponentError",
    "ReferenceResolutionError",
    "WorkflowValidationError",
    "MissingRequiredFieldsError",
    "EmptyCollectionError",
]


# ============================================================================
# Base Serializer Exception
# ============================================================================


class SerializerError(BlockflowError):
    """Base exception for all serializer-related errors.

    Examples:
        ```python
        try:
            ir = serializer.serialize_workflow(blocks, edges, loops)
        except SerializerError as e:
            logger.error("serialize_failed", error=e.message)
        ```
    """

    pass


# ============================================================================
# Definition Errors (Structure, Parsing, Catalog)
# ============================================================================


class WorkflowDefinitionError(SerializerError):
    """Errors in workflow structure that make serialization impossible."""

    pass


class UnknownBlockTypeError(WorkflowDefinitionError):
    """Raised when a block's type has no schema in the catalog.

    Aborts the whole serialization call; no partial IR is produced.

    Attributes:
        block_type: The type string that could not be resolved.
    """

    def __init__(self, block_type: str) -> None:
        """Initialize the UnknownBlockTypeError.

        Args:
            block_type: The type string that could not be resolved.
        """
        self.block_type = block_type
        super().__init__(f"Invalid block type: {block_type}")


class WorkflowParseError(WorkflowDefinitionError):
    """Exception raised when JSON/YAML parsing of a workflow fails.

    Attributes:
        message: Human-readable error message.
        file_path: Path to the file being parsed.
        line_number: Line number where the parse error occurred (if known).
        parse_error: The underlying parse error.

    Examples:
        ```python
        raise WorkflowParseError(
            "YAML syntax error: expected ':'",
            file_path="workflow.yaml",
            line_number=15,
        )
        ```
    """

    def __init__(
        self,
        message: str,
        file_path: str | None = None,
        line_number: int | None = None,
        parse_error: Exception | None = None,
    ) -> None:
        """Initialize the WorkflowParseError.

        Args:
            message: Human-readable error message.
            file_path: Path to the file being parsed.
            line_number: Line number where the parse error occurred.
            parse_error: The underlying parse error.
        """
        self.file_path = file_path
        self.line_number = line_number
        self.parse_error = parse_error
        super().__init__(message)


class UnsupportedVersionError(WorkflowDefinitionError):
    """Exception raised when a serialized workflow version is not supported.

    Attributes:
        requested_version: The version found in the serialized workflow.
        supported_versions: List of versions supported by this reader.
        file_path: Path to the file with unsupported version.
    """

    def __init__(
        self,
        requested_version: str,
        supported_versions: list[str],
        file_path: str | None = None,
    ) -> None:
        """Initialize the UnsupportedVersionError.

        Args:
            requested_version: The version found in the serialized workflow.
            supported_versions: List of versions supported by this reader.
            file_path: Path to the file with unsupported version.
        """
        self.requested_version = requested_version
        self.supported_versions = supported_versions
        self.file_path = file_path
        message = f"Unsupported workflow version: '{requested_version}'"
        if supported_versions:
            versions_str = ", ".join(f"'{v}'" for v in sorted(supported_versions))
            message += f". Supported versions: {versions_str}"
        super().__init__(message)


class DuplicateComponentError(WorkflowDefinitionError):
    """Exception raised when a catalog entry is registered twice.

    Attributes:
        component_type: Type of component ("block" or "tool").
        component_name: Name that was already registered.
    """

    def __init__(
        self,
        component_type: str,
        component_name: str,
    ) -> None:
        """Initialize the DuplicateComponentError.

        Args:
            component_type: Type of component ("block" or "tool").
            component_name: Name that was already registered.
        """
        self.component_type = component_type
        self.component_name = component_name
        message = (
            f"Duplicate {component_type} registration: "
            f"'{component_name}' is already registered"
        )
        super().__init__(message)


class ReferenceResolutionError(WorkflowDefinitionError):
    """Exception raised when a catalog lookup by name fails.

    Attributes:
        reference_type: Type of reference (e.g., "block", "tool").
        reference_name: Name that could not be resolved.
        available_names: Registered names, used for suggestions.
    """

    def __init__(
        self,
        reference_type: str,
        reference_name: str,
        available_names: list[str] | None = None,
    ) -> None:
        """Initialize the ReferenceResolutionError.

        Args:
            reference_type: Type of reference (e.g., "block", "tool").
            reference_name: Name that could not be resolved.
            available_names: Optional list of registered names.
        """
        self.reference_type = reference_type
        self.reference_name = reference_name
        self.available_names = available_names or []
        message = f"Unknown {reference_type} reference: '{reference_name}'"
        if available_names:
            names_str = ", ".join(f"'{n}'" for n in sorted(available_names)[:10])
            message += f". Available {reference_type}s: {names_str}"
            if len(available_names) > 10:
                message += f" (and {len(available_names) - 10} more)"
        super().__init__(message)


# ============================================================================
# Validation Errors (Pre-execution Checks)
# ============================================================================


class WorkflowValidationError(SerializerError):
    """A pre-execution check failed for a specific block.

    Attributes:
        message: Human-readable error message.
        block_id: Id of the offending block.
        block_type: Type of the offending block.
        block_name: Display name of the offending block.

    Examples:
        ```python
        except WorkflowValidationError as e:
            highlight_block(e.block_id)
            show_toast(e.message)
        ```
    """

    def __init__(
        self,
        message: str,
        block_id: str | None = None,
        block_type: str | None = None,
        block_name: str | None = None,
    ) -> None:
        """Initialize the WorkflowValidationError.

        Args:
            message: Human-readable error message.
            block_id: Id of the offending block.
            block_type: Type of the offending block.
            block_name: Display name of the offending block.
        """
        self.block_id = block_id
        self.block_type = block_type
        self.block_name = block_name
        super().__init__(message)


class MissingRequiredFieldsError(WorkflowValidationError):
    """Raised when active, required, user-only tool parameters are empty.

    Attributes:
        missing_fields: Display names of every missing field, in catalog order.
    """

    def __init__(
        self,
        block_id: str,
        block_type: str,
        block_name: str,
        missing_fields: list[str],
    ) -> None:
        """Initialize the MissingRequiredFieldsError.

        Args:
            block_id: Id of the offending block.
            block_type: Type of the offending block.
            block_name: Display name of the offending block.
            missing_fields: Display names of the missing fields.
        """
        self.missing_fields = missing_fields
        super().__init__(
            f"{block_name} is missing required fields: {', '.join(missing_fields)}",
            block_id=block_id,
            block_type=block_type,
            block_name=block_name,
        )


class EmptyCollectionError(WorkflowValidationError):
    """Raised when a forEach loop or collection parallel has nothing to iterate.

    Attributes:
        container_type: "loop" or "parallel".
    """

    def __init__(
        self,
        block_id: str,
        container_type: str,
        block_name: str,
    ) -> None:
        """Initialize the EmptyCollectionError.

        Args:
            block_id: Id of the container block.
            container_type: "loop" or "parallel".
            block_name: Display name of the container block.
        """
        self.container_type = container_type
        if container_type == "loop":
            message = (
                f'Loop "{block_name}" requires a collection to iterate over. '
                "Provide a non-empty array, object, or a reference to one."
            )
        else:
            message = (
                f'Parallel "{block_name}" requires a collection to distribute. '
                "Provide a non-empty array, object, or a reference to one."
            )
        super().__init__(
            message,
            block_id=block_id,
            block_type=container_type,
            block_name=block_name,
        )
