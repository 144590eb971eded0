from __future__ import annotations


class BlockflowError(Exception):
    """Base exception class for all blockflow-specific errors.

    Callers at a process boundary (CLI, API handler) can catch this single
    type while letting system exceptions propagate naturally.

    Attributes:
        message: Human-readable error message describing what went wrong.

    Example:
        ```python
        try:
            serializer.serialize_workflow(blocks, edges, loops)
        except BlockflowError as e:
            logger.error("serialization_failed", error=e.message)
        ```
    """

    def __init__(self, message: str) -> None:
        """Initialize the BlockflowError.

        Args:
            message: Human-readable error message.
        """
        self.message = message
        super().__init__(message)
