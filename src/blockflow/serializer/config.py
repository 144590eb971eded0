"""Serializer constants and default values.

Values that are part of the persisted-format contract or of the container
metadata live here in a frozen dataclass so they cannot drift at runtime.
"""

from __future__ import annotations

from dataclasses import dataclass, field

__all__ = [
    "ContainerMetadataDefaults",
    "SerializerDefaults",
    "DEFAULTS",
]


@dataclass(frozen=True, slots=True)
class ContainerMetadataDefaults:
    """Fixed metadata emitted for a container block.

    Attributes:
        name: Display name used when the block has none.
        description: Description written to IR metadata.
        color: Hex color written to IR metadata.
    """

    name: str
    description: str
    color: str


@dataclass(frozen=True, slots=True)
class SerializerDefaults:
    """Default values for workflow serialization.

    Attributes:
        VERSION: Version tag written to every serialized workflow. Readers of
            stored workflows must keep accepting this value.
        SUPPORTED_VERSIONS: Versions the IR parser accepts.
        START_BLOCK_TYPES: Block types that act as the workflow entry point.
            The first block of one of these types is visible to every block.
        INPUT_FORMAT_FIELD: Sub-field id of the start block input schema.
        RESPONSE_FORMAT_PARAM: Param holding a block's structured output schema.
        TOOLS_PARAM: Param holding an agent's tool list.
        AGENT_BLOCK_TYPE: Block type whose tool list may mix custom tools.
        CUSTOM_TOOL_TYPE: ``type`` of an agent tool entry defined inline.
        LOOP: Metadata for loop containers.
        PARALLEL: Metadata for parallel containers.
        REFERENCE_PREFIXES: Reference roots that never name a block.
    """

    VERSION: str = "1.0"
    SUPPORTED_VERSIONS: tuple[str, ...] = ("1.0",)

    START_BLOCK_TYPES: frozenset[str] = frozenset({"starter", "start_trigger"})
    INPUT_FORMAT_FIELD: str = "inputFormat"
    RESPONSE_FORMAT_PARAM: str = "responseFormat"
    TOOLS_PARAM: str = "tools"
    AGENT_BLOCK_TYPE: str = "agent"
    CUSTOM_TOOL_TYPE: str = "custom-tool"

    LOOP: ContainerMetadataDefaults = field(
        default_factory=lambda: ContainerMetadataDefaults(
            name="Loop", description="Loop container", color="#2FB3FF"
        )
    )
    PARALLEL: ContainerMetadataDefaults = field(
        default_factory=lambda: ContainerMetadataDefaults(
            name="Parallel", description="Parallel container", color="#FEE12B"
        )
    )

    REFERENCE_PREFIXES: frozenset[str] = frozenset(
        {"loop", "parallel", "start", "variable"}
    )


DEFAULTS = SerializerDefaults()
