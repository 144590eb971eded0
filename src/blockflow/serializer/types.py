"""Closed type vocabularies for the workflow serializer.

Block categories, sub-field modes, tool parameter visibility and container
kinds are modelled as ``str`` enums so they round-trip through JSON unchanged
while still allowing exhaustive handling in code.
"""

from __future__ import annotations

from enum import Enum

__all__ = [
    "BlockCategory",
    "ContainerType",
    "SubBlockMode",
    "ParamVisibility",
    "LoopType",
    "ParallelType",
    "ConditionType",
]


class BlockCategory(str, Enum):
    """Category of a block as reported in IR metadata.

    Catalog blocks are ``blocks``, ``tools`` or ``triggers``. ``subflow`` is
    reserved for loop/parallel containers, which never come from the catalog.
    """

    BLOCKS = "blocks"
    TOOLS = "tools"
    TRIGGERS = "triggers"
    SUBFLOW = "subflow"


class ContainerType(str, Enum):
    """Block types that group members instead of invoking a tool."""

    LOOP = "loop"
    PARALLEL = "parallel"

    @classmethod
    def of(cls, block_type: str) -> ContainerType | None:
        """Return the container kind for a block type, or None for tool blocks."""
        try:
            return cls(block_type)
        except ValueError:
            return None


class SubBlockMode(str, Enum):
    """Editor mode a sub-field is shown in."""

    BASIC = "basic"
    ADVANCED = "advanced"
    BOTH = "both"
    TRIGGER = "trigger"


class ParamVisibility(str, Enum):
    """Who may supply a tool parameter."""

    USER_ONLY = "user-only"
    USER_OR_LLM = "user-or-llm"
    LLM_ONLY = "llm-only"
    HIDDEN = "hidden"


class LoopType(str, Enum):
    FOR = "for"
    FOR_EACH = "forEach"
    WHILE = "while"
    DO_WHILE = "doWhile"


class ParallelType(str, Enum):
    COUNT = "count"
    COLLECTION = "collection"


class ConditionType(str, Enum):
    """Branch tag of a conditional connection."""

    IF = "if"
    ELSE_IF = "else if"
    ELSE = "else"
