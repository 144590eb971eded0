"""Visibility conditions for catalog sub-fields.

A condition is a small expression tree rather than a callable so that it can
be declared as plain data (YAML/JSON) and evaluated without executing code:

    {"field": "operation", "value": ["send", "reply"]}
    {"field": "authMethod", "value": "oauth", "not": true,
     "and": {"field": "operation", "value": "send"}}

Semantics:
    - ``value`` is a scalar (equality) or a list (membership)
    - ``not`` inverts the comparison of this node only
    - ``and`` must also hold for the condition to be true
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

__all__ = ["FieldCondition", "evaluate_condition"]


class FieldCondition(BaseModel):
    """Comparison of one parameter against a value or value-set.

    Fields:
        field: Parameter id to read.
        value: Expected value, or list of accepted values.
        negate: Invert the comparison (``not`` on the wire).
        and_: Further condition that must also hold (``and`` on the wire).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    field: str = Field(..., min_length=1)
    value: Any = None
    negate: bool = Field(default=False, alias="not")
    and_: FieldCondition | None = Field(default=None, alias="and")

    def matches(self, values: Mapping[str, Any]) -> bool:
        """Evaluate this condition against a parameter bag."""
        return evaluate_condition(self, values)


def _compare(condition: FieldCondition, values: Mapping[str, Any]) -> bool:
    actual = values.get(condition.field)
    if isinstance(condition.value, (list, tuple)):
        matched = actual in condition.value
    else:
        matched = actual == condition.value
    return not matched if condition.negate else matched


def evaluate_condition(
    condition: FieldCondition | None, values: Mapping[str, Any]
) -> bool:
    """Evaluate a condition chain; a missing condition is always true.

    Args:
        condition: Root of the condition chain, or None.
        values: Resolved parameter bag of the block.

    Returns:
        True when every node of the chain holds.

    Example:
        >>> cond = FieldCondition(field="operation", value=["send", "reply"])
        >>> evaluate_condition(cond, {"operation": "send"})
        True
    """
    node = condition
    while node is not None:
        if not _compare(node, values):
            return False
        node = node.and_
    return True


FieldCondition.model_rebuild()
