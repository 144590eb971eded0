"""Safe parsing of a block's structured response format.

The response format is edited as text. It may be a JSON schema, a runtime
reference such as ``<start.schema>``, or half-typed garbage. Parsing never
raises: unusable input yields no response format and a logged warning.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from blockflow.logging import get_logger

__all__ = [
    "ResponseFormatParse",
    "try_parse_response_format",
    "parse_response_format_safely",
]

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class ResponseFormatParse:
    """Outcome of parsing a response format.

    Attributes:
        value: Parsed format, the raw reference string, or None.
        error: Parser error message when the text was not valid JSON.
    """

    value: Any = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _is_reference(text: str) -> bool:
    return text.startswith("<") and ">" in text


def try_parse_response_format(value: Any) -> ResponseFormatParse:
    """Parse a response format without logging.

    Rules:
        - None or blank text: no format
        - non-string values (already structured): returned as-is
        - text starting with ``<`` and containing ``>``: a runtime reference,
          returned as-is
        - anything else: parsed as JSON
    """
    if value is None:
        return ResponseFormatParse()
    if not isinstance(value, str):
        return ResponseFormatParse(value=value)

    text = value.strip()
    if not text:
        return ResponseFormatParse()
    if _is_reference(text):
        return ResponseFormatParse(value=text)

    try:
        return ResponseFormatParse(value=json.loads(text))
    except json.JSONDecodeError as e:
        return ResponseFormatParse(error=str(e))


def parse_response_format_safely(value: Any, **log_context: Any) -> Any | None:
    """Parse a response format, logging and returning None on bad JSON.

    Args:
        value: Raw ``responseFormat`` param.
        **log_context: Extra fields for the warning (e.g. ``block_id``).

    Returns:
        The parsed format, a reference string, or None.

    Example:
        >>> parse_response_format_safely('{"type": "object"}')
        {'type': 'object'}
        >>> parse_response_format_safely("not json") is None
        True
    """
    result = try_parse_response_format(value)
    if not result.ok:
        logger.warning(
            "response_format_parse_failed",
            error=result.error,
            **log_context,
        )
    return result.value
