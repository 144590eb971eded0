"""Tests for safe response format parsing."""

from __future__ import annotations

import pytest
from structlog.testing import capture_logs

from blockflow.serializer.response_format import (
    parse_response_format_safely,
    try_parse_response_format,
)


class TestTryParseResponseFormat:
    def test_json_object(self) -> None:
        result = try_parse_response_format('{"type": "object"}')

        assert result.ok
        assert result.value == {"type": "object"}

    def test_structured_value_passes_through(self) -> None:
        schema = {"type": "object", "properties": {"a": {"type": "string"}}}

        assert try_parse_response_format(schema).value is schema

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_empty_values_are_absent(self, value: object) -> None:
        result = try_parse_response_format(value)

        assert result.ok
        assert result.value is None

    def test_reference_passes_through(self) -> None:
        assert try_parse_response_format("<start.schema>").value == "<start.schema>"

    def test_invalid_json_reports_error(self) -> None:
        result = try_parse_response_format("not json")

        assert result.ok is False
        assert result.value is None
        assert result.error


class TestParseResponseFormatSafely:
    def test_parses_json(self) -> None:
        assert parse_response_format_safely('{"type":"object"}') == {"type": "object"}

    def test_invalid_json_returns_none_and_warns(self) -> None:
        with capture_logs() as logs:
            result = parse_response_format_safely("not json", block_id="agent-1")

        assert result is None
        assert len(logs) == 1
        assert logs[0]["event"] == "response_format_parse_failed"
        assert logs[0]["log_level"] == "warning"
        assert logs[0]["block_id"] == "agent-1"

    def test_truncated_json_never_raises(self) -> None:
        with capture_logs():
            assert parse_response_format_safely('{"type": "obj') is None

    def test_valid_input_is_not_logged(self) -> None:
        with capture_logs() as logs:
            parse_response_format_safely("[1, 2]")

        assert logs == []
