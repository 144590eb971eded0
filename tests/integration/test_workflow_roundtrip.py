"""End-to-end tests: editor document -> IR text -> editor graph."""

from __future__ import annotations

import json
from typing import Any

import pytest
from structlog.testing import capture_logs

from blockflow.serializer import (
    EmptyCollectionError,
    MissingRequiredFieldsError,
    WorkflowSerializer,
    WorkflowWriter,
    build_accessibility_map,
    parse_response_format_safely,
    parse_serialized_workflow,
    parse_workflow_state,
    resolve_canonical_params,
)
from blockflow.serializer.catalog import CatalogRegistry
from blockflow.serializer.models import Edge, Loop, WorkflowState
from blockflow.serializer.types import LoopType
from tests.fixtures.catalog import make_block
from tests.fixtures.graphs import sample_graph_document


def _serialize(serializer: WorkflowSerializer, state: WorkflowState, **kwargs: Any):
    return serializer.serialize_workflow(
        state.blocks, state.edges, state.loops, state.parallels, **kwargs
    )


class TestRoundTrip:
    def test_document_round_trip(self, catalog: CatalogRegistry) -> None:
        serializer = WorkflowSerializer(catalog)
        state = parse_workflow_state(json.dumps(sample_graph_document()))

        text = WorkflowWriter().to_yaml(_serialize(serializer, state))
        restored = serializer.deserialize_workflow(parse_serialized_workflow(text))

        assert list(restored.blocks) == list(state.blocks)
        for block_id, block in state.blocks.items():
            assert restored.blocks[block_id].type == block.type
        notify = restored.blocks["notify"]
        for field in ("url", "method", "body"):
            assert notify.value_of(field) == state.blocks["notify"].value_of(field)
        assert restored.loops["each_item"].for_each_items == "<researcher.content>"
        assert [(e.source, e.target) for e in restored.edges] == [
            (e.source, e.target) for e in state.edges
        ]


class TestPreExecutionValidation:
    def _state(self, items: Any, url: str = "u") -> WorkflowState:
        blocks = {
            "start": make_block("start", "starter"),
            "rows": make_block("rows", "loop", name="Rows"),
            "fetch": make_block(
                "fetch", "api", name="Fetch", values={"url": url, "method": "GET"}
            ),
        }
        loops = {
            "rows": Loop(
                id="rows",
                nodes=["fetch"],
                loop_type=LoopType.FOR_EACH,
                for_each_items=items,
            )
        }
        edges = [Edge(source="start", target="rows")]
        return WorkflowState(blocks=blocks, edges=edges, loops=loops)

    @pytest.mark.parametrize("items", [[], {}, ""])
    def test_empty_for_each_names_loop(
        self, catalog: CatalogRegistry, items: Any
    ) -> None:
        with pytest.raises(EmptyCollectionError) as exc_info:
            _serialize(
                WorkflowSerializer(catalog), self._state(items), validate_required=True
            )

        assert exc_info.value.block_id == "rows"

    def test_non_empty_for_each_passes(self, catalog: CatalogRegistry) -> None:
        ir = _serialize(
            WorkflowSerializer(catalog), self._state([1]), validate_required=True
        )

        assert ir.loops["rows"].for_each_items == [1]

    def test_required_field_names_block_and_field(
        self, catalog: CatalogRegistry
    ) -> None:
        with pytest.raises(MissingRequiredFieldsError) as exc_info:
            _serialize(
                WorkflowSerializer(catalog),
                self._state([1], url=""),
                validate_required=True,
            )

        assert exc_info.value.block_name == "Fetch"
        assert exc_info.value.missing_fields == ["URL"]


class TestParameterResolution:
    @pytest.mark.parametrize("advanced_mode", [False, True])
    def test_advanced_field_presence(
        self, catalog: CatalogRegistry, advanced_mode: bool
    ) -> None:
        block = make_block(
            "fetch",
            "api",
            values={"url": "u", "headers": [["k", "v"]]},
            advanced_mode=advanced_mode,
        )

        serialized = WorkflowSerializer(catalog).serialize_block(block)

        assert ("headers" in serialized.config.params) is advanced_mode

    @pytest.mark.parametrize(
        ("advanced_mode", "expected"), [(False, "gpt-4"), (True, "custom-llm")]
    )
    def test_model_canonical_group(
        self, catalog: CatalogRegistry, advanced_mode: bool, expected: str
    ) -> None:
        block = make_block(
            "a",
            "agent",
            values={"modelBasic": "gpt-4", "modelAdvanced": "custom-llm"},
            advanced_mode=advanced_mode,
        )

        params = WorkflowSerializer(catalog).serialize_block(block).config.params

        assert params["model"] == expected
        assert "modelBasic" not in params
        assert "modelAdvanced" not in params

    def test_canonical_resolution_is_idempotent(self, catalog: CatalogRegistry) -> None:
        sub_blocks = catalog.blocks.get("agent").sub_blocks
        once = resolve_canonical_params(
            {"modelBasic": "gpt-4", "modelAdvanced": "custom-llm"},
            sub_blocks,
            advanced_mode=True,
        )

        assert resolve_canonical_params(once, sub_blocks, advanced_mode=True) == once
        assert resolve_canonical_params(once, sub_blocks, advanced_mode=False) == once


class TestAccessibility:
    def test_loop_member_sees_siblings_start_and_ancestors(
        self, sample_graph: WorkflowState
    ) -> None:
        access = build_accessibility_map(
            sample_graph.blocks, sample_graph.edges, sample_graph.loops
        )

        assert access["notify"] >= {
            "notify",
            "summarize",
            "start",
            "researcher",
            "each_item",
        }
        assert "notify" not in access["researcher"]


class TestResponseFormat:
    def test_valid_and_invalid(self) -> None:
        assert parse_response_format_safely('{"type":"object"}') == {"type": "object"}

        with capture_logs() as logs:
            assert parse_response_format_safely("not json") is None

        assert logs[0]["event"] == "response_format_parse_failed"
        assert logs[0]["log_level"] == "warning"
