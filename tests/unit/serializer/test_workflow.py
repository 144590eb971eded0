"""Tests for the workflow serialization orchestrator."""

from __future__ import annotations

from unittest.mock import patch

import pytest
from structlog.testing import capture_logs

from blockflow.serializer.catalog import CatalogRegistry
from blockflow.serializer.errors import (
    EmptyCollectionError,
    MissingRequiredFieldsError,
    ReferenceResolutionError,
    UnknownBlockTypeError,
)
from blockflow.serializer.models import (
    ConnectionCondition,
    Edge,
    Loop,
    Parallel,
    WorkflowState,
)
from blockflow.serializer.types import ConditionType, LoopType, ParallelType
from blockflow.serializer.workflow import (
    WorkflowSerializer,
    deserialize_workflow,
    serialize_workflow,
)
from tests.fixtures.catalog import make_block


class TestSerializeWorkflow:
    def test_sample_graph(
        self, catalog: CatalogRegistry, sample_graph: WorkflowState
    ) -> None:
        ir = serialize_workflow(
            sample_graph.blocks,
            sample_graph.edges,
            sample_graph.loops,
            catalog=catalog,
        )

        assert ir.version == "1.0"
        assert [b.id for b in ir.blocks] == [
            "start",
            "researcher",
            "each_item",
            "summarize",
            "notify",
        ]
        assert [(c.source, c.target) for c in ir.connections] == [
            ("start", "researcher"),
            ("researcher", "each_item"),
            ("each_item", "summarize"),
            ("summarize", "notify"),
        ]
        assert ir.connections[2].source_handle == "loop-start-source"
        assert ir.loops["each_item"].nodes == ["summarize", "notify"]
        assert ir.loops["each_item"].loop_type is LoopType.FOR_EACH
        assert ir.parallels == {}

    def test_missing_registries_default_to_empty(self, catalog: CatalogRegistry) -> None:
        blocks = {"a": make_block("a", "api", values={"url": "u"})}

        ir = serialize_workflow(blocks, [], catalog=catalog)

        assert ir.loops == {}
        assert ir.parallels == {}

    def test_connection_condition_is_carried(self, catalog: CatalogRegistry) -> None:
        blocks = {
            "c": make_block("c", "condition"),
            "a": make_block("a", "api"),
        }
        edges = [
            Edge(
                source="c",
                target="a",
                source_handle="condition-if",
                condition=ConnectionCondition(type=ConditionType.IF, expression="x > 1"),
            )
        ]

        ir = serialize_workflow(blocks, edges, catalog=catalog)

        assert ir.connections[0].condition == ConnectionCondition(
            type=ConditionType.IF, expression="x > 1"
        )

    def test_unknown_block_type_aborts(self, catalog: CatalogRegistry) -> None:
        blocks = {
            "a": make_block("a", "api"),
            "b": make_block("b", "mystery"),
        }

        with pytest.raises(UnknownBlockTypeError, match="mystery"):
            serialize_workflow(blocks, [], catalog=catalog)

    def test_dangling_edge_is_rejected(self, catalog: CatalogRegistry) -> None:
        blocks = {"a": make_block("a", "api")}

        with pytest.raises(ReferenceResolutionError) as exc_info:
            serialize_workflow(blocks, [Edge(source="a", target="ghost")], catalog=catalog)

        assert exc_info.value.reference_name == "ghost"

    def test_dangling_loop_member_is_rejected(self, catalog: CatalogRegistry) -> None:
        blocks = {"loop": make_block("loop", "loop")}
        loops = {"loop": Loop(id="loop", nodes=["ghost"])}

        with pytest.raises(ReferenceResolutionError):
            serialize_workflow(blocks, [], loops, catalog=catalog)

    def test_loop_without_container_block_is_rejected(
        self, catalog: CatalogRegistry
    ) -> None:
        blocks = {"a": make_block("a", "condition")}
        loops = {"ghost": Loop(id="ghost", nodes=["a"])}

        with pytest.raises(ReferenceResolutionError) as exc_info:
            serialize_workflow(blocks, [], loops, catalog=catalog)

        assert exc_info.value.reference_type == "loop"
        assert exc_info.value.reference_name == "ghost"

    def test_container_block_of_wrong_kind_is_rejected(
        self, catalog: CatalogRegistry
    ) -> None:
        blocks = {
            "each": make_block("each", "loop"),
            "a": make_block("a", "condition"),
        }
        parallels = {"each": Parallel(id="each", nodes=["a"])}

        with pytest.raises(ReferenceResolutionError) as exc_info:
            serialize_workflow(blocks, [], None, parallels, catalog=catalog)

        assert exc_info.value.reference_type == "parallel"

    def test_registry_key_must_match_entry_id(self, catalog: CatalogRegistry) -> None:
        blocks = {
            "loop-1": make_block("loop-1", "loop"),
            "a": make_block("a", "condition"),
        }
        loops = {"loop-1": Loop(id="loop-2", nodes=["a"])}

        with pytest.raises(ReferenceResolutionError, match="loop-2"):
            serialize_workflow(blocks, [], loops, catalog=catalog)

    def test_inputs_are_not_mutated(
        self, catalog: CatalogRegistry, sample_graph: WorkflowState
    ) -> None:
        before = sample_graph.model_dump()

        serialize_workflow(
            sample_graph.blocks, sample_graph.edges, sample_graph.loops, catalog=catalog
        )

        assert sample_graph.model_dump() == before

    def test_serialized_is_logged(
        self, catalog: CatalogRegistry, sample_graph: WorkflowState
    ) -> None:
        with capture_logs() as logs:
            serialize_workflow(
                sample_graph.blocks, sample_graph.edges, sample_graph.loops,
                catalog=catalog,
            )

        done = [e for e in logs if e["event"] == "workflow_serialized"]
        assert done[0]["block_count"] == 5
        assert done[0]["connection_count"] == 4


class TestValidationOrdering:
    def _graph(self, items: object) -> tuple[dict, dict]:
        blocks = {
            "loop-1": make_block("loop-1", "loop", name="Each"),
            "fetch": make_block("fetch", "api", values={}),
        }
        loops = {
            "loop-1": Loop(
                id="loop-1",
                nodes=["fetch"],
                loop_type=LoopType.FOR_EACH,
                for_each_items=items,
            )
        }
        return blocks, loops

    @pytest.mark.parametrize("items", [[], {}, ""])
    def test_empty_collection_fails_before_blocks(
        self, catalog: CatalogRegistry, items: object
    ) -> None:
        blocks, loops = self._graph(items)

        with patch("blockflow.serializer.workflow.serialize_block") as mock_serialize:
            with pytest.raises(EmptyCollectionError) as exc_info:
                serialize_workflow(
                    blocks, [], loops, validate_required=True, catalog=catalog
                )

        assert exc_info.value.block_id == "loop-1"
        mock_serialize.assert_not_called()

    def test_non_empty_collection_reaches_block_checks(
        self, catalog: CatalogRegistry
    ) -> None:
        blocks, loops = self._graph([1])

        with pytest.raises(MissingRequiredFieldsError) as exc_info:
            serialize_workflow(blocks, [], loops, validate_required=True, catalog=catalog)

        assert exc_info.value.block_id == "fetch"

    def test_no_validation_by_default(self, catalog: CatalogRegistry) -> None:
        blocks, loops = self._graph([])

        ir = serialize_workflow(blocks, [], loops, catalog=catalog)

        assert len(ir.blocks) == 2

    def test_collection_parallel(self, catalog: CatalogRegistry) -> None:
        blocks = {"p": make_block("p", "parallel", name="Fan")}
        parallels = {
            "p": Parallel(id="p", parallel_type=ParallelType.COLLECTION, distribution=[])
        }

        with pytest.raises(EmptyCollectionError, match='Parallel "Fan"'):
            serialize_workflow(
                blocks, [], None, parallels, validate_required=True, catalog=catalog
            )


class TestReferenceWarnings:
    def _graph(self) -> tuple[dict, list[Edge]]:
        blocks = {
            "first": make_block(
                "first",
                "agent",
                name="First",
                values={"modelBasic": "gpt-4o", "systemPrompt": "Use <second.content>"},
            ),
            "second": make_block("second", "api", name="Second", values={"url": "u"}),
        }
        return blocks, [Edge(source="first", target="second")]

    def test_downstream_reference_warns(self, catalog: CatalogRegistry) -> None:
        blocks, edges = self._graph()

        with capture_logs() as logs:
            serialize_workflow(blocks, edges, catalog=catalog)

        warnings = [e for e in logs if e["event"] == "inaccessible_block_reference"]
        assert len(warnings) == 1
        assert warnings[0]["block_id"] == "first"
        assert warnings[0]["reference"] == "second"

    def test_reference_check_can_be_disabled(self, catalog: CatalogRegistry) -> None:
        blocks, edges = self._graph()

        with capture_logs() as logs:
            serialize_workflow(blocks, edges, catalog=catalog, check_references=False)

        assert not [e for e in logs if e["event"] == "inaccessible_block_reference"]

    def test_single_block_serialization_skips_reference_checks(
        self, catalog: CatalogRegistry
    ) -> None:
        blocks, _ = self._graph()
        serializer = WorkflowSerializer(catalog, check_references=True)

        with capture_logs() as logs:
            serialized = serializer.serialize_block(blocks["first"])

        assert serialized.config.params["systemPrompt"] == "Use <second.content>"
        assert not [e for e in logs if e["event"] == "inaccessible_block_reference"]


class TestDeserializeWorkflow:
    def test_rebuilds_graph(
        self, catalog: CatalogRegistry, sample_graph: WorkflowState
    ) -> None:
        ir = serialize_workflow(
            sample_graph.blocks, sample_graph.edges, sample_graph.loops, catalog=catalog
        )

        state = deserialize_workflow(ir, catalog=catalog)

        assert list(state.blocks) == list(sample_graph.blocks)
        assert {b.type for b in state.blocks.values()} == {
            "starter",
            "agent",
            "loop",
            "api",
        }
        assert state.loops["each_item"].nodes == ["summarize", "notify"]
        assert state.parallels == {}

    def test_edges_get_fresh_ids(
        self, catalog: CatalogRegistry, sample_graph: WorkflowState
    ) -> None:
        ir = serialize_workflow(
            sample_graph.blocks, sample_graph.edges, sample_graph.loops, catalog=catalog
        )

        state = deserialize_workflow(ir, catalog=catalog)

        original_ids = {e.id for e in sample_graph.edges}
        assert not original_ids & {e.id for e in state.edges}
        assert [(e.source, e.target, e.source_handle) for e in state.edges] == [
            (e.source, e.target, e.source_handle) for e in sample_graph.edges
        ]

    def test_serializer_methods_match_module_api(
        self, catalog: CatalogRegistry, sample_graph: WorkflowState
    ) -> None:
        serializer = WorkflowSerializer(catalog)

        ir = serializer.serialize_workflow(
            sample_graph.blocks, sample_graph.edges, sample_graph.loops
        )
        block = serializer.deserialize_block(
            serializer.serialize_block(sample_graph.blocks["notify"])
        )

        assert ir == serialize_workflow(
            sample_graph.blocks, sample_graph.edges, sample_graph.loops, catalog=catalog
        )
        assert block.value_of("url") == "https://example.com/hook"
