"""Tests for catalog schemas, conditions, registries and the loader."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from blockflow.serializer.catalog import (
    BlockCatalog,
    BlockRegistry,
    BlockSchema,
    CatalogRegistry,
    FieldCondition,
    SubBlockSchema,
    ToolParamSchema,
    ToolRegistry,
    ToolSchema,
    evaluate_condition,
    load_catalog,
)
from blockflow.serializer.errors import (
    DuplicateComponentError,
    ReferenceResolutionError,
)
from blockflow.serializer.types import BlockCategory, ParamVisibility

# =============================================================================
# Conditions
# =============================================================================


class TestFieldCondition:
    def test_equality(self) -> None:
        cond = FieldCondition(field="operation", value="send")

        assert cond.matches({"operation": "send"}) is True
        assert cond.matches({"operation": "read"}) is False

    def test_membership(self) -> None:
        cond = FieldCondition(field="method", value=["POST", "PUT"])

        assert cond.matches({"method": "PUT"}) is True
        assert cond.matches({"method": "GET"}) is False

    def test_negation(self) -> None:
        cond = FieldCondition(field="method", value="GET", negate=True)

        assert cond.matches({"method": "POST"}) is True
        assert cond.matches({"method": "GET"}) is False

    def test_and_chain(self) -> None:
        cond = FieldCondition.model_validate(
            {
                "field": "operation",
                "value": "send",
                "and": {"field": "auth", "value": "oauth", "not": True},
            }
        )

        assert cond.matches({"operation": "send", "auth": "key"}) is True
        assert cond.matches({"operation": "send", "auth": "oauth"}) is False
        assert cond.matches({"operation": "read", "auth": "key"}) is False

    def test_missing_condition_is_true(self) -> None:
        assert evaluate_condition(None, {}) is True

    def test_missing_field_compares_as_none(self) -> None:
        assert FieldCondition(field="x", value=None).matches({}) is True


# =============================================================================
# Schemas
# =============================================================================


class TestBlockSchema:
    def test_subflow_category_is_reserved(self) -> None:
        with pytest.raises(ValidationError, match="reserved"):
            BlockSchema(type="x", category=BlockCategory.SUBFLOW)

    def test_canonical_id_may_not_equal_sub_block_id(self) -> None:
        with pytest.raises(ValidationError, match="Canonical"):
            BlockSchema(
                type="x",
                sub_blocks=(
                    SubBlockSchema(id="model"),
                    SubBlockSchema(id="modelAdvanced", canonical_param_id="model"),
                ),
            )

    def test_default_tool(self) -> None:
        assert BlockSchema(type="x", tools=("a", "b")).default_tool == "a"
        assert BlockSchema(type="x").default_tool == ""

    def test_sub_blocks_for_param(self, catalog: CatalogRegistry) -> None:
        agent = catalog.blocks.get("agent")

        ids = [sb.id for sb in agent.sub_blocks_for_param("model")]

        assert ids == ["modelBasic", "modelAdvanced"]
        assert agent.find_sub_block("tools") is not None
        assert agent.find_sub_block("nope") is None

    def test_display_name_falls_back_to_id(self) -> None:
        assert SubBlockSchema(id="url", title="URL").display_name == "URL"
        assert SubBlockSchema(id="url").display_name == "url"


class TestToolSchema:
    def test_required_user_params(self) -> None:
        tool = ToolSchema(
            id="t",
            params={
                "a": ToolParamSchema(required=True, visibility=ParamVisibility.USER_ONLY),
                "b": ToolParamSchema(required=True),
                "c": ToolParamSchema(visibility=ParamVisibility.USER_ONLY),
                "d": ToolParamSchema(
                    required=True, visibility=ParamVisibility.USER_ONLY
                ),
            },
        )

        assert tool.required_user_params() == ["a", "d"]


# =============================================================================
# Registries
# =============================================================================


class TestBlockRegistry:
    def test_register_and_get(self) -> None:
        registry = BlockRegistry()
        schema = BlockSchema(type="api")

        registry.register(schema)

        assert registry.get("api") is schema
        assert registry.has("api")
        assert registry.list_names() == ["api"]

    def test_register_as_decorator(self) -> None:
        registry = BlockRegistry()

        @registry.register
        def note_block() -> BlockSchema:
            return BlockSchema(type="note")

        assert registry.has("note")
        assert callable(note_block)

    def test_duplicate_registration(self) -> None:
        registry = BlockRegistry()
        registry.register(BlockSchema(type="api"))

        with pytest.raises(DuplicateComponentError) as exc_info:
            registry.register(BlockSchema(type="api"))

        assert exc_info.value.component_type == "block"
        assert exc_info.value.component_name == "api"

    def test_unknown_block(self) -> None:
        registry = BlockRegistry()
        registry.register(BlockSchema(type="api"))

        with pytest.raises(ReferenceResolutionError) as exc_info:
            registry.get("missing")

        assert exc_info.value.available_names == ["api"]


class TestToolRegistry:
    def test_register_and_get(self) -> None:
        registry = ToolRegistry()
        registry.register(ToolSchema(id="http_request"))

        assert registry.get("http_request").id == "http_request"
        assert registry.list_names() == ["http_request"]

    def test_duplicate_registration(self) -> None:
        registry = ToolRegistry()
        registry.register(ToolSchema(id="t"))

        with pytest.raises(DuplicateComponentError):
            registry.register(ToolSchema(id="t"))


class TestCatalogRegistry:
    def test_implements_protocol(self, catalog: CatalogRegistry) -> None:
        assert isinstance(catalog, BlockCatalog)

    def test_lookups_return_none_for_unknown(self, catalog: CatalogRegistry) -> None:
        assert catalog.get_block("nope") is None
        assert catalog.get_tool("nope") is None
        assert catalog.get_block("agent") is not None
        assert catalog.get_tool("http_request") is not None


# =============================================================================
# Loader
# =============================================================================


class TestLoadCatalog:
    def test_loads_factory(self) -> None:
        catalog = load_catalog("tests.fixtures.catalog:build_catalog")

        assert catalog.get_block("agent") is not None

    @pytest.mark.parametrize(
        "reference",
        [
            "no_colon",
            "tests.fixtures.catalog:",
            "blockflow_nonexistent_module:catalog",
            "tests.fixtures.catalog:missing",
            "tests.fixtures.catalog:TOOLS",
        ],
    )
    def test_invalid_references(self, reference: str) -> None:
        with pytest.raises(ReferenceResolutionError) as exc_info:
            load_catalog(reference)

        assert exc_info.value.reference_type == "catalog"
