"""Shared test fixtures for the blockflow test suite.

Available Fixtures
==================

Catalog (from tests/fixtures/catalog.py)
----------------------------------------

Fixtures:
    catalog: In-memory ``CatalogRegistry`` with starter, agent, api, gmail,
        condition and slack blocks and their tools.

Helpers:
    build_catalog: Same catalog as a plain function; also usable as the CLI
        reference ``tests.fixtures.catalog:build_catalog``.
    make_block: Build a ``BlockState`` from a ``{sub_block_id: value}`` dict.

Graphs (from tests/fixtures/graphs.py)
--------------------------------------

Fixtures:
    sample_graph: Research workflow with a forEach loop.

Example:
    >>> def test_serialize(catalog, sample_graph):
    ...     ir = serialize_workflow(
    ...         sample_graph.blocks, sample_graph.edges, sample_graph.loops,
    ...         catalog=catalog,
    ...     )
    ...     assert ir.version == "1.0"
"""

from __future__ import annotations

from tests.fixtures.catalog import build_catalog, catalog, make_block
from tests.fixtures.graphs import build_sample_graph, sample_graph

__all__ = [
    "build_catalog",
    "build_sample_graph",
    "catalog",
    "make_block",
    "sample_graph",
]
