"""``blockflow validate``: run pre-execution checks on an editor graph."""

from __future__ import annotations

from pathlib import Path

import click

from blockflow.cli.common import (
    catalog_option,
    cli_error_handler,
    get_cli_context,
    resolve_catalog,
)
from blockflow.cli.output import format_success
from blockflow.serializer.parser import load_workflow_state
from blockflow.serializer.workflow import WorkflowSerializer


@click.command("validate")
@click.argument("graph", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@catalog_option
@click.pass_context
def validate(ctx: click.Context, graph: Path, catalog_ref: str | None) -> None:
    """Validate an editor graph before execution.

    Serializes the graph with validation on: every forEach loop and
    collection parallel needs a non-empty collection, and every required
    user-only tool field must be filled in. The first failure is reported
    with the offending block.

    Examples:
        blockflow validate graph.json --catalog myapp.blocks:catalog
    """
    config = get_cli_context(ctx).config
    with cli_error_handler():
        catalog = resolve_catalog(catalog_ref)
        state = load_workflow_state(graph)
        serializer = WorkflowSerializer(
            catalog, check_references=config.serializer.check_references
        )
        ir = serializer.serialize_workflow(
            state.blocks,
            state.edges,
            state.loops,
            state.parallels,
            validate_required=True,
        )
        click.echo(format_success(f"Workflow '{graph.name}' is valid."))
        click.echo(f"  Blocks: {len(ir.blocks)}")
        click.echo(f"  Connections: {len(ir.connections)}")
        click.echo(f"  Loops: {len(ir.loops)}")
        click.echo(f"  Parallels: {len(ir.parallels or {})}")
