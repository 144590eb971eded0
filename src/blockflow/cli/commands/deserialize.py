"""``blockflow deserialize``: workflow IR back to an editor graph."""

from __future__ import annotations

import json
from pathlib import Path

import click

from blockflow.cli.common import (
    catalog_option,
    cli_error_handler,
    get_cli_context,
    resolve_catalog,
    write_output,
)
from blockflow.serializer.parser import load_serialized_workflow
from blockflow.serializer.workflow import WorkflowSerializer


@click.command("deserialize")
@click.argument("ir", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@catalog_option
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the graph to this file instead of stdout.",
)
@click.pass_context
def deserialize(
    ctx: click.Context, ir: Path, catalog_ref: str | None, output: Path | None
) -> None:
    """Rebuild the editor graph (JSON) from a workflow IR.

    Examples:
        blockflow deserialize ir.json --catalog myapp.blocks:catalog -o graph.json
    """
    config = get_cli_context(ctx).config
    with cli_error_handler():
        catalog = resolve_catalog(catalog_ref)
        workflow = load_serialized_workflow(ir)
        state = WorkflowSerializer(catalog).deserialize_workflow(workflow)
        data = state.model_dump(mode="json", by_alias=True, exclude_none=True)
        write_output(
            json.dumps(data, indent=config.output.indent or None, ensure_ascii=False),
            output,
        )
