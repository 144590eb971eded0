"""``blockflow serialize``: editor graph to IR."""

from __future__ import annotations

from pathlib import Path

import click

from blockflow.cli.common import (
    catalog_option,
    cli_error_handler,
    get_cli_context,
    resolve_catalog,
    write_output,
)
from blockflow.cli.output import OutputFormat, render_workflow
from blockflow.serializer.parser import load_workflow_state
from blockflow.serializer.workflow import WorkflowSerializer


@click.command("serialize")
@click.argument("graph", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@catalog_option
@click.option(
    "--validate/--no-validate",
    "validate_required",
    default=None,
    help="Run pre-execution validation (default from config).",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice([f.value for f in OutputFormat]),
    default=None,
    help="Output format (default from config).",
)
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the IR to this file instead of stdout.",
)
@click.pass_context
def serialize(
    ctx: click.Context,
    graph: Path,
    catalog_ref: str | None,
    validate_required: bool | None,
    output_format: str | None,
    output: Path | None,
) -> None:
    """Serialize an editor graph (JSON or YAML) into a workflow IR.

    Examples:
        blockflow serialize graph.json --catalog myapp.blocks:catalog
        blockflow serialize graph.yaml --catalog myapp.blocks:catalog --validate -o ir.json
    """
    config = get_cli_context(ctx).config
    if validate_required is None:
        validate_required = config.serializer.validate_required
    fmt = OutputFormat(output_format or config.output.format)

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
            validate_required=validate_required,
        )
        write_output(render_workflow(ir, fmt, config.output.indent), output)
