"""``blockflow inspect``: summarize a workflow IR."""

from __future__ import annotations

from pathlib import Path

import click
from rich.table import Table

from blockflow.cli.common import cli_error_handler
from blockflow.cli.console import console
from blockflow.serializer.parser import load_serialized_workflow


@click.command("inspect")
@click.argument("ir", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def inspect_cmd(ir: Path) -> None:
    """Show the blocks of a workflow IR as a table.

    Examples:
        blockflow inspect ir.json
    """
    with cli_error_handler():
        workflow = load_serialized_workflow(ir)

        table = Table(title=f"{ir.name} (version {workflow.version})")
        table.add_column("Id", style="cyan")
        table.add_column("Type")
        table.add_column("Name")
        table.add_column("Tool", style="green")
        table.add_column("Enabled")

        for block in workflow.blocks:
            table.add_row(
                block.id,
                block.block_type,
                block.metadata.name,
                block.config.tool or "-",
                "yes" if block.enabled else "no",
            )

        console.print(table)
        console.print(
            f"{len(workflow.blocks)} blocks, "
            f"{len(workflow.connections)} connections, "
            f"{len(workflow.loops)} loops, "
            f"{len(workflow.parallels or {})} parallels"
        )
