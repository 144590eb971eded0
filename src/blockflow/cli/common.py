from __future__ import annotations

import contextlib
from collections.abc import Generator
from pathlib import Path

import click

from blockflow.cli.context import CLIContext, ExitCode
from blockflow.cli.output import format_error
from blockflow.exceptions import BlockflowError
from blockflow.logging import get_logger
from blockflow.serializer.catalog import BlockCatalog, load_catalog
from blockflow.serializer.errors import (
    ReferenceResolutionError,
    UnknownBlockTypeError,
    UnsupportedVersionError,
    WorkflowParseError,
    WorkflowValidationError,
)

__all__ = [
    "catalog_option",
    "cli_error_handler",
    "get_cli_context",
    "resolve_catalog",
    "write_output",
]

catalog_option = click.option(
    "--catalog",
    "catalog_ref",
    envvar="BLOCKFLOW_CATALOG",
    default=None,
    metavar="MODULE:ATTR",
    help="Block catalog to resolve block types against (env: BLOCKFLOW_CATALOG).",
)


@contextlib.contextmanager
def cli_error_handler() -> Generator[None, None, None]:
    """Context manager for common CLI error handling.

    Handles common error patterns across CLI commands:
    - click usage errors: re-raised so click exits with code 2
    - KeyboardInterrupt: Exit with code 130
    - WorkflowValidationError: Report the offending block
    - WorkflowParseError: Report the file and line
    - BlockflowError: Format error with message
    - Generic exceptions: Log and format error

    Example:
        >>> with cli_error_handler():
        >>>     serializer.serialize_workflow(...)
    """
    logger = get_logger(__name__)

    try:
        yield
    except click.ClickException:
        raise
    except KeyboardInterrupt:
        click.echo("\n\nInterrupted by user.", err=True)
        raise SystemExit(ExitCode.INTERRUPTED) from None
    except WorkflowValidationError as e:
        details = []
        if e.block_id:
            details.append(f"Block: {e.block_name or e.block_id} ({e.block_type})")
            details.append(f"Block id: {e.block_id}")
        error_msg = format_error(
            e.message,
            details=details,
            suggestion="Fix the block configuration and try again",
        )
        click.echo(error_msg, err=True)
        raise SystemExit(ExitCode.FAILURE) from e
    except WorkflowParseError as e:
        details = []
        if e.file_path:
            details.append(f"File: {e.file_path}")
        if e.line_number:
            details.append(f"Line: {e.line_number}")
        click.echo(format_error(e.message, details=details), err=True)
        raise SystemExit(ExitCode.FAILURE) from e
    except UnsupportedVersionError as e:
        error_msg = format_error(
            e.message,
            suggestion=f"Use one of: {', '.join(e.supported_versions)}",
        )
        click.echo(error_msg, err=True)
        raise SystemExit(ExitCode.FAILURE) from e
    except UnknownBlockTypeError as e:
        error_msg = format_error(
            e.message,
            suggestion="Check that --catalog points at the catalog the graph was built with",
        )
        click.echo(error_msg, err=True)
        raise SystemExit(ExitCode.FAILURE) from e
    except ReferenceResolutionError as e:
        details = [
            f"Reference type: {e.reference_type}",
            f"Reference name: {e.reference_name}",
        ]
        click.echo(format_error(e.message, details=details), err=True)
        raise SystemExit(ExitCode.FAILURE) from e
    except BlockflowError as e:
        click.echo(format_error(e.message), err=True)
        raise SystemExit(ExitCode.FAILURE) from e
    except Exception as e:
        logger.exception("Unexpected error in command")
        click.echo(f"Error: {e!s}", err=True)
        raise SystemExit(ExitCode.FAILURE) from e


def get_cli_context(ctx: click.Context) -> CLIContext:
    cli_ctx: CLIContext = ctx.obj["cli_ctx"]
    return cli_ctx


def resolve_catalog(catalog_ref: str | None) -> BlockCatalog:
    """Load the catalog named by ``--catalog``.

    Raises:
        click.UsageError: If no catalog was given.
        ReferenceResolutionError: If the reference cannot be loaded.
    """
    if not catalog_ref:
        raise click.UsageError(
            "A block catalog is required: pass --catalog MODULE:ATTR "
            "or set BLOCKFLOW_CATALOG"
        )
    return load_catalog(catalog_ref)


def write_output(text: str, output: Path | None) -> None:
    """Write text to a file, or to stdout when no path is given."""
    if output is None:
        click.echo(text)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text if text.endswith("\n") else text + "\n", encoding="utf-8")
