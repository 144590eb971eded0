"""Command-line interface for blockflow."""

from __future__ import annotations

from blockflow.cli.context import CLIContext, ExitCode

__all__ = ["CLIContext", "ExitCode"]
