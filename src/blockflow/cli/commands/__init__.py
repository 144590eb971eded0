"""blockflow CLI subcommands."""

from __future__ import annotations

from blockflow.cli.commands.deserialize import deserialize
from blockflow.cli.commands.inspect import inspect_cmd
from blockflow.cli.commands.serialize import serialize
from blockflow.cli.commands.validate import validate

__all__ = ["deserialize", "inspect_cmd", "serialize", "validate"]
