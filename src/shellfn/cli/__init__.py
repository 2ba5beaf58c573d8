"""Command-line surface of compiled scripts."""

from shellfn.cli.resolver import build_command, resolve
from shellfn.cli.spec import ArgSpec, CliSpec, CommandSpec, FnCall

__all__ = ["ArgSpec", "CliSpec", "CommandSpec", "FnCall", "build_command", "resolve"]
