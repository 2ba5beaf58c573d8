"""CLI spec - the command-line surface of a script, as plain data."""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

DEBUG_FLAG = "debug"


@dataclass(frozen=True)
class ArgSpec:
    """A required, single-valued positional argument."""

    name: str
    description: Optional[str] = None


@dataclass(frozen=True)
class CommandSpec:
    """A callable function: its name, help text and arguments in order."""

    name: str
    description: Optional[str] = None
    args: Tuple[ArgSpec, ...] = ()


@dataclass(frozen=True)
class CliSpec:
    """Command-line surface of a script.

    With `entry` set the program takes that function's arguments directly;
    otherwise each of `subcommands` is selected by name. A `--debug` flag is
    always available at the top level.
    """

    program_name: str
    description: Optional[str] = None
    entry: Optional[CommandSpec] = None
    subcommands: Tuple[CommandSpec, ...] = ()

    @property
    def is_single_entry(self) -> bool:
        return self.entry is not None


@dataclass
class FnCall:
    """A resolved invocation: which function to call and with what."""

    name: str
    args: List[str] = field(default_factory=list)
    debug: bool = False
