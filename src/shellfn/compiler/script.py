"""Script - a validated sequence of items and its two outputs."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from shellfn.ast.parser import Parser
from shellfn.ast.spec import Item
from shellfn.cli.resolver import resolve
from shellfn.cli.spec import ArgSpec, CliSpec, CommandSpec, FnCall
from shellfn.compiler.renderer import Renderer
from shellfn.exceptions import InvariantError

log = logging.getLogger(__name__)

MAIN = "main"


@dataclass(frozen=True)
class Script:
    """Parsed items plus the index of a lone public `main`, if any."""

    items: Tuple[Item, ...]
    only_pub_main_index: Optional[int] = None

    @classmethod
    def parse(cls, text: str) -> "Script":
        """Parse and validate source text.

        Raises:
            ParseError: if the text does not follow the grammar.
            InvariantError: if two items share a name.
        """
        return cls.from_items(Parser().parse(text))

    @classmethod
    def from_items(cls, items: Iterable[Item]) -> "Script":
        items = tuple(items)
        names = set()
        only_pub_main_index = None
        pub_count = 0

        for index, item in enumerate(items):
            if item.name in names:
                raise InvariantError(f"fn {item.name} is defined more than once")
            names.add(item.name)

            if item.is_pub:
                pub_count += 1
                if item.name == MAIN:
                    only_pub_main_index = index

        if pub_count != 1:
            only_pub_main_index = None

        log.debug(
            "Script has %d items, %d public, single entry: %s",
            len(items),
            pub_count,
            only_pub_main_index is not None,
        )
        return cls(items=items, only_pub_main_index=only_pub_main_index)

    def render(self) -> str:
        return Renderer().render(self.items)

    def __str__(self) -> str:
        return self.render()

    def cli_spec(self, program_name: str) -> CliSpec:
        """Describe the command-line surface of this script."""
        if self.only_pub_main_index is not None:
            item = self.items[self.only_pub_main_index]
            return CliSpec(
                program_name=program_name,
                description=item.description.value,
                entry=_command_spec(item),
            )

        return CliSpec(
            program_name=program_name,
            subcommands=tuple(_command_spec(item) for item in self.items if item.is_pub),
        )

    def parse_args(self, program_name: str, args: Iterable[str]) -> FnCall:
        """Resolve process arguments (without the program name) to a call."""
        return resolve(self.cli_spec(program_name), list(args))


def _command_spec(item: Item) -> CommandSpec:
    return CommandSpec(
        name=item.name,
        description=item.description.value,
        args=tuple(
            ArgSpec(name=arg.name, description=arg.description.value)
            for arg in item.fn_signature.args
        ),
    )
