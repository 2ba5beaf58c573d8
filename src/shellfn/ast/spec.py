from dataclasses import dataclass, field
from typing import Iterable, Optional, Tuple


@dataclass(frozen=True)
class Description:
    """Comment text attached to an item or argument.

    Fragments are trimmed and joined with single spaces; an empty result
    means the description is absent.
    """

    text: str = ""

    @classmethod
    def join(cls, *fragment_groups: Iterable[str]) -> "Description":
        parts = []
        for fragments in fragment_groups:
            for fragment in fragments:
                stripped = fragment.strip()
                if stripped:
                    parts.append(stripped)
        return cls(" ".join(parts))

    @property
    def value(self) -> Optional[str]:
        return self.text or None

    def __bool__(self) -> bool:
        return bool(self.text)

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class ItemArg:
    """A single declared argument of a function."""

    name: str
    description: Description = field(default_factory=Description)


@dataclass(frozen=True)
class FnSignature:
    """Function name plus its arguments in declaration order."""

    name: str
    args: Tuple[ItemArg, ...] = ()

    def arg_bindings(self) -> str:
        """Shell prologue binding each argument from the positional parameters."""
        return "".join(f'{arg.name}="$1"; shift; ' for arg in self.args)


@dataclass(frozen=True)
class Item:
    """One parsed function definition."""

    fn_signature: FnSignature
    body: str = ""
    body_line_number: int = 2
    description: Description = field(default_factory=Description)
    is_pub: bool = False
    is_inline: bool = False

    @property
    def name(self) -> str:
        return self.fn_signature.name
