"""shellfn - compile annotated shell functions to a script and a CLI."""

from shellfn._version import __version__
from shellfn.cli.spec import FnCall
from shellfn.compiler.script import Script
from shellfn.exceptions import InvariantError, ParseError, ShellfnError

__all__ = [
    "__version__",
    "FnCall",
    "Script",
    "ParseError",
    "ShellfnError",
    "InvariantError",
]
