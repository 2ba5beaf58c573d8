"""shellfn Exceptions

Errors raised while loading, parsing and running shellfn sources.
"""

from __future__ import annotations


class ShellfnError(Exception):
    """Base exception for all user-facing shellfn errors."""

    pass


class ParseError(ShellfnError):
    """Raised when source text does not follow the shellfn grammar."""

    def __init__(self, message: str, line: int, column: int, source_line: str = ""):
        self.message = message
        self.line = line
        self.column = column
        self.source_line = source_line
        super().__init__(self.render())

    def render(self) -> str:
        text = f"Parse error:\nline {self.line}, column {self.column}: {self.message}"
        if self.source_line:
            caret = " " * (self.column - 1) + "^"
            text += f"\n    {self.source_line}\n    {caret}"
        return text


class ConfigError(ShellfnError):
    """Raised when shellfn.yaml cannot be read or validated."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid config {path}: {reason}")


class InvariantError(AssertionError):
    """Raised when an internal contract between parser, script and renderer breaks.

    These are defects, never malformed user input, so nothing catches them.
    """

    pass
