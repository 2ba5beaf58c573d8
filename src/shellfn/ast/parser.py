"""Parser - turns shellfn source text into a list of Items.

A source is a sequence of function items:

    // Copy a file somewhere.
    pub fn copy(
        src, // file to copy
        dst  // destination
    ) {
        cp "$src" "$dst"
    }

Bodies are captured verbatim. Each item records the line its body starts
on so the renderer can reproduce the same layout.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from shellfn.ast.spec import Description, FnSignature, Item, ItemArg
from shellfn.exceptions import ParseError

log = logging.getLogger(__name__)

IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")

# Heredoc start: <<'DELIM', <<"DELIM", <<DELIM, << DELIM or the <<- variants
HEREDOC_START = re.compile(r"<<-?[ \t]*['\"]?([A-Za-z0-9_]+)['\"]?")

# Characters after which a '#' starts a shell comment
COMMENT_PRECEDERS = " \t\n;|&("


class _Cursor:
    """Position in the source, tracking line numbers as it advances."""

    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.line = 1
        self.line_start = 0

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def startswith(self, prefix: str) -> bool:
        return self.text.startswith(prefix, self.pos)

    def advance(self, count: int = 1) -> str:
        chunk = self.text[self.pos : self.pos + count]
        newlines = chunk.count("\n")
        if newlines:
            self.line += newlines
            self.line_start = self.pos + chunk.rindex("\n") + 1
        self.pos += len(chunk)
        return chunk

    def peek_match(self, pattern: re.Pattern) -> Optional[str]:
        m = pattern.match(self.text, self.pos)
        return m.group(0) if m else None

    def skip_inline_space(self) -> None:
        while not self.at_end() and self.text[self.pos] in " \t\r":
            self.pos += 1

    def skip_space(self) -> None:
        while not self.at_end() and self.text[self.pos].isspace():
            self.advance()

    def rest_of_line(self) -> str:
        end = self.text.find("\n", self.pos)
        return self.text[self.pos :] if end == -1 else self.text[self.pos : end]

    def read_line(self) -> str:
        """Consume up to, but not including, the next newline."""
        return self.advance(len(self.rest_of_line()))

    def error(self, message: str) -> ParseError:
        end = self.text.find("\n", self.line_start)
        if end == -1:
            end = len(self.text)
        column = self.pos - self.line_start + 1
        return ParseError(message, self.line, column, self.text[self.line_start : end])


class Parser:
    """Parses shellfn sources into items."""

    _file_loader: Callable[[str], str]

    def __init__(self, file_loader: Callable[[str], str] | None = None):
        self._file_loader = file_loader or read_file

    def parse_file(self, filepath: str) -> List[Item]:
        return self.parse(self._file_loader(filepath))

    def parse(self, source: str) -> List[Item]:
        """Parse source text into items, in source order.

        Raises:
            ParseError: on the first grammar violation.
        """
        cursor = _Cursor(source)

        # A shebang line is skipped but still counts as line 1
        if cursor.startswith("#!"):
            cursor.read_line()

        items: List[Item] = []
        while True:
            pre_description = self._comments(cursor)
            if cursor.at_end():
                break
            item = self._item(cursor, pre_description)
            log.debug(
                "Parsed fn %s (%d args, body line %d)",
                item.name,
                len(item.fn_signature.args),
                item.body_line_number,
            )
            items.append(item)

        return items

    def _comments(self, cursor: _Cursor) -> List[str]:
        fragments: List[str] = []
        while True:
            cursor.skip_space()
            if not cursor.startswith("//"):
                return fragments
            cursor.advance(2)
            fragments.append(cursor.read_line())

    def _keyword(self, cursor: _Cursor, keyword: str) -> bool:
        end = cursor.pos + len(keyword)
        if (
            cursor.startswith(keyword)
            and end < len(cursor.text)
            and cursor.text[end].isspace()
        ):
            cursor.advance(len(keyword))
            cursor.skip_space()
            return True
        return False

    def _item(self, cursor: _Cursor, pre_description: List[str]) -> Item:
        expected = "'pub' or 'inline' or 'fn'"
        is_pub = self._keyword(cursor, "pub")
        if is_pub:
            expected = "'inline' or 'fn'"
        is_inline = self._keyword(cursor, "inline")
        if is_inline:
            expected = "'fn'"
        if not self._keyword(cursor, "fn"):
            raise cursor.error(f"expected {expected}")

        name = cursor.peek_match(IDENTIFIER)
        if name is None:
            raise cursor.error("expected function name")
        cursor.advance(len(name))
        cursor.skip_space()

        if not cursor.startswith("("):
            raise cursor.error("expected '(' after function name")
        cursor.advance()
        args = self._args(cursor)

        post_description = self._comments(cursor)
        if not cursor.startswith("{"):
            raise cursor.error("expected '{' to open the function body")
        body, body_line_number = self._body(cursor)

        return Item(
            fn_signature=FnSignature(name=name, args=args),
            body=body,
            body_line_number=body_line_number,
            description=Description.join(pre_description, post_description),
            is_pub=is_pub,
            is_inline=is_inline,
        )

    def _args(self, cursor: _Cursor) -> Tuple[ItemArg, ...]:
        args: List[ItemArg] = []
        seen = set()

        while True:
            cursor.skip_space()
            if cursor.at_end():
                raise cursor.error("unbalanced argument list, expected ')'")
            if cursor.startswith(")"):
                cursor.advance()
                return tuple(args)

            name = cursor.peek_match(IDENTIFIER)
            if name is None:
                raise cursor.error("expected argument name or ')'")
            if name in seen:
                raise cursor.error(f"duplicate argument '{name}'")
            seen.add(name)
            cursor.advance(len(name))

            cursor.skip_inline_space()
            separated = cursor.startswith(",")
            if separated:
                cursor.advance()
                cursor.skip_inline_space()

            fragments = []
            if cursor.startswith("//"):
                cursor.advance(2)
                fragments.append(cursor.read_line())
            args.append(ItemArg(name=name, description=Description.join(fragments)))

            if separated:
                continue

            cursor.skip_space()
            if cursor.startswith(","):
                cursor.advance()
            elif cursor.at_end():
                raise cursor.error("unbalanced argument list, expected ')'")
            elif not cursor.startswith(")"):
                raise cursor.error("expected ',' or ')' after argument")

    def _body(self, cursor: _Cursor) -> Tuple[str, int]:
        unterminated = cursor.error("unterminated function body, expected '}'")
        cursor.advance()  # '{'
        open_line = cursor.line

        cursor.skip_inline_space()
        if cursor.startswith("}"):
            cursor.advance()
            self._end_of_line(cursor)
            return "", open_line + 1

        if cursor.rest_of_line().strip():
            # Body starts on the '{' line; its header goes on the line above
            if open_line == 1:
                raise cursor.error(
                    "a body on line 1 leaves no room for its header, "
                    "start it on the next line"
                )
            body_line_number = open_line
        else:
            cursor.read_line()
            if cursor.at_end():
                raise unterminated
            cursor.advance()  # newline
            body_line_number = open_line + 1

        start = cursor.pos
        close = find_closing_brace(cursor.text, start)
        if close == -1:
            raise unterminated
        cursor.advance(close - start)
        # Kept verbatim up to '}' so the closing brace stays on its line
        body = cursor.text[start:close].rstrip(" \t")
        cursor.advance()  # '}'
        self._end_of_line(cursor)

        if not body.strip():
            body = ""
        return body, body_line_number

    def _end_of_line(self, cursor: _Cursor) -> None:
        cursor.skip_inline_space()
        if cursor.rest_of_line().strip():
            raise cursor.error("expected end of line after '}'")


def find_closing_brace(text: str, start: int) -> int:
    """Index of the '}' closing a block whose body starts at `start`, or -1.

    Braces inside quotes, shell comments, heredocs and ((...)) do not count.
    """
    depth = 1
    heredocs: List[str] = []
    i = start
    n = len(text)

    while i < n:
        ch = text[i]

        if ch == "\n":
            i += 1
            # Heredoc bodies run until a line holding just the delimiter
            while heredocs:
                if i >= n:
                    return -1
                end = text.find("\n", i)
                line = text[i:] if end == -1 else text[i:end]
                i = n if end == -1 else end + 1
                if line.strip() == heredocs[0]:
                    heredocs.pop(0)
            continue

        if ch == "\\":
            i += 2
        elif ch == "'":
            end = text.find("'", i + 1)
            if end == -1:
                return -1
            i = end + 1
        elif ch == '"':
            i = _skip_double_quoted(text, i + 1)
            if i == -1:
                return -1
        elif ch == "#" and (i == start or text[i - 1] in COMMENT_PRECEDERS):
            end = text.find("\n", i)
            if end == -1:
                return -1
            i = end
        elif text.startswith("((", i):
            # Arithmetic, where << is a shift
            i = _skip_parens(text, i)
            if i == -1:
                return -1
        elif text.startswith("<<<", i):
            i += 3
        elif text.startswith("<<", i):
            m = HEREDOC_START.match(text, i)
            if m:
                heredocs.append(m.group(1))
                i = m.end()
            else:
                i += 2
        else:
            if ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1
                if depth == 0:
                    return i
            i += 1

    return -1


def _skip_parens(text: str, i: int) -> int:
    depth = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                return i + 1
        i += 1
    return -1


def _skip_double_quoted(text: str, i: int) -> int:
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == "\\":
            i += 2
        elif ch == '"':
            return i + 1
        else:
            i += 1
    return -1


def read_file(filepath: str) -> str:
    return Path(filepath).read_text(encoding="utf-8")


def parse(source: str) -> List[Item]:
    """Parse source text with a default Parser."""
    return Parser().parse(source)
