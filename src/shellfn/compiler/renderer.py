"""Renderer - converts parsed items to shell text with preserved line numbers."""

from typing import Iterable

from shellfn.ast.spec import Item
from shellfn.exceptions import InvariantError


class Renderer:
    """Renders items as shell functions.

    Every body starts on the same line it had in the source, so shell
    diagnostics point back at the source file.
    """

    def render(self, items: Iterable[Item]) -> str:
        """Render items, in order, to shell text.

        Args:
            items: Parsed items in source order.

        Returns:
            The concatenated function definitions, nothing appended after.
        """
        parts = []
        newline_count = 0
        for item in items:
            rendered = self._render_function(item, newline_count)
            # A header sharing the line of `name () { :; }` needs a separator
            shares_line = parts and not rendered.startswith("\n")
            if shares_line and not parts[-1].endswith(";"):
                rendered = "; " + rendered
            newline_count += rendered.count("\n")
            parts.append(rendered)
        return "".join(parts)

    def _render_function(self, item: Item, newline_count: int) -> str:
        """Render a single item, padded so its body lands on its recorded line.

        Args:
            item: The item to render.
            newline_count: Newlines already emitted before this item.

        Returns:
            Blank-line padding followed by the function definition.
        """
        name = item.name
        current_line = newline_count + 1
        current_body_line = current_line + 1

        if item.body_line_number < current_body_line:
            raise InvariantError(
                f"fn {name}: body line {item.body_line_number} is unreachable, "
                f"output is already at line {current_line}"
            )
        padding = "\n" * (item.body_line_number - current_body_line)

        if not item.body:
            return f"{padding}{name} () {{ :; }}"

        bindings = item.fn_signature.arg_bindings()
        body = item.body + _terminator(item.body)
        if item.is_inline:
            return f"{padding}{name} () {{ {bindings}\n{body}}};"

        # Subshell keeps variables, cd and traps local to the body
        return f"{padding}{name} () {{ ( {bindings}\n{body}) }};"


def _terminator(body: str) -> str:
    """Separator between a body and the closing tokens that follow it.

    A body ending in a newline had its '}' on a line of its own, and the
    closing tokens take that line.
    """
    if body.endswith("\n"):
        return ""
    if body.endswith((";", "&")):
        return " "
    return "; "
