"""shellfn CLI Main Entry Point

shellfn - shell functions with free argument parsing.
Compiles annotated `fn` definitions to a shell script and dispatches
command-line arguments to one of them.

Usage:
    shellfn tasks.fn <fn> [args...]     # Run a public fn
    shellfn tasks.fn [args...]          # Run a lone `pub fn main`
    shellfn tasks.fn --help             # Show the script's own help
    shellfn -o out.sh tasks.fn          # Compile to file
    shellfn --dry-run tasks.fn          # Print the compiled script
    shellfn --version                   # Show version
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, NoReturn, Optional

import typer

from ._version import __version__
from .compiler.script import Script
from .config import load_config
from .exceptions import ShellfnError
from .runner import ScriptRunner
from .utils import setup_logging

log = logging.getLogger(__name__)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"shellfn {__version__}")
        raise typer.Exit()


def _fail(message: str) -> NoReturn:
    typer.secho(f"Error: {message}", err=True, fg=typer.colors.RED)
    raise typer.Exit(code=1)


typer_app = typer.Typer(add_completion=False)


@typer_app.command(
    context_settings={
        # Everything after FILE belongs to the script, --help included
        "allow_interspersed_args": False,
        "ignore_unknown_options": True,
    }
)
def cli(
    file: Path = typer.Argument(..., help="shellfn source file."),
    args: Optional[List[str]] = typer.Argument(
        None, help="Arguments for the script (subcommand, values, --debug)."
    ),
    output: Optional[Path] = typer.Option(
        None,
        "-o",
        "--output",
        help="Write the compiled script to a file instead of running it.",
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Print the compiled script without running it."
    ),
    config_path: Optional[Path] = typer.Option(
        None, "-c", "--config", help="Path to shellfn.yaml."
    ),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Show progress logs."),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Compile shell functions and run one of them.

    \b
    Examples:
        shellfn tasks.fn build release     Run 'build' with one argument
        shellfn tasks.fn build --debug     Run 'build' with tracing
        shellfn -o tasks.sh tasks.fn       Compile to tasks.sh
    """
    setup_logging(verbose)
    args_list: List[str] = list(args) if args is not None else []

    if not file.exists():
        _fail(f"File not found: {file}")

    try:
        source = file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        _fail(f"Cannot read {file}: {exc}")

    try:
        script = Script.parse(source)
        config = load_config(file.parent, config_path)
    except ShellfnError as exc:
        _fail(str(exc))

    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(script.render(), encoding="utf-8")
        typer.echo(f"Wrote compiled script to {output}")
        raise typer.Exit()

    if dry_run:
        typer.echo(script.render())
        raise typer.Exit()

    program_name = file.name
    call = script.parse_args(program_name, args_list)
    code = ScriptRunner(config).run(script, call, program_name)
    log.info("%s exited with %d", call.name, code)
    raise typer.Exit(code=code)


def app() -> None:
    """Entry point for the CLI."""
    typer_app()


if __name__ == "__main__":
    app()
