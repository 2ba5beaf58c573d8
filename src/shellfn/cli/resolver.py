"""Resolver - validates process arguments against a CliSpec using click."""

from __future__ import annotations

import logging
import sys
from typing import Any, Dict, List, Sequence

import click

from shellfn.cli.spec import DEBUG_FLAG, CliSpec, CommandSpec, FnCall
from shellfn.exceptions import InvariantError

log = logging.getLogger(__name__)

DEBUG_HELP = "Trace the function as it runs."


class FnArgument(click.Argument):
    """Positional argument that carries help text."""

    def __init__(self, param_decls: Sequence[str], help: str | None = None, **attrs: Any):
        super().__init__(param_decls, **attrs)
        self.help = help


class FnCommand(click.Command):
    """Command whose help page lists its arguments with their descriptions."""

    def format_options(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        rows = [
            (param.metavar or param.name, param.help or "")
            for param in self.get_params(ctx)
            if isinstance(param, FnArgument)
        ]
        if rows:
            with formatter.section("Arguments"):
                formatter.write_dl(rows)
        super().format_options(ctx, formatter)


def _param_name(index: int) -> str:
    # click lowercases argument names, so params are keyed by position
    return f"arg{index}"


def _debug_option() -> click.Option:
    return click.Option([f"--{DEBUG_FLAG}"], is_flag=True, default=False, help=DEBUG_HELP)


def _arguments(command: CommandSpec) -> List[click.Parameter]:
    return [
        FnArgument(
            [_param_name(index)],
            help=arg.description,
            metavar=arg.name,
            required=True,
            nargs=1,
        )
        for index, arg in enumerate(command.args)
    ]


def _extract_args(command: CommandSpec, params: Dict[str, Any]) -> List[str]:
    values = []
    for index, arg in enumerate(command.args):
        value = params[_param_name(index)]
        if not isinstance(value, str):
            raise InvariantError(
                f"fn {command.name}: expected exactly one value for '{arg.name}', "
                f"got {value!r}"
            )
        values.append(value)
    return values


def _callback(command: CommandSpec):
    def invoke(**params: Any) -> FnCall:
        ctx = click.get_current_context()
        root = ctx.find_root()
        debug = bool(root.params.get(DEBUG_FLAG) or params.get(DEBUG_FLAG))
        return FnCall(
            name=command.name,
            args=_extract_args(command, ctx.params),
            debug=debug,
        )

    return invoke


def _require_subcommand(**_: Any) -> None:
    ctx = click.get_current_context()
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help(), err=True)
        ctx.fail("Missing command.")


def build_command(spec: CliSpec) -> click.Command:
    """Translate a CliSpec into a click command tree."""
    if spec.entry is not None:
        return FnCommand(
            name=spec.program_name,
            params=[_debug_option(), *_arguments(spec.entry)],
            help=spec.description,
            callback=_callback(spec.entry),
        )

    group = click.Group(
        name=spec.program_name,
        params=[_debug_option()],
        help=spec.description,
        callback=_require_subcommand,
        invoke_without_command=True,
        no_args_is_help=False,
    )
    for command in spec.subcommands:
        group.add_command(
            FnCommand(
                name=command.name,
                # --debug is also accepted after the subcommand name
                params=[_debug_option(), *_arguments(command)],
                help=command.description,
                callback=_callback(command),
            )
        )
    return group


def resolve(spec: CliSpec, args: Sequence[str]) -> FnCall:
    """Resolve process arguments into a single function call.

    Usage errors print click's usage message and exit with status 2;
    `--help` prints help and exits with status 0.
    """
    command = build_command(spec)
    try:
        result = command.main(
            args=list(args), prog_name=spec.program_name, standalone_mode=False
        )
    except click.ClickException as exc:
        exc.show()
        sys.exit(exc.exit_code)

    if not isinstance(result, FnCall):
        # Help was printed; click hands back the exit code
        sys.exit(result or 0)

    log.debug("Resolved %s%r (debug=%s)", result.name, tuple(result.args), result.debug)
    return result
