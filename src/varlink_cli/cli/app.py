"""CLI application entry point and command routing for varlink-cli.

This module is the **sole error boundary** for the entire application.
It catches :class:`~varlink_cli.exceptions.VarlinkCliError`,
``KeyboardInterrupt``, and any unexpected ``Exception``, rendering
user-friendly messages via Rich and returning well-defined exit codes.

Architecture notes
------------------
* No business logic lives here: all work is delegated to the
  sub-command modules, which in turn drive the core services.
* Global options are parsed here; everything after the sub-command
  name is handed to the sub-command untouched.
* This module is the only place that translates between the domain world
  and the OS process exit code.
"""

from __future__ import annotations

import argparse
import logging
import signal
import sys
from collections.abc import Callable, Mapping, Sequence
from typing import Any, NoReturn

from varlink_cli.cli import exit_codes
from varlink_cli.cli.console import console
from varlink_cli.cli.context import CliContext, build_context
from varlink_cli.config import load_config
from varlink_cli.exceptions import (
    CallFailedError,
    CannotConnectError,
    CannotResolveError,
    ConnectionClosedError,
    InvalidArgumentError,
    InvalidJsonError,
    MissingArgumentError,
    PanicError,
    VarlinkCliError,
)
from varlink_cli.version import __version__

logger = logging.getLogger(__name__)

PROG: str = "varlink-cli"

_EXIT_CODES: dict[type[VarlinkCliError], int] = {
    MissingArgumentError: exit_codes.MISSING_ARGUMENT,
    InvalidArgumentError: exit_codes.INVALID_ARGUMENT,
    InvalidJsonError: exit_codes.INVALID_JSON,
    CannotResolveError: exit_codes.CANNOT_RESOLVE,
    CannotConnectError: exit_codes.CANNOT_CONNECT,
    CallFailedError: exit_codes.CALL_FAILED,
    ConnectionClosedError: exit_codes.CONNECTION_CLOSED,
    PanicError: exit_codes.PANIC,
}


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

class _TopLevelParser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        raise InvalidArgumentError(message, hint=f"Try '{self.prog} --help'.")


def _build_parser() -> argparse.ArgumentParser:
    """Construct the top-level argument parser.

    Sub-commands parse their own arguments:
    * ``varlink-cli call [-m] [ADDRESS/]INTERFACE.METHOD [ARGUMENTS|-]``
    * ``varlink-cli help [ADDRESS/]INTERFACE``
    * ``varlink-cli info [ADDRESS]``
    * ``varlink-cli resolve INTERFACE``
    """
    parser = _TopLevelParser(
        prog=PROG,
        description="Call methods and inspect interfaces of varlink services.",
        epilog="Commands: " + ", ".join(_visible_commands()),
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-R",
        "--resolver",
        metavar="ADDRESS",
        default=None,
        help="address of the varlink resolver (default: $VARLINK_RESOLVER).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=None,
        help="log debug information to stderr.",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="never emit colored output.",
    )
    parser.add_argument("command", nargs="?", default=None, help="sub-command to run.")
    parser.add_argument("args", nargs=argparse.REMAINDER, help=argparse.SUPPRESS)
    return parser


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------

def _commands() -> dict[str, Callable[[CliContext, Sequence[str]], int]]:
    from varlink_cli.cli.call import run_call
    from varlink_cli.cli.complete import run_complete
    from varlink_cli.cli.help import run_help
    from varlink_cli.cli.info import run_info, run_resolve

    return {
        "call": run_call,
        "help": run_help,
        "info": run_info,
        "resolve": run_resolve,
        "complete": run_complete,
    }


def _visible_commands() -> list[str]:
    return ["call", "help", "info", "resolve"]


def exit_code_for(exc: VarlinkCliError) -> int:
    """Map an exception to its exit code, most specific class first."""
    for klass in type(exc).__mro__:
        if klass in _EXIT_CODES:
            return _EXIT_CODES[klass]
    return exit_codes.GENERAL_ERROR


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(
    argv: list[str] | None = None,
    *,
    environ: Mapping[str, str] | None = None,
    **context_overrides: Any,
) -> int:
    """Run the varlink-cli CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.  Accepting *argv* enables deterministic testing without
        monkeypatching.
    environ:
        Environment the configuration is read from (default ``os.environ``).
    context_overrides:
        Collaborators forwarded to :func:`build_context` (``connector``,
        ``parser``, ``out``, ``err``, ``stdin``).

    Returns
    -------
    int
        OS process exit code.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    config = load_config(environ).with_overrides(
        resolver=args.resolver,
        debug=args.verbose,
        color=False if args.no_color else None,
    )

    from varlink_cli.cli.logs import configure_logging

    configure_logging(debug=config.debug)

    if args.command is None:
        parser.print_help()
        return exit_codes.SUCCESS

    handler = _commands().get(args.command)
    if handler is None:
        raise InvalidArgumentError(
            f"Unknown command: {args.command}",
            hint="Available commands: " + ", ".join(_visible_commands()),
        )

    logger.debug("Running %s with %s", args.command, args.args)
    ctx = build_context(config, prog=PROG, **context_overrides)
    return handler(ctx, args.args)


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace during normal usage.  SIGTERM is
    delivered as ``KeyboardInterrupt`` so that it cancels a pending
    call exactly like Ctrl+C.
    """
    signal.signal(signal.SIGTERM, signal.default_int_handler)
    try:
        code = main()
        sys.exit(code)
    except VarlinkCliError as exc:
        console.print(f"[bold red]Error:[/bold red] {_escape(str(exc))}")
        if exc.hint:
            console.print(f"[yellow]Hint:[/yellow] {_escape(exc.hint)}")
        sys.exit(exit_code_for(exc))
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        console.print(
            "[bold red]Unexpected error.[/bold red] "
            "Please report this issue.\n"
            f"  {type(exc).__name__}: {_escape(str(exc))}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)


def _escape(text: str) -> str:
    """Escape Rich markup in messages that may contain ``[...]``."""
    try:
        from rich.markup import escape
    except ModuleNotFoundError:
        return text
    return escape(text)
