"""``varlink-cli help``: print the description of an interface."""

from __future__ import annotations

from collections.abc import Sequence

from varlink_cli.cli import exit_codes
from varlink_cli.cli.arguments import help_usage, parse_help_arguments
from varlink_cli.cli.context import CliContext
from varlink_cli.cli.render import render_interface


def run_help(ctx: CliContext, argv: Sequence[str]) -> int:
    """Execute the ``help`` sub-command.

    An interface the service does not know is reported and treated as
    success; resolution, connection and parse failures propagate to
    the error boundary.
    """
    query = parse_help_arguments(argv, prog=ctx.prog)

    if query.help:
        ctx.out.print(help_usage(ctx.prog), markup=False)
        return exit_codes.SUCCESS

    if query.target is None:
        # Exits MISSING_ARGUMENT like ``call`` and ``resolve``, not GENERAL.
        ctx.err.print(f"Usage: {ctx.prog} help [ADDRESS/]INTERFACE", markup=False)
        return exit_codes.MISSING_ARGUMENT

    result = ctx.describer.describe(query.target)
    if result.interface is None:
        ctx.out.print(f"Error: {result.error}", markup=False)
        return exit_codes.SUCCESS

    ctx.out.print(render_interface(result.interface))
    return exit_codes.SUCCESS
