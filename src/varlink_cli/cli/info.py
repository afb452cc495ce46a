"""``varlink-cli info`` and ``varlink-cli resolve``."""

from __future__ import annotations

from collections.abc import Sequence

from varlink_cli.cli import exit_codes
from varlink_cli.cli.arguments import (
    info_usage,
    parse_info_arguments,
    parse_resolve_arguments,
    resolve_usage,
)
from varlink_cli.cli.context import CliContext
from varlink_cli.cli.render import render_service_info


def run_info(ctx: CliContext, argv: Sequence[str]) -> int:
    """Print vendor, product and interfaces of a service."""
    show_help, address = parse_info_arguments(argv, prog=ctx.prog)
    if show_help:
        ctx.out.print(info_usage(ctx.prog), markup=False)
        return exit_codes.SUCCESS

    info = ctx.info.get_info(address or ctx.resolver.resolver_address)
    if isinstance(info, str):
        ctx.out.print(f"Error: {info}", markup=False)
        return exit_codes.SUCCESS

    ctx.out.print(render_service_info(info))
    return exit_codes.SUCCESS


def run_resolve(ctx: CliContext, argv: Sequence[str]) -> int:
    """Print the address the resolver returns for an interface."""
    show_help, interface = parse_resolve_arguments(argv, prog=ctx.prog)
    if show_help or interface is None:
        ctx.out.print(resolve_usage(ctx.prog), markup=False)
        return exit_codes.SUCCESS

    ctx.out.print(ctx.resolver.resolve_interface(interface), markup=False)
    return exit_codes.SUCCESS
