"""``varlink-cli call``: invoke a method and print its replies.

Argument and target errors are raised before any network I/O; the
reply loop itself lives in :class:`~varlink_cli.core.call_service.CallOrchestrator`.
This module only translates its outcome into an exit code.
"""

from __future__ import annotations

from collections.abc import Sequence

from varlink_cli.cli import exit_codes
from varlink_cli.cli.arguments import call_usage, parse_call_arguments, read_parameters
from varlink_cli.cli.context import CliContext
from varlink_cli.cli.render import ReplyRenderer
from varlink_cli.core.call_service import decode_parameters
from varlink_cli.core.models import CallResult, StreamOutcome
from varlink_cli.exceptions import InvalidArgumentError


def run_call(ctx: CliContext, argv: Sequence[str]) -> int:
    """Execute the ``call`` sub-command.

    Returns
    -------
    int
        :data:`exit_codes.SUCCESS` on completion, on a reported remote
        error and on user cancellation; a specific error code otherwise.
    """
    request = parse_call_arguments(argv, prog=ctx.prog)

    if request.help or request.target is None:
        ctx.out.print(call_usage(ctx.prog), markup=False)
        return exit_codes.SUCCESS

    target = request.target
    if target.qualified_member is None:
        raise InvalidArgumentError(
            "Missing method.",
            hint="Use INTERFACE.METHOD, e.g. org.varlink.service.GetInfo",
        )

    parameters = decode_parameters(read_parameters(request.parameters, ctx.stdin))
    address = ctx.resolver.resolve(target)

    result = ctx.orchestrator.run(
        address,
        target.qualified_member,
        parameters,
        ReplyRenderer(ctx.out, ctx.err),
        more=request.more,
    )
    return _exit_code(ctx, result)


def _exit_code(ctx: CliContext, result: CallResult) -> int:
    if result.outcome is StreamOutcome.CONNECTION_CLOSED:
        ctx.err.print("Connection closed.", markup=False)
        return exit_codes.CONNECTION_CLOSED

    if result.outcome is StreamOutcome.INVALID_JSON:
        ctx.err.print(result.detail or "Unable to read message.", markup=False)
        return exit_codes.INVALID_JSON

    # COMPLETED, REMOTE_ERROR (already printed) and CANCELED (Ctrl+C).
    return exit_codes.SUCCESS
