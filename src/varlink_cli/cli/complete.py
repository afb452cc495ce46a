"""``varlink-cli complete``: shell completion candidates.

Invoked by shell completion glue as::

    varlink-cli complete COMMAND [WORDS...] CURRENT

and prints one candidate per line.  Arguments are re-parsed leniently
and lookups against services are best effort, so this command never
fails: at worst it prints nothing.
"""

from __future__ import annotations

from collections.abc import Sequence

from varlink_cli.cli import exit_codes
from varlink_cli.cli.arguments import (
    CALL_OPTIONS,
    HELP_OPTIONS,
    parse_call_arguments,
)
from varlink_cli.cli.context import CliContext
from varlink_cli.core.models import CallRequest
from varlink_cli.exceptions import InvalidArgumentError, MissingArgumentError

EMPTY_PARAMETERS: str = "'{}'"


def complete_call(ctx: CliContext, words: Sequence[str], current: str) -> list[str]:
    """Candidates for the word being typed after ``call WORDS...``."""
    if current.startswith("-"):
        return [option for option in CALL_OPTIONS if option.startswith(current)]

    request: CallRequest | None
    try:
        request = parse_call_arguments(words, prog=ctx.prog)
    except (MissingArgumentError, InvalidArgumentError):
        request = None

    if request is None or request.target is None or request.target.member is None:
        return ctx.completer.method_candidates(current)

    if request.parameters is None:
        return [EMPTY_PARAMETERS]

    return []


def complete_help(ctx: CliContext, words: Sequence[str], current: str) -> list[str]:
    """Candidates for the word being typed after ``help WORDS...``."""
    if current.startswith("-"):
        return [option for option in HELP_OPTIONS if option.startswith(current)]
    if any(not word.startswith("-") for word in words):
        return []
    return ctx.completer.interface_candidates(current)


_COMPLETERS = {
    "call": complete_call,
    "help": complete_help,
}


def run_complete(ctx: CliContext, argv: Sequence[str]) -> int:
    """Print completion candidates; always succeeds."""
    if not argv:
        return exit_codes.SUCCESS

    command, *rest = argv
    completer = _COMPLETERS.get(command)
    if completer is None:
        return exit_codes.SUCCESS

    words, current = (rest[:-1], rest[-1]) if rest else ([], "")
    for candidate in completer(ctx, words, current):
        ctx.out.print(candidate, markup=False)
    return exit_codes.SUCCESS
