"""Sub-command argument parsing.

Each sub-command parses its own argv so that ``call -h`` or a missing
target is detected before any network I/O.  argparse errors are turned
into :class:`~varlink_cli.exceptions.InvalidArgumentError` instead of
exiting the process, and ``-h`` is an ordinary flag so that help
short-circuits without ``SystemExit``.  Options may appear before,
between or after the positional arguments
(``call org.example.ping.Ping -m '{}'``).
"""

from __future__ import annotations

import argparse
from collections.abc import Sequence
from typing import IO, NoReturn

from varlink_cli.core.models import CallRequest, InterfaceQuery
from varlink_cli.core.target import parse_target
from varlink_cli.exceptions import InvalidArgumentError, InvalidJsonError, MissingArgumentError

STDIN_SENTINEL: str = "-"
"""Parameter token meaning "read the JSON parameters from stdin"."""

CALL_OPTIONS: tuple[str, ...] = ("--help", "--more")
HELP_OPTIONS: tuple[str, ...] = ("--help",)


class CommandArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises instead of printing and exiting."""

    def __init__(self, prog: str) -> None:
        super().__init__(prog=prog, add_help=False, allow_abbrev=False)
        self.add_argument("-h", "--help", action="store_true")

    def error(self, message: str) -> NoReturn:
        raise InvalidArgumentError(message, hint=f"Try '{self.prog} --help'.")


# ---------------------------------------------------------------------------
# call
# ---------------------------------------------------------------------------

def call_usage(prog: str) -> str:
    return "\n".join(
        (
            f"Usage: {prog} call [ADDRESS/]INTERFACE.METHOD [ARGUMENTS]",
            "",
            "Call METHOD on INTERFACE at ADDRESS. ARGUMENTS must be valid JSON.",
            f"Use '{STDIN_SENTINEL}' to read ARGUMENTS from standard input.",
            "",
            "  -h, --help             display this help text and exit",
            "  -m, --more             wait for multiple method returns if supported",
        )
    )


def parse_call_arguments(argv: Sequence[str], *, prog: str = "varlink-cli") -> CallRequest:
    """Parse ``call`` arguments into a :class:`CallRequest`.

    No I/O happens here: a ``-`` parameter token is kept as the
    sentinel and only read later by :func:`read_parameters`.

    Raises
    ------
    MissingArgumentError
        If no target was given.
    InvalidArgumentError
        For unknown options or a malformed target.
    """
    parser = CommandArgumentParser(prog=f"{prog} call")
    parser.add_argument("-m", "--more", action="store_true")
    parser.add_argument("target", nargs="?")
    parser.add_argument("parameters", nargs="?")
    args = parser.parse_intermixed_args(list(argv))

    if args.help:
        return CallRequest(target=None, help=True)

    if args.target is None:
        raise MissingArgumentError(
            "Missing argument, INTERFACE.METHOD [ARGUMENTS] expected",
        )

    try:
        target = parse_target(args.target, with_member=True)
    except InvalidArgumentError as exc:
        raise InvalidArgumentError(
            "Invalid argument, INTERFACE.METHOD [ARGUMENTS] expected",
            hint=str(exc),
        ) from exc

    return CallRequest(target=target, more=args.more, parameters=args.parameters)


def read_parameters(parameters: str | None, stdin: IO[str]) -> str | None:
    """Replace the stdin sentinel by everything readable from *stdin*.

    Raises
    ------
    InvalidJsonError
        If *stdin* does not hold valid UTF-8 text.
    """
    if parameters != STDIN_SENTINEL:
        return parameters
    try:
        return stdin.read()
    except UnicodeDecodeError as exc:
        raise InvalidJsonError(
            "Unable to parse input parameters, must be valid JSON",
            hint=str(exc),
        ) from exc


# ---------------------------------------------------------------------------
# help
# ---------------------------------------------------------------------------

def help_usage(prog: str) -> str:
    return "\n".join(
        (
            f"Usage: {prog} help [ADDRESS/]INTERFACE",
            "",
            "Prints information about INTERFACE.",
            "",
            "  -h, --help             display this help text and exit",
        )
    )


def parse_help_arguments(argv: Sequence[str], *, prog: str = "varlink-cli") -> InterfaceQuery:
    """Parse ``help`` arguments into an :class:`InterfaceQuery`.

    A missing target is returned as ``target=None`` so the command can
    print its usage line.

    Raises
    ------
    InvalidArgumentError
        For unknown options or a malformed target.
    """
    parser = CommandArgumentParser(prog=f"{prog} help")
    parser.add_argument("target", nargs="?")
    args = parser.parse_intermixed_args(list(argv))

    if args.help:
        return InterfaceQuery(target=None, help=True)
    if args.target is None:
        return InterfaceQuery(target=None)
    return InterfaceQuery(target=parse_target(args.target, with_member=False))


# ---------------------------------------------------------------------------
# info / resolve
# ---------------------------------------------------------------------------

def info_usage(prog: str) -> str:
    return "\n".join(
        (
            f"Usage: {prog} info [ADDRESS]",
            "",
            "Prints information about the service running at ADDRESS,",
            "or about the resolver when ADDRESS is omitted.",
            "",
            "  -h, --help             display this help text and exit",
        )
    )


def parse_info_arguments(argv: Sequence[str], *, prog: str = "varlink-cli") -> tuple[bool, str | None]:
    """Return ``(help requested, address or None)``."""
    parser = CommandArgumentParser(prog=f"{prog} info")
    parser.add_argument("address", nargs="?")
    args = parser.parse_intermixed_args(list(argv))
    return args.help, args.address


def resolve_usage(prog: str) -> str:
    return "\n".join(
        (
            f"Usage: {prog} resolve INTERFACE",
            "",
            "Prints the address of the service implementing INTERFACE.",
            "",
            "  -h, --help             display this help text and exit",
        )
    )


def parse_resolve_arguments(argv: Sequence[str], *, prog: str = "varlink-cli") -> tuple[bool, str | None]:
    """Return ``(help requested, interface or None)``.

    Raises
    ------
    MissingArgumentError
        If neither help nor an interface was given.
    InvalidArgumentError
        If the interface name is malformed.
    """
    parser = CommandArgumentParser(prog=f"{prog} resolve")
    parser.add_argument("interface", nargs="?")
    args = parser.parse_intermixed_args(list(argv))
    if args.help:
        return True, None
    if args.interface is None:
        raise MissingArgumentError("Missing argument, INTERFACE expected")
    target = parse_target(args.interface, with_member=False)
    if target.address is not None:
        raise InvalidArgumentError("Invalid argument, INTERFACE without ADDRESS expected")
    return False, target.interface
