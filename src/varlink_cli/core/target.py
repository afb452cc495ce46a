"""Target parsing and address resolution.

A target is typed by the user as ``[ADDRESS/]INTERFACE[.METHOD]``.
Addresses themselves may contain slashes (``unix:/run/org.example``),
so only the *last* slash separates the address from the interface.

When the address is omitted it is looked up with the varlink resolver
service (``org.varlink.resolver.Resolve``).
"""

from __future__ import annotations

import logging
import re

from varlink_cli.core.call_service import CallOrchestrator
from varlink_cli.core.models import Target
from varlink_cli.exceptions import CannotResolveError, InvalidArgumentError, VarlinkCliError

logger = logging.getLogger(__name__)

RESOLVE_METHOD: str = "org.varlink.resolver.Resolve"

_INTERFACE_RE = re.compile(
    r"[A-Za-z](?:-*[A-Za-z0-9])*(?:\.[A-Za-z0-9](?:-*[A-Za-z0-9])*)+"
)
_MEMBER_RE = re.compile(r"[A-Z][A-Za-z0-9]*")


def is_interface_name(name: str) -> bool:
    """Return ``True`` for a syntactically valid reverse-domain name."""
    return _INTERFACE_RE.fullmatch(name) is not None


def is_member_name(name: str) -> bool:
    """Return ``True`` for a valid method/type/error name."""
    return _MEMBER_RE.fullmatch(name) is not None


def split_address(text: str) -> tuple[str | None, str]:
    """Split ``[ADDRESS/]REST`` at the last slash.

    Raises
    ------
    InvalidArgumentError
        If a slash is present but the address before it is empty.
    """
    address, slash, rest = text.rpartition("/")
    if not slash:
        return None, text
    if not address:
        raise InvalidArgumentError(f"Invalid address in target: {text}")
    return address, rest


def parse_target(text: str, *, with_member: bool = True) -> Target:
    """Parse *text* into a :class:`Target`.

    With *with_member*, a trailing ``.Name`` segment in method syntax
    becomes the member; otherwise the whole remainder is the interface.
    A missing member is not an error here: callers that need one
    check :attr:`Target.member`.

    Raises
    ------
    InvalidArgumentError
        If the address or interface part is malformed.
    """
    stripped = text.strip()
    if not stripped:
        raise InvalidArgumentError("Target must not be empty.")

    address, rest = split_address(stripped)

    interface, member = rest, None
    if with_member:
        head, dot, tail = rest.rpartition(".")
        if dot and is_member_name(tail) and is_interface_name(head):
            interface, member = head, tail

    if not is_interface_name(interface):
        raise InvalidArgumentError(
            f"Invalid interface name: {interface or rest}",
            hint="Expected a reverse-domain name such as org.example.ping",
        )

    return Target(address=address, interface=interface, member=member)


class TargetResolver:
    """Finds the service address for a :class:`Target`.

    Parameters
    ----------
    orchestrator:
        Used for the single-shot ``Resolve`` call.
    resolver_address:
        Address of the varlink resolver service.
    """

    def __init__(self, orchestrator: CallOrchestrator, resolver_address: str) -> None:
        self._orchestrator = orchestrator
        self.resolver_address = resolver_address

    def resolve(self, target: Target) -> str:
        """Return the explicit address of *target* or look it up.

        Raises
        ------
        CannotResolveError
            If the resolver is unreachable or does not know the interface.
        """
        if target.address is not None:
            return target.address
        return self.resolve_interface(target.interface)

    def resolve_interface(self, interface: str) -> str:
        """Ask the resolver for the address implementing *interface*."""
        logger.debug("Resolving %s via %s", interface, self.resolver_address)
        try:
            reply = self._orchestrator.call_once(
                self.resolver_address,
                RESOLVE_METHOD,
                {"interface": interface},
            )
        except VarlinkCliError as exc:
            raise CannotResolveError(
                f"Error resolving interface {interface}",
                hint=str(exc),
            ) from exc

        if reply.error is not None:
            raise CannotResolveError(
                f"Error resolving interface {interface}",
                hint=f"The resolver replied with {reply.error}.",
            )

        address = reply.parameters.get("address")
        if not isinstance(address, str) or not address:
            raise CannotResolveError(f"Error resolving interface {interface}")

        logger.debug("Resolved %s to %s", interface, address)
        return address
