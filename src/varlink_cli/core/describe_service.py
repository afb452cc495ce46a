"""Core describe service: retrieves and decodes interface descriptions.

Every varlink service implements ``org.varlink.service``, whose
``GetInterfaceDescription`` method returns the source text of any
interface the service provides.  This service issues that call and
hands the text to a :class:`~varlink_cli.core.protocols.DescriptionParser`.

Guarantees
----------
* Exactly one non-streaming call per :meth:`InterfaceDescriber.describe`.
* A remote error (e.g. ``InterfaceNotFound``) is a normal result, not
  an exception.
* A description the service returned but which fails to parse is a
  :class:`~varlink_cli.exceptions.PanicError`.
"""

from __future__ import annotations

import logging

from varlink_cli.core.call_service import CallOrchestrator
from varlink_cli.core.models import DescribeResult, InterfaceModel, Target
from varlink_cli.core.protocols import DescriptionParser
from varlink_cli.core.target import TargetResolver
from varlink_cli.exceptions import CallFailedError, PanicError

logger = logging.getLogger(__name__)

DESCRIBE_METHOD: str = "org.varlink.service.GetInterfaceDescription"


class InterfaceDescriber:
    """Fetches and parses the description of one interface.

    Parameters
    ----------
    orchestrator:
        Performs the single-shot introspection call.
    resolver:
        Supplies the address for targets typed without one.
    parser:
        Any object satisfying the :class:`DescriptionParser` protocol.
    """

    def __init__(
        self,
        orchestrator: CallOrchestrator,
        resolver: TargetResolver,
        parser: DescriptionParser,
    ) -> None:
        self._orchestrator = orchestrator
        self._resolver = resolver
        self._parser = parser

    def describe(self, target: Target) -> DescribeResult:
        """Return the parsed description of ``target.interface``.

        Raises
        ------
        CannotResolveError
            If no address was given and resolution fails.
        CannotConnectError, CallFailedError, ConnectionClosedError
            On transport failures.
        PanicError
            If the returned description cannot be parsed.
        """
        address = self._resolver.resolve(target)
        return self.describe_at(address, target.interface)

    def describe_at(self, address: str, interface: str) -> DescribeResult:
        """Like :meth:`describe` for an already known *address*."""
        reply = self._orchestrator.call_once(
            address,
            DESCRIBE_METHOD,
            {"interface": interface},
        )
        if reply.error is not None:
            logger.debug("Describing %s failed with %s", interface, reply.error)
            return DescribeResult(error=reply.error)

        description = reply.parameters.get("description")
        if not isinstance(description, str):
            raise CallFailedError(
                f"Service at {address} returned no description for {interface}",
            )

        return DescribeResult(interface=self._parse(description))

    def _parse(self, description: str) -> InterfaceModel:
        try:
            return self._parser.parse(description)
        except Exception as exc:
            raise PanicError(
                f"Unable to parse the interface description: {exc}",
                hint="The service returned a description that is not valid varlink.",
            ) from exc
