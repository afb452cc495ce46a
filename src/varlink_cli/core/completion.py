"""Best-effort discovery of completion candidates.

Candidates are gathered from the running services: the interface list
comes from ``GetInfo`` (of the service when the typed word carries an
address, of the resolver otherwise) and method names from the
interface descriptions.  Completion must never fail loudly, so every
:class:`~varlink_cli.exceptions.VarlinkCliError` yields an empty list.
"""

from __future__ import annotations

import logging

from varlink_cli.core.call_service import CallOrchestrator
from varlink_cli.core.describe_service import InterfaceDescriber
from varlink_cli.core.info_service import InfoService
from varlink_cli.core.target import TargetResolver, split_address
from varlink_cli.exceptions import VarlinkCliError

logger = logging.getLogger(__name__)

RESOLVER_INFO_METHOD: str = "org.varlink.resolver.GetInfo"


class Completer:
    """Looks up interface and method names matching a partial word."""

    def __init__(
        self,
        orchestrator: CallOrchestrator,
        resolver: TargetResolver,
        describer: InterfaceDescriber,
    ) -> None:
        self._orchestrator = orchestrator
        self._resolver = resolver
        self._describer = describer
        self._info = InfoService(orchestrator)

    def method_candidates(self, current: str) -> list[str]:
        """Complete ``[ADDRESS/]INTERFACE.METHOD`` from *current*.

        Interfaces whose name the word has not reached yet are offered
        as ``interface.`` stubs; once the word names a single interface
        its methods are listed.
        """
        try:
            return self._method_candidates(current)
        except VarlinkCliError as exc:
            logger.debug("Completion of %r failed: %s", current, exc)
            return []

    def interface_candidates(self, current: str) -> list[str]:
        """Complete ``[ADDRESS/]INTERFACE`` from *current*."""
        try:
            address, partial = split_address(current)
            prefix = f"{address}/" if address else ""
            return [
                prefix + name
                for name in self._interfaces(address)
                if name.startswith(partial)
            ]
        except VarlinkCliError as exc:
            logger.debug("Completion of %r failed: %s", current, exc)
            return []

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _method_candidates(self, current: str) -> list[str]:
        address, partial = split_address(current)
        prefix = f"{address}/" if address else ""

        matching = [
            name
            for name in self._interfaces(address)
            if name.startswith(partial) or partial.startswith(f"{name}.")
        ]

        candidates: list[str] = []
        for name in matching:
            if len(matching) == 1 or partial.startswith(f"{name}."):
                candidates.extend(
                    f"{prefix}{name}.{method}"
                    for method in self._methods(address, name)
                )
            else:
                candidates.append(f"{prefix}{name}.")

        return [c for c in candidates if c.startswith(current)]

    def _interfaces(self, address: str | None) -> list[str]:
        if address is not None:
            info = self._info.get_info(address)
            return [] if isinstance(info, str) else list(info.interfaces)

        reply = self._orchestrator.call_once(
            self._resolver.resolver_address,
            RESOLVER_INFO_METHOD,
        )
        interfaces = reply.parameters.get("interfaces")
        if reply.error is not None or not isinstance(interfaces, list):
            return []
        return [str(name) for name in interfaces]

    def _methods(self, address: str | None, interface: str) -> list[str]:
        if address is None:
            address = self._resolver.resolve_interface(interface)
        result = self._describer.describe_at(address, interface)
        if result.interface is None:
            return []
        return [member.name for member in result.interface.methods()]
