"""Service information via ``org.varlink.service.GetInfo``."""

from __future__ import annotations

from typing import Any

from varlink_cli.core.call_service import CallOrchestrator
from varlink_cli.core.models import ServiceInfo
from varlink_cli.exceptions import CallFailedError

INFO_METHOD: str = "org.varlink.service.GetInfo"


class InfoService:
    """Queries vendor, product and interface list of a service."""

    def __init__(self, orchestrator: CallOrchestrator) -> None:
        self._orchestrator = orchestrator

    def get_info(self, address: str) -> ServiceInfo | str:
        """Return the :class:`ServiceInfo` at *address*.

        A remote error is returned as its error name instead.

        Raises
        ------
        CallFailedError
            If the reply lacks the interface list.
        """
        reply = self._orchestrator.call_once(address, INFO_METHOD)
        if reply.error is not None:
            return reply.error
        return self._parse_info(reply.parameters, address)

    @staticmethod
    def _parse_info(parameters: dict[str, Any], address: str) -> ServiceInfo:
        interfaces = parameters.get("interfaces")
        if not isinstance(interfaces, list):
            raise CallFailedError(f"Service at {address} returned no interface list")
        return ServiceInfo(
            vendor=str(parameters.get("vendor", "")),
            product=str(parameters.get("product", "")),
            version=str(parameters.get("version", "")),
            url=str(parameters.get("url", "")),
            interfaces=tuple(str(name) for name in interfaces),
        )
