"""Core / service layer: call orchestration and introspection logic.

Rules
-----
* No ``print()`` calls and no terminal rendering.
* No third-party imports; transports are reached through ``protocols``.
* No imports from ``cli`` or ``infra``.
* Every connection opened here is closed here.
"""

from varlink_cli.core.call_service import CallOrchestrator, decode_parameters
from varlink_cli.core.completion import Completer
from varlink_cli.core.describe_service import InterfaceDescriber
from varlink_cli.core.info_service import InfoService
from varlink_cli.core.models import (
    CallRequest,
    CallResult,
    DescribeResult,
    Field,
    InterfaceMember,
    InterfaceModel,
    InterfaceQuery,
    ReplyEvent,
    ServiceInfo,
    StreamOutcome,
    Target,
)
from varlink_cli.core.protocols import Connection, Connector, DescriptionParser
from varlink_cli.core.target import TargetResolver, parse_target

__all__: list[str] = [
    "CallOrchestrator",
    "CallRequest",
    "CallResult",
    "Completer",
    "Connection",
    "Connector",
    "DescribeResult",
    "DescriptionParser",
    "Field",
    "InfoService",
    "InterfaceDescriber",
    "InterfaceMember",
    "InterfaceModel",
    "InterfaceQuery",
    "ReplyEvent",
    "ServiceInfo",
    "StreamOutcome",
    "Target",
    "TargetResolver",
    "decode_parameters",
    "parse_target",
]
