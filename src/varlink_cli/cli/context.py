"""Per-invocation wiring of consoles, infra adapters and core services."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import IO, Any

from varlink_cli.config import CliConfig
from varlink_cli.core.call_service import CallOrchestrator
from varlink_cli.core.completion import Completer
from varlink_cli.core.describe_service import InterfaceDescriber
from varlink_cli.core.info_service import InfoService
from varlink_cli.core.protocols import Connector, DescriptionParser
from varlink_cli.core.target import TargetResolver


@dataclass
class CliContext:
    """Everything a sub-command needs; built once in :func:`build_context`."""

    prog: str
    """Program name used in usage lines."""

    config: CliConfig
    out: Any
    err: Any
    stdin: IO[str]
    orchestrator: CallOrchestrator
    resolver: TargetResolver
    describer: InterfaceDescriber
    info: InfoService
    completer: Completer


def build_context(
    config: CliConfig,
    *,
    prog: str = "varlink-cli",
    connector: Connector | None = None,
    parser: DescriptionParser | None = None,
    out: Any = None,
    err: Any = None,
    stdin: IO[str] | None = None,
) -> CliContext:
    """Instantiate infra adapters and core services for one invocation.

    Every collaborator can be replaced, which is how the test-suite
    runs commands against fake services.
    """
    from varlink_cli.cli.console import make_error_console, make_output_console

    if connector is None:
        from varlink_cli.infra.transport import VarlinkConnector

        connector = VarlinkConnector()
    if parser is None:
        from varlink_cli.infra.interface_parser import VarlinkDescriptionParser

        parser = VarlinkDescriptionParser()

    orchestrator = CallOrchestrator(connector)
    resolver = TargetResolver(orchestrator, config.resolver)
    describer = InterfaceDescriber(orchestrator, resolver, parser)

    return CliContext(
        prog=prog,
        config=config,
        out=out if out is not None else make_output_console(color=config.color),
        err=err if err is not None else make_error_console(color=config.color),
        stdin=stdin if stdin is not None else sys.stdin,
        orchestrator=orchestrator,
        resolver=resolver,
        describer=describer,
        info=InfoService(orchestrator),
        completer=Completer(orchestrator, resolver, describer),
    )
