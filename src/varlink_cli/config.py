"""Environment-driven configuration for varlink-cli.

Command-line options always win over the environment; the values
loaded here are only the defaults the argument parser starts from.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any

from varlink_cli.exceptions import ConfigurationError

DEFAULT_RESOLVER_ADDRESS: str = "unix:/run/org.varlink.resolver"
"""Well-known socket of the system varlink resolver."""

RESOLVER_ENV: str = "VARLINK_RESOLVER"
DEBUG_ENV: str = "VARLINK_CLI_DEBUG"
NO_COLOR_ENV: str = "NO_COLOR"


@dataclass(frozen=True, slots=True)
class CliConfig:
    """Settings shared by every sub-command."""

    resolver: str = DEFAULT_RESOLVER_ADDRESS
    """Address of the varlink resolver used for address-less targets."""

    debug: bool = False
    """Emit debug logging on stderr."""

    color: bool = True
    """Allow colored output when the terminal supports it."""

    def with_overrides(self, **overrides: Any) -> CliConfig:
        """Return a copy with every non-``None`` override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def _coerce_bool(value: str, *, source: str) -> bool:
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"", "0", "false", "no", "n", "off"}:
        return False
    raise ConfigurationError(
        f"Invalid boolean in {source}: {value}",
        hint="Use one of 1/0, true/false, yes/no, on/off.",
    )


def load_config(environ: Mapping[str, str] | None = None) -> CliConfig:
    """Build a :class:`CliConfig` from *environ* (default ``os.environ``).

    ``NO_COLOR`` follows the no-color.org convention: any non-empty
    value disables color.
    """
    env = os.environ if environ is None else environ

    resolver = env.get(RESOLVER_ENV, "").strip() or DEFAULT_RESOLVER_ADDRESS
    debug = _coerce_bool(env.get(DEBUG_ENV, ""), source=DEBUG_ENV)
    color = not env.get(NO_COLOR_ENV)

    return CliConfig(resolver=resolver, debug=debug, color=color)
