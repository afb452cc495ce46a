"""Domain models for varlink-cli.

All models are **frozen** dataclasses: immutable value objects with no
behaviour beyond data access.  They carry zero I/O, zero dependencies on
external packages, and are never persisted.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any


# ---------------------------------------------------------------------------
# Targets and requests
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Target:
    """A parsed ``[ADDRESS/]INTERFACE[.METHOD]`` reference."""

    address: str | None
    """Connection locator (e.g. ``unix:/run/org.example``), or ``None``
    when it must be obtained from the resolver."""

    interface: str
    """Reverse-domain interface name (e.g. ``org.example.ping``)."""

    member: str | None = None
    """Method name, or ``None`` for introspection-only targets."""

    @property
    def qualified_member(self) -> str | None:
        """``interface.Member`` or ``None`` when no member was given."""
        if self.member is None:
            return None
        return f"{self.interface}.{self.member}"


@dataclass(frozen=True, slots=True)
class CallRequest:
    """Everything the ``call`` command needs to issue one method call."""

    target: Target | None
    """``None`` only when help was requested."""

    more: bool = False
    """Ask the service for a stream of replies (``--more``)."""

    parameters: str | None = None
    """Raw JSON text, the ``"-"`` stdin sentinel, or ``None``."""

    help: bool = False
    """``-h`` was given; no call is to be made."""


@dataclass(frozen=True, slots=True)
class InterfaceQuery:
    """Request for the ``help`` command."""

    target: Target | None
    help: bool = False


# ---------------------------------------------------------------------------
# Replies and outcomes
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ReplyEvent:
    """One reply message received from a service."""

    parameters: dict[str, Any]
    error: str | None = None
    """Qualified error name when the service reported an error."""

    continues: bool = False
    """The service announced that more replies follow."""


class StreamOutcome(enum.Enum):
    """Terminal state of one orchestrated call."""

    COMPLETED = "completed"
    REMOTE_ERROR = "remote-error"
    CANCELED = "canceled"
    CONNECTION_CLOSED = "connection-closed"
    INVALID_JSON = "invalid-json"


@dataclass(frozen=True, slots=True)
class CallResult:
    outcome: StreamOutcome
    replies: int
    """Number of replies handed to the renderer."""

    detail: str | None = None
    """Error name for REMOTE_ERROR, failure message for INVALID_JSON."""


# ---------------------------------------------------------------------------
# Interface descriptions
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Field:
    """A ``name: type`` pair of a struct, method or error signature."""

    name: str
    type: str


@dataclass(frozen=True, slots=True)
class InterfaceMember:
    """A ``type``, ``method`` or ``error`` declaration."""

    kind: str
    name: str
    doc: tuple[str, ...] = ()
    fields: tuple[Field, ...] = ()
    """Struct fields, method input, or error payload."""

    output_fields: tuple[Field, ...] = ()
    """Method output; empty for other kinds."""

    enum_values: tuple[str, ...] = ()
    """Enum names when the type declaration is an enum."""

    @property
    def is_enum(self) -> bool:
        return bool(self.enum_values)


@dataclass(frozen=True, slots=True)
class InterfaceModel:
    """Structured form of an interface description."""

    name: str
    doc: tuple[str, ...] = ()
    members: tuple[InterfaceMember, ...] = ()

    def methods(self) -> tuple[InterfaceMember, ...]:
        return tuple(m for m in self.members if m.kind == "method")


@dataclass(frozen=True, slots=True)
class DescribeResult:
    """Outcome of an introspection call: a model or a remote error name."""

    interface: InterfaceModel | None = None
    error: str | None = None


@dataclass(frozen=True, slots=True)
class ServiceInfo:
    """Reply of ``org.varlink.service.GetInfo``."""

    vendor: str
    product: str
    version: str
    url: str
    interfaces: tuple[str, ...] = field(default_factory=tuple)
