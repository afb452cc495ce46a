"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure adapters must satisfy.
Core code depends ONLY on these protocols, never on concrete
implementations.
"""

from __future__ import annotations

from typing import Any, Protocol

from varlink_cli.core.models import InterfaceModel


class Connection(Protocol):
    """An open, message-oriented varlink connection.

    A connection has a single owner which must call :meth:`close`
    exactly once, whatever the exit path.
    """

    def send(self, message: dict[str, Any]) -> None:
        """Encode and transmit one message.

        Raises
        ------
        CallFailedError
            When the message cannot be encoded or written.
        """
        ...  # pragma: no cover

    def receive(self) -> dict[str, Any] | None:
        """Block until the next message arrives.

        Returns ``None`` when the peer closed the connection.  A
        ``KeyboardInterrupt`` raised while blocked must propagate
        unchanged so the caller can treat it as a cancellation.

        Raises
        ------
        CallFailedError
            On a transport failure.
        InvalidJsonError
            When the peer sent a message that is not a JSON object.
        """
        ...  # pragma: no cover

    def close(self) -> None:
        """Release the underlying transport.  Idempotent."""
        ...  # pragma: no cover


class Connector(Protocol):
    """Factory for :class:`Connection` objects."""

    def connect(self, address: str) -> Connection:
        """Open a connection to *address*.

        Raises
        ------
        CannotConnectError
            When the address is malformed or unreachable.
        """
        ...  # pragma: no cover


class DescriptionParser(Protocol):
    """Turns interface-description text into an :class:`InterfaceModel`."""

    def parse(self, description: str) -> InterfaceModel:
        """Parse *description*.

        Any exception signals an unparsable description; the caller
        decides how severe that is.
        """
        ...  # pragma: no cover
