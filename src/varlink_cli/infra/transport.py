"""Socket transport for varlink, built on python-varlink.

python-varlink turns an address string (``unix:/path``,
``unix:@abstract``, ``tcp:host:port``) into a connected socket and
wraps it in a ``SimpleClientInterfaceHandler``, which owns the wire
framing.  :class:`VarlinkConnection` drives that handler with raw
request and reply objects, the same way python-varlink's own
``varlink call`` command does, so that arbitrary methods can be called
without knowing their interface.

This module is the **only** place in the codebase that imports
``varlink`` for transport purposes.  Socket and python-varlink errors
are caught here and re-raised as typed
:class:`~varlink_cli.exceptions.VarlinkCliError` subclasses.
"""

from __future__ import annotations

import contextlib
import json
import logging
from typing import Any

from varlink_cli.exceptions import (
    CallFailedError,
    CannotConnectError,
    EnvironmentError,
    InvalidJsonError,
)

logger = logging.getLogger(__name__)

SERVICE_INTERFACE: str = "org.varlink.service"
"""Interface every varlink service implements; used to open raw handlers."""


def _import_varlink() -> Any:
    """Return the ``varlink`` module or raise ``EnvironmentError``."""
    try:
        import varlink
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "varlink is not installed. Install with: pip install varlink",
        ) from exc
    return varlink


class VarlinkConnection:
    """Concrete :class:`~varlink_cli.core.protocols.Connection`.

    Parameters
    ----------
    handler:
        A python-varlink ``SimpleClientInterfaceHandler`` bound to an
        open socket.  Ownership passes to this object.
    cleanup:
        Extra resources (the python-varlink client) released together
        with the handler.
    """

    def __init__(self, handler: Any, cleanup: contextlib.ExitStack | None = None) -> None:
        self._handler: Any = handler
        self._cleanup = cleanup

    # ------------------------------------------------------------------
    # Protocol methods
    # ------------------------------------------------------------------

    def send(self, message: dict[str, Any]) -> None:
        if self._handler is None:
            raise CallFailedError("Connection is already closed.")
        varlink = _import_varlink()
        try:
            payload = json.dumps(message, cls=varlink.VarlinkEncoder).encode("utf-8")
        except (TypeError, ValueError) as exc:
            raise CallFailedError(f"Unable to encode message: {exc}") from exc
        try:
            self._handler._send_message(payload)
        except OSError as exc:
            raise CallFailedError(f"Unable to call: {exc}") from exc

    def receive(self) -> dict[str, Any] | None:
        """Return the next reply, or ``None`` once the peer has hung up."""
        if self._handler is None:
            return None
        try:
            raw = next(self._handler._next_message())
        except BrokenPipeError:
            logger.debug("Peer closed the connection")
            return None
        except UnicodeDecodeError as exc:
            raise InvalidJsonError(f"Unable to read message: {exc}") from exc
        except OSError as exc:
            raise CallFailedError(f"Unable to process events: {exc}") from exc
        return self._decode(raw)

    def close(self) -> None:
        handler, self._handler = self._handler, None
        if handler is None:
            return
        try:
            handler.close()
        finally:
            if self._cleanup is not None:
                self._cleanup.close()

    @staticmethod
    def _decode(raw: str) -> dict[str, Any]:
        try:
            message: Any = json.loads(raw)
        except ValueError as exc:
            raise InvalidJsonError(f"Unable to read message: {exc}") from exc
        if not isinstance(message, dict):
            raise InvalidJsonError("Unable to read message: expected a JSON object")
        return message


class VarlinkConnector:
    """Concrete :class:`~varlink_cli.core.protocols.Connector`.

    Usage::

        connection = VarlinkConnector().connect("unix:/run/org.example.ping")
    """

    def connect(self, address: str) -> VarlinkConnection:
        """Open a connection to *address*.

        Raises
        ------
        EnvironmentError
            When python-varlink is not installed.
        CannotConnectError
            When the address is malformed or the service is unreachable.
        """
        varlink = _import_varlink()

        stack = contextlib.ExitStack()
        try:
            client = stack.enter_context(varlink.Client(address=address))
            sock = stack.enter_context(contextlib.closing(client.open_connection()))
            handler = client.open(SERVICE_INTERFACE, connection=sock)
        except Exception as exc:
            stack.close()
            raise CannotConnectError(
                f"Unable to connect to {address}: {exc}",
                hint="Check that the service is running and the address is correct.",
            ) from exc

        logger.debug("Connected to %s", address)
        return VarlinkConnection(handler, cleanup=stack)
