"""Core call service: orchestrates one varlink method call.

The :class:`CallOrchestrator` owns the connection for the whole call:
it connects, sends the request, then waits for replies until the
stream completes, the service reports an error, the user cancels, or
the peer hangs up.  Each reply is handed to a renderer callback
supplied by the CLI layer.

State machine
-------------
``Connecting -> AwaitingReply -> (Streaming <-> AwaitingReply) -> Done``
with ``Canceled`` and ``ConnectionClosed`` reachable from any waiting
state.

Guarantees
----------
* The connection is closed exactly once on every exit path.
* No terminal output: rendering is the callback's business.
* Only :class:`~varlink_cli.exceptions.VarlinkCliError` subclasses escape.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from typing import Any

from varlink_cli.core.models import CallResult, ReplyEvent, StreamOutcome
from varlink_cli.core.protocols import Connection, Connector
from varlink_cli.exceptions import (
    CallFailedError,
    CannotConnectError,
    ConnectionClosedError,
    InvalidJsonError,
    VarlinkCliError,
)

logger = logging.getLogger(__name__)

ReplyHandler = Callable[[ReplyEvent], None]
"""Renders one reply; raises :class:`InvalidJsonError` when it cannot."""


# ---------------------------------------------------------------------------
# Parameter and reply decoding (pure)
# ---------------------------------------------------------------------------

def decode_parameters(text: str | None) -> dict[str, Any] | None:
    """Decode call parameters given as JSON text.

    ``None`` means "no parameters".  Varlink parameters are always a
    JSON object, so any other top-level value is rejected.

    Raises
    ------
    InvalidJsonError
        If *text* is not a JSON object.
    """
    if text is None:
        return None
    try:
        value = json.loads(text)
    except ValueError as exc:
        raise InvalidJsonError(
            "Unable to parse input parameters, must be valid JSON",
            hint=str(exc),
        ) from exc
    if not isinstance(value, dict):
        raise InvalidJsonError(
            "Unable to parse input parameters, must be valid JSON",
            hint="Parameters must be a JSON object, e.g. '{}'.",
        )
    return value


def reply_from_message(message: dict[str, Any]) -> ReplyEvent:
    """Convert a raw varlink reply message into a :class:`ReplyEvent`.

    Raises
    ------
    InvalidJsonError
        If the message does not have the shape of a varlink reply.
    """
    parameters = message.get("parameters")
    if parameters is None:
        parameters = {}
    if not isinstance(parameters, dict):
        raise InvalidJsonError("Unable to read message: parameters must be an object")

    error = message.get("error")
    if error is not None and not isinstance(error, str):
        raise InvalidJsonError("Unable to read message: error must be a string")

    return ReplyEvent(
        parameters=parameters,
        error=error,
        continues=bool(message.get("continues", False)),
    )


def build_call_message(
    method: str,
    parameters: dict[str, Any] | None,
    *,
    more: bool = False,
) -> dict[str, Any]:
    """Return the varlink request object for *method*."""
    message: dict[str, Any] = {"method": method}
    if parameters is not None:
        message["parameters"] = parameters
    if more:
        message["more"] = True
    return message


# ---------------------------------------------------------------------------
# Orchestrator
# ---------------------------------------------------------------------------

class CallOrchestrator:
    """Drives calls over connections produced by a :class:`Connector`.

    Parameters
    ----------
    connector:
        Any object satisfying the :class:`Connector` protocol.
    """

    def __init__(self, connector: Connector) -> None:
        self._connector: Connector = connector

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def run(
        self,
        address: str,
        method: str,
        parameters: dict[str, Any] | None,
        on_reply: ReplyHandler,
        *,
        more: bool = False,
    ) -> CallResult:
        """Call *method* at *address* and feed every reply to *on_reply*.

        Returns
        -------
        CallResult
            ``COMPLETED``, ``REMOTE_ERROR`` (already rendered),
            ``CANCELED`` (user interrupt while waiting),
            ``CONNECTION_CLOSED`` or ``INVALID_JSON`` (renderer failure).

        Raises
        ------
        CannotConnectError
            If the connection cannot be opened.
        CallFailedError
            If the request cannot be sent or the transport fails.
        InvalidJsonError
            If the service sends a message that is not a varlink reply.
        """
        connection = self._connect(address)
        try:
            self._send(connection, build_call_message(method, parameters, more=more))
            return self._process_replies(connection, on_reply, more=more)
        finally:
            connection.close()

    def call_once(
        self,
        address: str,
        method: str,
        parameters: dict[str, Any] | None = None,
    ) -> ReplyEvent:
        """Issue a single non-streaming call and return its reply.

        Used for introspection, service info and resolution.  A
        ``KeyboardInterrupt`` propagates to the caller unchanged.

        Raises
        ------
        CannotConnectError, CallFailedError, InvalidJsonError
            As for :meth:`run`.
        ConnectionClosedError
            If the peer hangs up before replying.
        """
        connection = self._connect(address)
        try:
            self._send(connection, build_call_message(method, parameters))
            message = self._receive(connection)
            if message is None:
                raise ConnectionClosedError("Connection closed.")
            return reply_from_message(message)
        finally:
            connection.close()

    # ------------------------------------------------------------------
    # Reply loop
    # ------------------------------------------------------------------

    def _process_replies(
        self,
        connection: Connection,
        on_reply: ReplyHandler,
        *,
        more: bool,
    ) -> CallResult:
        replies = 0
        while True:
            try:
                message = self._receive(connection)
            except KeyboardInterrupt:
                logger.debug("Canceled while waiting for reply %d", replies + 1)
                return CallResult(StreamOutcome.CANCELED, replies)

            if message is None:
                logger.debug("Connection closed after %d replies", replies)
                return CallResult(StreamOutcome.CONNECTION_CLOSED, replies)

            reply = reply_from_message(message)
            try:
                on_reply(reply)
            except InvalidJsonError as exc:
                return CallResult(StreamOutcome.INVALID_JSON, replies, str(exc))
            replies += 1

            if reply.error is not None:
                logger.debug("Remote error %s", reply.error)
                return CallResult(StreamOutcome.REMOTE_ERROR, replies, reply.error)

            if not (reply.continues and more):
                return CallResult(StreamOutcome.COMPLETED, replies)

    # ------------------------------------------------------------------
    # Provider delegation (safe boundary)
    # ------------------------------------------------------------------

    def _connect(self, address: str) -> Connection:
        logger.debug("Connecting to %s", address)
        try:
            return self._connector.connect(address)
        except VarlinkCliError:
            raise
        except Exception as exc:
            raise CannotConnectError(f"Unable to connect to {address}: {exc}") from exc

    @staticmethod
    def _send(connection: Connection, message: dict[str, Any]) -> None:
        logger.debug("Sending %s", message.get("method"))
        try:
            connection.send(message)
        except VarlinkCliError:
            raise
        except Exception as exc:
            raise CallFailedError(f"Unable to call: {exc}") from exc

    @staticmethod
    def _receive(connection: Connection) -> dict[str, Any] | None:
        try:
            return connection.receive()
        except VarlinkCliError:
            raise
        except Exception as exc:
            raise CallFailedError(f"Unable to process events: {exc}") from exc
