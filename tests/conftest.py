"""Shared pytest fixtures and configuration for the varlink-cli test suite.

Guidelines
----------
* No test talks to a real varlink service.
* Connections are faked at the :class:`Connector` protocol boundary.
* Core tests must be pure: no side effects.
* Rendered output is captured with non-color consoles writing to
  in-memory buffers.
"""

from __future__ import annotations

import io
from typing import Any

import pytest

from varlink_cli.cli.console import make_error_console, make_output_console
from varlink_cli.exceptions import CannotConnectError


class FakeConnection:
    """Scripted :class:`Connection`.

    Each scripted item is returned by :meth:`receive` in order: a dict
    is a message, ``None`` is a peer close, and an exception instance
    (``KeyboardInterrupt()`` included) is raised.  An exhausted script
    behaves like a closed peer.
    """

    def __init__(self, script: list[Any] | None = None) -> None:
        self._script = list(script or [])
        self.sent: list[dict[str, Any]] = []
        self.close_count = 0
        self.receive_count = 0

    def send(self, message: dict[str, Any]) -> None:
        self.sent.append(message)

    def receive(self) -> dict[str, Any] | None:
        self.receive_count += 1
        if not self._script:
            return None
        item = self._script.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item

    def close(self) -> None:
        self.close_count += 1


class FakeConnector:
    """Hands out the given connections in order and records addresses."""

    def __init__(self, *connections: FakeConnection) -> None:
        self._connections = list(connections)
        self.addresses: list[str] = []

    def connect(self, address: str) -> FakeConnection:
        self.addresses.append(address)
        if not self._connections:
            raise CannotConnectError(f"Unable to connect to {address}")
        return self._connections.pop(0)


def reply(parameters: dict[str, Any] | None = None, **extra: Any) -> dict[str, Any]:
    """Build a raw varlink reply message."""
    message: dict[str, Any] = {"parameters": parameters if parameters is not None else {}}
    message.update(extra)
    return message


@pytest.fixture
def fake_connection() -> type[FakeConnection]:
    return FakeConnection


@pytest.fixture
def fake_connector() -> type[FakeConnector]:
    return FakeConnector


@pytest.fixture
def make_reply() -> Any:
    return reply


class Consoles:
    """Output/error consoles backed by string buffers."""

    def __init__(self) -> None:
        self.out_buffer = io.StringIO()
        self.err_buffer = io.StringIO()
        self.out = make_output_console(color=False, file=self.out_buffer)
        self.err = make_error_console(color=False, file=self.err_buffer)

    @property
    def stdout(self) -> str:
        return self.out_buffer.getvalue()

    @property
    def stderr(self) -> str:
        return self.err_buffer.getvalue()


@pytest.fixture
def consoles() -> Consoles:
    return Consoles()
