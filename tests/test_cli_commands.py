"""End-to-end tests of the sub-commands through ``main``.

Services are faked at the connector boundary; consoles and stdin are
in-memory.  Errors raised by ``main`` are what the ``cli()`` boundary
would turn into exit codes, which :func:`exit_code_for` maps.
"""

from __future__ import annotations

import io
import json
from typing import Any

import pytest

from varlink_cli.cli import exit_codes
from varlink_cli.cli.app import exit_code_for, main
from varlink_cli.exceptions import (
    CannotConnectError,
    CannotResolveError,
    InvalidArgumentError,
    InvalidJsonError,
    MissingArgumentError,
    PanicError,
)
from varlink_cli.infra.interface_parser import VarlinkDescriptionParser

ADDRESS = "unix:/run/org.example.ping"
RESOLVER = "unix:/run/org.varlink.resolver"
DESCRIPTION = """\
# Ping service
interface org.example.ping

method Ping(ping: string) -> (pong: string)

error PingError (reason: string)
"""


def _main(argv: list[str], consoles: Any, connector: Any, stdin: str = "") -> int:
    return main(
        argv,
        environ={},
        connector=connector,
        parser=VarlinkDescriptionParser(),
        out=consoles.out,
        err=consoles.err,
        stdin=io.StringIO(stdin),
    )


# ---------------------------------------------------------------------------
# call
# ---------------------------------------------------------------------------

class TestCall:
    def test_single_reply(self, consoles, fake_connection, fake_connector, make_reply) -> None:
        connection = fake_connection([make_reply({"pong": "hi"})])
        connector = fake_connector(connection)

        code = _main(
            ["call", f"{ADDRESS}/org.example.ping.Ping", '{"ping": "hi"}'],
            consoles,
            connector,
        )

        assert code == exit_codes.SUCCESS
        assert json.loads(consoles.stdout) == {"pong": "hi"}
        assert connector.addresses == [ADDRESS]
        assert connection.sent == [{"method": "org.example.ping.Ping", "parameters": {"ping": "hi"}}]
        assert connection.close_count == 1

    def test_stream_with_more(self, consoles, fake_connection, fake_connector, make_reply) -> None:
        connection = fake_connection(
            [
                make_reply({"n": 1}, continues=True),
                make_reply({"n": 2}, continues=True),
                make_reply({"n": 3}),
            ]
        )
        code = _main(["call", "-m", f"{ADDRESS}/org.example.more.Count"], consoles, fake_connector(connection))

        assert code == exit_codes.SUCCESS
        assert consoles.stdout.count('"n"') == 3
        assert connection.sent[0]["more"] is True

    def test_more_after_target(self, consoles, fake_connection, fake_connector, make_reply) -> None:
        connection = fake_connection([make_reply({"n": 1}, continues=True), make_reply({"n": 2})])

        code = _main(
            ["call", f"{ADDRESS}/org.example.more.Count", "-m", '{"n": 2}'],
            consoles,
            fake_connector(connection),
        )

        assert code == exit_codes.SUCCESS
        assert connection.sent == [
            {"method": "org.example.more.Count", "parameters": {"n": 2}, "more": True},
        ]
        assert consoles.stdout.count('"n"') == 2

    def test_parameters_from_stdin(self, consoles, fake_connection, fake_connector, make_reply) -> None:
        connection = fake_connection([make_reply()])

        code = _main(["call", f"{ADDRESS}/org.example.ping.Ping", "-"], consoles, fake_connector(connection), stdin='{"a":1}')

        assert code == exit_codes.SUCCESS
        assert connection.sent[0]["parameters"] == {"a": 1}

    def test_remote_error_is_success(self, consoles, fake_connection, fake_connector, make_reply) -> None:
        connection = fake_connection([make_reply({"reason": "x"}, error="org.example.ping.PingError")])

        code = _main(["call", "--more", f"{ADDRESS}/org.example.ping.Ping"], consoles, fake_connector(connection))

        assert code == exit_codes.SUCCESS
        assert "Call failed with error: org.example.ping.PingError" in consoles.stderr
        assert json.loads(consoles.stdout) == {"reason": "x"}

    def test_cancel_is_success(self, consoles, fake_connection, fake_connector, make_reply) -> None:
        connection = fake_connection([make_reply({"n": 1}, continues=True), KeyboardInterrupt()])

        code = _main(["call", "-m", f"{ADDRESS}/org.example.more.Count"], consoles, fake_connector(connection))

        assert code == exit_codes.SUCCESS
        assert consoles.stdout.count('"n"') == 1

    def test_connection_closed(self, consoles, fake_connection, fake_connector) -> None:
        code = _main(["call", f"{ADDRESS}/org.example.ping.Ping"], consoles, fake_connector(fake_connection([None])))

        assert code == exit_codes.CONNECTION_CLOSED
        assert "Connection closed." in consoles.stderr

    def test_unrenderable_reply(self, consoles, fake_connection, fake_connector, make_reply, monkeypatch) -> None:
        from varlink_cli.cli import render

        def broken(value: dict[str, Any]) -> Any:
            raise InvalidJsonError("Unable to read message: bad value")

        monkeypatch.setattr(render, "render_json", broken)
        connection = fake_connection([make_reply({"n": 1})])

        code = _main(["call", f"{ADDRESS}/org.example.ping.Ping"], consoles, fake_connector(connection))

        assert code == exit_codes.INVALID_JSON
        assert "bad value" in consoles.stderr
        assert connection.close_count == 1

    def test_address_resolved(self, consoles, fake_connection, fake_connector, make_reply) -> None:
        resolver = fake_connection([make_reply({"address": ADDRESS})])
        service = fake_connection([make_reply({"pong": "x"})])
        connector = fake_connector(resolver, service)

        code = _main(["call", "org.example.ping.Ping", "{}"], consoles, connector)

        assert code == exit_codes.SUCCESS
        assert connector.addresses == [RESOLVER, ADDRESS]

    def test_resolver_option_overrides_environment(self, consoles, fake_connection, fake_connector, make_reply) -> None:
        resolver = fake_connection([make_reply({"address": ADDRESS})])
        connector = fake_connector(resolver, fake_connection([make_reply()]))

        main(
            ["--resolver", "tcp:localhost:1234", "call", "org.example.ping.Ping"],
            environ={"VARLINK_RESOLVER": "unix:/elsewhere"},
            connector=connector,
            parser=VarlinkDescriptionParser(),
            out=consoles.out,
            err=consoles.err,
            stdin=io.StringIO(),
        )

        assert connector.addresses[0] == "tcp:localhost:1234"

    def test_help(self, consoles, fake_connector) -> None:
        connector = fake_connector()
        code = _main(["call", "--help"], consoles, connector)

        assert code == exit_codes.SUCCESS
        assert "Usage: varlink-cli call [ADDRESS/]INTERFACE.METHOD [ARGUMENTS]" in consoles.stdout
        assert connector.addresses == []


class TestCallErrors:
    def test_missing_target_never_connects(self, consoles, fake_connector) -> None:
        connector = fake_connector()
        with pytest.raises(MissingArgumentError) as exc_info:
            _main(["call"], consoles, connector)
        assert connector.addresses == []
        assert exit_code_for(exc_info.value) == exit_codes.MISSING_ARGUMENT

    def test_missing_method(self, consoles, fake_connector) -> None:
        connector = fake_connector()
        with pytest.raises(InvalidArgumentError, match="Missing method"):
            _main(["call", f"{ADDRESS}/org.example.ping"], consoles, connector)
        assert connector.addresses == []

    def test_invalid_parameters_never_connect(self, consoles, fake_connector) -> None:
        connector = fake_connector()
        with pytest.raises(InvalidJsonError) as exc_info:
            _main(["call", f"{ADDRESS}/org.example.ping.Ping", "{nope"], consoles, connector)
        assert connector.addresses == []
        assert exit_code_for(exc_info.value) == exit_codes.INVALID_JSON

    def test_invalid_stdin_parameters(self, consoles, fake_connector) -> None:
        with pytest.raises(InvalidJsonError):
            _main(["call", f"{ADDRESS}/org.example.ping.Ping", "-"], consoles, fake_connector(), stdin="[")

    def test_undecodable_stdin_parameters(self, consoles, fake_connector) -> None:
        connector = fake_connector()
        with pytest.raises(InvalidJsonError) as exc_info:
            main(
                ["call", f"{ADDRESS}/org.example.ping.Ping", "-"],
                environ={},
                connector=connector,
                out=consoles.out,
                err=consoles.err,
                stdin=io.TextIOWrapper(io.BytesIO(b'{"a": "\xff"}'), encoding="utf-8"),
            )
        assert exit_code_for(exc_info.value) == exit_codes.INVALID_JSON
        assert connector.addresses == []

    def test_cannot_connect(self, consoles, fake_connector) -> None:
        with pytest.raises(CannotConnectError) as exc_info:
            _main(["call", f"{ADDRESS}/org.example.ping.Ping"], consoles, fake_connector())
        assert exit_code_for(exc_info.value) == exit_codes.CANNOT_CONNECT

    def test_cannot_resolve(self, consoles, fake_connection, fake_connector, make_reply) -> None:
        resolver = fake_connection([make_reply(error="org.varlink.resolver.InterfaceNotFound")])
        with pytest.raises(CannotResolveError) as exc_info:
            _main(["call", "org.example.ping.Ping"], consoles, fake_connector(resolver))
        assert exit_code_for(exc_info.value) == exit_codes.CANNOT_RESOLVE


# ---------------------------------------------------------------------------
# help
# ---------------------------------------------------------------------------

class TestHelp:
    def test_prints_interface(self, consoles, fake_connection, fake_connector, make_reply) -> None:
        connection = fake_connection([make_reply({"description": DESCRIPTION})])

        code = _main(["help", f"{ADDRESS}/org.example.ping"], consoles, fake_connector(connection))

        assert code == exit_codes.SUCCESS
        assert "interface org.example.ping" in consoles.stdout
        assert "method Ping(ping: string) -> (pong: string)" in consoles.stdout
        assert "# Ping service" in consoles.stdout

    def test_unknown_interface_is_reported_not_raised(
        self, consoles, fake_connection, fake_connector, make_reply,
    ) -> None:
        connection = fake_connection(
            [make_reply({"interface": "org.example.nope"}, error="org.varlink.service.InterfaceNotFound")],
        )

        code = _main(["help", f"{ADDRESS}/org.example.nope"], consoles, fake_connector(connection))

        assert code == exit_codes.SUCCESS
        assert "Error: org.varlink.service.InterfaceNotFound" in consoles.stdout

    def test_missing_target_prints_usage(self, consoles, fake_connector) -> None:
        connector = fake_connector()
        code = _main(["help"], consoles, connector)

        assert code == exit_codes.MISSING_ARGUMENT
        assert "Usage: varlink-cli help [ADDRESS/]INTERFACE" in consoles.stderr
        assert connector.addresses == []

    def test_help_flag(self, consoles, fake_connector) -> None:
        code = _main(["help", "-h"], consoles, fake_connector())
        assert code == exit_codes.SUCCESS
        assert "Prints information about INTERFACE." in consoles.stdout

    def test_bad_description_panics(self, consoles, fake_connection, fake_connector, make_reply) -> None:
        connection = fake_connection([make_reply({"description": "nonsense"})])

        class Failing:
            def parse(self, description: str) -> Any:
                raise SyntaxError("nonsense")

        with pytest.raises(PanicError) as exc_info:
            main(
                ["help", f"{ADDRESS}/org.example.ping"],
                environ={},
                connector=fake_connector(connection),
                parser=Failing(),
                out=consoles.out,
                err=consoles.err,
            )
        assert exit_code_for(exc_info.value) == exit_codes.PANIC


# ---------------------------------------------------------------------------
# info / resolve
# ---------------------------------------------------------------------------

class TestInfoAndResolve:
    def test_info(self, consoles, fake_connection, fake_connector, make_reply) -> None:
        connection = fake_connection(
            [
                make_reply(
                    {
                        "vendor": "Varlink",
                        "product": "Examples",
                        "version": "1",
                        "url": "https://varlink.org",
                        "interfaces": ["org.varlink.service", "org.example.ping"],
                    }
                )
            ]
        )
        connector = fake_connector(connection)

        code = _main(["info", ADDRESS], consoles, connector)

        assert code == exit_codes.SUCCESS
        assert "Vendor: Varlink" in consoles.stdout
        assert "  org.example.ping" in consoles.stdout
        assert connector.addresses == [ADDRESS]

    def test_info_defaults_to_resolver(self, consoles, fake_connection, fake_connector, make_reply) -> None:
        connector = fake_connector(fake_connection([make_reply({"interfaces": []})]))
        _main(["info"], consoles, connector)
        assert connector.addresses == [RESOLVER]

    def test_resolve(self, consoles, fake_connection, fake_connector, make_reply) -> None:
        connector = fake_connector(fake_connection([make_reply({"address": ADDRESS})]))

        code = _main(["resolve", "org.example.ping"], consoles, connector)

        assert code == exit_codes.SUCCESS
        assert consoles.stdout.strip() == ADDRESS


# ---------------------------------------------------------------------------
# complete
# ---------------------------------------------------------------------------

class TestComplete:
    def test_options(self, consoles, fake_connector) -> None:
        code = _main(["complete", "call", "--m"], consoles, fake_connector())
        assert code == exit_codes.SUCCESS
        assert consoles.stdout.split() == ["--more"]

    def test_parameter_placeholder(self, consoles, fake_connector) -> None:
        _main(["complete", "call", "org.example.ping.Ping", ""], consoles, fake_connector())
        assert consoles.stdout.split() == ["'{}'"]

    def test_nothing_after_parameters(self, consoles, fake_connector) -> None:
        _main(["complete", "call", "org.example.ping.Ping", "{}", ""], consoles, fake_connector())
        assert consoles.stdout == ""

    def test_unreachable_service_prints_nothing(self, consoles, fake_connector) -> None:
        code = _main(["complete", "call", f"{ADDRESS}/org.ex"], consoles, fake_connector())
        assert code == exit_codes.SUCCESS
        assert consoles.stdout == ""

    def test_unknown_command_prints_nothing(self, consoles, fake_connector) -> None:
        assert _main(["complete", "bogus", "x"], consoles, fake_connector()) == exit_codes.SUCCESS
        assert consoles.stdout == ""
