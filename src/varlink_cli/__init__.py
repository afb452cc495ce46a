"""varlink-cli: command-line client for varlink services.

Calls methods (optionally streaming replies), prints interface
descriptions, and queries service information over the varlink
IPC protocol.
"""

from varlink_cli.version import __version__

__all__: list[str] = ["__version__"]
