"""Infrastructure layer: external system integration.

This layer wraps all interaction with python-varlink.  Every raw
third-party exception must be caught here and re-raised as a
:class:`~varlink_cli.exceptions.VarlinkCliError` subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
* Must expose clean, typed interfaces consumed by the core layer.
"""

from varlink_cli.infra.interface_parser import VarlinkDescriptionParser
from varlink_cli.infra.transport import VarlinkConnection, VarlinkConnector

__all__: list[str] = [
    "VarlinkConnection",
    "VarlinkConnector",
    "VarlinkDescriptionParser",
]
