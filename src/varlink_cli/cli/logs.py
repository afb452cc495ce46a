"""Logging setup for the command-line entry point."""

from __future__ import annotations

import logging

_FORMAT: str = "%(name)s: %(message)s"


def configure_logging(*, debug: bool = False) -> None:
    """Route ``varlink_cli`` log records to a Rich handler on stderr.

    Without *debug* only warnings are shown.  Calling this more than
    once replaces the previously installed handler.
    """
    from rich.console import Console
    from rich.logging import RichHandler

    package_logger = logging.getLogger("varlink_cli")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)

    handler = RichHandler(
        console=Console(stderr=True),
        show_time=debug,
        show_path=False,
        rich_tracebacks=debug,
    )
    handler.setFormatter(logging.Formatter(_FORMAT))
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG if debug else logging.WARNING)
    package_logger.propagate = False
