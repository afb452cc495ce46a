"""CLI console helpers.

Two kinds of console exist: the stderr console used for diagnostics
and the error boundary, and the stdout console that replies and
interface descriptions are rendered to.  The boundary proxy loads Rich
lazily so that it can still report errors when Rich is unusable.
"""

from __future__ import annotations

import sys
from typing import IO, Any

from varlink_cli.exceptions import EnvironmentError

OUTPUT_THEME_STYLES: dict[str, str] = {
	"json.key": "cyan",
	"json.str": "magenta",
	"json.number": "magenta",
	"json.bool_true": "magenta",
	"json.bool_false": "magenta",
	"json.null": "magenta",
	"json.brace": "default",
}
"""Reply colors: object keys cyan, values magenta."""


def _load_rich_console_class() -> type[Any]:
	"""Return ``rich.console.Console`` class or raise ``EnvironmentError``."""
	try:
		from rich.console import Console
	except ModuleNotFoundError as exc:
		raise EnvironmentError(
			"rich is not installed. Install with: pip install rich",
		) from exc
	return Console


def get_rich_console() -> Any:
	"""Create a Rich console instance targeting stderr."""
	console_class = _load_rich_console_class()
	return console_class(stderr=True)


def make_output_console(*, color: bool = True, file: IO[str] | None = None) -> Any:
	"""Create the stdout console replies and descriptions are printed to.

	Color is only emitted when *color* is set and the terminal supports
	it; Rich performs the terminal detection.
	"""
	from rich.theme import Theme

	console_class = _load_rich_console_class()
	return console_class(
		file=file,
		theme=Theme(OUTPUT_THEME_STYLES),
		no_color=not color,
		highlight=False,
		soft_wrap=True,
	)


def make_error_console(*, color: bool = True, file: IO[str] | None = None) -> Any:
	"""Create the stderr console for messages accompanying the output."""
	console_class = _load_rich_console_class()
	if file is None:
		return console_class(stderr=True, no_color=not color, highlight=False)
	return console_class(file=file, no_color=not color, highlight=False)


class _ConsoleProxy:
	"""Minimal ``print``-compatible proxy with Rich fallback."""

	def print(self, *objects: object) -> None:
		"""Render with Rich when available, else plain stderr print."""
		try:
			rich_console = get_rich_console()
		except EnvironmentError:
			print(*objects, file=sys.stderr)
			return
		rich_console.print(*objects)


console = _ConsoleProxy()
