"""Rich rendering of replies, interface descriptions and service info.

Replies are printed as indented JSON (keys cyan, values magenta) on
the output console.  Interface descriptions are re-typeset from the
parsed model: comments blue, keywords magenta, member names green and
types cyan, wrapped at :data:`INTERFACE_WIDTH` columns.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any

from rich.json import JSON
from rich.text import Text

from varlink_cli.core.models import Field, InterfaceMember, InterfaceModel, ReplyEvent, ServiceInfo
from varlink_cli.exceptions import InvalidJsonError

INTERFACE_WIDTH: int = 72 - 2
"""Target line width of rendered interface descriptions."""

INDENT: str = "  "

COMMENT_STYLE: str = "blue"
KEYWORD_STYLE: str = "magenta"
MEMBER_STYLE: str = "green"
TYPE_STYLE: str = "cyan"


# ---------------------------------------------------------------------------
# Replies
# ---------------------------------------------------------------------------

class ReplyRenderer:
    """Callable handed to the call orchestrator; renders each reply.

    Parameters
    ----------
    out:
        Console the JSON value is printed to.
    err:
        Console the remote error line is printed to.
    """

    def __init__(self, out: Any, err: Any) -> None:
        self._out = out
        self._err = err

    def __call__(self, reply: ReplyEvent) -> None:
        """Print *reply*.

        Raises
        ------
        InvalidJsonError
            If the reply parameters cannot be serialized.
        """
        if reply.error is not None:
            self._err.print(f"Call failed with error: {reply.error}", markup=False)

        self._out.print(render_json(reply.parameters))


def render_json(value: dict[str, Any]) -> JSON:
    """Return a Rich renderable for *value*, pretty-printed."""
    try:
        text = json.dumps(value, indent=2, ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError) as exc:
        raise InvalidJsonError(f"Unable to read message: {exc}") from exc
    return JSON(text, indent=2)


# ---------------------------------------------------------------------------
# Interface descriptions
# ---------------------------------------------------------------------------

def render_interface(model: InterfaceModel, *, width: int = INTERFACE_WIDTH) -> Text:
    """Typeset *model* as varlink interface source."""
    text = Text()
    _append_doc(text, model.doc)
    text.append("interface", style=KEYWORD_STYLE)
    text.append(" ")
    text.append(model.name, style=MEMBER_STYLE)
    text.append("\n")

    for member in model.members:
        text.append("\n")
        _append_doc(text, member.doc)
        _append_member(text, member, width)
        text.append("\n")

    text.rstrip()
    return text


def _append_doc(text: Text, doc: Sequence[str]) -> None:
    for line in doc:
        text.append(f"# {line}".rstrip(), style=COMMENT_STYLE)
        text.append("\n")


def _append_member(text: Text, member: InterfaceMember, width: int) -> None:
    multiline = len(member_signature(member)) > width

    text.append(member.kind, style=KEYWORD_STYLE)
    text.append(" ")
    text.append(member.name, style=MEMBER_STYLE)

    if member.kind == "method":
        _append_group(text, member.fields, multiline)
        text.append(" -> ")
        _append_group(text, member.output_fields, multiline)
        return

    text.append(" ")
    if member.is_enum:
        _append_enum(text, member.enum_values, multiline)
    else:
        _append_group(text, member.fields, multiline)


def _append_group(text: Text, fields: Sequence[Field], multiline: bool) -> None:
    if not fields:
        text.append("()")
        return

    text.append("(")
    for index, field in enumerate(fields):
        if multiline:
            text.append("\n" + INDENT)
        elif index:
            text.append(" ")
        text.append(f"{field.name}: ")
        text.append(field.type, style=TYPE_STYLE)
        if index < len(fields) - 1:
            text.append(",")
    text.append("\n)" if multiline else ")")


def _append_enum(text: Text, values: Sequence[str], multiline: bool) -> None:
    if multiline:
        text.append("(\n" + INDENT + (",\n" + INDENT).join(values) + "\n)")
    else:
        text.append("(" + ", ".join(values) + ")")


def member_signature(member: InterfaceMember) -> str:
    """Return the single-line, uncolored source form of *member*."""
    def group(fields: Sequence[Field]) -> str:
        return "(" + ", ".join(f"{f.name}: {f.type}" for f in fields) + ")"

    if member.kind == "method":
        return f"method {member.name}{group(member.fields)} -> {group(member.output_fields)}"
    if member.is_enum:
        return f"{member.kind} {member.name} (" + ", ".join(member.enum_values) + ")"
    return f"{member.kind} {member.name} {group(member.fields)}"


# ---------------------------------------------------------------------------
# Service info
# ---------------------------------------------------------------------------

def render_service_info(info: ServiceInfo) -> Text:
    """Render ``GetInfo`` results as a labelled block."""
    text = Text()
    for label, value in (
        ("Vendor", info.vendor),
        ("Product", info.product),
        ("Version", info.version),
        ("URL", info.url),
    ):
        text.append(f"{label}: ", style="bold")
        text.append(f"{value}\n")

    text.append("Interfaces:", style="bold")
    for name in info.interfaces:
        text.append("\n" + INDENT)
        text.append(name, style=MEMBER_STYLE)
    return text
