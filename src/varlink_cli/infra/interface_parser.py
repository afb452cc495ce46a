"""Interface-description parsing backed by python-varlink.

``varlink.Interface`` parses the description text into an ordered
mapping of members (``_Method``, ``_Alias`` and ``_Error`` objects
from :mod:`varlink.scanner`).  This module walks that mapping and
converts it into the :class:`~varlink_cli.core.models.InterfaceModel`
the renderer works with.

python-varlink collects every comment it skips while reading a member
into that member's ``doc``; comments written inside a struct body
therefore appear in the documentation of the enclosing declaration.
"""

from __future__ import annotations

from typing import Any

from varlink_cli.core.models import Field, InterfaceMember, InterfaceModel
from varlink_cli.exceptions import EnvironmentError


def _import_varlink() -> Any:
    """Return the ``varlink`` module or raise ``EnvironmentError``."""
    try:
        import varlink
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "varlink is not installed. Install with: pip install varlink",
        ) from exc
    return varlink


class VarlinkDescriptionParser:
    """Concrete :class:`~varlink_cli.core.protocols.DescriptionParser`."""

    def parse(self, description: str) -> InterfaceModel:
        """Parse *description* and return its structured form.

        Raises
        ------
        EnvironmentError
            When python-varlink is not installed.
        Exception
            Whatever python-varlink raises for an invalid description
            (usually ``SyntaxError``); the describe service maps it.
        """
        varlink = _import_varlink()
        return build_model(varlink.Interface(description))


# ---------------------------------------------------------------------------
# Conversion of the python-varlink model (pure)
# ---------------------------------------------------------------------------

def build_model(interface: Any) -> InterfaceModel:
    """Convert a parsed ``varlink.Interface`` into an :class:`InterfaceModel`."""
    from varlink import scanner

    members = []
    for member in interface.members.values():
        doc = doc_lines(member.doc)
        if isinstance(member, scanner._Method):
            members.append(
                InterfaceMember(
                    kind="method",
                    name=member.name,
                    doc=doc,
                    fields=_fields(member.in_type),
                    output_fields=_fields(member.out_type),
                )
            )
        elif isinstance(member, scanner._Error):
            members.append(
                InterfaceMember(kind="error", name=member.name, doc=doc, fields=_fields(member.type))
            )
        elif isinstance(member.type, scanner._Enum):
            members.append(
                InterfaceMember(
                    kind="type",
                    name=member.name,
                    doc=doc,
                    enum_values=tuple(member.type.fields),
                )
            )
        else:
            members.append(
                InterfaceMember(kind="type", name=member.name, doc=doc, fields=_fields(member.type))
            )

    return InterfaceModel(
        name=interface.name,
        doc=doc_lines(interface.doc),
        members=tuple(members),
    )


def doc_lines(doc: str | None) -> tuple[str, ...]:
    """Split a python-varlink doc string into lines without the ``# `` prefix."""
    if not doc:
        return ()
    return tuple(
        (line[1:] if line.startswith(" ") else line).rstrip()
        for line in doc.split("\n")
    )


def _fields(struct: Any) -> tuple[Field, ...]:
    from varlink import scanner

    if not isinstance(struct, scanner._Struct):
        return ()
    return tuple(
        Field(name=name, type=format_type(field_type))
        for name, field_type in struct.fields.items()
    )


def format_type(varlink_type: Any) -> str:
    """Return the source form of a python-varlink type, e.g. ``?[]string``."""
    from varlink import scanner

    # bool before int: bool is an int subclass.
    if isinstance(varlink_type, bool):
        return "bool"
    if isinstance(varlink_type, int):
        return "int"
    if isinstance(varlink_type, float):
        return "float"
    if isinstance(varlink_type, str):
        return "string"
    if isinstance(varlink_type, set):
        return "[string]()"
    if isinstance(varlink_type, scanner._Object):
        return "object"
    if isinstance(varlink_type, scanner._CustomType):
        return varlink_type.name
    if isinstance(varlink_type, scanner._Maybe):
        return "?" + format_type(varlink_type.element_type)
    if isinstance(varlink_type, scanner._Array):
        return "[]" + format_type(varlink_type.element_type)
    if isinstance(varlink_type, scanner._Dict):
        return "[string]" + format_type(varlink_type.element_type)
    if isinstance(varlink_type, scanner._Enum):
        return "(" + ", ".join(varlink_type.fields) + ")"
    if isinstance(varlink_type, scanner._Struct):
        return "(" + ", ".join(f"{f.name}: {f.type}" for f in _fields(varlink_type)) + ")"
    raise TypeError(f"Unknown varlink type: {varlink_type!r}")
