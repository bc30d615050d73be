"""Parses parameter lists and member tables into ordered entries."""

from __future__ import annotations

from typing import NamedTuple, Optional, Sequence

from uwp_type_mapper.documents.notations import ParameterEntry
from uwp_type_mapper.errors import NotRepresentableError, TemplateFormatError
from uwp_type_mapper.parse.html import Anchor, HtmlElement, Table, TableRow
from uwp_type_mapper.parse.notation import (
    parse_type_notation,
    select_language,
    strip_generic_arity,
)


def parse_parameter_list(list_element: HtmlElement, language: str) -> list[ParameterEntry]:
    """Parameters described by a `<dl>` of alternating `<dt>` names and `<dd>` definitions.

    The first child of each `<dd>` is a type-notation paragraph and the optional second child is
    the parameter description.

    Raises `NotRepresentableError` when any one parameter has no `language` type; a callable is
    never emitted with only some of its parameters. Raises `TemplateFormatError` on a child that
    is neither `<dt>` nor `<dd>`, or a `<dd>` with no preceding `<dt>`.
    """
    parameters: list[ParameterEntry] = []
    parameter_name: Optional[str] = None

    for child in list_element.element_children:
        if child.tag == "dt":
            parameter_name = child.normalized_text
        elif child.tag == "dd":
            if parameter_name is None:
                raise TemplateFormatError("Parameter definition without a parameter name")
            parameters.append(_parse_parameter_definition(parameter_name, child, language))
            parameter_name = None
        else:
            raise TemplateFormatError(f"Unexpected <{child.tag}> element in parameter list")

    return parameters


def _parse_parameter_definition(
    name: str, definition: HtmlElement, language: str
) -> ParameterEntry:
    blocks = definition.element_children
    if not blocks:
        raise TemplateFormatError(f"Parameter {name!r} has no type notation")

    parameter_type = select_language(parse_type_notation(blocks[0]), language)
    if not parameter_type:
        raise NotRepresentableError(language, f"parameter {name!r}")

    description = blocks[1].normalized_text if len(blocks) > 1 else None
    return ParameterEntry(key=name, type=parameter_type, description=description)


# ------------------------------------------------------------------------------------------------
# MEMBER TABLES
# ------------------------------------------------------------------------------------------------


class EnumerationMember(NamedTuple):
    name: str
    description: str


def parse_enumeration_members(table: Table) -> list[EnumerationMember]:
    """Named members of an enumeration "Members" table, in document order.

    The name cell holds bookmark anchors (no text) followed by the member name, e.g.
    `<td><a id="default"></a><strong>default</strong></td>`. A row without a named member is
    left out. The description is in the last cell.
    """
    members: list[EnumerationMember] = []
    for row in table.data_rows:
        cells = row.cells
        if not cells:
            continue
        name = next(
            (text for e in cells[0].element_children if (text := e.normalized_text)), None
        )
        if name is None:
            continue
        description = cells[-1].normalized_text if len(cells) > 1 else ""
        members.append(EnumerationMember(name, description))
    return members


def parse_structure_fields(tables: Sequence[Table], language: str) -> list[ParameterEntry]:
    """Fields of a structure, one per row of its member table(s), in document order.

    Each row is "field name | type | description", the description being optional. The type cell
    holds bare type notation (no "Type:" prefix).

    Raises `NotRepresentableError` when a field has no `language` type.
    """
    fields: list[ParameterEntry] = []
    for table in tables:
        for row in table.data_rows:
            cells = row.cells
            if len(cells) < 2:
                raise TemplateFormatError(
                    f"Expected at least 2 cells in structure member row, got {len(cells)}"
                )
            name = cells[0].normalized_text
            field_type = select_language(
                parse_type_notation(cells[1], omit_type_indication=True), language
            )
            if not field_type:
                raise NotRepresentableError(language, f"field {name!r}")
            description = cells[2].normalized_text if len(cells) > 2 else None
            fields.append(ParameterEntry(key=name, type=field_type, description=description))
    return fields


class MemberReference(NamedTuple):
    """A row of a member-listing table: the linked symbol and the row's title text."""

    identifier: str
    title: str


def parse_member_references(table: Table) -> list[MemberReference]:
    """Linked symbols listed in a member table, one per row whose first cell holds a link."""
    references: list[MemberReference] = []
    for row in table.data_rows:
        reference = _member_reference(row)
        if reference is not None:
            references.append(reference)
    return references


def _member_reference(row: TableRow) -> Optional[MemberReference]:
    cells = row.cells
    if not cells:
        return None
    anchors = [e for e in cells[0].iter() if isinstance(e, Anchor) and e.get("href")]
    if not anchors:
        return None
    identifier = anchors[0].reference_identifier
    if not identifier:
        return None
    return MemberReference(strip_generic_arity(identifier), cells[0].normalized_text)
