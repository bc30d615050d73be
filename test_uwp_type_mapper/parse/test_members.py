# pyright: reportPrivateUsage=false

"""Test suite for `uwp_type_mapper.parse.members` module."""

from __future__ import annotations

from typing import cast

import pytest

from test_uwp_type_mapper.unit_utils import fragment
from uwp_type_mapper.documents.notations import ParameterEntry
from uwp_type_mapper.errors import NotRepresentableError, TemplateFormatError
from uwp_type_mapper.parse.html import Table
from uwp_type_mapper.parse.members import (
    EnumerationMember,
    MemberReference,
    parse_enumeration_members,
    parse_member_references,
    parse_parameter_list,
    parse_structure_fields,
)


class Describe_parse_parameter_list:
    """Unit-test suite for `uwp_type_mapper.parse.members.parse_parameter_list()`."""

    def it_parses_each_term_and_definition_pair_into_a_parameter_in_order(self):
        dl = fragment(
            "<dl>"
            "<dt><i>destinationFolder</i></dt>"
            "<dd><p>Type: "
            '<a href="ms-xhelp:///?Id=T%3aWindows.Storage.IStorageFolder">IStorageFolder</a></p>'
            "<p>The destination\n folder.</p></dd>"
            "<dt><i>desiredNewName</i></dt>"
            "<dd><p>Type: String</p></dd>"
            "</dl>"
        )

        parameters = parse_parameter_list(dl, "JavaScript")

        assert parameters == [
            ParameterEntry(
                "destinationFolder", "Windows.Storage.IStorageFolder", "The destination folder."
            ),
            ParameterEntry("desiredNewName", "string"),
        ]

    def it_selects_the_type_for_the_target_language(self):
        dl = fragment(
            "<dl><dt>value</dt>"
            "<dd><p>Type: <strong>Number</strong> [JavaScript] | "
            "<strong>int</strong> [C++]</p></dd>"
            "</dl>"
        )

        assert parse_parameter_list(dl, "JavaScript") == [ParameterEntry("value", "number")]
        assert parse_parameter_list(dl, "C++") == [ParameterEntry("value", "int")]

    def it_provides_no_parameters_for_an_empty_list(self):
        assert parse_parameter_list(fragment("<dl></dl>"), "JavaScript") == []

    def it_raises_not_representable_when_any_parameter_lacks_a_target_language_type(self):
        dl = fragment(
            "<dl>"
            "<dt>first</dt><dd><p>Type: String</p></dd>"
            "<dt>buffer</dt><dd><p>Type: <strong>IBuffer</strong> [C++]</p></dd>"
            "</dl>"
        )

        with pytest.raises(NotRepresentableError) as exc_info:
            parse_parameter_list(dl, "JavaScript")

        assert exc_info.value.reason == "no JavaScript type for parameter 'buffer'"

    def it_raises_on_an_element_that_is_neither_term_nor_definition(self):
        dl = fragment("<dl><dt>a</dt><dd><p>Type: String</p></dd><span>b</span></dl>")

        with pytest.raises(TemplateFormatError, match="Unexpected <span> element"):
            parse_parameter_list(dl, "JavaScript")

    def it_raises_on_a_definition_without_a_term(self):
        dl = fragment("<dl><dd><p>Type: String</p></dd></dl>")

        with pytest.raises(TemplateFormatError, match="without a parameter name"):
            parse_parameter_list(dl, "JavaScript")

    def it_raises_on_a_definition_without_type_notation(self):
        dl = fragment("<dl><dt>a</dt><dd>Just text.</dd></dl>")

        with pytest.raises(TemplateFormatError, match="has no type notation"):
            parse_parameter_list(dl, "JavaScript")


class Describe_parse_enumeration_members:
    """Unit-test suite for `uwp_type_mapper.parse.members.parse_enumeration_members()`."""

    def it_parses_each_named_member_row(self):
        table = fragment(
            "<table>"
            "<tr><th>Member</th><th>Value</th><th>Description</th></tr>"
            '<tr><td><a id="generateUniqueName"></a><strong>generateUniqueName</strong></td>'
            "<td>0</td><td>Append a number.</td></tr>"
            '<tr><td><a id="replaceExisting"></a><strong>replaceExisting</strong></td>'
            "<td>1</td><td>Replace the\n existing item.</td></tr>"
            "<tr><td>orphan text</td><td>2</td><td>Not a member.</td></tr>"
            "</table>"
        )

        members = parse_enumeration_members(cast(Table, table))

        assert members == [
            EnumerationMember("generateUniqueName", "Append a number."),
            EnumerationMember("replaceExisting", "Replace the existing item."),
        ]


class Describe_parse_structure_fields:
    """Unit-test suite for `uwp_type_mapper.parse.members.parse_structure_fields()`."""

    def it_parses_a_field_per_row_across_its_tables(self):
        tables = [
            cast(Table, fragment(html))
            for html in (
                "<table><tr><th>Field</th><th>Data type</th><th>Description</th></tr>"
                "<tr><td><b>X</b></td><td><b>Number</b> [JavaScript] | <b>float</b> [C++]</td>"
                "<td>The horizontal position.</td></tr></table>",
                "<table><tr><td>Y</td><td>Number</td></tr></table>",
            )
        ]

        fields = parse_structure_fields(tables, "JavaScript")

        assert fields == [
            ParameterEntry("X", "number", "The horizontal position."),
            ParameterEntry("Y", "number"),
        ]

    def it_provides_no_fields_when_there_is_no_table(self):
        assert parse_structure_fields([], "JavaScript") == []

    def it_raises_not_representable_when_a_field_lacks_a_target_language_type(self):
        table = fragment("<table><tr><td>Handle</td><td><b>HANDLE</b> [C++]</td></tr></table>")

        with pytest.raises(NotRepresentableError, match="no JavaScript type for field 'Handle'"):
            parse_structure_fields([cast(Table, table)], "JavaScript")

    def it_raises_on_a_row_with_fewer_than_two_cells(self):
        table = fragment("<table><tr><td>Width</td></tr></table>")

        with pytest.raises(TemplateFormatError, match="Expected at least 2 cells"):
            parse_structure_fields([cast(Table, table)], "JavaScript")


class Describe_parse_member_references:
    """Unit-test suite for `uwp_type_mapper.parse.members.parse_member_references()`."""

    def it_parses_the_linked_symbol_of_each_row(self):
        table = fragment(
            "<table>"
            "<tr><th>Delegate</th><th>Description</th></tr>"
            "<tr><td>"
            '<a href="ms-xhelp:///?Id=T%3aWindows.Foundation.TypedEventHandler%602">'
            "TypedEventHandler&lt;TSender, TResult&gt; delegate</a>"
            "</td><td>Handles events.</td></tr>"
            "<tr><td>"
            '<a href="ms-xhelp:///?Id=T%3aWindows.Foundation.Point">Point</a> structure</td>'
            "<td>A point.</td></tr>"
            "<tr><td>Not linked</td><td>Left out.</td></tr>"
            '<tr><td><a id="bookmark"></a></td><td>Left out.</td></tr>'
            "</table>"
        )

        references = parse_member_references(cast(Table, table))

        assert references == [
            MemberReference(
                "Windows.Foundation.TypedEventHandler",
                "TypedEventHandler<TSender, TResult> delegate",
            ),
            MemberReference("Windows.Foundation.Point", "Point structure"),
        ]
