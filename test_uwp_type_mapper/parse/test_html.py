# pyright: reportPrivateUsage=false

"""Test suite for `uwp_type_mapper.parse.html` module."""

from __future__ import annotations

from typing import Optional, cast

import pytest

from test_uwp_type_mapper.unit_utils import fragment
from uwp_type_mapper.errors import TemplateFormatError
from uwp_type_mapper.parse.html import (
    Anchor,
    CodeSnippet,
    Heading,
    HtmlElement,
    Meta,
    Table,
    TableRow,
    parse_html,
)


class DescribeHtmlElement:
    """Isolated unit-test suite for `uwp_type_mapper.parse.html.HtmlElement`."""

    def it_provides_its_whitespace_normalized_text(self):
        p = fragment("<p>  Gets the\n  <b>fully   qualified</b>\tdomain name.  </p>")
        assert p.normalized_text == "Gets the fully qualified domain name."

    def it_interleaves_its_text_and_child_elements_in_document_order(self):
        p = fragment('<p>Type: <a href="x">StorageFile</a> [JavaScript]<b>x</b></p>')

        nodes = list(p.iter_nodes())

        assert len(nodes) == 4
        assert nodes[0] == "Type: "
        assert isinstance(nodes[1], Anchor)
        assert nodes[2] == " [JavaScript]"
        assert isinstance(nodes[3], HtmlElement)
        assert nodes[3].tag == "b"

    def but_it_generates_no_text_node_where_there_is_no_text(self):
        p = fragment("<p><b>x</b><i>y</i></p>")
        assert [cast(HtmlElement, n).tag for n in p.iter_nodes()] == ["b", "i"]

    def it_provides_its_element_children(self):
        div = fragment("<div>text<p>a</p>tail<p>b</p></div>")
        assert [e.tag for e in div.element_children] == ["p", "p"]

    def it_generates_its_following_siblings(self):
        div = fragment("<div><h2>Syntax</h2><p>a</p>text<table></table></div>")
        h2 = div.element_children[0]

        assert [e.tag for e in h2.iter_following_siblings()] == ["p", "table"]


class DescribeAnchor:
    """Isolated unit-test suite for `uwp_type_mapper.parse.html.Anchor`."""

    @pytest.mark.parametrize(
        ("html", "expected_value"),
        [
            (
                '<a href="ms-xhelp:///?Id=T%3aWindows.Storage.StorageFile">StorageFile</a>',
                "Windows.Storage.StorageFile",
            ),
            # -- generic-arity marker is kept here, it is stripped where the identifier is used --
            (
                '<a href="ms-xhelp:///?Id=T%3aWindows.Foundation.IAsyncOperation%601">x</a>',
                "Windows.Foundation.IAsyncOperation`1",
            ),
            (
                '<a href="ms-xhelp:///?Id=M:Windows.Foundation.Uri.Equals">Equals</a>',
                "Windows.Foundation.Uri.Equals",
            ),
            # -- a link without a help id falls back to its text --
            ('<a href="http://msdn.microsoft.com/">  Platform::String </a>', "Platform::String"),
            ('<a id="default"></a>', None),
        ],
    )
    def it_recovers_the_identifier_of_the_symbol_it_links_to(
        self, html: str, expected_value: Optional[str]
    ):
        anchor = fragment(f"<p>{html}</p>").element_children[0]

        assert isinstance(anchor, Anchor)
        assert anchor.reference_identifier == expected_value


class DescribeTable:
    """Isolated unit-test suite for `uwp_type_mapper.parse.html.Table`."""

    def it_provides_its_rows_including_those_in_row_groups(self):
        table = fragment(
            "<table>"
            "<thead><tr><th>Member</th><th>Value</th></tr></thead>"
            "<tbody><tr><td>a</td><td>0</td></tr><tr><td>b</td><td>1</td></tr></tbody>"
            "</table>"
        )

        assert isinstance(table, Table)
        assert [r.cells[0].normalized_text for r in table.rows] == ["Member", "a", "b"]
        assert [r.cells[0].normalized_text for r in table.data_rows] == ["a", "b"]

    def it_does_not_include_the_rows_of_a_nested_table(self):
        table = fragment(
            "<table><tr><td>outer<table><tr><td>inner</td></tr></table></td></tr></table>"
        )
        assert len(cast(Table, table).rows) == 1

    def it_knows_a_row_of_only_heading_cells_is_a_header_row(self):
        table = cast(
            Table, fragment("<table><tr><th>a</th><td>b</td></tr><tr><th>c</th></tr></table>")
        )
        rows = table.rows

        assert all(isinstance(r, TableRow) for r in rows)
        assert [r.is_header for r in rows] == [False, True]


class Describe_parse_html:
    """Unit-test suite for `uwp_type_mapper.parse.html.parse_html()`."""

    def it_assigns_the_custom_element_class_for_each_registered_tag(self):
        root = parse_html(
            "<html><head><meta name='Microsoft.Help.Id' content='T:Windows.Foo'/></head>"
            "<body><h2>Syntax</h2><codesnippet language='JavaScript'>var x;</codesnippet>"
            "<table><tr><td>a</td></tr></table><div>x</div></body></html>"
        )

        meta = root.find(".//meta")
        assert isinstance(meta, Meta)
        assert (meta.name, meta.content) == ("Microsoft.Help.Id", "T:Windows.Foo")
        heading = root.find(".//h2")
        assert isinstance(heading, Heading)
        assert heading.level == 2
        snippet = root.find(".//codesnippet")
        assert isinstance(snippet, CodeSnippet)
        assert (snippet.language, snippet.code) == ("JavaScript", "var x;")
        assert isinstance(root.find(".//table"), Table)
        assert isinstance(root.find(".//tr"), TableRow)
        assert type(root.find(".//div")) is HtmlElement

    def it_accepts_bytes(self):
        root = parse_html(b"<html><body><p>caf\xc3\xa9</p></body></html>")
        assert cast(HtmlElement, root.find(".//p")).normalized_text == "café"

    def it_removes_scripts_styles_and_comments(self):
        root = parse_html(
            "<html><body><div>a<script>var x;</script><style>p {}</style><!-- c -->b</div>"
            "</body></html>"
        )
        assert cast(HtmlElement, root.find(".//div")).normalized_text == "ab"

    @pytest.mark.parametrize("content", [b"", "   "])
    def it_raises_on_content_that_is_not_a_document(self, content: bytes):
        with pytest.raises(TemplateFormatError, match="Unparseable HTML document"):
            parse_html(content)
