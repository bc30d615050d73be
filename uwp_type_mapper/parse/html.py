# pyright: reportPrivateUsage=false

"""Provides the DOM used by the reference-document parser.

The parser is composed of `lxml` Custom Element Classes. Each class below is registered for one or
more tag names, so e.g. every `<a>` element in a parsed document is an `Anchor` and knows how to
recover the symbol identifier from its link target. Any tag without a registered class gets
`HtmlElement`.

`lxml` has no text nodes. Text inside an element before its first child is `element.text` and
text following a child (before the next sibling starts) is `child.tail`. The type-notation walker
needs text and elements interleaved in document order, which `HtmlElement.iter_nodes()` provides:

    <p>Type: <a href="...">StorageFile</a> [JavaScript]</p>

produces `"Type: "`, the `Anchor`, then `" [JavaScript]"`.
"""

from __future__ import annotations

import re
from typing import Iterator, Optional, Union, cast
from urllib.parse import parse_qs, urlsplit

from lxml import etree
from typing_extensions import TypeAlias

from uwp_type_mapper.errors import TemplateFormatError
from uwp_type_mapper.parse.text import normalize_text

_KIND_PREFIX_PATTERN = re.compile(r"^[A-Z]:")


class HtmlElement(etree.ElementBase):
    """Base and default class for every element of a reference document."""

    @property
    def normalized_text(self) -> str:
        """Whitespace-normalized text of this element and all its descendants (not its tail)."""
        return normalize_text("".join(self.itertext()))

    @property
    def element_children(self) -> list[HtmlElement]:
        return cast(list[HtmlElement], list(self))

    def iter_nodes(self) -> Iterator[Node]:
        """Generate text and child elements of this element, interleaved in document order.

        Whitespace-only text is generated too; it is the consumer's call whether it matters.
        """
        if self.text:
            yield self.text
        for child in self:
            yield cast(HtmlElement, child)
            if child.tail:
                yield child.tail

    def iter_following_siblings(self) -> Iterator[HtmlElement]:
        """Generate each element after this one that shares its parent, in document order."""
        sibling = self.getnext()
        while sibling is not None:
            yield cast(HtmlElement, sibling)
            sibling = sibling.getnext()


Node: TypeAlias = Union[str, HtmlElement]
"""A text run or an element, the two kinds of child a type-notation walker encounters."""


class Anchor(HtmlElement):
    """Custom element-class for `<a>` element.

    Cross-references between reference pages are help links like
    `ms-xhelp:///?Id=T%3aWindows.Storage.StorageFile`.
    """

    @property
    def reference_identifier(self) -> Optional[str]:
        """Identifier of the symbol this link points to, like "Windows.Storage.StorageFile".

        The `Id` query value is URL-decoded and its kind prefix ("T:", "M:", ...) removed. A link
        that doesn't carry a help id falls back to the link text. None when neither is available.
        """
        help_ids = parse_qs(urlsplit(self.get("href", "")).query).get("Id")
        if help_ids:
            return _KIND_PREFIX_PATTERN.sub("", help_ids[0].strip())
        return self.normalized_text or None


class CodeSnippet(HtmlElement):
    """A `<codesnippet>` element holding the syntax sample for one language."""

    @property
    def language(self) -> str:
        return self.get("language", "")

    @property
    def code(self) -> str:
        return "".join(self.itertext())


class Heading(HtmlElement):
    """An `<h1>..<h6>` element."""

    @property
    def level(self) -> int:
        return int(self.tag[1])


class Meta(HtmlElement):
    """A `<meta>` element in the document head."""

    @property
    def name(self) -> str:
        return self.get("name", "")

    @property
    def content(self) -> str:
        return self.get("content", "")


class Table(HtmlElement):
    """Custom element-class for `<table>` element."""

    @property
    def rows(self) -> list[TableRow]:
        return cast(list[TableRow], self.xpath("./tr | ./thead/tr | ./tbody/tr | ./tfoot/tr"))

    @property
    def data_rows(self) -> list[TableRow]:
        """Rows that hold at least one `<td>`, dropping column-heading rows."""
        return [row for row in self.rows if not row.is_header]


class TableRow(HtmlElement):
    """A `<tr>` element."""

    @property
    def cells(self) -> list[HtmlElement]:
        # -- a cell can be either a "data" cell (td) or a "heading" cell (th) --
        return cast(list[HtmlElement], self.xpath("./td | ./th"))

    @property
    def is_header(self) -> bool:
        cells = self.cells
        return bool(cells) and all(cell.tag == "th" for cell in cells)


# ------------------------------------------------------------------------------------------------
# HTML PARSER
# ------------------------------------------------------------------------------------------------


html_parser = etree.HTMLParser(remove_comments=True, remove_pis=True, encoding="utf-8")
# -- elements that don't have a registered class get HtmlElement --
fallback = etree.ElementDefaultClassLookup(element=HtmlElement)
# -- elements that do have a registered class are assigned that class via lookup --
element_class_lookup = etree.ElementNamespaceClassLookup(fallback)
html_parser.set_element_class_lookup(element_class_lookup)

element_class_lookup.get_namespace(None).update(
    {
        "a": Anchor,
        "codesnippet": CodeSnippet,
        "h1": Heading,
        "h2": Heading,
        "h3": Heading,
        "h4": Heading,
        "h5": Heading,
        "h6": Heading,
        "meta": Meta,
        "table": Table,
        "tr": TableRow,
    }
)


def parse_html(content: Union[bytes, str]) -> HtmlElement:
    """The root `<html>` element of the document in `content`.

    Raises `TemplateFormatError` when `content` doesn't parse to a document at all.
    """
    if isinstance(content, str):
        content = content.encode("utf-8")

    try:
        root = etree.fromstring(content, html_parser)
    except etree.LxmlError as e:
        raise TemplateFormatError(f"Unparseable HTML document: {e}") from e

    if root is None:
        raise TemplateFormatError("Unparseable HTML document: no root element")

    # -- scripts and styles would otherwise leak into description text --
    etree.strip_elements(root, ["noscript", "script", "style"], with_tail=False)

    return cast(HtmlElement, root)
