# pyright: reportPrivateUsage=false

"""Classifies a reference page by symbol kind and extracts its notation records.

A page is admitted only when its head carries a help identifier like

    <meta name="Microsoft.Help.Id" content="P:Windows.Devices.SmartCards.SmartCardTrigger.Kind"/>

and a category tag marking it as targeting the configured language. The symbol kind is decided by
the suffix of the page title ("SmartCardTrigger.Kind property"), and each kind has its own
extraction routine producing zero-or-more `NotationRecord`s. Most kinds produce exactly one.
Enumerations also produce one per member.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Callable, Optional, Union, cast

from uwp_type_mapper.config import ExtractionConfig
from uwp_type_mapper.documents.notations import (
    INSTANCE,
    UNKNOWN,
    DelegateTypeNotation,
    EventTypeNotation,
    FunctionSignature,
    FunctionTypeNotation,
    NamedTypeNotation,
    NamespaceDocumentNotation,
    NamespaceMembers,
    NotationRecord,
    ParameterEntry,
    StructureTypeNotation,
    TypeNotation,
)
from uwp_type_mapper.errors import DocumentSkipped, NotRepresentableError, TemplateFormatError
from uwp_type_mapper.parse.html import CodeSnippet, HtmlElement, Meta, Table, parse_html
from uwp_type_mapper.parse.members import (
    parse_enumeration_members,
    parse_member_references,
    parse_parameter_list,
    parse_structure_fields,
)
from uwp_type_mapper.parse.notation import (
    TYPE_INDICATION,
    parse_type_notation,
    select_language,
    strip_generic_arity,
)
from uwp_type_mapper.parse.sections import Section, SectionIndex, locate_sections
from uwp_type_mapper.parse.text import leading_description, normalize_text
from uwp_type_mapper.utils import lazyproperty, only

HELP_ID_META_NAME = "Microsoft.Help.Id"
HELP_CATEGORY_META_NAME = "Microsoft.Help.Category"
CONTENT_REMOVED_TITLE = "Content Removed"
CONSTRUCTOR_MARKER = ".#ctor"

_OVERLOAD_PARAMETERS_PATTERN = re.compile(r"\([^(]*\)")
_TYPE_PARAMETERS_PATTERN = re.compile(r"<([^<>]+)>")
_EVENT_LISTENER_PATTERN = re.compile(r"\w+\.addEventListener\(\"(\w+)\", \w+\)")
_EVENT_HANDLER_ASSIGNMENT_PATTERN = re.compile(r"\w+\.on(\w+) =")


class DocumentKind(Enum):
    """Kind of symbol a reference page documents, named by its title suffix."""

    CLASS = "class"
    ATTRIBUTE = "attribute"
    ENUMERATION = "enumeration"
    NAMESPACE = "namespace"
    PROPERTY = "property"
    DELEGATE = "delegate"
    CONSTRUCTOR = "constructor"
    METHOD = "method"
    EVENT = "event"
    STRUCTURE = "structure"
    INTERFACE = "interface"
    # -- listing pages like "Foo constructors", "Foo methods" --
    META = "meta"
    UNRECOGNIZED = "unrecognized"


# -- checked in order; plural listing-page suffixes come ahead of the singular ones they end with --
_TITLE_SUFFIXES: tuple[tuple[str, DocumentKind], ...] = (
    (" constructors", DocumentKind.META),
    (" methods", DocumentKind.META),
    (" class", DocumentKind.CLASS),
    (" attribute", DocumentKind.ATTRIBUTE),
    (" enumeration", DocumentKind.ENUMERATION),
    (" namespace", DocumentKind.NAMESPACE),
    (" property", DocumentKind.PROPERTY),
    (" delegate", DocumentKind.DELEGATE),
    (" constructor", DocumentKind.CONSTRUCTOR),
    (" method", DocumentKind.METHOD),
    (" event", DocumentKind.EVENT),
    (" structure", DocumentKind.STRUCTURE),
    (" interface", DocumentKind.INTERFACE),
)


def classify_title(title: str) -> DocumentKind:
    """The kind of symbol documented by a page titled `title`."""
    title = title.strip()
    if title == CONTENT_REMOVED_TITLE:
        return DocumentKind.META
    for suffix, kind in _TITLE_SUFFIXES:
        if title.endswith(suffix):
            return kind
    return DocumentKind.UNRECOGNIZED


def title_type_parameters(title: str) -> Optional[list[str]]:
    """Generic type parameters named in a title like "TypedEventHandler<TSender, TResult> delegate".

    None when the title names none.
    """
    match = _TYPE_PARAMETERS_PATTERN.search(title)
    if match is None:
        return None
    return [name.strip() for name in match.group(1).split(",") if name.strip()]


# ------------------------------------------------------------------------------------------------
# HELP DOCUMENT
# ------------------------------------------------------------------------------------------------


class HelpDocument:
    """A parsed reference page and the metadata used to admit and classify it."""

    def __init__(self, root: HtmlElement, config: Optional[ExtractionConfig] = None):
        self._root = root
        self._config = config or ExtractionConfig()

    @classmethod
    def from_html(
        cls, content: Union[bytes, str], config: Optional[ExtractionConfig] = None
    ) -> HelpDocument:
        return cls(parse_html(content), config)

    @property
    def config(self) -> ExtractionConfig:
        return self._config

    @lazyproperty
    def help_id(self) -> str:
        """Raw help identifier, like "T:Windows.Foo.Bar", or "" when the page has none."""
        meta = next((m for m in self._metas if m.name == HELP_ID_META_NAME), None)
        return meta.content.strip() if meta is not None else ""

    @lazyproperty
    def is_target_language(self) -> bool:
        """True when a category meta tag marks this page as documenting the target language."""
        return any(
            m.name == HELP_CATEGORY_META_NAME and m.content == self._config.language_category
            for m in self._metas
        )

    @property
    def identifier(self) -> Optional[str]:
        """Mixed-case identifier rooted at the namespace root, like "Windows.Foo.Bar".

        The kind prefix and anything else ahead of the namespace-root marker is dropped, as are
        generic-arity markers. None when the help identifier has no namespace-root marker.
        """
        marker = f":{self._config.namespace_root.lower()}"
        start = self.help_id.lower().find(marker)
        if start == -1:
            return None
        return strip_generic_arity(self.help_id[start + 1 :])

    @property
    def key(self) -> Optional[str]:
        identifier = self.identifier
        return identifier.lower() if identifier is not None else None

    @lazyproperty
    def title(self) -> str:
        """Page title from `<div class="title">`, falling back to the `<title>` element."""
        for path in (".//div[@class='title']", ".//title"):
            titles = cast(list[HtmlElement], self._root.xpath(path))
            if titles:
                return titles[0].normalized_text
        return ""

    @lazyproperty
    def kind(self) -> DocumentKind:
        return classify_title(self.title)

    @lazyproperty
    def main(self) -> HtmlElement:
        """The `<div id="mainSection">` content region."""
        mains = cast(list[HtmlElement], self._root.xpath(".//div[@id='mainSection']"))
        if not mains:
            raise TemplateFormatError("Expected a mainSection content region but not found")
        return mains[0]

    @lazyproperty
    def description(self) -> str:
        """Prose ahead of the "Syntax" heading.

        A page without one (a namespace page, say) is described by the prose ahead of its first
        section heading, or by all its main text when it has no headings either.
        """
        description = leading_description("".join(self.main.itertext()))
        if description is not None:
            return description
        headings = cast(list[HtmlElement], self.main.xpath(".//h2"))
        if not headings:
            return self.main.normalized_text
        preceding = cast(
            list[str], headings[0].xpath("preceding::text()[ancestor::div[@id='mainSection']]")
        )
        return normalize_text("".join(preceding))

    @lazyproperty
    def sections(self) -> SectionIndex:
        return locate_sections(self.main)

    def check_admission(self) -> None:
        """Raise `DocumentSkipped` unless this page is one notation records are extracted from."""
        if not self.help_id:
            raise DocumentSkipped("no help identifier")
        if not self.is_target_language:
            raise DocumentSkipped(f"not a {self._config.language_category} document")
        key = self.key
        if key is None:
            raise DocumentSkipped(f"identifier outside {self._config.namespace_root!r}")
        if self._config.is_excluded(key):
            raise DocumentSkipped("identifier in excluded namespace")

    @lazyproperty
    def _metas(self) -> list[Meta]:
        return [e for e in self._root.iter("meta") if isinstance(e, Meta)]


# ------------------------------------------------------------------------------------------------
# NOTATION EXTRACTOR
# ------------------------------------------------------------------------------------------------


class NotationExtractor:
    """Extracts the notation records of one reference page."""

    def __init__(self, document: HelpDocument):
        self._document = document
        self._language = document.config.target_language

    @classmethod
    def extract(cls, document: HelpDocument) -> list[NotationRecord]:
        """Notation records of `document`, in the order they should be added to the map.

        Raises `DocumentSkipped` for a page that is routinely left out, and `TemplateFormatError`
        (or another exception) when the page deviates from the template its kind requires.
        """
        document.check_admission()
        return cls(document)._extract()

    def _extract(self) -> list[NotationRecord]:
        kind = self._document.kind
        extractors: dict[DocumentKind, Callable[[], list[NotationRecord]]] = {
            DocumentKind.CLASS: self._extract_class,
            DocumentKind.ATTRIBUTE: self._extract_class,
            DocumentKind.ENUMERATION: self._extract_enumeration,
            DocumentKind.NAMESPACE: self._extract_namespace,
            DocumentKind.PROPERTY: self._extract_property,
            DocumentKind.DELEGATE: self._extract_delegate,
            DocumentKind.CONSTRUCTOR: self._extract_constructor,
            DocumentKind.METHOD: self._extract_method,
            DocumentKind.EVENT: self._extract_event,
            DocumentKind.STRUCTURE: self._extract_structure,
        }
        extract = extractors.get(kind)
        if extract is None:
            raise DocumentSkipped(f"{kind.value} page")
        return extract()

    @property
    def _identifier(self) -> str:
        return cast(str, self._document.identifier)

    @property
    def _sections(self) -> SectionIndex:
        return self._document.sections

    # -- per-kind extraction ------------------------------------------------------------------

    def _extract_class(self) -> list[NotationRecord]:
        return [self._named_record(self._identifier, "class")]

    def _extract_enumeration(self) -> list[NotationRecord]:
        records = [self._named_record(self._identifier, "enumeration")]

        tables = self._sections.require("Members").tables
        if not tables:
            raise TemplateFormatError("Unexpected enumeration document format")

        for member in parse_enumeration_members(tables[0]):
            camel_id = f"{self._identifier}.{member.name}"
            records.append(
                NotationRecord(
                    camel_id.lower(),
                    # -- enumerations are numeric in JavaScript --
                    NamedTypeNotation(member.description, "number", camel_id),
                )
            )
        return records

    def _extract_namespace(self) -> list[NotationRecord]:
        members = self._explicit_namespace_members() or self._listed_namespace_members()
        notation = NamespaceDocumentNotation(
            self._document.description, members=members, camel_id=self._identifier
        )
        return [NotationRecord(self._identifier.lower(), notation)]

    def _extract_property(self) -> list[NotationRecord]:
        block = self._sections.require("Property value").first_block
        if block is None:
            raise TemplateFormatError("Property value section is empty")
        property_type = select_language(parse_type_notation(block), self._language)
        if not property_type:
            raise NotRepresentableError(self._language, "property")
        return [self._named_record(self._identifier, property_type)]

    def _extract_delegate(self) -> list[NotationRecord]:
        signature = FunctionSignature(
            "",
            self._parameters(),
            type_parameters=title_type_parameters(self._document.title),
            code_snippet=self._syntax_code_snippet(),
        )
        notation = DelegateTypeNotation(
            self._document.description, signature=signature, camel_id=self._identifier
        )
        return [NotationRecord(self._identifier.lower(), notation)]

    def _extract_constructor(self) -> list[NotationRecord]:
        marker_index = self._identifier.find(CONSTRUCTOR_MARKER)
        if marker_index == -1:
            raise TemplateFormatError(f"Expected {CONSTRUCTOR_MARKER} but not found")
        camel_id = f"{self._identifier[:marker_index]}.constructor"

        signature = FunctionSignature(
            self._document.description,
            self._parameters(),
            return_=INSTANCE,
            code_snippet=self._syntax_code_snippet(),
        )
        notation = FunctionTypeNotation(signatures=[signature], camel_id=camel_id)
        return [NotationRecord(camel_id.lower(), notation)]

    def _extract_method(self) -> list[NotationRecord]:
        # -- overloads share one key, their parameter-type suffix "(System.String)" is dropped --
        match = _OVERLOAD_PARAMETERS_PATTERN.search(self._identifier)
        camel_id = self._identifier[: match.start()] if match else self._identifier

        signature = FunctionSignature(
            self._document.description,
            self._parameters(),
            return_=self._return_value(),
            code_snippet=self._syntax_code_snippet(),
        )
        notation = FunctionTypeNotation(signatures=[signature], camel_id=camel_id)
        return [NotationRecord(camel_id.lower(), notation)]

    def _extract_event(self) -> list[NotationRecord]:
        snippet = self._code_snippet(self._sections.require("Syntax"))
        if snippet is None:
            raise NotRepresentableError(self._language, "event syntax")
        event_listener = _EVENT_LISTENER_PATTERN.search(snippet)
        handler_assignment = _EVENT_HANDLER_ASSIGNMENT_PATTERN.search(snippet)

        tables = self._sections.require("Event information").tables
        if not tables:
            raise TemplateFormatError("Expected an event information table but not found")
        row = only(tables[0].rows, TemplateFormatError, "event information row")
        cells = row.cells
        if len(cells) < 2:
            raise TemplateFormatError("Unexpected event information row format")
        delegate = select_language(
            parse_type_notation(cells[1], omit_type_indication=True), self._language
        )
        if not delegate:
            raise TemplateFormatError(f"Expected {self._language} delegate type but not found")

        if event_listener is None or handler_assignment is None:
            raise TemplateFormatError(
                "Expected both event listener/onevent syntax but not found"
            )

        owner, _, event_name = self._identifier.rpartition(".")
        camel_id = f"{owner}.on{event_name.lower()}"
        notation = EventTypeNotation(
            self._document.description, delegate=delegate, camel_id=camel_id
        )
        return [NotationRecord(camel_id.lower(), notation)]

    def _extract_structure(self) -> list[NotationRecord]:
        section = self._sections.find("Members")
        # -- a structure without a member table is still recorded, as an opaque record --
        tables = section.tables if section is not None else []
        notation = StructureTypeNotation(
            self._document.description,
            members=parse_structure_fields(tables, self._language),
            camel_id=self._identifier,
        )
        return [NotationRecord(self._identifier.lower(), notation)]

    # -- helpers ------------------------------------------------------------------------------

    def _named_record(self, camel_id: str, type_: str) -> NotationRecord:
        notation = NamedTypeNotation(self._document.description, type_, camel_id)
        return NotationRecord(camel_id.lower(), notation)

    def _parameters(self) -> list[ParameterEntry]:
        """Parameters from the "Parameters" section, empty when there is no such section.

        The section's first block is the `<dl>` parameter list. A first block of bare prose, like
        "This method has no parameters.", also means no parameters. Anything else raises
        `TemplateFormatError`.
        """
        section = self._sections.find("Parameters")
        if section is None:
            return []
        block = section.first_block
        if block is None:
            return []
        if block.tag != "dl":
            if len(block) == 0:
                return []
            raise TemplateFormatError(
                f"Expected a <dl> parameter list in Parameters section, found <{block.tag}>"
            )
        return parse_parameter_list(block, self._language)

    def _return_value(self) -> Optional[TypeNotation]:
        """Return-value notation, None when the page has no "Return value" section."""
        section = self._sections.find("Return value")
        if section is None:
            return None

        blocks = section.content
        description = blocks[1].normalized_text if len(blocks) > 1 else ""
        if not blocks or not (blocks[0].text or "").lstrip().startswith(TYPE_INDICATION):
            return TypeNotation(description, UNKNOWN)

        return_type = select_language(parse_type_notation(blocks[0]), self._language)
        if not return_type:
            raise NotRepresentableError(self._language, "return value")
        return TypeNotation(description, return_type)

    def _syntax_code_snippet(self) -> Optional[str]:
        section = self._sections.find("Syntax")
        return self._code_snippet(section) if section is not None else None

    def _code_snippet(self, section: Section) -> Optional[str]:
        """Target-language sample among the code snippets directly following the heading."""
        for block in section.content:
            if not isinstance(block, CodeSnippet):
                break
            if block.language == self._language:
                return block.code.strip()
        return None

    def _explicit_namespace_members(self) -> Optional[NamespaceMembers]:
        """Members listed under "Members" sub-headings "Structures" and "Delegates"."""
        section = self._sections.find("Members")
        if section is None:
            return None
        structures = section.subsection("Structures")
        delegates = section.subsection("Delegates")
        if structures is None and delegates is None:
            return None
        return NamespaceMembers(
            structures=self._referenced_identifiers(structures),
            delegates=self._referenced_identifiers(delegates),
        )

    def _listed_namespace_members(self) -> NamespaceMembers:
        """Members found by classifying each row of a generic member-listing table."""
        section = self._sections.find("In this section")
        if section is not None:
            tables = section.tables
        else:
            tables = cast(list[Table], self._document.main.xpath(".//table[not(ancestor::table)]"))
            tables = tables[-1:]

        structures: list[str] = []
        delegates: list[str] = []
        for table in tables:
            for reference in parse_member_references(table):
                kind = classify_title(reference.title)
                if kind is DocumentKind.STRUCTURE:
                    structures.append(reference.identifier)
                elif kind is DocumentKind.DELEGATE:
                    delegates.append(reference.identifier)
        return NamespaceMembers(structures=structures, delegates=delegates)

    @staticmethod
    def _referenced_identifiers(section: Optional[Section]) -> list[str]:
        if section is None:
            return []
        return [
            reference.identifier
            for table in section.tables
            for reference in parse_member_references(table)
        ]


def extract_notations(
    content: Union[bytes, str], config: Optional[ExtractionConfig] = None
) -> list[NotationRecord]:
    """Notation records of the reference page in `content`."""
    return NotationExtractor.extract(HelpDocument.from_html(content, config))
