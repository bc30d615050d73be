"""Parses type-notation markup into a type name or a per-language table of type names.

A reference page describes the type of a property, parameter, or return value in a paragraph like
one of these:

    <p>Type: Boolean</p>
    <p>Type: <a href="ms-xhelp:///?Id=T%3aWindows.Storage.StorageFile">StorageFile</a></p>
    <p>Type: <strong>Number</strong> [JavaScript] | <a href="...">Int32</a> [C++]</p>

The first two describe a single type for every language. The third is a multi-language table in
which each bracketed _language indicator_ applies to the type name proposed just before it.
"""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import Mapping, NamedTuple, Optional, Union

from typing_extensions import TypeAlias

from uwp_type_mapper.errors import TemplateFormatError
from uwp_type_mapper.parse.html import Anchor, HtmlElement

TYPE_INDICATION = "Type:"
ARRAY_OF = "array of"

# -- the first (leftmost) non-nested bracket group is the language indicator --
_LANGUAGE_INDICATOR_PATTERN = re.compile(r"\[[^\[]*\]")
_GENERIC_ARITY_PATTERN = re.compile(r"`+\d*")
_PRIMITIVE_ALIASES = frozenset(("String", "Boolean", "Object", "Number"))

_EMPHASIS_TYPE_TAGS = frozenset(("b", "em", "i", "span", "strong"))


TypeNotationResult: TypeAlias = Union[str, Mapping[str, str]]
"""Either the only type name described, or a mapping of language name to type name."""


def strip_generic_arity(identifier: str) -> str:
    """`identifier` without backtick generic-arity markers, e.g. "IVector`1" -> "IVector"."""
    return _GENERIC_ARITY_PATTERN.sub("", identifier)


def normalize_type_name(type_name: str) -> str:
    """Normalized form of a type name recovered from a link or from type-notation text.

    The bare primitive aliases are lower-cased; a qualified name like "Windows.Foo.String" is
    not. Generic-arity markers are removed.
    """
    if type_name in _PRIMITIVE_ALIASES:
        return type_name.lower()
    return strip_generic_arity(type_name)


class LanguageTaggedType(NamedTuple):
    """The type name and language indicators found in one text fragment, either may be absent."""

    type: Optional[str] = None
    languages: Optional[tuple[str, ...]] = None


def tokenize_type_notation(text: str) -> LanguageTaggedType:
    """Split a fragment like "Number [JavaScript]" into its type name and language tags.

    - "Number [JavaScript]" -> type="number", languages=("JavaScript",)
    - "[C++/VB]" -> type=None, languages=("C++", "VB")
    - "Boolean" -> type="boolean", languages=None
    - "   " -> type=None, languages=None
    """
    text = text.strip()
    if not text:
        return LanguageTaggedType()

    match = _LANGUAGE_INDICATOR_PATTERN.search(text)
    if match is None:
        return LanguageTaggedType(type=normalize_type_name(text))

    type_name = text[: match.start()].strip()
    languages = tuple(match.group()[1:-1].split("/"))
    return LanguageTaggedType(
        type=normalize_type_name(type_name) if type_name else None, languages=languages
    )


class _LanguageTypeAccumulator:
    """Accumulates proposed type names and the language indicators that claim them.

    - A type name is _proposed_ by a link, an emphasis element, or a text fragment.
    - A language indicator claims the most recently proposed type name for its language(s).
    - A proposed "array of" is not a type name but a prefix for the next one proposed.
    """

    def __init__(self):
        self._proposed_type_name: Optional[str] = None
        self._pending_prefix = ""
        self._type_map: dict[str, str] = {}
        self._is_tagged = False

    def propose(self, type_name: Optional[str]) -> None:
        """Make `type_name` the one the next language indicator applies to."""
        if not type_name:
            return
        if type_name == ARRAY_OF:
            self._pending_prefix = f"{ARRAY_OF} "
            return
        self._proposed_type_name = self._pending_prefix + type_name
        self._pending_prefix = ""

    def tag(self, languages: tuple[str, ...]) -> None:
        """Associate the most recently proposed type name with each of `languages`."""
        self._is_tagged = True
        if self._proposed_type_name is None:
            return
        for language in languages:
            self._type_map[language] = self._proposed_type_name

    def add_fragment(self, fragment: LanguageTaggedType) -> None:
        self.propose(fragment.type)
        if fragment.languages:
            self.tag(fragment.languages)

    @property
    def result(self) -> Optional[TypeNotationResult]:
        """The per-language map once any indicator was seen, otherwise the last proposed name."""
        if not self._is_tagged:
            return self._proposed_type_name
        return MappingProxyType(dict(self._type_map))


def parse_type_notation(
    element: HtmlElement, omit_type_indication: bool = False
) -> Optional[TypeNotationResult]:
    """The type, or per-language types, described by the contents of `element`.

    Unless `omit_type_indication` is True, the contents must start with the literal text "Type:".
    When the remainder of that text names a type without any language indicator, that name is the
    result and nothing else is looked at.

    The walk stops at a nested `<p>`. Any other element that is not a link or an emphasis/span
    element raises `TemplateFormatError`. None is returned when no type name was found.
    """
    nodes = list(element.iter_nodes())
    accum = _LanguageTypeAccumulator()

    if not omit_type_indication:
        leading_text = nodes[0].lstrip() if nodes and isinstance(nodes[0], str) else ""
        if not leading_text.startswith(TYPE_INDICATION):
            raise TemplateFormatError(
                f"Expected type notation to start with {TYPE_INDICATION!r}, got"
                f" {element.normalized_text[:40]!r}"
            )
        nodes.pop(0)
        fragment = tokenize_type_notation(leading_text[len(TYPE_INDICATION) :])
        # -- single-language shortcut, "Type: Boolean" --
        if fragment.type and fragment.type != ARRAY_OF and not fragment.languages:
            return fragment.type
        accum.add_fragment(fragment)

    for node in nodes:
        if isinstance(node, str):
            accum.add_fragment(tokenize_type_notation(node))
        elif isinstance(node, Anchor):
            identifier = node.reference_identifier
            accum.propose(normalize_type_name(identifier) if identifier else None)
        elif node.tag in _EMPHASIS_TYPE_TAGS:
            accum.propose(normalize_type_name(node.normalized_text))
        elif node.tag == "p":
            break
        else:
            raise TemplateFormatError(f"Unexpected <{node.tag}> element in type notation")

    return accum.result


def select_language(notation: Optional[TypeNotationResult], language: str) -> Optional[str]:
    """The type name `notation` gives for `language`, None when it has none.

    A single (untagged) type name applies to every language.
    """
    if notation is None or isinstance(notation, str):
        return notation
    return notation.get(language)
