"""Locates the headed sections of a reference page's main content.

A section is a heading and the sibling blocks following it up to the next heading of the same or
higher rank:

    <h2>Members</h2>
    <p>The Foo namespace has these types of members:</p>
    <h3>Structures</h3>
    <table>...</table>
    <h3>Delegates</h3>
    <table>...</table>
    <h2>Requirements</h2>

gives a "Members" section whose content is the `<p>` and whose subsections are "Structures" and
"Delegates", each holding its `<table>`. Only one level of nesting is recognized.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Iterator, Mapping, NamedTuple, Optional, Sequence, cast

from uwp_type_mapper.errors import TemplateFormatError
from uwp_type_mapper.parse.html import Heading, HtmlElement, Table

SECTION_LEVEL = 2
SUBSECTION_LEVEL = 3


def _matches(title: str, prefix: str) -> bool:
    # -- headings vary in trailing punctuation and whitespace, so match on the start only --
    return title.startswith(prefix)


class Section(NamedTuple):
    """A heading, the blocks that follow it, and any nested sub-headed sections."""

    title: str
    content: tuple[HtmlElement, ...]
    subsections: Mapping[str, Section]

    @property
    def first_block(self) -> Optional[HtmlElement]:
        return self.content[0] if self.content else None

    def subsection(self, prefix: str) -> Optional[Section]:
        """The first nested section whose title starts with `prefix`, None if there is none."""
        return next((s for t, s in self.subsections.items() if _matches(t, prefix)), None)

    def iter_blocks(self) -> Iterator[HtmlElement]:
        """Generate the blocks of this section followed by those of each subsection."""
        yield from self.content
        for subsection in self.subsections.values():
            yield from subsection.iter_blocks()

    @property
    def tables(self) -> list[Table]:
        """Outermost tables within this section and its subsections, in document order."""
        tables: list[Table] = []
        for block in self.iter_blocks():
            if isinstance(block, Table):
                tables.append(block)
            else:
                tables.extend(cast(list[Table], block.xpath(".//table[not(ancestor::table)]")))
        return tables


class SectionIndex:
    """The top-level sections of a main-content region, in document order."""

    def __init__(self, sections: Sequence[Section]):
        self._sections = tuple(sections)

    def __iter__(self) -> Iterator[Section]:
        return iter(self._sections)

    def __len__(self) -> int:
        return len(self._sections)

    @property
    def titles(self) -> list[str]:
        return [section.title for section in self._sections]

    def find(self, prefix: str) -> Optional[Section]:
        """The first section whose title starts with `prefix`, None if there is none.

        The match is case-sensitive. Absence is not an error at this level, the caller decides
        whether its symbol kind requires the section.
        """
        return next((s for s in self._sections if _matches(s.title, prefix)), None)

    def require(self, prefix: str) -> Section:
        """Like `.find()` but raises `TemplateFormatError` when there is no such section."""
        section = self.find(prefix)
        if section is None:
            raise TemplateFormatError(f"Expected a {prefix!r} section, found {self.titles}")
        return section


def locate_sections(container: HtmlElement) -> SectionIndex:
    """Index of the `<h2>`-headed sections anywhere within `container`."""
    headings = cast(list[Heading], container.xpath(f".//h{SECTION_LEVEL}"))
    return SectionIndex([_section_from_heading(heading) for heading in headings])


def _section_from_heading(heading: Heading) -> Section:
    blocks: list[HtmlElement] = []
    for sibling in heading.iter_following_siblings():
        # -- a heading of the same or higher rank ends the section --
        if isinstance(sibling, Heading) and sibling.level <= SECTION_LEVEL:
            break
        blocks.append(sibling)

    content, subsections = _split_subsections(blocks)
    return Section(heading.normalized_text, content, subsections)


def _split_subsections(
    blocks: Sequence[HtmlElement],
) -> tuple[tuple[HtmlElement, ...], Mapping[str, Section]]:
    """Divide `blocks` into those before the first `<h3>` and a section per `<h3>`."""
    content: list[HtmlElement] = []
    subsections: dict[str, Section] = {}
    current: Optional[tuple[str, list[HtmlElement]]] = None

    def close_current() -> None:
        if current is not None:
            title, sub_blocks = current
            # -- a repeated sub-heading keeps its first occurrence --
            subsections.setdefault(title, Section(title, tuple(sub_blocks), MappingProxyType({})))

    for block in blocks:
        if isinstance(block, Heading) and block.level == SUBSECTION_LEVEL:
            close_current()
            current = (block.normalized_text, [])
        elif current is None:
            content.append(block)
        else:
            current[1].append(block)
    close_current()

    return tuple(content), MappingProxyType(subsections)
