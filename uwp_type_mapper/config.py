"""Configuration objects for a corpus pass."""

from __future__ import annotations

from abc import ABC
from dataclasses import dataclass, field
from typing import Optional

from dataclasses_json import DataClassJsonMixin


@dataclass
class BaseConfig(DataClassJsonMixin, ABC):
    pass


@dataclass
class ExtractionConfig(BaseConfig):
    """Settings that decide which documents are admitted and which language is extracted.

    Args:
        target_language: The language-indicator name (as written inside `[...]` in the docs)
            whose type is selected from a multi-language type table. Also the `language`
            attribute of the code sample consulted for events and signatures.
        language_category: Value of the `Microsoft.Help.Category` meta tag that marks a
            document as targeting that language.
        namespace_root: Help identifiers are truncated at the first `:<namespace_root>` marker.
        excluded_namespaces: Lowercase identifier prefixes that are never extracted.
    """

    target_language: str = "JavaScript"
    language_category: str = "DevLang:javascript"
    namespace_root: str = "windows"
    excluded_namespaces: list[str] = field(default_factory=lambda: ["windows.ui.xaml"])

    def is_excluded(self, key: str) -> bool:
        return any(key.startswith(prefix) for prefix in self.excluded_namespaces)


@dataclass
class ParserConfig(BaseConfig):
    corpus_path: str = "../referencedocs"
    output_path: str = "built/typemap.json"
    reparse: bool = False
    verbose: bool = False
    file_glob: Optional[list[str]] = field(default_factory=lambda: ["*.htm", "*.html"])
    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)
