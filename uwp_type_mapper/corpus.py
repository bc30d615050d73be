"""Corpus driver: walks the reference-document tree and builds the reference map.

One pass is sequential. A routine skip (`DocumentSkipped`) is tallied and the pass moves on; any
other failure aborts the pass, reported as a `CorpusParseError` naming the document.
"""

from __future__ import annotations

import fnmatch
import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator, Optional

from uwp_type_mapper.config import ExtractionConfig, ParserConfig
from uwp_type_mapper.errors import CorpusParseError, DocumentSkipped
from uwp_type_mapper.logger import logger
from uwp_type_mapper.parse.document import HelpDocument, NotationExtractor
from uwp_type_mapper.reference_map import ReferenceMap


@dataclass(frozen=True)
class CorpusDocument:
    path: str
    content: bytes


@dataclass
class SkippedDocument:
    path: str
    title: str
    reason: str


@dataclass
class CorpusParseResult:
    reference_map: ReferenceMap
    skipped: list[SkippedDocument] = field(default_factory=list)
    document_count: int = 0


def does_path_match_glob(path: str, file_glob: Optional[list[str]]) -> bool:
    if file_glob is None:
        return True
    if any(fnmatch.fnmatch(os.path.basename(path), pattern) for pattern in file_glob):
        return True
    logger.debug(f"The file {path!r} is discarded as it does not match any given glob.")
    return False


def list_corpus_files(corpus_path: str, file_glob: Optional[list[str]] = None) -> list[str]:
    """Paths of the corpus documents under `corpus_path`, recursively, in sorted order."""
    root = Path(corpus_path)
    if not root.is_dir():
        raise FileNotFoundError(f"Corpus directory {corpus_path!r} does not exist")
    return sorted(
        str(path)
        for path in root.rglob("*")
        if path.is_file() and does_path_match_glob(str(path), file_glob)
    )


def iter_corpus_documents(
    corpus_path: str, file_glob: Optional[list[str]] = None
) -> Iterator[CorpusDocument]:
    """Generate each corpus document, reading its content only as it is reached."""
    for path in list_corpus_files(corpus_path, file_glob):
        yield CorpusDocument(path, Path(path).read_bytes())


def parse_documents(
    documents: Iterable[CorpusDocument],
    config: Optional[ExtractionConfig] = None,
    total: Optional[int] = None,
) -> CorpusParseResult:
    """Extract every document into one reference map.

    Raises `CorpusParseError` on the first document that fails other than by a routine skip.
    """
    config = config or ExtractionConfig()
    result = CorpusParseResult(ReferenceMap())

    for index, document in enumerate(documents):
        if total:
            logger.detail(  # type: ignore[attr-defined]
                f"Parsing {document.path} ({index * 100 // total} %, skipping"
                f" {len(result.skipped)} out of {total} docs)..."
            )
        result.document_count += 1

        help_document: Optional[HelpDocument] = None
        try:
            help_document = HelpDocument.from_html(document.content, config)
            result.reference_map.add_all(NotationExtractor.extract(help_document))
        except DocumentSkipped as e:
            logger.debug(f"Skipping {document.path}: {e.reason}")
            title = help_document.title if help_document is not None else ""
            result.skipped.append(SkippedDocument(document.path, title, e.reason))
        except Exception as e:
            logger.error(f"Failed to parse {document.path}: {e}")
            raise CorpusParseError(document.path, str(e)) from e

    logger.info(
        f"Parsed {result.document_count} documents, {len(result.reference_map)} entries,"
        f" skipped {len(result.skipped)}"
    )
    return result


def load_type_map(output_path: str) -> ReferenceMap:
    """Decode the mapping file at `output_path`.

    Raises `CorpusParseError` when the file is not a valid mapping file.
    """
    with open(output_path, encoding="utf-8") as f:
        try:
            return ReferenceMap.from_dict(json.load(f))
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise CorpusParseError(output_path, f"not a valid mapping file, {e}") from e


def write_type_map(reference_map: ReferenceMap, output_path: str) -> None:
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    logger.info(f"writing reference map to {output}")
    output.write_text(reference_map.to_json(), encoding="utf-8")


def generate_type_map(config: ParserConfig) -> ReferenceMap:
    """The reference map for `config.corpus_path`, from the cached mapping file when present.

    The corpus is parsed when `config.reparse` is set or no mapping file exists yet. The mapping
    file is written only after a pass completes without error.
    """
    reference_map = cached_type_map(config)
    if reference_map is not None:
        return reference_map
    return parse_corpus(config).reference_map


def cached_type_map(config: ParserConfig) -> Optional[ReferenceMap]:
    """The reference map in the existing mapping file, None when the corpus is to be parsed."""
    if config.reparse or not os.path.isfile(config.output_path):
        return None
    logger.info(f"File exists: {config.output_path}, skipping parse")
    return load_type_map(config.output_path)


def parse_corpus(config: ParserConfig) -> CorpusParseResult:
    """Parse the whole corpus and write the mapping file, ignoring any cached one."""
    paths = list_corpus_files(config.corpus_path, config.file_glob)
    documents = (CorpusDocument(path, Path(path).read_bytes()) for path in paths)
    result = parse_documents(documents, config.extraction, total=len(paths))
    write_type_map(result.reference_map, config.output_path)
    return result
