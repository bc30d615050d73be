"""The reference map, a mapping of lowercase fully-qualified identifier to notation."""

from __future__ import annotations

import json
from typing import Any, Iterator, Mapping

from uwp_type_mapper.documents.notations import (
    FunctionTypeNotation,
    Notation,
    NotationRecord,
    notation_from_dict,
)
from uwp_type_mapper.errors import DuplicateEntryError


class ReferenceMap:
    """Accumulates notation records across a corpus pass.

    A function key accumulates one signature per overload document. Every other key is
    write-once; a second write raises `DuplicateEntryError`.
    """

    def __init__(self):
        self._entries: dict[str, Notation] = {}

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __getitem__(self, key: str) -> Notation:
        return self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def add(self, record: NotationRecord) -> None:
        key, notation = record
        existing = self._entries.get(key)

        if existing is None:
            self._entries[key] = notation
            return

        if isinstance(existing, FunctionTypeNotation) and isinstance(
            notation, FunctionTypeNotation
        ):
            merged = existing
            for signature in notation.signatures:
                merged = merged.with_signature(signature)
            self._entries[key] = merged
            return

        raise DuplicateEntryError(key, existing.type, notation.type)

    def add_all(self, records: list[NotationRecord]) -> None:
        for record in records:
            self.add(record)

    def to_dict(self) -> dict[str, dict[str, Any]]:
        """JSON-ready form, keys in ascending order."""
        return {key: self._entries[key].to_dict() for key in sorted(self._entries)}

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False)

    @classmethod
    def from_dict(cls, kvs: Mapping[str, Mapping[str, Any]]) -> ReferenceMap:
        reference_map = cls()
        for key, value in kvs.items():
            reference_map._entries[key] = notation_from_dict(value)
        return reference_map
