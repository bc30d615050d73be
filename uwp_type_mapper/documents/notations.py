"""Notation records, the typed description extracted for each documented symbol.

Every record serializes to the JSON form written to the mapping file. The discriminant field is
literally named `type` in all variants. For the callable and composite variants it holds a fixed
tag ("function", "delegate", "event", "structure", "namespace"). For the remaining (plain) variant
it holds the symbol's type itself: a primitive name, a fully-qualified identifier, or one of the
pseudo-types "class", "enumeration", "unknown", ...
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any, Mapping, NamedTuple, Optional, Union

from dataclasses_json import DataClassJsonMixin, config
from typing_extensions import TypeAlias

INSTANCE = "instance"
"""Return sentinel reserved for constructors."""

UNKNOWN = "unknown"
"""Pseudo-type of a return value documented without an explicit type."""


def _is_none(value: Any) -> bool:
    return value is None


def _optional(field_name: Optional[str] = None) -> Any:
    """Dataclass field that defaults to None and is left out of the JSON form when None."""
    return field(default=None, metadata=config(field_name=field_name, exclude=_is_none))


def _decode_return(value: Any) -> Union[str, TypeNotation, None]:
    if value is None or isinstance(value, str):
        return value
    return TypeNotation.from_dict(value)


@dataclass(frozen=True)
class TypeNotation(DataClassJsonMixin):
    """A described type, used for return values."""

    description: str
    type: str


@dataclass(frozen=True)
class NamedTypeNotation(DataClassJsonMixin):
    """A non-callable symbol: class, namespace, enumeration, enum-member, property."""

    description: str
    type: str
    # -- mixed-case identifier; the map key is the lowercase form of this --
    camel_id: str = field(metadata=config(field_name="camelId"))


@dataclass(frozen=True)
class ParameterEntry(DataClassJsonMixin):
    """One positional parameter, or one field of a structure."""

    key: str
    type: str
    description: Optional[str] = _optional()


@dataclass(frozen=True)
class FunctionSignature(DataClassJsonMixin):
    """One callable overload.

    `return_` is absent when the document has no "Return value" section, the `INSTANCE` sentinel
    for constructors, and a `TypeNotation` otherwise.
    """

    description: str
    parameters: list[ParameterEntry]
    type_parameters: Optional[list[str]] = _optional("typeParameters")
    return_: Union[str, TypeNotation, None] = field(
        default=None,
        metadata=config(field_name="return", exclude=_is_none, decoder=_decode_return),
    )
    code_snippet: Optional[str] = _optional("codeSnippet")


@dataclass(frozen=True)
class FunctionTypeNotation(DataClassJsonMixin):
    """A method or constructor; one signature per documented overload."""

    description: str = field(default="", init=False)
    type: str = field(default="function", init=False)
    signatures: list[FunctionSignature] = field(default_factory=list)
    camel_id: str = field(default="", metadata=config(field_name="camelId"))

    def with_signature(self, signature: FunctionSignature) -> FunctionTypeNotation:
        """A new notation with `signature` appended to the signatures of this one."""
        return dataclasses.replace(self, signatures=[*self.signatures, signature])


@dataclass(frozen=True)
class DelegateTypeNotation(DataClassJsonMixin):
    description: str
    type: str = field(default="delegate", init=False)
    signature: FunctionSignature = field(default_factory=lambda: FunctionSignature("", []))
    camel_id: str = field(default="", metadata=config(field_name="camelId"))


@dataclass(frozen=True)
class EventTypeNotation(DataClassJsonMixin):
    """An event; `delegate` is the identifier of its handler delegate, resolved downstream."""

    description: str
    type: str = field(default="event", init=False)
    delegate: str = ""
    camel_id: str = field(default="", metadata=config(field_name="camelId"))


@dataclass(frozen=True)
class StructureTypeNotation(DataClassJsonMixin):
    description: str
    type: str = field(default="structure", init=False)
    members: list[ParameterEntry] = field(default_factory=list)
    camel_id: str = field(default="", metadata=config(field_name="camelId"))


@dataclass(frozen=True)
class NamespaceMembers(DataClassJsonMixin):
    """Child symbols a namespace declares that have no standalone document of their own."""

    structures: list[str] = field(default_factory=list)
    delegates: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class NamespaceDocumentNotation(DataClassJsonMixin):
    description: str
    type: str = field(default="namespace", init=False)
    members: NamespaceMembers = field(default_factory=NamespaceMembers)
    camel_id: str = field(default="", metadata=config(field_name="camelId"))


Notation: TypeAlias = Union[
    NamedTypeNotation,
    FunctionTypeNotation,
    DelegateTypeNotation,
    EventTypeNotation,
    StructureTypeNotation,
    NamespaceDocumentNotation,
]
"""Any value of the reference map."""


class NotationRecord(NamedTuple):
    """A notation and the lowercase fully-qualified key it is stored under."""

    key: str
    notation: Notation


_NOTATION_CLASSES: Mapping[str, type[DataClassJsonMixin]] = {
    "function": FunctionTypeNotation,
    "delegate": DelegateTypeNotation,
    "event": EventTypeNotation,
    "structure": StructureTypeNotation,
    "namespace": NamespaceDocumentNotation,
}


def notation_from_dict(kvs: Mapping[str, Any]) -> Notation:
    """Decode the JSON form of any reference-map value, dispatching on its `type` field."""
    NotationCls = _NOTATION_CLASSES.get(kvs.get("type", ""), NamedTypeNotation)
    return NotationCls.from_dict(dict(kvs))  # type: ignore[return-value]
