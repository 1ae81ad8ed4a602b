"""Core data models shared across ifacegen components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional


class TypeKind(str, Enum):
    """Shape of an annotated type."""

    STRUCT = "struct"
    TRAIT = "trait"
    ENUM = "enum"


class DeclarationKind(str, Enum):
    """What a scanned declaration contributes to the registry."""

    STRUCT = "struct"
    TRAIT = "trait"
    ENUM = "enum"
    OPERATION = "operation"


@dataclass
class MethodFacts:
    """Name and referenced type names of a method."""

    name: str
    parameter_type_names: List[str] = field(default_factory=list)
    return_type_names: List[str] = field(default_factory=list)

    def all_types(self) -> Iterator[str]:
        yield from self.parameter_type_names
        yield from self.return_type_names


@dataclass
class OperationRecord:
    """A method of a struct or trait, or a variant of an enum.

    ``method_facts`` is ``None`` only for enum variants, whose ``signature``
    is the bare variant name.
    """

    docs: List[str]
    signature: str
    is_constructor: bool = False
    method_facts: Optional[MethodFacts] = None

    @classmethod
    def method(
        cls,
        signature: str,
        docs: List[str],
        name: str,
        is_constructor: bool,
        parameter_type_names: List[str],
        return_type_names: List[str],
    ) -> "OperationRecord":
        return cls(
            docs=docs,
            signature=signature,
            is_constructor=is_constructor,
            method_facts=MethodFacts(name, parameter_type_names, return_type_names),
        )

    @classmethod
    def variant(cls, name: str, docs: List[str]) -> "OperationRecord":
        return cls(docs=docs, signature=name)

    @property
    def name(self) -> str:
        if self.method_facts is None:
            return self.signature
        return self.method_facts.name


@dataclass
class TypeRecord:
    """Structural information collected for one annotated type."""

    name: str
    kind: TypeKind
    docs: List[str] = field(default_factory=list)
    operations: List[OperationRecord] = field(default_factory=list)
    declared: bool = True
    path: Optional[str] = None

    def referenced_types(self) -> List[str]:
        """Return the distinct type names used by this record's operations."""
        seen: dict[str, None] = {}
        for operation in self.operations:
            if operation.method_facts is None:
                continue
            for type_name in operation.method_facts.all_types():
                seen.setdefault(type_name, None)
        return list(seen)


@dataclass
class Declaration:
    """A single fact produced by scanning one source file."""

    kind: DeclarationKind
    name: str
    path: str
    docs: List[str] = field(default_factory=list)
    operations: List[OperationRecord] = field(default_factory=list)


__all__ = [
    "Declaration",
    "DeclarationKind",
    "MethodFacts",
    "OperationRecord",
    "TypeKind",
    "TypeRecord",
]
