"""Registry of annotated types collected while scanning a source tree."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from .errors import DeclarationError
from .models import Declaration, DeclarationKind, OperationRecord, TypeKind, TypeRecord


class ItemRegistry:
    """Accumulates type records by name.

    Enums are kept apart from structs and traits: they cannot depend on other
    types, so they are emitted first in discovery order and never ordered.
    Files are read in no particular relation to each other, so an ``impl``
    block may be seen before the struct it belongs to; such a struct starts
    as an undeclared placeholder and is filled in when its declaration shows up.
    """

    def __init__(self) -> None:
        self._types: Dict[str, TypeRecord] = {}
        self._enums: Dict[str, TypeRecord] = {}
        self.emission_order: List[str] = []

    def register(self, declaration: Declaration) -> None:
        """Merge one scanned declaration into the registry."""
        if declaration.kind is DeclarationKind.OPERATION:
            for operation in declaration.operations:
                self.add_operation(declaration.name, operation, path=declaration.path)
        elif declaration.kind is DeclarationKind.STRUCT:
            self.declare_struct(
                declaration.name,
                declaration.docs,
                declaration.operations,
                path=declaration.path,
            )
        elif declaration.kind is DeclarationKind.TRAIT:
            self.declare_type(
                TypeRecord(
                    name=declaration.name,
                    kind=TypeKind.TRAIT,
                    docs=list(declaration.docs),
                    operations=list(declaration.operations),
                    path=declaration.path,
                )
            )
        elif declaration.kind is DeclarationKind.ENUM:
            self.add_enumeration(
                TypeRecord(
                    name=declaration.name,
                    kind=TypeKind.ENUM,
                    docs=list(declaration.docs),
                    operations=list(declaration.operations),
                    path=declaration.path,
                )
            )

    def register_all(self, declarations: Iterable[Declaration]) -> None:
        for declaration in declarations:
            self.register(declaration)

    def add_type(self, name: str, record: TypeRecord) -> None:
        """Insert or overwrite the struct or trait record bound to ``name``."""
        self._types[name] = record

    def declare_type(self, record: TypeRecord) -> None:
        """Add a trait or struct record whose name must still be free."""
        self._ensure_unbound(record.name, record.kind, record.path)
        self.add_type(record.name, record)

    def add_operation(
        self, name: str, operation: OperationRecord, *, path: Optional[str] = None
    ) -> None:
        """Attach a method found in an ``impl`` block to the type ``name``."""
        if name in self._enums:
            raise DeclarationError(
                f"Impl functions may only be used for structs; {name} is an enum",
                name=name,
                path=path,
            )
        record = self._types.get(name)
        if record is None:
            record = TypeRecord(name=name, kind=TypeKind.STRUCT, declared=False, path=path)
            self._types[name] = record
        elif record.kind is not TypeKind.STRUCT:
            raise DeclarationError(
                f"Impl functions may only be used for structs; {name} is a {record.kind.value}",
                name=name,
                path=path,
            )
        record.operations.append(operation)

    def declare_struct(
        self,
        name: str,
        docs: Iterable[str],
        operations: Iterable[OperationRecord] = (),
        *,
        path: Optional[str] = None,
    ) -> TypeRecord:
        """Create the struct ``name`` or enrich the placeholder made by ``add_operation``."""
        if name in self._enums:
            raise _conflict(name, TypeKind.STRUCT, TypeKind.ENUM, path)
        record = self._types.get(name)
        if record is None:
            record = TypeRecord(name=name, kind=TypeKind.STRUCT, path=path)
            self._types[name] = record
        elif record.kind is not TypeKind.STRUCT:
            raise _conflict(name, TypeKind.STRUCT, record.kind, path)
        elif record.declared:
            raise _duplicate(name, path)
        else:
            record.declared = True
            record.path = path
        record.docs.extend(docs)
        # Declared operations go first so the block reads the same whichever file was scanned first.
        record.operations[0:0] = list(operations)
        return record

    def add_enumeration(self, record: TypeRecord) -> None:
        self._ensure_unbound(record.name, TypeKind.ENUM, record.path)
        self._enums[record.name] = record

    def _ensure_unbound(self, name: str, kind: TypeKind, path: Optional[str]) -> None:
        existing = self._types.get(name) or self._enums.get(name)
        if existing is None:
            return
        if existing.kind is kind and existing.declared:
            raise _duplicate(name, path)
        if existing.kind is TypeKind.STRUCT and not existing.declared:
            raise DeclarationError(
                f"Expected {name} to be a struct: impl functions were found for it, "
                f"but it is declared as a {kind.value}",
                name=name,
                path=path,
            )
        raise _conflict(name, kind, existing.kind, path)

    def get(self, name: str) -> Optional[TypeRecord]:
        return self._types.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._types or name in self._enums

    def __len__(self) -> int:
        return len(self._types) + len(self._enums)

    def is_empty(self) -> bool:
        return not self._types and not self._enums

    def names(self) -> List[str]:
        """Struct and trait names in the order they were first seen."""
        return list(self._types)

    def types(self) -> List[TypeRecord]:
        return list(self._types.values())

    @property
    def enumerations(self) -> List[TypeRecord]:
        return list(self._enums.values())

    def ordered_types(self) -> List[TypeRecord]:
        """Struct and trait records in emission order."""
        return [self._types[name] for name in self.emission_order]


def _duplicate(name: str, path: Optional[str]) -> DeclarationError:
    return DeclarationError(f"Multiple definitions of {name}", name=name, path=path)


def _conflict(name: str, wanted: TypeKind, existing: TypeKind, path: Optional[str]) -> DeclarationError:
    return DeclarationError(
        f"Expected {name} to be a {existing.value} but it is declared as a {wanted.value}",
        name=name,
        path=path,
    )


__all__ = ["ItemRegistry"]
