"""Rendering of type records into interface-description blocks."""

from __future__ import annotations

from typing import Iterable, List

from .config import Dialect, TypeCase
from .formatter import Delimiter, NewLine, TextEmitter
from .models import OperationRecord, TypeKind, TypeRecord

F_CLASS = "foreign_class!"
F_CALLBACK = "foreign_callback!"
F_ENUM = "foreign_enum!"

BANNER = "//Automatically generated by ifacegen\nuse crate::*;\n"
_DIALECT_PROLOGUE = {
    Dialect.JAVA: "use jni_sys::*;\n",
    Dialect.CPP: "",
}


def banner(dialect: Dialect) -> str:
    """Return the file header, including the dialect's extra ``use`` line."""
    return BANNER + _DIALECT_PROLOGUE[dialect]


class InterfaceRenderer:
    """Renders one self-contained block per type record."""

    def __init__(self, type_case: TypeCase = TypeCase.DEFAULT) -> None:
        self.type_case = type_case

    def render(self, record: TypeRecord) -> str:
        emitter = TextEmitter()
        if record.kind is TypeKind.STRUCT:
            self._render_struct(record, emitter)
        elif record.kind is TypeKind.TRAIT:
            self._render_trait(record, emitter)
        else:
            self._render_enum(record, emitter)
        return emitter.close_all()

    def render_all(self, records: Iterable[TypeRecord]) -> str:
        return "".join(self.render(record) for record in records)

    def _render_struct(self, record: TypeRecord, emitter: TextEmitter) -> None:
        constructors: List[OperationRecord] = []
        methods: List[OperationRecord] = []
        for operation in record.operations:
            (constructors if operation.is_constructor else methods).append(operation)

        emitter.emit_with_open_delimiter([F_CLASS], Delimiter.PARENTHESIS)
        _emit_docs(record.docs, emitter)
        emitter.emit_with_open_delimiter(["class ", record.name], Delimiter.BRACKET)

        if constructors:
            emitter.emit_statement_terminated(["self_type ", record.name])
            for constructor in constructors:
                _emit_docs(constructor.docs, emitter)
                emitter.emit_statement_terminated(
                    ["constructor ", record.name, "::", constructor.signature]
                )

        for method in methods:
            _emit_docs(method.docs, emitter)
            emitter.emit_statement_terminated(
                ["fn ", record.name, "::", method.signature, self._alias(method)]
            )

    def _render_trait(self, record: TypeRecord, emitter: TextEmitter) -> None:
        emitter.emit_with_open_delimiter([F_CALLBACK], Delimiter.PARENTHESIS)
        _emit_docs(record.docs, emitter)
        emitter.emit_with_open_delimiter(["callback ", record.name], Delimiter.BRACKET)
        emitter.emit_statement_terminated(["self_type ", record.name])
        for method in record.operations:
            _emit_docs(method.docs, emitter)
            emitter.emit_statement_terminated(
                [self.type_case.apply(method.name), " = ", record.name, "::", method.signature]
            )

    def _render_enum(self, record: TypeRecord, emitter: TextEmitter) -> None:
        emitter.emit_with_open_delimiter([F_ENUM], Delimiter.PARENTHESIS)
        _emit_docs(record.docs, emitter)
        emitter.emit_with_open_delimiter(["enum ", record.name], Delimiter.BRACKET)
        for variant in record.operations:
            _emit_docs(variant.docs, emitter)
            emitter.emit_item_terminated(
                [variant.signature, " = ", record.name, "::", variant.signature]
            )

    def _alias(self, method: OperationRecord) -> str:
        if self.type_case is TypeCase.DEFAULT:
            return ""
        alias = self.type_case.apply(method.name)
        return f"; alias {alias}" if alias else ""


def _emit_docs(docs: Iterable[str], emitter: TextEmitter) -> None:
    for line in docs:
        emitter.emit_then_newline([line], NewLine.STAY)


__all__ = ["BANNER", "F_CALLBACK", "F_CLASS", "F_ENUM", "InterfaceRenderer", "banner"]
