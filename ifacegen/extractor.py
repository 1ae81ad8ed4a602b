"""Tree-sitter powered extraction of annotated Rust declarations."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional

import tree_sitter_rust
from tree_sitter import Language, Node, Parser

from .errors import DeclarationError, SourceParseError, SourceReadError
from .logging import get_logger
from .markers import ACCESS_METHODS_MARKER, AttributeMarkerInspector, MarkerInspector
from .models import Declaration, DeclarationKind, OperationRecord
from .signatures import normalize_signature, render_tokens

RUST_LANGUAGE = Language(tree_sitter_rust.language())

_INDIRECTION_TYPES = {"reference_type", "pointer_type"}
_TRAIT_OBJECT_TYPES = {"dynamic_type", "abstract_type"}
_COMMENT_TYPES = {"line_comment", "block_comment"}
_METHOD_TYPES = {"function_item", "function_signature_item"}


class SignatureExtractor:
    """Turns annotated items of a Rust file into registry declarations."""

    def __init__(self, inspector: Optional[MarkerInspector] = None) -> None:
        self._inspector = inspector or AttributeMarkerInspector()
        self._parser = Parser(RUST_LANGUAGE)
        self.logger = get_logger("extractor")

    def extract_file(self, path: Path, display_path: Optional[str] = None) -> List[Declaration]:
        label = display_path or str(path)
        try:
            source = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise SourceReadError(f"Unable to read file: {label}") from exc
        return self.extract_source(source, label)

    def extract_source(self, source: str, path: str = "<string>") -> List[Declaration]:
        source_bytes = source.encode("utf-8")
        tree = self._parser.parse(source_bytes)
        if tree.root_node.has_error:
            raise SourceParseError(path, _first_error_line(tree.root_node))
        declarations = list(self._scan_items(tree.root_node, source_bytes, path))
        self.logger.debug("Found %d annotated declarations in %s", len(declarations), path)
        return declarations

    def _scan_items(self, container: Node, source: bytes, path: str) -> Iterable[Declaration]:
        for node in container.named_children:
            kind = node.type
            if kind == "struct_item":
                yield from self._struct(node, source, path)
            elif kind == "enum_item":
                yield from self._enum(node, source, path)
            elif kind == "trait_item":
                yield from self._trait(node, source, path)
            elif kind == "impl_item":
                yield from self._impl(node, source, path)
            elif kind == "function_item":
                if self._inspector.inspect(node, source).is_marked:
                    name = _field_text(node, "name", source)
                    raise DeclarationError(
                        "Interface functions should be declared in impl blocks. "
                        f"Name of function {name}",
                        name=name,
                        path=path,
                    )
            elif kind == "mod_item":
                body = node.child_by_field_name("body")
                if body is not None:
                    yield from self._scan_items(body, source, path)

    def _struct(self, node: Node, source: bytes, path: str) -> Iterable[Declaration]:
        facts = self._inspector.inspect(node, source)
        if not facts.declares_struct:
            return
        name = _field_text(node, "name", source)
        operations: List[OperationRecord] = []
        if facts.generates_access_methods:
            operations = self._access_methods(node, name, source, path)
        yield Declaration(
            kind=DeclarationKind.STRUCT,
            name=name,
            path=path,
            docs=list(facts.doc_lines),
            operations=operations,
        )

    def _enum(self, node: Node, source: bytes, path: str) -> Iterable[Declaration]:
        facts = self._inspector.inspect(node, source)
        if not facts.is_marked:
            return
        variants: List[OperationRecord] = []
        body = node.child_by_field_name("body")
        if body is not None:
            for variant in body.named_children:
                if variant.type != "enum_variant":
                    continue
                docs = list(self._inspector.inspect(variant, source).doc_lines)
                variants.append(OperationRecord.variant(_field_text(variant, "name", source), docs))
        yield Declaration(
            kind=DeclarationKind.ENUM,
            name=_field_text(node, "name", source),
            path=path,
            docs=list(facts.doc_lines),
            operations=variants,
        )

    def _trait(self, node: Node, source: bytes, path: str) -> Iterable[Declaration]:
        facts = self._inspector.inspect(node, source)
        if not facts.is_marked:
            return
        methods: List[OperationRecord] = []
        body = node.child_by_field_name("body")
        if body is not None:
            for member in body.named_children:
                if member.type not in _METHOD_TYPES:
                    continue
                docs = list(self._inspector.inspect(member, source).doc_lines)
                methods.append(method_record(member, source, docs=docs, is_constructor=False))
        yield Declaration(
            kind=DeclarationKind.TRAIT,
            name=_field_text(node, "name", source),
            path=path,
            docs=list(facts.doc_lines),
            operations=methods,
        )

    def _impl(self, node: Node, source: bytes, path: str) -> Iterable[Declaration]:
        self_type = node.child_by_field_name("type")
        body = node.child_by_field_name("body")
        if self_type is None or body is None:
            return
        name = _type_head(self_type, source)
        if name is None:
            return
        for member in body.named_children:
            if member.type != "function_item":
                continue
            facts = self._inspector.inspect(member, source)
            if not facts.is_marked:
                continue
            record = method_record(
                member,
                source,
                docs=list(facts.doc_lines),
                is_constructor=facts.is_constructor,
            )
            yield Declaration(
                kind=DeclarationKind.OPERATION,
                name=name,
                path=path,
                operations=[record],
            )

    def _access_methods(
        self, node: Node, name: str, source: bytes, path: str
    ) -> List[OperationRecord]:
        """Mirror the constructor, setters and getters the attribute macro generates."""
        body = node.child_by_field_name("body")
        if body is None or body.type != "field_declaration_list":
            raise DeclarationError(
                f"{ACCESS_METHODS_MARKER} requires a struct with named fields: {name}",
                name=name,
                path=path,
            )

        fields = []
        for child in body.named_children:
            if child.type != "field_declaration":
                continue
            type_node = child.child_by_field_name("type")
            if type_node is None:
                continue
            docs = list(self._inspector.inspect(child, source).doc_lines)
            fields.append((_field_text(child, "name", source), type_node, docs))

        parameters = ", ".join(f"{field}: {_text(type_node, source)}" for field, type_node, _ in fields)
        operations = [
            OperationRecord.method(
                normalize_signature(f"new({parameters}) -> {name}"),
                [],
                "new",
                True,
                [collapse_type(type_node, source) for _, type_node, _ in fields],
                [name],
            )
        ]
        for field, type_node, docs in fields:
            type_text = _text(type_node, source)
            operations.append(
                OperationRecord.method(
                    normalize_signature(f"set_{field}(&mut self, {field}: {type_text})"),
                    [],
                    f"set_{field}",
                    False,
                    [collapse_type(type_node, source)],
                    [],
                )
            )
            operations.append(
                OperationRecord.method(
                    normalize_signature(f"get_{field}(&self) -> &{type_text}"),
                    docs,
                    f"get_{field}",
                    False,
                    [],
                    [],
                )
            )
        return operations


def method_record(
    node: Node, source: bytes, *, docs: List[str], is_constructor: bool
) -> OperationRecord:
    """Build the operation record of a ``fn`` item or trait method signature."""
    name = _field_text(node, "name", source)
    parameter_types: List[str] = []
    parameters = node.child_by_field_name("parameters")
    if parameters is not None:
        for parameter in parameters.named_children:
            type_node = _parameter_type(parameter, source)
            if type_node is not None:
                parameter_types.append(collapse_type(type_node, source))

    return_node = node.child_by_field_name("return_type")
    return_types = return_type_names(return_node, source) if return_node is not None else []

    return OperationRecord.method(
        normalize_signature(_signature_text(node, source)),
        docs,
        name,
        is_constructor,
        parameter_types,
        return_types,
    )


def collapse_type(node: Node, source: bytes) -> str:
    """Reduce a parameter type to the name of the type it carries.

    ``&mut Foo``, ``Box<dyn Foo>`` and ``Option<Vec<Foo>>`` all collapse to
    ``Foo``; a path collapses to its last segment.
    """
    current: Optional[Node] = node
    last = node
    while current is not None:
        last = current
        kind = current.type
        if kind in _INDIRECTION_TYPES:
            current = current.child_by_field_name("type")
        elif kind in _TRAIT_OBJECT_TYPES:
            current = current.child_by_field_name("trait")
        elif kind == "generic_type":
            argument = _first_type_argument(current)
            current = argument if argument is not None else current.child_by_field_name("type")
        elif kind == "type_binding":
            current = current.child_by_field_name("type")
        elif kind == "bounded_type":
            current = current.named_children[0] if current.named_children else None
        elif kind == "scoped_type_identifier":
            name = current.child_by_field_name("name")
            return _text(name, source) if name is not None else render_tokens(_text(current, source))
        else:
            return render_tokens(_text(current, source))
    return render_tokens(_text(last, source))


def return_type_names(node: Node, source: bytes) -> List[str]:
    """List the type names of a path-shaped return type.

    Every path segment contributes its identifier and every generic argument
    contributes its full rendering, so ``Result<Box<Foo>, Error>`` yields
    ``["Result", "Box < Foo >", "Error"]``. References, tuples and other
    non-path types yield nothing.
    """
    kind = node.type
    if kind in {"type_identifier", "primitive_type"}:
        return [_text(node, source)]
    if kind == "scoped_type_identifier":
        return _path_segments(node, source)
    if kind == "generic_type":
        head = node.child_by_field_name("type")
        names = _path_segments(head, source) if head is not None else []
        arguments = node.child_by_field_name("type_arguments")
        if arguments is not None:
            for argument in arguments.named_children:
                if argument.type in _COMMENT_TYPES:
                    continue
                names.append(render_tokens(_text(argument, source)))
        return names
    return []


def _path_segments(node: Node, source: bytes) -> List[str]:
    if node.type in {"scoped_type_identifier", "scoped_identifier"}:
        path = node.child_by_field_name("path")
        name = node.child_by_field_name("name")
        segments = _path_segments(path, source) if path is not None else []
        if name is not None:
            segments.append(_text(name, source))
        return segments
    if node.type == "generic_type":
        return return_type_names(node, source)
    return [_text(node, source)]


def _first_type_argument(generic: Node) -> Optional[Node]:
    arguments = generic.child_by_field_name("type_arguments")
    if arguments is None:
        return None
    for argument in arguments.named_children:
        if argument.type in _COMMENT_TYPES or argument.type == "lifetime":
            continue
        return argument
    return None


def _parameter_type(parameter: Node, source: bytes) -> Optional[Node]:
    kind = parameter.type
    if kind in {"self_parameter", "attribute_item", "variadic_parameter"} or kind in _COMMENT_TYPES:
        return None
    if kind == "parameter":
        pattern = parameter.child_by_field_name("pattern")
        if pattern is not None and _text(pattern, source) == "self":
            # `self: Box<Self>` is a receiver too.
            return None
        return parameter.child_by_field_name("type")
    return parameter


def _type_head(node: Node, source: bytes) -> Optional[str]:
    kind = node.type
    if kind == "type_identifier":
        return _text(node, source)
    if kind == "generic_type":
        head = node.child_by_field_name("type")
        return _type_head(head, source) if head is not None else None
    if kind == "scoped_type_identifier":
        name = node.child_by_field_name("name")
        return _text(name, source) if name is not None else None
    return None


def _signature_text(node: Node, source: bytes) -> str:
    """Return the source between the function name and its body or ``;``."""
    name = node.child_by_field_name("name")
    start = name.start_byte if name is not None else node.start_byte
    end = node.end_byte
    body = node.child_by_field_name("body")
    if body is not None:
        end = body.start_byte
    elif node.children and node.children[-1].type == ";":
        end = node.children[-1].start_byte
    return source[start:end].decode("utf-8", errors="replace")


def _first_error_line(root: Node) -> Optional[int]:
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            return node.start_point[0] + 1
        if node.has_error:
            stack.extend(reversed(node.children))
    return None


def _field_text(node: Node, field: str, source: bytes) -> str:
    child = node.child_by_field_name(field)
    return _text(child, source) if child is not None else ""


def _text(node: Node, source: bytes) -> str:
    return source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


__all__ = [
    "RUST_LANGUAGE",
    "SignatureExtractor",
    "collapse_type",
    "method_record",
    "return_type_names",
]
