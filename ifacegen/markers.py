"""Attribute inspection for annotated Rust declarations.

Attributes and doc comments are siblings that precede an item in the
tree-sitter syntax tree, so an item's markers are found by walking backwards
from the item until the previous non-attribute node.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional, Tuple

from tree_sitter import Node

INTERFACE_MARKER = "generate_interface"
DOC_MARKER = "generate_interface_doc"
ACCESS_METHODS_MARKER = "generate_access_methods"
CONSTRUCTOR_ARGUMENT = "constructor"

_ATTRIBUTE_NODES = {"attribute_item", "line_comment", "block_comment"}


@dataclass(frozen=True)
class MarkerFacts:
    """What the attributes in front of a declaration say about it."""

    markers: FrozenSet[str] = frozenset()
    is_constructor: bool = False
    doc_lines: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_marked(self) -> bool:
        return INTERFACE_MARKER in self.markers

    @property
    def declares_struct(self) -> bool:
        return DOC_MARKER in self.markers or ACCESS_METHODS_MARKER in self.markers

    @property
    def generates_access_methods(self) -> bool:
        return ACCESS_METHODS_MARKER in self.markers


class MarkerInspector(ABC):
    """Contract for providers of marker facts."""

    @abstractmethod
    def inspect(self, node: Node, source: bytes) -> MarkerFacts:
        """Return the marker facts for the declaration ``node``."""


class AttributeMarkerInspector(MarkerInspector):
    """Reads ``#[generate_interface]``-style attributes and doc comments."""

    def inspect(self, node: Node, source: bytes) -> MarkerFacts:
        markers: set[str] = set()
        is_constructor = False
        docs: List[str] = []

        for sibling in _leading_attributes(node):
            if sibling.type == "attribute_item":
                attribute = _attribute_of(sibling)
                if attribute is None:
                    continue
                name = _attribute_name(attribute, source)
                if name == "doc":
                    doc = _doc_attribute_text(attribute, source)
                    if doc is not None:
                        docs.append(f"///{doc}")
                    continue
                if name is None:
                    continue
                markers.add(name)
                if name == INTERFACE_MARKER:
                    arguments = attribute.child_by_field_name("arguments")
                    if arguments is not None and CONSTRUCTOR_ARGUMENT in _text(arguments, source):
                        is_constructor = True
            else:
                docs.extend(_doc_comment_lines(sibling, source))

        return MarkerFacts(
            markers=frozenset(markers),
            is_constructor=is_constructor,
            doc_lines=tuple(docs),
        )


def _leading_attributes(node: Node) -> List[Node]:
    collected: List[Node] = []
    sibling = node.prev_sibling
    while sibling is not None and sibling.type in _ATTRIBUTE_NODES:
        collected.append(sibling)
        sibling = sibling.prev_sibling
    collected.reverse()
    return collected


def _attribute_of(attribute_item: Node) -> Optional[Node]:
    for child in attribute_item.named_children:
        if child.type == "attribute":
            return child
    return None


def _attribute_name(attribute: Node, source: bytes) -> Optional[str]:
    """Return the last path segment, so ``rifgen::attr::generate_interface`` matches too."""
    for child in attribute.named_children:
        if child.type == "identifier":
            return _text(child, source)
        if child.type == "scoped_identifier":
            name = child.child_by_field_name("name")
            return _text(name, source) if name is not None else None
    return None


def _doc_attribute_text(attribute: Node, source: bytes) -> Optional[str]:
    value = attribute.child_by_field_name("value")
    if value is None or value.type not in {"string_literal", "raw_string_literal"}:
        return None
    literal = _text(value, source)
    start = literal.find('"')
    end = literal.rfind('"')
    if start == -1 or end <= start:
        return None
    return literal[start + 1 : end]


def _doc_comment_lines(comment: Node, source: bytes) -> List[str]:
    text = _text(comment, source).rstrip("\r\n")
    if comment.type == "line_comment":
        if text.startswith("///") and not text.startswith("////"):
            return [text]
        return []
    if not text.startswith("/**") or text.startswith("/***") or text == "/**/":
        return []
    body = text[3:-2] if text.endswith("*/") else text[3:]
    lines: List[str] = []
    for raw_line in body.splitlines():
        line = raw_line.strip()
        if line.startswith("*"):
            line = line[1:]
        if line.strip():
            lines.append(f"///{line if line.startswith(' ') else ' ' + line}")
    return lines


def _text(node: Node, source: bytes) -> str:
    return source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


__all__ = [
    "ACCESS_METHODS_MARKER",
    "AttributeMarkerInspector",
    "DOC_MARKER",
    "INTERFACE_MARKER",
    "MarkerFacts",
    "MarkerInspector",
]
