"""Token-level normalization of Rust signatures and types.

Signatures are rendered the way the bridge generator expects to read them:
tokens inside parentheses and brackets are separated by single spaces, while
tokens between groups are joined directly, so ``fn new(value: i64) -> Foo``
becomes ``new(value : i64)->Foo``.
"""

from __future__ import annotations

import re
from typing import Iterator, List, Tuple

_TOKEN_RE = re.compile(
    r"""
      (?P<ws>\s+)
    | (?P<comment>//[^\n]*|/\*.*?\*/)
    | (?P<char>'(?:\\.|[^\\'])')
    | (?P<lifetime>'[A-Za-z_][A-Za-z0-9_]*)
    | (?P<string>b?r?\#*"(?:\\.|[^\\"])*"\#*)
    | (?P<word>[A-Za-z_][A-Za-z0-9_]*)
    | (?P<number>[0-9][A-Za-z0-9_.]*)
    | (?P<op>->|=>|::|\.\.\.|\.\.=|\.\.)
    | (?P<punct>\S)
    """,
    re.VERBOSE | re.DOTALL,
)

_OPENING = {"(": ")", "[": "]", "{": "}"}
_CLOSING = {")", "]", "}"}
_WORD_KINDS = {"word", "number", "char", "string"}

Token = Tuple[str, str]


def tokenize(text: str) -> Iterator[Token]:
    """Yield ``(kind, value)`` pairs, dropping whitespace and comments."""
    for match in _TOKEN_RE.finditer(text):
        kind = match.lastgroup or "punct"
        if kind in {"ws", "comment"}:
            continue
        yield kind, match.group()


def render_tokens(text: str) -> str:
    """Render a type or expression with one space between every token.

    This is the spacing used inside a parenthesized group, e.g.
    ``Box<Box<i64, Foo>>`` renders as ``Box < Box < i64 , Foo > >``.
    """
    return _render_group(list(tokenize(text)))


def normalize_signature(text: str) -> str:
    """Normalize a function signature that starts at the function name.

    Any leading qualifiers (``pub``, ``unsafe``, ``extern "C"``, ``fn``) must
    already have been removed by the caller. A lifetime at the top level is
    kept as one unit followed by a single space.
    """
    pieces: List[str] = []
    tokens = list(tokenize(text))
    index = 0
    previous_kind = ""
    while index < len(tokens):
        kind, value = tokens[index]
        if kind == "punct" and value in _OPENING:
            end = _matching_close(tokens, index)
            pieces.append(value + _render_group(tokens[index + 1 : end]) + _closing(tokens, end))
            previous_kind = "group"
            index = end + 1
            continue
        if kind == "lifetime":
            pieces.append(f"{value} ")
        elif kind in _WORD_KINDS and previous_kind in _WORD_KINDS:
            pieces.append(f" {value}")
        else:
            pieces.append(value)
        previous_kind = kind
        index += 1
    return "".join(pieces)


def _render_group(tokens: List[Token]) -> str:
    pieces: List[str] = []
    index = 0
    while index < len(tokens):
        kind, value = tokens[index]
        if pieces and not (kind == "punct" and value in _CLOSING):
            pieces.append(" ")
        if kind == "punct" and value in _OPENING:
            end = _matching_close(tokens, index)
            inner = _render_group(tokens[index + 1 : end])
            if value == "{" and inner:
                inner = f" {inner} "
            pieces.append(value + inner + _closing(tokens, end))
            index = end + 1
            continue
        pieces.append(value)
        index += 1
    return "".join(pieces)


def _matching_close(tokens: List[Token], start: int) -> int:
    """Return the index of the delimiter closing ``tokens[start]``, or ``len(tokens)``."""
    depth = 0
    for position in range(start, len(tokens)):
        kind, value = tokens[position]
        if kind != "punct":
            continue
        if value in _OPENING:
            depth += 1
        elif value in _CLOSING:
            depth -= 1
            if depth == 0:
                return position
    return len(tokens)


def _closing(tokens: List[Token], end: int) -> str:
    return tokens[end][1] if end < len(tokens) else ""


__all__ = ["normalize_signature", "render_tokens", "tokenize"]
