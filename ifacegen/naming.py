"""Identifier case conversion for emitted aliases."""

from __future__ import annotations

import re
from typing import List

_WORD_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def split_words(name: str) -> List[str]:
    """Split ``getHTTPValue`` or ``get_http_value`` into lowercase words."""
    words: List[str] = []
    for chunk in re.split(r"[^A-Za-z0-9]+", name):
        if not chunk:
            continue
        words.extend(part.lower() for part in _WORD_BOUNDARY.split(chunk) if part)
    return words


def to_snake_case(name: str) -> str:
    return "_".join(split_words(name))


def to_camel_case(name: str) -> str:
    words = split_words(name)
    if not words:
        return ""
    return words[0] + "".join(word[:1].upper() + word[1:] for word in words[1:])


__all__ = ["split_words", "to_camel_case", "to_snake_case"]
