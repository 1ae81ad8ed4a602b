"""Stateful text emitter for interface blocks."""

from __future__ import annotations

from enum import Enum
from typing import List, Sequence

from .errors import EmitterError

INDENT = "\t"


class NewLine(Enum):
    """Indentation change applied by the newline that follows emitted text.

    ``STAY`` keeps the current depth, ``INCREASE`` indents one tab deeper and
    ``DECREASE`` one tab shallower.
    """

    STAY = 0
    INCREASE = 1
    DECREASE = -1


class Delimiter(Enum):
    BRACKET = (" {", "}")
    PARENTHESIS = ("(", ")")

    @property
    def opening(self) -> str:
        return self.value[0]

    @property
    def closing(self) -> str:
        return self.value[1]


class TextEmitter:
    """Accumulates indented text while keeping track of open delimiters.

    Every newline is followed by the indentation of the next line, so text
    can be appended directly after a newline. A block starts at depth zero.
    """

    def __init__(self, depth: int = 0) -> None:
        if depth < 0:
            raise EmitterError("Indentation depth cannot be negative")
        self._text = ""
        self.depth = depth
        self._delimiters: List[Delimiter] = []

    @property
    def text(self) -> str:
        return self._text

    @property
    def open_delimiters(self) -> List[Delimiter]:
        return list(self._delimiters)

    def emit_then_newline(self, tokens: Sequence[str], shift: NewLine = NewLine.STAY) -> None:
        if not tokens:
            raise EmitterError("Nothing to emit before a newline")
        self._append(tokens)
        self._newline(shift)

    def emit_with_open_delimiter(
        self, tokens: Sequence[str], delimiter: Delimiter, shift: NewLine = NewLine.INCREASE
    ) -> None:
        self._append(tokens)
        self._text += delimiter.opening
        self._delimiters.append(delimiter)
        self._newline(shift)

    def emit_statement_terminated(self, tokens: Sequence[str]) -> None:
        """Emit ``tokens;`` and start a line at the same depth."""
        self._append(tokens)
        self._text += ";"
        self._newline(NewLine.STAY)

    def emit_item_terminated(self, tokens: Sequence[str]) -> None:
        """Emit ``tokens,`` and start a line at the same depth."""
        self._append(tokens)
        self._text += ","
        self._newline(NewLine.STAY)

    def close_all(self) -> str:
        """Close every open delimiter, terminate the block with ``;`` and return the text."""
        while self._delimiters:
            delimiter = self._delimiters.pop()
            if not self._text.endswith(INDENT):
                raise EmitterError(f"Expected indentation before closing {delimiter.closing!r}")
            self._text = self._text[: -len(INDENT)]
            self.emit_then_newline([delimiter.closing], NewLine.DECREASE)
        if not self._text.endswith("\n"):
            raise EmitterError("A closed block must end with a newline")
        self._text = self._text[:-1] + ";\n"
        return self._text

    def _append(self, tokens: Sequence[str]) -> None:
        self._text += "".join(tokens)

    def _newline(self, shift: NewLine) -> None:
        depth = self.depth + shift.value
        if depth < 0:
            raise EmitterError("Indentation depth cannot be negative")
        self.depth = depth
        self._text += "\n" + INDENT * depth


__all__ = ["Delimiter", "INDENT", "NewLine", "TextEmitter"]
