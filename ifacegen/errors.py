"""Exception hierarchy shared by every ifacegen stage."""

from __future__ import annotations

from pathlib import Path


class IfaceGenError(RuntimeError):
    """Base class for failures that abort an interface generation run."""


class ConfigError(IfaceGenError):
    """Raised when the configuration file or a configured value is invalid."""


class DeclarationError(IfaceGenError):
    """Raised when annotated declarations contradict each other.

    Covers duplicate type names, marked functions outside an ``impl`` or
    ``trait`` block and a name that is used with two different shapes.
    """

    def __init__(self, message: str, *, name: str | None = None, path: str | None = None) -> None:
        if path:
            message = f"{message} (in {path})"
        super().__init__(message)
        self.name = name
        self.path = path


class SourceParseError(IfaceGenError):
    """Raised when a source file cannot be parsed as Rust."""

    def __init__(self, path: str | Path, line: int | None = None) -> None:
        location = f"{path}:{line}" if line is not None else str(path)
        super().__init__(f"Invalid rust file: {location}")
        self.path = str(path)
        self.line = line


class SourceReadError(IfaceGenError, OSError):
    """Raised when the source tree or one of its files cannot be read."""


class EmitterError(IfaceGenError):
    """Raised when the text emitter is driven into an inconsistent state."""


__all__ = [
    "ConfigError",
    "DeclarationError",
    "EmitterError",
    "IfaceGenError",
    "SourceParseError",
    "SourceReadError",
]
