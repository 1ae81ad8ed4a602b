"""Generate foreign-interface description files from annotated Rust sources."""

from .config import Dialect, TypeCase
from .errors import (
    ConfigError,
    DeclarationError,
    EmitterError,
    IfaceGenError,
    SourceParseError,
    SourceReadError,
)
from .generator import Generator, GenerationResult, InterfaceGenerator

__version__ = "0.1.0"

__all__ = [
    "ConfigError",
    "DeclarationError",
    "Dialect",
    "EmitterError",
    "GenerationResult",
    "Generator",
    "IfaceGenError",
    "InterfaceGenerator",
    "SourceParseError",
    "SourceReadError",
    "TypeCase",
]
