"""Helper utilities for constructing temporary Rust source trees in tests."""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Mapping

from ifacegen.config import Dialect, TypeCase
from ifacegen.generator import GenerationResult, InterfaceGenerator


class SourceTreeBuilder:
    """Utility for writing Rust files into a throwaway crate and generating from it."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "crate" / "src"
        self.root.mkdir(parents=True)
        self.output = tmp_path / "out" / "java_glue.rs.in"
        self._generator = InterfaceGenerator()

    def write(self, files: Mapping[str, str]) -> None:
        """Write `path -> contents` entries below the source root."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            normalised = textwrap.dedent(content).lstrip("\n")
            path.write_text(normalised, encoding="utf-8")

    def generate(
        self,
        type_case: TypeCase = TypeCase.DEFAULT,
        dialect: Dialect = Dialect.JAVA,
    ) -> GenerationResult:
        """Run the full pipeline over the source root."""
        return self._generator.run(self.root, self.output, type_case=type_case, dialect=dialect)

    def read_output(self) -> str:
        return self.output.read_text(encoding="utf-8")


__all__ = ["SourceTreeBuilder"]
