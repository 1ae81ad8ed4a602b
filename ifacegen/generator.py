"""Pipeline orchestration: scan, extract, order, render and write."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

from .config import Dialect, TypeCase
from .extractor import SignatureExtractor
from .logging import get_logger, log_duration
from .ordering import order_registry
from .registry import ItemRegistry
from .renderer import InterfaceRenderer, banner
from .source_scanner import SourceScanner


@dataclass
class GenerationResult:
    """Summary of a completed generation run."""

    output_path: Path
    enum_names: List[str] = field(default_factory=list)
    emission_order: List[str] = field(default_factory=list)
    files_scanned: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.enum_names and not self.emission_order


class InterfaceGenerator:
    """Coordinates one interface generation run."""

    def __init__(
        self,
        scanner: SourceScanner | None = None,
        extractor: SignatureExtractor | None = None,
    ) -> None:
        self.scanner = scanner or SourceScanner()
        self.extractor = extractor or SignatureExtractor()
        self.logger = get_logger("generator")

    def collect(self, source_root: Path, exclude_paths: Sequence[str] = ()) -> tuple[ItemRegistry, int]:
        """Scan ``source_root`` into a registry and compute its emission order."""
        root = Path(source_root).expanduser().resolve()
        files = self.scanner.scan(root, exclude_paths)
        self.logger.debug("Scanner discovered %d source files", len(files))

        registry = ItemRegistry()
        for path in files:
            display = path.relative_to(root).as_posix()
            registry.register_all(self.extractor.extract_file(path, display_path=display))

        order_registry(registry)
        return registry, len(files)

    def render(self, registry: ItemRegistry, *, type_case: TypeCase, dialect: Dialect) -> str:
        """Render the whole interface file: banner, enums, then ordered types."""
        renderer = InterfaceRenderer(type_case)
        return (
            banner(dialect)
            + renderer.render_all(registry.enumerations)
            + renderer.render_all(registry.ordered_types())
        )

    def run(
        self,
        source_root: Path,
        output_path: Path,
        *,
        type_case: TypeCase = TypeCase.DEFAULT,
        dialect: Dialect = Dialect.JAVA,
        exclude_paths: Sequence[str] = (),
    ) -> GenerationResult:
        self.logger.info("Generating interface file from %s", source_root)

        with log_duration(self.logger, "Scanning and ordering"):
            registry, files_scanned = self.collect(source_root, exclude_paths)
        if registry.is_empty():
            self.logger.warning(
                "No annotated items found; annotate methods, traits and enums "
                "with #[generate_interface] to include them"
            )
        with log_duration(self.logger, "Rendering"):
            content = self.render(registry, type_case=type_case, dialect=dialect)

        output = Path(output_path).expanduser()
        output.parent.mkdir(parents=True, exist_ok=True)
        with output.open("w", encoding="utf-8", newline="\n") as handle:
            handle.write(content)

        self.logger.info(
            "Interface file written to %s (%d enums, %d types from %d files)",
            output,
            len(registry.enumerations),
            len(registry.emission_order),
            files_scanned,
        )
        return GenerationResult(
            output_path=output,
            enum_names=[record.name for record in registry.enumerations],
            emission_order=list(registry.emission_order),
            files_scanned=files_scanned,
        )


class Generator:
    """Builder for use from build scripts.

    ``source_folder`` is walked recursively; ``generate_interface`` overwrites
    the interface file if it already exists.
    """

    def __init__(
        self,
        type_case: TypeCase,
        source_folder: Path,
        *,
        exclude_paths: Sequence[str] = (),
        pipeline: Optional[InterfaceGenerator] = None,
    ) -> None:
        self.type_case = type_case
        self.source_folder = Path(source_folder)
        self.exclude_paths = list(exclude_paths)
        self._pipeline = pipeline or InterfaceGenerator()

    def generate_interface(
        self, interface_file_path: Path, dialect: Dialect = Dialect.JAVA
    ) -> GenerationResult:
        return self._pipeline.run(
            self.source_folder,
            Path(interface_file_path),
            type_case=self.type_case,
            dialect=dialect,
            exclude_paths=self.exclude_paths,
        )


__all__ = ["GenerationResult", "Generator", "InterfaceGenerator"]
