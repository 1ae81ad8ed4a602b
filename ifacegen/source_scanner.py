"""Source tree walking for Rust files."""

from __future__ import annotations

import os
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterable, Iterator, List, NamedTuple, Optional, Sequence

from .errors import SourceReadError

# Version control metadata, editor state and cargo build output never hold sources to scan.
_SKIPPED_DIRS = frozenset({".git", ".hg", ".svn", ".idea", ".vscode", "target"})

_SOURCE_SUFFIX = ".rs"


class ExcludePattern(NamedTuple):
    """One ``.gitignore`` line or ``exclude_paths`` entry.

    A pattern containing a slash is matched against the path relative to the
    source root; any other pattern is matched against the entry name alone.
    Excluded directories are pruned, so nothing below them is ever matched.
    """

    glob: str
    negated: bool = False
    directories_only: bool = False
    relative_to_root: bool = False

    @classmethod
    def parse(cls, line: str) -> Optional["ExcludePattern"]:
        text = line.strip()
        if not text or text.startswith("#"):
            return None
        negated = text.startswith("!")
        if negated:
            text = text[1:]
        directories_only = text.endswith("/")
        text = text.rstrip("/")
        glob = text.lstrip("/")
        if not glob:
            return None
        return cls(glob, negated, directories_only, "/" in text)

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if self.directories_only and not is_dir:
            return False
        if self.relative_to_root:
            return fnmatchcase(rel_path, self.glob)
        return fnmatchcase(rel_path.rsplit("/", 1)[-1], self.glob)


def load_exclude_patterns(root: Path, exclude_paths: Iterable[str] = ()) -> List[ExcludePattern]:
    """Read ``root/.gitignore`` and append the configured ``exclude_paths``."""
    lines: List[str] = []
    gitignore = root / ".gitignore"
    if gitignore.is_file():
        try:
            lines.extend(gitignore.read_text(encoding="utf-8").splitlines())
        except (OSError, UnicodeDecodeError) as exc:
            raise SourceReadError(f"Unable to read {gitignore}: {exc}") from exc
    lines.extend(exclude_paths)

    patterns = (ExcludePattern.parse(line) for line in lines)
    return [pattern for pattern in patterns if pattern is not None]


def is_excluded(rel_path: str, is_dir: bool, patterns: Sequence[ExcludePattern]) -> bool:
    """Apply ``patterns`` in order; the last one that matches decides."""
    excluded = False
    for pattern in patterns:
        if pattern.matches(rel_path, is_dir):
            excluded = not pattern.negated
    return excluded


def _iter_files(root: Path, patterns: Sequence[ExcludePattern]) -> Iterator[Path]:
    for dirpath, dirnames, filenames in os.walk(root):
        current_dir = Path(dirpath)
        rel_dir = current_dir.relative_to(root).as_posix() if current_dir != root else ""

        kept_dirs = []
        for name in sorted(dirnames):
            if name in _SKIPPED_DIRS:
                continue
            rel_path = f"{rel_dir}/{name}" if rel_dir else name
            if is_excluded(rel_path, True, patterns):
                continue
            kept_dirs.append(name)
        # os.walk descends in list order, which keeps the file order stable across runs.
        dirnames[:] = kept_dirs

        for filename in sorted(filenames):
            if not filename.endswith(_SOURCE_SUFFIX):
                continue
            rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
            if is_excluded(rel_path, False, patterns):
                continue
            yield current_dir / filename


class SourceScanner:
    """Lists the Rust files below a source root in a stable order."""

    def scan(self, root: str | Path, exclude_paths: Sequence[str] = ()) -> List[Path]:
        root_path = Path(root).expanduser().resolve()
        if not root_path.exists():
            raise SourceReadError(f"Source folder not found: {root}")
        if not root_path.is_dir():
            raise SourceReadError(f"Source folder is not a directory: {root}")

        return list(_iter_files(root_path, load_exclude_patterns(root_path, exclude_paths)))


__all__ = ["ExcludePattern", "SourceScanner", "is_excluded", "load_exclude_patterns"]
