"""CLI entrypoint for ifacegen."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError, Dialect, TypeCase, load_config
from .errors import IfaceGenError
from .generator import InterfaceGenerator
from .logging import configure_logging, log_level


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ifacegen",
        description=(
            "Generate a foreign interface description file from Rust sources "
            "annotated with #[generate_interface]."
        ),
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        default=False,
        help="Only report warnings and errors.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write debug-level log records to this file.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a .ifacegen.yml file (defaults to the one in the source folder).",
    )
    parser.add_argument(
        "--type-case",
        choices=[member.value for member in TypeCase],
        default=None,
        help="Case used for method aliases and callback names.",
    )
    parser.add_argument(
        "--dialect",
        choices=[member.value for member in Dialect],
        default=None,
        help="Target language of the bridge generator.",
    )
    parser.add_argument(
        "source",
        nargs="?",
        default=".",
        help="Folder walked recursively for .rs files (defaults to current directory).",
    )
    parser.add_argument(
        "output",
        nargs="?",
        default=None,
        help="Interface file to write; overwritten if it exists.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for ifacegen."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(log_level(verbose=args.verbose, quiet=args.quiet), log_file=args.log_file)

    source = Path(args.source).expanduser()
    try:
        config = load_config(args.config if args.config is not None else source)
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    type_case = TypeCase(args.type_case) if args.type_case else config.type_case
    dialect = Dialect(args.dialect) if args.dialect else config.dialect
    output = Path(args.output).expanduser() if args.output else config.output
    if output is None:
        parser.exit(2, "No output file given; pass OUTPUT or set `output` in .ifacegen.yml\n")

    try:
        result = InterfaceGenerator().run(
            source,
            output,
            type_case=type_case,
            dialect=dialect,
            exclude_paths=config.exclude_paths,
        )
    except IfaceGenError as exc:
        parser.exit(1, f"ifacegen failed: {exc}\n")
    except OSError as exc:
        parser.exit(1, f"ifacegen failed: unable to write {output}: {exc}\n")

    print(f"Interface file written to {_relativize(result.output_path)}")


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
