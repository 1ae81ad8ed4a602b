"""CLI behaviour tests."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from ifacegen import cli
from ifacegen.cli import _build_parser, main
from tests._fixtures.rust_sources import COUNTER_SOURCE
from tests._fixtures.source_builder import SourceTreeBuilder


@pytest.fixture(autouse=True)
def _quiet_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli, "configure_logging", lambda *args, **kwargs: None)


def test_cli_defaults() -> None:
    args = _build_parser().parse_args([])
    assert args.source == "."
    assert args.output is None
    assert args.type_case is None
    assert args.dialect is None
    assert args.verbose is False


def test_cli_accepts_options_around_positionals() -> None:
    args = _build_parser().parse_args(["--verbose", "src", "glue.rs.in", "--type-case", "camel"])
    assert args.source == "src"
    assert args.output == "glue.rs.in"
    assert args.verbose is True
    assert args.type_case == "camel"


def test_cli_rejects_unknown_dialect() -> None:
    with pytest.raises(SystemExit) as excinfo:
        _build_parser().parse_args(["--dialect", "swift"])
    assert excinfo.value.code == 2


def test_main_writes_interface_file(
    source_builder: SourceTreeBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    source_builder.write({"lib.rs": COUNTER_SOURCE})

    main([str(source_builder.root), str(source_builder.output), "--type-case", "snake"])

    assert "alias get_count;" in source_builder.read_output()
    assert "Interface file written to" in capsys.readouterr().out


def test_main_requires_an_output(
    source_builder: SourceTreeBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main([str(source_builder.root)])
    assert excinfo.value.code == 2
    assert "No output file given" in capsys.readouterr().err


def test_main_reads_settings_from_config(source_builder: SourceTreeBuilder) -> None:
    source_builder.write({"lib.rs": COUNTER_SOURCE})
    (source_builder.root / ".ifacegen.yml").write_text(
        "type_case: snake\ndialect: cpp\noutput: glue.rs.in\n", encoding="utf-8"
    )

    main([str(source_builder.root)])

    text = (source_builder.root / "glue.rs.in").read_text(encoding="utf-8")
    assert "alias get_count;" in text
    assert "jni_sys" not in text


def test_command_line_overrides_config(source_builder: SourceTreeBuilder) -> None:
    source_builder.write({"lib.rs": COUNTER_SOURCE})
    (source_builder.root / ".ifacegen.yml").write_text("type_case: snake\n", encoding="utf-8")

    main([str(source_builder.root), str(source_builder.output), "--type-case", "default"])

    assert "alias" not in source_builder.read_output()


def test_main_reports_declaration_errors(
    source_builder: SourceTreeBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    source_builder.write(
        {
            "lib.rs": """
            #[generate_interface]
            fn loose() {}
            """
        }
    )

    with pytest.raises(SystemExit) as excinfo:
        main([str(source_builder.root), str(source_builder.output)])

    assert excinfo.value.code == 1
    err = capsys.readouterr().err
    assert "ifacegen failed" in err
    assert "loose" in err


def test_main_reports_invalid_config(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    (tmp_path / ".ifacegen.yml").write_text("type_case: shouting\n", encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        main([str(tmp_path), str(tmp_path / "out.rs.in")])

    assert excinfo.value.code == 1
    assert "Unknown type_case 'shouting'" in capsys.readouterr().err


def test_main_passes_quiet_level_and_log_file(
    source_builder: SourceTreeBuilder, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    calls = []
    monkeypatch.setattr(
        cli, "configure_logging", lambda level, **kwargs: calls.append((level, kwargs))
    )
    log_file = tmp_path / "run.log"

    main(
        ["--quiet", "--log-file", str(log_file), str(source_builder.root), str(source_builder.output)]
    )

    assert calls == [(logging.WARNING, {"log_file": log_file})]
