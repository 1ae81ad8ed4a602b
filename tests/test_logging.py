"""Tests for ifacegen.logging."""

from __future__ import annotations

import io
import logging
from pathlib import Path

import pytest

from ifacegen.logging import LOGGER_NAME, configure_logging, get_logger, log_duration, log_level


def test_component_loggers_share_the_ifacegen_parent() -> None:
    assert get_logger().name == LOGGER_NAME
    assert get_logger("ordering").name == "ifacegen.ordering"
    assert get_logger("ordering").parent is get_logger()


@pytest.mark.parametrize(
    "verbose, quiet, expected",
    [
        (False, False, logging.INFO),
        (True, False, logging.DEBUG),
        (False, True, logging.WARNING),
        (True, True, logging.DEBUG),
    ],
)
def test_log_level_from_flags(verbose: bool, quiet: bool, expected: int) -> None:
    assert log_level(verbose=verbose, quiet=quiet) == expected


def test_console_output_uses_prefix_and_level_threshold() -> None:
    stream = io.StringIO()
    configure_logging(logging.WARNING, stream=stream)

    get_logger("generator").info("hidden")
    get_logger("generator").warning("No annotated items found")

    assert stream.getvalue() == "[ifacegen] WARNING No annotated items found\n"


def test_reconfiguring_replaces_handlers() -> None:
    first = io.StringIO()
    second = io.StringIO()
    configure_logging(stream=first)
    logger = configure_logging(stream=second)

    get_logger("cli").info("once")

    assert len(logger.handlers) == 1
    assert first.getvalue() == ""
    assert second.getvalue() == "[ifacegen] INFO once\n"


def test_log_file_records_debug_detail(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "ifacegen.log"
    stream = io.StringIO()
    logger = configure_logging(logging.INFO, log_file=log_file, stream=stream)

    get_logger("extractor").debug("Found 2 annotated declarations in lib.rs")
    for handler in logger.handlers:
        handler.flush()

    assert stream.getvalue() == ""
    assert "DEBUG ifacegen.extractor: Found 2 annotated declarations in lib.rs" in log_file.read_text(
        encoding="utf-8"
    )


def test_log_duration_reports_completed_stage(caplog: pytest.LogCaptureFixture) -> None:
    logger = get_logger("generator")

    with caplog.at_level(logging.DEBUG, logger=LOGGER_NAME):
        with log_duration(logger, "Rendering"):
            pass

    assert any(record.getMessage().startswith("Rendering finished in ") for record in caplog.records)


def test_log_duration_is_silent_when_stage_fails(caplog: pytest.LogCaptureFixture) -> None:
    logger = get_logger("generator")

    with caplog.at_level(logging.DEBUG, logger=LOGGER_NAME):
        with pytest.raises(ValueError):
            with log_duration(logger, "Rendering"):
                raise ValueError("boom")

    assert "Rendering finished" not in caplog.text
