"""Logger setup for ifacegen runs.

Every module logs through a child of the ``ifacegen`` logger. Only the CLI
installs handlers; library callers such as build scripts keep whatever
logging configuration they already have.
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Iterator, Optional

LOGGER_NAME = "ifacegen"

_CONSOLE_FORMAT = "[ifacegen] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(component: Optional[str] = None) -> logging.Logger:
    """Return the ``ifacegen`` logger or the child for one pipeline component."""
    if component:
        return logging.getLogger(f"{LOGGER_NAME}.{component}")
    return logging.getLogger(LOGGER_NAME)


def log_level(*, verbose: bool = False, quiet: bool = False) -> int:
    """Map the CLI verbosity flags to a level; ``verbose`` wins over ``quiet``."""
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.WARNING
    return logging.INFO


def configure_logging(
    level: int = logging.INFO,
    *,
    log_file: Optional[Path] = None,
    stream: Optional[IO[str]] = None,
) -> logging.Logger:
    """Send ifacegen records to ``stream`` (stderr by default) and optionally a file.

    Calling this again replaces the handlers installed by the previous call.
    The file, when given, is truncated and always records debug detail.
    """
    logger = get_logger()
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(stream)
    console.setLevel(level)
    console.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    logger.addHandler(console)

    effective = level
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        sink = logging.FileHandler(log_file, mode="w", encoding="utf-8")
        sink.setLevel(logging.DEBUG)
        sink.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(sink)
        effective = logging.DEBUG

    logger.setLevel(effective)
    logger.propagate = False
    return logger


@contextmanager
def log_duration(logger: logging.Logger, stage: str) -> Iterator[None]:
    """Log how long ``stage`` took at debug level once it completes."""
    start = time.perf_counter()
    yield
    logger.debug("%s finished in %.3fs", stage, time.perf_counter() - start)


__all__ = ["LOGGER_NAME", "configure_logging", "get_logger", "log_duration", "log_level"]
