from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

import pytest

from ifacegen.extractor import SignatureExtractor
from tests._fixtures.source_builder import SourceTreeBuilder


@pytest.fixture
def source_builder(tmp_path: Path) -> SourceTreeBuilder:
    """Provide a reusable source tree builder rooted at the pytest tmp_path."""
    return SourceTreeBuilder(tmp_path)


@pytest.fixture
def extractor() -> SignatureExtractor:
    return SignatureExtractor()


@pytest.fixture(autouse=True)
def _restore_ifacegen_logger() -> Iterator[None]:
    """Undo configure_logging so caplog keeps seeing ifacegen records."""
    logger = logging.getLogger("ifacegen")
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate
    yield
    for handler in list(logger.handlers):
        if handler not in handlers:
            logger.removeHandler(handler)
            handler.close()
    logger.setLevel(level)
    logger.propagate = propagate
