"""Tests for compaudit.logging."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from compaudit.logging import (
    SkippedComponentHandler,
    configure_logging,
    get_logger,
    skipped_components,
)


@pytest.fixture(autouse=True)
def _reset_logger():
    yield
    logger = logging.getLogger("compaudit")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True


def test_get_logger_nests_under_package() -> None:
    assert get_logger().name == "compaudit"
    assert get_logger("analyzers.motion").name == "compaudit.analyzers.motion"


def test_configure_logging_does_not_stack_handlers(tmp_path: Path) -> None:
    configure_logging()
    logger = configure_logging(verbose=True, log_file=tmp_path / "logs" / "audit.log")

    assert logger.level == logging.DEBUG
    assert sum(isinstance(h, SkippedComponentHandler) for h in logger.handlers) == 1
    assert sum(isinstance(h, logging.FileHandler) for h in logger.handlers) == 1
    assert (tmp_path / "logs" / "audit.log").exists()


def test_warnings_with_component_are_collected() -> None:
    configure_logging()
    logger = get_logger("discovery")

    logger.warning("Failed to parse %s", "a.tsx", extra={"component": "a.tsx"})
    logger.warning("Failed again %s", "a.tsx", extra={"component": "a.tsx"})
    logger.warning("Unrelated warning")
    logger.info("Not a warning", extra={"component": "b.tsx"})

    assert skipped_components() == ["a.tsx"]


def test_skipped_components_empty_without_configuration() -> None:
    assert skipped_components() == []
