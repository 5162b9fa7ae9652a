"""Logging setup for compaudit commands.

Per-component failures are logged as warnings carrying a ``component``
attribute (pass ``extra={"component": path}``). The handler installed by
:func:`configure_logging` collects those paths so a command can report how
many components were left out of a run.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import List, Optional

_LOGGER_NAME = "compaudit"
_CONSOLE_FORMAT = "[compaudit] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger under the ``compaudit`` hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


class SkippedComponentHandler(logging.Handler):
    """Remembers which components produced warnings during a run."""

    def __init__(self) -> None:
        super().__init__(level=logging.WARNING)
        self._paths: List[str] = []

    def emit(self, record: logging.LogRecord) -> None:
        path = getattr(record, "component", None)
        if path and path not in self._paths:
            self._paths.append(path)

    @property
    def paths(self) -> List[str]:
        return list(self._paths)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Send compaudit logs to stderr and, optionally, to ``log_file``.

    Standard output is left for command results.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Repeated invocations in one process must not stack handlers.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level)
    console.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    logger.addHandler(console)
    logger.addHandler(SkippedComponentHandler())

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(file_handler)

    return logger


def _skipped_handler() -> Optional[SkippedComponentHandler]:
    for handler in logging.getLogger(_LOGGER_NAME).handlers:
        if isinstance(handler, SkippedComponentHandler):
            return handler
    return None


def skipped_components() -> List[str]:
    """Component paths that logged a warning since logging was configured."""
    handler = _skipped_handler()
    return handler.paths if handler is not None else []


__all__ = ["SkippedComponentHandler", "configure_logging", "get_logger", "skipped_components"]
