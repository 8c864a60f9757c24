"""Logging setup for the command line.

Library modules log through ``logging.getLogger(__name__)`` under the
``csvq`` namespace; the CLI attaches handlers to that logger for the duration
of one invocation and restores the previous state afterwards.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from pathlib import Path

PACKAGE_LOGGER = "csvq"

_FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class _StderrFormatter(logging.Formatter):
    """``Warning: ...`` / ``Error: ...`` prefixes, matching the CLI's own messages."""

    _PREFIXES = {
        logging.WARNING: "Warning: ",
        logging.ERROR: "Error: ",
        logging.CRITICAL: "Error: ",
        logging.DEBUG: "debug: ",
    }

    def format(self, record: logging.LogRecord) -> str:
        prefix = self._PREFIXES.get(record.levelno, "")
        return prefix + record.getMessage()


@dataclass
class LoggingState:
    level: int
    propagate: bool
    handlers: list[logging.Handler]


def _level_for(verbosity: int, quiet: bool) -> int:
    if quiet:
        return logging.ERROR
    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    return logging.WARNING


def configure_logging(
    *,
    verbosity: int = 0,
    quiet: bool = False,
    log_file: Path | None = None,
) -> LoggingState:
    """Route ``csvq`` log records to stderr (and optionally a file).

    Returns the previous logger state for ``restore_logging``.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    previous = LoggingState(
        level=logger.level,
        propagate=logger.propagate,
        handlers=list(logger.handlers),
    )

    level = _level_for(verbosity, quiet)
    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(level)
    stderr_handler.setFormatter(_StderrFormatter())

    handlers: list[logging.Handler] = [stderr_handler]
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
        handlers.append(file_handler)

    logger.handlers = handlers
    logger.setLevel(logging.DEBUG if log_file is not None else level)
    logger.propagate = False
    return previous


def restore_logging(state: LoggingState) -> None:
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in logger.handlers:
        if handler not in state.handlers:
            handler.close()
    logger.handlers = state.handlers
    logger.setLevel(state.level)
    logger.propagate = state.propagate
