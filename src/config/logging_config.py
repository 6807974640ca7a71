# src/config/logging_config.py

"""Per-run logging for matching runs.

Each launch writes ``logs/run_YYYYMMDD_HHMMSS.log`` at DEBUG.  The
children of the ``dealmatch`` logger feed it:

- ``dealmatch.matching``: per-stage candidate counts and sub-scores
- ``dealmatch.filters``: dropped listings and exclusion counts
- ``dealmatch.orchestrator``: winning strategy and stage failures
- ``dealmatch.storage`` and ``dealmatch.cli``: file I/O and CLI errors

Stderr gets WARNING and above unless ``DEALMATCH_CONSOLE_LOG_LEVEL``
names another level.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from src.config.settings import Settings

_FILE_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | %(module)s:%(funcName)s:%(lineno)d | "
    "%(message)s"
)
_CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _console_level() -> int:
    """Resolve the configured console level, defaulting to WARNING."""
    level = logging.getLevelName(Settings.CONSOLE_LOG_LEVEL)
    if isinstance(level, int):
        return level
    return logging.WARNING


def _handler(
    handler: logging.Handler, level: int, fmt: str
) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=_DATE_FORMAT))
    return handler


def setup_logging() -> Path:
    """Attach the run's file and stderr handlers to ``dealmatch``.

    Returns:
        The :class:`~pathlib.Path` of this run's log file.
    """
    logs_dir: Path = Settings.LOGS_DIR
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_file = logs_dir / f"run_{datetime.now():%Y%m%d_%H%M%S}.log"

    project_logger = logging.getLogger("dealmatch")
    project_logger.setLevel(logging.DEBUG)

    # Handlers are attached once per process.
    if project_logger.handlers:
        return log_file

    project_logger.addHandler(
        _handler(
            logging.FileHandler(log_file, encoding="utf-8"),
            logging.DEBUG,
            _FILE_FORMAT,
        )
    )
    project_logger.addHandler(
        _handler(
            logging.StreamHandler(sys.stderr),
            _console_level(),
            _CONSOLE_FORMAT,
        )
    )

    project_logger.info(
        "Logging initialised (console level %s), log file: %s",
        logging.getLevelName(_console_level()),
        log_file,
    )
    return log_file
