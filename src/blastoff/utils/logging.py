"""Logger setup for the ``blastoff`` namespace and shared message templates."""

from __future__ import annotations

import logging
import sys
import warnings
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional


LOGGER_NAMESPACE = "blastoff"

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
CONSOLE_FORMAT = "%(levelname)s: %(message)s"

DEFAULT_MAX_BYTES = 10 * 1024 * 1024  # 10 MB
DEFAULT_BACKUP_COUNT = 5


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[Path] = None,
    max_bytes: int = DEFAULT_MAX_BYTES,
    backup_count: int = DEFAULT_BACKUP_COUNT,
) -> None:
    """Route ``blastoff.*`` records to stderr and, optionally, a rotating file.

    Report rows go to stdout, so the console handler always writes to
    stderr. Calling this again replaces the handlers from the previous call.
    When ``log_file`` is given it receives DEBUG records regardless of
    ``level``; a log file that cannot be opened is reported as a warning and
    the run continues with console logging only.
    """
    logging.getLogger().setLevel(logging.WARNING)

    app_logger = logging.getLogger(LOGGER_NAMESPACE)
    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    app_logger.addHandler(console)
    app_logger.setLevel(level)

    if log_file:
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                log_file, maxBytes=max_bytes, backupCount=backup_count
            )
        except OSError as e:
            warnings.warn(f"Failed to create log file {log_file}: {e}")
        else:
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(logging.Formatter(DEFAULT_FORMAT))
            app_logger.addHandler(file_handler)
            app_logger.setLevel(logging.DEBUG)

    app_logger.propagate = False


def level_from_verbosity(verbose: int) -> int:
    """Map a -v count to a logging level (0: WARNING, 1: INFO, 2+: DEBUG)."""
    if verbose >= 2:
        return logging.DEBUG
    if verbose == 1:
        return logging.INFO
    return logging.WARNING


def get_logger(name: str) -> logging.Logger:
    """Return a namespaced logger under the 'blastoff' root."""
    base = logging.getLogger(LOGGER_NAMESPACE)
    return base.getChild(name)


class LogTemplates:
    """Standard log message templates shared across modules."""

    LEVEL_START = "Evaluating separation {separation} bp ({pairs:,} pairs)"
    LEVEL_RESULT = "Separation {separation} bp: {count:,}/{pairs:,} concordant ({ratio:.4f})"
    LEVEL_FAILED = "Separation {separation} bp not reported: {error}"

    FRAGMENTS_REUSED = "Reusing {pairs:,} pairs from {path}"
    FRAGMENTS_GENERATING = "Generating {reads:,} pairs, {separation} bp apart, with seed {seed}"
    FRAGMENTS_WRITTEN = "Wrote {pairs:,} pairs to {path}"

    HITS_FILTERED = "Hits: {kept:,} kept, {removed:,} below {threshold} bp alignment length"
