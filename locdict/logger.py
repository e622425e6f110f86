"""Logging setup for the locdict logger hierarchy.

Handlers are only attached to the top-level 'locdict' logger. Module loggers
created with logging.getLogger(__name__) propagate to it.
"""

from __future__ import annotations

import logging
import pathlib
import sys
from typing import Optional

ROOT_LOGGER = "locdict"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)-20s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

VERBOSITY_LEVELS = (logging.WARNING, logging.INFO, logging.DEBUG)


def level_for_verbosity(verbosity: int, base_level: int = logging.WARNING) -> int:
    """Map the number of -v flags to a console level."""

    if verbosity <= 0:
        return base_level
    return VERBOSITY_LEVELS[min(verbosity, len(VERBOSITY_LEVELS) - 1)]


def configure_logging(
    verbosity: int = 0,
    *,
    base_level: int = logging.WARNING,
    log_file: Optional[pathlib.Path] = None,
) -> logging.Logger:
    """(Re)configure the 'locdict' logger and return it."""

    root_logger = logging.getLogger(ROOT_LOGGER)
    root_logger.setLevel(logging.DEBUG)
    root_logger.propagate = False

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)

    # Standard output may carry records, console logs go to stderr.
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level_for_verbosity(verbosity, base_level))
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    return root_logger
