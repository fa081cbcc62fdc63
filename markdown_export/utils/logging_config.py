"""
Utility layer - logging setup for the command line
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional

from ..log import logger

CONSOLE_FORMAT = "%(levelname)s %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)-7s %(name)s:%(lineno)d %(message)s"
MAX_LOG_BYTES = 2 * 1024 * 1024
LOG_BACKUPS = 3


def setup_logging(debug_mode: bool = False, log_file: Optional[Path] = None) -> logging.Logger:
    """Attach handlers to the package logger

    The console shows warnings and errors, or everything with ``debug_mode``.
    Nothing is written to disk unless ``log_file`` is given.
    """
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(logging.DEBUG if debug_mode else logging.WARNING)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        rotating = logging.handlers.RotatingFileHandler(
            log_file, maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUPS, encoding="utf-8"
        )
        rotating.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(rotating)
        logger.debug(f"[MarkdownExport] Logging to {log_file}")

    return logger
