"""
The two application loggers.

- info log: stdout, "INFO\t2024/01/31 12:00:00 message"
- error log: stderr, "ERROR\t2024/01/31 12:00:00 main.py:42: message"

Both are plain `logging.Logger` objects that do not propagate to the root
logger, so third-party logging configuration cannot reroute them. They are
passed around through the application context, never looked up globally.
"""

from __future__ import annotations

import logging
import sys
from typing import IO, NoReturn

DATE_FORMAT = "%Y/%m/%d %H:%M:%S"
INFO_FORMAT = "INFO\t%(asctime)s %(message)s"
ERROR_FORMAT = "ERROR\t%(asctime)s %(filename)s:%(lineno)d: %(message)s"


def _new_logger(name: str, stream: IO[str], fmt: str, level: int) -> logging.Logger:
    logger = logging.getLogger(name)
    # Rebuilding replaces the sink instead of stacking handlers.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(fmt, DATE_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger


def new_info_logger(stream: IO[str] | None = None, *, name: str = "chunkbox.info") -> logging.Logger:
    return _new_logger(name, stream or sys.stdout, INFO_FORMAT, logging.INFO)


def new_error_logger(stream: IO[str] | None = None, *, name: str = "chunkbox.error") -> logging.Logger:
    return _new_logger(name, stream or sys.stderr, ERROR_FORMAT, logging.ERROR)


def fatal(logger: logging.Logger, err: BaseException | str) -> NoReturn:
    """
    Log `err` against the caller's file:line and exit with status 1.
    """
    logger.error("%s", err, stacklevel=2)
    raise SystemExit(1)
