# === FILE: scratch_fetch/logger.py ===
"""Logging for the build tool, kept silent for the fetch program.

The fetch program's stdout carries exactly one line (a length or an error), so
every handler here writes to *stderr* and the logger imported by default only
lets warnings through. ``build-scratch`` calls :func:`init_logging` with the
level from ``--log-level`` and may add a rotating log file::

    from scratch_fetch.logger import logger
    logger.info("staticx: %s", cmd)
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, Union

DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_LOGGER_NAME: Final[str] = "scratch_fetch"

#: rotating log file: 5 MiB per file, three backups
_LOG_FILE_BYTES: Final[int] = 5 * 1024 * 1024
_LOG_FILE_BACKUPS: Final[int] = 3

_LevelT = Union[int, str]


def _with_format(handler: logging.Handler, fmt: str) -> logging.Handler:
    handler.setFormatter(logging.Formatter(fmt))
    return handler


def configure(
    *,
    level: _LevelT = "WARNING",
    log_file: str | Path | None = None,
    log_format: str = DEFAULT_FORMAT,
    replace_handlers: bool = True,
) -> logging.Logger:
    """Point the ``scratch_fetch`` logger at stderr and, optionally, a log file.

    Handlers installed by an earlier call are closed when *replace_handlers* is
    true, so repeated CLI invocations in one process do not duplicate output.
    """
    lg = logging.getLogger(_LOGGER_NAME)
    lg.setLevel(level)

    if replace_handlers:
        for handler in list(lg.handlers):
            lg.removeHandler(handler)
            handler.close()

    lg.addHandler(_with_format(logging.StreamHandler(sys.stderr), log_format))

    if log_file is not None:
        rotating = RotatingFileHandler(
            filename=str(log_file),
            maxBytes=_LOG_FILE_BYTES,
            backupCount=_LOG_FILE_BACKUPS,
            encoding="utf-8",
        )
        lg.addHandler(_with_format(rotating, log_format))

    lg.propagate = False
    return lg


def init_logging(
    level: _LevelT = "INFO",
    log_file: str | Path | None = None,
    log_format: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """Logging for one ``build-scratch`` run."""
    return configure(level=level, log_file=log_file, log_format=log_format, replace_handlers=True)


logger: logging.Logger = configure()

__all__ = ["logger", "configure", "init_logging", "DEFAULT_FORMAT"]
