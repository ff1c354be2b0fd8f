"""Logging setup for mdview entry points.

Library modules only create module loggers under the ``mdview`` namespace.
Handlers are installed here, by the command line, on the ``mdview`` package
logger so that embedding applications keep control of the root logger.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

PACKAGE_LOGGER_NAME = "mdview"

_PLAIN_FORMAT = "%(levelname)s: %(message)s"
_TRACE_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"


def resolve_log_level(log_level: int | str) -> int:
    """Turn a level name such as ``"debug"`` into its numeric value.

    Raises
    ------
    ValueError
        If ``log_level`` is not a known level name

    """
    if isinstance(log_level, int):
        return log_level
    resolved = logging.getLevelName(str(log_level).upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {log_level!r}")
    return resolved


def configure_logging(
    log_level: int | str,
    log_file: Optional[str] = None,
    trace_mode: bool = False,
) -> logging.Logger:
    """Install stderr (and optionally file) handlers on the package logger.

    Parameters
    ----------
    log_level : int | str
        Numeric logging level or level name
    log_file : str, optional
        Path of a file receiving a copy of the log output
    trace_mode : bool, default False
        Include timestamps and logger names, e.g. to follow parse and build
        timings from ``debug_timer``

    Returns
    -------
    logging.Logger
        The configured ``mdview`` logger

    """
    level = resolve_log_level(log_level)
    logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if trace_mode:
        formatter = logging.Formatter(_TRACE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    else:
        formatter = logging.Formatter(_PLAIN_FORMAT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        except OSError as exc:
            logger.warning("Could not open log file %s: %s", log_file, exc)
        else:
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)
            logger.debug("Logging to file: %s", log_file)

    return logger
