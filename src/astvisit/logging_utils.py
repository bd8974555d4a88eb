#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/astvisit/logging_utils.py
"""Logging setup for linters and code-mod runners built on astvisit.

Every astvisit module logs through ``logging.getLogger(__name__)``, so all
library messages live under the ``astvisit`` logger. The helpers here attach
handlers to that logger only; handlers the host application installed on the
root logger are left alone.

Examples
--------
    >>> from astvisit.logging_utils import configure_logging
    >>> configure_logging("DEBUG", trace_mode=True)

"""

from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

PACKAGE_LOGGER_NAME = "astvisit"
TRAVERSAL_LOGGER_NAME = "astvisit.traversal"

# Marks handlers installed here so a later call can replace exactly those
_HANDLER_MARKER = "_astvisit_handler"


def _resolve_level(log_level: int | str) -> int:
    if isinstance(log_level, int):
        return log_level
    level = logging.getLevelName(str(log_level).upper())
    return level if isinstance(level, int) else logging.INFO


def _own_handlers(logger: logging.Logger) -> list[logging.Handler]:
    return [handler for handler in logger.handlers if getattr(handler, _HANDLER_MARKER, False)]


def reset_logging() -> logging.Logger:
    """Remove the handlers installed by :func:`configure_logging`.

    The ``astvisit`` logger goes back to propagating to the root logger and
    the traversal logger goes back to inheriting its level.
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    for handler in _own_handlers(package_logger):
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True
    logging.getLogger(TRAVERSAL_LOGGER_NAME).setLevel(logging.NOTSET)
    return package_logger


def configure_logging(
    log_level: int | str,
    log_file: Optional[str] = None,
    trace_mode: bool = False,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """Send astvisit log messages to stderr and, optionally, a file.

    Calling this again replaces the handlers from the previous call.

    Parameters
    ----------
    log_level : int | str
        Numeric logging level or level name (e.g., "INFO"); unknown names
        fall back to INFO
    log_file : str, optional
        Also append log messages to this file
    trace_mode : bool, default False
        Log every node visit from ``astvisit.traversal`` at debug level and
        include timestamps and logger names in each line
    stream : TextIO, optional
        Console stream; defaults to ``sys.stderr``

    Returns
    -------
    logging.Logger
        The configured ``astvisit`` logger

    Raises
    ------
    OSError
        If ``log_file`` cannot be opened

    """
    resolved_level = _resolve_level(log_level)
    package_logger = reset_logging()

    if trace_mode:
        formatter = logging.Formatter(
            "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
        )
    else:
        formatter = logging.Formatter("%(levelname)s: %(message)s")

    handlers: list[logging.Handler] = [logging.StreamHandler(stream if stream is not None else sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode="a", encoding="utf-8"))

    # Per-node traversal messages pass the handlers only in trace mode
    handler_level = logging.DEBUG if trace_mode else resolved_level
    for handler in handlers:
        setattr(handler, _HANDLER_MARKER, True)
        handler.setLevel(handler_level)
        handler.setFormatter(formatter)
        package_logger.addHandler(handler)

    package_logger.setLevel(resolved_level)
    package_logger.propagate = False
    if trace_mode:
        logging.getLogger(TRAVERSAL_LOGGER_NAME).setLevel(logging.DEBUG)

    if log_file:
        package_logger.info(f"Logging to file: {log_file}")
    return package_logger


__all__ = ["configure_logging", "reset_logging"]
