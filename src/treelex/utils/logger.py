"""Minimal logging utilities for treelex.

Wraps the standard library logging and registers a TRACE level below
DEBUG for very chatty engine events.

Example:
    >>> from treelex.utils.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.debug("Tokenizing module")
"""

from __future__ import annotations

import logging
from typing import Any

TRACE = 5
logging.addLevelName(TRACE, "TRACE")


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given name.

    Returns a standard library logger with the "treelex." prefix.

    Args:
        name: Logger name (typically __name__)

    Example:
        >>> get_logger("mymodule").name
        'treelex.mymodule'
    """
    if not (name == "treelex" or name.startswith("treelex.")):
        name = f"treelex.{name}"
    return logging.getLogger(name)


def trace(logger: logging.Logger, message: str, **payload: Any) -> None:
    """Log at TRACE level with an optional structured payload."""
    if logger.isEnabledFor(TRACE):
        logger.log(TRACE, message, extra={"payload": payload})
