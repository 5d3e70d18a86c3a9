"""Utility modules for treelex.

Provides:
- logger: get_logger, TRACE level
"""

from treelex.utils.logger import TRACE, get_logger, trace

__all__ = [
    "TRACE",
    "get_logger",
    "trace",
]
