"""Whitespace provider.

Always tried last. The tokenizer consumes the tokens it builds and
retries the request, so whitespace never appears in the tree.
"""

from __future__ import annotations

import re

from treelex.providers.base import Provider
from treelex.tokens import TokenType
from treelex.weights import LOWEST_WEIGHT


class WhitespaceProvider(Provider):
    """One or more whitespace characters."""

    __slots__ = ()

    def __init__(self) -> None:
        super().__init__(
            "Whitespace",
            re.compile(r"\s+"),
            token_type=TokenType.WHITESPACE,
            weight=LOWEST_WEIGHT,
        )
