"""Tokenizer variant for C-family scripting languages.

Whitespace is insignificant in these languages, so the whitespace
provider is appended to every filtered pipeline: grammar-driven lookahead
like ``next_token(TokenType.IDENTIFIER)`` still skips leading blanks.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from treelex.lexer.core import Tokenizer
from treelex.tokens import TokenType

if TYPE_CHECKING:
    from treelex.providers.protocol import TokenProvider


class ScriptTokenizer(Tokenizer):
    """Tokenizer that can always skip whitespace."""

    __slots__ = ()

    def prepare_pipeline(self, expected: Sequence[TokenType | int] = ()) -> list[TokenProvider]:
        pipeline = super().prepare_pipeline(expected)
        if not expected or not self.config.always_skip_whitespace:
            return pipeline

        whitespace = self.get_provider_by_id(TokenType.WHITESPACE)
        if whitespace is not None and not any(p is whitespace for p in pipeline):
            pipeline.append(whitespace)
        return pipeline
