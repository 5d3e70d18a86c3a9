"""Comment providers.

- CommentInline: ``//`` up to, not including, the end of line
- CommentBlock: ``/*`` through the first following ``*/`` (no nesting).
  Without a closing marker the provider does not match, so the run
  reports a ParseFailure at the comment's start.

Thread Safety:
Stateless handlers. Safe for concurrent use across threads.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from treelex.providers.base import Provider
from treelex.tokens import TokenType

if TYPE_CHECKING:
    from treelex.context import ContextFrame
    from treelex.lexer.core import Tokenizer
    from treelex.tokens import Token

BLOCK_OPEN = "/*"
BLOCK_CLOSE = "*/"


class CommentInlineProvider(Provider):
    """``// comment``"""

    __slots__ = ()

    def __init__(self) -> None:
        super().__init__("CommentInline", "//", token_type=TokenType.COMMENT_INLINE)

    def build_token(self, engine: Tokenizer, context: ContextFrame, match) -> Token:
        return engine.start_token(TokenType.COMMENT_INLINE, raw=engine.read_eol())


class CommentBlockProvider(Provider):
    """``/* comment */``"""

    __slots__ = ()

    def __init__(self) -> None:
        super().__init__("CommentBlock", BLOCK_OPEN, token_type=TokenType.COMMENT_BLOCK)

    def test(self, engine: Tokenizer, context: ContextFrame) -> str | None:
        tracker = engine.tracker
        if not tracker.matches(BLOCK_OPEN):
            return None
        offset = tracker.offset
        close = tracker.source.find(BLOCK_CLOSE, offset + len(BLOCK_OPEN))
        if close == -1:
            return None
        return tracker.source[offset : close + len(BLOCK_CLOSE)]

    def build_token(self, engine: Tokenizer, context: ContextFrame, match) -> Token:
        return engine.start_token(TokenType.COMMENT_BLOCK, raw=match)
