"""Identifier provider.

Matches a Unicode letter, ``_`` or ``$`` followed by letters, digits,
``_`` or ``$``. The first character must pass ``str.isalpha``, so
non-decimal digits such as ``²`` never start an identifier. A
case-insensitive hit in the reserved-word set turns the same token into
a RESERVED_WORD. Inside a parameter list the token becomes a PARAMETER
bound in the enclosing function scope.

Thread Safety:
Stateless handler. Safe for concurrent use across threads.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from treelex.context import ScopeKind
from treelex.providers.base import Provider, capture
from treelex.providers.protocol import TestResult
from treelex.tokens import TokenType, is_reserved_word

if TYPE_CHECKING:
    from treelex.context import ContextFrame
    from treelex.lexer.core import Tokenizer
    from treelex.tokens import Token

IDENTIFIER_PATTERN = re.compile(r"(?P<identifier>[^\W\d][\w$]*|\$[\w$]*)")


class IdentifierProvider(Provider):
    """Identifiers and reserved words."""

    __slots__ = ()

    def __init__(self) -> None:
        super().__init__("Identifier", IDENTIFIER_PATTERN, token_type=TokenType.IDENTIFIER)

    def test(self, engine: Tokenizer, context: ContextFrame) -> TestResult:
        match = IDENTIFIER_PATTERN.match(engine.tracker.source, engine.tracker.offset)
        if match is None:
            return None
        first = match["identifier"][0]
        if not (first.isalpha() or first in "_$"):
            return None
        return capture(match)

    def build_token(self, engine: Tokenizer, context: ContextFrame, match) -> Token:
        raw = match["identifier"]
        token = engine.start_token(TokenType.IDENTIFIER, raw=raw, name=raw)
        if is_reserved_word(raw):
            token.type = TokenType.RESERVED_WORD
        elif context.scope is ScopeKind.PARAMETER_LIST:
            token.type = TokenType.PARAMETER
            for frame in engine.contexts:
                if frame.scope is ScopeKind.FUNCTION:
                    frame.bindings[raw] = token
                    break
        return token
