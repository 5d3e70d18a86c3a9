"""Single-character punctuation providers.

Each wraps the matched character verbatim. Curly braces also keep the
brace depth of the current scope frame: the ``}`` that brings a class or
function frame back to depth zero closes that scope and its open token.
Parentheses directly after a function header open a parameter list.

Thread Safety:
Stateless handlers. Safe for concurrent use across threads.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from treelex.context import ScopeKind
from treelex.providers.base import Provider
from treelex.tokens import TokenType

if TYPE_CHECKING:
    from treelex.context import ContextFrame
    from treelex.lexer.core import Tokenizer
    from treelex.tokens import Token

# Scopes whose open token ends with their closing brace
_BRACED_SCOPES = frozenset({ScopeKind.CLASS, ScopeKind.FUNCTION})


class CurlyBraceProvider(Provider):
    """``{`` and ``}``."""

    __slots__ = ()

    def __init__(self) -> None:
        super().__init__(
            "CurlyBrace",
            re.compile(r"(?P<raw>[{}])"),
            token_type=TokenType.CURLY_BRACE,
        )

    def build_token(self, engine: Tokenizer, context: ContextFrame, match) -> Token:
        token = engine.start_token(TokenType.CURLY_BRACE, raw=match["raw"])
        if token.raw == "{":
            context.depth += 1
            return token

        if context.depth == 0:
            return token
        context.depth -= 1
        owner = context.owner
        if context.depth == 0 and owner is not None and context.scope in _BRACED_SCOPES:
            engine.end_token(token)
            engine.close_scope(owner)
        return token


class ParenthesisProvider(Provider):
    """``(`` and ``)``."""

    __slots__ = ()

    def __init__(self) -> None:
        super().__init__(
            "Parenthesis",
            re.compile(r"(?P<raw>[()])"),
            token_type=TokenType.PARENTHESIS,
        )

    def build_token(self, engine: Tokenizer, context: ContextFrame, match) -> Token:
        token = engine.start_token(TokenType.PARENTHESIS, raw=match["raw"])
        if token.raw == "(":
            if context.scope is ScopeKind.FUNCTION and context.depth == 0:
                engine.end_token(token)
                engine.push_context(scope=ScopeKind.PARAMETER_LIST)
        elif context.scope is ScopeKind.PARAMETER_LIST:
            engine.end_token(token)
            engine.pop_context()
        return token


class SemicolonProvider(Provider):
    """``;``"""

    __slots__ = ()

    def __init__(self) -> None:
        super().__init__("Semicolon", ";", token_type=TokenType.SEMICOLON)
