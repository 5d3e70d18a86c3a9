"""Scope-opening providers: Global, Class and Function.

Global fires once per tokenizer run, before anything else, and becomes
the open root of the tree. Class and Function read their header (name,
``extends`` clause), push a scope frame, and leave their token open so
the body collects as children until the matching ``}``.

Header tokens (names, ``extends``) are read with ``read_token`` and
``eat_text``. They are not children of any token and are reachable
through the semantic fields instead.

Thread Safety:
Stateless handlers. Global removes itself from the run's private
provider set, never from the shared registry.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from treelex.context import ScopeKind
from treelex.providers.base import Provider
from treelex.providers.protocol import TokenResult
from treelex.tokens import ReservedWord, TokenType
from treelex.weights import HIGHEST_WEIGHT

if TYPE_CHECKING:
    from treelex.context import ContextFrame
    from treelex.lexer.core import Tokenizer
    from treelex.tokens import Token


def _no_scope(engine: Tokenizer, context: ContextFrame) -> bool:
    return context.scope is None


class GlobalProvider(Provider):
    """Root container; fires at most once per run."""

    __slots__ = ()

    def __init__(self) -> None:
        super().__init__("Global", _no_scope, token_type=TokenType.GLOBAL, weight=HIGHEST_WEIGHT)

    def build_token(self, engine: Tokenizer, context: ContextFrame, match) -> TokenResult:
        token = engine.start_token(TokenType.GLOBAL, raw="")
        engine.push_context(scope=ScopeKind.GLOBAL, owner=token)
        # There can be only one global scope per run
        engine.remove_provider(self)
        return TokenResult(token, leave_open=True)


def _read_name(engine: Tokenizer) -> Token | None:
    """Read an optional identifier after a keyword."""
    engine.skip_whitespace()
    if engine.at_word(ReservedWord.EXTENDS.value):
        return None
    name = engine.read_token(TokenType.IDENTIFIER)
    if name is not None and name.type is TokenType.RESERVED_WORD:
        engine.logger.debug("Reserved word %r used as a declaration name", name.raw)
    return name


class ClassProvider(Provider):
    """``class Name extends Base { ... }``"""

    __slots__ = ()

    def __init__(self) -> None:
        super().__init__("Class", re.compile(r"class(?![\w$])"), token_type=TokenType.CLASS)

    def build_token(self, engine: Tokenizer, context: ContextFrame, match) -> TokenResult:
        token = engine.start_token(TokenType.CLASS, raw=match["raw"])
        engine.advance(token)

        name = _read_name(engine)
        if name is not None:
            token.class_name = token.name = name.name
            context.bindings[name.name] = token

        self._read_super_class(engine, token)
        engine.push_context(scope=ScopeKind.CLASS, this_class=token, owner=token)
        engine.logger.debug(
            "Class %s extends %s at %s",
            token.class_name,
            token.super_class_name,
            token.start,
        )
        return TokenResult(token, leave_open=True)

    @staticmethod
    def _read_super_class(engine: Tokenizer, token: Token) -> None:
        engine.skip_whitespace()
        extends = ReservedWord.EXTENDS.value
        if engine.eat_text(extends, TokenType.RESERVED_WORD, word=True, name=extends) is None:
            return
        engine.skip_whitespace()
        super_class = engine.read_token(TokenType.IDENTIFIER)
        if super_class is not None:
            token.super_class = super_class
            token.super_class_name = super_class.name


class FunctionProvider(Provider):
    """``function name(params) { ... }``"""

    __slots__ = ()

    def __init__(self) -> None:
        super().__init__(
            "Function", re.compile(r"function(?![\w$])"), token_type=TokenType.FUNCTION
        )

    def build_token(self, engine: Tokenizer, context: ContextFrame, match) -> TokenResult:
        token = engine.start_token(TokenType.FUNCTION, raw=match["raw"])
        engine.advance(token)

        name = _read_name(engine)
        if name is not None:
            token.name = name.name
            context.bindings[name.name] = token

        engine.skip_whitespace()
        engine.push_context(scope=ScopeKind.FUNCTION, this_function=token, owner=token)
        return TokenResult(token, leave_open=True)
