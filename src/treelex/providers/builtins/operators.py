"""Assignment and equality operator providers.

Alternatives are listed longest first so the longest operator wins. A
bare ``=`` never matches the start of ``==`` or ``=>``.

Thread Safety:
Stateless handlers. Safe for concurrent use across threads.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from treelex.providers.base import Provider
from treelex.tokens import TokenType

if TYPE_CHECKING:
    from treelex.context import ContextFrame
    from treelex.lexer.core import Tokenizer
    from treelex.tokens import Token

ASSIGNMENT_PATTERN = re.compile(
    r"(?P<operator>>>>=|\*\*=|<<=|>>=|&&=|\|\|=|\?\?="
    r"|\+=|-=|\*=|/=|%=|&=|\^=|\|=|=(?![=>]))"
)
EQUALITY_PATTERN = re.compile(r"(?P<operator>===|!==|==|!=)")


class AssignmentProvider(Provider):
    """``=`` and the compound assignment operators."""

    __slots__ = ()

    def __init__(self) -> None:
        super().__init__("Assignment", ASSIGNMENT_PATTERN, token_type=TokenType.ASSIGNMENT)

    def build_token(self, engine: Tokenizer, context: ContextFrame, match) -> Token:
        operator = match["operator"]
        return engine.start_token(TokenType.ASSIGNMENT, raw=operator, operator=operator)


class EqualityProvider(Provider):
    """``===``, ``!==``, ``==`` and ``!=``."""

    __slots__ = ()

    def __init__(self) -> None:
        super().__init__("Equality", EQUALITY_PATTERN, token_type=TokenType.EQUALITY)

    def build_token(self, engine: Tokenizer, context: ContextFrame, match) -> Token:
        operator = match["operator"]
        return engine.start_token(TokenType.EQUALITY, raw=operator, operator=operator)
