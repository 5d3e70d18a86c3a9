"""Built-in providers.

Scopes:
- Global: root container, fires once per run
- Class: class declarations with optional extends clause
- Function: function declarations and their parameter lists

Lexemes:
- CurlyBrace, Parenthesis, Semicolon
- Identifier (reserved words reclassified in place)
- Number (decimal, hexadecimal, exponential, binary, octal)
- Assignment, Equality
- CommentInline, CommentBlock
- Whitespace (always last)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from treelex.providers.builtins.comments import CommentBlockProvider, CommentInlineProvider
from treelex.providers.builtins.identifier import IdentifierProvider
from treelex.providers.builtins.number import NUMBER_FORMATS, NumberProvider
from treelex.providers.builtins.operators import AssignmentProvider, EqualityProvider
from treelex.providers.builtins.punctuation import (
    CurlyBraceProvider,
    ParenthesisProvider,
    SemicolonProvider,
)
from treelex.providers.builtins.scopes import ClassProvider, FunctionProvider, GlobalProvider
from treelex.providers.builtins.whitespace import WhitespaceProvider

if TYPE_CHECKING:
    from treelex.providers.protocol import TokenProvider


def builtin_providers() -> list[TokenProvider]:
    """Fresh instances of every built-in provider."""
    return [
        GlobalProvider(),
        ClassProvider(),
        FunctionProvider(),
        CurlyBraceProvider(),
        ParenthesisProvider(),
        SemicolonProvider(),
        IdentifierProvider(),
        NumberProvider(),
        AssignmentProvider(),
        EqualityProvider(),
        CommentInlineProvider(),
        CommentBlockProvider(),
        WhitespaceProvider(),
    ]


__all__ = [
    "AssignmentProvider",
    "ClassProvider",
    "CommentBlockProvider",
    "CommentInlineProvider",
    "CurlyBraceProvider",
    "EqualityProvider",
    "FunctionProvider",
    "GlobalProvider",
    "IdentifierProvider",
    "NUMBER_FORMATS",
    "NumberProvider",
    "ParenthesisProvider",
    "SemicolonProvider",
    "WhitespaceProvider",
    "builtin_providers",
]
