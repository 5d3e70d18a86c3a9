"""Token, TokenType and reserved-word definitions.

Tokens are the nodes of the tree the tokenizer builds. A token is *open*
while it has no end position: it then owns a (possibly empty) children
list and is waiting on the open-token stack for more children. Closing
stamps the end position exactly once.

Thread Safety:
Tokens are mutable while their run is in progress and belong to exactly
one Tokenizer. Once tokenize() returns, the tree is no longer touched by
the engine and may be read from any thread.

"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from treelex.location import SourcePosition


class TokenType(Enum):
    """Token types produced by the built-in recognizers.

    Custom recognizers whose name matches one of these members (ignoring
    case and underscores, so ``CurlyBrace`` maps to CURLY_BRACE) reuse the
    member's value as their id.

    """

    UNKNOWN = auto()

    # Scopes and containers
    GLOBAL = auto()  # Root of every tree
    CLASS = auto()  # class Foo extends Bar { ... }
    CLASS_BODY = auto()
    FUNCTION = auto()  # function name(params) { ... }
    ARROW_FUNCTION = auto()
    MEMBER = auto()
    PARAMETER = auto()
    PARAMETER_LIST = auto()
    PARAMETER_LIST_END = auto()
    BLOCK_STATEMENT = auto()
    BLOCK_STATEMENT_START = auto()
    BLOCK_STATEMENT_END = auto()

    # Punctuation
    CURLY_BRACE = auto()  # { or }
    PARENTHESIS = auto()  # ( or )
    SEMICOLON = auto()  # ;

    # Operators
    ASSIGNMENT = auto()  # = += -= ... ??=
    EQUALITY = auto()  # === == !== !=

    # Words and literals
    IDENTIFIER = auto()
    RESERVED_WORD = auto()
    NUMBER = auto()
    RAW_TEXT = auto()

    # Trivia
    COMMENT_BLOCK = auto()  # /* ... */
    COMMENT_INLINE = auto()  # // ...
    WHITESPACE = auto()


def _normalize(name: str) -> str:
    return name.replace("_", "").lower()


_TYPES_BY_NORMALIZED_NAME: dict[str, TokenType] = {
    _normalize(member.name): member for member in TokenType
}


def token_type_for_name(name: str) -> TokenType | None:
    """Look up the TokenType a provider name refers to.

    Args:
        name: Provider name such as ``"CurlyBrace"`` or ``"curly_brace"``

    Returns:
        The matching TokenType, or None if the name is not a known type.
    """
    return _TYPES_BY_NORMALIZED_NAME.get(_normalize(name))


class ReservedWord(Enum):
    """Words the identifier recognizer reclassifies as RESERVED_WORD."""

    AWAIT = "await"
    BREAK = "break"
    CASE = "case"
    CATCH = "catch"
    CLASS = "class"
    CONST = "const"
    CONTINUE = "continue"
    DEBUGGER = "debugger"
    DEFAULT = "default"
    DELETE = "delete"
    DO = "do"
    ELSE = "else"
    EXPORT = "export"
    EXTENDS = "extends"
    FINALLY = "finally"
    FOR = "for"
    FUNCTION = "function"
    IF = "if"
    IMPLEMENTS = "implements"
    IN = "in"
    INTERFACE = "interface"
    INSTANCEOF = "instanceof"
    LET = "let"
    NEW = "new"
    PACKAGE = "package"
    PRIVATE = "private"
    PROTECTED = "protected"
    PUBLIC = "public"
    RETURN = "return"
    STATIC = "static"
    SUPER = "super"
    SWITCH = "switch"
    THIS = "this"
    THROW = "throw"
    TRY = "try"
    TYPEOF = "typeof"
    VAR = "var"
    VOID = "void"
    WHILE = "while"
    WITH = "with"
    YIELD = "yield"


RESERVED_WORDS: frozenset[str] = frozenset(word.value for word in ReservedWord)


def is_reserved_word(text: str) -> bool:
    """Case-insensitive reserved word check."""
    return text.lower() in RESERVED_WORDS


@dataclass(slots=True, eq=False)
class Token:
    """A typed, positioned unit of source text.

    Attributes:
        type: The token type
        start: Position of the first character
        raw: Matched source text; must be set before the token is finished
        end: Position after the last character; None while the token is open
        children: Child tokens; a list while open or once children exist
        index: Creation order within the run (monotonic)
        name: Identifier text, class or function name
        operator: Operator text for ASSIGNMENT/EQUALITY tokens
        format: Numeric literal format (decimal, hexadecimal, ...)
        value: Literal value text
        is_big: Numeric literal carries the arbitrary-precision suffix
        class_name: Name read after ``class``
        super_class: Identifier token read after ``extends`` (non-owning)
        super_class_name: Name of super_class
        provider: Name of the recognizer that created the token
        parent: Token this one was attached to (non-owning)

    Identity semantics: two tokens compare equal only if they are the same
    object, so trees may hold cross references without recursion.

    """

    type: TokenType
    start: SourcePosition
    raw: str | None = None
    end: SourcePosition | None = None
    children: list[Token] | None = None
    index: int = -1
    name: str | None = None
    operator: str | None = None
    format: str | None = None
    value: str | None = None
    is_big: bool = False
    class_name: str | None = None
    super_class: Token | None = field(default=None, repr=False)
    super_class_name: str | None = None
    provider: str | None = None
    parent: Token | None = field(default=None, repr=False)
    # Set once the position tracker consumed raw
    consumed: bool = field(default=False, repr=False)

    @property
    def token_name(self) -> str:
        """Name of the token type."""
        return self.type.name if isinstance(self.type, TokenType) else TokenType.UNKNOWN.name

    @property
    def is_open(self) -> bool:
        """True while the token still awaits children."""
        return self.end is None

    def walk(self) -> Iterator[Token]:
        """Depth-first iteration over this token and its descendants."""
        stack = [self]
        while stack:
            token = stack.pop()
            yield token
            if token.children:
                stack.extend(reversed(token.children))

    def __repr__(self) -> str:
        """Compact repr for debugging."""
        raw = self.raw if self.raw is not None else ""
        if len(raw) > 20:
            raw = raw[:17] + "..."
        state = "open" if self.end is None else "closed"
        return f"Token({self.token_name}, {raw!r}, {self.start}, {state})"
