"""Numeric literal provider.

Formats are tried in a fixed order (decimal, hexadecimal, exponential,
binary, octal) and the first that matches wins. A literal must not run
straight into a word character or a dot, which is what lets ``0x1F`` fall
through decimal and ``2.5e3`` fall through decimal and hexadecimal. A trailing
``n`` marks an arbitrary-precision literal.

Thread Safety:
Stateless handler. Safe for concurrent use across threads.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from treelex.providers.base import Provider
from treelex.providers.protocol import TokenResult
from treelex.tokens import TokenType

if TYPE_CHECKING:
    from treelex.context import ContextFrame
    from treelex.lexer.core import Tokenizer

_END = r"(?![\w$.])"
_DIGITS = r"[0-9](?:_?[0-9])*"

NUMBER_FORMATS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("decimal", re.compile(rf"(?:0|[1-9](?:_?[0-9])*)(?:\.{_DIGITS})?n?{_END}")),
    ("hexadecimal", re.compile(rf"0[xX][0-9a-fA-F](?:_?[0-9a-fA-F])*n?{_END}")),
    ("exponential", re.compile(rf"{_DIGITS}(?:\.{_DIGITS})?[eE][+-]?{_DIGITS}{_END}")),
    ("binary", re.compile(rf"0[bB][01](?:_?[01])*n?{_END}")),
    ("octal", re.compile(rf"0[oO][0-7](?:_?[0-7])*n?{_END}")),
)


class NumberProvider(Provider):
    """Numeric literals with a format tag."""

    __slots__ = ()

    def __init__(self) -> None:
        super().__init__("Number", re.compile(r"\d"), token_type=TokenType.NUMBER)

    def test(self, engine: Tokenizer, context: ContextFrame) -> dict[str, str] | None:
        source = engine.tracker.source
        offset = engine.tracker.offset
        if offset >= len(source) or not source[offset].isdigit():
            return None
        for number_format, pattern in NUMBER_FORMATS:
            match = pattern.match(source, offset)
            if match is not None:
                return {"raw": match.group(0), "format": number_format}
        return None

    def build_token(self, engine: Tokenizer, context: ContextFrame, match) -> TokenResult:
        raw = match["raw"]
        token = engine.start_token(
            TokenType.NUMBER,
            raw=raw,
            value=raw,
            format=match["format"],
            is_big=raw.endswith("n"),
        )
        return TokenResult(token)
