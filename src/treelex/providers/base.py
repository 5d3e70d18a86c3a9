"""Default condition-driven provider.

Provider implements the TokenProvider protocol from a match condition
alone: literals are compared against the upcoming text, patterns are
matched at the current offset, predicates are called. Variants change
behavior by overriding ``test`` or ``build_token`` (or by passing
callables for them) rather than by deeper subclassing.

Thread Safety:
Stateless once registered. Safe for concurrent use across threads.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import fields
from typing import TYPE_CHECKING, Any

from treelex.errors import ConfigurationError
from treelex.providers.protocol import BuildResult, TestResult
from treelex.tokens import Token, TokenType

if TYPE_CHECKING:
    from treelex.context import ContextFrame
    from treelex.lexer.core import Tokenizer

# Token attributes a capture group may populate directly
_CAPTURE_FIELDS = frozenset(
    f.name
    for f in fields(Token)
    if f.name not in {"type", "start", "end", "children", "index", "parent", "consumed"}
)


class Provider:
    """Recognizer driven by a literal, pattern, or predicate condition.

    Args:
        name: Unique provider name
        condition: Literal string, compiled pattern, or predicate
            ``(engine, context) -> TestResult``
        token_type: Type of the token the default build_token creates
        weight: Explicit weight; computed from condition when None
        test: Optional replacement for the default test
        build: Optional replacement for the default build_token
        enabled: Disabled providers are skipped at registration

    Example:
        >>> semicolon = Provider("Semicolon", ";", token_type=TokenType.SEMICOLON)
    """

    __slots__ = ("name", "condition", "token_type", "weight", "id", "enabled", "_test", "_build")

    def __init__(
        self,
        name: str,
        condition: Any = None,
        *,
        token_type: TokenType | None = None,
        weight: int | None = None,
        test: Callable[..., TestResult] | None = None,
        build: Callable[..., BuildResult] | None = None,
        enabled: bool = True,
    ) -> None:
        if not name:
            raise ConfigurationError("provider name must not be empty")
        self.name = name
        self.condition = condition
        self.token_type = token_type
        self.weight = weight
        self.id: int | None = None
        self.enabled = enabled
        self._test = test
        self._build = build

    def test(self, engine: Tokenizer, context: ContextFrame) -> TestResult:
        """Evaluate the match condition at the current offset."""
        if self._test is not None:
            return self._test(engine, context)

        condition = self.condition
        if isinstance(condition, str):
            return condition if engine.tracker.matches(condition) else None
        if isinstance(condition, re.Pattern):
            match = condition.match(engine.tracker.source, engine.tracker.offset)
            if match is None:
                return None
            return capture(match)
        if callable(condition):
            return condition(engine, context)
        raise ConfigurationError("does not have a valid test condition", self.name)

    def build_token(
        self,
        engine: Tokenizer,
        context: ContextFrame,
        match: TestResult,
    ) -> BuildResult:
        """Wrap the matched text in a token of ``token_type``."""
        if self._build is not None:
            return self._build(engine, context, match)

        if self.token_type is None:
            raise ConfigurationError("no token_type and no build callback", self.name)

        if isinstance(match, str):
            return engine.start_token(self.token_type, raw=match)
        if isinstance(match, Mapping):
            extra = {k: v for k, v in match.items() if k in _CAPTURE_FIELDS and k != "raw"}
            return engine.start_token(self.token_type, raw=match["raw"], **extra)
        raise ConfigurationError(
            f"cannot build a token from test result {match!r}", self.name
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, weight={self.weight}, id={self.id})"


def capture(match: re.Match[str]) -> dict[str, Any]:
    """Named groups of a match, with ``raw`` defaulting to the whole match."""
    groups = match.groupdict()
    if groups.get("raw") is None:
        groups["raw"] = match.group(0)
    return groups
