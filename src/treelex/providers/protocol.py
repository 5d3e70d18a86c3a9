"""TokenProvider protocol for pluggable recognizers.

A provider pairs a match condition with token-construction logic. The
tokenizer calls ``test`` on each provider of the pipeline in order and
hands the first truthy result to that provider's ``build_token``.

Thread Safety:
Providers must be stateless with respect to any single run. All mutable
state lives on the Tokenizer passed as ``engine``. Multiple tokenizers may
call the same provider instance concurrently.

Example:
    >>> class ArrowProvider:
    ...     name = "Arrow"
    ...     condition = "=>"
    ...     token_type = TokenType.ARROW_FUNCTION
    ...     weight = None
    ...     id = None
    ...     enabled = True
    ...
    ...     def test(self, engine, context):
    ...         return engine.tracker.matches("=>") and "=>"
    ...
    ...     def build_token(self, engine, context, match):
    ...         return engine.start_token(TokenType.ARROW_FUNCTION, raw=match)

"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, Union, runtime_checkable

if TYPE_CHECKING:
    from treelex.context import ContextFrame
    from treelex.lexer.core import Tokenizer
    from treelex.tokens import Token, TokenType

# None/False: no match. True: matched, nothing captured. str: matched
# literal. Mapping: named captures (always including "raw").
TestResult = Union[None, bool, str, Mapping[str, Any]]


@dataclass(frozen=True, slots=True)
class TokenResult:
    """What a provider hands back to the tokenizer.

    Attributes:
        token: The constructed token (raw text set)
        next_token: Token types legal after this one, used as the pipeline
            of the following request
        leave_open: Keep the token open to receive following siblings as
            children

    """

    token: Token
    next_token: tuple[TokenType | int, ...] = ()
    leave_open: bool = False


BuildResult = Union["Token", TokenResult]


@runtime_checkable
class TokenProvider(Protocol):
    """Protocol for recognizer implementations.

    Attributes:
        name: Unique provider name. When it names a TokenType the registry
            reuses that type's value as the provider id.
        condition: Literal string, compiled pattern, or predicate; decides
            the default weight.
        token_type: Type of the token built by the default build_token
        weight: Sort weight; computed from condition at registration if None
        id: Assigned by the first registry built with the provider and
            kept by every later one, so a shared provider has one id
        enabled: Disabled providers are skipped at registration

    """

    name: str
    condition: Any
    token_type: TokenType | None
    weight: int | None
    id: int | None
    enabled: bool

    def test(self, engine: Tokenizer, context: ContextFrame) -> TestResult:
        """Decide whether this provider matches the remaining source.

        Must not consume input.
        """
        ...

    def build_token(
        self,
        engine: Tokenizer,
        context: ContextFrame,
        match: TestResult,
    ) -> BuildResult:
        """Create the token for a successful test.

        Args:
            engine: The running tokenizer
            context: Innermost scope frame
            match: The truthy value returned by test()

        Returns:
            A bare Token, or a TokenResult carrying follow types and the
            leave-open flag.
        """
        ...
