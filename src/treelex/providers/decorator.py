"""@provider decorator for reducing recognizer boilerplate.

Turns a build function into a Provider instance.

Example:
    >>> @provider("Arrow", condition="=>")
    ... def build_arrow(engine, context, match):
    ...     return engine.start_token(TokenType.ARROW_FUNCTION, raw=match)
    >>> build_arrow.name
    'Arrow'
"""

from collections.abc import Callable
from typing import Any

from treelex.providers.base import Provider
from treelex.providers.protocol import BuildResult, TestResult
from treelex.tokens import TokenType


def provider(
    name: str,
    *,
    condition: Any = None,
    token_type: TokenType | None = None,
    weight: int | None = None,
    test: Callable[..., TestResult] | None = None,
) -> Callable[[Callable[..., BuildResult]], Provider]:
    """Decorator to create a provider from a build function.

    Args:
        name: Unique provider name
        condition: Literal string, compiled pattern, or predicate
        token_type: Token type recorded on the provider
        weight: Explicit weight (computed from condition when None)
        test: Optional replacement for the condition-driven test

    Returns:
        Decorator producing a Provider whose build_token calls the function
    """

    def decorator(build: Callable[..., BuildResult]) -> Provider:
        return Provider(
            name,
            condition,
            token_type=token_type,
            weight=weight,
            test=test,
            build=build,
        )

    return decorator
