"""Recognizer ("provider") system.

Providers pair a match condition with token-construction logic. The
registry orders them by specificity weight; each tokenizer run works on
its own copy of that order.

Usage:
    >>> from treelex.providers import ProviderRegistryBuilder, provider
    >>> from treelex.tokens import TokenType
    >>>
    >>> @provider("Arrow", condition="=>")
    ... def build_arrow(engine, context, match):
    ...     return engine.start_token(TokenType.ARROW_FUNCTION, raw=match)
    >>>
    >>> builder = create_registry_with_defaults()
    >>> builder.register(build_arrow)
    >>> registry = builder.build()

Thread Safety:
Providers must be stateless. Registries are immutable once built.

"""

from treelex.providers.base import Provider
from treelex.providers.decorator import provider
from treelex.providers.protocol import TestResult, TokenProvider, TokenResult
from treelex.providers.registry import (
    ProviderRegistry,
    ProviderRegistryBuilder,
    ProviderSet,
    create_default_registry,
    create_registry_with_defaults,
    initialize_registry,
)

__all__ = [
    "Provider",
    "ProviderRegistry",
    "ProviderRegistryBuilder",
    "ProviderSet",
    "TestResult",
    "TokenProvider",
    "TokenResult",
    "create_default_registry",
    "create_registry_with_defaults",
    "initialize_registry",
    "provider",
]
