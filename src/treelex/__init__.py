"""
treelex: pluggable, priority-ordered tokenizer that builds a token tree.

Raw source text is turned, one token at a time, into a tree of typed
tokens. Each lexical construct is recognized by a provider; providers are
tried in descending specificity weight, can consult the current lexical
scope, and may leave their token open to collect children.

Quick Start:
    >>> from treelex import tokenize
    >>> root = tokenize("class Foo extends Bar {}")
    >>> cls = root.children[0]
    >>> cls.class_name, cls.super_class_name
    ('Foo', 'Bar')

Custom Providers:
    >>> from treelex import create_registry_with_defaults, provider, TokenType
    >>>
    >>> @provider("Arrow", condition="=>")
    ... def build_arrow(engine, context, match):
    ...     return engine.start_token(TokenType.ARROW_FUNCTION, raw=match)
    >>>
    >>> builder = create_registry_with_defaults()
    >>> builder.register(build_arrow)
    >>> root = tokenize("f => 1", registry=builder.build())

Failures:
    Input no provider matches is reported as a ParseFailure value; the
    caller decides whether to skip, defer, or abort.
"""

import logging

from treelex.config import (
    TokenizerConfig,
    get_tokenizer_config,
    reset_tokenizer_config,
    set_tokenizer_config,
    tokenizer_config_context,
)
from treelex.context import ContextFrame, ContextStack, ScopeKind
from treelex.errors import (
    ConfigurationError,
    ParseError,
    ParseFailure,
    StructuralError,
    TreelexError,
)
from treelex.lexer import ScriptTokenizer, Tokenizer, TokenizerState
from treelex.location import PositionTracker, SourcePosition
from treelex.providers import (
    Provider,
    ProviderRegistry,
    ProviderRegistryBuilder,
    ProviderSet,
    TokenProvider,
    TokenResult,
    create_default_registry,
    create_registry_with_defaults,
    initialize_registry,
    provider,
)
from treelex.serialization import to_dict, to_json
from treelex.tokens import RESERVED_WORDS, ReservedWord, Token, TokenType
from treelex.weights import calculate_weight

__version__ = "0.1.0"


def tokenize(
    source: str,
    *,
    filename: str | None = None,
    registry: ProviderRegistry | None = None,
    config: TokenizerConfig | None = None,
    logger: logging.Logger | None = None,
) -> Token | ParseFailure | None:
    """Tokenize source into a token tree.

    Args:
        source: Decoded source text
        filename: Label used in diagnostics only
        registry: Providers to use (default: built-in providers)
        config: Tokenizer configuration (default: the active context config)
        logger: Sink for log events

    Returns:
        The root token, a ParseFailure, or None if the source produced no
        token at all.

    Raises:
        ConfigurationError: If the registry has no providers.
        StructuralError: If the run reached an impossible state.
        ParseError: On failure, when ``config.raise_on_failure`` is set.

    Example:
        >>> root = tokenize("x = 5")
        >>> [t.raw for t in root.children]
        ['x', '=', '5']
    """
    tokenizer = ScriptTokenizer(
        source,
        filename=filename,
        registry=registry,
        config=config,
        logger=logger,
    )
    return tokenizer.tokenize()


__all__ = [
    # Entry point
    "tokenize",
    # Engine
    "ScriptTokenizer",
    "Tokenizer",
    "TokenizerState",
    # Tokens and positions
    "RESERVED_WORDS",
    "ReservedWord",
    "SourcePosition",
    "PositionTracker",
    "Token",
    "TokenType",
    # Scopes
    "ContextFrame",
    "ContextStack",
    "ScopeKind",
    # Providers
    "Provider",
    "ProviderRegistry",
    "ProviderRegistryBuilder",
    "ProviderSet",
    "TokenProvider",
    "TokenResult",
    "calculate_weight",
    "create_default_registry",
    "create_registry_with_defaults",
    "initialize_registry",
    "provider",
    # Configuration
    "TokenizerConfig",
    "get_tokenizer_config",
    "reset_tokenizer_config",
    "set_tokenizer_config",
    "tokenizer_config_context",
    # Errors
    "ConfigurationError",
    "ParseError",
    "ParseFailure",
    "StructuralError",
    "TreelexError",
    # Serialization
    "to_dict",
    "to_json",
]
