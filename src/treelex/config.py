"""ContextVar-based tokenizer configuration for treelex.

Provides context-local configuration using Python's ContextVars (PEP 567).
A Tokenizer reads the active config once, at construction, unless one is
passed explicitly.

Thread Safety:
    ContextVars are thread-local by design. Each thread has independent storage,
    so no locks are needed.

Usage:
    from treelex.config import TokenizerConfig, tokenizer_config_context

    with tokenizer_config_context(TokenizerConfig(raise_on_failure=True)):
        root = tokenize(source, filename="app.js")

"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class TokenizerConfig:
    """Immutable tokenizer configuration.

    Attributes:
        snippet_length: Characters of unconsumed source quoted in a ParseFailure
        always_skip_whitespace: Append the whitespace recognizer to filtered
            pipelines so whitespace can always be skipped
        raise_on_failure: tokenize() raises ParseError instead of returning
            the ParseFailure
        max_tokens: Abort the run with a StructuralError once this many tokens
            have been created (None disables the limit)

    """

    snippet_length: int = 20
    always_skip_whitespace: bool = True
    raise_on_failure: bool = False
    max_tokens: int | None = None

    @classmethod
    def from_dict(cls, config_dict: dict) -> "TokenizerConfig":
        """Create TokenizerConfig from dictionary.

        Only includes keys that are valid TokenizerConfig fields; unknown keys
        are silently ignored.

        Example:
            >>> config = TokenizerConfig.from_dict({
            ...     "snippet_length": 40,
            ...     "unknown_key": "ignored",
            ... })
            >>> config.snippet_length
            40

        """
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in config_dict.items() if k in valid_fields}
        return cls(**filtered)


# Module-level default config (reused, never recreated)
_DEFAULT_CONFIG: TokenizerConfig = TokenizerConfig()

_tokenizer_config: ContextVar[TokenizerConfig] = ContextVar(
    "tokenizer_config",
    default=_DEFAULT_CONFIG,
)


def get_tokenizer_config() -> TokenizerConfig:
    """Get the active tokenizer configuration for this context."""
    return _tokenizer_config.get()


def set_tokenizer_config(config: TokenizerConfig) -> None:
    """Set tokenizer configuration for the current context.

    Only affects the current thread's context. Other threads are unaffected.
    """
    _tokenizer_config.set(config)


def reset_tokenizer_config() -> None:
    """Reset to the default configuration."""
    _tokenizer_config.set(_DEFAULT_CONFIG)


@contextmanager
def tokenizer_config_context(config: TokenizerConfig) -> Iterator[None]:
    """Context manager for temporary config changes.

    Properly restores the previous config even if an exception is raised.

    Example:
        >>> with tokenizer_config_context(TokenizerConfig(snippet_length=5)):
        ...     get_tokenizer_config().snippet_length
        5
    """
    previous = _tokenizer_config.get()
    _tokenizer_config.set(config)
    try:
        yield
    finally:
        _tokenizer_config.set(previous)


__all__ = [
    "TokenizerConfig",
    "get_tokenizer_config",
    "set_tokenizer_config",
    "reset_tokenizer_config",
    "tokenizer_config_context",
]
