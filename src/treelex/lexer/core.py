"""Recognizer-driven tokenizer that builds a token tree.

On every request the tokenizer derives a pipeline from its private copy
of the registry, tries each provider's test against the current scope
and the remaining source, and lets the first match build a token. The
token is then finished through the lifecycle manager, which advances the
cursor and attaches the token to the innermost open token.

Whitespace tokens are consumed and the request is retried; they never
surface as results. When nothing matches, the run either ends (source
exhausted) or reports a ParseFailure value.

Thread Safety:
Tokenizer instances are single-use. Create one per source string.
The registry passed in is only read; self-removing providers remove
themselves from the run's private ProviderSet.

"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from treelex.config import TokenizerConfig, get_tokenizer_config
from treelex.context import ContextFrame, ContextStack
from treelex.errors import ConfigurationError, ParseError, ParseFailure, StructuralError
from treelex.lexer.lifecycle import TokenLifecycle
from treelex.lexer.states import TokenizerState
from treelex.location import START, PositionTracker, SourcePosition
from treelex.providers.protocol import TokenResult
from treelex.tokens import Token, TokenType
from treelex.utils.logger import get_logger

if TYPE_CHECKING:
    from treelex.providers.protocol import TokenProvider
    from treelex.providers.registry import ProviderRegistry, ProviderSet

_module_logger = get_logger(__name__)

_WHITESPACE = re.compile(r"\s+")
_WORD_CHAR = re.compile(r"[\w$]")


class Tokenizer:
    """Incremental tokenizer over one source string.

    Usage:
            >>> tokenizer = Tokenizer("x = 5", filename="demo.js")
            >>> root = tokenizer.tokenize()
            >>> [child.token_name for child in root.children]
            ['IDENTIFIER', 'ASSIGNMENT', 'NUMBER']

    Thread Safety:
        Tokenizer instances are single-use. All state is instance-local.

    """

    __slots__ = (
        "_filename",
        "_config",
        "_logger",
        "_providers",
        "_tracker",
        "_contexts",
        "_lifecycle",
        "_state",
        "_failure",
        "_error",
        "_zero_width_offset",
    )

    def __init__(
        self,
        source: str,
        filename: str | None = None,
        registry: ProviderRegistry | None = None,
        *,
        config: TokenizerConfig | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """Initialize tokenizer with source text.

        Args:
            source: Decoded source text
            filename: Label used in diagnostics only
            registry: Providers to use (default: built-in providers)
            config: Configuration (default: the active context config)
            logger: Sink for log events (default: the module logger)
        """
        if registry is None:
            from treelex.providers.registry import create_default_registry

            registry = create_default_registry()

        self._filename = filename
        self._config = config or get_tokenizer_config()
        self._logger = logger or _module_logger
        self._providers: ProviderSet = registry.provider_set(self._logger)
        self._tracker = PositionTracker(source)
        self._contexts = ContextStack()
        self._lifecycle = TokenLifecycle(self._tracker, self._logger, filename)
        self._state = TokenizerState.SCANNING
        self._failure: ParseFailure | None = None
        self._error: StructuralError | None = None
        self._zero_width_offset = -1

    # =========================================================================
    # Accessors
    # =========================================================================

    @property
    def filename(self) -> str | None:
        return self._filename

    @property
    def source(self) -> str:
        return self._tracker.source

    @property
    def config(self) -> TokenizerConfig:
        return self._config

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    @property
    def tracker(self) -> PositionTracker:
        return self._tracker

    @property
    def providers(self) -> ProviderSet:
        """This run's private copy of the registry indices."""
        return self._providers

    @property
    def state(self) -> TokenizerState:
        return self._state

    @property
    def failure(self) -> ParseFailure | None:
        return self._failure

    @property
    def context(self) -> ContextFrame:
        """Innermost scope frame."""
        return self._contexts.current

    @property
    def contexts(self) -> ContextStack:
        return self._contexts

    @property
    def all_tokens(self) -> list[Token]:
        """Every token created by this run, whitespace included."""
        return self._lifecycle.all_tokens

    @property
    def open_tokens(self) -> list[Token]:
        return self._lifecycle.open_tokens

    @property
    def position(self) -> SourcePosition:
        return self._tracker.position

    @property
    def remainder(self) -> str:
        return self._tracker.remainder

    def clone_position(self) -> SourcePosition:
        """Snapshot of the current position (positions are immutable)."""
        return self._tracker.position

    def is_eof(self) -> bool:
        return self._tracker.is_eof()

    # =========================================================================
    # Pipeline
    # =========================================================================

    def prepare_pipeline(self, expected: Sequence[TokenType | int] = ()) -> list[TokenProvider]:
        """Providers to try for the next token, in order."""
        return self._providers.prepare_pipeline(expected)

    def remove_provider(self, provider: TokenProvider) -> bool:
        """Remove a provider from this run only. Idempotent."""
        return self._providers.remove_provider(provider)

    def get_provider(self, name: str) -> TokenProvider | None:
        return self._providers.get(name)

    def get_provider_by_id(self, provider_id: TokenType | int) -> TokenProvider | None:
        return self._providers.get_by_id(provider_id)

    # =========================================================================
    # Token requests
    # =========================================================================

    def next_token(self, *expected: TokenType | int) -> TokenResult | ParseFailure | None:
        """Produce the next non-whitespace token.

        Args:
            *expected: Optional allow-list of provider ids / token types

        Returns:
            TokenResult on a match, None once the source is exhausted, or a
            ParseFailure when input remains that nothing matches.

        Raises:
            ConfigurationError: If no providers are registered at all.
            StructuralError: If the run reached an impossible state. Once
                raised, every later request raises it again.
        """
        if self._state is TokenizerState.END_OF_INPUT:
            return None
        if self._state is TokenizerState.FAILED:
            if self._failure is None and self._error is not None:
                raise self._error
            return self._failure

        try:
            result = self._read(expected, attach=True)
        except StructuralError as exc:
            self._fail_structurally(exc)
            raise

        if result is not None:
            self._state = TokenizerState.EMITTED_TOKEN
            return result

        if self.is_eof():
            self._state = TokenizerState.END_OF_INPUT
            self._logger.debug(
                "Successfully tokenized %s (%d tokens)",
                self._filename,
                len(self.all_tokens),
            )
            return None

        self._failure = self._diagnose()
        self._state = TokenizerState.FAILED
        self._logger.debug(
            "Failed to tokenize %s",
            self._filename,
            extra={"payload": {"failure": str(self._failure)}},
        )
        return self._failure

    def read_token(self, *expected: TokenType | int) -> Token | None:
        """Read a header token on behalf of a provider.

        The token is finished but not attached to any parent, and a miss
        does not end the run.

        Returns:
            The token, or None if nothing in the pipeline matched.
        """
        result = self._read(expected, attach=False)
        return result.token if result is not None else None

    def tokenize(self) -> Token | ParseFailure | None:
        """Tokenize the whole source into a tree.

        The first token is expected to be an open root (see the Global
        provider). Every following token is fetched with the previous
        token's follow types; tokens that no open token adopted are
        appended to the root. The root is closed at end of input if no
        other token remains open.

        Returns:
            The root token, a ParseFailure, or None for input that produced
            no token at all.

        Raises:
            ParseError: On failure, when ``config.raise_on_failure`` is set.
            StructuralError: If the run reached an impossible state.
        """
        first = self.next_token()
        if first is None:
            return None
        if isinstance(first, ParseFailure):
            return self._report(first)

        root = first.token
        if root.children is None:
            root.children = []
        result = first
        while True:
            following = self.next_token(*result.next_token)
            if following is None:
                break
            if isinstance(following, ParseFailure):
                return self._report(following)
            token = following.token
            if token.parent is None and token is not root:
                root.children.append(token)
                token.parent = root
            result = following

        if root.is_open and self.open_tokens == [root]:
            self._lifecycle.close(root)
        return root

    def _read(self, expected: Sequence[TokenType | int], attach: bool) -> TokenResult | None:
        while True:
            pipeline = self.prepare_pipeline(expected)
            if not pipeline:
                if len(self._providers) == 0:
                    raise ConfigurationError(
                        f"asked to tokenize {self._filename or '<source>'} with an empty pipeline"
                    )
                return None

            result = self._try_pipeline(pipeline, attach)
            if result is None:
                return None
            if result.token.type is TokenType.WHITESPACE:
                continue
            return result

    def _try_pipeline(self, pipeline: list[TokenProvider], attach: bool) -> TokenResult | None:
        for provider in pipeline:
            context = self.context
            match = provider.test(self, context)
            if not match:
                continue

            start_offset = self._tracker.offset
            built = provider.build_token(self, context, match)
            if built is None:
                continue
            result = built if isinstance(built, TokenResult) else TokenResult(built)
            token = result.token
            if token.provider is None:
                token.provider = provider.name

            self._lifecycle.end_token(token, leave_open=result.leave_open, attach=attach)
            self._check_progress(provider, start_offset, result)
            return result
        return None

    def _check_progress(self, provider: TokenProvider, start_offset: int, result: TokenResult) -> None:
        """Abort when a match leaves the cursor where it was.

        An open container token may be zero-width once per offset.
        """
        if self._tracker.offset > start_offset:
            return
        if result.leave_open and self._zero_width_offset != start_offset:
            self._zero_width_offset = start_offset
            return
        raise StructuralError(
            f"provider {provider.name} matched without consuming input",
            self._filename,
            self._tracker.position,
        )

    # =========================================================================
    # Helpers for providers
    # =========================================================================

    def start_token(
        self,
        token_type: TokenType | None = None,
        raw: str | None = None,
        **fields: Any,
    ) -> Token:
        """Create a token at the current position.

        Raises:
            StructuralError: If ``config.max_tokens`` would be exceeded.
        """
        limit = self._config.max_tokens
        if limit is not None and len(self.all_tokens) >= limit:
            raise StructuralError(
                f"token limit of {limit} exceeded", self._filename, self._tracker.position
            )
        return self._lifecycle.start_token(token_type, raw, **fields)

    def end_token(self, token: Token, leave_open: bool = False, attach: bool = True) -> Token:
        """Finish a token (see TokenLifecycle.end_token)."""
        return self._lifecycle.end_token(token, leave_open=leave_open, attach=attach)

    def advance(self, token: Token) -> SourcePosition:
        """Consume a token's raw text before it is finished."""
        return self._lifecycle.advance(token)

    def close_scope(self, token: Token) -> Token:
        """Close an open token and pop the scope frame it owns, if any."""
        self._lifecycle.close(token)
        if self.context.owner is token:
            self.pop_context()
        return token

    def skip_whitespace(self) -> Token | None:
        """Consume a run of whitespace as a detached WHITESPACE token."""
        match = _WHITESPACE.match(self._tracker.source, self._tracker.offset)
        if match is None:
            return None
        token = self.start_token(TokenType.WHITESPACE, raw=match.group(0))
        return self._lifecycle.end_token(token)

    def at_word(self, word: str) -> bool:
        """True if the upcoming text is word, not followed by a word character."""
        if not self._tracker.matches(word):
            return False
        after = self._tracker.offset + len(word)
        return after >= len(self.source) or _WORD_CHAR.match(self.source, after) is None

    def eat_text(
        self,
        text: str,
        token_type: TokenType = TokenType.RAW_TEXT,
        *,
        word: bool = False,
        **fields: Any,
    ) -> Token | None:
        """Consume text if the source continues with it.

        The text becomes a finished, detached token so that header reads
        stay lossless. With ``word`` set, text followed by a word character
        does not count as a match.

        Returns:
            The token, or None (nothing consumed) if the text is not next.
        """
        if not text:
            return None
        if not (self.at_word(text) if word else self._tracker.matches(text)):
            return None
        token = self.start_token(token_type, raw=text, **fields)
        return self._lifecycle.end_token(token, attach=False)

    def read_text(self, count: int = 1) -> str:
        """Peek at the next count characters without consuming them."""
        offset = self._tracker.offset
        return self._tracker.source[offset : offset + count]

    def read_eol(self) -> str:
        """Text from the cursor up to (not including) the next newline."""
        source = self._tracker.source
        offset = self._tracker.offset
        newline = source.find("\n", offset)
        return source[offset:] if newline == -1 else source[offset:newline]

    def is_escaped(self) -> bool:
        """True if the character before the cursor is a backslash."""
        offset = self._tracker.offset
        return offset > 0 and self._tracker.source[offset - 1] == "\\"

    # =========================================================================
    # Scope management
    # =========================================================================

    def push_context(self, **fields: Any) -> ContextFrame:
        """Push a scope frame derived from the current one."""
        return self._contexts.push(**fields)

    def pop_context(self) -> ContextFrame:
        """Pop the innermost scope frame.

        Raises:
            StructuralError: If only the synthetic root frame remains.
        """
        try:
            return self._contexts.pop()
        except StructuralError as exc:
            raise StructuralError(exc.message, self._filename, self._tracker.position) from exc

    # =========================================================================
    # Failure reporting
    # =========================================================================

    def _diagnose(self) -> ParseFailure:
        failed_at = self._tracker.position
        if self.all_tokens:
            last = self.all_tokens[-1]
            name = last.token_name
            position = last.end or last.start
        else:
            name = TokenType.UNKNOWN.name
            position = START
        snippet = self.source[failed_at.offset : failed_at.offset + self._config.snippet_length]
        return ParseFailure(
            filename=self._filename,
            last_token_name=name,
            position=position,
            snippet=snippet,
            failed_at=failed_at,
        )

    def _report(self, failure: ParseFailure) -> ParseFailure:
        if self._config.raise_on_failure:
            raise ParseError(failure)
        return failure

    def _fail_structurally(self, exc: StructuralError) -> None:
        self._state = TokenizerState.FAILED
        self._error = exc
        self._logger.error(
            "Structural error while tokenizing %s: %s",
            self._filename,
            exc,
            extra={"payload": {"position": exc.position and exc.position.to_dict()}},
        )
