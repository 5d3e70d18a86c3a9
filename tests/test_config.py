"""Tests for ContextVar-based tokenizer configuration.

Validates thread isolation, context manager behavior, and that tokenizer
runs pick up the active configuration.
"""

from threading import Thread

import pytest

from treelex import (
    ParseError,
    ParseFailure,
    ScriptTokenizer,
    TokenizerConfig,
    get_tokenizer_config,
    reset_tokenizer_config,
    set_tokenizer_config,
    tokenize,
    tokenizer_config_context,
)


class TestTokenizerConfigDataclass:
    """Test TokenizerConfig frozen dataclass behavior."""

    def test_default_values(self) -> None:
        config = TokenizerConfig()
        assert config.snippet_length == 20
        assert config.always_skip_whitespace is True
        assert config.raise_on_failure is False
        assert config.max_tokens is None

    def test_immutability(self) -> None:
        config = TokenizerConfig()
        with pytest.raises(AttributeError):
            config.snippet_length = 5  # type: ignore[misc]

    def test_from_dict_ignores_unknown_keys(self) -> None:
        config = TokenizerConfig.from_dict({"snippet_length": 40, "colour": "red"})
        assert config.snippet_length == 40
        assert config.raise_on_failure is False


class TestContextVarFunctions:
    """Test get/set/reset functions."""

    def teardown_method(self) -> None:
        reset_tokenizer_config()

    def test_get_default(self) -> None:
        assert get_tokenizer_config() == TokenizerConfig()

    def test_set_and_reset(self) -> None:
        set_tokenizer_config(TokenizerConfig(snippet_length=3))
        assert get_tokenizer_config().snippet_length == 3
        reset_tokenizer_config()
        assert get_tokenizer_config().snippet_length == 20


class TestConfigContext:
    """Test the tokenizer_config_context manager."""

    def test_restores_previous(self) -> None:
        with tokenizer_config_context(TokenizerConfig(snippet_length=5)):
            assert get_tokenizer_config().snippet_length == 5
        assert get_tokenizer_config().snippet_length == 20

    def test_restores_on_exception(self) -> None:
        with pytest.raises(RuntimeError):
            with tokenizer_config_context(TokenizerConfig(snippet_length=5)):
                raise RuntimeError("boom")
        assert get_tokenizer_config().snippet_length == 20

    def test_nested(self) -> None:
        with tokenizer_config_context(TokenizerConfig(snippet_length=5)):
            with tokenizer_config_context(TokenizerConfig(snippet_length=7)):
                assert get_tokenizer_config().snippet_length == 7
            assert get_tokenizer_config().snippet_length == 5


class TestThreadIsolation:
    """Configuration set in one thread never leaks into another."""

    def test_worker_config_does_not_leak(self) -> None:
        seen: list[int] = []

        def worker() -> None:
            set_tokenizer_config(TokenizerConfig(snippet_length=1))
            seen.append(get_tokenizer_config().snippet_length)

        thread = Thread(target=worker)
        thread.start()
        thread.join()

        assert seen == [1]
        assert get_tokenizer_config().snippet_length == 20


class TestConfigAppliesToRuns:
    """Tokenizer runs read the active or explicit configuration."""

    def test_snippet_length_from_context(self) -> None:
        with tokenizer_config_context(TokenizerConfig(snippet_length=3)):
            failure = tokenize("@@@@@@@@")
        assert isinstance(failure, ParseFailure)
        assert failure.snippet == "@@@"

    def test_explicit_config_wins(self) -> None:
        with tokenizer_config_context(TokenizerConfig(snippet_length=3)):
            failure = tokenize("@@@@@@@@", config=TokenizerConfig(snippet_length=5))
        assert failure.snippet == "@@@@@"

    def test_config_captured_at_construction(self) -> None:
        tokenizer = ScriptTokenizer("@")
        with tokenizer_config_context(TokenizerConfig(raise_on_failure=True)):
            result = tokenizer.tokenize()
        assert isinstance(result, ParseFailure)

    def test_raise_on_failure(self) -> None:
        with tokenizer_config_context(TokenizerConfig(raise_on_failure=True)):
            with pytest.raises(ParseError) as exc_info:
                tokenize("x = @", filename="strict.js")
        assert exc_info.value.failure.filename == "strict.js"
        assert exc_info.value.failure.failed_at.offset == 4
