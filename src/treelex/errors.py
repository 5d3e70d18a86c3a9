"""Exception classes and failure diagnostics for treelex.

Three kinds of trouble exist:

- ConfigurationError: a recognizer definition is broken. Raised while the
  registry is assembled, never retried.
- StructuralError: the token tree or the scope stack was driven into an
  impossible state. Fatal for the current run only.
- ParseFailure: no recognizer matched the remaining input. This is a
  value, not an exception, so the caller decides whether to defer, skip,
  or abort. ParseError wraps it for callers that prefer raising.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from treelex.location import SourcePosition


class TreelexError(Exception):
    """Base exception for all treelex errors.

    Subclass this for specific error categories.
    """

    pass


class ConfigurationError(TreelexError):
    """Invalid recognizer configuration.

    Raised when a provider has no usable match condition, when two
    providers share a name, or when the engine is asked for a token with
    an empty pipeline.
    """

    def __init__(self, message: str, provider_name: str | None = None) -> None:
        """Initialize configuration error.

        Args:
            message: Description of the problem
            provider_name: Name of the offending provider (optional)
        """
        self.provider_name = provider_name
        if provider_name:
            message = f"Provider '{provider_name}': {message}"
        super().__init__(message)


class StructuralError(TreelexError):
    """The current run reached an impossible state.

    Raised on context stack underflow, on finishing a token without raw
    text, and when a match fails to advance the position.
    """

    def __init__(
        self,
        message: str,
        filename: str | None = None,
        position: SourcePosition | None = None,
    ) -> None:
        """Initialize structural error with optional location.

        Args:
            message: Error description
            filename: Label of the source being tokenized (optional)
            position: Position at which the error was detected (optional)
        """
        self.message = message
        self.filename = filename
        self.position = position

        location = ""
        if filename:
            location = f"{filename}:"
        if position is not None:
            location += f"{position}:"
        if location:
            location = location.rstrip(":") + " "

        super().__init__(f"{location}{message}")


@dataclass(frozen=True, slots=True)
class ParseFailure:
    """Structured diagnostic for input that no recognizer could match.

    Attributes:
        filename: Label of the source being tokenized
        last_token_name: Type name of the last token created
        position: End of the last token if it was closed, else its start
        snippet: Short excerpt of the unconsumed source
        failed_at: Position where matching stopped

    """

    filename: str | None
    last_token_name: str
    position: SourcePosition
    snippet: str
    failed_at: SourcePosition

    def __str__(self) -> str:
        label = self.filename or "<source>"
        return (
            f"{label}: failed to tokenize at {self.failed_at}; "
            f"last token read was {self.last_token_name} at {self.position}: "
            f"... {self.snippet!r}"
        )


class ParseError(TreelexError):
    """Raised instead of returning a ParseFailure when strict mode is on."""

    def __init__(self, failure: ParseFailure) -> None:
        self.failure = failure
        super().__init__(str(failure))
