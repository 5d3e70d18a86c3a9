"""Token allocation and open/closed bookkeeping.

Every token of a run is created here and recorded, in creation order, in
``all_tokens`` (whitespace included). Finishing a token consumes its raw
text through the PositionTracker exactly once, then either closes it or
pushes it on the open-token stack where it collects following siblings
as children.

Thread Safety:
Belongs to exactly one tokenizer run.
"""

from __future__ import annotations

import logging
from typing import Any

from treelex.errors import StructuralError
from treelex.location import PositionTracker, SourcePosition
from treelex.tokens import Token, TokenType
from treelex.utils.logger import trace


class TokenLifecycle:
    """Creates tokens, finishes them, and maintains the open-token stack."""

    __slots__ = ("_tracker", "_logger", "_filename", "all_tokens", "open_tokens", "_raw_end")

    def __init__(
        self,
        tracker: PositionTracker,
        logger: logging.Logger,
        filename: str | None = None,
    ) -> None:
        self._tracker = tracker
        self._logger = logger
        self._filename = filename
        self.all_tokens: list[Token] = []
        self.open_tokens: list[Token] = []
        # Position after each consumed token's raw text, keyed by index
        self._raw_end: dict[int, SourcePosition] = {}

    @property
    def parent(self) -> Token | None:
        """Innermost open token, the implicit parent of the next sibling."""
        return self.open_tokens[-1] if self.open_tokens else None

    def start_token(
        self,
        token_type: TokenType | None,
        raw: str | None = None,
        **fields: Any,
    ) -> Token:
        """Allocate a token at the current position.

        Args:
            token_type: Type of the token (UNKNOWN when None)
            raw: Matched text, may be set later
            **fields: Semantic Token attributes (name, operator, ...)
        """
        token = Token(
            type=token_type or TokenType.UNKNOWN,
            start=self._tracker.position,
            raw=raw,
            index=len(self.all_tokens),
            **fields,
        )
        self.all_tokens.append(token)
        return token

    def advance(self, token: Token) -> SourcePosition:
        """Consume the token's raw text. A second call is a no-op.

        Raises:
            StructuralError: If raw is unset or does not match the source.
        """
        if token.consumed:
            trace(
                self._logger,
                f"{self._filename}: token {token.token_name} already advanced",
                index=token.index,
            )
            return self._raw_end[token.index]
        if token.raw is None:
            raise StructuralError(
                f"cannot finish {token.token_name} token without raw text",
                self._filename,
                token.start,
            )
        if token.start.offset != self._tracker.offset:
            raise StructuralError(
                f"{token.token_name} token started at {token.start} but the cursor moved",
                self._filename,
                self._tracker.position,
            )
        try:
            end = self._tracker.advance(token.raw)
        except ValueError as exc:
            raise StructuralError(str(exc), self._filename, token.start) from exc
        token.consumed = True
        self._raw_end[token.index] = end
        return end

    def end_token(self, token: Token, leave_open: bool = False, attach: bool = True) -> Token:
        """Finish a token.

        Args:
            token: Token whose raw text is set
            leave_open: Keep the token open and make it the parent of the
                following siblings
            attach: Append the token to the current parent's children

        Raises:
            StructuralError: If the token has no raw text.
        """
        if token.raw is None:
            raise StructuralError(
                f"cannot finish {token.token_name} token without raw text",
                self._filename,
                token.start,
            )
        if token.end is not None:
            trace(self._logger, f"{self._filename}: token {token.token_name} already finished")
            return token

        end = self.advance(token)

        if attach and token.type is not TokenType.WHITESPACE:
            self._attach(token)

        if leave_open:
            if token.children is None:
                token.children = []
            self.open_tokens.append(token)
        else:
            token.end = end
        return token

    def close(self, token: Token, end: SourcePosition | None = None) -> Token:
        """Close an open token and pop it from the open-token stack.

        Raises:
            StructuralError: If token is not the innermost open token.
        """
        if self.parent is not token:
            raise StructuralError(
                f"cannot close {token.token_name}: it is not the innermost open token",
                self._filename,
                self._tracker.position,
            )
        self.open_tokens.pop()
        token.end = end or self._tracker.position
        return token

    def _attach(self, token: Token) -> None:
        parent = self.parent
        if parent is None or parent is token or token.parent is not None:
            return
        parent.children.append(token)
        token.parent = parent
