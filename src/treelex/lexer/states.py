"""Tokenizer run states."""

from __future__ import annotations

from enum import Enum, auto


class TokenizerState(Enum):
    """States of one tokenizer run.

    - SCANNING: no token requested yet
    - EMITTED_TOKEN: the last request produced a token
    - END_OF_INPUT: the source was fully consumed (terminal)
    - FAILED: no recognizer matched, or a structural error occurred (terminal)

    """

    SCANNING = auto()
    EMITTED_TOKEN = auto()
    END_OF_INPUT = auto()
    FAILED = auto()

    @property
    def is_terminal(self) -> bool:
        return self in (TokenizerState.END_OF_INPUT, TokenizerState.FAILED)
