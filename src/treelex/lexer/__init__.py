"""Recognizer-driven tokenizer engine.

Architecture:
lexer/
├── __init__.py          # Re-exports Tokenizer, ScriptTokenizer, TokenizerState
├── core.py              # Tokenizer (pipeline trial, tree building, diagnostics)
├── lifecycle.py         # TokenLifecycle (allocation, open/closed tokens)
├── script.py            # ScriptTokenizer (whitespace always skippable)
└── states.py            # TokenizerState enum

Usage:
    >>> from treelex.lexer import ScriptTokenizer
    >>> root = ScriptTokenizer("x = 5;").tokenize()
    >>> [t.raw for t in root.children]
    ['x', '=', '5', ';']

"""

from treelex.lexer.core import Tokenizer
from treelex.lexer.lifecycle import TokenLifecycle
from treelex.lexer.script import ScriptTokenizer
from treelex.lexer.states import TokenizerState

__all__ = ["ScriptTokenizer", "TokenLifecycle", "Tokenizer", "TokenizerState"]
