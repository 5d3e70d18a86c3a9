"""Tests for lexical scope frames and the context stack."""

import pytest

from treelex.context import ContextStack, ScopeKind
from treelex.errors import StructuralError
from treelex.location import SourcePosition
from treelex.tokens import Token, TokenType


def _token(name: str) -> Token:
    return Token(TokenType.IDENTIFIER, SourcePosition(), raw=name, name=name)


class TestContextStack:
    """Stack discipline."""

    def test_starts_with_root_frame(self) -> None:
        stack = ContextStack()
        assert len(stack) == 1
        assert stack.current.scope is None

    def test_push_and_pop(self) -> None:
        stack = ContextStack()
        frame = stack.push(scope=ScopeKind.GLOBAL)
        assert stack.current is frame
        assert stack.pop() is frame
        assert stack.current.scope is None

    def test_root_frame_cannot_be_popped(self) -> None:
        stack = ContextStack()
        with pytest.raises(StructuralError, match="underflow"):
            stack.pop()
        assert len(stack) == 1

    def test_underflow_after_balanced_pops(self) -> None:
        stack = ContextStack()
        stack.push(scope=ScopeKind.GLOBAL)
        stack.push(scope=ScopeKind.CLASS)
        stack.pop()
        stack.pop()
        with pytest.raises(StructuralError):
            stack.pop()

    def test_iterates_innermost_first(self) -> None:
        stack = ContextStack()
        stack.push(scope=ScopeKind.GLOBAL)
        stack.push(scope=ScopeKind.FUNCTION)
        assert [frame.scope for frame in stack] == [
            ScopeKind.FUNCTION,
            ScopeKind.GLOBAL,
            None,
        ]


class TestFrameInheritance:
    """Pushed frames derive from the enclosing frame."""

    def test_back_references_inherited(self) -> None:
        stack = ContextStack()
        cls = _token("A")
        stack.push(scope=ScopeKind.CLASS, this_class=cls, owner=cls)
        inner = stack.push(scope=ScopeKind.FUNCTION)
        assert inner.this_class is cls

    def test_owner_bindings_and_depth_reset(self) -> None:
        stack = ContextStack()
        cls = _token("A")
        outer = stack.push(scope=ScopeKind.CLASS, owner=cls)
        outer.bindings["x"] = _token("x")
        outer.depth = 2
        inner = stack.push(scope=ScopeKind.FUNCTION)
        assert inner.owner is None
        assert inner.bindings == {}
        assert inner.depth == 0
        assert outer.depth == 2


class TestResolve:
    """Name lookup through enclosing scopes."""

    def test_innermost_binding_wins(self) -> None:
        stack = ContextStack()
        outer_x = _token("x")
        inner_x = _token("x")
        stack.push(scope=ScopeKind.GLOBAL).bindings["x"] = outer_x
        stack.push(scope=ScopeKind.FUNCTION).bindings["x"] = inner_x
        assert stack.resolve("x") is inner_x
        stack.pop()
        assert stack.resolve("x") is outer_x

    def test_unbound(self) -> None:
        assert ContextStack().resolve("missing") is None
