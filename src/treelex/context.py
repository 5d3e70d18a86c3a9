"""Lexical scope frames for context-sensitive recognizers.

Recognizers see the innermost ContextFrame on every test. A frame records
the kind of scope, back references to the enclosing class, function and
member tokens, the names bound in that scope, and how many curly braces
have been opened inside it.

Thread Safety:
A ContextStack belongs to exactly one tokenizer run. Frames reference
tokens of that run only.

"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TYPE_CHECKING

from treelex.errors import StructuralError

if TYPE_CHECKING:
    from treelex.tokens import Token


class ScopeKind(Enum):
    """Kinds of lexical scope."""

    GLOBAL = "Global"
    CLASS = "Class"
    FUNCTION = "Function"
    ARROW_FUNCTION = "ArrowFunction"
    MEMBER = "Member"
    PARAMETER_LIST = "ParameterList"


@dataclass(slots=True)
class ContextFrame:
    """One level of lexical nesting.

    Attributes:
        scope: Scope kind, None for the synthetic root frame
        this_class: Enclosing class token (non-owning)
        this_function: Enclosing function token (non-owning)
        this_member: Enclosing member token (non-owning)
        owner: Open token whose body this frame describes (non-owning)
        bindings: Names declared in this scope
        depth: Curly braces opened and not yet closed in this frame

    """

    scope: ScopeKind | None = None
    this_class: Token | None = None
    this_function: Token | None = None
    this_member: Token | None = None
    owner: Token | None = None
    bindings: dict[str, Token] = field(default_factory=dict)
    depth: int = 0


class ContextStack:
    """Stack of ContextFrames that is never empty.

    A synthetic root frame (scope None) is pushed on construction. Pushing
    copies the back references of the enclosing frame and starts with
    fresh bindings; popping the root frame is a structural error.

    Usage:
            >>> stack = ContextStack()
            >>> stack.current.scope is None
            True
            >>> stack.push(scope=ScopeKind.GLOBAL).scope
        <ScopeKind.GLOBAL: 'Global'>
    """

    __slots__ = ("_frames",)

    def __init__(self) -> None:
        self._frames: list[ContextFrame] = [ContextFrame()]

    @property
    def current(self) -> ContextFrame:
        """Innermost frame."""
        return self._frames[-1]

    def push(self, **fields: object) -> ContextFrame:
        """Push a frame derived from the current one.

        Args:
            **fields: ContextFrame attributes to override

        Returns:
            The new innermost frame
        """
        frame = replace(self.current, bindings={}, depth=0, owner=None)
        for key, value in fields.items():
            setattr(frame, key, value)
        self._frames.append(frame)
        return frame

    def pop(self) -> ContextFrame:
        """Remove and return the innermost frame.

        Raises:
            StructuralError: If only the root frame remains.
        """
        if len(self._frames) <= 1:
            raise StructuralError("context stack underflow")
        return self._frames.pop()

    def resolve(self, name: str) -> Token | None:
        """Find the token bound to name in the innermost scope declaring it."""
        for frame in reversed(self._frames):
            token = frame.bindings.get(name)
            if token is not None:
                return token
        return None

    def __len__(self) -> int:
        return len(self._frames)

    def __iter__(self):
        return iter(reversed(self._frames))
