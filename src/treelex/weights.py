"""Specificity weights for recognizer match conditions.

Recognizers are tried in descending weight order, ties broken by name.
A match condition is one of:

- a literal string: weight is 100 + its length, so longer literals win
- a compiled regular expression: weight is derived from the structure of
  its character classes (see weigh_pattern)
- a predicate callable: fixed PREDICATE_WEIGHT, tried after every literal
  and pattern because nothing about it can be inspected

Anything else is a configuration error.

Thread Safety:
All functions are pure.

"""

from __future__ import annotations

import re
import sys
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from treelex.errors import ConfigurationError

if TYPE_CHECKING:
    from treelex.providers.protocol import TokenProvider

Condition = str | re.Pattern[str] | Callable[..., Any]

LITERAL_BASE_WEIGHT = 100
PATTERN_BASE_WEIGHT = -1
PREDICATE_WEIGHT = -1_000_000

# Explicit weights for recognizers that must run first or last
HIGHEST_WEIGHT = sys.maxsize
LOWEST_WEIGHT = -sys.maxsize

# Character class contributions
SINGLE_CLASS_REWARD = 50
ONE_OR_MORE_PENALTY = 50
ZERO_OR_MORE_PENALTY = 100

_SHORTHAND_CLASSES = frozenset("dDwWsS")
_LOOKAROUND_PREFIXES = ("?=", "?!", "?<=", "?<!")
_BOUNDED = re.compile(r"\{(\d*)(?:(,)(\d*))?\}")


def calculate_weight(condition: object, name: str | None = None) -> int:
    """Compute the specificity weight of a match condition.

    Args:
        condition: Literal string, compiled pattern, or predicate
        name: Provider name, used in error messages

    Returns:
        Integer weight; higher weights are tried first.

    Raises:
        ConfigurationError: If the condition kind is not recognized or a
            literal is empty.
    """
    if isinstance(condition, str):
        if not condition:
            raise ConfigurationError("literal condition must not be empty", name)
        return LITERAL_BASE_WEIGHT + len(condition)
    if isinstance(condition, re.Pattern):
        if not isinstance(condition.pattern, str):
            raise ConfigurationError("pattern condition must be a str pattern", name)
        return max(weigh_pattern(condition.pattern), PREDICATE_WEIGHT + 1)
    if callable(condition):
        return PREDICATE_WEIGHT
    raise ConfigurationError(
        f"does not have a valid test condition (got {type(condition).__name__})", name
    )


def weigh_pattern(pattern: str) -> int:
    """Score a regular expression by how specific its character classes are.

    Each character class (``[...]``, ``.``, or a ``\\d``-style shorthand)
    contributes according to the quantifier that follows it:

    - none: +50 (a single fixed-class character)
    - ``?``: 0
    - ``+``: -50
    - ``*``: -100
    - ``{m,n}``: minus the triangular number of the upper bound; an open
      ``{m,}`` costs as much as ``+`` plus the triangular number of m

    Lookaround assertions are skipped. Literal characters and group
    quantifiers do not contribute.

    Example:
        >>> weigh_pattern(r"[{}]")
        49
        >>> weigh_pattern(r"[a-z]+")
        -51
    """
    weight = PATTERN_BASE_WEIGHT
    pos = 0
    length = len(pattern)
    while pos < length:
        char = pattern[pos]
        if char == "\\":
            is_class = pos + 1 < length and pattern[pos + 1] in _SHORTHAND_CLASSES
            pos += 2
            if is_class:
                delta, pos = _quantifier_weight(pattern, pos)
                weight += delta
        elif char == "[":
            pos = _skip_class(pattern, pos)
            delta, pos = _quantifier_weight(pattern, pos)
            weight += delta
        elif char == ".":
            delta, pos = _quantifier_weight(pattern, pos + 1)
            weight += delta
        elif char == "(" and pattern.startswith(_LOOKAROUND_PREFIXES, pos + 1):
            pos = _skip_group(pattern, pos)
        else:
            pos += 1
    return weight


def _skip_class(pattern: str, pos: int) -> int:
    """Return the index after the character class opening at pos."""
    pos += 1
    if pos < len(pattern) and pattern[pos] == "^":
        pos += 1
    # A leading ] is a literal member of the class
    if pos < len(pattern) and pattern[pos] == "]":
        pos += 1
    while pos < len(pattern):
        char = pattern[pos]
        if char == "\\":
            pos += 2
            continue
        if char == "]":
            return pos + 1
        pos += 1
    return pos


def _skip_group(pattern: str, pos: int) -> int:
    """Return the index after the group opening at pos."""
    depth = 0
    while pos < len(pattern):
        char = pattern[pos]
        if char == "\\":
            pos += 2
            continue
        if char == "[":
            pos = _skip_class(pattern, pos)
            continue
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return pos + 1
        pos += 1
    return pos


def _quantifier_weight(pattern: str, pos: int) -> tuple[int, int]:
    """Weigh the quantifier (if any) at pos that follows a character class."""
    if pos >= len(pattern):
        return SINGLE_CLASS_REWARD, pos
    char = pattern[pos]
    if char == "*":
        return -ZERO_OR_MORE_PENALTY, _skip_lazy(pattern, pos + 1)
    if char == "+":
        return -ONE_OR_MORE_PENALTY, _skip_lazy(pattern, pos + 1)
    if char == "?":
        return 0, _skip_lazy(pattern, pos + 1)
    if char == "{":
        match = _BOUNDED.match(pattern, pos)
        if match is not None:
            low, comma, high = match.groups()
            end = _skip_lazy(pattern, match.end())
            if comma and not high:
                lower = int(low or 0)
                return -(ONE_OR_MORE_PENALTY + _triangular(lower)), end
            upper = int(high or low or 0)
            return -_triangular(upper), end
    return SINGLE_CLASS_REWARD, pos


def _skip_lazy(pattern: str, pos: int) -> int:
    if pos < len(pattern) and pattern[pos] in "?+":
        return pos + 1
    return pos


def _triangular(n: int) -> int:
    return n * (n + 1) // 2


def sort_key(provider: TokenProvider) -> tuple[int, str]:
    """Sort key giving descending weight, then ascending name."""
    return (-provider.weight, provider.name)
