"""Tests for recognizer specificity weights."""

import re

import pytest

from treelex.errors import ConfigurationError
from treelex.providers import Provider
from treelex.weights import (
    HIGHEST_WEIGHT,
    LOWEST_WEIGHT,
    PREDICATE_WEIGHT,
    calculate_weight,
    sort_key,
    weigh_pattern,
)


class TestLiteralWeights:
    """Literal conditions weigh 100 plus their length."""

    def test_single_character(self) -> None:
        assert calculate_weight(";") == 101

    def test_keyword(self) -> None:
        assert calculate_weight("abc") == 103
        assert calculate_weight("class") == 105

    def test_longer_literal_wins(self) -> None:
        """A longer literal always outranks its own prefix."""
        assert calculate_weight("===") > calculate_weight("==") > calculate_weight("=")

    def test_empty_literal_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="must not be empty"):
            calculate_weight("", "Nothing")


class TestPatternWeights:
    """Compiled patterns are weighed by their character classes."""

    @pytest.mark.parametrize(
        ("pattern", "expected"),
        [
            (r"[{}]", 49),
            (r"[a-z]+", -51),
            (r"[a-z]*", -101),
            (r"[a-z]?", -1),
            (r"\d", 49),
            (r"\s+", -51),
            (r".", 49),
            (r"[a-z]{3}", -7),
            (r"[a-z]{2,4}", -11),
            (r"[a-z]{2,}", -54),
            (r"[a-z]+?", -51),
            (r"[\]]", 49),
            (r"[]a]", 49),
            (r"abc", -1),
            (r"\.", -1),
        ],
    )
    def test_weigh_pattern(self, pattern: str, expected: int) -> None:
        assert weigh_pattern(pattern) == expected

    def test_lookaround_is_ignored(self) -> None:
        """Assertions do not consume input and do not contribute."""
        assert weigh_pattern(r"class(?![\w$])") == -1
        assert weigh_pattern(r"(?<=[a-z])x") == -1
        assert weigh_pattern(r"(?=[a-z]+)[0-9]") == 49

    def test_plain_group_contents_count(self) -> None:
        assert weigh_pattern(r"(?P<raw>[()])") == 49

    def test_calculate_weight_on_compiled_pattern(self) -> None:
        assert calculate_weight(re.compile(r"[{}]")) == 49

    def test_pattern_never_sinks_to_predicate_weight(self) -> None:
        """Even a very loose pattern stays above every predicate."""
        loose = re.compile(r"[a]*" * 10_001)
        assert weigh_pattern(loose.pattern) < PREDICATE_WEIGHT
        assert calculate_weight(loose) == PREDICATE_WEIGHT + 1

    def test_bytes_pattern_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="str pattern"):
            calculate_weight(re.compile(rb"x"), "Bytes")


class TestPredicateWeights:
    """Predicates cannot be inspected and are tried last."""

    def test_predicate_weight(self) -> None:
        assert calculate_weight(lambda engine, context: True) == PREDICATE_WEIGHT

    def test_predicate_below_any_pattern(self) -> None:
        assert calculate_weight(lambda engine, context: True) < calculate_weight(
            re.compile(r".*.*.*")
        )


class TestInvalidConditions:
    """Unrecognized conditions are configuration errors."""

    @pytest.mark.parametrize("condition", [None, 42, 3.5, ("a", "b")])
    def test_rejected(self, condition: object) -> None:
        with pytest.raises(ConfigurationError, match="valid test condition"):
            calculate_weight(condition, "Broken")

    def test_error_names_provider(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            calculate_weight(42, "Broken")
        assert exc_info.value.provider_name == "Broken"
        assert "Provider 'Broken'" in str(exc_info.value)


class TestSortKey:
    """Descending weight, then ascending name."""

    def test_orders_by_weight_then_name(self) -> None:
        providers = [
            Provider("b", ";", weight=10),
            Provider("a", ";", weight=10),
            Provider("z", ";", weight=HIGHEST_WEIGHT),
            Provider("c", ";", weight=LOWEST_WEIGHT),
            Provider("d", ";", weight=11),
        ]
        ordered = [p.name for p in sorted(providers, key=sort_key)]
        assert ordered == ["z", "d", "a", "b", "c"]
