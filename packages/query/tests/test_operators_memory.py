"""Tests for in-memory query operators (standard, set, presence, regex)."""

from __future__ import annotations

import datetime
import re

import pytest

from diaspora_query import MISSING, MemoryOperator, QueryOperator
from diaspora_query.evaluator import MemoryOperatorRegistry
from diaspora_query.exceptions import OperatorNotFoundError
from diaspora_query.operators_memory import build_default_registry
from diaspora_query.operators_memory.existence import ExistsOperator, NotExistsOperator
from diaspora_query.operators_memory.set import InOperator, NotInOperator
from diaspora_query.operators_memory.standard import (
    DiffOperator,
    EqualOperator,
    GreaterEqualOperator,
    GreaterOperator,
    LessEqualOperator,
    LessOperator,
)
from diaspora_query.operators_memory.string import RegexOperator

# ══════════════════════════════════════════════════════════════════════
# Standard comparison operators tests
# ══════════════════════════════════════════════════════════════════════


class TestStandardOperators:
    """Test standard comparison operators."""

    def test_equal_operator_with_matching_values(self) -> None:
        op = EqualOperator()
        assert op.evaluate(42, 42) is True
        assert op.evaluate("test", "test") is True
        assert op.evaluate(None, None) is True

    def test_equal_operator_with_different_values(self) -> None:
        op = EqualOperator()
        assert op.evaluate(42, 43) is False
        assert op.evaluate("test", "TEST") is False
        assert op.evaluate(None, 42) is False

    def test_equal_never_matches_missing_field(self) -> None:
        op = EqualOperator()
        assert op.evaluate(MISSING, None) is False

    def test_diff_operator(self) -> None:
        op = DiffOperator()
        assert op.evaluate(42, 43) is True
        assert op.evaluate("test", "TEST") is True
        assert op.evaluate(42, 42) is False
        assert op.evaluate(MISSING, 42) is True

    def test_greater_operator(self) -> None:
        op = GreaterOperator()
        assert op.evaluate(100, 50) is True
        assert op.evaluate(50, 100) is False
        assert op.evaluate(50, 50) is False
        assert op.evaluate(None, 50) is False
        assert op.evaluate(MISSING, 50) is False

    def test_less_operator(self) -> None:
        op = LessOperator()
        assert op.evaluate(50, 100) is True
        assert op.evaluate(100, 50) is False
        assert op.evaluate(50, 50) is False
        assert op.evaluate(None, 50) is False

    def test_greater_equal_operator(self) -> None:
        op = GreaterEqualOperator()
        assert op.evaluate(100, 50) is True
        assert op.evaluate(50, 50) is True
        assert op.evaluate(30, 50) is False

    def test_less_equal_operator(self) -> None:
        op = LessEqualOperator()
        assert op.evaluate(30, 50) is True
        assert op.evaluate(50, 50) is True
        assert op.evaluate(100, 50) is False

    def test_ordering_with_incomparable_types_is_false(self) -> None:
        assert GreaterOperator().evaluate("abc", 5) is False
        assert LessEqualOperator().evaluate({"a": 1}, 5) is False

    def test_ordering_with_dates(self) -> None:
        op = GreaterOperator()
        later = datetime.datetime(2024, 5, 1)
        earlier = datetime.datetime(2023, 5, 1)
        assert op.evaluate(later, earlier) is True
        assert op.evaluate(earlier, later) is False

    def test_operator_names(self) -> None:
        assert EqualOperator().name == QueryOperator.EQUAL
        assert DiffOperator().name == QueryOperator.DIFF
        assert GreaterOperator().name == QueryOperator.GREATER
        assert GreaterEqualOperator().name == QueryOperator.GREATER_EQUAL
        assert LessOperator().name == QueryOperator.LESS
        assert LessEqualOperator().name == QueryOperator.LESS_EQUAL


# ══════════════════════════════════════════════════════════════════════
# Set operators tests
# ══════════════════════════════════════════════════════════════════════


class TestSetOperators:
    def test_in_operator(self) -> None:
        op = InOperator()
        assert op.evaluate("a", ["a", "b"]) is True
        assert op.evaluate("c", ["a", "b"]) is False
        assert op.evaluate(1, {1, 2}) is True
        assert op.evaluate(MISSING, ["a"]) is False

    def test_in_with_unhashable_value_and_set_operand(self) -> None:
        op = InOperator()
        assert op.evaluate(["a"], {"a", "b"}) is False

    def test_in_rejects_string_operand(self) -> None:
        # A string is not treated as a set of characters.
        assert InOperator().evaluate("a", "abc") is False

    def test_not_in_operator(self) -> None:
        op = NotInOperator()
        assert op.evaluate("c", ["a", "b"]) is True
        assert op.evaluate("a", ["a", "b"]) is False
        assert op.evaluate(MISSING, ["a"]) is True


# ══════════════════════════════════════════════════════════════════════
# Presence operators tests
# ══════════════════════════════════════════════════════════════════════


class TestPresenceOperators:
    def test_exists_tests_presence_only(self) -> None:
        op = ExistsOperator()
        assert op.evaluate(None, True) is True
        assert op.evaluate(0, True) is True
        assert op.evaluate(MISSING, True) is False
        assert op.evaluate(MISSING, False) is True
        assert op.evaluate("x", False) is False

    def test_not_exists(self) -> None:
        op = NotExistsOperator()
        assert op.evaluate(MISSING, True) is True
        assert op.evaluate(None, True) is False
        assert op.evaluate("x", False) is True


# ══════════════════════════════════════════════════════════════════════
# Regex operator tests
# ══════════════════════════════════════════════════════════════════════


class TestRegexOperator:
    def test_regex_search(self) -> None:
        op = RegexOperator()
        assert op.evaluate("Alice", "^A") is True
        assert op.evaluate("Alice", "^B") is False
        assert op.evaluate("Alice", "lic") is True

    def test_regex_compiled_pattern(self) -> None:
        op = RegexOperator()
        assert op.evaluate("alice", re.compile("^A", re.IGNORECASE)) is True

    def test_regex_non_string_value(self) -> None:
        op = RegexOperator()
        assert op.evaluate(None, "^A") is False
        assert op.evaluate(MISSING, "^A") is False
        assert op.evaluate(123, "1") is False


# ══════════════════════════════════════════════════════════════════════
# Registry tests
# ══════════════════════════════════════════════════════════════════════


class TestRegistry:
    def test_default_registry_covers_every_canonical_operator(self) -> None:
        registry = build_default_registry()
        for op in QueryOperator:
            assert registry.has(op), op

    def test_default_registry_is_fresh_each_time(self) -> None:
        first = build_default_registry()
        first.unregister(QueryOperator.REGEX)
        assert build_default_registry().has(QueryOperator.REGEX)

    def test_evaluate_unknown_operator_raises(self) -> None:
        registry = build_default_registry()
        with pytest.raises(OperatorNotFoundError) as exc_info:
            registry.evaluate("$equals", 1, 1)
        assert "$equal" in exc_info.value.suggestions

    def test_register_custom_operator(self) -> None:
        class StartsWithOperator(MemoryOperator):
            @property
            def name(self) -> str:
                return "$startsWith"

            def evaluate(self, field_value, condition_value) -> bool:
                return isinstance(field_value, str) and field_value.startswith(
                    condition_value
                )

        registry = MemoryOperatorRegistry()
        registry.register(StartsWithOperator())
        assert registry.supported_operators == {"$startsWith"}
        assert registry.evaluate("$startsWith", "Alice", "Al") is True

    def test_lookup_by_enum_or_string(self) -> None:
        registry = build_default_registry()
        assert registry.get(QueryOperator.IN) is registry.get("$in")
