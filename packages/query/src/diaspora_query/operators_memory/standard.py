"""Standard comparison operators: $equal, $diff, $greater, $less, ..."""

from __future__ import annotations

import operator
from typing import TYPE_CHECKING, Any

from ..evaluator import MemoryOperator
from ..operators import QueryOperator
from ..utils import MISSING

if TYPE_CHECKING:
    from collections.abc import Callable


def _compare(
    field_value: Any, condition_value: Any, op: Callable[[Any, Any], Any]
) -> bool:
    if field_value is None or field_value is MISSING:
        return False
    try:
        return bool(op(field_value, condition_value))
    except TypeError:
        # Incomparable types (e.g. str vs int) never satisfy an ordering.
        return False


class EqualOperator(MemoryOperator):
    @property
    def name(self) -> QueryOperator:
        return QueryOperator.EQUAL

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        if field_value is MISSING:
            return False
        return bool(field_value == condition_value)


class DiffOperator(MemoryOperator):
    @property
    def name(self) -> QueryOperator:
        return QueryOperator.DIFF

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        if field_value is MISSING:
            return True
        return bool(field_value != condition_value)


class GreaterOperator(MemoryOperator):
    @property
    def name(self) -> QueryOperator:
        return QueryOperator.GREATER

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        return _compare(field_value, condition_value, operator.gt)


class GreaterEqualOperator(MemoryOperator):
    @property
    def name(self) -> QueryOperator:
        return QueryOperator.GREATER_EQUAL

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        return _compare(field_value, condition_value, operator.ge)


class LessOperator(MemoryOperator):
    @property
    def name(self) -> QueryOperator:
        return QueryOperator.LESS

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        return _compare(field_value, condition_value, operator.lt)


class LessEqualOperator(MemoryOperator):
    @property
    def name(self) -> QueryOperator:
        return QueryOperator.LESS_EQUAL

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        return _compare(field_value, condition_value, operator.le)
