"""Set operators: $in, $notIn."""

from __future__ import annotations

from collections.abc import Collection
from typing import Any

from ..evaluator import MemoryOperator
from ..operators import QueryOperator
from ..utils import MISSING


def _contains(collection: Any, value: Any) -> bool:
    if isinstance(collection, str) or not isinstance(collection, Collection):
        return False
    try:
        return value in collection
    except TypeError:
        # Unhashable value looked up in a set.
        return any(item == value for item in collection)


class InOperator(MemoryOperator):
    @property
    def name(self) -> QueryOperator:
        return QueryOperator.IN

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        if field_value is MISSING:
            return False
        return _contains(condition_value, field_value)


class NotInOperator(MemoryOperator):
    @property
    def name(self) -> QueryOperator:
        return QueryOperator.NOT_IN

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        if field_value is MISSING:
            return True
        return not _contains(condition_value, field_value)
