"""Presence operators: $exists, $notExists.

Only the presence of the key matters; ``None`` counts as present.
"""

from __future__ import annotations

from typing import Any

from ..evaluator import MemoryOperator
from ..operators import QueryOperator
from ..utils import MISSING


class ExistsOperator(MemoryOperator):
    @property
    def name(self) -> QueryOperator:
        return QueryOperator.EXISTS

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        return (field_value is not MISSING) == bool(condition_value)


class NotExistsOperator(MemoryOperator):
    @property
    def name(self) -> QueryOperator:
        return QueryOperator.NOT_EXISTS

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        return (field_value is MISSING) == bool(condition_value)
