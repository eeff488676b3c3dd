"""String operators: $regex."""

from __future__ import annotations

import re
from typing import Any

from ..evaluator import MemoryOperator
from ..operators import QueryOperator


class RegexOperator(MemoryOperator):
    """Search ``condition_value`` (pattern string or compiled) in string values."""

    @property
    def name(self) -> QueryOperator:
        return QueryOperator.REGEX

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        if not isinstance(field_value, str):
            return False
        if isinstance(condition_value, re.Pattern):
            return condition_value.search(field_value) is not None
        return re.search(str(condition_value), field_value) is not None
