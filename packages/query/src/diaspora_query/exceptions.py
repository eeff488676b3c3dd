"""
Query exception hierarchy with fuzzy-match suggestions.

All exceptions inherit from ``QueryError`` and provide ``to_dict()`` for
API-friendly error responses. They are raised while normalizing a query
or its options, before any store is touched.
"""

from __future__ import annotations

from difflib import get_close_matches
from typing import Any


class QueryError(Exception):
    """Base exception for all query errors."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": str(self),
        }


class QueryConflictError(QueryError):
    """Two keys of the same field resolve to the same canonical operator."""

    def __init__(self, field: str, first_key: str, second_key: str) -> None:
        self.field = field
        self.keys = (first_key, second_key)
        super().__init__(
            f'Search on "{field}" can\'t have both "{first_key}" and '
            f'"{second_key}" keys, as they are synonyms'
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "QUERY_CONFLICT",
            "field": self.field,
            "keys": list(self.keys),
            "message": str(self),
        }


class QueryOperandTypeError(QueryError, TypeError):
    """An operand has a type its operator cannot work with."""

    def __init__(
        self,
        message: str,
        operator: str | None = None,
        operand: str | None = None,
    ) -> None:
        self.operator = operator
        self.operand = operand
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "QUERY_OPERAND_TYPE",
            "operator": self.operator,
            "operand": self.operand,
            "message": str(self),
        }


class QueryOptionsError(QueryError, ValueError):
    """
    Query options failed validation.

    Carries structured errors: ``{option: [messages]}``.
    """

    def __init__(self, errors: dict[str, list[str]] | str) -> None:
        if isinstance(errors, str):
            self.errors: dict[str, list[str]] = {"__root__": [errors]}
        else:
            self.errors = errors
        super().__init__(
            "; ".join(
                f"{name}: {', '.join(messages)}"
                for name, messages in self.errors.items()
            )
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "QUERY_OPTIONS",
            "errors": self.errors,
        }


class OperatorNotFoundError(QueryError):
    """
    Unknown operator specified.

    Provides fuzzy-matched suggestions for likely intended operators.
    """

    def __init__(self, operator: str, valid_operators: list[str]) -> None:
        self.operator = operator
        self.valid_operators = valid_operators
        self.suggestions = get_close_matches(operator, valid_operators, n=3, cutoff=0.6)

        message = f"Unknown operator: '{operator}'."
        if self.suggestions:
            message += f" Did you mean: {', '.join(self.suggestions)}?"
        message += f" Valid operators: {', '.join(sorted(valid_operators)[:10])}..."
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "OPERATOR_NOT_FOUND",
            "operator": self.operator,
            "suggestions": self.suggestions,
            "valid_operators": sorted(self.valid_operators),
        }
