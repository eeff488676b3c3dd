from __future__ import annotations

from enum import Enum
from typing import Final


class QueryOperator(str, Enum):
    """Canonical operators of the query language."""

    # Standard comparison
    EQUAL = "$equal"
    DIFF = "$diff"
    GREATER = "$greater"
    GREATER_EQUAL = "$greaterEqual"
    LESS = "$less"
    LESS_EQUAL = "$lessEqual"

    # Set membership
    IN = "$in"
    NOT_IN = "$notIn"

    # Presence checks
    EXISTS = "$exists"
    NOT_EXISTS = "$notExists"

    # String operations
    REGEX = "$regex"


# Shorthand spellings accepted in raw queries, rewritten during normalization.
OPERATOR_ALIASES: Final[dict[str, QueryOperator]] = {
    "==": QueryOperator.EQUAL,
    "$eq": QueryOperator.EQUAL,
    "!=": QueryOperator.DIFF,
    "$ne": QueryOperator.DIFF,
    ">": QueryOperator.GREATER,
    "$gt": QueryOperator.GREATER,
    ">=": QueryOperator.GREATER_EQUAL,
    "$gte": QueryOperator.GREATER_EQUAL,
    "<": QueryOperator.LESS,
    "$lt": QueryOperator.LESS,
    "<=": QueryOperator.LESS_EQUAL,
    "$lte": QueryOperator.LESS_EQUAL,
    "~": QueryOperator.EXISTS,
    "$nin": QueryOperator.NOT_IN,
}

ARITHMETIC_OPERATORS: Final[tuple[QueryOperator, ...]] = (
    QueryOperator.LESS,
    QueryOperator.LESS_EQUAL,
    QueryOperator.GREATER,
    QueryOperator.GREATER_EQUAL,
)


def canonical_operator_name(key: str) -> str:
    """Return the canonical spelling of ``key``, or ``key`` itself if unknown."""
    alias = OPERATOR_ALIASES.get(key)
    if alias is not None:
        return alias.value
    return key
