"""
Query normalization.

Expands the shorthand forms accepted by the query language into the
canonical form consumed by the matcher and by store adapters::

    "abc"                       -> {"id": {"$equal": "abc"}}
    {"name": "Alice"}           -> {"name": {"$equal": "Alice"}}
    {"deleted_at": MISSING}     -> {"deleted_at": {"$exists": False}}
    {"age": {"$gt": 18}}        -> {"age": {"$greater": 18}}

The caller's object is never mutated.
"""

from __future__ import annotations

import copy
import re
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from .exceptions import QueryConflictError, QueryOperandTypeError
from .operators import ARITHMETIC_OPERATORS, QueryOperator, canonical_operator_name
from .utils import MISSING, is_numeric_or_date, is_scalar, json_stringify

if TYPE_CHECKING:
    from .query_options import QueryOptions

CanonicalQuery = dict[str, dict[str, Any]]


def normalize_query(
    query: Any,
    options: QueryOptions | None = None,
) -> CanonicalQuery:
    """
    Transform a search query to its canonical form.

    Args:
        query: A bare id (string or number), or a mapping from field name to
            either a value (equality) or a mapping of operators to operands.
        options: Normalized query options. When ``remap_input`` is ``False``
            the query is taken as already canonical and only deep-copied.

    Raises:
        QueryConflictError: A field uses an alias together with its canonical
            operator (or two aliases of the same operator).
        QueryOperandTypeError: An arithmetic operator has a non numeric/date
            operand, a ``$regex`` operand is not a valid pattern, or the
            query itself has an unsupported type.
    """
    if is_scalar(query):
        query = {"id": {QueryOperator.EQUAL.value: query}}
    if not isinstance(query, Mapping):
        shown = json_stringify(query, lenient=True)
        raise QueryOperandTypeError(
            f"Expected a query mapping or an id, had {shown}"
        )

    if options is not None and not options.remap_input:
        return copy.deepcopy(dict(query))

    return {
        field: _normalize_condition(field, condition)
        for field, condition in copy.deepcopy(dict(query)).items()
    }


def _normalize_condition(field: str, condition: Any) -> dict[str, Any]:
    if condition is MISSING:
        return {QueryOperator.EXISTS.value: False}
    if not isinstance(condition, Mapping):
        return {QueryOperator.EQUAL.value: condition}

    normalized: dict[str, Any] = {}
    sources: dict[str, str] = {}
    for key, operand in condition.items():
        canonical = canonical_operator_name(key)
        if canonical in sources:
            raise QueryConflictError(field, sources[canonical], key)
        sources[canonical] = key
        normalized[canonical] = operand

    for op in ARITHMETIC_OPERATORS:
        if op.value in normalized and not is_numeric_or_date(normalized[op.value]):
            operand = json_stringify(normalized[op.value], lenient=True)
            shown = json_stringify(normalized, lenient=True)
            raise QueryOperandTypeError(
                f'Expected "{op.value}" in {shown} '
                f"to be a numeric or date value, had {operand}",
                operator=op.value,
                operand=operand,
            )

    regex = QueryOperator.REGEX.value
    if regex in normalized:
        _check_pattern(normalized, normalized[regex])
    return normalized


def _check_pattern(condition: dict[str, Any], pattern: Any) -> None:
    if isinstance(pattern, re.Pattern):
        return
    reason = "a pattern string"
    if isinstance(pattern, str):
        try:
            re.compile(pattern)
        except re.error as exc:
            reason = f"a valid pattern ({exc})"
        else:
            return
    operand = json_stringify(pattern, lenient=True)
    shown = json_stringify(condition, lenient=True)
    raise QueryOperandTypeError(
        f'Expected "$regex" in {shown} to be {reason}, had {operand}',
        operator=QueryOperator.REGEX.value,
        operand=operand,
    )
