"""
Shared utility functions for the query package.

These are pure-Python helpers with no infrastructure dependencies.
"""

from __future__ import annotations

import datetime
import json
import re
from typing import Any, Final

# ---------------------------------------------------------------------------
# Absent values
# ---------------------------------------------------------------------------


class _Missing:
    """Marker for a field that is not present in a record."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> _Missing:
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> _Missing:
        return self

    def __reduce__(self) -> str:
        return "MISSING"


MISSING: Final = _Missing()


def is_missing(value: Any) -> bool:
    return value is MISSING


# ---------------------------------------------------------------------------
# Type checks
# ---------------------------------------------------------------------------


def is_scalar(value: Any) -> bool:
    """True for strings and numbers (booleans excluded)."""
    return isinstance(value, str | int | float) and not isinstance(value, bool)


def is_numeric_or_date(value: Any) -> bool:
    """True for ints, floats, dates and datetimes (booleans excluded)."""
    if isinstance(value, bool):
        return False
    return isinstance(value, int | float | datetime.date)


# ---------------------------------------------------------------------------
# JSON helpers
# ---------------------------------------------------------------------------


def json_default(value: Any) -> Any:
    """``json.dumps`` fallback for dates, sets, patterns and absent values.

    Raises:
        TypeError: ``value`` has no faithful JSON form (``bytes``,
            ``Decimal``, arbitrary objects).
    """
    if isinstance(value, datetime.date):
        return value.isoformat()
    if isinstance(value, set | frozenset | tuple):
        return list(value)
    if isinstance(value, re.Pattern):
        return value.pattern
    if value is MISSING:
        return None
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _describe_default(value: Any) -> Any:
    try:
        return json_default(value)
    except TypeError:
        return repr(value)


def json_stringify(value: Any, *, lenient: bool = False) -> str:
    """Serialise ``value`` to compact JSON for storage and wire use.

    With ``lenient`` (error messages), values without a JSON form are
    rendered with ``repr`` instead of raising ``TypeError``.
    """
    default = _describe_default if lenient else json_default
    return json.dumps(value, default=default, separators=(",", ":"))
