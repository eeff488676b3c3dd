"""
Evaluation of canonical queries against raw records.

A record matches when, for every field of the query, the record's value
satisfies every operator attached to that field. There is no OR in the
predicate language. Queries must be canonical (see ``normalize_query``);
anything else simply fails to match.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from .operators_memory import build_default_registry
from .utils import MISSING

if TYPE_CHECKING:
    from .evaluator import MemoryOperatorRegistry


class QueryMatcher:
    """Match canonical queries using a given operator registry."""

    def __init__(self, registry: MemoryOperatorRegistry | None = None) -> None:
        self._registry = registry if registry is not None else build_default_registry()

    @property
    def registry(self) -> MemoryOperatorRegistry:
        return self._registry

    def matches(self, query: Mapping[str, Any], record: Mapping[str, Any]) -> bool:
        for field, descriptor in query.items():
            if not isinstance(descriptor, Mapping):
                return False
            field_value = record.get(field, MISSING)
            for name, operand in descriptor.items():
                operator = self._registry.get(name)
                if operator is None:
                    return False
                if not operator.evaluate(field_value, operand):
                    return False
        return True

    def filter(
        self, query: Mapping[str, Any], records: list[Mapping[str, Any]]
    ) -> list[Mapping[str, Any]]:
        """Return the records matching ``query``, in their original order."""
        return [record for record in records if self.matches(query, record)]


_DEFAULT_MATCHER = QueryMatcher()


def matches(
    query: Mapping[str, Any],
    record: Mapping[str, Any],
    registry: MemoryOperatorRegistry | None = None,
) -> bool:
    """Check whether ``record`` is matched by the canonical ``query``."""
    if registry is None:
        return _DEFAULT_MATCHER.matches(query, record)
    return QueryMatcher(registry).matches(query, record)
