"""
Predicates behind the query operators.

Stores that cannot push a query down (the in-memory and web storage
adapters) scan their records and ask the matcher whether each one
satisfies the canonical query. The matcher resolves every operator through
a ``MemoryOperatorRegistry``, so the query language is open: an adapter
handed a registry with an extra ``$between`` predicate accepts
``{"age": {"$between": [18, 65]}}`` without any change to the normalizer.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from .exceptions import OperatorNotFoundError
from .operators import QueryOperator


def _key(name: QueryOperator | str) -> str:
    return name.value if isinstance(name, QueryOperator) else name


class MemoryOperator(ABC):
    """
    Predicate for one operator name.

    ``evaluate`` must be total: ``MISSING``, ``None`` and values of the
    wrong type answer ``False`` instead of raising.
    """

    @property
    @abstractmethod
    def name(self) -> QueryOperator | str:
        """Canonical operator name, e.g. ``QueryOperator.IN`` or ``"$between"``."""
        ...

    @abstractmethod
    def evaluate(
        self,
        field_value: Any,
        condition_value: Any,
    ) -> bool:
        """
        Decide whether a record value satisfies the operand.

        Args:
            field_value: The value read from the candidate record, or
                ``MISSING`` if the record has no such field.
            condition_value: The operand provided in the query.

        Returns:
            ``True`` when the record value satisfies the operand.
        """
        ...


class MemoryOperatorRegistry:
    """
    Operator predicates keyed by canonical name.

    Usage::

        registry = build_default_registry()
        registry.register(BetweenOperator())
        adapter = InMemoryAdapter("main", operators=registry)
    """

    def __init__(self) -> None:
        self._operators: dict[str, MemoryOperator] = {}

    def register(self, operator: MemoryOperator) -> None:
        """Add ``operator``, replacing any predicate of the same name."""
        self._operators[_key(operator.name)] = operator

    def register_all(self, *operators: MemoryOperator) -> None:
        for op in operators:
            self.register(op)

    def unregister(self, name: QueryOperator | str) -> None:
        self._operators.pop(_key(name), None)

    def get(self, name: QueryOperator | str) -> MemoryOperator | None:
        """Return the registered operator or ``None``."""
        return self._operators.get(_key(name))

    def has(self, name: QueryOperator | str) -> bool:
        return _key(name) in self._operators

    @property
    def supported_operators(self) -> set[str]:
        return set(self._operators.keys())

    def evaluate(
        self,
        name: QueryOperator | str,
        field_value: Any,
        condition_value: Any,
    ) -> bool:
        """
        Evaluate the predicate registered under ``name``.

        Raises:
            OperatorNotFoundError: If the operator is not registered.
        """
        op = self.get(name)
        if op is None:
            raise OperatorNotFoundError(_key(name), sorted(self._operators))
        return op.evaluate(field_value, condition_value)
