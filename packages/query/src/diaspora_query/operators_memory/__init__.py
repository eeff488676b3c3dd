"""
In-memory operator implementations.

Provides concrete MemoryOperator subclasses for each QueryOperator and a
factory function to create registries.

Usage::

    from diaspora_query.operators_memory import build_default_registry

    registry = build_default_registry()
    result = registry.evaluate(QueryOperator.EQUAL, actual, expected)
"""

from __future__ import annotations

from ..evaluator import MemoryOperatorRegistry
from .existence import ExistsOperator, NotExistsOperator
from .set import InOperator, NotInOperator
from .standard import (
    DiffOperator,
    EqualOperator,
    GreaterEqualOperator,
    GreaterOperator,
    LessEqualOperator,
    LessOperator,
)
from .string import RegexOperator


def build_default_registry() -> MemoryOperatorRegistry:
    """
    Create a registry with all built-in operators.

    Each call returns a fresh instance, so adapters registering custom
    operators never leak them into each other.

    Example:
        >>> registry = build_default_registry()
        >>> registry.evaluate(QueryOperator.EQUAL, "active", "active")
        True
    """
    registry = MemoryOperatorRegistry()
    registry.register_all(
        # Standard comparison
        EqualOperator(),
        DiffOperator(),
        GreaterOperator(),
        GreaterEqualOperator(),
        LessOperator(),
        LessEqualOperator(),
        # Set
        InOperator(),
        NotInOperator(),
        # Presence
        ExistsOperator(),
        NotExistsOperator(),
        # String
        RegexOperator(),
    )
    return registry


__all__ = [
    "build_default_registry",
    "MemoryOperatorRegistry",
]
