from .evaluator import MemoryOperator, MemoryOperatorRegistry
from .exceptions import (
    OperatorNotFoundError,
    QueryConflictError,
    QueryError,
    QueryOperandTypeError,
    QueryOptionsError,
)
from .matcher import QueryMatcher, matches
from .normalizer import CanonicalQuery, normalize_query
from .operators import (
    ARITHMETIC_OPERATORS,
    OPERATOR_ALIASES,
    QueryOperator,
    canonical_operator_name,
)
from .operators_memory import build_default_registry
from .query_options import (
    OptionsTransformRegistry,
    QueryOptions,
    build_default_transforms,
    normalize_options,
)
from .utils import MISSING, is_missing, json_stringify

__all__ = [
    # Core types
    "QueryOperator",
    "OPERATOR_ALIASES",
    "ARITHMETIC_OPERATORS",
    "canonical_operator_name",
    "CanonicalQuery",
    "MISSING",
    # Normalization
    "normalize_query",
    "normalize_options",
    "QueryOptions",
    "OptionsTransformRegistry",
    "build_default_transforms",
    # Matching
    "QueryMatcher",
    "matches",
    # Evaluator / strategy
    "MemoryOperator",
    "MemoryOperatorRegistry",
    "build_default_registry",
    # Exceptions
    "QueryError",
    "QueryConflictError",
    "QueryOperandTypeError",
    "QueryOptionsError",
    "OperatorNotFoundError",
    # Utilities
    "is_missing",
    "json_stringify",
]
