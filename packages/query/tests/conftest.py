"""Shared fixtures for query tests."""

from __future__ import annotations

import pytest

from diaspora_query import QueryMatcher
from diaspora_query.operators_memory import build_default_registry


@pytest.fixture
def registry():
    """Default in-memory operator registry."""
    return build_default_registry()


@pytest.fixture
def matcher(registry):
    """Matcher bound to the default registry."""
    return QueryMatcher(registry)
