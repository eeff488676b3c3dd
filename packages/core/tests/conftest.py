"""Shared fixtures for core tests."""

from __future__ import annotations

import pytest

from diaspora_core import (
    InMemoryAdapter,
    SequentialIDGenerator,
    create_default_registry,
)


@pytest.fixture
def memory_adapter():
    """Ready in-memory adapter issuing ``id-1``, ``id-2``, ... UIDs."""
    return InMemoryAdapter("memory", id_generator=SequentialIDGenerator())


@pytest.fixture
def diaspora():
    """Fresh registry with the built-in adapters."""
    return create_default_registry()
