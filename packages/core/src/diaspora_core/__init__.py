"""diaspora-core — adapters, data sources and the registry tying them together.

The query language itself (operators, normalizers, matcher) lives in
``diaspora_query``.
"""

from __future__ import annotations

# ── Adapters ────────────────────────────────────────────────────
from .adapters import (
    Adapter,
    AdapterCapabilities,
    AdapterState,
    DirectoryKeyValueStorage,
    IKeyValueStorage,
    InMemoryAdapter,
    MemoryKeyValueStorage,
    WebApiAdapter,
    WebApiConfig,
    WebStorageAdapter,
    WebStorageConfig,
)

# ── Data sources ────────────────────────────────────────────────
from .data_access_layer import DataAccessLayer
from .entity import ID_FIELD, ID_HASH_FIELD, AdapterEntity
from .iteration import iterate_limit

# ── Primitives ──────────────────────────────────────────────────
from .primitives import (
    AdapterCapabilityError,
    AdapterRegistrationError,
    AdapterStateError,
    ConfigurationError,
    DataSourceRegistrationError,
    DiasporaError,
    IIDGenerator,
    InvalidNameError,
    PersistenceError,
    RemapConflictError,
    SequentialIDGenerator,
    UnknownAdapterError,
    UUID4Generator,
    WebApiError,
    WebStorageError,
)
from .registry import Diaspora, create_default_registry
from .remap import FieldFilter, RemapRegistry, RemapTable

__all__ = [
    # Adapters
    "Adapter",
    "AdapterCapabilities",
    "AdapterState",
    "InMemoryAdapter",
    "WebApiAdapter",
    "WebApiConfig",
    "WebStorageAdapter",
    "WebStorageConfig",
    "IKeyValueStorage",
    "MemoryKeyValueStorage",
    "DirectoryKeyValueStorage",
    # Data sources
    "AdapterEntity",
    "DataAccessLayer",
    "Diaspora",
    "create_default_registry",
    "ID_FIELD",
    "ID_HASH_FIELD",
    # Remapping & iteration
    "FieldFilter",
    "RemapRegistry",
    "RemapTable",
    "iterate_limit",
    # Primitives
    "DiasporaError",
    "ConfigurationError",
    "InvalidNameError",
    "AdapterRegistrationError",
    "DataSourceRegistrationError",
    "UnknownAdapterError",
    "RemapConflictError",
    "AdapterCapabilityError",
    "AdapterStateError",
    "PersistenceError",
    "WebStorageError",
    "WebApiError",
    "IIDGenerator",
    "UUID4Generator",
    "SequentialIDGenerator",
]
