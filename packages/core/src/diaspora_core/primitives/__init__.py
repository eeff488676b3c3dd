"""Primitives: exceptions, ID generation."""

from __future__ import annotations

from .exceptions import (
    AdapterCapabilityError,
    AdapterRegistrationError,
    AdapterStateError,
    ConfigurationError,
    DataSourceRegistrationError,
    DiasporaError,
    InvalidNameError,
    PersistenceError,
    RemapConflictError,
    UnknownAdapterError,
    WebApiError,
    WebStorageError,
)
from .id_generator import IIDGenerator, SequentialIDGenerator, UUID4Generator

__all__ = [
    "AdapterCapabilityError",
    "AdapterRegistrationError",
    "AdapterStateError",
    "ConfigurationError",
    "DataSourceRegistrationError",
    "DiasporaError",
    "IIDGenerator",
    "InvalidNameError",
    "PersistenceError",
    "RemapConflictError",
    "SequentialIDGenerator",
    "UUID4Generator",
    "UnknownAdapterError",
    "WebApiError",
    "WebStorageError",
]
