"""Adapter contract and the built-in storage adapters."""

from .base import Adapter, AdapterCapabilities, AdapterState
from .memory import InMemoryAdapter
from .web_api import WebApiAdapter, WebApiConfig
from .web_storage import (
    DirectoryKeyValueStorage,
    IKeyValueStorage,
    MemoryKeyValueStorage,
    WebStorageAdapter,
    WebStorageConfig,
)

__all__ = [
    "Adapter",
    "AdapterCapabilities",
    "AdapterState",
    "DirectoryKeyValueStorage",
    "IKeyValueStorage",
    "InMemoryAdapter",
    "MemoryKeyValueStorage",
    "WebApiAdapter",
    "WebApiConfig",
    "WebStorageAdapter",
    "WebStorageConfig",
]
