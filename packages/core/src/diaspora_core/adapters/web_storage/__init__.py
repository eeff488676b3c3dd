from .adapter import WebStorageAdapter
from .config import WebStorageConfig
from .storage import DirectoryKeyValueStorage, IKeyValueStorage, MemoryKeyValueStorage

__all__ = [
    "DirectoryKeyValueStorage",
    "IKeyValueStorage",
    "MemoryKeyValueStorage",
    "WebStorageAdapter",
    "WebStorageConfig",
]
