"""Key/value storage media with the browser ``Storage`` interface."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Protocol, runtime_checkable
from urllib.parse import quote, unquote

from ...primitives.exceptions import WebStorageError


@runtime_checkable
class IKeyValueStorage(Protocol):
    """String-to-string storage, shaped like ``localStorage``."""

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...

    def keys(self) -> list[str]: ...

    def clear(self) -> None: ...


class MemoryKeyValueStorage(IKeyValueStorage):
    """Process-local storage, the counterpart of ``sessionStorage``."""

    def __init__(self) -> None:
        self._items: dict[str, str] = {}

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = str(value)

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._items)

    def clear(self) -> None:
        self._items.clear()


class DirectoryKeyValueStorage(IKeyValueStorage):
    """Persistent storage keeping one file per key under ``data_dir``.

    Keys are percent-encoded into file names, so any string is a valid key.
    I/O failures are raised as ``WebStorageError``.
    """

    def __init__(self, data_dir: str | os.PathLike[str]) -> None:
        self._root = Path(data_dir)
        try:
            self._root.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise WebStorageError(
                f"Cannot use {str(self._root)!r} as storage directory: {exc}"
            ) from exc

    @property
    def root(self) -> Path:
        return self._root

    def _path(self, key: str) -> Path:
        return self._root / quote(key, safe="")

    def get_item(self, key: str) -> str | None:
        try:
            return self._path(key).read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise WebStorageError(f"Cannot read item {key!r}: {exc}") from exc

    def set_item(self, key: str, value: str) -> None:
        try:
            self._path(key).write_text(str(value), encoding="utf-8")
        except OSError as exc:
            raise WebStorageError(f"Cannot write item {key!r}: {exc}") from exc

    def remove_item(self, key: str) -> None:
        try:
            self._path(key).unlink(missing_ok=True)
        except OSError as exc:
            raise WebStorageError(f"Cannot remove item {key!r}: {exc}") from exc

    def keys(self) -> list[str]:
        return sorted(unquote(path.name) for path in self._root.iterdir())

    def clear(self) -> None:
        for key in self.keys():
            self.remove_item(key)
