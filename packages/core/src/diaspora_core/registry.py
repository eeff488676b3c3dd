"""Registry of adapter classes and named data sources."""

from __future__ import annotations

import logging
from typing import Any

from .adapters.base import Adapter
from .adapters.memory import InMemoryAdapter
from .adapters.web_api import WebApiAdapter
from .adapters.web_storage import WebStorageAdapter
from .data_access_layer import DataAccessLayer
from .primitives.exceptions import (
    AdapterRegistrationError,
    DataSourceRegistrationError,
    InvalidNameError,
    UnknownAdapterError,
)

logger = logging.getLogger("diaspora.registry")


def _require_name(kind: str, value: Any) -> None:
    if not isinstance(value, str) or not value:
        raise InvalidNameError(kind, value)


class Diaspora:
    """
    Registry of adapter classes and of the data sources built from them.

    There is no process-wide instance: create one (usually with
    :func:`create_default_registry`) and pass it to whatever needs to
    create or look up data sources. Tests get isolated registries for free.
    """

    def __init__(self) -> None:
        self._adapters: dict[str, type[Adapter]] = {}
        self._data_sources: dict[str, DataAccessLayer] = {}

    @property
    def adapters(self) -> dict[str, type[Adapter]]:
        return dict(self._adapters)

    @property
    def data_sources(self) -> dict[str, DataAccessLayer]:
        return dict(self._data_sources)

    def register_adapter(self, label: str, adapter: type[Adapter]) -> None:
        """Make ``adapter`` available under ``label``.

        Raises:
            InvalidNameError: ``label`` is not a non-empty string.
            AdapterRegistrationError: ``label`` is taken, or ``adapter`` is
                not an :class:`Adapter` subclass.
        """
        _require_name("Adapter", label)
        if label in self._adapters:
            raise AdapterRegistrationError(
                f'Adapter with label "{label}" already exists.'
            )
        if not (isinstance(adapter, type) and issubclass(adapter, Adapter)):
            raise AdapterRegistrationError(
                f'Trying to register an adapter with label "{label}", '
                f"but it does not extend Adapter."
            )
        self._adapters[label] = adapter
        logger.debug("Registered adapter %r as %s", label, adapter.__name__)

    def create_data_source(
        self, adapter_label: str, source_name: str | None = None, **config: Any
    ) -> DataAccessLayer:
        """Build an anonymous data source backed by a new adapter instance.

        ``config`` is forwarded to the adapter constructor.
        """
        adapter_cls = self._adapters.get(adapter_label)
        if adapter_cls is None:
            raise UnknownAdapterError(adapter_label, list(self._adapters))
        adapter = adapter_cls(source_name or adapter_label, **config)
        logger.debug("Created data source %r (%s)", adapter.name, adapter_label)
        return DataAccessLayer(adapter)

    def create_named_data_source(
        self, source_name: str, adapter_label: str, **config: Any
    ) -> DataAccessLayer:
        """Build a data source and register it under ``source_name``.

        Raises:
            InvalidNameError: ``source_name`` is not a non-empty string.
            DataSourceRegistrationError: ``source_name`` is already used.
        """
        _require_name("DataSource", source_name)
        if source_name in self._data_sources:
            raise DataSourceRegistrationError(
                f'DataSource name already used, had "{source_name}"'
            )
        data_source = self.create_data_source(adapter_label, source_name, **config)
        self._data_sources[source_name] = data_source
        return data_source

    def get_data_source(self, source_name: str) -> DataAccessLayer | None:
        return self._data_sources.get(source_name)


def create_default_registry() -> Diaspora:
    """A registry with the built-in adapters registered under their labels."""
    registry = Diaspora()
    for adapter in (InMemoryAdapter, WebApiAdapter, WebStorageAdapter):
        registry.register_adapter(adapter.label, adapter)
    return registry
