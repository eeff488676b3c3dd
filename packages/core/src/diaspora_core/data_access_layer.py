"""DataAccessLayer — caller-facing façade over one adapter."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from diaspora_query import CanonicalQuery, QueryOptions

    from .adapters.base import Adapter, AdapterState
    from .entity import AdapterEntity
    from .remap import FieldFilter, RemapTable, ValueFilter


class DataAccessLayer:
    """
    Data source wrapping an :class:`~diaspora_core.adapters.base.Adapter`.

    Every operation:

    1. waits until the adapter is ready (raising its error otherwise);
    2. normalizes the options, then the query, before any store access;
    3. translates entity field names to store field names (``remap_input``)
       in queries, sort options and payloads, running input filters on
       inserted and updated values;
    4. dispatches to the adapter;
    5. translates store field names back on the results (``remap_output``).

    Usage::

        registry = create_default_registry()
        users = registry.create_named_data_source("main", "inMemory")
        users.configure_collection("users", {"name": "user_name"})
        await users.insert_one("users", {"name": "Alice", "age": 30})
        adults = await users.find_many("users", {"age": {">=": 18}})
    """

    def __init__(self, adapter: Adapter) -> None:
        self._adapter = adapter

    def __repr__(self) -> str:
        return f"<DataAccessLayer {self._adapter!r}>"

    @property
    def adapter(self) -> Adapter:
        return self._adapter

    @property
    def name(self) -> str:
        return self._adapter.name

    @property
    def state(self) -> AdapterState:
        return self._adapter.state

    def configure_collection(
        self,
        table: str,
        remaps: Mapping[str, str],
        filters: Mapping[str, FieldFilter | ValueFilter] | None = None,
    ) -> RemapTable:
        return self._adapter.configure_collection(table, remaps, filters)

    async def wait_ready(self) -> DataAccessLayer:
        await self._adapter.wait_ready()
        return self

    async def aclose(self) -> None:
        await self._adapter.aclose()

    # ── Input / output translation ───────────────────────────────────

    def _prepare(
        self, table: str, query: Any, options: QueryOptions | Mapping[str, Any] | None
    ) -> tuple[CanonicalQuery, QueryOptions]:
        opts = self._adapter.normalize_options(options)
        canonical = self._adapter.normalize_query({} if query is None else query, opts)
        if opts.remap_input:
            canonical = self._adapter.remap_input(table, canonical, apply_filters=False)
            if opts.sort:
                remaps = self._adapter.remaps
                sort = [(remaps.store_field(table, f), d) for f, d in opts.sort]
                opts = opts.model_copy(update={"sort": sort})
        return canonical, opts

    def _payload(
        self, table: str, record: Mapping[str, Any], opts: QueryOptions
    ) -> dict[str, Any]:
        if not isinstance(record, Mapping):
            raise TypeError(f"Expected a mapping of attributes, had {record!r}")
        if opts.remap_input:
            return self._adapter.remap_input(table, record)
        return dict(record)

    def _output(
        self, table: str, entity: AdapterEntity | None, opts: QueryOptions
    ) -> AdapterEntity | None:
        if entity is None or not opts.remap_output:
            return entity
        return entity.with_attributes(
            self._adapter.remap_output(table, entity.attributes)
        )

    def _output_set(
        self, table: str, entities: list[AdapterEntity], opts: QueryOptions
    ) -> list[AdapterEntity]:
        if not opts.remap_output:
            return entities
        return [
            entity.with_attributes(self._adapter.remap_output(table, entity.attributes))
            for entity in entities
        ]

    # ── CRUD ─────────────────────────────────────────────────────────

    async def insert_one(
        self,
        table: str,
        record: Mapping[str, Any],
        options: QueryOptions | Mapping[str, Any] | None = None,
    ) -> AdapterEntity | None:
        await self.wait_ready()
        opts = self._adapter.normalize_options(options)
        payload = self._payload(table, record, opts)
        return self._output(table, await self._adapter.insert_one(table, payload), opts)

    async def insert_many(
        self,
        table: str,
        records: list[Mapping[str, Any]],
        options: QueryOptions | Mapping[str, Any] | None = None,
    ) -> list[AdapterEntity]:
        await self.wait_ready()
        opts = self._adapter.normalize_options(options)
        payloads = [self._payload(table, record, opts) for record in records]
        inserted = await self._adapter.insert_many(table, payloads)
        return self._output_set(table, inserted, opts)

    async def find_one(
        self,
        table: str,
        query: Any = None,
        options: QueryOptions | Mapping[str, Any] | None = None,
    ) -> AdapterEntity | None:
        await self.wait_ready()
        canonical, opts = self._prepare(table, query, options)
        return self._output(
            table, await self._adapter.find_one(table, canonical, opts), opts
        )

    async def find_many(
        self,
        table: str,
        query: Any = None,
        options: QueryOptions | Mapping[str, Any] | None = None,
    ) -> list[AdapterEntity]:
        await self.wait_ready()
        canonical, opts = self._prepare(table, query, options)
        found = await self._adapter.find_many(table, canonical, opts)
        return self._output_set(table, found, opts)

    async def update_one(
        self,
        table: str,
        query: Any,
        update: Mapping[str, Any],
        options: QueryOptions | Mapping[str, Any] | None = None,
    ) -> AdapterEntity | None:
        await self.wait_ready()
        canonical, opts = self._prepare(table, query, options)
        changes = self._payload(table, update, opts)
        updated = await self._adapter.update_one(table, canonical, changes, opts)
        return self._output(table, updated, opts)

    async def update_many(
        self,
        table: str,
        query: Any,
        update: Mapping[str, Any],
        options: QueryOptions | Mapping[str, Any] | None = None,
    ) -> list[AdapterEntity]:
        await self.wait_ready()
        canonical, opts = self._prepare(table, query, options)
        changes = self._payload(table, update, opts)
        updated = await self._adapter.update_many(table, canonical, changes, opts)
        return self._output_set(table, updated, opts)

    async def delete_one(
        self,
        table: str,
        query: Any = None,
        options: QueryOptions | Mapping[str, Any] | None = None,
    ) -> AdapterEntity | None:
        await self.wait_ready()
        canonical, opts = self._prepare(table, query, options)
        return self._output(
            table, await self._adapter.delete_one(table, canonical, opts), opts
        )

    async def delete_many(
        self,
        table: str,
        query: Any = None,
        options: QueryOptions | Mapping[str, Any] | None = None,
    ) -> list[AdapterEntity]:
        await self.wait_ready()
        canonical, opts = self._prepare(table, query, options)
        deleted = await self._adapter.delete_many(table, canonical, opts)
        return self._output_set(table, deleted, opts)
