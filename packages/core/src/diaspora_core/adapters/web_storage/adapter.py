"""WebStorageAdapter — records serialized as JSON in a key/value storage."""

from __future__ import annotations

import json
from dataclasses import fields, replace
from typing import TYPE_CHECKING, Any

from diaspora_query import QueryOperator, json_stringify

from ...entity import ID_FIELD
from ...primitives.exceptions import WebStorageError
from ...utils import apply_update, sort_records
from ..base import Adapter, AdapterCapabilities
from .config import WebStorageConfig
from .storage import DirectoryKeyValueStorage, IKeyValueStorage, MemoryKeyValueStorage

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping

    from diaspora_query import CanonicalQuery, QueryOptions

    from ...remap import FieldFilter, RemapTable, ValueFilter
    from ..base import Record

_CONFIG_FIELDS = frozenset(f.name for f in fields(WebStorageConfig))
_EQUAL = QueryOperator.EQUAL.value


class WebStorageAdapter(Adapter):
    """
    Store records in a ``localStorage``-like key/value medium.

    Layout of the storage:

    * ``{table}`` holds the JSON list of the table's UIDs, in insertion order;
    * ``{table}.id={uid}`` holds the JSON of one record.

    Parameters
    ----------
    config:
        :class:`WebStorageConfig`. Its fields may also be given as keyword
        arguments (``session=True``), which take precedence.
    storage:
        Explicit storage medium, overriding the one chosen by ``config``.

    The adapter is ready as soon as the storage is open; if it cannot be
    opened the adapter goes to the error state.
    """

    label = "webStorage"
    capabilities = AdapterCapabilities.of(
        "insert_one",
        "insert_many",
        "find_one",
        "update_one",
        "delete_one",
        "delete_many",
    )

    def __init__(
        self,
        name: str | None = None,
        config: WebStorageConfig | None = None,
        *,
        storage: IKeyValueStorage | None = None,
        **kwargs: Any,
    ) -> None:
        overrides = {key: kwargs.pop(key) for key in _CONFIG_FIELDS & kwargs.keys()}
        super().__init__(name, **kwargs)
        self.config = replace(config or WebStorageConfig(), **overrides)
        try:
            self.source = storage if storage is not None else self._open(self.config)
        except WebStorageError as exc:
            self.mark_error(exc)
            return
        self.mark_ready()

    @staticmethod
    def _open(config: WebStorageConfig) -> IKeyValueStorage:
        if config.session:
            return MemoryKeyValueStorage()
        return DirectoryKeyValueStorage(config.data_dir)

    @staticmethod
    def get_item_name(table: str, uid: Any) -> str:
        return f"{table}.id={uid}"

    def configure_collection(
        self,
        table: str,
        remaps: Mapping[str, str],
        filters: Mapping[str, FieldFilter | ValueFilter] | None = None,
    ) -> RemapTable:
        remap_table = super().configure_collection(table, remaps, filters)
        self.ensure_collection_exists(table)
        return remap_table

    # ── Storage layout ───────────────────────────────────────────────

    def ensure_collection_exists(self, table: str) -> list[str]:
        """Return the UID index of ``table``, creating an empty one."""
        index = self.source.get_item(table)
        if index is None:
            self._write_index(table, [])
            return []
        return list(json.loads(index))

    def _write_index(self, table: str, index: list[str]) -> None:
        self.source.set_item(table, json.dumps(index))

    def _read(self, table: str, uid: Any) -> Record | None:
        item = self.source.get_item(self.get_item_name(table, uid))
        return json.loads(item) if item is not None else None

    def _write(self, table: str, record: Record) -> None:
        self.source.set_item(
            self.get_item_name(table, record[ID_FIELD]), json_stringify(record)
        )

    def _store(self, table: str, record: Record, index: list[str]) -> Record:
        record[ID_FIELD] = self.generate_id()
        self.set_id_hash(record)
        index.append(record[ID_FIELD])
        self._write(table, record)
        return record

    def _iter_matches(self, table: str, query: CanonicalQuery) -> Iterator[Record]:
        condition = query.get(ID_FIELD)
        if (
            len(query) == 1
            and isinstance(condition, dict)
            and list(condition) == [_EQUAL]
        ):
            record = self._read(table, condition[_EQUAL])
            if record is not None:
                yield record
            return
        for uid in self.ensure_collection_exists(table):
            record = self._read(table, uid)
            if record is not None and self.match_entity(query, record):
                yield record

    def _select(
        self, table: str, query: CanonicalQuery, options: QueryOptions
    ) -> list[Record]:
        """Matches of ``query`` in ``sort`` order, after ``skip``, at most ``limit``."""
        matches: Iterable[Record] = self._iter_matches(table, query)
        if options.sort:
            matches = sort_records(list(matches), options.sort)
        selected: list[Record] = []
        for position, record in enumerate(matches):
            if position < options.skip:
                continue
            selected.append(record)
            if options.limit is not None and len(selected) >= options.limit:
                break
        return selected

    # ── Native primitives ────────────────────────────────────────────

    async def _insert_one(self, table: str, record: Record) -> Record | None:
        index = self.ensure_collection_exists(table)
        self._store(table, record, index)
        self._write_index(table, index)
        return record

    async def _insert_many(self, table: str, records: list[Record]) -> list[Record]:
        index = self.ensure_collection_exists(table)
        inserted = [self._store(table, record, index) for record in records]
        self._write_index(table, index)
        return inserted

    async def _find_one(
        self, table: str, query: CanonicalQuery, options: QueryOptions
    ) -> Record | None:
        found = self._select(table, query, options.with_limit(1))
        return found[0] if found else None

    async def _update_one(
        self, table: str, query: CanonicalQuery, update: Record, options: QueryOptions
    ) -> Record | None:
        record = await self._find_one(table, query, options)
        if record is None:
            return None
        apply_update(record, update)
        self._write(table, record)
        return record

    async def _delete_one(
        self, table: str, query: CanonicalQuery, options: QueryOptions
    ) -> Record | None:
        deleted = await self._delete_many(table, query, options.with_limit(1))
        return deleted[0] if deleted else None

    async def _delete_many(
        self, table: str, query: CanonicalQuery, options: QueryOptions
    ) -> list[Record]:
        deleted = self._select(table, query, options)
        if not deleted:
            return []
        uids = {record[ID_FIELD] for record in deleted}
        index = self.ensure_collection_exists(table)
        self._write_index(table, [uid for uid in index if uid not in uids])
        for uid in uids:
            self.source.remove_item(self.get_item_name(table, uid))
        return deleted
