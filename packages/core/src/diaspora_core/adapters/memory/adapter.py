"""InMemoryAdapter — dict-backed store living only as long as the process."""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING, Any

from diaspora_query import QueryOperator

from ...entity import ID_FIELD
from ...utils import apply_update, sort_records
from ..base import Adapter, AdapterCapabilities

if TYPE_CHECKING:
    from collections.abc import Mapping

    from diaspora_query import CanonicalQuery, QueryOptions

    from ...remap import FieldFilter, RemapTable, ValueFilter
    from ..base import Record

_EQUAL = QueryOperator.EQUAL.value


class InMemoryAdapter(Adapter):
    """In-memory implementation of the adapter contract.

    Records are kept per table in insertion order, keyed by their UID.
    Only the single-record primitives are native; the Many variants go
    through the base polyfills.
    """

    label = "inMemory"
    capabilities = AdapterCapabilities.of(
        "insert_one", "find_one", "update_one", "delete_one"
    )

    def __init__(self, name: str | None = None, **kwargs: Any) -> None:
        super().__init__(name, **kwargs)
        self._store: dict[str, dict[str, Record]] = {}
        self.mark_ready()

    def get_data_store(self, table: str) -> dict[str, Record]:
        """Return the records of ``table`` keyed by UID, creating the table."""
        return self._store.setdefault(table, {})

    def configure_collection(
        self,
        table: str,
        remaps: Mapping[str, str],
        filters: Mapping[str, FieldFilter | ValueFilter] | None = None,
    ) -> RemapTable:
        remap_table = super().configure_collection(table, remaps, filters)
        self.get_data_store(table)
        return remap_table

    def _target(
        self, table: str, query: CanonicalQuery, options: QueryOptions
    ) -> Record | None:
        """The stored record at position ``skip`` among the matches, if any."""
        records = self.get_data_store(table)
        condition = query.get(ID_FIELD)
        if (
            len(query) == 1
            and isinstance(condition, dict)
            and list(condition) == [_EQUAL]
            and isinstance(condition[_EQUAL], str)
        ):
            record = records.get(condition[_EQUAL])
            return record if record is not None and options.skip == 0 else None

        matched = [r for r in records.values() if self.match_entity(query, r)]
        if options.sort:
            matched = sort_records(matched, options.sort)
        if options.skip < len(matched):
            return matched[options.skip]
        return None

    async def _insert_one(self, table: str, record: Record) -> Record | None:
        record[ID_FIELD] = self.generate_id()
        self.set_id_hash(record)
        self.get_data_store(table)[record[ID_FIELD]] = copy.deepcopy(record)
        return record

    async def _find_one(
        self, table: str, query: CanonicalQuery, options: QueryOptions
    ) -> Record | None:
        record = self._target(table, query, options)
        return copy.deepcopy(record) if record is not None else None

    async def _update_one(
        self, table: str, query: CanonicalQuery, update: Record, options: QueryOptions
    ) -> Record | None:
        record = self._target(table, query, options)
        if record is None:
            return None
        apply_update(record, update)
        return copy.deepcopy(record)

    async def _delete_one(
        self, table: str, query: CanonicalQuery, options: QueryOptions
    ) -> Record | None:
        record = self._target(table, query, options)
        if record is None:
            return None
        return self.get_data_store(table).pop(record[ID_FIELD])
