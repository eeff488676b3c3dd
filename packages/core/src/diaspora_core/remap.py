"""
Per-table field-name translation between entities and stores.

A collection is configured once with a mapping of entity field names to
store field names. The inverted mapping is derived at configuration time.
Remapping is *open*: keys without an entry pass through unchanged.

Filters transform values at the same boundary. A filter is keyed by the
entity field name; its ``input`` side runs before a value is written, its
``output`` side after a value is read.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from .primitives.exceptions import RemapConflictError

ValueFilter = Callable[[Any], Any]


@dataclass(frozen=True)
class FieldFilter:
    """Value transforms for one entity field.

    Attributes:
        input: Applied to the entity value before it reaches the store.
        output: Applied to the store value before it reaches the caller.
    """

    input: ValueFilter | None = None
    output: ValueFilter | None = None


def _as_field_filter(value: FieldFilter | ValueFilter) -> FieldFilter:
    if isinstance(value, FieldFilter):
        return value
    if callable(value):
        return FieldFilter(output=value)
    raise TypeError(f"Expected a FieldFilter or a callable, had {value!r}")


@dataclass(frozen=True)
class RemapTable:
    """Bidirectional field mapping plus filters for a single table."""

    normal: dict[str, str]
    inverted: dict[str, str]
    filters: dict[str, FieldFilter]

    @classmethod
    def build(
        cls,
        table: str,
        remaps: Mapping[str, str],
        filters: Mapping[str, FieldFilter | ValueFilter] | None = None,
    ) -> RemapTable:
        """Invert ``remaps`` and normalise ``filters``.

        Raises:
            RemapConflictError: Two entity fields target the same store field.
        """
        inverted: dict[str, str] = {}
        for entity_field, store_field in remaps.items():
            if store_field in inverted:
                raise RemapConflictError(
                    table, store_field, (inverted[store_field], entity_field)
                )
            inverted[store_field] = entity_field
        return cls(
            normal=dict(remaps),
            inverted=inverted,
            filters={
                name: _as_field_filter(f) for name, f in (filters or {}).items()
            },
        )

    def to_store(
        self, record: Mapping[str, Any], *, apply_filters: bool = True
    ) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for key, value in record.items():
            if apply_filters:
                field_filter = self.filters.get(key)
                if field_filter is not None and field_filter.input is not None:
                    value = field_filter.input(value)
            result[self.normal.get(key, key)] = value
        return result

    def to_entity(
        self, record: Mapping[str, Any], *, apply_filters: bool = True
    ) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for key, value in record.items():
            name = self.inverted.get(key, key)
            if apply_filters:
                field_filter = self.filters.get(name)
                if field_filter is not None and field_filter.output is not None:
                    value = field_filter.output(value)
            result[name] = value
        return result


class RemapRegistry:
    """Remap tables owned by one adapter, keyed by table name.

    Tables are configured before use; unknown tables pass records through.
    """

    def __init__(self) -> None:
        self._tables: dict[str, RemapTable] = {}

    def configure(
        self,
        table: str,
        remaps: Mapping[str, str],
        filters: Mapping[str, FieldFilter | ValueFilter] | None = None,
    ) -> RemapTable:
        remap_table = RemapTable.build(table, remaps, filters)
        self._tables[table] = remap_table
        return remap_table

    def get(self, table: str) -> RemapTable | None:
        return self._tables.get(table)

    def has(self, table: str) -> bool:
        return table in self._tables

    def store_field(self, table: str, field: str) -> str:
        """Store name of the entity field ``field`` of ``table``."""
        remap_table = self._tables.get(table)
        if remap_table is None:
            return field
        return remap_table.normal.get(field, field)

    def remap_input(
        self, table: str, record: Mapping[str, Any], *, apply_filters: bool = True
    ) -> dict[str, Any]:
        """Translate entity field names (and values) to their store form."""
        remap_table = self._tables.get(table)
        if remap_table is None:
            return dict(record)
        return remap_table.to_store(record, apply_filters=apply_filters)

    def remap_output(
        self, table: str, record: Mapping[str, Any], *, apply_filters: bool = True
    ) -> dict[str, Any]:
        """Translate store field names (and values) to their entity form."""
        remap_table = self._tables.get(table)
        if remap_table is None:
            return dict(record)
        return remap_table.to_entity(record, apply_filters=apply_filters)
