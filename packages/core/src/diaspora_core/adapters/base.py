"""
Adapter — base contract between the query language and a storage medium.

A concrete adapter implements some of the eight native hooks
(``_insert_one`` ... ``_delete_many``) and declares which ones in its
``capabilities``. The public CRUD methods dispatch to the native hook when
there is one, and otherwise synthesize the operation from the sibling
primitive (a *polyfill*):

================  ==========================================================
``insert_one``    first result of ``_insert_many([record])``
``insert_many``   ``_insert_one`` for each record, in order, dropping ``None``
``find_one``      first result of ``_find_many`` with ``limit=1``
``find_many``     ``_find_one`` repeatedly, advancing ``skip``
``update_one``    first result of ``_update_many`` with ``limit=1``
``update_many``   ``_update_one`` repeatedly, excluding ids already updated
``delete_one``    first result of ``_delete_many`` with ``limit=1``
``delete_many``   ``_delete_one`` repeatedly with the same query and ``skip``
================  ==========================================================

Every CRUD pair must have at least one native side; this is checked when
the subclass is created.
"""

from __future__ import annotations

import asyncio
import copy
import logging
from abc import ABC
from collections.abc import Mapping
from dataclasses import dataclass, fields
from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar

from diaspora_query import QueryMatcher, QueryOperator
from diaspora_query import normalize_options as _normalize_options
from diaspora_query import normalize_query as _normalize_query

from ..entity import ID_FIELD, ID_HASH_FIELD, AdapterEntity
from ..iteration import iterate_limit
from ..primitives.exceptions import AdapterCapabilityError, AdapterStateError
from ..primitives.id_generator import UUID4Generator
from ..remap import RemapRegistry

if TYPE_CHECKING:
    from diaspora_query import (
        CanonicalQuery,
        MemoryOperatorRegistry,
        OptionsTransformRegistry,
        QueryOptions,
    )

    from ..primitives.id_generator import IIDGenerator
    from ..remap import FieldFilter, RemapTable, ValueFilter

logger = logging.getLogger("diaspora.adapters")

Record = dict[str, Any]

CRUD_PAIRS: tuple[tuple[str, str], ...] = (
    ("insert_one", "insert_many"),
    ("find_one", "find_many"),
    ("update_one", "update_many"),
    ("delete_one", "delete_many"),
)


class AdapterState(str, Enum):
    """Lifecycle of an adapter. ``ERROR`` is terminal."""

    PREPARING = "preparing"
    READY = "ready"
    ERROR = "error"


@dataclass(frozen=True)
class AdapterCapabilities:
    """Which CRUD primitives an adapter implements natively."""

    insert_one: bool = False
    insert_many: bool = False
    find_one: bool = False
    find_many: bool = False
    update_one: bool = False
    update_many: bool = False
    delete_one: bool = False
    delete_many: bool = False

    @classmethod
    def of(cls, *names: str) -> AdapterCapabilities:
        """Build capabilities from primitive names.

        Usage::

            AdapterCapabilities.of("insert_one", "find_one")
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(names) - known)
        if unknown:
            raise AdapterCapabilityError(
                f"Unknown primitive(s) {', '.join(unknown)}; "
                f"expected any of {', '.join(sorted(known))}"
            )
        return cls(**dict.fromkeys(names, True))

    @property
    def natives(self) -> frozenset[str]:
        return frozenset(f.name for f in fields(self) if getattr(self, f.name))

    def validate(self, owner: str) -> None:
        """Raise ``AdapterCapabilityError`` if a CRUD pair has no native side."""
        missing = [
            f"{one}/{many}"
            for one, many in CRUD_PAIRS
            if not (getattr(self, one) or getattr(self, many))
        ]
        if missing:
            raise AdapterCapabilityError(
                f"{owner} must implement at least one side of "
                f"{', '.join(missing)}"
            )


def _exclude_ids(query: CanonicalQuery, ids: list[Any]) -> CanonicalQuery:
    """Return ``query`` narrowed to records whose id is not in ``ids``."""
    narrowed = dict(query)
    condition = dict(narrowed.get(ID_FIELD, {}))
    not_in = QueryOperator.NOT_IN.value
    condition[not_in] = [*condition.get(not_in, []), *ids]
    narrowed[ID_FIELD] = condition
    return narrowed


class Adapter(ABC):  # noqa: B024
    """
    Base class of every storage adapter.

    Subclasses set ``label`` (the name the registry knows them by) and
    ``capabilities``, implement the declared native hooks, and call
    :meth:`mark_ready` (or :meth:`mark_error`) once their storage medium is
    usable. Native hooks receive canonical queries and normalized options
    in store field names, and return deep copies of stored records.

    Parameters
    ----------
    name:
        Name of the data source this adapter backs; stamped on every
        returned entity and used as the key in ``idHash``.
    id_generator:
        UID strategy for inserted records. Defaults to UUIDv4.
    operators:
        Operator registry used by :meth:`match_entity`. Defaults to the
        built-in operators; pass a custom one to add operators.
    """

    label: ClassVar[str] = ""
    capabilities: ClassVar[AdapterCapabilities | None] = None

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        capabilities = cls.__dict__.get("capabilities")
        if capabilities is None:
            return
        capabilities.validate(cls.__name__)
        for name in sorted(capabilities.natives):
            if getattr(cls, f"_{name}") is getattr(Adapter, f"_{name}"):
                raise AdapterCapabilityError(
                    f"{cls.__name__} declares {name} as native "
                    f"but does not implement _{name}"
                )

    def __init__(
        self,
        name: str | None = None,
        *,
        id_generator: IIDGenerator | None = None,
        operators: MemoryOperatorRegistry | None = None,
        options_transforms: OptionsTransformRegistry | None = None,
    ) -> None:
        if type(self).capabilities is None:
            raise AdapterCapabilityError(
                f"{type(self).__name__} does not declare its capabilities"
            )
        self.name = name or self.label or type(self).__name__
        self.remaps = RemapRegistry()
        self.matcher = QueryMatcher(operators)
        self._id_generator: IIDGenerator = id_generator or UUID4Generator()
        self._options_transforms = options_transforms
        self._state = AdapterState.PREPARING
        self._error: BaseException | None = None
        self._waiters: list[asyncio.Future[Adapter]] = []

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r} state={self._state.value}>"

    # ── Lifecycle ────────────────────────────────────────────────────

    @property
    def state(self) -> AdapterState:
        return self._state

    @property
    def error(self) -> BaseException | None:
        return self._error

    def mark_ready(self) -> None:
        """Transition ``PREPARING → READY`` and release pending waiters."""
        if self._state is AdapterState.ERROR:
            raise AdapterStateError(
                f"Adapter {self.name!r} is in error state and cannot become ready"
            )
        if self._state is AdapterState.READY:
            return
        self._state = AdapterState.READY
        logger.debug("Adapter %r is ready", self.name)
        waiters, self._waiters = self._waiters, []
        for waiter in waiters:
            if not waiter.done():
                waiter.set_result(self)

    def mark_error(self, error: BaseException) -> None:
        """Transition to ``ERROR``, failing pending and future waiters."""
        if self._state is AdapterState.ERROR:
            raise AdapterStateError(
                f"Adapter {self.name!r} is already in error state"
            )
        self._state = AdapterState.ERROR
        self._error = error
        logger.error("Adapter %r failed: %s", self.name, error)
        waiters, self._waiters = self._waiters, []
        for waiter in waiters:
            if not waiter.done():
                waiter.set_exception(error)

    async def wait_ready(self) -> Adapter:
        """Return ``self`` once ready; raise the stored error in ``ERROR`` state."""
        if self._state is AdapterState.READY:
            return self
        if self._error is not None:
            raise self._error
        waiter: asyncio.Future[Adapter] = asyncio.get_running_loop().create_future()
        self._waiters.append(waiter)
        return await waiter

    async def aclose(self) -> None:  # noqa: B027
        """Release resources held by the adapter."""

    # ── Collections & remapping ──────────────────────────────────────

    def configure_collection(
        self,
        table: str,
        remaps: Mapping[str, str],
        filters: Mapping[str, FieldFilter | ValueFilter] | None = None,
    ) -> RemapTable:
        """Declare the field-name mapping (and value filters) of ``table``."""
        return self.remaps.configure(table, remaps, filters)

    def remap_input(
        self, table: str, record: Mapping[str, Any], *, apply_filters: bool = True
    ) -> Record:
        return self.remaps.remap_input(table, record, apply_filters=apply_filters)

    def remap_output(
        self, table: str, record: Mapping[str, Any], *, apply_filters: bool = True
    ) -> Record:
        return self.remaps.remap_output(table, record, apply_filters=apply_filters)

    # ── Normalization & matching ─────────────────────────────────────

    def normalize_options(
        self, options: QueryOptions | Mapping[str, Any] | None = None
    ) -> QueryOptions:
        return _normalize_options(options, self._options_transforms)

    def normalize_query(
        self, query: Any, options: QueryOptions | None = None
    ) -> CanonicalQuery:
        return _normalize_query(query, options)

    def match_entity(self, query: CanonicalQuery, record: Mapping[str, Any]) -> bool:
        return self.matcher.matches(query, record)

    # ── Record helpers ───────────────────────────────────────────────

    def generate_id(self) -> str:
        return self._id_generator.next_id()

    def set_id_hash(self, record: Record, uid: Any = None) -> Record:
        """Record this source's UID in ``record["idHash"]`` and return it."""
        id_hash = dict(record.get(ID_HASH_FIELD) or {})
        id_hash[self.name] = uid if uid is not None else record.get(ID_FIELD)
        record[ID_HASH_FIELD] = id_hash
        return record

    def maybe_cast_entity(
        self, record: Mapping[str, Any] | None
    ) -> AdapterEntity | None:
        if record is None:
            return None
        return AdapterEntity(attributes=dict(record), data_source=self.name)

    def maybe_cast_set(self, records: list[Record] | None) -> list[AdapterEntity]:
        return [
            AdapterEntity(attributes=dict(record), data_source=self.name)
            for record in records or []
            if record is not None
        ]

    @staticmethod
    def to_dict(entity: AdapterEntity | Mapping[str, Any]) -> Record:
        """Deep-copied attributes of an entity or a raw record."""
        if isinstance(entity, AdapterEntity):
            return entity.to_dict()
        return copy.deepcopy(dict(entity))

    # ── Public CRUD dispatchers ──────────────────────────────────────

    def _prepare(
        self, query: Any, options: QueryOptions | Mapping[str, Any] | None
    ) -> tuple[CanonicalQuery, QueryOptions]:
        normalized = self.normalize_options(options)
        if query is None:
            query = {}
        return self.normalize_query(query, normalized), normalized

    def _has_native(self, name: str) -> bool:
        capabilities = type(self).capabilities
        return capabilities is not None and bool(getattr(capabilities, name))

    async def insert_one(
        self, table: str, record: Mapping[str, Any]
    ) -> AdapterEntity | None:
        attributes = self.to_dict(record)
        if self._has_native("insert_one"):
            return self.maybe_cast_entity(await self._insert_one(table, attributes))
        inserted = await self._insert_many(table, [attributes])
        return self.maybe_cast_entity(inserted[0] if inserted else None)

    async def insert_many(
        self, table: str, records: list[Mapping[str, Any]]
    ) -> list[AdapterEntity]:
        batch = [self.to_dict(record) for record in records]
        if self._has_native("insert_many"):
            return self.maybe_cast_set(await self._insert_many(table, batch))
        inserted: list[Record] = []
        for attributes in batch:
            result = await self._insert_one(table, attributes)
            if result is not None:
                inserted.append(result)
        return self.maybe_cast_set(inserted)

    async def find_one(
        self,
        table: str,
        query: Any = None,
        options: QueryOptions | Mapping[str, Any] | None = None,
    ) -> AdapterEntity | None:
        canonical, opts = self._prepare(query, options)
        opts = opts.with_limit(1)
        if self._has_native("find_one"):
            return self.maybe_cast_entity(await self._find_one(table, canonical, opts))
        found = await self._find_many(table, canonical, opts)
        return self.maybe_cast_entity(found[0] if found else None)

    async def find_many(
        self,
        table: str,
        query: Any = None,
        options: QueryOptions | Mapping[str, Any] | None = None,
    ) -> list[AdapterEntity]:
        canonical, opts = self._prepare(query, options)
        if self._has_native("find_many"):
            return self.maybe_cast_set(await self._find_many(table, canonical, opts))

        async def step(step_options: QueryOptions) -> Record | None:
            return await self._find_one(table, canonical, step_options)

        return self.maybe_cast_set(await iterate_limit(opts, step))

    async def update_one(
        self,
        table: str,
        query: Any,
        update: Mapping[str, Any],
        options: QueryOptions | Mapping[str, Any] | None = None,
    ) -> AdapterEntity | None:
        canonical, opts = self._prepare(query, options)
        opts = opts.with_limit(1)
        changes = self.to_dict(update)
        if self._has_native("update_one"):
            return self.maybe_cast_entity(
                await self._update_one(table, canonical, changes, opts)
            )
        updated = await self._update_many(table, canonical, changes, opts)
        return self.maybe_cast_entity(updated[0] if updated else None)

    async def update_many(
        self,
        table: str,
        query: Any,
        update: Mapping[str, Any],
        options: QueryOptions | Mapping[str, Any] | None = None,
    ) -> list[AdapterEntity]:
        canonical, opts = self._prepare(query, options)
        changes = self.to_dict(update)
        if self._has_native("update_many"):
            return self.maybe_cast_set(
                await self._update_many(table, canonical, changes, opts)
            )

        updated_ids: list[Any] = []

        async def step(step_options: QueryOptions) -> Record | None:
            step_query = (
                _exclude_ids(canonical, updated_ids) if updated_ids else canonical
            )
            record = await self._update_one(
                table, step_query, copy.deepcopy(changes), step_options
            )
            if record is not None:
                updated_ids.append(record.get(ID_FIELD))
            return record

        return self.maybe_cast_set(
            await iterate_limit(opts, step, advance_skip=False)
        )

    async def delete_one(
        self,
        table: str,
        query: Any = None,
        options: QueryOptions | Mapping[str, Any] | None = None,
    ) -> AdapterEntity | None:
        canonical, opts = self._prepare(query, options)
        opts = opts.with_limit(1)
        if self._has_native("delete_one"):
            return self.maybe_cast_entity(
                await self._delete_one(table, canonical, opts)
            )
        deleted = await self._delete_many(table, canonical, opts)
        return self.maybe_cast_entity(deleted[0] if deleted else None)

    async def delete_many(
        self,
        table: str,
        query: Any = None,
        options: QueryOptions | Mapping[str, Any] | None = None,
    ) -> list[AdapterEntity]:
        canonical, opts = self._prepare(query, options)
        if self._has_native("delete_many"):
            return self.maybe_cast_set(await self._delete_many(table, canonical, opts))

        async def step(step_options: QueryOptions) -> Record | None:
            return await self._delete_one(table, canonical, step_options)

        return self.maybe_cast_set(
            await iterate_limit(opts, step, advance_skip=False)
        )

    # ── Native hooks (override the ones declared in ``capabilities``) ──

    async def _insert_one(self, table: str, record: Record) -> Record | None:
        raise NotImplementedError

    async def _insert_many(self, table: str, records: list[Record]) -> list[Record]:
        raise NotImplementedError

    async def _find_one(
        self, table: str, query: CanonicalQuery, options: QueryOptions
    ) -> Record | None:
        raise NotImplementedError

    async def _find_many(
        self, table: str, query: CanonicalQuery, options: QueryOptions
    ) -> list[Record]:
        raise NotImplementedError

    async def _update_one(
        self, table: str, query: CanonicalQuery, update: Record, options: QueryOptions
    ) -> Record | None:
        raise NotImplementedError

    async def _update_many(
        self, table: str, query: CanonicalQuery, update: Record, options: QueryOptions
    ) -> list[Record]:
        raise NotImplementedError

    async def _delete_one(
        self, table: str, query: CanonicalQuery, options: QueryOptions
    ) -> Record | None:
        raise NotImplementedError

    async def _delete_many(
        self, table: str, query: CanonicalQuery, options: QueryOptions
    ) -> list[Record]:
        raise NotImplementedError
