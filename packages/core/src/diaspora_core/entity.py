"""AdapterEntity — value object returned by adapters and data sources."""

from __future__ import annotations

import copy
from typing import Any

from pydantic import BaseModel, ConfigDict

ID_FIELD = "id"
ID_HASH_FIELD = "idHash"


class AdapterEntity(BaseModel):
    """Raw record attributes tagged with the data source that produced them.

    Entities are transient: adapters build them from a deep copy of the
    stored record, so mutating ``attributes`` never reaches the store.

    Usage::

        entity = await data_source.find_one("users", {"name": "Alice"})
        entity.id                  # store-assigned UID
        entity.id_hash             # {"inMemory": "3f0c..."}
        entity["name"]             # "Alice"
    """

    model_config = ConfigDict(frozen=True)

    attributes: dict[str, Any]
    data_source: str

    @property
    def id(self) -> Any:
        return self.attributes.get(ID_FIELD)

    @property
    def id_hash(self) -> dict[str, Any]:
        """Mapping from data source name to that source's UID for this record."""
        return dict(self.attributes.get(ID_HASH_FIELD) or {})

    def get(self, key: str, default: Any = None) -> Any:
        return self.attributes.get(key, default)

    def __getitem__(self, key: str) -> Any:
        return self.attributes[key]

    def __contains__(self, key: object) -> bool:
        return key in self.attributes

    def to_dict(self) -> dict[str, Any]:
        """Return a deep copy of the attributes."""
        return copy.deepcopy(self.attributes)

    def with_attributes(self, attributes: dict[str, Any]) -> AdapterEntity:
        """Return a copy carrying ``attributes`` instead."""
        return AdapterEntity(attributes=attributes, data_source=self.data_source)
