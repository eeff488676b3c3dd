"""Common helpers shared by the built-in stores."""

from __future__ import annotations

import copy
from operator import itemgetter
from typing import Any

from diaspora_query import MISSING

from .entity import ID_FIELD, ID_HASH_FIELD

PROTECTED_FIELDS = frozenset({ID_FIELD, ID_HASH_FIELD})


def apply_update(record: dict[str, Any], update: dict[str, Any]) -> dict[str, Any]:
    """Apply ``update`` to ``record`` in place and return it.

    Each key is set to its new value; ``MISSING`` removes the key.
    The identifier fields are never overwritten.
    """
    for key, value in update.items():
        if key in PROTECTED_FIELDS:
            continue
        if value is MISSING:
            record.pop(key, None)
        else:
            record[key] = copy.deepcopy(value)
    return record


def sort_records(
    records: list[dict[str, Any]], sort: list[tuple[str, str]]
) -> list[dict[str, Any]]:
    """Return ``records`` ordered by ``(field, direction)`` pairs.

    Records lacking a field (or holding ``None``) sort after the others,
    in both directions. Ties keep their insertion order.
    """
    ordered = list(records)
    for field, direction in reversed(sort):
        present = [r for r in ordered if r.get(field) is not None]
        absent = [r for r in ordered if r.get(field) is None]
        try:
            present = sorted(
                present, key=itemgetter(field), reverse=direction == "desc"
            )
        except TypeError:
            present = sorted(
                present, key=lambda r, f=field: str(r[f]), reverse=direction == "desc"
            )
        ordered = present + absent
    return ordered
