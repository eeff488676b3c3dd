"""
Query options for pagination, ordering, and remapping.

``QueryOptions`` travels alongside a canonical query. The query defines
*what* to match; the options define *how many*, *from where*, and whether
field names are translated on the way in and out of the store.

Raw options are plain mappings. ``normalize_options`` runs the registered
per-option transforms over a copy, then validates the result into an
immutable ``QueryOptions``. Normalizing a ``QueryOptions`` is a no-op.
"""

from __future__ import annotations

import copy
import math
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from .exceptions import QueryOptionsError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

SortDirection = Literal["asc", "desc"]


class QueryOptions(BaseModel):
    """
    Immutable, canonical query options.

    Attributes:
        skip: Number of matches to pass over before collecting results.
        limit: Maximum number of results; ``None`` means unbounded.
        remap_input: Translate entity field names to store field names
            (and expand shorthand queries) before dispatch.
        remap_output: Translate store field names back on results.
        sort: ``(field, direction)`` pairs, most significant first.

    Store-specific options are kept as extra fields.
    """

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    skip: int = Field(default=0, ge=0)
    limit: int | None = Field(default=None, ge=1)
    remap_input: bool = Field(default=True, alias="remapInput")
    remap_output: bool = Field(default=True, alias="remapOutput")
    sort: list[tuple[str, SortDirection]] = Field(default_factory=list)

    @property
    def unbounded(self) -> bool:
        return self.limit is None

    def with_limit(self, limit: int | None) -> QueryOptions:
        """Return a copy with ``limit`` replaced."""
        return self.model_copy(update={"limit": limit})

    def with_skip(self, skip: int) -> QueryOptions:
        """Return a copy with ``skip`` replaced."""
        return self.model_copy(update={"skip": skip})

    def to_dict(self) -> dict[str, Any]:
        """Serialise to a JSON-compatible dictionary, omitting defaults."""
        result: dict[str, Any] = {"skip": self.skip}
        if self.limit is not None:
            result["limit"] = self.limit
        if self.sort:
            result["sort"] = [list(pair) for pair in self.sort]
        if self.model_extra:
            result.update(self.model_extra)
        return result


# ---------------------------------------------------------------------------
# Transforms
# ---------------------------------------------------------------------------


def _coerce_int(name: str, value: Any) -> int:
    if isinstance(value, bool):
        raise QueryOptionsError({name: [f"Expected an integer, had {value!r}"]})
    if isinstance(value, float) and not value.is_integer():
        raise QueryOptionsError({name: [f"Expected an integer, had {value!r}"]})
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise QueryOptionsError(
            {name: [f"Expected an integer, had {value!r}"]}
        ) from exc


def transform_limit(opts: dict[str, Any]) -> None:
    value = opts["limit"]
    if value is None or (isinstance(value, float) and math.isinf(value)):
        opts["limit"] = None
        return
    limit = _coerce_int("limit", value)
    if limit < 1:
        raise QueryOptionsError(
            {"limit": [f"Expected a positive integer, had {limit}"]}
        )
    opts["limit"] = limit


def transform_skip(opts: dict[str, Any]) -> None:
    skip = _coerce_int("skip", opts["skip"])
    if skip < 0:
        raise QueryOptionsError(
            {"skip": [f"Expected a non-negative integer, had {skip}"]}
        )
    opts["skip"] = skip


def transform_page(opts: dict[str, Any]) -> None:
    """Turn ``page`` into ``skip``; pages are zero-based and ``limit`` sized."""
    page = _coerce_int("page", opts.pop("page"))
    if opts.get("limit") is None:
        raise QueryOptionsError(
            {"page": ['Usage of "page" requires "limit" to be defined and finite']}
        )
    if "skip" in opts:
        raise QueryOptionsError({"page": ['Use either "page" or "skip"']})
    if page < 0:
        raise QueryOptionsError(
            {"page": [f"Expected a non-negative integer, had {page}"]}
        )
    opts["skip"] = page * opts["limit"]


def _sort_item(item: Any) -> tuple[str, str]:
    if isinstance(item, Mapping):
        return str(item.get("field", "")), str(item.get("dir", "asc")).lower()
    if isinstance(item, list | tuple) and len(item) == 2:
        return str(item[0]), str(item[1]).lower()
    if isinstance(item, str):
        stripped = item.strip()
        if stripped.startswith("-"):
            return stripped[1:], "desc"
        return stripped.lstrip("+"), "asc"
    raise QueryOptionsError({"sort": [f"Unsupported sort item {item!r}"]})


def transform_sort(opts: dict[str, Any]) -> None:
    raw = opts["sort"]
    if not raw:
        opts["sort"] = []
        return
    if isinstance(raw, str):
        items: list[Any] = [part for part in raw.split(",") if part.strip()]
    elif isinstance(raw, Mapping):
        items = list(raw.items())
    else:
        items = list(raw)
    sort = [_sort_item(item) for item in items]
    for field, direction in sort:
        if not field:
            raise QueryOptionsError({"sort": ["Sort field names must be non-empty"]})
        if direction not in ("asc", "desc"):
            raise QueryOptionsError(
                {"sort": [f'Sort direction for "{field}" must be asc or desc']}
            )
    opts["sort"] = sort


class OptionsTransformRegistry:
    """
    Ordered registry of per-option transforms.

    A transform receives the mutable copy of the raw options and rewrites
    its own option in place. It only runs when its option is present.
    """

    def __init__(self) -> None:
        self._transforms: dict[str, Callable[[dict[str, Any]], None]] = {}

    def register(self, name: str, transform: Callable[[dict[str, Any]], None]) -> None:
        self._transforms[name] = transform

    def unregister(self, name: str) -> None:
        self._transforms.pop(name, None)

    def has(self, name: str) -> bool:
        return name in self._transforms

    def __iter__(self) -> Iterator[tuple[str, Callable[[dict[str, Any]], None]]]:
        return iter(list(self._transforms.items()))

    def apply(self, opts: dict[str, Any]) -> None:
        for name, transform in self:
            if name in opts:
                transform(opts)


def build_default_transforms() -> OptionsTransformRegistry:
    """Registry with the built-in skip, limit, page and sort transforms."""
    registry = OptionsTransformRegistry()
    registry.register("skip", transform_skip)
    registry.register("limit", transform_limit)
    registry.register("page", transform_page)
    registry.register("sort", transform_sort)
    return registry


_DEFAULT_TRANSFORMS = build_default_transforms()


def normalize_options(
    raw: QueryOptions | Mapping[str, Any] | None = None,
    transforms: OptionsTransformRegistry | None = None,
) -> QueryOptions:
    """
    Transform options to their canonical form.

    Raises:
        QueryOptionsError: An option has an unacceptable type or value, or
            options conflict (``page`` with ``skip``).
    """
    if isinstance(raw, QueryOptions):
        return raw
    if raw is None:
        return QueryOptions()
    if not isinstance(raw, Mapping):
        raise QueryOptionsError(f"Expected options to be a mapping, had {raw!r}")

    opts = copy.deepcopy(dict(raw))
    (transforms if transforms is not None else _DEFAULT_TRANSFORMS).apply(opts)
    try:
        return QueryOptions.model_validate(opts)
    except PydanticValidationError as exc:
        errors: dict[str, list[str]] = {}
        for error in exc.errors():
            loc = ".".join(str(p) for p in error.get("loc", ("__root__",)))
            msg = error.get("msg", "validation error")
            errors.setdefault(loc, []).append(msg)
        raise QueryOptionsError(errors) from exc
