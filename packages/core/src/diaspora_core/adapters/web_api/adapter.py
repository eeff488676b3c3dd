"""WebApiAdapter — REST client forwarding every primitive to a remote API."""

from __future__ import annotations

import logging
from dataclasses import fields, replace
from typing import TYPE_CHECKING, Any

import httpx

from diaspora_query import json_stringify

from ...primitives.exceptions import WebApiError
from ..base import Adapter, AdapterCapabilities
from .config import WebApiConfig

if TYPE_CHECKING:
    from diaspora_query import CanonicalQuery, QueryOptions

    from ..base import Record

logger = logging.getLogger("diaspora.web_api")

_CONFIG_FIELDS = frozenset(f.name for f in fields(WebApiConfig))
_NO_RESULT = frozenset({204, 404})


class WebApiAdapter(Adapter):
    """
    Adapter talking to a REST API that implements the query language.

    Single-record operations use ``/{table}``, multi-record ones
    ``/{plural}`` (see :meth:`WebApiConfig.plural`):

    ===============  ========  ==================================
    primitive        verb      payload
    ===============  ========  ==================================
    insert           POST      record(s) as body
    find             GET       ``where`` (JSON) + options as params
    update           PATCH     ``{"where": ..., "update": ...}`` body
    delete           DELETE    ``where`` (JSON) + options as params
    ===============  ========  ==================================

    ``204`` and ``404`` answers mean "no result". Any other error status,
    or a transport failure, raises :class:`WebApiError`.

    Parameters
    ----------
    config:
        :class:`WebApiConfig`. Its fields may also be given as keyword
        arguments (``port=8080``), which take precedence.
    client:
        ``httpx.AsyncClient`` to send requests with. When omitted the
        adapter creates one and closes it in :meth:`aclose`.
    """

    label = "webApi"
    capabilities = AdapterCapabilities.of(
        "insert_one",
        "insert_many",
        "find_one",
        "find_many",
        "update_one",
        "update_many",
        "delete_one",
        "delete_many",
    )

    def __init__(
        self,
        name: str | None = None,
        config: WebApiConfig | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        **kwargs: Any,
    ) -> None:
        overrides = {key: kwargs.pop(key) for key in _CONFIG_FIELDS & kwargs.keys()}
        super().__init__(name, **kwargs)
        self.config = replace(config or WebApiConfig(), **overrides)
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=self.config.timeout)
        self.mark_ready()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    # ── HTTP ─────────────────────────────────────────────────────────

    @staticmethod
    def _params(
        query: CanonicalQuery, options: QueryOptions, *, where: bool = True
    ) -> dict[str, str]:
        params: dict[str, str] = {}
        if where:
            params["where"] = json_stringify(query)
        if options.skip:
            params["skip"] = str(options.skip)
        if options.limit is not None:
            params["limit"] = str(options.limit)
        if options.sort:
            params["sort"] = ",".join(
                f"-{field}" if direction == "desc" else field
                for field, direction in options.sort
            )
        return params

    async def _request(
        self,
        method: str,
        endpoint: str,
        *,
        params: dict[str, str] | None = None,
        body: Any = None,
    ) -> Any:
        url = f"{self.config.base_url}/{endpoint}"
        logger.debug("%s %s params=%s", method, url, params)
        try:
            response = await self._client.request(
                method,
                url,
                params=params,
                content=None if body is None else json_stringify(body),
                headers={"Content-Type": "application/json"},
            )
        except httpx.HTTPError as exc:
            logger.error("%s %s failed: %s", method, url, exc)
            raise WebApiError(f"{method} {url} failed: {exc}") from exc

        if response.status_code in _NO_RESULT:
            return None
        if response.is_error:
            logger.error(
                "%s %s answered %d: %s",
                method,
                url,
                response.status_code,
                response.text,
            )
            raise WebApiError(
                f"{method} {url} answered {response.status_code}: {response.text}",
                status_code=response.status_code,
            )
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise WebApiError(
                f"{method} {url} returned invalid JSON",
                status_code=response.status_code,
            ) from exc

    def _one(self, payload: Any) -> Record | None:
        if not isinstance(payload, dict):
            return None
        return self.set_id_hash(payload)

    def _many(self, payload: Any) -> list[Record]:
        if not isinstance(payload, list):
            return []
        return [self.set_id_hash(item) for item in payload if isinstance(item, dict)]

    # ── Native primitives ────────────────────────────────────────────

    async def _insert_one(self, table: str, record: Record) -> Record | None:
        return self._one(await self._request("POST", table, body=record))

    async def _insert_many(self, table: str, records: list[Record]) -> list[Record]:
        plural = self.config.plural(table)
        return self._many(await self._request("POST", plural, body=records))

    async def _find_one(
        self, table: str, query: CanonicalQuery, options: QueryOptions
    ) -> Record | None:
        params = self._params(query, options)
        return self._one(await self._request("GET", table, params=params))

    async def _find_many(
        self, table: str, query: CanonicalQuery, options: QueryOptions
    ) -> list[Record]:
        plural = self.config.plural(table)
        params = self._params(query, options)
        return self._many(await self._request("GET", plural, params=params))

    async def _update_one(
        self, table: str, query: CanonicalQuery, update: Record, options: QueryOptions
    ) -> Record | None:
        params = self._params(query, options, where=False)
        body = {"where": query, "update": update}
        return self._one(
            await self._request("PATCH", table, params=params, body=body)
        )

    async def _update_many(
        self, table: str, query: CanonicalQuery, update: Record, options: QueryOptions
    ) -> list[Record]:
        plural = self.config.plural(table)
        params = self._params(query, options, where=False)
        body = {"where": query, "update": update}
        return self._many(
            await self._request("PATCH", plural, params=params, body=body)
        )

    async def _delete_one(
        self, table: str, query: CanonicalQuery, options: QueryOptions
    ) -> Record | None:
        params = self._params(query, options)
        return self._one(await self._request("DELETE", table, params=params))

    async def _delete_many(
        self, table: str, query: CanonicalQuery, options: QueryOptions
    ) -> list[Record]:
        plural = self.config.plural(table)
        params = self._params(query, options)
        return self._many(await self._request("DELETE", plural, params=params))
