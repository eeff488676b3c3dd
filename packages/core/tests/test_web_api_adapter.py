"""Tests for WebApiAdapter against an ``httpx.MockTransport`` server."""

from __future__ import annotations

import json
from typing import Any

import httpx
import pytest
import pytest_asyncio

from diaspora_core import WebApiAdapter, WebApiConfig, WebApiError
from diaspora_query import MISSING


class FakeApi:
    """Records requests and answers with queued responses."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.responses: list[httpx.Response | Exception] = []

    def reply(self, status_code: int = 200, payload: Any = None) -> None:
        if payload is None:
            self.responses.append(httpx.Response(status_code))
        else:
            self.responses.append(httpx.Response(status_code, json=payload))

    def fail(self, exc: Exception) -> None:
        self.responses.append(exc)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.responses.pop(0) if self.responses else httpx.Response(204)
        if isinstance(response, Exception):
            raise response
        return response

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def api() -> FakeApi:
    return FakeApi()


@pytest_asyncio.fixture
async def adapter(api: FakeApi):
    client = httpx.AsyncClient(transport=httpx.MockTransport(api))
    adapter = WebApiAdapter("remote", port=12345, client=client)
    yield adapter
    await client.aclose()


class TestConfig:
    def test_base_url(self):
        assert WebApiConfig().base_url == "http://localhost/api"
        assert (
            WebApiConfig(host="example.com", port=8443, scheme="https", path="v1/")
            .base_url
            == "https://example.com:8443/v1"
        )
        assert WebApiConfig(path="").base_url == "http://localhost"

    @pytest.mark.parametrize(
        ("table", "plural"),
        [
            ("user", "users"),
            ("box", "boxes"),
            ("city", "cities"),
            ("day", "days"),
            ("person", "people"),
        ],
    )
    def test_plural(self, table, plural):
        config = WebApiConfig(plurals={"person": "people"})
        assert config.plural(table) == plural


@pytest.mark.asyncio
class TestWebApiAdapter:
    async def test_insert_one_posts_record(self, api, adapter):
        api.reply(201, {"id": "42", "name": "Alice"})

        entity = await adapter.insert_one("user", {"name": "Alice"})

        assert api.last.method == "POST"
        assert str(api.last.url) == "http://localhost:12345/api/user"
        assert json.loads(api.last.content) == {"name": "Alice"}
        assert entity is not None
        assert entity.id == "42"
        assert entity.id_hash == {"remote": "42"}
        assert entity.data_source == "remote"

    async def test_insert_many_posts_to_plural(self, api, adapter):
        api.reply(200, [{"id": "1"}, {"id": "2"}])

        inserted = await adapter.insert_many("user", [{"n": 1}, {"n": 2}])

        assert api.last.url.path == "/api/users"
        assert json.loads(api.last.content) == [{"n": 1}, {"n": 2}]
        assert [e.id for e in inserted] == ["1", "2"]

    async def test_find_one_sends_where_and_forced_limit(self, api, adapter):
        api.reply(200, {"id": "1", "age": 40})

        found = await adapter.find_one(
            "user", {"age": {">": 18}}, {"skip": 2, "limit": 10}
        )

        request = api.last
        assert request.method == "GET"
        assert request.url.path == "/api/user"
        assert json.loads(request.url.params["where"]) == {"age": {"$greater": 18}}
        assert request.url.params["skip"] == "2"
        assert request.url.params["limit"] == "1"
        assert found is not None and found["age"] == 40

    async def test_find_many_forwards_options(self, api, adapter):
        api.reply(200, [{"id": "1"}])

        await adapter.find_many("user", {}, {"limit": 5, "sort": ["-age", "name"]})

        params = api.last.url.params
        assert api.last.url.path == "/api/users"
        assert params["limit"] == "5"
        assert params["sort"] == "-age,name"
        assert "skip" not in params

    async def test_update_sends_where_and_update_in_body(self, api, adapter):
        api.reply(200, {"id": "1", "name": "Bob"})

        await adapter.update_one("user", "1", {"name": "Bob", "nick": MISSING})

        assert api.last.method == "PATCH"
        assert api.last.url.path == "/api/user"
        assert "where" not in api.last.url.params
        assert json.loads(api.last.content) == {
            "where": {"id": {"$equal": "1"}},
            "update": {"name": "Bob", "nick": None},
        }

    async def test_update_many_uses_plural(self, api, adapter):
        api.reply(200, [{"id": "1"}, {"id": "2"}])

        updated = await adapter.update_many("user", {"a": 1}, {"a": 2})

        assert api.last.url.path == "/api/users"
        assert len(updated) == 2

    async def test_delete_returns_deleted_records(self, api, adapter):
        api.reply(200, {"id": "1"})
        api.reply(200, [{"id": "2"}, {"id": "3"}])

        one = await adapter.delete_one("user", {"a": 1})
        many = await adapter.delete_many("user", {"a": 1})

        assert [r.method for r in api.requests] == ["DELETE", "DELETE"]
        assert [r.url.path for r in api.requests] == ["/api/user", "/api/users"]
        assert one is not None and one.id == "1"
        assert [e.id for e in many] == ["2", "3"]

    @pytest.mark.parametrize("status_code", [204, 404])
    async def test_empty_answers_mean_no_result(self, api, adapter, status_code):
        api.reply(status_code)
        assert await adapter.find_one("user", {"a": 1}) is None
        api.reply(status_code)
        assert await adapter.find_many("user", {"a": 1}) == []

    async def test_error_status_raises(self, api, adapter):
        api.reply(500, {"message": "boom"})

        with pytest.raises(WebApiError) as exc_info:
            await adapter.find_many("user", {})

        assert exc_info.value.status_code == 500
        assert "boom" in str(exc_info.value)

    async def test_transport_failure_raises(self, api, adapter):
        api.fail(httpx.ConnectError("connection refused"))

        with pytest.raises(WebApiError, match="connection refused") as exc_info:
            await adapter.find_one("user", {})

        assert exc_info.value.status_code is None

    async def test_invalid_json_raises(self, api, adapter):
        api.responses.append(httpx.Response(200, content=b"<html>"))

        with pytest.raises(WebApiError, match="invalid JSON"):
            await adapter.find_one("user", {})


@pytest.mark.asyncio
async def test_owned_client_is_closed():
    adapter = WebApiAdapter()
    await adapter.aclose()
    assert adapter._client.is_closed


@pytest.mark.asyncio
async def test_injected_client_is_left_open(api):
    client = httpx.AsyncClient(transport=httpx.MockTransport(api))
    adapter = WebApiAdapter(client=client)
    await adapter.aclose()
    assert not client.is_closed
    await client.aclose()
