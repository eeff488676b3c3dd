"""Tests for InMemoryAdapter."""

from __future__ import annotations

import pytest

from diaspora_core import AdapterState, InMemoryAdapter
from diaspora_query import MISSING


def test_ready_on_creation():
    adapter = InMemoryAdapter()
    assert adapter.state is AdapterState.READY
    assert adapter.name == "inMemory"


def test_configure_collection_creates_table(memory_adapter):
    memory_adapter.configure_collection("users", {})
    assert memory_adapter.get_data_store("users") == {}


@pytest.mark.asyncio
class TestInMemoryAdapter:
    """CRUD behaviour of the in-memory store."""

    async def test_insert_assigns_id_and_id_hash(self, memory_adapter):
        entity = await memory_adapter.insert_one("users", {"name": "Alice"})

        assert entity is not None
        assert entity.attributes == {
            "name": "Alice",
            "id": "id-1",
            "idHash": {"memory": "id-1"},
        }
        assert entity.data_source == "memory"

    async def test_stored_records_are_isolated_from_callers(self, memory_adapter):
        source = {"tags": ["a"]}
        entity = await memory_adapter.insert_one("users", source)
        source["tags"].append("from caller")
        entity.attributes["tags"].append("from entity")

        stored = await memory_adapter.find_one("users", entity.id)

        assert stored is not None
        assert stored["tags"] == ["a"]

    async def test_find_by_id_shortcut(self, memory_adapter):
        await memory_adapter.insert_many("users", [{"n": 1}, {"n": 2}])

        found = await memory_adapter.find_one("users", "id-2")
        missing = await memory_adapter.find_one("users", "id-9")

        assert found is not None and found["n"] == 2
        assert missing is None

    async def test_find_one_honours_skip(self, memory_adapter):
        await memory_adapter.insert_many("users", [{"n": i} for i in range(3)])

        found = await memory_adapter.find_one("users", {}, {"skip": 2})
        past_end = await memory_adapter.find_one("users", {}, {"skip": 3})

        assert found is not None and found["n"] == 2
        assert past_end is None

    async def test_find_many_with_operators(self, memory_adapter):
        await memory_adapter.insert_many(
            "users",
            [
                {"name": "Alice", "age": 31},
                {"name": "Bob", "age": 17},
                {"name": "Anna", "age": 45},
            ],
        )

        found = await memory_adapter.find_many(
            "users", {"name": {"$regex": "^A"}, "age": {"<": 40}}
        )

        assert [e["name"] for e in found] == ["Alice"]

    async def test_find_many_sorted(self, memory_adapter):
        await memory_adapter.insert_many(
            "users", [{"age": 30}, {"age": 10}, {}, {"age": 20}]
        )

        ascending = await memory_adapter.find_many("users", {}, {"sort": "age"})
        descending = await memory_adapter.find_many(
            "users", {}, {"sort": "-age", "limit": 2}
        )

        assert [e.get("age") for e in ascending] == [10, 20, 30, None]
        assert [e.get("age") for e in descending] == [30, 20]

    async def test_absence_query(self, memory_adapter):
        await memory_adapter.insert_many("users", [{"email": "a@b.c"}, {"name": "x"}])

        found = await memory_adapter.find_many("users", {"email": MISSING})

        assert [e["name"] for e in found] == ["x"]

    async def test_update_sets_and_removes_fields(self, memory_adapter):
        await memory_adapter.insert_one("users", {"name": "Alice", "nick": "al"})

        updated = await memory_adapter.update_one(
            "users", {"name": "Alice"}, {"age": 30, "nick": MISSING}
        )

        assert updated is not None
        assert updated["age"] == 30
        assert "nick" not in updated
        stored = memory_adapter.get_data_store("users")["id-1"]
        assert stored == updated.attributes

    async def test_update_cannot_overwrite_identity(self, memory_adapter):
        await memory_adapter.insert_one("users", {"name": "Alice"})

        updated = await memory_adapter.update_one(
            "users", "id-1", {"id": "hijack", "idHash": {}, "name": "Eve"}
        )

        assert updated is not None
        assert updated.id == "id-1"
        assert updated.id_hash == {"memory": "id-1"}
        assert updated["name"] == "Eve"

    async def test_update_without_match_returns_none(self, memory_adapter):
        assert await memory_adapter.update_one("users", {"a": 1}, {"a": 2}) is None
        assert await memory_adapter.update_many("users", {"a": 1}, {"a": 2}) == []

    async def test_delete_returns_deleted_entities(self, memory_adapter):
        await memory_adapter.insert_many("users", [{"n": 1}, {"n": 2}, {"n": 1}])

        first = await memory_adapter.delete_one("users", {"n": 1})
        rest = await memory_adapter.delete_many("users", {"n": 1})
        nothing = await memory_adapter.delete_one("users", {"n": 1})

        assert first is not None and first.id == "id-1"
        assert [e.id for e in rest] == ["id-3"]
        assert nothing is None
        assert list(memory_adapter.get_data_store("users")) == ["id-2"]

    async def test_tables_are_independent(self, memory_adapter):
        await memory_adapter.insert_one("users", {"n": 1})
        await memory_adapter.insert_one("posts", {"n": 1})

        await memory_adapter.delete_many("users", {})

        assert await memory_adapter.find_many("users") == []
        assert len(await memory_adapter.find_many("posts")) == 1
