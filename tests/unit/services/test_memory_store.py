"""Unit tests for the in-process key-value store."""

import pytest

from curation_service.infrastructure.memory import MemoryKeyValueStore


class TestMemoryKeyValueStore:
    @pytest.mark.asyncio
    async def test_get_missing_returns_none(self, kv: MemoryKeyValueStore) -> None:
        assert await kv.get("missing") is None

    @pytest.mark.asyncio
    async def test_set_stores_a_copy(self, kv: MemoryKeyValueStore) -> None:
        value = {"a": [1, 2]}
        await kv.set("k", value)
        value["a"].append(3)
        assert await kv.get("k") == {"a": [1, 2]}

    @pytest.mark.asyncio
    async def test_incr_creates_at_zero(self, kv: MemoryKeyValueStore) -> None:
        assert await kv.incr("n") == 1
        assert await kv.incr("n") == 2
        assert await kv.get("n") == 2

    @pytest.mark.asyncio
    async def test_hash_operations(self, kv: MemoryKeyValueStore) -> None:
        assert await kv.hgetall("h") == {}
        assert await kv.hincrby("h", "x", 2) == 2
        await kv.hset("h", "y", "label")
        assert await kv.hgetall("h") == {"x": "2", "y": "label"}

    @pytest.mark.asyncio
    async def test_expire(self, kv: MemoryKeyValueStore, clock) -> None:
        await kv.incr("n")
        await kv.expire("n", 10)
        clock.advance(9.9)
        assert await kv.get("n") == 1
        clock.advance(0.1)
        assert await kv.get("n") is None
        assert await kv.incr("n") == 1

    @pytest.mark.asyncio
    async def test_expire_missing_key_is_noop(self, kv: MemoryKeyValueStore) -> None:
        await kv.expire("missing", 10)
        assert kv.keys() == []

    @pytest.mark.asyncio
    async def test_incr_on_hash_fails(self, kv: MemoryKeyValueStore) -> None:
        await kv.hset("h", "x", "1")
        with pytest.raises(TypeError):
            await kv.incr("h")
