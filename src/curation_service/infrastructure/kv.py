"""Key-value store interface consumed by the curation core."""

from typing import Any, Protocol

import structlog

from curation_service.config import get_settings

logger = structlog.get_logger()


class KeyValueStore(Protocol):
    """Narrow async interface over a network key-value store.

    Structured values passed to ``set`` are JSON-serialisable; hash fields and
    values come back from ``hgetall`` as strings.
    """

    async def get(self, key: str) -> Any | None: ...

    async def set(self, key: str, value: Any) -> None: ...

    async def incr(self, key: str) -> int: ...

    async def expire(self, key: str, seconds: int) -> None: ...

    async def hincrby(self, key: str, field: str, amount: int = 1) -> int: ...

    async def hset(self, key: str, field: str, value: str) -> None: ...

    async def hgetall(self, key: str) -> dict[str, str]: ...

    async def ping(self) -> bool: ...


_kv_store: KeyValueStore | None = None


async def get_kv_store() -> KeyValueStore:
    """Get or create the process-wide key-value store (FastAPI dependency)."""
    global _kv_store
    if _kv_store is None:
        settings = get_settings()
        if settings.kv_backend == "memory":
            from curation_service.infrastructure.memory import MemoryKeyValueStore

            _kv_store = MemoryKeyValueStore()
            logger.warning("Using in-process key-value store, data is not durable")
        else:
            from curation_service.infrastructure.redis import (
                RedisKeyValueStore,
                get_redis_client,
            )

            _kv_store = RedisKeyValueStore(await get_redis_client())
    return _kv_store


async def close_kv_store() -> None:
    """Release the key-value store on shutdown."""
    global _kv_store
    if _kv_store is None:
        return
    if get_settings().kv_backend == "redis":
        from curation_service.infrastructure.redis import close_redis

        await close_redis()
    _kv_store = None
