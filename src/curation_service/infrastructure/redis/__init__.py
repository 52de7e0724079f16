"""Redis-backed key-value store."""

from typing import Any

import orjson
import redis.asyncio as aioredis
import structlog
from redis.exceptions import RedisError

from curation_service.config import get_settings
from curation_service.errors import BackingStoreUnavailable

logger = structlog.get_logger()

_redis_client: aioredis.Redis | None = None


async def get_redis_client() -> aioredis.Redis:
    """Get or create the global async Redis client."""
    global _redis_client
    if _redis_client is None:
        settings = get_settings()
        _redis_client = aioredis.from_url(
            settings.redis_url,
            decode_responses=False,
            socket_connect_timeout=settings.kv_timeout_seconds,
            socket_timeout=settings.kv_timeout_seconds,
            retry_on_timeout=True,
        )
        logger.info("Redis client configured", host=settings.redis_host, db=settings.redis_db)
    return _redis_client


async def close_redis() -> None:
    """Close the Redis connection on shutdown."""
    global _redis_client
    if _redis_client:
        await _redis_client.aclose()
        _redis_client = None


def _decode(value: bytes | str) -> str:
    return value.decode() if isinstance(value, bytes) else value


class RedisKeyValueStore:
    """Async Redis adapter with orjson serialization.

    Every Redis failure surfaces as ``BackingStoreUnavailable``; nothing is
    retried or swallowed here.
    """

    def __init__(self, client: aioredis.Redis):
        self.client = client

    async def get(self, key: str) -> Any | None:
        try:
            data = await self.client.get(key)
        except RedisError as e:
            logger.error("KV get failed", key=key, error=str(e))
            raise BackingStoreUnavailable(f"get {key}: {e}") from e
        if data is None:
            return None
        return orjson.loads(data)

    async def set(self, key: str, value: Any) -> None:
        try:
            await self.client.set(key, orjson.dumps(value))
        except RedisError as e:
            logger.error("KV set failed", key=key, error=str(e))
            raise BackingStoreUnavailable(f"set {key}: {e}") from e

    async def incr(self, key: str) -> int:
        try:
            return int(await self.client.incr(key))
        except RedisError as e:
            raise BackingStoreUnavailable(f"incr {key}: {e}") from e

    async def expire(self, key: str, seconds: int) -> None:
        try:
            await self.client.expire(key, seconds)
        except RedisError as e:
            raise BackingStoreUnavailable(f"expire {key}: {e}") from e

    async def hincrby(self, key: str, field: str, amount: int = 1) -> int:
        try:
            return int(await self.client.hincrby(key, field, amount))
        except RedisError as e:
            raise BackingStoreUnavailable(f"hincrby {key}: {e}") from e

    async def hset(self, key: str, field: str, value: str) -> None:
        try:
            await self.client.hset(key, field, value)
        except RedisError as e:
            raise BackingStoreUnavailable(f"hset {key}: {e}") from e

    async def hgetall(self, key: str) -> dict[str, str]:
        try:
            data = await self.client.hgetall(key)
        except RedisError as e:
            logger.error("KV hgetall failed", key=key, error=str(e))
            raise BackingStoreUnavailable(f"hgetall {key}: {e}") from e
        return {_decode(k): _decode(v) for k, v in (data or {}).items()}

    async def ping(self) -> bool:
        try:
            return bool(await self.client.ping())
        except RedisError:
            return False
