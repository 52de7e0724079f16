"""Fixed-window request limiter backed by the key-value store.

Each client address gets a counter that expires one window after its first
increment. Bursts straddling a window boundary can reach twice the limit.
"""

import structlog

from curation_service.infrastructure.kv import KeyValueStore

logger = structlog.get_logger()


class RateLimiter:
    """Allow at most ``limit`` calls per address per ``window_seconds``."""

    def __init__(
        self,
        kv: KeyValueStore,
        limit: int = 60,
        window_seconds: int = 60,
        key_prefix: str = "ratelimit",
    ):
        self.kv = kv
        self.limit = limit
        self.window_seconds = window_seconds
        self.key_prefix = key_prefix

    def key(self, client_address: str) -> str:
        return f"{self.key_prefix}:{client_address}"

    async def allow(self, client_address: str) -> bool:
        """Count one request and report whether it is within the window's limit."""
        key = self.key(client_address)
        count = await self.kv.incr(key)
        if count == 1:
            await self.kv.expire(key, self.window_seconds)
        if count > self.limit:
            logger.info("Rate limit exceeded", client=client_address, count=count)
            return False
        return True
