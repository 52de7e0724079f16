"""In-process key-value store for local development and tests."""

import time
from collections.abc import Callable
from typing import Any

import orjson


class MemoryKeyValueStore:
    """Dict-backed implementation of the ``KeyValueStore`` interface.

    Mirrors Redis semantics closely enough for the curation core: structured
    values are serialised on write, counters are created at zero, hashes hold
    strings and keys expire against an injectable monotonic clock.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self.clock = clock
        self._data: dict[str, Any] = {}
        self._expiry: dict[str, float] = {}

    def _purge(self, key: str) -> None:
        deadline = self._expiry.get(key)
        if deadline is not None and self.clock() >= deadline:
            self._data.pop(key, None)
            del self._expiry[key]

    def _hash(self, key: str) -> dict[str, str]:
        self._purge(key)
        value = self._data.setdefault(key, {})
        if not isinstance(value, dict):
            raise TypeError(f"Key '{key}' does not hold a hash")
        return value

    async def get(self, key: str) -> Any | None:
        self._purge(key)
        value = self._data.get(key)
        if value is None:
            return None
        if isinstance(value, bytes):
            return orjson.loads(value)
        return value

    async def set(self, key: str, value: Any) -> None:
        self._data[key] = orjson.dumps(value)
        self._expiry.pop(key, None)

    async def incr(self, key: str) -> int:
        self._purge(key)
        value = self._data.get(key, 0)
        if isinstance(value, bytes):
            value = int(value)
        if not isinstance(value, int):
            raise TypeError(f"Key '{key}' does not hold an integer")
        value += 1
        self._data[key] = value
        return value

    async def expire(self, key: str, seconds: int) -> None:
        self._purge(key)
        if key in self._data:
            self._expiry[key] = self.clock() + seconds

    async def hincrby(self, key: str, field: str, amount: int = 1) -> int:
        fields = self._hash(key)
        value = int(fields.get(field, "0")) + amount
        fields[field] = str(value)
        return value

    async def hset(self, key: str, field: str, value: str) -> None:
        self._hash(key)[field] = value

    async def hgetall(self, key: str) -> dict[str, str]:
        self._purge(key)
        value = self._data.get(key)
        return dict(value) if isinstance(value, dict) else {}

    async def ping(self) -> bool:
        return True

    def keys(self) -> list[str]:
        for key in list(self._expiry):
            self._purge(key)
        return sorted(self._data)
