"""Redis-backed read-through cache with explicit presence envelope."""

import json
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, TypeVar

import redis.asyncio as redis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class CacheEntry:
    """A cache hit. ``value`` may legitimately be empty or None."""

    value: Any


class RedisCacheStore:
    """JSON cache on Redis.

    Values are stored as ``{"present": true, "value": ...}`` so that a cached
    empty list is a hit and only a missing key is a miss. Redis failures are
    logged and reported as misses; the database stays the source of truth.
    """

    def __init__(self, client: redis.Redis, default_ttl: int = 3600) -> None:
        self._client = client
        self._default_ttl = default_ttl

    async def get(self, key: str) -> CacheEntry | None:
        """Return CacheEntry on hit, None on miss or failure."""
        try:
            raw = await self._client.get(key)
        except RedisError as e:
            logger.warning("Cache get failed for %s: %s", key, e)
            return None
        if raw is None:
            return None
        try:
            envelope = json.loads(raw)
        except (TypeError, ValueError):
            logger.warning("Discarding malformed cache entry %s", key)
            await self.delete(key)
            return None
        if not isinstance(envelope, dict) or envelope.get("present") is not True:
            return None
        return CacheEntry(envelope.get("value"))

    async def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        """Store value with TTL. Returns False if Redis is unavailable."""
        payload = json.dumps({"present": True, "value": value}, default=str)
        try:
            await self._client.set(key, payload, ex=ttl or self._default_ttl)
            return True
        except RedisError as e:
            logger.warning("Cache set failed for %s: %s", key, e)
            return False

    async def delete(self, *keys: str) -> None:
        """Evict keys."""
        if not keys:
            return
        try:
            await self._client.delete(*keys)
            logger.debug("Cache evicted %s", ", ".join(keys))
        except RedisError as e:
            logger.warning("Cache delete failed for %s: %s", ", ".join(keys), e)

    async def delete_pattern(self, pattern: str) -> int:
        """Evict every key matching pattern (SCAN based)."""
        try:
            keys = [key async for key in self._client.scan_iter(match=pattern)]
            if keys:
                await self._client.delete(*keys)
            logger.debug("Cache evicted %d keys matching %s", len(keys), pattern)
            return len(keys)
        except RedisError as e:
            logger.warning("Cache pattern delete failed for %s: %s", pattern, e)
            return 0

    async def get_or_load(
        self,
        key: str,
        loader: Callable[[], Awaitable[T]],
        *,
        encode: Callable[[T], Any],
        decode: Callable[[Any], T],
        ttl: int | None = None,
    ) -> T:
        """Cache-then-load: return cached value, else load, store and return."""
        entry = await self.get(key)
        if entry is not None:
            try:
                return decode(entry.value)
            except (KeyError, TypeError, ValueError):
                logger.warning("Discarding undecodable cache entry %s", key)
        value = await loader()
        await self.set(key, encode(value), ttl)
        return value

    async def ping(self) -> bool:
        """Check if Redis is reachable."""
        try:
            return bool(await self._client.ping())
        except RedisError:
            return False
