"""Lifespan middleware - opens pools on startup, closes them on shutdown."""

import logging
from typing import Any

from psycopg_pool import AsyncConnectionPool
from redis.asyncio import Redis

logger = logging.getLogger(__name__)


class PoolLifespanMiddleware:
    """Middleware that opens the connection pool on startup and closes on shutdown.

    The Redis client connects lazily; it is only closed here.
    """

    def __init__(self, pool: AsyncConnectionPool, redis: Redis) -> None:
        self._pool = pool
        self._redis = redis

    async def process_startup(
        self, scope: dict[str, Any], event: dict[str, Any]
    ) -> None:
        """Open pool when ASGI server starts."""
        await self._pool.open()
        logger.info("Database pool opened")

    async def process_shutdown(
        self, scope: dict[str, Any], event: dict[str, Any]
    ) -> None:
        """Close pools when ASGI server shuts down."""
        await self._pool.close()
        await self._redis.aclose()
        logger.info("Database pool and Redis client closed")
