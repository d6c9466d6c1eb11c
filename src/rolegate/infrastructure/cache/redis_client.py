"""Redis async client factory."""

import redis.asyncio as redis


def create_redis(url: str, max_connections: int = 50) -> redis.Redis:
    """Create async Redis client.

    Connections are opened lazily on first command; callers close it with
    ``await client.aclose()`` on shutdown.
    """
    return redis.from_url(
        url,
        encoding="utf-8",
        decode_responses=True,
        max_connections=max_connections,
    )
