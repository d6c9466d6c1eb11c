"""Health check endpoints."""

from collections.abc import Awaitable, Callable

import falcon
import falcon.asgi

from rolegate.infrastructure.cache.redis_cache import RedisCacheStore


class HealthResource:
    """Health and readiness endpoints."""

    def __init__(
        self,
        database_check: Callable[[], Awaitable[bool]],
        cache: RedisCacheStore,
    ) -> None:
        self._database_check = database_check
        self._cache = cache

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """GET /v1/health - liveness."""
        resp.media = {"status": "ok"}
        resp.status = falcon.HTTP_200

    async def on_get_ready(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """GET /v1/health/ready - readiness (database, Redis)."""
        checks = {
            "database": await self._database_check(),
            "redis": await self._cache.ping(),
        }
        ready = all(checks.values())
        resp.media = {"status": "ready" if ready else "unavailable", "checks": checks}
        resp.status = falcon.HTTP_200 if ready else falcon.HTTP_503
