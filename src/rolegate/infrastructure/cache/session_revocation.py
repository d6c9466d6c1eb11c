"""Session revocation markers - force re-authentication after role changes."""

import logging
import time
from uuid import UUID

from rolegate.infrastructure.cache.keys import CacheKeys
from rolegate.infrastructure.cache.redis_cache import RedisCacheStore

logger = logging.getLogger(__name__)


class SessionRevocationStore:
    """Stores a "revoked before" epoch per user; older tokens are rejected."""

    def __init__(self, cache: RedisCacheStore, keys: CacheKeys, ttl_seconds: int) -> None:
        self._cache = cache
        self._keys = keys
        self._ttl = ttl_seconds

    async def revoke(self, user_id: UUID) -> None:
        """Invalidate every token issued to user up to now."""
        revoked_at = int(time.time())
        stored = await self._cache.set(
            self._keys.session_revoked(user_id), revoked_at, ttl=self._ttl
        )
        await self._cache.delete(self._keys.user_info(user_id))
        if stored:
            logger.info("Sessions revoked for user %s", user_id)
        else:
            logger.error("Session revocation for user %s was not persisted", user_id)

    async def revoked_at(self, user_id: UUID) -> int | None:
        entry = await self._cache.get(self._keys.session_revoked(user_id))
        if entry is None or entry.value is None:
            return None
        return int(entry.value)

    async def is_revoked(self, user_id: UUID, issued_at: int | None) -> bool:
        """True if the token was issued at or before the user's revocation."""
        revoked_at = await self.revoked_at(user_id)
        if revoked_at is None:
            return False
        if issued_at is None:
            return True
        # Same-second tokens count as revoked.
        return issued_at <= revoked_at
