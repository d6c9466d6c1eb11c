"""Cache coherency controller - evicts stale projections after writes."""

import logging
from uuid import UUID

from rolegate.infrastructure.cache.keys import CacheKeys
from rolegate.infrastructure.cache.redis_cache import RedisCacheStore
from rolegate.infrastructure.cache.session_revocation import SessionRevocationStore

logger = logging.getLogger(__name__)


class RedisCacheCoherency:
    """Decides which keys a committed mutation makes stale and evicts them."""

    def __init__(
        self,
        cache: RedisCacheStore,
        keys: CacheKeys,
        sessions: SessionRevocationStore,
    ) -> None:
        self._cache = cache
        self._keys = keys
        self._sessions = sessions

    async def role_changed(
        self, role_id: UUID, role_names: list[str], holder_ids: list[UUID]
    ) -> None:
        """Role created, updated, trashed, restored or deleted.

        role_names should include both the old and the new name on rename.
        Every holder is forced to re-authenticate.
        """
        stale = [self._keys.role(role_id)]
        for name in dict.fromkeys(role_names):
            stale.append(self._keys.role_name(name))
            stale.append(self._keys.role_permissions(name))
        await self._cache.delete(*stale)
        await self.role_listing_changed()
        for user_id in holder_ids:
            await self._sessions.revoke(user_id)
        logger.debug(
            "Role %s invalidated (%d holders revoked)", role_id, len(holder_ids)
        )

    async def role_listing_changed(self) -> None:
        await self._cache.delete_pattern(self._keys.roles_pattern())

    async def user_permissions_changed(self, user_id: UUID) -> None:
        await self._cache.delete(
            self._keys.user_permissions(user_id),
            self._keys.user_info(user_id),
        )

    async def user_roles_changed(self, user_id: UUID) -> None:
        await self._sessions.revoke(user_id)
