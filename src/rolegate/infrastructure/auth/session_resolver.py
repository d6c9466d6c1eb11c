"""Session resolver - validated token subject to request actor."""

import logging
from uuid import UUID

from rolegate.domain.entities import User
from rolegate.domain.value_objects import Actor
from rolegate.infrastructure.cache.keys import CacheKeys
from rolegate.infrastructure.cache.redis_cache import RedisCacheStore
from rolegate.infrastructure.cache.serialization import user_from_dict, user_to_dict
from rolegate.infrastructure.cache.session_revocation import SessionRevocationStore

logger = logging.getLogger(__name__)


class SessionResolver:
    """Builds the Actor for a token, rejecting revoked sessions."""

    def __init__(
        self,
        unit_of_work_factory: type,
        cache: RedisCacheStore,
        keys: CacheKeys,
        revocations: SessionRevocationStore,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._cache = cache
        self._keys = keys
        self._revocations = revocations

    async def resolve(self, user_id: UUID, issued_at: int | None) -> Actor | None:
        """Actor for an active user, or None if unknown, deleted or revoked."""
        if await self._revocations.is_revoked(user_id, issued_at):
            logger.info("Rejected revoked session for user %s", user_id)
            return None
        user = await self._load_user(user_id)
        if user is None:
            return None
        return user.as_actor()

    async def _load_user(self, user_id: UUID) -> User | None:
        key = self._keys.user_info(user_id)
        entry = await self._cache.get(key)
        if entry is not None and entry.value:
            return user_from_dict(entry.value)
        async with self._uow_factory() as uow:
            user = await uow.users.get_by_id(user_id)
        # Unknown users are not cached so a later sign-up is seen immediately.
        if user is not None:
            await self._cache.set(key, user_to_dict(user))
        return user
