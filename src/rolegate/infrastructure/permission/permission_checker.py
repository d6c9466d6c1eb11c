"""Permission checker implementation - personal overrides, then role OR-merge."""

from uuid import UUID

from rolegate.domain.entities import PermissionRecord
from rolegate.domain.permission_merge import decide, effective_permissions, find_for_entity
from rolegate.domain.value_objects import Actor, PermissionAction
from rolegate.infrastructure.cache.keys import CacheKeys
from rolegate.infrastructure.cache.redis_cache import RedisCacheStore
from rolegate.infrastructure.cache.serialization import (
    permissions_from_list,
    permissions_to_list,
)


class RoleGatePermissionChecker:
    """Checks actor permissions against personalized and role default records.

    Both inputs are read cache-then-database: personalized records per user
    id, default records per role name.
    """

    def __init__(
        self,
        unit_of_work_factory: type,
        cache: RedisCacheStore,
        keys: CacheKeys,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._cache = cache
        self._keys = keys

    async def check(self, actor: Actor, entity_name: str, action: PermissionAction) -> bool:
        """Check if actor may perform action on entity_name."""
        personalized = await self.personalized_permissions(actor.id)
        role_records: list[PermissionRecord] = []
        if find_for_entity(personalized, entity_name) is None:
            role_records = await self._role_records(actor.roles)
        return decide(personalized, role_records, entity_name, action)

    async def personalized_permissions(self, user_id: UUID) -> list[PermissionRecord]:
        """Raw personal overrides of a user."""

        async def load() -> list[PermissionRecord]:
            async with self._uow_factory() as uow:
                return await uow.permissions.list_by_user(user_id)

        return await self._cache.get_or_load(
            self._keys.user_permissions(user_id),
            load,
            encode=permissions_to_list,
            decode=permissions_from_list,
        )

    async def effective_permissions(self, actor: Actor) -> list[PermissionRecord]:
        """One record per entity: role OR-merge with personal overrides on top."""
        personalized = await self.personalized_permissions(actor.id)
        role_records = await self._role_records(actor.roles)
        return effective_permissions(personalized, role_records)

    async def role_default_permissions(self, role_name: str) -> list[PermissionRecord]:
        """Default permissions of an active role; empty if missing or trashed."""

        async def load() -> list[PermissionRecord]:
            async with self._uow_factory() as uow:
                role = await uow.roles.get_by_name(role_name)
                return list(role.default_permissions) if role else []

        return await self._cache.get_or_load(
            self._keys.role_permissions(role_name),
            load,
            encode=permissions_to_list,
            decode=permissions_from_list,
        )

    async def _role_records(self, role_names: list[str]) -> list[PermissionRecord]:
        records: list[PermissionRecord] = []
        for name in role_names:
            records.extend(await self.role_default_permissions(name))
        return records
