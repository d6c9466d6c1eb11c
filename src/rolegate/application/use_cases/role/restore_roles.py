"""Restore trashed roles use case."""

import logging
from uuid import UUID

from rolegate.application.ports import CacheCoherency, PermissionChecker
from rolegate.application.use_cases.authorization import authorize
from rolegate.domain.entities import Role
from rolegate.domain.exceptions import NotFound, ValidationError
from rolegate.domain.value_objects import Actor, EntityName, PermissionAction

logger = logging.getLogger(__name__)


class RestoreRolesUseCase:
    """Take roles out of the trash. Roles that are not trashed are left as they are."""

    def __init__(
        self,
        unit_of_work_factory: type,
        permission_checker: PermissionChecker,
        cache_coherency: CacheCoherency,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._permission_checker = permission_checker
        self._coherency = cache_coherency

    async def execute(self, actor: Actor | None, role_ids: list[UUID]) -> list[Role]:
        actor = await authorize(
            self._permission_checker, actor, EntityName.ROLE, PermissionAction.UPDATE
        )
        role_ids = list(dict.fromkeys(role_ids))
        if not role_ids:
            raise ValidationError("At least one role id is required")

        holders: dict[UUID, list[UUID]] = {}
        async with self._uow_factory() as uow:
            roles = await uow.roles.get_by_ids(role_ids, for_update=True)
            found = {r.id for r in roles}
            missing = [i for i in role_ids if i not in found]
            if missing:
                raise NotFound("Role", missing)
            for role in roles:
                if not role.in_trash:
                    continue
                await uow.roles.restore(role.id)
                role.deleted_at = None
                holders[role.id] = await uow.roles.list_user_ids(role.id)

        for role in roles:
            if role.id in holders:
                await self._coherency.role_changed(role.id, [role.name], holders[role.id])
        if holders:
            logger.info("Roles restored by %s: %d", actor.id, len(holders))
        return roles
