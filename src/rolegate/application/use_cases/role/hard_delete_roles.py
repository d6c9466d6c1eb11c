"""Permanently delete trashed roles use case."""

import logging
from uuid import UUID

from rolegate.application.ports import CacheCoherency, PermissionChecker
from rolegate.application.use_cases.authorization import authorize
from rolegate.application.use_cases.role.guards import ensure_deletable
from rolegate.domain.exceptions import HasDependents, NotFound, NotInTrash, ValidationError
from rolegate.domain.value_objects import Actor, EntityName, PermissionAction

logger = logging.getLogger(__name__)


class HardDeleteRolesUseCase:
    """Delete trashed, unassigned roles and their default permissions."""

    def __init__(
        self,
        unit_of_work_factory: type,
        permission_checker: PermissionChecker,
        cache_coherency: CacheCoherency,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._permission_checker = permission_checker
        self._coherency = cache_coherency

    async def execute(self, actor: Actor | None, role_ids: list[UUID]) -> list[UUID]:
        """All ids are validated before anything is deleted; all or nothing."""
        actor = await authorize(
            self._permission_checker, actor, EntityName.ROLE, PermissionAction.DELETE
        )
        role_ids = list(dict.fromkeys(role_ids))
        if not role_ids:
            raise ValidationError("At least one role id is required")

        async with self._uow_factory() as uow:
            roles = await uow.roles.get_by_ids(role_ids, for_update=True)
            found = {r.id for r in roles}
            missing = [i for i in role_ids if i not in found]
            if missing:
                raise NotFound("Role", missing)
            active = [r.id for r in roles if not r.in_trash]
            if active:
                raise NotInTrash("Role", active)
            for role in roles:
                ensure_deletable(role, actor)
            in_use = [r.id for r in roles if await uow.roles.count_users(r.id) > 0]
            if in_use:
                raise HasDependents("Role", in_use)

            for role in roles:
                await uow.roles.hard_delete(role.id)

        for role in roles:
            await self._coherency.role_changed(role.id, [role.name], [])
        logger.info("Roles deleted by %s: %s", actor.id, ", ".join(r.name for r in roles))
        return [r.id for r in roles]
