"""Revoke personalized permissions use case."""

import logging
from uuid import UUID

from rolegate.application.ports import CacheCoherency, PermissionChecker
from rolegate.application.use_cases.authorization import authorize
from rolegate.application.use_cases.permission.guards import ensure_manageable
from rolegate.domain.value_objects import Actor, EntityName, PermissionAction

logger = logging.getLogger(__name__)


class RevokeUserPermissionsUseCase:
    """Delete every override of a user; the user falls back to role defaults."""

    def __init__(
        self,
        unit_of_work_factory: type,
        permission_checker: PermissionChecker,
        cache_coherency: CacheCoherency,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._permission_checker = permission_checker
        self._coherency = cache_coherency

    async def execute(self, actor: Actor | None, user_id: UUID) -> None:
        actor = await authorize(
            self._permission_checker, actor, EntityName.PERMISSION, PermissionAction.DELETE
        )
        async with self._uow_factory() as uow:
            target = ensure_manageable(actor, await uow.users.get_by_id(user_id), user_id)
            await uow.permissions.delete_for_user(target.id)

        await self._coherency.user_permissions_changed(target.id)
        logger.info("Personal permissions of %s revoked by %s", target.id, actor.id)
