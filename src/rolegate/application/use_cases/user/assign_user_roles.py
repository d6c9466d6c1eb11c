"""Assign roles to a user use case."""

import logging
from uuid import UUID

from rolegate.application.ports import CacheCoherency, PermissionChecker
from rolegate.application.use_cases.authorization import authorize
from rolegate.domain.entities import User, normalize_role_name
from rolegate.domain.exceptions import (
    NotFound,
    PermissionDenied,
    ProtectedResource,
    ValidationError,
)
from rolegate.domain.value_objects import SUPER_ADMIN_ROLE, Actor, EntityName, PermissionAction

logger = logging.getLogger(__name__)


class AssignUserRolesUseCase:
    """Replace the set of roles a user holds."""

    def __init__(
        self,
        unit_of_work_factory: type,
        permission_checker: PermissionChecker,
        cache_coherency: CacheCoherency,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._permission_checker = permission_checker
        self._coherency = cache_coherency

    async def execute(self, actor: Actor | None, user_id: UUID, role_names: list[str]) -> User:
        """Every name must resolve to an active role. The user must sign in again."""
        actor = await authorize(
            self._permission_checker, actor, EntityName.USER, PermissionAction.UPDATE
        )
        names = list(dict.fromkeys(normalize_role_name(n) for n in role_names if n.strip()))
        if not names:
            raise ValidationError("At least one role is required")
        if user_id == actor.id:
            raise PermissionDenied("You cannot change your own roles")
        if SUPER_ADMIN_ROLE in names and not actor.is_super_admin:
            raise ProtectedResource(f"Only a super administrator can grant {SUPER_ADMIN_ROLE}")

        async with self._uow_factory() as uow:
            target = await uow.users.get_by_id(user_id)
            if target is None:
                raise NotFound("User", [user_id])
            if target.is_super_admin:
                raise ProtectedResource("Roles of a super administrator cannot be changed")
            if not target.can_update_role and not actor.is_super_admin:
                raise ProtectedResource(f"Roles of {target.display_name} are locked")

            roles = await uow.roles.get_by_names(names)
            resolved = {normalize_role_name(r.name) for r in roles}
            missing = [n for n in names if n not in resolved]
            if missing:
                raise NotFound("Role", missing)
            await uow.users.set_roles(target.id, [r.id for r in roles])
            target.roles = [r.name for r in roles]
            target.role_ids = [r.id for r in roles]

        await self._coherency.user_roles_changed(target.id)
        logger.info("Roles of %s set to %s by %s", target.id, ", ".join(target.roles), actor.id)
        return target
