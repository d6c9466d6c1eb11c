"""Create role use case."""

import logging
from datetime import UTC, datetime
from uuid import uuid4

from rolegate.application.dto.role_dto import RoleCreateInput
from rolegate.application.ports import CacheCoherency, PermissionChecker
from rolegate.application.use_cases.authorization import authorize
from rolegate.application.use_cases.permission_records import build_records
from rolegate.domain.entities import Role, normalize_role_name
from rolegate.domain.exceptions import Conflict, ProtectedResource, ValidationError
from rolegate.domain.value_objects import Actor, EntityName, PermissionAction

logger = logging.getLogger(__name__)


class CreateRoleUseCase:
    """Create a role with its default permissions."""

    def __init__(
        self,
        unit_of_work_factory: type,
        permission_checker: PermissionChecker,
        cache_coherency: CacheCoherency,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._permission_checker = permission_checker
        self._coherency = cache_coherency

    async def execute(self, actor: Actor | None, data: RoleCreateInput) -> Role:
        """Create role. Name is stored uppercased and must be unique."""
        actor = await authorize(
            self._permission_checker, actor, EntityName.ROLE, PermissionAction.CREATE
        )
        name = normalize_role_name(data.name or "")
        if not name:
            raise ValidationError("Role name is required")
        if (
            data.system_permanent_delete_protection or data.system_permanent_update_protection
        ) and not actor.is_super_admin:
            raise ProtectedResource(
                "Only a super administrator can set permanent role protection"
            )

        async with self._uow_factory() as uow:
            if await uow.roles.name_taken(name):
                raise Conflict(f"Role already exists: {name}")
            role = Role(
                id=uuid4(),
                name=name,
                description=data.description,
                default_permissions=build_records(
                    data.default_permissions,
                    describe=lambda entity: f"{entity} permission for {name}",
                    created_by=actor.id,
                ),
                system_delete_protection=data.system_delete_protection,
                system_update_protection=data.system_update_protection,
                system_permanent_delete_protection=data.system_permanent_delete_protection,
                system_permanent_update_protection=data.system_permanent_update_protection,
                created_by=actor.id,
                created_at=datetime.now(UTC),
            )
            await uow.roles.create(role)

        await self._coherency.role_changed(role.id, [role.name], [])
        logger.info("Role %s created by %s", role.name, actor.id)
        return role
