"""Update role use case."""

import logging
from uuid import UUID

from rolegate.application.dto.role_dto import RoleUpdateInput
from rolegate.application.ports import CacheCoherency, PermissionChecker
from rolegate.application.use_cases.authorization import authorize
from rolegate.application.use_cases.permission_records import build_records
from rolegate.domain.entities import Role, normalize_role_name
from rolegate.domain.exceptions import Conflict, NotFound, ProtectedResource, ValidationError
from rolegate.domain.permission_merge import fold_role_permissions
from rolegate.domain.value_objects import Actor, EntityName, PermissionAction

logger = logging.getLogger(__name__)

_PERMANENT_FLAGS = ("system_permanent_delete_protection", "system_permanent_update_protection")
_PROTECTION_FLAGS = ("system_delete_protection", "system_update_protection", *_PERMANENT_FLAGS)


class UpdateRoleUseCase:
    """Update role info, protection flags and default permissions."""

    def __init__(
        self,
        unit_of_work_factory: type,
        permission_checker: PermissionChecker,
        cache_coherency: CacheCoherency,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._permission_checker = permission_checker
        self._coherency = cache_coherency

    async def execute(self, actor: Actor | None, role_id: UUID, data: RoleUpdateInput) -> Role:
        """Apply data to role; every holder must re-authenticate afterwards.

        Incoming default permissions are folded into the existing ones by
        entity name, so entities not mentioned keep their rights.
        """
        actor = await authorize(
            self._permission_checker, actor, EntityName.ROLE, PermissionAction.UPDATE
        )

        async with self._uow_factory() as uow:
            role = await uow.roles.get_by_id(role_id, for_update=True)
            if role is None:
                raise NotFound("Role", [role_id])
            if role.in_trash:
                raise ProtectedResource(f"Role {role.name} is in the trash and cannot be updated")
            if role.system_permanent_update_protection:
                raise ProtectedResource(f"Role {role.name} is permanently protected from updates")

            changes = {
                flag: getattr(data, flag)
                for flag in _PROTECTION_FLAGS
                if getattr(data, flag) is not None and getattr(data, flag) != getattr(role, flag)
            }
            if any(getattr(role, flag) and flag in changes for flag in _PERMANENT_FLAGS):
                raise ProtectedResource("Permanent role protection cannot be removed")

            new_name = role.name
            if data.name is not None:
                new_name = normalize_role_name(data.name)
                if not new_name:
                    raise ValidationError("Role name cannot be empty")
            renamed = new_name != role.name

            if role.is_reserved and (renamed or changes):
                raise ProtectedResource(
                    f"{role.name} is a system role and cannot be renamed or re-protected"
                )
            if changes and not actor.is_super_admin:
                raise ProtectedResource(
                    "Only a super administrator can change role protection"
                )
            if role.system_update_protection and not actor.is_super_admin:
                raise ProtectedResource(
                    f"Role {role.name} is protected; only a super administrator can update it"
                )
            if renamed and await uow.roles.name_taken(new_name, exclude_id=role.id):
                raise Conflict(f"Role already exists: {new_name}")

            old_name = role.name
            role.name = new_name
            if data.description is not None:
                role.description = data.description
            for flag, value in changes.items():
                setattr(role, flag, value)
            await uow.roles.update(role)

            if data.default_permissions is not None:
                incoming = build_records(
                    data.default_permissions,
                    describe=lambda entity: f"{entity} permission for {new_name}",
                    created_by=actor.id,
                )
                role.default_permissions = await uow.roles.replace_default_permissions(
                    role.id, fold_role_permissions(role.default_permissions, incoming)
                )
            holders = await uow.roles.list_user_ids(role.id)

        await self._coherency.role_changed(role.id, [old_name, role.name], holders)
        logger.info("Role %s updated by %s", role.name, actor.id)
        return role
