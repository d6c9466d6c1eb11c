"""Get role use case."""

from uuid import UUID

from rolegate.application.ports import PermissionChecker, RoleReader
from rolegate.application.use_cases.authorization import authorize
from rolegate.domain.entities import Role
from rolegate.domain.exceptions import NotFound
from rolegate.domain.value_objects import Actor, EntityName, PermissionAction


class GetRoleUseCase:
    """Get role by id (trashed roles included)."""

    def __init__(self, role_reader: RoleReader, permission_checker: PermissionChecker) -> None:
        self._roles = role_reader
        self._permission_checker = permission_checker

    async def execute(self, actor: Actor | None, role_id: UUID) -> Role:
        await authorize(self._permission_checker, actor, EntityName.ROLE, PermissionAction.READ)
        role = await self._roles.get(role_id)
        if role is None:
            raise NotFound("Role", [role_id])
        return role
