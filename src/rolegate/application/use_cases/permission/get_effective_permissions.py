"""Effective permissions of the calling actor."""

from rolegate.application.ports import PermissionChecker
from rolegate.domain.entities import PermissionRecord
from rolegate.domain.exceptions import AuthenticationRequired
from rolegate.domain.value_objects import Actor, EntityName, PermissionAction


class GetEffectivePermissionsUseCase:
    """Merged view: role defaults OR-merged, personal overrides on top."""

    def __init__(self, permission_checker: PermissionChecker) -> None:
        self._permission_checker = permission_checker

    async def execute(self, actor: Actor | None) -> list[PermissionRecord]:
        if actor is None:
            raise AuthenticationRequired()
        return await self._permission_checker.effective_permissions(actor)


class CheckPermissionUseCase:
    """Point query: may the actor perform action on entity?"""

    def __init__(self, permission_checker: PermissionChecker) -> None:
        self._permission_checker = permission_checker

    async def execute(self, actor: Actor | None, entity: str, action: str) -> bool:
        if actor is None:
            raise AuthenticationRequired()
        return await self._permission_checker.check(
            actor, EntityName.parse(entity), PermissionAction.parse(action)
        )
