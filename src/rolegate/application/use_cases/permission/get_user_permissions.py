"""Get personalized permissions use case."""

from uuid import UUID

from rolegate.application.ports import PermissionChecker
from rolegate.application.use_cases.authorization import authorize
from rolegate.domain.entities import PermissionRecord
from rolegate.domain.exceptions import AuthenticationRequired, NotFound
from rolegate.domain.value_objects import Actor, EntityName, PermissionAction


class GetUserPermissionsUseCase:
    """Raw personal overrides of a user, without role defaults."""

    def __init__(self, unit_of_work_factory: type, permission_checker: PermissionChecker) -> None:
        self._uow_factory = unit_of_work_factory
        self._permission_checker = permission_checker

    async def execute(
        self, actor: Actor | None, user_id: UUID | None = None
    ) -> list[PermissionRecord]:
        """Overrides of user_id, or of the actor itself when user_id is None.

        Reading one's own overrides needs no permission.
        """
        if actor is None:
            raise AuthenticationRequired()
        if user_id is None or user_id == actor.id:
            return await self._permission_checker.personalized_permissions(actor.id)

        await authorize(
            self._permission_checker, actor, EntityName.PERMISSION, PermissionAction.READ
        )
        records = await self._permission_checker.personalized_permissions(user_id)
        if not records:
            async with self._uow_factory() as uow:
                if await uow.users.get_by_id(user_id) is None:
                    raise NotFound("User", [user_id])
        return records
