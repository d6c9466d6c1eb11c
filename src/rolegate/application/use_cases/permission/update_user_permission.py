"""Replace a user's personalized permissions."""

import logging

from rolegate.application.dto.permission_dto import UserPermissionUpdateInput
from rolegate.application.ports import CacheCoherency, PermissionChecker
from rolegate.application.use_cases.authorization import authorize
from rolegate.application.use_cases.permission.guards import ensure_manageable
from rolegate.application.use_cases.permission_records import build_records, uniform_records
from rolegate.domain.entities import PermissionRecord
from rolegate.domain.exceptions import ValidationError
from rolegate.domain.value_objects import Actor, EntityName, PermissionAction

logger = logging.getLogger(__name__)


class UpdateUserPermissionUseCase:
    """Set the exact override set of a user."""

    def __init__(
        self,
        unit_of_work_factory: type,
        permission_checker: PermissionChecker,
        cache_coherency: CacheCoherency,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._permission_checker = permission_checker
        self._coherency = cache_coherency

    async def execute(
        self, actor: Actor | None, data: UserPermissionUpdateInput
    ) -> list[PermissionRecord]:
        """Upsert one record per entity, then drop entities not in the new set."""
        actor = await authorize(
            self._permission_checker, actor, EntityName.PERMISSION, PermissionAction.UPDATE
        )
        if data.access_all and data.denied_all:
            raise ValidationError("accessAll and deniedAll cannot both be set")
        if not (data.access_all or data.denied_all or data.permissions):
            raise ValidationError("No permissions to apply")

        async with self._uow_factory() as uow:
            target = ensure_manageable(
                actor, await uow.users.get_by_id(data.user_id), data.user_id
            )

            def describe(entity: str) -> str:
                return f"{entity} permission for {target.display_name}"

            if data.access_all or data.denied_all:
                records = uniform_records(
                    data.access_all, describe=describe, created_by=actor.id
                )
            else:
                records = build_records(data.permissions, describe=describe, created_by=actor.id)
            saved = await uow.permissions.upsert_many(target.id, records)
            await uow.permissions.delete_for_user(
                target.id, keep_entity_names={r.entity_name for r in saved}
            )

        await self._coherency.user_permissions_changed(target.id)
        logger.info(
            "Personal permissions of %s replaced by %s (%d entities)",
            target.id,
            actor.id,
            len(saved),
        )
        return saved
