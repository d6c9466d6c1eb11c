"""Build permission records from caller input."""

from collections.abc import Callable, Iterable
from datetime import UTC, datetime
from uuid import UUID, uuid4

from rolegate.application.dto.role_dto import PermissionInput
from rolegate.domain.entities import PermissionRecord
from rolegate.domain.value_objects import EntityName


def build_records(
    inputs: Iterable[PermissionInput],
    *,
    describe: Callable[[str], str],
    created_by: UUID | None = None,
) -> list[PermissionRecord]:
    """One record per entity (last input wins), canonical entity spelling."""
    now = datetime.now(UTC)
    folded: dict[str, PermissionRecord] = {}
    for item in inputs:
        entity = EntityName.parse(item.entity_name)
        folded[entity.value] = PermissionRecord(
            id=uuid4(),
            entity_name=entity.value,
            can_create=item.can_create,
            can_read=item.can_read,
            can_update=item.can_update,
            can_delete=item.can_delete,
            description=item.description or describe(entity.value),
            created_at=now,
            created_by=created_by,
        )
    return list(folded.values())


def uniform_records(
    granted: bool,
    *,
    describe: Callable[[str], str],
    created_by: UUID | None = None,
) -> list[PermissionRecord]:
    """One record per known entity with every flag set to granted."""
    now = datetime.now(UTC)
    return [
        PermissionRecord(
            id=uuid4(),
            entity_name=entity.value,
            can_create=granted,
            can_read=granted,
            can_update=granted,
            can_delete=granted,
            description=describe(entity.value),
            created_at=now,
            created_by=created_by,
        )
        for entity in EntityName
    ]
