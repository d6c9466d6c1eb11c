"""Permission checker port - RBAC authorization."""

from typing import Protocol
from uuid import UUID

from rolegate.domain.entities import PermissionRecord
from rolegate.domain.value_objects import Actor, PermissionAction


class PermissionChecker(Protocol):
    """Port for deciding whether an actor may perform an action on an entity."""

    async def check(self, actor: Actor, entity_name: str, action: PermissionAction) -> bool: ...

    async def personalized_permissions(self, user_id: UUID) -> list[PermissionRecord]: ...

    async def effective_permissions(self, actor: Actor) -> list[PermissionRecord]: ...
