"""Personalized permission repository port."""

from typing import Protocol
from uuid import UUID

from rolegate.domain.entities import PermissionRecord


class PermissionRepository(Protocol):
    """Port for per-user permission overrides, unique per (user, entity)."""

    async def list_by_user(self, user_id: UUID) -> list[PermissionRecord]: ...

    async def upsert_many(
        self, user_id: UUID, permissions: list[PermissionRecord]
    ) -> list[PermissionRecord]: ...

    async def delete_for_user(
        self, user_id: UUID, keep_entity_names: set[str] | None = None
    ) -> None: ...
