"""Role repository port."""

from typing import Protocol
from uuid import UUID

from rolegate.domain.entities import PermissionRecord, Role


class RoleRepository(Protocol):
    """Port for role persistence, including owned default permissions."""

    async def get_by_id(self, role_id: UUID, for_update: bool = False) -> Role | None:
        """Role by id; for_update locks the row until the unit of work ends."""
        ...

    async def get_by_ids(
        self, role_ids: list[UUID], for_update: bool = False
    ) -> list[Role]: ...

    async def get_by_name(self, name: str, include_deleted: bool = False) -> Role | None: ...

    async def get_by_names(self, names: list[str]) -> list[Role]: ...

    async def name_taken(self, name: str, exclude_id: UUID | None = None) -> bool: ...

    async def create(self, role: Role) -> Role: ...

    async def update(self, role: Role) -> None: ...

    async def replace_default_permissions(
        self, role_id: UUID, permissions: list[PermissionRecord]
    ) -> list[PermissionRecord]: ...

    async def soft_delete(self, role_id: UUID) -> None: ...

    async def restore(self, role_id: UUID) -> None: ...

    async def hard_delete(self, role_id: UUID) -> None: ...

    async def count_users(self, role_id: UUID) -> int: ...

    async def list_user_ids(self, role_id: UUID) -> list[UUID]: ...

    async def paginate(
        self,
        *,
        page: int,
        limit: int,
        search: str | None = None,
        sort_by: str = "createdAt",
        sort_order: str = "desc",
    ) -> tuple[list[Role], int]: ...
