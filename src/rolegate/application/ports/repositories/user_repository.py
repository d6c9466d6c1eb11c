"""User repository port."""

from typing import Protocol
from uuid import UUID

from rolegate.domain.entities import User


class UserRepository(Protocol):
    """Port for user persistence (role membership only)."""

    async def get_by_id(self, user_id: UUID) -> User | None: ...

    async def is_username_available(
        self, username: str, exclude_user_id: UUID | None = None
    ) -> bool: ...

    async def set_roles(self, user_id: UUID, role_ids: list[UUID]) -> None: ...
