"""Role reader port - cached role projections."""

from typing import Protocol
from uuid import UUID

from rolegate.domain.entities import Role


class RoleReader(Protocol):
    """Read side for roles; implementations may serve from a cache."""

    async def get(self, role_id: UUID) -> Role | None: ...

    async def page(
        self,
        *,
        page: int,
        limit: int,
        search: str | None,
        sort_by: str,
        sort_order: str,
    ) -> tuple[list[Role], int]: ...
