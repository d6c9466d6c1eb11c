"""Cache coherency port - evicts projections after writes."""

from typing import Protocol
from uuid import UUID


class CacheCoherency(Protocol):
    """Port called by use cases once a mutation has been committed."""

    async def role_changed(
        self, role_id: UUID, role_names: list[str], holder_ids: list[UUID]
    ) -> None: ...

    async def role_listing_changed(self) -> None: ...

    async def user_permissions_changed(self, user_id: UUID) -> None: ...

    async def user_roles_changed(self, user_id: UUID) -> None: ...
